"""
Deterministic tenant database naming

A tenant database name is a fixed prefix followed by the lower-case,
unpadded base32 encoding of the normalized subdomain. The encoding is
reversible, so distinct subdomains never share a database, and its alphabet
(a-z, 2-7) is a valid unquoted identifier on every supported engine.
"""

import base64
import re

from netcafe.core.exceptions import InvalidSubdomain

DATABASE_NAME_PREFIX = "tenant_"
SUBDOMAIN_MAX_LENGTH = 30

_SUBDOMAIN_RE = re.compile(r"^[a-z0-9](?:[a-z0-9-]{0,28}[a-z0-9])?$")
_DATABASE_NAME_RE = re.compile(r"^[a-z0-9_]{1,63}$")


def normalize_subdomain(subdomain: str) -> str:
    """Lower-case and trim a subdomain, rejecting anything not usable as a DNS label"""
    if subdomain is None:
        raise InvalidSubdomain("", "subdomain is required")
    normalized = subdomain.strip().lower()
    if not normalized:
        raise InvalidSubdomain(subdomain, "subdomain is required")
    if len(normalized) > SUBDOMAIN_MAX_LENGTH:
        raise InvalidSubdomain(subdomain, f"at most {SUBDOMAIN_MAX_LENGTH} characters")
    if not _SUBDOMAIN_RE.match(normalized):
        raise InvalidSubdomain(
            subdomain,
            "use letters, digits and inner hyphens only",
        )
    return normalized


def database_name_for(subdomain: str) -> str:
    """Derive the tenant database name for a subdomain"""
    normalized = normalize_subdomain(subdomain)
    encoded = base64.b32encode(normalized.encode("utf-8")).decode("ascii")
    return DATABASE_NAME_PREFIX + encoded.rstrip("=").lower()


def subdomain_from_database_name(database_name: str) -> str:
    """Inverse of database_name_for"""
    if not database_name.startswith(DATABASE_NAME_PREFIX):
        raise ValueError(f"Not a tenant database name: {database_name}")
    encoded = database_name[len(DATABASE_NAME_PREFIX):].upper()
    padding = "=" * (-len(encoded) % 8)
    return base64.b32decode(encoded + padding).decode("utf-8")


def is_safe_identifier(database_name: str) -> bool:
    """True if the name can be interpolated into DDL without quoting concerns"""
    return bool(_DATABASE_NAME_RE.match(database_name))
