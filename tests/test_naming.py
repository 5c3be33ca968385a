"""
Unit tests for tenant database naming
"""

import pytest

from netcafe.core.exceptions import InvalidSubdomain
from netcafe.tenancy.naming import (
    DATABASE_NAME_PREFIX,
    database_name_for,
    is_safe_identifier,
    normalize_subdomain,
    subdomain_from_database_name,
)


def test_known_encoding():
    assert database_name_for("acme") == "tenant_mfrw2zi"


def test_normalization_is_applied_before_encoding():
    assert database_name_for("  ACME ") == database_name_for("acme")
    assert normalize_subdomain(" Acme-Grill ") == "acme-grill"


def test_distinct_subdomains_get_distinct_names():
    subdomains = ["acme", "acme1", "acme-1", "acm", "a", "b", "ab", "ba", "a-b", "x" * 30]
    names = {database_name_for(s) for s in subdomains}
    assert len(names) == len(subdomains)


def test_names_are_safe_identifiers_and_reversible():
    for subdomain in ["acme", "0", "my-cafe-42", "z" * 30]:
        name = database_name_for(subdomain)
        assert name.startswith(DATABASE_NAME_PREFIX)
        assert is_safe_identifier(name)
        assert len(name) <= 63
        assert subdomain_from_database_name(name) == subdomain


@pytest.mark.parametrize("subdomain", ["", "   ", "-acme", "acme-", "ac me", "acme.com", "café", "x" * 31])
def test_invalid_subdomains_rejected(subdomain):
    with pytest.raises(InvalidSubdomain):
        database_name_for(subdomain)


def test_inverse_rejects_foreign_names():
    with pytest.raises(ValueError):
        subdomain_from_database_name("postgres")


def test_is_safe_identifier():
    assert is_safe_identifier("tenant_mfrw2zi")
    assert not is_safe_identifier('tenant"; DROP DATABASE x; --')
    assert not is_safe_identifier("")
