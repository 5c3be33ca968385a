"""
Error taxonomy for tenant routing, provisioning and the master directory

Every error carries a stable code so clients can branch on it instead of
parsing messages.
"""

from enum import Enum
from typing import Any, Optional


class ErrorCode(str, Enum):
    """Stable, client-visible error codes"""
    CONNECTION_ERROR = "connection_error"
    DATABASE_CREATION_ERROR = "database_creation_error"
    SCHEMA_ERROR = "schema_error"
    DUPLICATE_TENANT = "duplicate_tenant"
    INVALID_SUBDOMAIN = "invalid_subdomain"
    TENANT_NOT_FOUND = "tenant_not_found"
    TENANT_SUSPENDED = "tenant_suspended"
    PROVISIONING_INCOMPLETE = "provisioning_incomplete"
    PLAN_NOT_FOUND = "plan_not_found"
    PLAN_IN_USE = "plan_in_use"
    DUPLICATE_PLAN = "duplicate_plan"
    INVALID_CREDENTIALS = "invalid_credentials"
    PERMISSION_DENIED = "permission_denied"
    INTERNAL_ERROR = "internal_error"


class NetCafeError(Exception):
    """Base exception for all domain errors"""

    status_code: int = 500
    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class DatabaseConnectionError(NetCafeError):
    """Database engine unreachable or authentication to it failed"""

    status_code = 503
    code = ErrorCode.CONNECTION_ERROR

    def __init__(self, database_name: Optional[str], reason: str) -> None:
        target = database_name or "<admin>"
        super().__init__(
            message=f"Could not connect to database '{target}': {reason}",
            details={"database_name": database_name},
        )
        self.database_name = database_name


class DatabaseCreationError(NetCafeError):
    """The engine rejected the create-database statement"""

    status_code = 500
    code = ErrorCode.DATABASE_CREATION_ERROR

    def __init__(self, database_name: str, reason: str) -> None:
        super().__init__(
            message=f"Could not create database '{database_name}': {reason}",
            details={"database_name": database_name},
        )
        self.database_name = database_name


class SchemaError(NetCafeError):
    """Schema registration failed; the schema as a whole is unusable"""

    status_code = 500
    code = ErrorCode.SCHEMA_ERROR

    def __init__(self, reason: str, database_name: Optional[str] = None) -> None:
        super().__init__(
            message=f"Schema registration failed: {reason}",
            details={"database_name": database_name},
        )
        self.database_name = database_name


class DuplicateTenant(NetCafeError):
    """Subdomain (or admin email) already registered"""

    status_code = 409
    code = ErrorCode.DUPLICATE_TENANT

    def __init__(self, field: str, value: str) -> None:
        super().__init__(
            message=f"A tenant with this {field} is already registered: {value}",
            details={"field": field, "value": value},
        )
        self.field = field
        self.value = value


class InvalidSubdomain(NetCafeError):
    """Subdomain cannot be used as a routing key"""

    status_code = 422
    code = ErrorCode.INVALID_SUBDOMAIN

    def __init__(self, subdomain: str, reason: str) -> None:
        super().__init__(
            message=f"Invalid subdomain '{subdomain}': {reason}",
            details={"subdomain": subdomain},
        )


class TenantNotFound(NetCafeError):
    """No (non-deleted) tenant matches the identity key"""

    status_code = 404
    code = ErrorCode.TENANT_NOT_FOUND

    def __init__(self, key: str) -> None:
        super().__init__(message="No such account", details={"key": key})
        self.key = key


class TenantSuspended(NetCafeError):
    """Tenant exists but its active flag is off"""

    status_code = 403
    code = ErrorCode.TENANT_SUSPENDED

    def __init__(self, key: str) -> None:
        super().__init__(
            message="Tenant account is suspended. Please contact support.",
            details={"key": key},
        )
        self.key = key


class ProvisioningIncomplete(NetCafeError):
    """Directory record exists but its tenant database is not usable"""

    status_code = 500
    code = ErrorCode.PROVISIONING_INCOMPLETE

    def __init__(self, tenant_id: Optional[int], database_name: str, stage: str) -> None:
        super().__init__(
            message=f"Provisioning of '{database_name}' did not complete (stage: {stage})",
            details={"tenant_id": tenant_id, "database_name": database_name, "stage": stage},
        )
        self.tenant_id = tenant_id
        self.database_name = database_name
        self.stage = stage


class PlanNotFound(NetCafeError):
    """Subscription plan does not exist"""

    status_code = 404
    code = ErrorCode.PLAN_NOT_FOUND

    def __init__(self, plan_id: int) -> None:
        super().__init__(message="Subscription plan not found", details={"plan_id": plan_id})
        self.plan_id = plan_id


class PlanInUse(NetCafeError):
    """Plan still referenced by tenant records"""

    status_code = 409
    code = ErrorCode.PLAN_IN_USE

    def __init__(self, plan_id: int, tenant_count: int) -> None:
        super().__init__(
            message=(
                f"Cannot delete this plan. {tenant_count} tenant(s) are subscribed to it. "
                "Migrate them to another plan first."
            ),
            details={"plan_id": plan_id, "tenant_count": tenant_count},
        )
        self.plan_id = plan_id
        self.tenant_count = tenant_count


class DuplicatePlan(NetCafeError):
    """A plan with the same name already exists"""

    status_code = 409
    code = ErrorCode.DUPLICATE_PLAN

    def __init__(self, name: str) -> None:
        super().__init__(
            message=f"A subscription plan named '{name}' already exists",
            details={"name": name},
        )


class InvalidCredentials(NetCafeError):
    """Unknown email or wrong password"""

    status_code = 401
    code = ErrorCode.INVALID_CREDENTIALS

    def __init__(self) -> None:
        super().__init__(message="Invalid email or password")


class PermissionDenied(NetCafeError):
    """Role lacks the capability on a module"""

    status_code = 403
    code = ErrorCode.PERMISSION_DENIED

    def __init__(self, module: str, action: str) -> None:
        super().__init__(
            message=f"Permission required: {module}:{action}",
            details={"module": module, "action": action},
        )
