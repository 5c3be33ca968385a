"""
Tenant routing and provisioning core

Master directory lookups, per-tenant database creation, schema registration
and the cached, single-flight tenant connection resolver.
"""
