"""
Test data builders
"""

from netcafe.tenancy.provisioner import SignupData

ADMIN_HEADERS = {"X-Admin-Key": "test-admin-key"}


def make_signup(subdomain: str = "acme", email: str = "a@acme.com", **overrides) -> SignupData:
    data = {
        "restaurant_name": f"{subdomain.title()} Bistro",
        "subdomain": subdomain,
        "email": email,
        "password": "x",
    }
    data.update(overrides)
    return SignupData(**data)
