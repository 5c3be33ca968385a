"""
Pydantic schemas for authentication tokens
"""

from pydantic import BaseModel
from typing import Optional


class TokenResponse(BaseModel):
    """Token response"""
    access_token: str
    token_type: str = "bearer"
    scope: str
    tenant: str
    user_id: Optional[int] = None
    role_id: Optional[int] = None
