"""
Role x module capability grid
"""

from sqlmodel import Field, SQLModel
from sqlalchemy import UniqueConstraint
from datetime import datetime
from typing import Optional


class Permission(SQLModel, table=True):
    """Create/view/edit/delete flags for one role on one module"""

    __tablename__ = "permissions"
    __table_args__ = (
        UniqueConstraint("role_id", "module_id", name="uq_permission_role_module"),
    )

    permission_id: Optional[int] = Field(default=None, primary_key=True)
    role_id: int = Field(foreign_key="roles.role_id", index=True)
    module_id: int = Field(foreign_key="modules.module_id", index=True)

    can_create: bool = Field(default=False)
    can_view: bool = Field(default=False)
    can_edit: bool = Field(default=False)
    can_delete: bool = Field(default=False)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None
