"""SQLAlchemy ORM model for the tenants table.

Stores tenant records and their lifecycle status. A record is removed
outright when deprovisioning completes; there is no soft delete.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class TenantModel(Base, TimestampMixin):
    """ORM model for tenants table.

    Note: Tenant names are unique because hostnames are derived from them.
    """

    __tablename__ = "tenants"

    id: Mapped[str] = mapped_column(String(56), primary_key=True)
    name: Mapped[str] = mapped_column(String(63), nullable=False, unique=True)
    kind: Mapped[str] = mapped_column(String(32), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    url: Mapped[str | None] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<TenantModel(id={self.id}, name={self.name}, status={self.status})>"
