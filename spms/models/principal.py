"""
Student and Staff principal models.

Both kinds share the same shape but live in separate tables, so an email
is unique only within its own kind.
"""

from datetime import datetime, timezone
from typing import ClassVar, List, TYPE_CHECKING

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from spms.auth.password import hash_password, verify_password
from spms.core.database import Base, UTCDateTime
from spms.models.role import Role

if TYPE_CHECKING:
    from spms.models.project import ProjectGroupMember


class PrincipalMixin:
    """Columns and credential helpers common to every principal table."""

    role: ClassVar[Role]

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    phone: Mapped[str] = mapped_column(String(32), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc)
    )

    def set_password(self, password: str) -> None:
        self.password_hash = hash_password(password)

    def verify_password(self, password: str) -> bool:
        return verify_password(password, self.password_hash)

    def summary(self) -> dict:
        """The public identity returned by login and signup."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
        }


class Student(PrincipalMixin, Base):
    __tablename__ = "students"

    role = Role.STUDENT

    memberships: Mapped[List["ProjectGroupMember"]] = relationship(
        "ProjectGroupMember",
        back_populates="student",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Student {self.email}>"


class Staff(PrincipalMixin, Base):
    __tablename__ = "staff"

    role = Role.STAFF

    def __repr__(self) -> str:
        return f"<Staff {self.email}>"


# Role dispatch: every role-dependent lookup goes through this table.
PRINCIPAL_MODELS: dict[Role, type[PrincipalMixin]] = {
    Role.STUDENT: Student,
    Role.STAFF: Staff,
}


def principal_model(role: Role) -> type[PrincipalMixin]:
    return PRINCIPAL_MODELS[Role(role)]
