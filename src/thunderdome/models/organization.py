"""Organization, department and team models."""

from uuid import UUID

from sqlalchemy import ForeignKey, String, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from thunderdome.models.base import BaseModel

ROLE_DEFAULT = text("'MEMBER'")


class Organization(BaseModel):
    """Top level of the tenancy hierarchy."""

    __tablename__ = "organizations"

    name: Mapped[str] = mapped_column(String(256), nullable=False)

    # Relationships
    departments = relationship(
        "Department", back_populates="organization", cascade="all, delete-orphan"
    )
    users = relationship("OrganizationUser", cascade="all, delete-orphan")


class OrganizationUser(BaseModel):
    """A user's membership in an organization."""

    __tablename__ = "organization_users"
    __table_args__ = (UniqueConstraint("organization_id", "user_id"),)

    organization_id: Mapped[UUID] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role: Mapped[str] = mapped_column(String(16), nullable=False, server_default=ROLE_DEFAULT)


class Department(BaseModel):
    """A department inside an organization."""

    __tablename__ = "departments"

    organization_id: Mapped[UUID] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(256), nullable=False)

    # Relationships
    organization = relationship("Organization", back_populates="departments")
    teams = relationship("Team", cascade="all, delete-orphan")
    users = relationship("DepartmentUser", cascade="all, delete-orphan")


class DepartmentUser(BaseModel):
    """A user's membership in a department."""

    __tablename__ = "department_users"
    __table_args__ = (UniqueConstraint("department_id", "user_id"),)

    department_id: Mapped[UUID] = mapped_column(
        ForeignKey("departments.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role: Mapped[str] = mapped_column(String(16), nullable=False, server_default=ROLE_DEFAULT)


class Team(BaseModel):
    """A team owned by an organization or one of its departments."""

    __tablename__ = "teams"

    name: Mapped[str] = mapped_column(String(256), nullable=False)
    organization_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"), nullable=True, index=True
    )
    department_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("departments.id", ondelete="CASCADE"), nullable=True, index=True
    )

    # Relationships
    users = relationship("TeamUser", cascade="all, delete-orphan")


class TeamUser(BaseModel):
    """A user's membership in a team."""

    __tablename__ = "team_users"
    __table_args__ = (UniqueConstraint("team_id", "user_id"),)

    team_id: Mapped[UUID] = mapped_column(
        ForeignKey("teams.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role: Mapped[str] = mapped_column(String(16), nullable=False, server_default=ROLE_DEFAULT)
