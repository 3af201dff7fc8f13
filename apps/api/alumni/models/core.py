"""Core models: User (identity), Batch, Profile, BatchRole, CentralAdmin."""

import uuid

from sqlalchemy import ForeignKey, Index, Integer, String, Text, Uuid, false, true
from sqlalchemy.orm import Mapped, mapped_column

from alumni.core.database import Base
from alumni.models.base import BaseModel, CreatedAtMixin, TimestampedModel
from alumni.models.enums import BatchRoleType, ProfileStatus


class User(BaseModel):
    """Identity row synced from Clerk. Holds the email; the profile holds everything else."""

    __tablename__ = "users"
    __table_args__ = (
        Index("ix_users_email", "email"),
        Index("ix_users_external_auth_id", "external_auth_id", unique=True),
    )

    external_auth_id: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    is_active: Mapped[bool] = mapped_column(default=True, server_default=true(), nullable=False)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email!r})>"


class Batch(CreatedAtMixin, Base):
    __tablename__ = "batches"

    batch_year: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)

    def __repr__(self) -> str:
        return f"<Batch(batch_year={self.batch_year}, name={self.name!r})>"


class Profile(BaseModel):
    """One profile per identity; the primary key is the identity id."""

    __tablename__ = "profiles"
    __table_args__ = (
        Index("ix_profiles_status_full_name", "status", "full_name"),
        Index("ix_profiles_batch_year", "batch_year"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    batch_year: Mapped[int] = mapped_column(
        ForeignKey("batches.batch_year"),
        nullable=False,
    )
    location_state: Mapped[str | None] = mapped_column(String(255))
    industry: Mapped[str | None] = mapped_column(String(255))
    job_title: Mapped[str | None] = mapped_column(String(255))
    phone: Mapped[str | None] = mapped_column(String(50))
    email_public: Mapped[bool] = mapped_column(default=False, server_default=false(), nullable=False)
    phone_public: Mapped[bool] = mapped_column(default=False, server_default=false(), nullable=False)
    status: Mapped[ProfileStatus] = mapped_column(nullable=False, default=ProfileStatus.PENDING)

    @property
    def is_approved(self) -> bool:
        return self.status == ProfileStatus.APPROVED

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, full_name={self.full_name!r}, status={self.status.value})>"


class BatchRole(TimestampedModel):
    __tablename__ = "batch_roles"
    __table_args__ = (
        Index("uq_batch_roles_user_batch", "user_id", "batch_year", unique=True),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    batch_year: Mapped[int] = mapped_column(
        ForeignKey("batches.batch_year", ondelete="CASCADE"),
        nullable=False,
    )
    role: Mapped[BatchRoleType] = mapped_column(nullable=False, default=BatchRoleType.BATCH_ADMIN)


class CentralAdmin(TimestampedModel):
    __tablename__ = "central_admins"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
