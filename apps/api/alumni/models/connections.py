"""Member-to-member connection requests."""

import uuid

from sqlalchemy import CheckConstraint, ForeignKey, Index, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from alumni.models.base import BaseModel
from alumni.models.enums import ConnectionStatus

# Enum columns store member names, so the predicate compares against "REJECTED".
_ACTIVE_PAIR = text("status <> 'REJECTED'")


def pair_key(a: uuid.UUID, b: uuid.UUID) -> tuple[uuid.UUID, uuid.UUID]:
    """Order two profile ids so (a, b) and (b, a) map to the same key."""
    return (a, b) if str(a) <= str(b) else (b, a)


class Connection(BaseModel):
    __tablename__ = "connections"
    __table_args__ = (
        CheckConstraint("requester_id <> receiver_id", name="ck_connections_not_self"),
        CheckConstraint("user_low_id < user_high_id", name="ck_connections_pair_ordered"),
        Index(
            "uq_connections_active_pair",
            "user_low_id",
            "user_high_id",
            unique=True,
            postgresql_where=_ACTIVE_PAIR,
            sqlite_where=_ACTIVE_PAIR,
        ),
        Index("ix_connections_receiver_status", "receiver_id", "status"),
        Index("ix_connections_requester_status", "requester_id", "status"),
    )

    requester_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    receiver_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    # Canonical unordered pair, filled from pair_key() on insert
    user_low_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    user_high_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    status: Mapped[ConnectionStatus] = mapped_column(
        nullable=False, default=ConnectionStatus.PENDING
    )

    def other_party(self, user_id: uuid.UUID) -> uuid.UUID:
        return self.receiver_id if self.requester_id == user_id else self.requester_id
