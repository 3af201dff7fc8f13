"""Declarative bases shared by the alumni models.

Every row has a created_at stamp. Rows members edit after creation
(identities, profiles, connections, events, RSVPs) also track updated_at;
grant rows (batch roles, central admins) never change once written.
"""

import uuid
from datetime import datetime

from sqlalchemy import Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from alumni.core.database import Base


class CreatedAtMixin:
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)


class UuidPkMixin:
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.id})>"


class BaseModel(UuidPkMixin, CreatedAtMixin, Base):
    """Editable row: UUID pk, created_at and updated_at."""

    __abstract__ = True

    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class TimestampedModel(UuidPkMixin, CreatedAtMixin, Base):
    """Write-once grant row: UUID pk and created_at."""

    __abstract__ = True
