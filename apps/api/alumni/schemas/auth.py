"""Auth schemas: CurrentUser request context, /auth/me and callback payloads."""

import uuid

from pydantic import BaseModel, Field

from alumni.models.enums import ProfileStatus


class Identity(BaseModel):
    """Verified identity from the Clerk token, before any profile lookup."""

    user_id: uuid.UUID
    email: str
    external_auth_id: str  # Clerk user ID (e.g. "user_2x...")


class CurrentUser(Identity):
    """Request context: identity plus the role and profile facts every check needs.

    Built once per request by get_current_user and passed explicitly into
    services, so authorization never reads ambient session state.
    """

    profile_status: ProfileStatus | None = None
    batch_year: int | None = None
    is_central_admin: bool = False
    admin_batch_years: list[int] = Field(default_factory=list)

    @property
    def has_profile(self) -> bool:
        return self.profile_status is not None

    @property
    def is_approved(self) -> bool:
        return self.profile_status == ProfileStatus.APPROVED

    @property
    def is_batch_admin(self) -> bool:
        return bool(self.admin_batch_years)

    def can_manage_batch(self, batch_year: int | None) -> bool:
        """Central admins manage everything; batch admins only their batches, never global items."""
        if self.is_central_admin:
            return True
        return batch_year is not None and batch_year in self.admin_batch_years


class MeResponse(BaseModel):
    user_id: uuid.UUID
    email: str
    has_profile: bool
    full_name: str | None = None
    batch_year: int | None = None
    profile_status: ProfileStatus | None = None
    pending_approval: bool
    is_central_admin: bool
    is_batch_admin: bool
    admin_batch_years: list[int]


class CallbackResponse(BaseModel):
    redirect_to: str
    session: dict | None = None
