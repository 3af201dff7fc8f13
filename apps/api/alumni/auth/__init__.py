"""Auth package: dependencies, authorization predicates, Clerk integration."""

from alumni.auth.dependencies import (
    get_current_identity,
    get_current_user,
    require_approved,
    require_central_admin,
    require_profile,
)
from alumni.auth.policy import (
    can_view_contact,
    get_batch_roles,
    is_batch_admin,
    is_central_admin,
    resolve_contact,
)

__all__ = [
    "can_view_contact",
    "get_batch_roles",
    "get_current_identity",
    "get_current_user",
    "is_batch_admin",
    "is_central_admin",
    "require_approved",
    "require_central_admin",
    "require_profile",
    "resolve_contact",
]
