"""Database enums for all domain models."""

import enum


class ProfileStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    SUSPENDED = "suspended"


class ConnectionStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    BLOCKED = "blocked"  # reserved: no transition leads here yet


class RsvpStatus(str, enum.Enum):
    YES = "yes"
    NO = "no"
    MAYBE = "maybe"
    WAITLIST = "waitlist"


class BatchRoleType(str, enum.Enum):
    BATCH_ADMIN = "batch_admin"
