#!/usr/bin/env python3
"""Seed script for the alumni API.

Creates the graduation batches members choose from during onboarding and
bootstraps central administrators. Safe to re-run: existing rows are
skipped.

Usage:
    cd apps/api && python ../../scripts/seed.py --from-year 1990 --to-year 2026
    cd apps/api && python ../../scripts/seed.py --admin-email head@alumni.org
    cd apps/api && python ../../scripts/seed.py --dry-run

An admin email must already belong to a signed-up identity (the Clerk
webhook creates the row on first sign-up).
"""

from __future__ import annotations

import argparse
import os
import sys
from datetime import date

# Allow running from the repo root or from apps/api/
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "apps", "api"))

from alumni.core.config import settings
from alumni.models.core import Batch, CentralAdmin, Profile, User
from alumni.models.enums import ProfileStatus

# Import Base so all tables are registered before create_engine is called.
from alumni.core.database import Base  # noqa: F401

from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import Session as SyncSession


# ---------------------------------------------------------------------------
# Seeder functions
# ---------------------------------------------------------------------------


def seed_batches(session: SyncSession, years: range, dry_run: bool) -> int:
    existing = set(session.execute(select(Batch.batch_year)).scalars().all())
    created = 0
    for year in years:
        if year in existing:
            print(f"  [skip]    Batch {year} already exists")
            continue
        print(f"  [create]  Batch {year}")
        if not dry_run:
            session.add(Batch(batch_year=year, name=f"Batch of {year}"))
        created += 1
    return created


def seed_central_admin(session: SyncSession, email: str, dry_run: bool) -> int:
    """Grant central admin to the identity with this email; approve its profile if pending."""
    user = session.execute(
        select(User).where(func.lower(User.email) == email.lower(), User.is_active.is_(True))
    ).scalar_one_or_none()
    if user is None:
        print(f"  [error]   No active identity with email {email!r}; sign up first")
        return 0

    changed = 0
    granted = session.execute(
        select(CentralAdmin).where(CentralAdmin.user_id == user.id)
    ).scalar_one_or_none()
    if granted:
        print(f"  [skip]    {email} is already a central admin")
    else:
        print(f"  [create]  CentralAdmin {email}")
        if not dry_run:
            session.add(CentralAdmin(user_id=user.id))
        changed += 1

    profile = session.get(Profile, user.id)
    if profile is not None and profile.status == ProfileStatus.PENDING:
        print(f"  [update]  Approve profile of {email}")
        if not dry_run:
            profile.status = ProfileStatus.APPROVED
        changed += 1
    return changed


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    parser = argparse.ArgumentParser(description="Alumni API seed script")
    parser.add_argument("--from-year", type=int, default=2000, help="First batch year to create")
    parser.add_argument(
        "--to-year",
        type=int,
        default=date.today().year,
        help="Last batch year to create (inclusive)",
    )
    parser.add_argument(
        "--admin-email",
        action="append",
        default=[],
        help="Email of an identity to make central admin (repeatable)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be seeded without writing to the database",
    )
    args = parser.parse_args()

    if args.from_year > args.to_year:
        parser.error("--from-year must not be after --to-year")

    dry_run: bool = args.dry_run
    if dry_run:
        print("DRY RUN: no changes will be committed")

    engine = create_engine(settings.DATABASE_URL_SYNC, echo=False)
    totals: dict[str, int] = {}

    with SyncSession(engine) as session:
        print("\n--- Batches ---")
        totals["batches"] = seed_batches(session, range(args.from_year, args.to_year + 1), dry_run)

        if args.admin_email:
            print("\n--- Central admins ---")
            totals["central_admins"] = sum(
                seed_central_admin(session, email, dry_run) for email in args.admin_email
            )

        if dry_run:
            session.rollback()
            print("\n[DRY RUN] No changes committed.")
        else:
            session.commit()
            print("\n[OK] All changes committed.")

    print("\n=== Seed Summary ===")
    for category, count in totals.items():
        print(f"  {category:15s}: {count} rows created/updated")


if __name__ == "__main__":
    main()
