#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from sqlalchemy import func, select

from lettrly.core.config import get_settings
from lettrly.db.models import AuthSession, Letter, Profile
from lettrly.db.session import AsyncSessionLocal, async_engine

SENDER_NAMES = ("Ada", "Grace", None, "Linus", None, "Margaret")


@dataclass
class SeedStats:
    recipient_username: str
    existing_letter_count: int
    created_letters: int
    session_token: str | None


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Seed a recipient profile with synthetic letters for local inbox testing.",
    )
    parser.add_argument(
        "--username",
        default="leigh",
        help="Recipient username; the profile is created when missing (default: 'leigh').",
    )
    parser.add_argument(
        "--count",
        type=int,
        default=5,
        help="Number of letters to create up front (default: 5).",
    )
    parser.add_argument(
        "--minutes-between-letters",
        type=int,
        default=30,
        help="Gap between seeded letters for timestamp staggering (default: 30).",
    )
    parser.add_argument(
        "--drip-seconds",
        type=float,
        default=0.0,
        help="After seeding, keep delivering one letter every N seconds until interrupted.",
    )
    parser.add_argument(
        "--issue-session",
        action="store_true",
        help="Create a one-day session token for the recipient and print it.",
    )
    parser.add_argument(
        "--yes",
        action="store_true",
        help="Execute seeding without interactive confirmation.",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Allow running against non-dev environments.",
    )
    args = parser.parse_args()

    if args.count < 0:
        raise SystemExit("--count must be 0 or greater.")
    if args.minutes_between_letters < 0:
        raise SystemExit("--minutes-between-letters must be 0 or greater.")
    if args.drip_seconds < 0:
        raise SystemExit("--drip-seconds must be 0 or greater.")
    return args


def ensure_dev_target(*, force: bool) -> None:
    settings = get_settings()
    environment = settings.environment.lower()
    db_name = settings.db_name.lower()

    looks_like_dev = environment in {"development", "dev", "local"} or "dev" in db_name
    if looks_like_dev or force:
        return

    raise SystemExit(
        "Refusing to run outside a dev-like database target. "
        "Set ENVIRONMENT=development / DB_NAME containing 'dev', or pass --force."
    )


def build_letter(recipient: Profile, *, sequence: int, created_at: datetime) -> Letter:
    sender_name = SENDER_NAMES[sequence % len(SENDER_NAMES)]
    return Letter(
        recipient_id=recipient.id,
        content=f"Seed letter #{sequence}: thank you for sharing your link.",
        sender_display_name=sender_name,
        is_anonymous=sender_name is None,
        created_at=created_at,
    )


async def ensure_recipient(username: str) -> Profile:
    clean_username = username.strip().lower()
    async with AsyncSessionLocal() as session:
        profile = await session.scalar(select(Profile).where(Profile.username == clean_username))
        if profile is None:
            profile = Profile(username=clean_username, display_name=clean_username.title())
            session.add(profile)
            await session.commit()
            await session.refresh(profile)
        return profile


async def count_letters(recipient: Profile) -> int:
    async with AsyncSessionLocal() as session:
        stmt = select(func.count(Letter.id)).where(Letter.recipient_id == recipient.id)
        return int(await session.scalar(stmt) or 0)


async def seed_letters(args: argparse.Namespace, recipient: Profile) -> SeedStats:
    now = datetime.now(timezone.utc)
    existing_count = await count_letters(recipient)
    token: str | None = None

    async with AsyncSessionLocal() as session:
        for offset in range(args.count):
            created_at = now - timedelta(minutes=offset * args.minutes_between_letters)
            session.add(
                build_letter(recipient, sequence=existing_count + offset + 1, created_at=created_at)
            )
        if args.issue_session:
            token = secrets.token_urlsafe(32)
            session.add(
                AuthSession(
                    token=token,
                    user_id=recipient.id,
                    expires_at=now + timedelta(days=1),
                )
            )
        await session.commit()

    return SeedStats(
        recipient_username=recipient.username or "",
        existing_letter_count=existing_count,
        created_letters=args.count,
        session_token=token,
    )


async def drip_letters(recipient: Profile, *, interval: float, start_sequence: int) -> None:
    sequence = start_sequence
    while True:
        await asyncio.sleep(interval)
        sequence += 1
        async with AsyncSessionLocal() as session:
            session.add(
                build_letter(recipient, sequence=sequence, created_at=datetime.now(timezone.utc))
            )
            await session.commit()
        print(f"- delivered seed letter #{sequence}")


async def main() -> int:
    args = parse_args()
    ensure_dev_target(force=args.force)

    if not args.yes:
        print("Aborted: pass --yes to execute seeding.")
        return 1

    recipient = await ensure_recipient(args.username)
    stats = await seed_letters(args, recipient)
    print("Seed complete")
    print(f"- recipient: {stats.recipient_username} ({recipient.id})")
    print(f"- existing_letters_before: {stats.existing_letter_count}")
    print(f"- created_letters: {stats.created_letters}")
    if stats.session_token:
        print(f"- session_token: {stats.session_token}")

    if args.drip_seconds > 0:
        print(f"Delivering one letter every {args.drip_seconds:g}s; press Ctrl+C to stop.")
        try:
            await drip_letters(
                recipient,
                interval=args.drip_seconds,
                start_sequence=stats.existing_letter_count + stats.created_letters,
            )
        except asyncio.CancelledError:
            pass
    return 0


if __name__ == "__main__":
    try:
        raise SystemExit(asyncio.run(main()))
    except KeyboardInterrupt:
        raise SystemExit(0)
    finally:
        asyncio.run(async_engine.dispose())
