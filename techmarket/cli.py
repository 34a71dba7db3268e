"""TechMarket command line: database bootstrap, admin accounts and rating checks."""

from __future__ import annotations

import argparse
import asyncio
import getpass
import sys


async def cmd_init_db(args):
    """Create all tables."""
    from techmarket.db.engine import init_db

    await init_db()
    print("Database tables created.")


async def cmd_create_admin(args):
    """Create an admin account (or promote an existing account to admin)."""
    from techmarket.db.engine import async_session_factory, init_db
    from techmarket.db import crud
    from techmarket.errors import ValidationError
    from techmarket.models import User, Role
    from techmarket.services.auth import hash_password

    await init_db()

    async with async_session_factory() as db:
        existing = await crud.get_user_by_email(db, args.email)
        if existing:
            existing.role = Role.ADMIN
            await db.commit()
            print(f"Promoted existing user {existing.email} (id={existing.id}) to admin")
            return

        password = args.password
        if not password:
            password = getpass.getpass("Admin password: ")
            confirm = getpass.getpass("Confirm password: ")
            if password != confirm:
                print("Passwords do not match")
                sys.exit(1)

        if len(password) < 6:
            print("Password must be at least 6 characters")
            sys.exit(1)

        try:
            admin = User(
                name=args.name or args.email.split("@")[0],
                email=args.email,
                password_hash=hash_password(password),
                role=Role.ADMIN,
            )
        except ValidationError as e:
            print(e.detail)
            sys.exit(1)
        db.add(admin)
        await db.commit()
        print(f"Admin user: {admin.email} (id={admin.id})")


async def cmd_check_ratings(args):
    """Report technicians whose cached rating disagrees with their reviews."""
    from techmarket.db.engine import async_session_factory
    from techmarket.services.ratings import find_inconsistent_ratings, recompute_technician_rating

    async with async_session_factory() as db:
        stale = await find_inconsistent_ratings(db)
        if not stale:
            print("All technician ratings are consistent.")
            return
        for tech in stale:
            print(f"  Stale rating: technician {tech.id} "
                  f"(cached {tech.average_rating:.2f} over {tech.review_count} reviews)")
        if not args.fix:
            print(f"{len(stale)} inconsistent technician(s). Re-run with --fix to recompute.")
            sys.exit(1)
        for tech in stale:
            average, count = await recompute_technician_rating(db, tech.id)
            print(f"  Recomputed {tech.id}: {average:.2f} over {count} reviews")
        await db.commit()


def cmd_serve(args):
    import uvicorn

    uvicorn.run("techmarket.main:app", host=args.host, port=args.port, reload=args.reload)


def main():
    parser = argparse.ArgumentParser(description="TechMarket CLI")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("init-db", help="Create database tables")

    ca = subparsers.add_parser("create-admin", help="Create an admin account")
    ca.add_argument("--email", required=True, help="Admin email")
    ca.add_argument("--name", default="", help="Admin display name")
    ca.add_argument("--password", default="", help="Admin password (prompted if not given)")

    cr = subparsers.add_parser("check-ratings", help="Verify cached technician ratings")
    cr.add_argument("--fix", action="store_true", help="Recompute stale ratings")

    sv = subparsers.add_parser("serve", help="Run the API server")
    sv.add_argument("--host", default="127.0.0.1")
    sv.add_argument("--port", type=int, default=8000)
    sv.add_argument("--reload", action="store_true")

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == "init-db":
        asyncio.run(cmd_init_db(args))
    elif args.command == "create-admin":
        asyncio.run(cmd_create_admin(args))
    elif args.command == "check-ratings":
        asyncio.run(cmd_check_ratings(args))
    elif args.command == "serve":
        cmd_serve(args)


if __name__ == "__main__":
    main()
