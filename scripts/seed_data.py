"""Seed the database with a demo admin, customer and verified technician."""

import asyncio

from techmarket.db.engine import async_session_factory, init_db
from techmarket.db import crud
from techmarket.models import User, Role
from techmarket.services.accounts import register_account
from techmarket.services.auth import hash_password

DEMO_PASSWORD = "demo1234"


async def seed():
    await init_db()

    async with async_session_factory() as db:
        if await crud.get_user_by_email(db, "admin@demo.local"):
            print("Demo data already exists, skipping seed.")
            return

        admin = User(
            name="Demo Admin",
            email="admin@demo.local",
            password_hash=hash_password(DEMO_PASSWORD),
            role=Role.ADMIN,
        )
        db.add(admin)
        await db.commit()
        print(f"Created admin: {admin.email} (id: {admin.id})")

        customer = await register_account(
            db, "Demo Customer", "user@demo.local", DEMO_PASSWORD, location="Springfield",
        )
        print(f"Created user: {customer.email} (id: {customer.id})")

        tech_user = await register_account(
            db, "Demo Technician", "tech@demo.local", DEMO_PASSWORD, role="technician",
        )
        tech = await crud.get_technician_for_user(db, tech_user.id)
        tech = await crud.update_technician(
            db, tech,
            services_offered=["Plumbing", "Electrical Services"],
            contact_number="+15551234567",
            location="Springfield",
            service_areas=["Downtown", "Riverside"],
            description="Licensed plumber and electrician, 10 years of experience.",
            is_verified_by_admin=True,
        )
        print(f"Created verified technician: {tech_user.email} (profile id: {tech.id})")

    print(f"\nSeed complete. All demo accounts use the password '{DEMO_PASSWORD}'.")
    print("Start the server with: techmarket serve")


if __name__ == "__main__":
    asyncio.run(seed())
