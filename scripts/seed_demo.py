#!/usr/bin/env python3
"""
Seed script to create a demo restaurant with shifts and tables
"""

import asyncio
import uuid


async def seed_demo_data():
    """Seed demo data for development"""
    from app.database import SessionLocal, engine, Base
    from app.models.restaurant import Restaurant, Environment
    from app.models.shift import Shift
    from app.models.table import Table

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with SessionLocal() as db:
        # Check if demo restaurant already exists
        from sqlalchemy import select
        result = await db.execute(
            select(Restaurant).where(Restaurant.slug == "cantina-da-nonna")
        )
        existing = result.scalar_one_or_none()

        if existing:
            print("Demo data already exists. Skipping...")
            return

        print("Creating demo restaurant...")

        restaurant = Restaurant(
            id=uuid.uuid4(),
            owner_email="nonna@cantina.com.br",
            name="Cantina da Nonna",
            slug="cantina-da-nonna",
            phone="+5511999990000",
            address="Rua Treze de Maio, 100 - Bela Vista, São Paulo",
            timezone="America/Sao_Paulo",
            total_capacity=60,
            max_party_size=12,
            max_online_party_size=8,
            booking_cutoff_hours=2,
            cancellation_cutoff_hours=4,
            modification_cutoff_hours=4,
            late_tolerance_minutes=15,
        )
        db.add(restaurant)
        await db.flush()

        print(f"Created restaurant: {restaurant.name} (ID: {restaurant.id})")

        salao = Environment(restaurant_id=restaurant.id, name="Salão", capacity=40)
        varanda = Environment(restaurant_id=restaurant.id, name="Varanda", capacity=20)
        db.add_all([salao, varanda])
        await db.flush()

        print("Creating shifts...")

        shifts = [
            Shift(
                restaurant_id=restaurant.id,
                name="Almoço",
                start_time="11:30",
                end_time="15:00",
                slot_interval_minutes=15,
                default_dwell_minutes=90,
                default_buffer_minutes=10,
                max_capacity=50,
                days_of_week=[1, 2, 3, 4, 5, 6, 0],
            ),
            Shift(
                restaurant_id=restaurant.id,
                name="Jantar",
                start_time="19:00",
                end_time="23:00",
                slot_interval_minutes=30,
                default_dwell_minutes=120,
                default_buffer_minutes=15,
                max_capacity=60,
                days_of_week=[2, 3, 4, 5, 6],
            ),
        ]
        db.add_all(shifts)

        print("Creating tables...")

        # (name, seats, environment)
        layout = [
            ("Mesa 01", 2, salao),
            ("Mesa 02", 2, salao),
            ("Mesa 03", 4, salao),
            ("Mesa 04", 4, salao),
            ("Mesa 05", 4, salao),
            ("Mesa 06", 6, salao),
            ("Mesa 07", 8, salao),
            ("Varanda 01", 2, varanda),
            ("Varanda 02", 4, varanda),
            ("Varanda 03", 4, varanda),
            ("Varanda 04", 6, varanda),
        ]

        for index, (name, seats, environment) in enumerate(layout):
            db.add(Table(
                restaurant_id=restaurant.id,
                environment_id=environment.id,
                name=name,
                seats=seats,
                position_x=float(index % 4) * 120,
                position_y=float(index // 4) * 120,
            ))

        await db.commit()

        print(f"""
Demo data created successfully!

Restaurant: {restaurant.name}
  ID: {restaurant.id}
  Owner: {restaurant.owner_email}

Shifts: {", ".join(shift.name for shift in shifts)}
Tables: {len(layout)} across {salao.name} and {varanda.name}

Check availability with:
  GET /restaurants/{restaurant.id}/reservations/availability?date=YYYY-MM-DD&shift_id=<id>&party_size=4
""")


if __name__ == "__main__":
    asyncio.run(seed_demo_data())
