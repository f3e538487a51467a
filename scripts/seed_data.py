"""Seed script to populate the database with sample data."""

from hearth import models  # noqa: F401
from hearth.core.database import Base, SessionLocal, engine
from hearth.models.enums import Amenity, PropertyStatus, UserRole
from hearth.models.property import Property
from hearth.models.user import User

SAMPLE_LISTINGS = [
    {
        "title": "Sunlit 3BHK near Koramangala",
        "description": "Corner apartment with cross ventilation, modular kitchen and covered parking.",
        "property_type": "apartment",
        "listing_type": "sale",
        "price": 9_500_000,
        "area_value": 1450,
        "area_unit": "sqft",
        "bedrooms": 3,
        "bathrooms": 2,
        "address": "14th Main, Koramangala 5th Block",
        "city": "Bangalore",
        "state": "Karnataka",
        "pincode": "560095",
        "latitude": 12.9352,
        "longitude": 77.6245,
        "furnished": "semi-furnished",
        "parking": 1,
        "featured": True,
        "amenities": [Amenity.PARKING, Amenity.GYM, Amenity.SECURITY, Amenity.POWER_BACKUP],
    },
    {
        "title": "Garden villa in Whitefield",
        "description": "Independent villa with private garden, terrace and servant room in a gated community.",
        "property_type": "villa",
        "listing_type": "sale",
        "price": 32_000_000,
        "area_value": 370,
        "area_unit": "sqm",
        "bedrooms": 4,
        "bathrooms": 4,
        "address": "Palm Meadows, Varthur Road",
        "city": "Bangalore",
        "state": "Karnataka",
        "pincode": "560066",
        "latitude": 12.9698,
        "longitude": 77.7500,
        "furnished": "furnished",
        "parking": 2,
        "amenities": [Amenity.GARDEN, Amenity.TERRACE, Amenity.SERVANT_ROOM, Amenity.SWIMMING_POOL],
    },
    {
        "title": "Compact studio for rent in Andheri",
        "description": "Ready to move studio close to the metro station, ideal for working professionals.",
        "property_type": "apartment",
        "listing_type": "rent",
        "price": 28_000,
        "area_value": 420,
        "area_unit": "sqft",
        "bedrooms": 1,
        "bathrooms": 1,
        "address": "JP Road, Andheri West",
        "city": "Mumbai",
        "state": "Maharashtra",
        "pincode": "400053",
        "furnished": "furnished",
        "parking": 0,
        "amenities": [Amenity.ELEVATOR, Amenity.INTERNET, Amenity.WATER_SUPPLY],
    },
    {
        "title": "Farm plot off Mysore Highway",
        "description": "Two acre agricultural plot with borewell and road access, clear title.",
        "property_type": "plot",
        "listing_type": "sale",
        "price": 6_000_000,
        "area_value": 2,
        "area_unit": "acres",
        "address": "Bidadi Hobli, Ramanagara",
        "city": "Ramanagara",
        "state": "Karnataka",
        "pincode": "562109",
        "amenities": [Amenity.WATER_SUPPLY],
    },
]


def seed_database() -> None:
    """Seed the database with sample data."""
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        # Check if data already exists
        if db.query(User).first():
            print("Database already has data. Skipping seed.")
            return

        print("Seeding database...")

        admin = User(first_name="Asha", last_name="Rao", email="admin@hearth.local", role=UserRole.ADMIN.value)
        seller = User(
            first_name="Vikram",
            last_name="Shah",
            email="vikram@example.com",
            phone="9876543210",
            role=UserRole.SELLER.value,
        )
        agent = User(first_name="Meera", last_name="Iyer", email="meera@example.com", role=UserRole.AGENT.value)
        buyer = User(first_name="Rahul", last_name="Nair", email="rahul@example.com", phone="9123456780")
        db.add_all([admin, seller, agent, buyer])
        db.flush()

        print(f"Created 4 users: {admin.name}, {seller.name}, {agent.name}, {buyer.name}")

        for index, listing in enumerate(SAMPLE_LISTINGS):
            fields = dict(listing)
            amenities = fields.pop("amenities")
            db_property = Property(
                owner_id=seller.id,
                agent_id=agent.id if index % 2 else None,
                status=PropertyStatus.ACTIVE.value if index < 3 else PropertyStatus.PENDING_APPROVAL.value,
                verified=index < 3,
                **fields,
            )
            db_property.set_amenities([a.value for a in amenities])
            db.add(db_property)

        db.commit()
        print(f"Created {len(SAMPLE_LISTINGS)} properties ({len(SAMPLE_LISTINGS) - 1} active, 1 pending)")
        print("\nSeed completed successfully!")
        print(f"Call the API with the header X-User-Id: {buyer.id} to act as {buyer.name}")
    finally:
        db.close()


if __name__ == "__main__":
    seed_database()
