"""
directory/seed.py -- Demo data for a fresh install.

Enabled with SEED_DEMO_DATA=true. Creates five business-owner accounts
(password "password123") and ten sample businesses dealt out to them in
turn. Does nothing if any business already exists, so restarting the server
never duplicates the sample set.
"""

import logging

from sqlalchemy.exc import IntegrityError

from auth.credentials import CredentialStore
from auth.models import Role, User
from auth.store import UserStore
from directory.models import Business
from directory.store import DirectoryStore

logger = logging.getLogger("bizdir.directory")

DEMO_PASSWORD = "password123"

DEMO_OWNERS = [
    ("John Smith", "john@coffee.com", "Coffee Corner", "+1234567890"),
    ("Maria Garcia", "maria@techhub.com", "Tech Hub", "+1234567891"),
    ("David Chen", "david@fitnessfirst.com", "Fitness First", "+1234567892"),
    ("Sarah Johnson", "sarah@bookstore.com", "City Bookstore", "+1234567893"),
    ("Mike Wilson", "mike@autoshop.com", "Wilson Auto Service", "+1234567894"),
]

# name, category, description, phone, email, address, rating
DEMO_BUSINESSES = [
    ("Coffee Corner", "Restaurant", "Best coffee in town with fresh pastries",
     "+1234567801", "info@coffeecorner.com", "123 Main St, Downtown", 4.5),
    ("Tech Hub", "Technology", "Latest gadgets and computer repair services",
     "+1234567802", "support@techhub.com", "456 Tech Ave", 4.2),
    ("Fitness First Gym", "Healthcare", "Complete fitness center with personal trainers",
     "+1234567803", "fitness@first.com", "789 Health Blvd", 4.7),
    ("City Bookstore", "Retail", "Books for all ages with quiet reading areas",
     "+1234567804", "books@city.com", "321 Reading St", 4.3),
    ("Wilson Auto Service", "Services", "Full auto repair and maintenance services",
     "+1234567805", "service@wilsonauto.com", "654 Car Lane", 4.1),
    ("Bella Pizza", "Restaurant", "Authentic Italian pizza with fresh ingredients",
     "+1234567806", "bella@pizza.com", "987 Food Court", 4.8),
    ("Green Garden Spa", "Services", "Relaxing spa treatments and massages",
     "+1234567807", "spa@greengarden.com", "159 Wellness Rd", 4.6),
    ("Kids Play Center", "Entertainment", "Safe and fun environment for children",
     "+1234567808", "play@kidscenter.com", "753 Fun St", 4.4),
    ("Quick Hair Studio", "Services", "Modern hair styling and beauty services",
     "+1234567809", "hair@quick-studio.com", "852 Style Ave", 4.0),
    ("Fresh Market", "Retail", "Local farm fresh produce and groceries",
     "+1234567810", "fresh@market.com", "951 Organic Way", 4.2),
]


def seed_demo_data(users: UserStore, directory: DirectoryStore, credentials: CredentialStore) -> int:
    """Insert the demo owners and businesses. Returns the number of businesses created."""
    if directory.count_businesses() > 0:
        logger.info("Directory already has data, skipping seed")
        return 0

    digest = credentials.hash(DEMO_PASSWORD)
    owner_ids: list[int] = []
    for name, email, company, phone in DEMO_OWNERS:
        existing = users.get_by_email(email)
        if existing is not None:
            owner_ids.append(existing.id)
            continue
        try:
            owner_ids.append(
                users.create_user(
                    User(
                        name=name,
                        email=email,
                        role=Role.BUSINESS_OWNER,
                        hashed_password=digest,
                        company=company,
                        phone=phone,
                    )
                )
            )
        except IntegrityError:
            # Another worker seeded this owner between the lookup and the insert.
            owner_ids.append(users.get_by_email(email).id)

    for i, (name, category, description, phone, email, address, rating) in enumerate(DEMO_BUSINESSES):
        directory.create_business(
            Business(
                name=name,
                category=category,
                description=description,
                phone=phone,
                email=email,
                address=address,
                rating=rating,
                owner_id=owner_ids[i % len(owner_ids)],
            )
        )

    logger.info("Seeded %d demo businesses for %d owners", len(DEMO_BUSINESSES), len(owner_ids))
    return len(DEMO_BUSINESSES)
