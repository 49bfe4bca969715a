"""
Seed the database with worker profiles spread around Australian cities, plus the
document master list and an admin user for searching.
Run from apps/api: python scripts/seed_workers.py
"""
import asyncio
import logging
import random
import sys
from datetime import date, timedelta
from pathlib import Path

# Ensure src is importable when run from repo root or apps/api
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

logger = logging.getLogger(__name__)

from src.core import create_access_token
from src.core.constants import SERVICE_NAME_MAP, THERAPEUTIC_SUPPORTS_ID
from src.db.session import async_session
from src.db.models import (
    Document,
    User,
    VerificationRequirement,
    WorkerAdditionalInfo,
    WorkerProfile,
    WorkerService,
)

NUM_WORKERS = 200
ADMIN_EMAIL = "admin@example.com"

FIRST_NAMES = [
    "Alex", "Jordan", "Sam", "Taylor", "Morgan", "Casey", "Riley", "Avery",
    "Jamie", "Quinn", "Emma", "Liam", "Olivia", "Noah", "Ava", "Ethan",
    "Mia", "Lucas", "Harper", "Henry", "Chloe", "Leo", "Zoe", "Isaac",
]
LAST_NAMES = [
    "Smith", "Nguyen", "Williams", "Brown", "Jones", "Wilson", "Taylor", "Martin",
    "Lee", "Walker", "White", "Harris", "Thompson", "Kelly", "Chen", "Singh",
]
GENDERS = ["Male", "Female", "Non-binary"]
LANGUAGES = ["English", "Mandarin", "Arabic", "Vietnamese", "Italian", "Greek", "Hindi", "Spanish"]

# (city, state, postal code, latitude, longitude)
CITIES = [
    ("Sydney", "NSW", "2000", -33.8688, 151.2093),
    ("Parramatta", "NSW", "2150", -33.8150, 151.0011),
    ("Hornsby", "NSW", "2077", -33.7030, 151.0990),
    ("Wollongong", "NSW", "2500", -34.4278, 150.8931),
    ("Melbourne", "VIC", "3000", -37.8136, 144.9631),
    ("Geelong", "VIC", "3220", -38.1499, 144.3617),
    ("Brisbane", "QLD", "4000", -27.4698, 153.0251),
    ("Gold Coast", "QLD", "4217", -28.0167, 153.4000),
    ("Perth", "WA", "6000", -31.9505, 115.8605),
    ("Adelaide", "SA", "5000", -34.9285, 138.6007),
]

THERAPEUTIC_SUBCATEGORIES = ["occupational-therapy", "physiotherapy", "speech-pathology", "psychology"]

DOCUMENTS = [
    ("police-check", "National Police Check", "WORKING_RIGHTS"),
    ("ndis-worker-screening", "NDIS Worker Screening Check", "WORKING_RIGHTS"),
    ("wwcc", "Working With Children Check", "WORKING_RIGHTS"),
    ("first-aid", "First Aid Certificate", "TRAINING"),
    ("cpr", "CPR Certificate", "TRAINING"),
    ("driver-license-vehicle", "Driver's License", "TRANSPORT"),
    ("car-insurance", "Comprehensive Car Insurance", "TRANSPORT"),
    ("identity-passport", "Passport", "IDENTITY"),
    ("business-abn", "ABN", "BUSINESS"),
]
STATUSES = ["PENDING", "SUBMITTED", "APPROVED", "APPROVED", "REJECTED"]


def random_date_of_birth() -> str | None:
    if random.random() < 0.2:
        return None  # legacy profile, only the integer age is known
    today = date.today()
    days = random.randint(18 * 365, 75 * 365)
    return (today - timedelta(days=days)).isoformat()


def jitter(value: float, spread: float = 0.15) -> float:
    return round(value + random.uniform(-spread, spread), 6)


async def run_seed():
    async with async_session() as session:
        for doc_id, name, category in DOCUMENTS:
            await session.merge(Document(id=doc_id, name=name, category=category))

        admin = User(email=ADMIN_EMAIL, role="ADMIN")
        session.add(admin)
        await session.flush()

        for i in range(NUM_WORKERS):
            first = random.choice(FIRST_NAMES)
            last = random.choice(LAST_NAMES)
            user = User(email=f"seed.worker{i + 1}@example.com", role="WORKER")
            session.add(user)
            await session.flush()

            dob = random_date_of_birth()
            city, state, postcode, lat, lon = random.choice(CITIES)
            located = random.random() < 0.9
            profile = WorkerProfile(
                user_id=user.id,
                first_name=first,
                last_name=last,
                mobile=f"04{random.randint(10000000, 99999999)}",
                gender=random.choice(GENDERS),
                age=random.randint(18, 75) if dob is None else None,
                date_of_birth=dob,
                languages=random.sample(LANGUAGES, k=random.randint(1, 2)),
                city=city,
                state=state,
                postal_code=postcode,
                latitude=jitter(lat) if located else None,
                longitude=jitter(lon) if located else None,
                experience=f"{random.randint(1, 20)} years in community support",
                is_published=random.random() < 0.8,
                is_deleted=random.random() < 0.03,
            )
            session.add(profile)
            await session.flush()

            for category_id in random.sample(list(SERVICE_NAME_MAP), k=random.randint(1, 3)):
                subcategories = (
                    random.sample(THERAPEUTIC_SUBCATEGORIES, k=random.randint(1, 2))
                    if category_id == THERAPEUTIC_SUPPORTS_ID
                    else []
                )
                session.add(
                    WorkerService(
                        worker_profile_id=profile.id,
                        category_id=category_id,
                        category_name=SERVICE_NAME_MAP[category_id],
                        subcategory_ids=subcategories,
                    )
                )

            if random.random() < 0.6:
                session.add(
                    WorkerAdditionalInfo(
                        worker_profile_id=profile.id,
                        languages=random.sample(LANGUAGES, k=random.randint(1, 3)),
                    )
                )

            for doc_id, _name, category in random.sample(DOCUMENTS, k=random.randint(0, 4)):
                session.add(
                    VerificationRequirement(
                        worker_profile_id=profile.id,
                        requirement_type=doc_id,
                        document_category=category,
                        status=random.choice(STATUSES),
                    )
                )

            if (i + 1) % 50 == 0:
                logger.info("Progress: seeded %s/%s workers", i + 1, NUM_WORKERS)
                await session.commit()

        await session.commit()
        admin_id = admin.id

    logger.info("Done. Seeded %s workers and %s documents", NUM_WORKERS, len(DOCUMENTS))
    logger.info("  Admin bearer token: %s", create_access_token(str(admin_id), "ADMIN"))


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )
    logger.info("Starting worker seed: %s workers", NUM_WORKERS)
    asyncio.run(run_seed())
