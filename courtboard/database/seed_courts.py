"""
Seed default courts from CSV on startup.

Idempotent: creates courts whose name is not present yet. Does NOT overwrite
existing court rows. To force a full re-seed, delete rows from the courts
table first.
"""

import csv
import logging
from pathlib import Path

from sqlalchemy import select

from courtboard.database import db
from courtboard.database.models import Court, Sport

logger = logging.getLogger(__name__)

SEED_DIR = Path(__file__).resolve().parent.parent / "seed"


async def _seed_courts_from_csv(session, csv_filename: str) -> int:
    """Seed courts from a CSV file. Returns count of new rows."""
    csv_path = SEED_DIR / csv_filename
    if not csv_path.exists():
        logger.warning("Courts CSV not found: %s", csv_path)
        return 0

    valid_types = {s.value for s in Sport}
    result = await session.execute(select(Court.name))
    existing = set(result.scalars().all())

    created = 0
    with open(csv_path, "r", encoding="utf-8") as f:
        for row in csv.DictReader(f):
            name = row["name"].strip()
            court_type = row["type"].strip().lower()
            if court_type not in valid_types:
                logger.warning("Skipping court %r with unknown type %r", name, court_type)
                continue
            if name in existing:
                continue
            session.add(Court(name=name, type=court_type))
            existing.add(name)
            created += 1

    await session.flush()
    return created


async def seed_courts():
    """Seed default courts. Called during app startup."""
    async with db.AsyncSessionLocal() as session:
        courts_created = await _seed_courts_from_csv(session, "courts.csv")
        if courts_created:
            logger.info("Seeded %d new courts", courts_created)
        await session.commit()
