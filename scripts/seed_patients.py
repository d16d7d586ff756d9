#!/usr/bin/env python3
"""
Loads the sample patient directory used for MRN lookups.

Usage:
    python scripts/seed_patients.py
"""
import sys
import os
import asyncio
import logging

# Add backend to path
sys.path.append(os.path.join(os.path.dirname(__file__), '../backend'))

from dotenv import load_dotenv

load_dotenv(os.path.join(os.path.dirname(__file__), '../.env'))

from waiterboard.db.database import AsyncSessionLocal, init_db
from waiterboard.models.patient import Patient
from waiterboard.repositories.patient import PatientRepository

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(message)s')
logger = logging.getLogger(__name__)

SAMPLE_PATIENTS = [
    ("MRN-10001", "James", "Anderson", "1985-03-15"),
    ("MRN-10002", "Maria", "Garcia", "1992-07-22"),
    ("MRN-10003", "Robert", "Johnson", "1978-11-08"),
    ("MRN-10004", "Emily", "Williams", "2001-04-30"),
    ("MRN-10005", "Michael", "Brown", "1967-09-12"),
    ("MRN-10006", "Sarah", "Davis", "1989-12-05"),
    ("MRN-10007", "David", "Miller", "1955-06-18"),
    ("MRN-10008", "Jennifer", "Wilson", "1995-02-28"),
    ("MRN-10009", "William", "Moore", "1972-08-03"),
    ("MRN-10010", "Linda", "Taylor", "1983-01-17"),
    ("MRN-10011", "Thomas", "Anderson", "1948-10-25"),
    ("MRN-10012", "Patricia", "Thomas", "1990-05-09"),
    ("MRN-10013", "Christopher", "Jackson", "1976-07-14"),
    ("MRN-10014", "Elizabeth", "White", "2005-11-21"),
    ("MRN-10015", "Daniel", "Harris", "1963-04-06"),
    ("MRN-10016", "Barbara", "Martin", "1987-09-29"),
    ("MRN-10017", "Matthew", "Thompson", "1952-12-11"),
    ("MRN-10018", "Susan", "Robinson", "1998-03-23"),
    ("MRN-10019", "Anthony", "Clark", "1970-06-07"),
    ("MRN-10020", "Jessica", "Rodriguez", "1984-08-19"),
    ("MRN-10021", "Neima", "Brandon", "1991-04-12"),
    ("MRN-10022", "Charles", "Lewis", "1960-01-30"),
    ("MRN-10023", "Nancy", "Lee", "1973-05-15"),
    ("MRN-10024", "Steven", "Walker", "1982-10-08"),
    ("MRN-10025", "Karen", "Hall", "1945-02-14"),
]


async def seed_patients(session) -> int:
    """Insert sample patients whose MRN is not yet in the directory."""
    repo = PatientRepository(session)
    added = 0
    for mrn, first_name, last_name, dob in SAMPLE_PATIENTS:
        if await repo.get_by_mrn(mrn):
            continue
        await repo.create(Patient(mrn=mrn, first_name=first_name, last_name=last_name, dob=dob))
        added += 1
    await session.commit()
    return added


async def main():
    await init_db()
    async with AsyncSessionLocal() as session:
        added = await seed_patients(session)
    logger.info(f"Seeded {added} patients ({len(SAMPLE_PATIENTS) - added} already present)")


if __name__ == "__main__":
    asyncio.run(main())
