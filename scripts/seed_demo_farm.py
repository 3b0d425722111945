import asyncio
import os
import sys
import uuid

# Add the project root to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app.core.config import settings
from app.core.db import SessionLocal, init_models
from app.modules.animals.repository import AnimalRepository

DEMO_COMPANY_ID = uuid.UUID("00000000-0000-0000-0000-0000000000c1")
DEMO_FARM_ID = uuid.UUID("00000000-0000-0000-0000-0000000000f1")

DEMO_ANIMALS = [
    {"species": "CATTLE", "breed": "Brahman", "sex": "FEMALE", "tag_number": "BRH-001", "age_months": 36},
    {"species": "CATTLE", "breed": "Brahman", "sex": "MALE", "tag_number": "BRH-002", "age_months": 48},
    {"species": "CATTLE", "breed": "Limousin", "sex": "FEMALE", "tag_number": "LIM-001", "age_months": 24},
    {"species": "GOAT", "breed": "Boer", "sex": "FEMALE", "tag_number": "BOE-001", "age_months": 18},
    {"species": "BUFFALO", "breed": "Murrah", "sex": "FEMALE", "tag_number": "MUR-001", "age_months": 60,
     "notes": "Milking, second lactation"},
]

async def seed_demo_farm(session, tenant_id: uuid.UUID) -> int:
    """Insert the demo animals that are not in the farm yet. Returns how many were created."""
    repo = AnimalRepository(session)
    created = 0
    for data in DEMO_ANIMALS:
        if await repo.get_by_tag(tenant_id, DEMO_FARM_ID, data["tag_number"]):
            print(f"  - Tag {data['tag_number']} already exists. Skipping.")
            continue
        animal = await repo.create(tenant_id, company_id=DEMO_COMPANY_ID, farm_id=DEMO_FARM_ID, **data)
        print(f"  - Created {animal.species.lower()} {animal.tag_number} with ID: {animal.id}")
        created += 1
    return created

async def main():
    print("Seeding demo farm...")
    await init_models()
    tenant_id = uuid.UUID(settings.DEFAULT_TENANT_ID)
    async with SessionLocal() as db:
        created = await seed_demo_farm(db, tenant_id)
        await db.commit()
    print(f"Done: {created} animals created for tenant {tenant_id}, farm {DEMO_FARM_ID}")

if __name__ == "__main__":
    asyncio.run(main())
