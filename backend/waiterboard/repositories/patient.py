from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from waiterboard.models.patient import Patient
from waiterboard.repositories.base import BaseRepository


class PatientRepository(BaseRepository[Patient]):
    def __init__(self, session: AsyncSession):
        super().__init__(Patient, session)

    async def get_by_mrn(self, mrn: str) -> Optional[Patient]:
        result = await self.session.execute(select(self.model).where(self.model.mrn == mrn))
        return result.scalars().first()

    async def get_all_ordered(self) -> List[Patient]:
        result = await self.session.execute(
            select(self.model).order_by(self.model.last_name, self.model.first_name)
        )
        return list(result.scalars().all())
