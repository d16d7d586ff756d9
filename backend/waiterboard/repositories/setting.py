from typing import Dict

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from waiterboard.models.setting import Setting
from waiterboard.repositories.base import BaseRepository
from waiterboard.utils.time_utils import utcnow


class SettingRepository(BaseRepository[Setting]):
    def __init__(self, session: AsyncSession):
        super().__init__(Setting, session)

    async def get_values(self) -> Dict[str, str]:
        result = await self.session.execute(select(self.model.key, self.model.value))
        return {key: value for key, value in result.all()}

    async def upsert(self, key: str, value: str) -> Setting:
        setting = await self.get(key)
        if setting is None:
            setting = Setting(key=key, value=value, updated_at=utcnow())
            self.session.add(setting)
        else:
            setting.value = value
            setting.updated_at = utcnow()
        await self.session.flush()
        return setting

    async def delete_all(self) -> int:
        result = await self.session.execute(delete(self.model))
        await self.session.flush()
        return result.rowcount or 0
