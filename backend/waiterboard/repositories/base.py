from typing import Generic, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from waiterboard.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    def __init__(self, model: Type[ModelType], session: AsyncSession):
        self.model = model
        self.session = session

    async def get(self, pk) -> ModelType | None:
        return await self.session.get(self.model, pk)

    async def create(self, instance: ModelType) -> ModelType:
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def delete(self, pk) -> bool:
        instance = await self.get(pk)
        if instance:
            await self.session.delete(instance)
            await self.session.flush()
            return True
        return False

    async def update(self, instance: ModelType) -> ModelType:
        self.session.add(instance)  # Re-add the instance to the session to track changes
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def get_all(self) -> list[ModelType]:
        result = await self.session.execute(select(self.model))
        return list(result.scalars().all())
