"""
Background task that keeps the patient board clean even when no board is polling.
"""
import asyncio
import logging
from typing import Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from waiterboard.services.board_service import BoardService

logger = logging.getLogger(__name__)


class BoardMaintenanceService:
    def __init__(
        self,
        session_factory: Callable[..., AsyncSession],
        board_service_class=BoardService,
        polling_interval_seconds: int = 60,
    ):
        self.session_factory = session_factory
        self.board_service_class = board_service_class
        self.polling_interval_seconds = polling_interval_seconds

        self._running = False
        self._maintenance_task: Optional[asyncio.Task] = None
        self.cycle_count = 0
        self.cleared_count = 0
        self.error_count = 0
        self.last_error: Optional[str] = None

    async def run_once(self) -> int:
        async with self.session_factory() as session:
            board_service = self.board_service_class(session)
            cleared = await board_service.auto_clear()
            await session.commit()
        self.cleared_count += cleared
        return cleared

    async def start_maintenance_task(self):
        self._running = True
        self._maintenance_task = asyncio.create_task(self._maintenance_loop())
        logger.info("Board Maintenance Task Started")

    async def stop_maintenance_task(self):
        self._running = False
        if self._maintenance_task:
            self._maintenance_task.cancel()
            try:
                await self._maintenance_task
            except asyncio.CancelledError:
                pass
        logger.info("Board Maintenance Task Stopped")

    def health(self) -> dict:
        return {
            "status": "running" if self._running else "stopped",
            "cycle_count": self.cycle_count,
            "cleared_count": self.cleared_count,
            "error_count": self.error_count,
            "last_error": self.last_error,
        }

    async def _maintenance_loop(self):
        while self._running:
            try:
                await self.run_once()
                self.cycle_count += 1
            except Exception as e:
                self.error_count += 1
                self.last_error = str(e)
                logger.error(f"Error in board maintenance loop: {e}")

            await asyncio.sleep(self.polling_interval_seconds)
