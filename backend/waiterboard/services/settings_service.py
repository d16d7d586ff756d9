"""
Typed access to the key/value settings store.
"""
import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from waiterboard.exceptions import InvalidSettingError
from waiterboard.models.audit_log import AuditAction, AuditEntityType
from waiterboard.repositories.audit_log import AuditLogRepository
from waiterboard.repositories.setting import SettingRepository
from waiterboard.schemas.settings import BoardSettings, BoardSettingsUpdate

logger = logging.getLogger(__name__)


def serialize_setting_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def parse_stored_settings(raw: Dict[str, str]) -> BoardSettings:
    """
    Overlay stored values on the defaults. Unknown keys are ignored and a
    stored value that no longer validates falls back to its default.
    """
    known = {key: value for key, value in raw.items() if key in BoardSettings.model_fields}
    try:
        return BoardSettings.model_validate(known)
    except ValidationError as e:
        invalid_keys = {err["loc"][0] for err in e.errors() if err["loc"]}
        logger.warning(f"Ignoring invalid stored settings {sorted(invalid_keys)}; using defaults for them.")
        return BoardSettings.model_validate(
            {key: value for key, value in known.items() if key not in invalid_keys}
        )


class SettingsService:
    def __init__(
        self,
        session: AsyncSession,
        setting_repository_class=SettingRepository,
        audit_log_repository_class=AuditLogRepository,
    ):
        self.session = session
        self.setting_repo = setting_repository_class(session)
        self.audit_repo = audit_log_repository_class(session)

    async def get_settings(self) -> BoardSettings:
        raw = await self.setting_repo.get_values()
        return parse_stored_settings(raw)

    async def update_settings(self, changes: Dict[str, Any], staff_initials: Optional[str] = None) -> BoardSettings:
        """
        Apply a partial update. Every supplied key is validated before anything is written.
        """
        try:
            update = BoardSettingsUpdate.model_validate(changes)
        except ValidationError as e:
            raise InvalidSettingError(f"Invalid settings: {e.errors(include_url=False)}") from e

        current = await self.get_settings()
        requested = {k: v for k, v in update.model_dump(exclude_unset=True).items() if v is not None}
        effective = {k: v for k, v in requested.items() if getattr(current, k) != v}

        if not effective:
            return current

        for key, value in effective.items():
            await self.setting_repo.upsert(key, serialize_setting_value(value))

        updated = current.model_copy(update=effective)
        await self.audit_repo.add_entry(
            action=AuditAction.UPDATE,
            entity_type=AuditEntityType.SETTINGS,
            old_values=current.model_dump(mode="json"),
            new_values=updated.model_dump(mode="json"),
            staff_initials=staff_initials,
        )
        logger.info(f"Updated settings: {sorted(effective)}")
        return updated

    async def export_settings(self) -> Dict[str, Any]:
        settings = await self.get_settings()
        return settings.model_dump(mode="json")

    async def import_settings(self, document: Dict[str, Any], staff_initials: Optional[str] = None) -> BoardSettings:
        """
        Replace the whole configuration with an exported document.
        Keys missing from the document take their defaults; unknown keys are dropped.
        """
        unknown = sorted(set(document) - set(BoardSettings.model_fields))
        if unknown:
            logger.warning(f"Settings import ignoring unknown keys: {unknown}")
        try:
            imported = BoardSettings.model_validate(
                {k: v for k, v in document.items() if k in BoardSettings.model_fields}
            )
        except ValidationError as e:
            raise InvalidSettingError(f"Invalid settings document: {e.errors(include_url=False)}") from e

        previous = await self.get_settings()
        await self.setting_repo.delete_all()
        for key, value in imported.model_dump().items():
            await self.setting_repo.upsert(key, serialize_setting_value(value))

        await self.audit_repo.add_entry(
            action=AuditAction.IMPORT,
            entity_type=AuditEntityType.SETTINGS,
            old_values=previous.model_dump(mode="json"),
            new_values=imported.model_dump(mode="json"),
            staff_initials=staff_initials,
        )
        logger.info("Imported settings document")
        return imported

    async def reset_settings(self, staff_initials: Optional[str] = None) -> BoardSettings:
        previous = await self.get_settings()
        await self.setting_repo.delete_all()
        defaults = BoardSettings()
        await self.audit_repo.add_entry(
            action=AuditAction.RESET,
            entity_type=AuditEntityType.SETTINGS,
            old_values=previous.model_dump(mode="json"),
            new_values=defaults.model_dump(mode="json"),
            staff_initials=staff_initials,
        )
        logger.info("Settings reset to defaults")
        return defaults
