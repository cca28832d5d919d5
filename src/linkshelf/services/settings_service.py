"""Service layer for global application settings."""
import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from linkshelf.models.link import LinkDisplayMode
from linkshelf.models.setting import Setting

logger = logging.getLogger(__name__)

ARCHIVE_BACKUPS_ENABLED = "archive_backups_enabled"
ARCHIVE_PRIVATE_BACKUPS_ENABLED = "archive_private_backups_enabled"
LINK_DISPLAY_MODE = "link_display_mode"


@dataclass(frozen=True)
class ArchiveFlags:
    """Archive backup switches read from the settings store."""

    backups_enabled: bool
    private_backups_enabled: bool


def setting_enabled(value: str | None) -> bool:
    """
    Convert a stored flag to a bool.

    Only the string "0" is false. Any other value, including a missing
    setting, counts as enabled.
    """
    return value != "0"


async def get_setting(db: AsyncSession, key: str) -> str | None:
    """Get a setting value, returns None if not set."""
    result = await db.execute(select(Setting.value).where(Setting.key == key))
    return result.scalar_one_or_none()


async def set_setting(db: AsyncSession, key: str, value: str | None) -> Setting:
    """Create or update a setting."""
    setting = await db.get(Setting, key)
    if setting is None:
        setting = Setting(key=key, value=value)
        db.add(setting)
    else:
        setting.value = value
    await db.flush()
    return setting


async def get_archive_flags(db: AsyncSession) -> ArchiveFlags:
    """Read both archive backup flags."""
    return ArchiveFlags(
        backups_enabled=setting_enabled(await get_setting(db, ARCHIVE_BACKUPS_ENABLED)),
        private_backups_enabled=setting_enabled(
            await get_setting(db, ARCHIVE_PRIVATE_BACKUPS_ENABLED),
        ),
    )


async def get_display_mode(db: AsyncSession) -> LinkDisplayMode:
    """Get the link display mode, falling back to the detailed list."""
    value = await get_setting(db, LINK_DISPLAY_MODE)
    if value is None:
        return LinkDisplayMode.LIST_DETAILED
    try:
        return LinkDisplayMode(int(value))
    except ValueError:
        logger.warning("Unknown link display mode %r, using default", value)
        return LinkDisplayMode.LIST_DETAILED
