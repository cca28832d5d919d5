"""Service for recording and retrieving link revision history."""
import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from linkshelf.core.config import get_settings
from linkshelf.models.link import Link
from linkshelf.models.link_revision import LinkRevision

logger = logging.getLogger(__name__)

# Link columns whose changes are recorded
REVISIONABLE_FIELDS = (
    "url",
    "title",
    "description",
    "icon",
    "is_private",
    "status",
    "check_disabled",
)


def to_revision_value(value: Any) -> str | None:  # noqa: ANN401
    """Convert a field value to its stored text form (bools as "1"/"0")."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int):
        return str(int(value))
    return str(value)


class RevisionService:
    """Service for recording and retrieving link revisions."""

    def __init__(self, history_limit: int | None = None, cleanup: bool | None = None) -> None:
        """
        Initialize the service.

        Args:
            history_limit: Revisions kept per link. Defaults to settings.
            cleanup: Whether to prune beyond history_limit. Defaults to settings.
        """
        self._history_limit = history_limit
        self._cleanup = cleanup

    @property
    def history_limit(self) -> int:
        """Number of revisions kept per link."""
        if self._history_limit is not None:
            return self._history_limit
        return get_settings().revision_history_limit

    @property
    def cleanup(self) -> bool:
        """Whether old revisions are pruned after each write."""
        if self._cleanup is not None:
            return self._cleanup
        return get_settings().revision_cleanup

    async def record_revision(
        self,
        db: AsyncSession,
        link: Link,
        key: str,
        old_value: Any,  # noqa: ANN401
        new_value: Any,  # noqa: ANN401
        user_id: int | None = None,
    ) -> LinkRevision | None:
        """
        Record a single field change of a link.

        Args:
            db: Database session.
            link: The changed link (must be flushed so it has an id).
            key: Field name, or REV_TAGS_NAME / REV_LISTS_NAME for relations.
            old_value: Value before the change.
            new_value: Value after the change.
            user_id: User who made the change, None for system changes.

        Returns:
            The revision, or None if the stored values are equal.
        """
        old_text = to_revision_value(old_value)
        new_text = to_revision_value(new_value)
        if old_text == new_text:
            return None

        revision = LinkRevision(
            link_id=link.id,
            user_id=user_id,
            key=key,
            old_value=old_text,
            new_value=new_text,
        )
        db.add(revision)
        await db.flush()
        if self.cleanup:
            await self.prune(db, link.id)
        return revision

    async def record_changes(
        self,
        db: AsyncSession,
        link: Link,
        changes: Mapping[str, tuple[Any, Any]],
        user_id: int | None = None,
    ) -> list[LinkRevision]:
        """
        Record several field changes of a link.

        Args:
            db: Database session.
            link: The changed link.
            changes: Mapping of key to (old_value, new_value).
            user_id: User who made the changes.

        Returns:
            The revisions that were recorded (unchanged values are skipped).
        """
        revisions = []
        for key, (old_value, new_value) in changes.items():
            revision = await self.record_revision(db, link, key, old_value, new_value, user_id)
            if revision is not None:
                revisions.append(revision)
        return revisions

    async def get_revisions(
        self,
        db: AsyncSession,
        link_id: int,
        limit: int | None = None,
    ) -> list[LinkRevision]:
        """Get revisions of a link, newest first."""
        stmt = (
            select(LinkRevision)
            .where(LinkRevision.link_id == link_id)
            .order_by(LinkRevision.id.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await db.execute(stmt)
        return list(result.scalars().all())

    async def prune(self, db: AsyncSession, link_id: int, target: int | None = None) -> int:
        """
        Delete the oldest revisions of a link beyond target.

        Args:
            db: Database session.
            link_id: ID of the link.
            target: Number of most recent revisions to keep. Defaults to history_limit.

        Returns:
            Number of revisions deleted.
        """
        target = self.history_limit if target is None else target
        cutoff_stmt = (
            select(LinkRevision.id)
            .where(LinkRevision.link_id == link_id)
            .order_by(LinkRevision.id.desc())
            .offset(target - 1)
            .limit(1)
        )
        result = await db.execute(cutoff_stmt)
        cutoff_id = result.scalar_one_or_none()
        if cutoff_id is None:
            return 0

        result = await db.execute(
            delete(LinkRevision).where(
                LinkRevision.link_id == link_id,
                LinkRevision.id < cutoff_id,
            ),
        )
        if result.rowcount:
            logger.debug("Pruned %s revisions of link %s", result.rowcount, link_id)
        return result.rowcount

    async def delete_link_revisions(self, db: AsyncSession, link_id: int) -> int:
        """Delete all revisions of a link. Called before a permanent delete."""
        result = await db.execute(delete(LinkRevision).where(LinkRevision.link_id == link_id))
        return result.rowcount


# Singleton instance for use throughout the application
revision_service = RevisionService()
