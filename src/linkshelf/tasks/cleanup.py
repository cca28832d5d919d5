"""
Scheduled cleanup task.

Designed to run as a cron job (e.g., daily at 3 AM).

Usage:
    python -m linkshelf.tasks.cleanup

The task:
1. Permanently deletes links that have been in the trash longer than
   soft_delete_expiry_days (with their revisions and notes)
2. Trims the revision history of every link to revision_history_limit
"""
import asyncio
import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from linkshelf.core.config import get_settings
from linkshelf.db.session import get_session_factory
from linkshelf.models.link import Link
from linkshelf.models.link_revision import LinkRevision
from linkshelf.services.link_service import link_service
from linkshelf.services.revision_service import revision_service

logger = logging.getLogger(__name__)


@dataclass
class CleanupStats:
    """Statistics from a cleanup run."""

    links_purged: int = 0
    revisions_pruned: int = 0

    def to_dict(self) -> dict[str, int]:
        """Convert to simple dict for logging/return."""
        return {
            "links_purged": self.links_purged,
            "revisions_pruned": self.revisions_pruned,
        }


async def purge_deleted_links(
    db: AsyncSession,
    now: datetime | None = None,
    expiry_days: int | None = None,
) -> int:
    """
    Permanently delete links soft-deleted more than expiry_days ago.

    Args:
        db: Database session.
        now: Current time for cutoff calculation. Defaults to datetime.now(UTC).
        expiry_days: Days in the trash before permanent deletion. Defaults to settings.

    Returns:
        Number of links deleted.
    """
    if now is None:
        now = datetime.now(UTC)
    if expiry_days is None:
        expiry_days = get_settings().soft_delete_expiry_days
    cutoff = now - timedelta(days=expiry_days)

    result = await db.execute(
        select(Link).where(
            Link.deleted_at.is_not(None),
            Link.deleted_at < cutoff,
        ),
    )
    links = list(result.scalars().all())
    for link in links:
        await link_service.delete_permanently(db, link)

    if links:
        logger.info("Purged %s links deleted before %s", len(links), cutoff.isoformat())
    return len(links)


async def prune_revisions(db: AsyncSession, limit: int | None = None) -> int:
    """
    Trim every link's revision history to the newest limit entries.

    Catches up links written while revision cleanup was disabled.

    Returns:
        Number of revisions deleted.
    """
    if limit is None:
        limit = revision_service.history_limit

    result = await db.execute(
        select(LinkRevision.link_id)
        .group_by(LinkRevision.link_id)
        .having(func.count() > limit),
    )
    pruned = 0
    for link_id in result.scalars().all():
        pruned += await revision_service.prune(db, link_id, target=limit)

    if pruned:
        logger.info("Pruned %s revisions beyond the limit of %s", pruned, limit)
    return pruned


async def run_cleanup(
    db: AsyncSession | None = None,
    now: datetime | None = None,
) -> CleanupStats:
    """
    Run all cleanup steps.

    Args:
        db: Database session. If None, creates a session and commits it.
        now: Current time. Defaults to datetime.now(UTC).

    Returns:
        CleanupStats with counts from each step.
    """
    logger.info("Starting cleanup task")

    async def _run(session: AsyncSession) -> CleanupStats:
        return CleanupStats(
            links_purged=await purge_deleted_links(session, now=now),
            revisions_pruned=await prune_revisions(session),
        )

    if db is not None:
        stats = await _run(db)
    else:
        async with get_session_factory()() as session:
            stats = await _run(session)
            await session.commit()

    logger.info("Cleanup complete: %s", stats.to_dict())
    return stats


def main() -> None:
    """Entry point for running cleanup as a script."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(run_cleanup())


if __name__ == "__main__":
    main()
