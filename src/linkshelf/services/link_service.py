"""
Service layer for link storage operations.

Wraps the queries a link needs: lookup scoped to a user, relation loading,
soft delete and restore, change tracking through the revision service,
duplicate URL search and archive backup dispatch.
"""
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.sql import ColumnElement, Select

from linkshelf.models.link import Link
from linkshelf.models.link_list import LinkList, link_lists
from linkshelf.models.link_revision import REV_LISTS_NAME, REV_TAGS_NAME
from linkshelf.models.note import Note
from linkshelf.models.tag import Tag, link_tags
from linkshelf.schemas.link import LinkCreate, LinkUpdate
from linkshelf.services.archive_service import ArchiveJobQueue, should_archive
from linkshelf.services.duplicates import (
    DISCARDED_URL_CHARS,
    find_duplicates,
    normalize_url,
    url_host,
)
from linkshelf.services.exceptions import InvalidStateError
from linkshelf.services.revision_service import (
    REVISIONABLE_FIELDS,
    RevisionService,
    revision_service,
)
from linkshelf.services.settings_service import get_archive_flags
from linkshelf.services.tag_service import get_or_create_lists, get_or_create_tags
from linkshelf.services.utils import contains_pattern

logger = logging.getLogger(__name__)


def _join_names(items: list[Tag] | list[LinkList]) -> str | None:
    # Sorted, so reordering the same names is not a change
    return ",".join(sorted(item.name for item in items)) or None


def _comparable_url() -> ColumnElement[str]:
    """Link.url without the characters URL parsing discards."""
    url = Link.url
    for char in DISCARDED_URL_CHARS:
        url = func.replace(url, char, "")
    return url


class LinkService:
    """
    Link operations against an AsyncSession.

    None of the methods commit. Whoever opened the session commits once the
    unit of work is done.
    """

    def __init__(self, revisions: RevisionService | None = None) -> None:
        self.revisions = revisions or revision_service

    # --- Query scopes ---

    @staticmethod
    def by_user(query: Select, user_id: int) -> Select:
        """Restrict a link query to one user's links."""
        return query.where(Link.user_id == user_id)

    @staticmethod
    def private_only(query: Select, is_private: bool) -> Select:
        """Restrict a link query to private (or public) links."""
        return query.where(Link.is_private == is_private)

    # --- Lookup ---

    async def get(
        self,
        db: AsyncSession,
        link_id: int,
        user_id: int | None = None,
        include_deleted: bool = False,
    ) -> Link | None:
        """
        Get a link by ID with tags and lists loaded.

        Args:
            db: Database session.
            link_id: ID of the link.
            user_id: If given, only return the link when it belongs to this user.
            include_deleted: If True, include links in the trash.

        Returns:
            The link, or None if not found.
        """
        query = (
            select(Link)
            .options(selectinload(Link.tags), selectinload(Link.lists))
            .where(Link.id == link_id)
        )
        if user_id is not None:
            query = self.by_user(query, user_id)
        if not include_deleted:
            query = query.where(Link.deleted_at.is_(None))

        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def list_for_user(
        self,
        db: AsyncSession,
        user_id: int,
        is_private: bool | None = None,
    ) -> list[Link]:
        """List a user's links that are not in the trash, newest first."""
        query = self.by_user(
            select(Link).options(selectinload(Link.tags), selectinload(Link.lists)),
            user_id,
        ).where(Link.deleted_at.is_(None))
        if is_private is not None:
            query = self.private_only(query, is_private)
        query = query.order_by(Link.created_at.desc(), Link.id.desc())

        result = await db.execute(query)
        return list(result.scalars().all())

    async def find_related_tags(self, db: AsyncSession, link: Link) -> list[Tag]:
        """Get the tags of a link, ordered by name."""
        result = await db.execute(
            select(Tag)
            .join(link_tags, link_tags.c.tag_id == Tag.id)
            .where(link_tags.c.link_id == link.id)
            .order_by(Tag.name),
        )
        return list(result.scalars().all())

    async def find_related_lists(self, db: AsyncSession, link: Link) -> list[LinkList]:
        """Get the lists a link belongs to, ordered by name."""
        result = await db.execute(
            select(LinkList)
            .join(link_lists, link_lists.c.list_id == LinkList.id)
            .where(link_lists.c.link_id == link.id)
            .order_by(LinkList.name),
        )
        return list(result.scalars().all())

    async def find_notes(self, db: AsyncSession, link: Link) -> list[Note]:
        """Get the notes of a link, oldest first."""
        result = await db.execute(
            select(Note).where(Note.link_id == link.id).order_by(Note.id),
        )
        return list(result.scalars().all())

    # --- Writes ---

    async def create(self, db: AsyncSession, user_id: int, data: LinkCreate) -> Link:
        """
        Create a link with its tags and lists.

        Duplicate URLs are allowed; use search_duplicate_urls to warn about them.
        """
        link = Link(
            user_id=user_id,
            url=data.url,
            title=data.title,
            description=data.description,
            icon=data.icon,
            is_private=data.is_private,
            status=data.status.value,
            check_disabled=data.check_disabled,
        )
        link.tags = await get_or_create_tags(db, user_id, data.tags)
        link.lists = await get_or_create_lists(db, user_id, data.lists)
        db.add(link)
        await db.flush()
        await db.refresh(link)
        await db.refresh(link, attribute_names=["tags", "lists"])
        return link

    async def update(
        self,
        db: AsyncSession,
        link: Link,
        data: LinkUpdate,
        user_id: int | None = None,
    ) -> Link:
        """
        Apply the fields set on data and record a revision per changed field.

        Tag and list changes are recorded under REV_TAGS_NAME / REV_LISTS_NAME
        with comma-joined names.

        Args:
            db: Database session.
            link: The link to update.
            data: Fields to change; unset fields are left alone.
            user_id: User making the change, stored on the revisions.

        Returns:
            The refreshed link.
        """
        update_data = data.model_dump(exclude_unset=True)
        new_tags = update_data.pop("tags", None)
        new_lists = update_data.pop("lists", None)

        # Relations must be loaded before they can be compared or replaced
        await db.refresh(link, attribute_names=["tags", "lists"])

        changes: dict[str, tuple] = {}
        for field, value in update_data.items():
            if value is None and field not in ("description", "icon"):
                continue
            if field == "status":
                value = int(value)
            if field in REVISIONABLE_FIELDS:
                changes[field] = (getattr(link, field), value)
            setattr(link, field, value)

        if new_tags is not None:
            old_names = _join_names(link.tags)
            link.tags = await get_or_create_tags(db, link.user_id, new_tags)
            changes[REV_TAGS_NAME] = (old_names, _join_names(link.tags))
        if new_lists is not None:
            old_names = _join_names(link.lists)
            link.lists = await get_or_create_lists(db, link.user_id, new_lists)
            changes[REV_LISTS_NAME] = (old_names, _join_names(link.lists))

        link.updated_at = func.clock_timestamp()
        await db.flush()
        await self.revisions.record_changes(db, link, changes, user_id=user_id)
        await db.refresh(link)
        await db.refresh(link, attribute_names=["tags", "lists"])
        return link

    async def soft_delete(self, db: AsyncSession, link: Link) -> Link:
        """Move a link to the trash. Already deleted links are left as they are."""
        if link.deleted_at is None:
            link.deleted_at = func.now()
            await db.flush()
            await db.refresh(link)
        return link

    async def restore(self, db: AsyncSession, link: Link) -> Link:
        """
        Take a link out of the trash.

        Raises:
            InvalidStateError: If the link is not deleted.
        """
        if link.deleted_at is None:
            raise InvalidStateError("Link is not deleted")
        link.deleted_at = None
        await db.flush()
        await db.refresh(link)
        return link

    async def delete_permanently(self, db: AsyncSession, link: Link) -> None:
        """Remove a link, its revisions and notes from the database."""
        await self.revisions.delete_link_revisions(db, link.id)
        await db.delete(link)
        await db.flush()

    # --- Queries on URLs ---

    async def url_has_changed(self, db: AsyncSession, link_id: int, new_url: str) -> bool:
        """
        Check whether new_url differs from the stored URL of a link.

        A link that does not exist counts as changed.
        """
        result = await db.execute(select(Link.url).where(Link.id == link_id))
        old_url = result.scalar_one_or_none()
        return old_url != new_url

    async def search_duplicate_urls(
        self,
        db: AsyncSession,
        link: Link,
        user_id: int | None = None,
    ) -> list[Link]:
        """
        Find stored links whose URL looks like a duplicate of link.url.

        Candidates are pre-filtered in SQL with a LIKE on the host of link.url
        and then matched in memory with find_duplicates. A stored URL does not
        always contain its comparison key (``:080`` is keyed as ``:80``), but
        it always contains its host. Links in the trash are ignored. The link
        itself is included when it is stored.

        Args:
            db: Database session.
            link: Link whose URL is checked.
            user_id: If given, only search this user's links.

        Returns:
            Matching links ordered by ID. Empty if the URL has no host.
        """
        key = normalize_url(link.url)
        host = url_host(link.url)
        if key is None or host is None:
            return []

        query = (
            select(Link)
            .where(
                _comparable_url().like(contains_pattern(host), escape="\\"),
                Link.deleted_at.is_(None),
            )
            .order_by(Link.id)
        )
        if user_id is not None:
            query = self.by_user(query, user_id)

        result = await db.execute(query)
        candidates = result.scalars().all()
        return find_duplicates(key, ((candidate, candidate.url) for candidate in candidates))

    # --- Archive backups ---

    async def initiate_archive_backup(
        self,
        db: AsyncSession,
        link: Link,
        queue: ArchiveJobQueue,
    ) -> bool:
        """
        Submit an Internet Archive backup job if the settings allow it.

        Backups must be enabled, and for private links private backups must be
        enabled too. Submission is fire-and-forget.

        Returns:
            True if a job was submitted.
        """
        flags = await get_archive_flags(db)
        if not should_archive(flags.backups_enabled, flags.private_backups_enabled, link.is_private):
            logger.debug("Archive backup skipped for link %s", link.id)
            return False

        queue.submit(link.id, link.url)
        logger.info("Archive backup submitted for link %s", link.id)
        return True


# Singleton instance for use throughout the application
link_service = LinkService()
