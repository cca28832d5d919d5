"""Link model for storing user bookmarks."""
from datetime import datetime
from enum import IntEnum
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from linkshelf.models.base import Base, TimestampMixin
from linkshelf.models.link_list import link_lists
from linkshelf.models.tag import link_tags

if TYPE_CHECKING:
    from linkshelf.models.link_list import LinkList
    from linkshelf.models.link_revision import LinkRevision
    from linkshelf.models.note import Note
    from linkshelf.models.tag import Tag
    from linkshelf.models.user import User


class LinkStatus(IntEnum):
    """Result of the last reachability check of a link."""

    OK = 1
    MOVED = 2
    BROKEN = 3


class LinkDisplayMode(IntEnum):
    """How link listings are displayed."""

    LIST_DETAILED = 0
    CARDS = 1
    LIST_SIMPLE = 2


class Link(Base, TimestampMixin):
    """Link model - stores a URL with metadata, tags, lists and notes."""

    __tablename__ = "links"
    __table_args__ = (
        # Serves list_for_user: one user's links outside the trash, newest first
        Index(
            "ix_links_user_created_active",
            "user_id",
            "created_at",
            postgresql_where=text("deleted_at IS NULL"),
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
    )
    url: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    icon: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_private: Mapped[bool] = mapped_column(default=False)
    # Stored as the integer value of LinkStatus
    status: Mapped[int] = mapped_column(default=LinkStatus.OK.value)
    check_disabled: Mapped[bool] = mapped_column(default=False)

    # Soft delete timestamp - links in the trash have this set
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None, index=True,
    )

    user: Mapped["User"] = relationship(back_populates="links")
    tags: Mapped[list["Tag"]] = relationship(
        secondary=link_tags,
        back_populates="links",
        order_by="Tag.name",
        passive_deletes=True,
    )
    lists: Mapped[list["LinkList"]] = relationship(
        secondary=link_lists,
        back_populates="links",
        order_by="LinkList.name",
        passive_deletes=True,
    )
    notes: Mapped[list["Note"]] = relationship(
        back_populates="link",
        cascade="all, delete-orphan",
        order_by="Note.id",
        passive_deletes=True,
    )
    revisions: Mapped[list["LinkRevision"]] = relationship(
        back_populates="link",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def is_deleted(self) -> bool:
        """True while the link sits in the trash."""
        return self.deleted_at is not None
