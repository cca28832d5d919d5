"""LinkRevision model - one changed field of a link per row."""
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from linkshelf.models.base import Base

if TYPE_CHECKING:
    from linkshelf.models.link import Link

# Keys used for relation changes, which have no column of their own
REV_TAGS_NAME = "revtags"
REV_LISTS_NAME = "revlists"


class LinkRevision(Base):
    """
    Revision history entry for a link.

    Each row stores the old and new value of a single field as text.
    Relation changes (tags, lists) are stored under REV_TAGS_NAME and
    REV_LISTS_NAME with comma-joined names. Rows are immutable.
    """

    __tablename__ = "link_revisions"
    __table_args__ = (
        Index("ix_link_revisions_link_id_created_at", "link_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    link_id: Mapped[int] = mapped_column(
        ForeignKey("links.id", ondelete="CASCADE"),
        nullable=False,
    )
    # User who made the change; None for system changes (e.g. link checks)
    user_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    key: Mapped[str] = mapped_column(String(100), nullable=False)
    old_value: Mapped[str | None] = mapped_column(Text, nullable=True)
    new_value: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.clock_timestamp(),
        nullable=False,
    )

    link: Mapped["Link"] = relationship(back_populates="revisions")
