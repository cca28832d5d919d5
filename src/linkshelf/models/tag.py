"""Tag model and the link/tag junction table."""
from typing import TYPE_CHECKING

from sqlalchemy import Column, ForeignKey, Index, String, Table, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from linkshelf.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from linkshelf.models.link import Link


# Junction table for many-to-many relationship between links and tags
link_tags = Table(
    "link_tags",
    Base.metadata,
    Column("link_id", ForeignKey("links.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
    # Composite PK already indexes link_id first
    Index("ix_link_tags_tag_id", "tag_id"),
)


class Tag(Base, TimestampMixin):
    """Tag model - unique name per user."""

    __tablename__ = "tags"
    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_tags_user_id_name"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_private: Mapped[bool] = mapped_column(default=False)

    links: Mapped[list["Link"]] = relationship(
        secondary=link_tags,
        back_populates="tags",
    )
