"""LinkList model and the link/list junction table."""
from typing import TYPE_CHECKING

from sqlalchemy import Column, ForeignKey, Index, String, Table, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from linkshelf.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from linkshelf.models.link import Link


link_lists = Table(
    "link_lists",
    Base.metadata,
    Column("link_id", ForeignKey("links.id", ondelete="CASCADE"), primary_key=True),
    Column("list_id", ForeignKey("lists.id", ondelete="CASCADE"), primary_key=True),
    Index("ix_link_lists_list_id", "list_id"),
)


class LinkList(Base, TimestampMixin):
    """User-curated list of links."""

    __tablename__ = "lists"
    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_lists_user_id_name"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_private: Mapped[bool] = mapped_column(default=False)

    links: Mapped[list["Link"]] = relationship(
        secondary=link_lists,
        back_populates="lists",
    )
