"""Note model - free text attached to a single link."""
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from linkshelf.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from linkshelf.models.link import Link


class Note(Base, TimestampMixin):
    """Note model."""

    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
    )
    link_id: Mapped[int] = mapped_column(
        ForeignKey("links.id", ondelete="CASCADE"),
        index=True,
    )
    note: Mapped[str] = mapped_column(Text, nullable=False)
    is_private: Mapped[bool] = mapped_column(default=False)

    link: Mapped["Link"] = relationship(back_populates="notes")
