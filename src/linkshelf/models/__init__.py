"""SQLAlchemy models."""
from linkshelf.models.base import Base, TimestampMixin
from linkshelf.models.tag import Tag, link_tags  # Must be before link due to import
from linkshelf.models.link_list import LinkList, link_lists
from linkshelf.models.link import Link, LinkDisplayMode, LinkStatus
from linkshelf.models.link_revision import REV_LISTS_NAME, REV_TAGS_NAME, LinkRevision
from linkshelf.models.note import Note
from linkshelf.models.setting import Setting
from linkshelf.models.user import User

__all__ = [
    "REV_LISTS_NAME",
    "REV_TAGS_NAME",
    "Base",
    "Link",
    "LinkDisplayMode",
    "LinkList",
    "LinkRevision",
    "LinkStatus",
    "Note",
    "Setting",
    "Tag",
    "TimestampMixin",
    "User",
    "link_lists",
    "link_tags",
]
