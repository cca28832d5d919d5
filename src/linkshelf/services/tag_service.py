"""Service layer for tag and list lookups shared by link operations."""
from typing import TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from linkshelf.models.link_list import LinkList
from linkshelf.models.tag import Tag

NamedT = TypeVar("NamedT", Tag, LinkList)


async def _get_or_create(
    db: AsyncSession,
    model: type[NamedT],
    user_id: int,
    names: list[str],
) -> list[NamedT]:
    if not names:
        return []

    result = await db.execute(
        select(model).where(
            model.user_id == user_id,
            model.name.in_(names),
        ),
    )
    existing = {item.name: item for item in result.scalars()}

    items = []
    for name in names:
        if name in existing:
            items.append(existing[name])
        else:
            new_item = model(user_id=user_id, name=name)
            db.add(new_item)
            existing[name] = new_item
            items.append(new_item)

    await db.flush()
    return items


async def get_or_create_tags(db: AsyncSession, user_id: int, tag_names: list[str]) -> list[Tag]:
    """
    Get existing tags or create new ones.

    Args:
        db: Database session.
        user_id: User ID to scope tags.
        tag_names: Normalized tag names (see schemas.link.normalize_names).

    Returns:
        Tag objects in the order of tag_names.
    """
    return await _get_or_create(db, Tag, user_id, tag_names)


async def get_or_create_lists(
    db: AsyncSession,
    user_id: int,
    list_names: list[str],
) -> list[LinkList]:
    """Get existing lists or create new ones, in the order of list_names."""
    return await _get_or_create(db, LinkList, user_id, list_names)
