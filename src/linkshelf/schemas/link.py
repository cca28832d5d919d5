"""Pydantic schemas for link create/update data."""
from pydantic import BaseModel, Field, field_validator

from linkshelf.models.link import LinkStatus


def normalize_names(names: list[str]) -> list[str]:
    """
    Normalize a list of tag or list names.

    Names are trimmed, empty names are dropped and duplicates removed while
    keeping the first occurrence.

    Raises:
        ValueError: If a name contains a comma (names are joined with commas
            for input fields and revisions).
    """
    normalized: list[str] = []
    for name in names:
        trimmed = name.strip()
        if not trimmed:
            continue
        if "," in trimmed:
            raise ValueError(f"Name cannot contain a comma: '{trimmed}'")
        if trimmed not in normalized:
            normalized.append(trimmed)
    return normalized


def validate_url(value: str) -> str:
    """Trim the URL and reject empty values. Unparseable URLs are allowed."""
    value = value.strip()
    if not value:
        raise ValueError("URL cannot be empty")
    return value


class LinkCreate(BaseModel):
    """Schema for creating a new link."""

    url: str
    title: str = Field(max_length=500)
    description: str | None = None
    icon: str | None = Field(default=None, max_length=100)
    is_private: bool = False
    status: LinkStatus = LinkStatus.OK
    check_disabled: bool = False
    tags: list[str] = []
    lists: list[str] = []

    @field_validator("url")
    @classmethod
    def check_url(cls, v: str) -> str:
        """Trim and require a URL."""
        return validate_url(v)

    @field_validator("tags", "lists", mode="before")
    @classmethod
    def check_names(cls, v: list[str] | None) -> list[str]:
        """Normalize tag and list names."""
        if v is None:
            return []
        return normalize_names(v)


class LinkUpdate(BaseModel):
    """Schema for updating a link. Only fields that are set are applied."""

    url: str | None = None
    title: str | None = Field(default=None, max_length=500)
    description: str | None = None
    icon: str | None = Field(default=None, max_length=100)
    is_private: bool | None = None
    status: LinkStatus | None = None
    check_disabled: bool | None = None
    tags: list[str] | None = None
    lists: list[str] | None = None

    @field_validator("url")
    @classmethod
    def check_url(cls, v: str | None) -> str | None:
        """Trim and require a URL when given."""
        if v is None:
            return None
        return validate_url(v)

    @field_validator("tags", "lists", mode="before")
    @classmethod
    def check_names(cls, v: list[str] | None) -> list[str] | None:
        """Normalize tag and list names when given."""
        if v is None:
            return None
        return normalize_names(v)
