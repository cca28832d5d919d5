"""
Display helpers for links.

Plain-data helpers (truncated titles and URLs, icon classes, relative times)
plus small Jinja2 templates that turn them into HTML fragments.
"""
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

from jinja2 import Environment

from linkshelf.models.link import Link, LinkStatus
from linkshelf.services.duplicates import url_host

DEFAULT_LIMIT = 50

STATUS_LABELS = {
    LinkStatus.OK: "OK",
    LinkStatus.MOVED: "Moved",
    LinkStatus.BROKEN: "Broken",
}

# Icons replacing the link's own icon when a check found a problem
STATUS_ICONS = {
    LinkStatus.MOVED: "fa fa-external-link-alt text-warning",
    LinkStatus.BROKEN: "fa fa-unlink text-danger",
}

DATETIME_FORMAT = "%Y-%m-%d %H:%M"

_TIME_UNITS = (
    ("year", 365 * 24 * 3600),
    ("month", 30 * 24 * 3600),
    ("week", 7 * 24 * 3600),
    ("day", 24 * 3600),
    ("hour", 3600),
    ("minute", 60),
    ("second", 1),
)

_jinja_env = Environment(autoescape=True)

_icon_template = _jinja_env.from_string(
    '<i class="{{ icon.css_classes }}"'
    '{% if icon.title %} title="{{ icon.title }}"{% endif %}></i>',
)

_added_at_template = _jinja_env.from_string(
    '<time-ago class="cursor-help" datetime="{{ iso }}" title="{{ absolute }}">'
    '{{ relative }}</time-ago>',
)


class Named(Protocol):
    """Anything with a name, e.g. a Tag or LinkList."""

    name: str


@dataclass(frozen=True)
class LinkIcon:
    """Icon of a link as plain data."""

    css_classes: str
    title: str | None = None


def limit_text(value: str, limit: int = DEFAULT_LIMIT, end: str = "...") -> str:
    """Cut value to limit characters, right-trimmed, and append end if anything was cut."""
    if len(value) <= limit:
        return value
    return value[:limit].rstrip() + end


def short_url(url: str, limit: int = DEFAULT_LIMIT) -> str:
    """URL without leading/trailing slashes, cut to limit characters."""
    return limit_text(url.strip("/"), limit)


def short_title(title: str, max_length: int = DEFAULT_LIMIT) -> str:
    """Title cut to max_length characters."""
    return limit_text(title, max_length)


def domain_of_url(url: str) -> str:
    """Host of the URL, or a short form of the URL when it has no host."""
    return url_host(url) or short_url(url, 20)


def names_for_input(items: list[Named]) -> str | None:
    """Comma-joined names for a text input, or None when there are none."""
    if not items:
        return None
    return ",".join(item.name for item in items)


def link_icon(
    icon: str | None,
    status: int,
    additional_classes: str | None = None,
) -> LinkIcon | None:
    """
    Build the icon of a link.

    Moved and broken links show a status icon with a title instead of their
    own icon.

    Returns:
        The icon, or None when the link has no icon at all.
    """
    if icon is None:
        return None

    title = None
    if status in STATUS_ICONS:
        link_status = LinkStatus(status)
        icon = STATUS_ICONS[link_status]
        title = STATUS_LABELS[link_status]

    css_classes = f"fa-fw {icon}"
    if additional_classes:
        css_classes += f" {additional_classes}"
    return LinkIcon(css_classes=css_classes, title=title)


def render_icon(link: Link, additional_classes: str | None = None) -> str:
    """Render the icon of a link as an <i> element, or '' if it has none."""
    icon = link_icon(link.icon, link.status, additional_classes)
    if icon is None:
        return ""
    return _icon_template.render(icon=icon)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def format_relative(value: datetime, now: datetime | None = None) -> str:
    """Human readable distance to now, e.g. '3 days ago' or 'in 2 hours'."""
    now = _as_utc(now or datetime.now(UTC))
    delta = (now - _as_utc(value)).total_seconds()
    seconds = abs(int(delta))
    if seconds == 0:
        return "just now"

    for unit, size in _TIME_UNITS:
        if seconds >= size:
            count = seconds // size
            break
    label = f"{count} {unit}{'' if count == 1 else 's'}"
    return f"{label} ago" if delta > 0 else f"in {label}"


def format_datetime(
    value: datetime,
    relative: bool = False,
    now: datetime | None = None,
) -> str:
    """Format a timestamp, either absolute or relative to now."""
    if relative:
        return format_relative(value, now)
    return _as_utc(value).strftime(DATETIME_FORMAT)


def render_added_at(link: Link, now: datetime | None = None) -> str:
    """Render the creation time of a link as a <time-ago> element."""
    created_at = _as_utc(link.created_at)
    return _added_at_template.render(
        iso=created_at.isoformat(timespec="seconds"),
        absolute=format_datetime(created_at),
        relative=format_datetime(created_at, relative=True, now=now),
    )
