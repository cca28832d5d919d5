"""
URL comparison keys and duplicate detection.

A comparison key is the authority and path of a URL: optional user info,
host, optional port and path. Scheme, query string and fragment are
dropped, as are leading and trailing slashes, so that
``http://example.com/path/`` and ``https://example.com/path?page=2`` share
the key ``example.com/path``.

URLs without a host (empty strings, bare words, scheme-less strings such as
``example.com/path``) have no key and never take part in duplicate
matching. A key is therefore not itself a URL: normalizing a key again
yields ``None``.

A key is not always a substring of its URL. The port is written as a
number (``:080`` becomes ``:80``) and tabs and line breaks are dropped. The
host, however, always appears in the URL once DISCARDED_URL_CHARS are
removed from it.
"""
from collections.abc import Iterable
from typing import TypeVar
from urllib.parse import urlsplit

IdT = TypeVar("IdT")

# urlsplit removes these anywhere in a URL before parsing
DISCARDED_URL_CHARS = ("\t", "\r", "\n")


def _host_from_netloc(netloc: str) -> str:
    """Return the host part of a netloc, keeping its original case and IPv6 brackets."""
    host_port = netloc.rpartition("@")[2]
    if host_port.startswith("["):
        return host_port[:host_port.find("]") + 1]
    return host_port.partition(":")[0]


def normalize_url(url: str) -> str | None:
    """
    Build the comparison key of a URL.

    Args:
        url: Any string.

    Returns:
        ``[user[:password]@]host[:port][path]`` with leading/trailing slashes
        stripped, or None if the URL has no host or cannot be parsed.
    """
    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError:
        # Malformed IPv6 literal or non-numeric/out-of-range port
        return None

    host = _host_from_netloc(parts.netloc)
    if not host:
        return None

    auth = parts.username or ""
    if parts.password is not None:
        auth += f":{parts.password}"

    key = f"{auth}@" if auth else ""
    key += host
    if port is not None:
        key += f":{port}"
    key += parts.path
    return key.strip("/")


def find_duplicates(
    candidate_key: str | None,
    existing_urls: Iterable[tuple[IdT, str]],
) -> list[IdT]:
    """
    Return the ids of stored URLs whose comparison key contains candidate_key.

    Matching is a plain substring test, so a key also matches longer paths
    below it (``ex.com/a`` matches ``ex.com/a/b``). Stored URLs without a key
    are skipped. Input order is preserved.

    Args:
        candidate_key: Key of the new URL, as returned by normalize_url.
        existing_urls: (id, raw_url) pairs to compare against.

    Returns:
        Matching ids, in input order. Empty if candidate_key is None.
    """
    if candidate_key is None:
        return []

    matches = []
    for item_id, raw_url in existing_urls:
        key = normalize_url(raw_url)
        if key is not None and candidate_key in key:
            matches.append(item_id)
    return matches


def url_host(url: str) -> str | None:
    """Return the host of a URL as written, or None if it has none."""
    try:
        netloc = urlsplit(url).netloc
    except ValueError:
        return None
    return _host_from_netloc(netloc) or None
