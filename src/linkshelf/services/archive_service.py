"""
Internet Archive backups of links.

Holds the dispatch rule deciding whether a link is submitted for archiving,
the job-queue interface a host application implements, and the job body
that asks the Wayback Machine to save a page.
"""
import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from linkshelf.core.config import get_settings

logger = logging.getLogger(__name__)

USER_AGENT = 'Mozilla/5.0 (compatible; linkshelf/1.0)'


class ArchiveJobQueue(Protocol):
    """
    Asynchronous job submission interface.

    Implementations enqueue the job and return immediately. Retries, timeouts
    and failure reporting belong to the queue, not to the caller.
    """

    def submit(self, link_id: int, url: str) -> None:
        """Enqueue an archive job for the given link."""
        ...


def should_archive(global_enabled: bool, private_enabled: bool, is_private: bool) -> bool:
    """
    Decide whether a link's archive backup should be submitted.

    Args:
        global_enabled: Internet Archive backups are enabled at all.
        private_enabled: Backups of private links are enabled too.
        is_private: The link is private.

    Returns:
        False when backups are disabled, or when the link is private and
        private backups are disabled. True otherwise.
    """
    if not global_enabled:
        return False
    if is_private and not private_enabled:
        return False
    return True


@dataclass
class ArchiveResult:
    """Outcome of a Wayback Machine save request."""

    url: str
    archive_url: str | None
    status_code: int | None
    error: str | None

    @property
    def ok(self) -> bool:
        """True if the archive accepted the page."""
        return self.error is None


async def save_to_wayback_machine(
    url: str,
    timeout: float | None = None,  # noqa: ASYNC109
    save_url: str | None = None,
) -> ArchiveResult:
    """
    Ask the Wayback Machine to save a snapshot of url.

    This is the job body run by a worker after dispatch. Failures are reported
    in the result instead of raised, so a worker can log and move on.

    Args:
        url: The page to archive.
        timeout: Request timeout in seconds. Defaults to settings.
        save_url: Save endpoint prefix. Defaults to settings.

    Returns:
        ArchiveResult with the snapshot location when available.
    """
    settings = get_settings()
    timeout = settings.archive_request_timeout if timeout is None else timeout
    save_url = settings.wayback_save_url if save_url is None else save_url

    try:
        async with httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            headers={'User-Agent': USER_AGENT},
        ) as client:
            response = await client.get(f"{save_url}{url}")
    except httpx.TimeoutException:
        logger.warning("Archive request timed out for %s", url)
        return ArchiveResult(url=url, archive_url=None, status_code=None, error='Request timed out')
    except httpx.RequestError as e:
        logger.warning("Archive request failed for %s: %s", url, e)
        return ArchiveResult(
            url=url, archive_url=None, status_code=None, error=f'Request failed: {e}',
        )

    if not response.is_success:
        logger.warning("Archive rejected %s with HTTP %s", url, response.status_code)
        return ArchiveResult(
            url=url,
            archive_url=None,
            status_code=response.status_code,
            error=f'HTTP {response.status_code}',
        )

    # The save endpoint points at the new snapshot via Content-Location,
    # otherwise the redirect target is the snapshot itself
    location = response.headers.get('content-location')
    if location:
        archive_url = str(response.url.join(location))
    else:
        archive_url = str(response.url)
    logger.info("Archived %s at %s", url, archive_url)
    return ArchiveResult(
        url=url, archive_url=archive_url, status_code=response.status_code, error=None,
    )
