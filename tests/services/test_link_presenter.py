"""Tests for link display helpers."""
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import pytest

from linkshelf.models.link import Link, LinkStatus
from linkshelf.services.link_presenter import (
    LinkIcon,
    domain_of_url,
    format_datetime,
    format_relative,
    limit_text,
    link_icon,
    names_for_input,
    render_added_at,
    render_icon,
    short_title,
    short_url,
)

NOW = datetime(2024, 5, 10, 12, 0, 0, tzinfo=UTC)


@dataclass
class Named:
    name: str


def make_link(**kwargs: object) -> Link:
    """Build an unsaved link with sensible defaults."""
    defaults = {'user_id': 1, 'url': 'https://example.com', 'title': 'Example', 'status': 1}
    defaults.update(kwargs)
    return Link(**defaults)


class TestTruncation:
    """Tests for limit_text, short_url and short_title."""

    def test__limit_text__short_value_unchanged(self) -> None:
        assert limit_text('abc', 3) == 'abc'

    def test__limit_text__cuts_and_appends_end(self) -> None:
        assert limit_text('abcdef', 3) == 'abc...'

    def test__limit_text__trims_trailing_space_before_end(self) -> None:
        assert limit_text('abc def', 4) == 'abc...'

    def test__short_url__strips_slashes(self) -> None:
        """Leading and trailing slashes are removed before cutting."""
        assert short_url('https://example.com/path/') == 'https://example.com/path'

    def test__short_url__default_limit_is_50(self) -> None:
        url = 'https://example.com/' + 'a' * 100
        assert short_url(url) == url[:50] + '...'

    def test__short_title__custom_length(self) -> None:
        assert short_title('A rather long title', 8) == 'A rather...'
        assert short_title('Short') == 'Short'


class TestDomainOfUrl:
    """Tests for domain_of_url."""

    def test__domain_of_url__host(self) -> None:
        assert domain_of_url('https://sub.example.com/path?q=1') == 'sub.example.com'

    def test__domain_of_url__no_host_falls_back_to_short_url(self) -> None:
        """Without host, the URL itself is shown cut to 20 characters."""
        assert domain_of_url('/not/an/absolute/url/at/all') == 'not/an/absolute/url/...'


class TestNamesForInput:
    """Tests for names_for_input."""

    def test__names_for_input__empty_is_none(self) -> None:
        assert names_for_input([]) is None

    def test__names_for_input__comma_joined(self) -> None:
        assert names_for_input([Named('python'), Named('web dev')]) == 'python,web dev'


class TestLinkIcon:
    """Tests for link_icon and render_icon."""

    def test__link_icon__no_icon(self) -> None:
        """Links without icon get none, even when broken."""
        assert link_icon(None, LinkStatus.BROKEN) is None

    def test__link_icon__ok_status_keeps_icon(self) -> None:
        assert link_icon('fa fa-link', LinkStatus.OK) == LinkIcon(css_classes='fa-fw fa fa-link')

    @pytest.mark.parametrize(
        ('status', 'css_classes', 'title'),
        [
            (LinkStatus.MOVED, 'fa-fw fa fa-external-link-alt text-warning', 'Moved'),
            (LinkStatus.BROKEN, 'fa-fw fa fa-unlink text-danger', 'Broken'),
        ],
    )
    def test__link_icon__status_overrides(
        self, status: LinkStatus, css_classes: str, title: str,
    ) -> None:
        """Moved and broken links show a status icon with a title."""
        assert link_icon('fa fa-link', status) == LinkIcon(css_classes=css_classes, title=title)

    def test__link_icon__additional_classes(self) -> None:
        icon = link_icon('fa fa-link', LinkStatus.OK, 'mr-1')
        assert icon is not None
        assert icon.css_classes == 'fa-fw fa fa-link mr-1'

    def test__render_icon__without_title(self) -> None:
        link = make_link(icon='fa fa-link')
        assert render_icon(link) == '<i class="fa-fw fa fa-link"></i>'

    def test__render_icon__with_title(self) -> None:
        link = make_link(icon='fa fa-link', status=LinkStatus.BROKEN.value)
        assert render_icon(link, 'mr-1') == (
            '<i class="fa-fw fa fa-unlink text-danger mr-1" title="Broken"></i>'
        )

    def test__render_icon__no_icon_is_empty(self) -> None:
        assert render_icon(make_link(icon=None)) == ''

    def test__render_icon__escapes_markup(self) -> None:
        """Icon values are escaped."""
        link = make_link(icon='"><script>')
        assert '<script>' not in render_icon(link)


class TestDatetimeFormatting:
    """Tests for format_relative, format_datetime and render_added_at."""

    @pytest.mark.parametrize(
        ('delta', 'expected'),
        [
            (timedelta(0), 'just now'),
            (timedelta(seconds=1), '1 second ago'),
            (timedelta(minutes=5), '5 minutes ago'),
            (timedelta(hours=1, minutes=59), '1 hour ago'),
            (timedelta(days=3), '3 days ago'),
            (timedelta(days=14), '2 weeks ago'),
            (timedelta(days=65), '2 months ago'),
            (timedelta(days=800), '2 years ago'),
            (timedelta(hours=-2), 'in 2 hours'),
        ],
    )
    def test__format_relative(self, delta: timedelta, expected: str) -> None:
        assert format_relative(NOW - delta, now=NOW) == expected

    def test__format_relative__naive_datetimes_are_utc(self) -> None:
        naive = datetime(2024, 5, 10, 11, 0, 0)
        assert format_relative(naive, now=NOW) == '1 hour ago'

    def test__format_datetime__absolute(self) -> None:
        assert format_datetime(datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)) == '2024-01-02 03:04'

    def test__format_datetime__relative(self) -> None:
        assert format_datetime(NOW - timedelta(days=1), relative=True, now=NOW) == '1 day ago'

    def test__render_added_at(self) -> None:
        link = make_link(created_at=datetime(2024, 5, 7, 12, 0, 0, tzinfo=UTC))
        assert render_added_at(link, now=NOW) == (
            '<time-ago class="cursor-help" datetime="2024-05-07T12:00:00+00:00" '
            'title="2024-05-07 12:00">3 days ago</time-ago>'
        )
