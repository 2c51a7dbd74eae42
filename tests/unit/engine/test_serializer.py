"""Unit tests for ICS and RSS rendering."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest
from icalendar import Calendar

from core.config import Settings
from core.errors import SerializationError
from engine.serializer import render_calendar, render_news_feed
from schema.models import CalendarItem, Enclosure, NewsItem

STAMP = datetime(2024, 1, 1, tzinfo=timezone.utc)
NOW = datetime(2025, 6, 1, tzinfo=timezone.utc)
CONTENT_NS = "{http://purl.org/rss/1.0/modules/content/}"


def _calendar_item(**overrides) -> CalendarItem:
    values = {
        "uid": "event-1@tchoukball.ch",
        "title": "Tournoi",
        "start": date(2024, 3, 1),
        "end": date(2024, 3, 2),
        "stamp": STAMP,
    }
    values.update(overrides)
    return CalendarItem(**values)


def _news_item(index: int, **overrides) -> NewsItem:
    values = {
        "id": f"https://tchoukball.ch/news/{index}",
        "link": f"https://tchoukball.ch/news/{index}",
        "title": f"Post {index}",
        "content": "<p>Body</p>",
        "published": datetime(2024, 2, index, tzinfo=timezone.utc),
    }
    values.update(overrides)
    return NewsItem(**values)


def _channel(document: str) -> ET.Element:
    return ET.fromstring(document.encode("utf-8")).find("channel")


def test_full_day_event_renders_dates() -> None:
    """Full-day events should round-trip as plain dates."""
    document = render_calendar([_calendar_item(location="Salle\nRue 1", url="https://tchoukball.ch/e/1")])

    event = Calendar.from_ical(document).walk("VEVENT")[0]
    assert "X-WR-CALNAME:Swiss Tchoukball" in document
    assert event.decoded("DTSTART") == date(2024, 3, 1)
    assert event.decoded("DTEND") == date(2024, 3, 2)
    assert str(event["UID"]) == "event-1@tchoukball.ch"
    assert str(event["LOCATION"]) == "Salle\nRue 1"
    assert str(event["STATUS"]) == "CONFIRMED"
    assert str(event["CLASS"]) == "PUBLIC"


def test_timed_event_is_written_in_utc() -> None:
    """Local times should be converted to UTC instants."""
    zurich = ZoneInfo("Europe/Zurich")
    item = _calendar_item(
        start=datetime(2024, 3, 1, 10, 0, tzinfo=zurich),
        end=datetime(2024, 3, 1, 12, 0, tzinfo=zurich),
    )

    document = render_calendar([item])

    assert "DTSTART:20240301T090000Z" in document
    assert "DTEND:20240301T110000Z" in document


def test_cancelled_status_is_rendered() -> None:
    """Item status should map to the STATUS property."""
    document = render_calendar([_calendar_item(title="[Annulé] Tournoi", status="CANCELLED")])

    event = Calendar.from_ical(document).walk("VEVENT")[0]
    assert str(event["STATUS"]) == "CANCELLED"
    assert str(event["SUMMARY"]) == "[Annulé] Tournoi"


def test_empty_calendar_is_valid_and_warns(caplog: pytest.LogCaptureFixture) -> None:
    """No items should still produce a calendar, with a warning."""
    with caplog.at_level(logging.WARNING):
        document = render_calendar([])

    assert document.startswith("BEGIN:VCALENDAR")
    assert "BEGIN:VEVENT" not in document
    assert Calendar.from_ical(document).walk("VEVENT") == []
    assert any("No events" in r.getMessage() for r in caplog.records)


def test_mixed_date_and_datetime_is_fatal() -> None:
    """Start and end must share a value type."""
    item = _calendar_item(end=datetime(2024, 3, 2, 10, 0, tzinfo=timezone.utc))

    with pytest.raises(SerializationError):
        render_calendar([_calendar_item(), item])


def test_end_before_start_is_fatal() -> None:
    """Inverted ranges should abort rendering."""
    with pytest.raises(SerializationError):
        render_calendar([_calendar_item(start=date(2024, 3, 5), end=date(2024, 3, 1))])


def test_calendar_rendering_is_deterministic() -> None:
    """The same items should always render the same bytes."""
    items = [_calendar_item(), _calendar_item(uid="event-2@tchoukball.ch", title="Finale")]

    assert render_calendar(items) == render_calendar(items)


def test_news_feed_channel_metadata(settings: Settings) -> None:
    """Channel metadata should follow the locale."""
    channel = _channel(render_news_feed([_news_item(1)], "de", settings, now=NOW))

    assert channel.findtext("title") == "Swiss Tchoukball"
    assert channel.findtext("description") == "News von Swiss Tchoukball"
    assert channel.findtext("link") == "https://tchoukball.ch/news"
    assert channel.findtext("language") == "de"
    assert channel.findtext("copyright") == "© 2025 Swiss Tchoukball, alle Rechte vorbehalten"
    assert channel.find("image/url").text == "https://tchoukball.ch/images/og-swiss-tchoukball.jpg"
    assert [c.text for c in channel.findall("category")] == ["Sports", "Tchoukball"]


def test_news_feed_keeps_item_order(settings: Settings) -> None:
    """Items should appear in the order they were given."""
    items = [_news_item(3), _news_item(1), _news_item(2)]

    channel = _channel(render_news_feed(items, "fr", settings, now=NOW))

    assert [i.findtext("title") for i in channel.findall("item")] == ["Post 3", "Post 1", "Post 2"]
    assert channel.findtext("description") == "Actualités de Swiss Tchoukball"


def test_news_feed_item_enclosure_and_content(settings: Settings) -> None:
    """Enclosures and HTML content should be carried to each item."""
    enclosure = Enclosure(url="https://cms.tchoukball.ch/assets/abc/?width=1400", type="image/jpeg", length=12345)
    item = _news_item(1, enclosure=enclosure, content='<p><img src="x" /></p><p>Body</p>')

    rss_item = _channel(render_news_feed([item], "fr", settings, now=NOW)).find("item")

    assert rss_item.findtext("link") == "https://tchoukball.ch/news/1"
    assert rss_item.findtext("guid") == "https://tchoukball.ch/news/1"
    assert rss_item.find("enclosure").attrib == {
        "url": "https://cms.tchoukball.ch/assets/abc/?width=1400",
        "length": "12345",
        "type": "image/jpeg",
    }
    assert rss_item.findtext(f"{CONTENT_NS}encoded").startswith('<p><img src="x" />')
    assert rss_item.findtext("pubDate").startswith("Thu, 01 Feb 2024")


def test_empty_news_feed_is_valid(settings: Settings, caplog: pytest.LogCaptureFixture) -> None:
    """No posts should give a channel without items, with a warning."""
    with caplog.at_level(logging.WARNING):
        channel = _channel(render_news_feed([], "fr", settings, now=NOW))

    assert channel.findtext("title") == "Swiss Tchoukball"
    assert channel.findall("item") == []
    assert any("No posts" in r.getMessage() for r in caplog.records)


def test_news_feed_is_deterministic_for_same_items(settings: Settings) -> None:
    """Build date should come from the items, not the clock."""
    items = [_news_item(1), _news_item(2)]

    first = render_news_feed(items, "fr", settings, now=NOW)
    second = render_news_feed(items, "fr", settings, now=NOW)

    assert first == second
    assert _channel(first).findtext("lastBuildDate").startswith("Fri, 02 Feb 2024")


def test_empty_news_feed_build_date_follows_now(settings: Settings) -> None:
    """Empty channels should use the supplied time, so reruns are identical."""
    first = render_news_feed([], "de", settings, now=NOW)
    second = render_news_feed([], "de", settings, now=NOW)

    assert first == second
    assert _channel(first).findtext("lastBuildDate").startswith("Sun, 01 Jun 2025")
