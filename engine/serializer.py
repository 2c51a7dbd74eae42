from datetime import datetime, timezone
from typing import List, Optional
from feedgen.feed import FeedGenerator
from icalendar import Calendar, Event
from core.config import Settings
from core.errors import SerializationError
from core.logger import setup_logger
from engine.locales import labels_for
from schema.models import CalendarItem, NewsItem

logger = setup_logger("Serializer")

CALENDAR_NAME = "Swiss Tchoukball"
PRODUCT_ID = "-//Swiss Tchoukball//Feeds//EN"
AUTHOR = {"name": "Swiss Tchoukball", "email": "info@tchoukball.ch"}
CATEGORIES = ("Sports", "Tchoukball")


# --- 1. ICS ---

def _check_calendar_item(item: CalendarItem) -> None:
    if not item.uid or not item.title:
        raise SerializationError(f"Event {item.uid!r} has no uid or title")
    if isinstance(item.start, datetime) != isinstance(item.end, datetime):
        raise SerializationError(f"Event {item.uid} mixes a date and a date-time for start and end")
    if isinstance(item.start, datetime) and item.start.tzinfo is None:
        raise SerializationError(f"Event {item.uid} has a start without timezone")
    if item.end < item.start:
        raise SerializationError(f"Event {item.uid} ends before it starts")


def _utc(value):
    if isinstance(value, datetime):
        return value.astimezone(timezone.utc)
    return value


def _vevent(item: CalendarItem) -> Event:
    event = Event()
    event.add("uid", item.uid)
    event.add("dtstamp", _utc(item.stamp))
    event.add("summary", item.title)
    event.add("dtstart", _utc(item.start))
    event.add("dtend", _utc(item.end))
    if item.description:
        event.add("description", item.description)
    if item.location:
        event.add("location", item.location)
    if item.url:
        event.add("url", item.url)
    event.add("status", item.status)
    event.add("class", item.classification)
    return event


def render_calendar(items: List[CalendarItem]) -> str:
    """
    Renders the VCALENDAR for one locale.

    Raises SerializationError on the first item that cannot be expressed,
    so that nothing is written for a broken batch.
    """
    if not items:
        logger.warning("⚠️ No events!")

    calendar = Calendar()
    calendar.add("prodid", PRODUCT_ID)
    calendar.add("version", "2.0")
    calendar.add("calscale", "GREGORIAN")
    calendar.add("method", "PUBLISH")
    calendar.add("x-wr-calname", CALENDAR_NAME)

    try:
        for item in items:
            _check_calendar_item(item)
            calendar.add_component(_vevent(item))
        return calendar.to_ical().decode("utf-8")
    except SerializationError:
        logger.error("❌ Couldn't create ICS events")
        raise
    except (TypeError, ValueError) as e:
        logger.error(f"❌ Couldn't create ICS events: {e}")
        raise SerializationError(f"Couldn't create ICS events: {e}") from e


# --- 2. RSS ---

def render_news_feed(items: List[NewsItem], locale: str, settings: Settings,
                     now: Optional[datetime] = None) -> str:
    """Builds the RSS 2.0 channel for one locale, items kept in the given order."""
    now = now or datetime.now(timezone.utc)
    labels = labels_for(locale)
    website = settings.WEBSITE_BASE_URL

    if not items:
        logger.warning(f"⚠️ No posts for {locale}!")

    feed = FeedGenerator()
    feed.id(website)
    feed.title(CALENDAR_NAME)
    feed.description(labels.feed_description)
    feed.link(href=f"{website}/news", rel="alternate")
    feed.language(locale)
    feed.image(url=f"{website}/images/og-swiss-tchoukball.jpg", title=CALENDAR_NAME, link=f"{website}/news")
    feed.icon(f"{website}/favicon.ico")
    feed.copyright(f"© {now.year} Swiss Tchoukball, {labels.rights_reserved}")
    feed.author(dict(AUTHOR))
    feed.category([{"term": term} for term in CATEGORIES])

    try:
        for item in items:
            entry = feed.add_entry(order="append")
            entry.guid(item.id, permalink=True)
            entry.title(item.title)
            entry.link(href=item.link)
            entry.description(item.content)
            entry.content(item.content, type="CDATA")
            entry.author(dict(AUTHOR))
            entry.pubDate(item.published)
            if item.enclosure:
                entry.enclosure(item.enclosure.url, str(item.enclosure.length), item.enclosure.type)

        feed.lastBuildDate(max(item.published for item in items) if items else now)
        return feed.rss_str(pretty=True).decode("utf-8")
    except ValueError as e:
        logger.error(f"❌ Couldn't create RSS feed: {e}")
        raise SerializationError(f"Couldn't create RSS feed for {locale}: {e}") from e
