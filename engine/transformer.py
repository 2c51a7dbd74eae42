import re
from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional, Sequence, TypeVar
from zoneinfo import ZoneInfo
from core.config import Settings
from core.logger import setup_logger
from engine.locales import labels_for
from schema.models import CalendarItem, DirectusEvent, DirectusNews, Enclosure, NewsItem

logger = setup_logger("Transformer")

TranslationT = TypeVar("TranslationT")

IMAGE_WIDTH = 1400
DEFAULT_IMAGE_TYPE = "image/jpeg"

# XML 1.0 forbids these even when escaped
XML_ILLEGAL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]")


def select_translation(translations: Optional[Sequence[Optional[TranslationT]]], locale: str,
                       fallback: str = "first", default_locale: Optional[str] = None) -> Optional[TranslationT]:
    """
    Picks the translation for `locale`.

    A single translation is always used as is. With several, the exact
    `languages_code` match wins; otherwise `fallback` decides:
      - "first": the first translation of the list
      - "default_locale": the translation in `default_locale`, if any
      - "skip": nothing
    """
    candidates = [t for t in (translations or []) if t is not None]
    if not candidates:
        return None
    if len(candidates) == 1:
        return candidates[0]

    for translation in candidates:
        if translation.languages_code == locale:
            return translation

    if fallback == "first":
        return candidates[0]
    if fallback == "default_locale" and default_locale:
        for translation in candidates:
            if translation.languages_code == default_locale:
                return translation
    return None


def strip_xml_illegal(value: str) -> str:
    return XML_ILLEGAL_CHARS.sub("", value)


def parse_filesize(value: Optional[str]) -> int:
    try:
        return int(value or "0")
    except ValueError:
        return 0


def _as_utc(value: datetime) -> datetime:
    # Directus timestamps without offset are stored in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class FeedTransformer:
    def __init__(self, settings: Settings):
        self.website_base_url = settings.WEBSITE_BASE_URL
        self.cms_base_url = settings.CMS_BASE_URL
        self.tz = ZoneInfo(settings.TIMEZONE)
        self.fallback = settings.TRANSLATION_FALLBACK
        self.default_locale = settings.DEFAULT_LOCALE

    def _translation(self, translations, locale: str):
        return select_translation(translations, locale, self.fallback, self.default_locale)

    # --- Events ---

    def _at(self, day: date, clock: time) -> datetime:
        return datetime.combine(day, time(clock.hour, clock.minute), tzinfo=self.tz)

    def to_calendar_item(self, event: DirectusEvent, locale: str) -> Optional[CalendarItem]:
        if not event.id or not event.translations or not event.date_start:
            return None

        translation = self._translation(event.translations, locale)
        if translation is None or not translation.name:
            return None

        is_cancelled = event.status == "cancelled"
        title = translation.name
        if is_cancelled:
            title = f"[{labels_for(locale).cancelled}] {title}"

        is_full_day = event.time_start is None
        start = event.date_start if is_full_day else self._at(event.date_start, event.time_start)

        if event.date_end:
            if is_full_day:
                end = event.date_end
            else:
                end = self._at(event.date_end, event.time_end or event.time_start)
        elif is_full_day:
            # DTEND of a full-day event is exclusive, so it points at the next day
            end = event.date_start + timedelta(days=1)
        else:
            end = start

        if end < start:
            logger.warning(f"⚠️ Event {event.id} ends before it starts, skipped for {locale}")
            return None

        location = None
        if event.venue:
            location = "\n".join(part for part in (event.venue.name, event.venue.address) if part) or None
        elif event.venue_other:
            location = event.venue_other

        stamp = event.date_updated or event.date_created
        if stamp is None:
            stamp = start if not is_full_day else datetime.combine(event.date_start, time(0), tzinfo=timezone.utc)

        return CalendarItem(
            uid=f"event-{event.id}@tchoukball.ch",
            title=title,
            start=start,
            end=end,
            stamp=_as_utc(stamp),
            description=translation.description or None,
            location=location,
            url=event.url or None,
            status="CANCELLED" if is_cancelled else "CONFIRMED",
        )

    def build_calendar_items(self, events: List[DirectusEvent], locale: str) -> List[CalendarItem]:
        logger.info(f"🗓️ Creating ICS events in {locale}...")
        items = []
        for event in events:
            item = self.to_calendar_item(event, locale)
            if item is None:
                logger.debug(f"Event {event.id} skipped for {locale}")
                continue
            items.append(item)
        return items

    # --- News ---

    def image_url(self, image_id: str) -> str:
        return f"{self.cms_base_url}/assets/{image_id}/?width={IMAGE_WIDTH}"

    def news_link(self, news: DirectusNews, slug: Optional[str]) -> str:
        url = f"{self.website_base_url}/news/{news.id}"
        if slug:
            url += f"-{slug}"
        return url

    def to_news_item(self, news: DirectusNews, locale: str) -> Optional[NewsItem]:
        if not news.id or not news.translations:
            return None

        translation = self._translation(news.translations, locale)
        if translation is None:
            return None
        title = strip_xml_illegal(translation.title or "").strip()
        if not title:
            return None

        url = self.news_link(news, translation.slug)
        content = strip_xml_illegal(translation.body or "")
        enclosure = None
        if news.main_image and news.main_image.id:
            image_url = self.image_url(news.main_image.id)
            enclosure = Enclosure(
                url=image_url,
                type=news.main_image.type or DEFAULT_IMAGE_TYPE,
                length=parse_filesize(news.main_image.filesize),
            )
            content = f'<p><img src="{image_url}" /></p>' + content

        published = news.date_created or datetime.now(timezone.utc)

        return NewsItem(
            id=url,
            link=url,
            title=title,
            content=content,
            published=_as_utc(published),
            enclosure=enclosure,
        )

    def build_news_items(self, posts: List[DirectusNews], locale: str) -> List[NewsItem]:
        logger.info(f"📰 Creating feed items in {locale}...")
        items = []
        for post in posts:
            item = self.to_news_item(post, locale)
            if item is None:
                logger.debug(f"News entry {post.id} skipped for {locale}")
                continue
            items.append(item)
        return items
