import asyncio
import sys
from datetime import date
from typing import Optional
from core.config import Settings, config
from core.errors import FeedsError
from core.logger import setup_logger
from engine.fetcher import DirectusClient, fetch_events, fetch_news
from engine.serializer import render_calendar, render_news_feed
from engine.transformer import FeedTransformer
from engine.validator import validate_events, validate_news
from engine.writer import write_document

logger = setup_logger("MainPipeline")


# --- 1. EVENTS -> ICS ---
async def run_events(client: DirectusClient, settings: Settings, today: Optional[date] = None) -> None:
    raw_events = await fetch_events(client, settings, today)
    events = validate_events(raw_events)
    transformer = FeedTransformer(settings)

    # Every locale is rendered before anything is written
    documents = {}
    for locale in settings.locales:
        items = transformer.build_calendar_items(events, locale)
        documents[locale] = render_calendar(items)

    for locale, document in documents.items():
        write_document(settings.OUTPUT_DIR, f"events-{locale}", "ics", document)
    logger.info(f"🗓️ {len(events)} events written for {', '.join(documents)}")


# --- 2. NEWS -> RSS ---
async def run_news(client: DirectusClient, settings: Settings) -> None:
    transformer = FeedTransformer(settings)

    documents = {}
    for locale in settings.locales:
        raw_posts = await fetch_news(client, settings, locale)
        posts = validate_news(raw_posts, locale)
        items = transformer.build_news_items(posts, locale)
        documents[locale] = render_news_feed(items, locale, settings)

    for locale, document in documents.items():
        write_document(settings.OUTPUT_DIR, f"news-{locale}", "xml", document)
    logger.info(f"📰 News feeds written for {', '.join(documents)}")


# --- 3. ENTRY POINTS ---
async def main(settings: Settings = config, events: bool = True, news: bool = True,
               client: Optional[DirectusClient] = None) -> int:
    logger.info("🚀 Starting feed generation...")
    client = client or DirectusClient.from_settings(settings)
    try:
        async with client:
            if news:
                await run_news(client, settings)
            if events:
                await run_events(client, settings)
    except FeedsError as e:
        logger.error(f"🚨 Pipeline Crash: {e}")
        return 1

    logger.info("✅ SUCCESS")
    return 0


def cli() -> None:
    sys.exit(asyncio.run(main()))


def cli_events() -> None:
    sys.exit(asyncio.run(main(news=False)))


def cli_news() -> None:
    sys.exit(asyncio.run(main(events=False)))


if __name__ == "__main__":
    cli()
