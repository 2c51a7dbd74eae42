import httpx
from datetime import date
from typing import List, Optional
from dateutil.relativedelta import relativedelta
from core.config import Settings
from core.errors import FetchError
from core.logger import setup_logger
from engine.query import And, Eq, Gte, ItemsQuery, Neq

logger = setup_logger("Fetcher")

EVENT_FIELDS = (
    "id",
    "translations.languages_code",
    "translations.name",
    "translations.description",
    "date_start",
    "time_start",
    "date_end",
    "time_end",
    "status",
    "venue.id",
    "venue.name",
    "venue.city",
    "venue.address",
    "venue_other",
    "url",
    "type",
    "date_created",
    "date_updated",
)

NEWS_FIELDS = (
    "id",
    "date_created",
    "date_updated",
    "main_image.id",
    "main_image.description",
    "main_image.type",
    "main_image.filesize",
    "translations.languages_code",
    "translations.slug",
    "translations.title",
    "translations.body",
)


class DirectusClient:
    """Read-only handle on the Directus REST API, opened once per run."""

    def __init__(self, base_url: str, timeout: float = 30.0, token: Optional[str] = None,
                 user_agent: Optional[str] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        headers = {}
        if user_agent:
            headers["User-Agent"] = user_agent
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(base_url=base_url, headers=headers, timeout=timeout,
                                         transport=transport)

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "DirectusClient":
        return cls(settings.CMS_BASE_URL, timeout=settings.HTTP_TIMEOUT, token=settings.CMS_TOKEN,
                   user_agent=settings.USER_AGENT, **kwargs)

    async def __aenter__(self) -> "DirectusClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def read_by_query(self, query: ItemsQuery) -> dict:
        try:
            response = await self._client.get(query.path, params=query.to_params())
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as e:
            raise FetchError(f"Directus request for '{query.collection}' failed: {e}") from e
        except ValueError as e:
            raise FetchError(f"Directus returned invalid JSON for '{query.collection}'") from e

        if not isinstance(payload, dict) or payload.get("data") is None:
            raise FetchError(f"Error when retrieving {query.collection}")
        return payload


def events_query(settings: Settings, today: Optional[date] = None) -> ItemsQuery:
    today = today or date.today()
    start_date = today - relativedelta(years=settings.EVENTS_LOOKBACK_YEARS)
    return ItemsQuery(
        collection="events",
        fields=EVENT_FIELDS,
        filter=And((
            Neq("status", "draft"),
            Gte("date_start", start_date.isoformat()),
        )),
        sort=("date_start",),
        limit=settings.EVENTS_LIMIT,
    )


def news_query(settings: Settings, locale: str) -> ItemsQuery:
    return ItemsQuery(
        collection="news",
        fields=NEWS_FIELDS,
        filter=And((Eq("status", "published"),)),
        sort=("-date_created",),
        limit=settings.NEWS_LIMIT,
        deep={"translations": Eq("languages_code", locale)},
    )


async def fetch_events(client: DirectusClient, settings: Settings, today: Optional[date] = None) -> List[dict]:
    logger.info("📥 Retrieving events...")
    payload = await client.read_by_query(events_query(settings, today))

    filter_count = (payload.get("meta") or {}).get("filter_count")
    if filter_count:
        logger.info(f"📊 Retrieved {filter_count} events")
    return payload["data"]


async def fetch_news(client: DirectusClient, settings: Settings, locale: str) -> List[dict]:
    logger.info(f"📥 Retrieving posts ({locale})...")
    payload = await client.read_by_query(news_query(settings, locale))
    return payload["data"]
