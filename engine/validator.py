from typing import Iterable, List, Optional, Type, TypeVar
from pydantic import BaseModel, ValidationError
from core.logger import setup_logger
from schema.models import DirectusEvent, DirectusNews

logger = setup_logger("Validator")

RecordT = TypeVar("RecordT", bound=BaseModel)


def _first_translation(record) -> Optional[BaseModel]:
    if not record.translations:
        return None
    return record.translations[0]


def is_valid_event(event: DirectusEvent) -> bool:
    first = _first_translation(event)
    return bool(event.id and event.date_start and event.date_end and first and first.name)


def is_valid_news(news: DirectusNews) -> bool:
    first = _first_translation(news)
    return bool(news.id and news.date_created and first and first.title)


def _validate(raw_records: Iterable[Optional[dict]], model: Type[RecordT], is_valid, label: str,
              locale: Optional[str] = None) -> List[RecordT]:
    records: List[RecordT] = []
    for raw in raw_records:
        if not raw:
            continue

        record_id = raw.get("id") if isinstance(raw, dict) else None
        try:
            record = model.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"⚠️ {label} with ID {record_id} is malformed: {e.error_count()} invalid field(s)")
            continue

        if not is_valid(record):
            if locale and record.translations == []:
                # the news query scopes translations to the locale
                logger.debug(f"{label} with ID {record_id} has no {locale} translation")
                continue
            logger.warning(f"⚠️ {label} with ID {record_id} is missing requested fields")
            continue
        records.append(record)
    return records


def validate_events(raw_records: Iterable[Optional[dict]]) -> List[DirectusEvent]:
    """Drops events without id, start/end dates or a name in the first translation."""
    return _validate(raw_records, DirectusEvent, is_valid_event, "Event")


def validate_news(raw_records: Iterable[Optional[dict]], locale: Optional[str] = None) -> List[DirectusNews]:
    """Drops news without id, creation date or a title in the first translation."""
    return _validate(raw_records, DirectusNews, is_valid_news, "News entry", locale)
