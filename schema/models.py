from pydantic import BaseModel, field_validator
from typing import List, Literal, Optional, Union
from datetime import date, datetime, time


# --- Directus records (partial items, every field may be missing) ---

class EventTranslation(BaseModel):
    languages_code: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None


class Venue(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    city: Optional[str] = None
    address: Optional[str] = None


class DirectusEvent(BaseModel):
    id: Optional[int] = None
    translations: Optional[List[Optional[EventTranslation]]] = None
    date_start: Optional[date] = None
    time_start: Optional[time] = None
    date_end: Optional[date] = None
    time_end: Optional[time] = None
    status: Optional[str] = None
    venue: Optional[Venue] = None
    venue_other: Optional[str] = None
    url: Optional[str] = None
    type: Optional[int] = None
    date_created: Optional[datetime] = None
    date_updated: Optional[datetime] = None


class NewsTranslation(BaseModel):
    languages_code: Optional[str] = None
    slug: Optional[str] = None
    title: Optional[str] = None
    body: Optional[str] = None


class MainImage(BaseModel):
    id: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    filesize: Optional[str] = None

    @field_validator("filesize", mode="before")
    @classmethod
    def filesize_as_text(cls, v):
        """Directus returns bigint columns as strings, older instances as numbers."""
        if v is None or isinstance(v, str):
            return v
        return str(v)


class DirectusNews(BaseModel):
    id: Optional[int] = None
    date_created: Optional[datetime] = None
    date_updated: Optional[datetime] = None
    main_image: Optional[MainImage] = None
    translations: Optional[List[Optional[NewsTranslation]]] = None


# --- Feed items (one per record and locale) ---

class CalendarItem(BaseModel):
    uid: str
    title: str
    start: Union[datetime, date]
    end: Union[datetime, date]
    stamp: datetime
    description: Optional[str] = None
    location: Optional[str] = None
    url: Optional[str] = None
    status: Literal["CONFIRMED", "CANCELLED"] = "CONFIRMED"
    classification: str = "PUBLIC"

    @property
    def is_full_day(self) -> bool:
        return not isinstance(self.start, datetime)


class Enclosure(BaseModel):
    url: str
    type: str
    length: int = 0


class NewsItem(BaseModel):
    id: str
    link: str
    title: str
    content: str = ""
    published: datetime
    enclosure: Optional[Enclosure] = None
