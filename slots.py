from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict, List, Optional
from urllib.parse import quote
import re
from constants import (
    DEFAULT_EVENT_DURATION,
    DEFAULT_TIME_ZONE,
    EMPTY_SLOT_TITLE,
    INITIAL_EVENT_TITLES,
    SLOT_COUNT,
    START_HOUR,
    YOUTUBE_PLAYLIST_FILTER,
    YOUTUBE_SEARCH_URL
)
from date_utils import parse_date
from errors import ValidationError

TIMESTAMP_FORMAT = '%Y-%m-%dT%H:%M:%S'

# Characters encodeURIComponent leaves alone
_URI_COMPONENT_SAFE = "-_.!~*'()"


def _search_url(query: str) -> str:
    return YOUTUBE_SEARCH_URL + quote(query, safe=_URI_COMPONENT_SAFE)


def build_links(title: str) -> Dict[str, str]:
    """YouTube search links for a slot title, keyed by their JSON field names"""
    return {
        'youtubeHindi': _search_url(f'{title} in Hindi'),
        'youtubeEnglish': _search_url(f'{title} in English'),
        'youtubePlaylistHindi': _search_url(f'{title} playlist in Hindi') + YOUTUBE_PLAYLIST_FILTER,
        'youtubePlaylistEnglish': _search_url(f'{title} playlist in English') + YOUTUBE_PLAYLIST_FILTER,
    }


def is_placeholder(title: Optional[str]) -> bool:
    return not title or not title.strip() or title == EMPTY_SLOT_TITLE


@dataclass
class Slot:
    start: str
    end: str
    title: str
    youtube_hindi: str = ''
    youtube_english: str = ''
    youtube_playlist_hindi: str = ''
    youtube_playlist_english: str = ''
    time_zone: str = DEFAULT_TIME_ZONE

    @classmethod
    def for_title(cls, start: str, end: str, title: str, time_zone: str = DEFAULT_TIME_ZONE) -> 'Slot':
        links = build_links(title)
        return cls(
            start=start,
            end=end,
            title=title,
            youtube_hindi=links['youtubeHindi'],
            youtube_english=links['youtubeEnglish'],
            youtube_playlist_hindi=links['youtubePlaylistHindi'],
            youtube_playlist_english=links['youtubePlaylistEnglish'],
            time_zone=time_zone
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any], time_zone: str = DEFAULT_TIME_ZONE) -> 'Slot':
        """Build a slot from its JSON shape. Blank link fields are derived from the title."""
        if not isinstance(data, dict):
            raise ValidationError('Each event must be an object')
        title = str(data.get('title') or '')
        links = build_links(title)
        return cls(
            start=str(data.get('start') or ''),
            end=str(data.get('end') or ''),
            title=title,
            youtube_hindi=data.get('youtubeHindi') or links['youtubeHindi'],
            youtube_english=data.get('youtubeEnglish') or links['youtubeEnglish'],
            youtube_playlist_hindi=data.get('youtubePlaylistHindi') or links['youtubePlaylistHindi'],
            youtube_playlist_english=data.get('youtubePlaylistEnglish') or links['youtubePlaylistEnglish'],
            time_zone=data.get('timeZone') or time_zone
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            'start': self.start,
            'end': self.end,
            'title': self.title,
            'youtubeHindi': self.youtube_hindi,
            'youtubeEnglish': self.youtube_english,
            'youtubePlaylistHindi': self.youtube_playlist_hindi,
            'youtubePlaylistEnglish': self.youtube_playlist_english,
            'timeZone': self.time_zone,
        }

    @property
    def links(self) -> List[str]:
        return [
            self.youtube_hindi,
            self.youtube_english,
            self.youtube_playlist_hindi,
            self.youtube_playlist_english
        ]


def fallback_title(index: int) -> str:
    if 0 <= index < len(INITIAL_EVENT_TITLES):
        return INITIAL_EVENT_TITLES[index]
    return EMPTY_SLOT_TITLE


def generate_slots(date: str,
                   count: int = SLOT_COUNT,
                   start_hour: int = START_HOUR,
                   duration: int = DEFAULT_EVENT_DURATION,
                   titles: Optional[List[str]] = None,
                   time_zone: str = DEFAULT_TIME_ZONE,
                   skip_empty: bool = False) -> List[Slot]:
    """
    Build the day's hourly slots.

    Args:
        date: String in format 'YYYY-MM-DD'
        count: Number of hourly slots
        start_hour: Hour of the first slot
        duration: Minutes from each slot's start to its end
        titles: Optional titles by position, falling back to INITIAL_EVENT_TITLES
        time_zone: Time zone name stamped on every slot
        skip_empty: Leave out slots whose title is blank or the placeholder

    Returns:
        List of Slot, ordered by start time
    """
    if count <= 0 or start_hour < 0 or start_hour + count > 24:
        raise ValidationError(f'Slots must fit in one day: start_hour={start_hour}, count={count}')
    if duration <= 0:
        raise ValidationError(f'Duration must be positive: {duration}')

    day = parse_date(date)
    slots = []
    for index in range(count):
        if titles is not None and index < len(titles):
            title = titles[index]
        else:
            title = fallback_title(index)
        if is_placeholder(title):
            title = EMPTY_SLOT_TITLE

        start = day.replace(hour=start_hour + index)
        end = start + timedelta(minutes=duration)
        slots.append(Slot.for_title(
            start.strftime(TIMESTAMP_FORMAT),
            end.strftime(TIMESTAMP_FORMAT),
            title,
            time_zone
        ))

    if skip_empty:
        slots = submittable(slots)
    return slots


def submittable(slots: List[Slot]) -> List[Slot]:
    """Slots worth sending to the calendar: anything with a real title"""
    return [slot for slot in slots if not is_placeholder(slot.title)]


def parse_bulk_titles(raw: str, count: int = SLOT_COUNT) -> List[str]:
    """
    Turn pasted comma-separated text into exactly `count` short titles.

    Each item is trimmed, stripped of parentheses and cut to its first two
    words. Extra items are ignored; missing ones are padded with the
    fallback titles for those positions. Blank items between commas are
    dropped, but an item made only of parentheses keeps its position as a
    blank title.
    """
    if not raw or not raw.strip():
        raise ValidationError('Please paste some data first')

    titles = []
    for item in raw.split(','):
        if len(titles) >= count:
            break
        trimmed = item.strip()
        if not trimmed:
            continue
        words = re.sub(r'[()]', '', trimmed).split()
        titles.append(' '.join(words[:2]))

    while len(titles) < count:
        titles.append(fallback_title(len(titles)))
    return titles


def apply_bulk_titles(raw: str, date: str, count: int = SLOT_COUNT, **kwargs) -> List[Slot]:
    """Slots for `date` titled from pasted text"""
    return generate_slots(date, count=count, titles=parse_bulk_titles(raw, count), **kwargs)


def slots_from_payload(events: List[Dict[str, Any]], date: str,
                       time_zone: str = DEFAULT_TIME_ZONE,
                       start_hour: int = START_HOUR,
                       duration: int = DEFAULT_EVENT_DURATION) -> List[Slot]:
    """
    Slots from a request's `events` array.

    An event without a start takes the hour of its position on `date`
    (start_hour + index). Only the start hour is used when writing events.
    """
    day = parse_date(date)
    slots = []
    for index, event in enumerate(events):
        slot = Slot.from_dict(event, time_zone)
        hour = start_hour + index
        if not slot.start and hour < 24:
            start = day.replace(hour=hour)
            slot.start = start.strftime(TIMESTAMP_FORMAT)
            slot.end = (start + timedelta(minutes=duration)).strftime(TIMESTAMP_FORMAT)
        slots.append(slot)
    return slots
