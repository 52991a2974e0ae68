from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Any, Dict, List
import pytz
from constants import DEFAULT_EVENT_DURATION, DEFAULT_TIME_ZONE, REMINDER_MINUTES
from date_utils import parse_date, to_local
from slots import Slot, TIMESTAMP_FORMAT


class CalendarPlatform(ABC):
    """Base class for calendar integrations that receive study slots"""

    def __init__(self, time_zone: str = DEFAULT_TIME_ZONE):
        self.time_zone = time_zone
        self.timezone = pytz.timezone(time_zone)

    def _slot_hour(self, slot: Slot) -> int:
        """Hour of the slot's start, read from 'YYYY-MM-DDTHH:MM:SS'"""
        try:
            hour = int(slot.start.split('T')[1][:2])
        except (AttributeError, IndexError, ValueError):
            raise ValueError(f'Invalid slot start: {slot.start!r}')
        if not 0 <= hour <= 23:
            raise ValueError(f'Invalid slot start: {slot.start!r}')
        return hour

    def _describe(self, slot: Slot) -> str:
        return (
            f'Hindi: {slot.youtube_hindi or ""}\n'
            f'English: {slot.youtube_english or ""}\n'
            f'Playlist (Hindi): {slot.youtube_playlist_hindi or ""}\n'
            f'Playlist (English): {slot.youtube_playlist_english or ""}'
        )

    def build_event_body(self, slot: Slot, date: str, duration: int = DEFAULT_EVENT_DURATION) -> Dict[str, Any]:
        """
        Translate a slot into a calendar event for the given date.

        Args:
            slot: Slot whose start hour and links are used
            date: String in format 'YYYY-MM-DD'
            duration: Integer minutes from start to end

        Returns:
            dict ready to send as an events.insert body

        Raises:
            ValueError: slot start or date cannot be parsed
        """
        day = parse_date(date)
        start_time = day.replace(hour=self._slot_hour(slot))
        end_time = start_time + timedelta(minutes=duration)
        time_zone = slot.time_zone or self.time_zone

        return {
            'summary': slot.title,
            'description': self._describe(slot),
            'start': {
                'dateTime': start_time.strftime(TIMESTAMP_FORMAT),
                'timeZone': time_zone,
            },
            'end': {
                'dateTime': end_time.strftime(TIMESTAMP_FORMAT),
                'timeZone': time_zone,
            },
            'reminders': {
                'useDefault': False,
                'overrides': [{'method': 'popup', 'minutes': REMINDER_MINUTES}],
            },
        }

    def event_to_slot(self, event: Dict[str, Any]) -> Slot:
        """Map a fetched calendar event back to a slot; links are rebuilt from the title"""
        start = (event.get('start') or {}).get('dateTime', '')
        end = (event.get('end') or {}).get('dateTime', '')
        return Slot.for_title(
            self._local_timestamp(start),
            self._local_timestamp(end),
            event.get('summary', ''),
            self.time_zone
        )

    def _local_timestamp(self, dt_str: str) -> str:
        if not dt_str:
            return ''
        try:
            return to_local(dt_str, self.timezone).strftime(TIMESTAMP_FORMAT)
        except ValueError:
            return dt_str

    @abstractmethod
    def add_events(self, slots: List[Slot], dates: List[str], duration: int = DEFAULT_EVENT_DURATION) -> dict:
        """
        Create one event per slot on every date.

        Args:
            slots: Slots to submit (placeholders are skipped)
            dates: List of 'YYYY-MM-DD' strings
            duration: Integer minutes per event

        Returns:
            dict with:
                count: int, events created
                perDate: Dict[str, int]
        """
        pass

    @abstractmethod
    def remove_events(self, dates: List[str]) -> dict:
        """
        Delete every timed event whose local start date is one of `dates`.

        Returns:
            dict with:
                count: int, events deleted
                perDate: Dict[str, int]
        """
        pass

    @abstractmethod
    def get_events(self, date: str) -> List[Slot]:
        """Events starting on the local date, as slots ordered by start time"""
        pass
