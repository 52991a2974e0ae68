from typing import Any, Dict, List
import logging
from googleapiclient.errors import HttpError
from httplib2 import HttpLib2Error
from .base_platform import CalendarPlatform
from constants import DEFAULT_EVENT_DURATION, DEFAULT_TIME_ZONE
from date_utils import local_date_of, padded_window
from errors import DeleteErrorKind, classify_delete_error
from slots import Slot, is_placeholder

logger = logging.getLogger(__name__)

# Per-item failures that are logged and skipped instead of aborting the batch
CALL_ERRORS = (HttpError, HttpLib2Error, OSError)


class GoogleCalendarPlatform(CalendarPlatform):
    def __init__(self, calendar_id: str, service=None, time_zone: str = DEFAULT_TIME_ZONE):
        """Initialize the platform

        Args:
            calendar_id: Google Calendar id events are written to
            service: Calendar v3 discovery client (a Mock in unit tests)
            time_zone: Local time zone used for slots and date matching
        """
        super().__init__(time_zone)
        self.calendar_id = calendar_id
        self.service = service

    def _list_page(self, time_min: str, time_max: str, page_token: str = None) -> Dict[str, Any]:
        return self.service.events().list(
            calendarId=self.calendar_id,
            timeMin=time_min,
            timeMax=time_max,
            singleEvents=True,
            orderBy='startTime',
            pageToken=page_token
        ).execute()

    def list_events_on(self, date: str) -> List[Dict[str, Any]]:
        """
        All timed events whose start falls on `date` in the local time zone.

        The query window is padded by a day either side and every page is
        fetched before filtering on the local calendar date.
        """
        time_min, time_max = padded_window(date, self.timezone)
        fetched = []
        page_token = None
        while True:
            try:
                response = self._list_page(time_min, time_max, page_token)
            except CALL_ERRORS as e:
                logger.error("Failed to list events for %s: %s", date, e)
                break
            fetched.extend(response.get('items', []))
            page_token = response.get('nextPageToken')
            if not page_token:
                break

        matches = [event for event in fetched if local_date_of(event, self.timezone) == date]
        logger.info("Found %s events on %s (%s fetched)", len(matches), date, len(fetched))
        return matches

    def add_events(self, slots: List[Slot], dates: List[str], duration: int = DEFAULT_EVENT_DURATION) -> dict:
        per_date = {}
        total = 0
        for date in dates:
            added = 0
            for slot in slots:
                if is_placeholder(slot.title):
                    continue
                try:
                    body = self.build_event_body(slot, date, duration)
                except ValueError as e:
                    logger.error("Skipping '%s' on %s: %s", slot.title, date, e)
                    continue

                try:
                    self.service.events().insert(
                        calendarId=self.calendar_id,
                        body=body
                    ).execute()
                    added += 1
                except CALL_ERRORS as e:
                    logger.error("Failed to insert event '%s' on %s from %s to %s: %s",
                                 slot.title, date, body['start']['dateTime'], body['end']['dateTime'], e)
            per_date[date] = added
            total += added
            logger.info("Added %s events on %s", added, date)

        return {
            'count': total,
            'perDate': per_date
        }

    def _delete(self, event_id: str, date: str) -> bool:
        try:
            self.service.events().delete(
                calendarId=self.calendar_id,
                eventId=event_id
            ).execute()
            return True
        except CALL_ERRORS as e:
            kind = classify_delete_error(e)
            if kind is DeleteErrorKind.NOT_FOUND:
                logger.warning("Event %s not found for %s, likely already deleted.", event_id, date)
            elif kind is DeleteErrorKind.FORBIDDEN:
                logger.error("Permission denied to delete event %s for %s", event_id, date)
            else:
                logger.error("Failed to delete event %s for %s: %s", event_id, date, e)
            return False

    def remove_events(self, dates: List[str]) -> dict:
        per_date = {}
        total = 0
        for date in dates:
            deleted = 0
            for event in self.list_events_on(date):
                event_id = event.get('id')
                if not event_id:
                    continue
                if self._delete(event_id, date):
                    deleted += 1
            per_date[date] = deleted
            total += deleted
            logger.info("Deleted %s events on %s", deleted, date)

        return {
            'count': total,
            'perDate': per_date
        }

    def get_events(self, date: str) -> List[Slot]:
        # list_events_on keeps the API's startTime ordering
        return [self.event_to_slot(event) for event in self.list_events_on(date)]
