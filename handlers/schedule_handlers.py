from typing import Any, Dict, List, Optional
import logging
from googleapiclient.errors import HttpError
from httplib2 import HttpLib2Error
from auth import credentials_for
from config import AppConfig
from constants import DEFAULT_EVENT_DURATION, MAX_EVENT_DURATION, SLOT_COUNT
from date_utils import parse_date, resolve_dates
from errors import ValidationError
from platforms.platform_factory import PlatformFactory
from slots import Slot, apply_bulk_titles, generate_slots, slots_from_payload, submittable

logger = logging.getLogger(__name__)

PLATFORM_NAME = 'google'
SHEET_ERRORS = (HttpError, HttpLib2Error, OSError)


def _calendar_id(config: AppConfig, name: Optional[str], message: str) -> str:
    calendar_id = config.calendar_id_for(name)
    if not calendar_id:
        raise ValidationError(message.format(name=name))
    return calendar_id


def _duration(body: Dict[str, Any]) -> int:
    duration = body.get('eventDuration')
    if duration is None:
        return DEFAULT_EVENT_DURATION
    if isinstance(duration, bool) or not isinstance(duration, (int, float)) or duration != int(duration):
        raise ValidationError('eventDuration must be a whole number of minutes')
    if not 0 < duration <= MAX_EVENT_DURATION:
        raise ValidationError(f'eventDuration must be between 1 and {MAX_EVENT_DURATION} minutes')
    return int(duration)


def _summary(verb: str, count: int, dates: List[str], range_mode: bool) -> str:
    if range_mode or len(dates) > 1:
        return f'{count} events {verb} calendar across {len(dates)} days successfully!'
    return f'{count} events {verb} calendar for {dates[0]} successfully!'


def _sheet_slots(platform, slots: List[Slot], date: str, duration: int) -> List[Slot]:
    """Slots as they were written for `date`, so sheet rows show the real times"""
    written = []
    for slot in slots:
        try:
            body = platform.build_event_body(slot, date, duration)
        except ValueError:
            continue
        written.append(Slot.for_title(body['start']['dateTime'], body['end']['dateTime'],
                                      slot.title, slot.time_zone))
    return written


def handle_health(query: Dict[str, Any], body: Dict[str, Any], config: AppConfig) -> Dict[str, Any]:
    return {
        'statusCode': 200,
        'body': {'message': 'Study slot scheduler is running'}
    }


def handle_get_sheet_names(query: Dict[str, Any], body: Dict[str, Any], config: AppConfig) -> Dict[str, Any]:
    """
    List the sheet names that map to a configured calendar.

    Returns:
        Dict containing:
            - statusCode: 200
            - body: {'sheetNames': sorted list of names}
    """
    return {
        'statusCode': 200,
        'body': {'sheetNames': config.sheet_names}
    }


def handle_get_slots(query: Dict[str, Any], body: Dict[str, Any], config: AppConfig) -> Dict[str, Any]:
    """
    Build the default slot list for a date without touching any calendar.

    Args:
        query: Dict containing:
            - date: String in format 'YYYY-MM-DD'
            - titles: Optional comma-separated titles to apply (bulk paste)
    """
    date = query.get('date')
    if not date:
        raise ValidationError('Missing date')
    parse_date(date)

    titles = query.get('titles')
    if titles is not None:
        slots = apply_bulk_titles(titles, date, count=SLOT_COUNT, time_zone=config.time_zone,
                                  skip_empty=True)
    else:
        slots = generate_slots(date, time_zone=config.time_zone, skip_empty=True)

    return {
        'statusCode': 200,
        'body': {'events': [slot.to_dict() for slot in slots]}
    }


def handle_get_events(query: Dict[str, Any], body: Dict[str, Any], config: AppConfig) -> Dict[str, Any]:
    """
    Fetch a day's events for a sheet, shaped as slots.

    Args:
        query: Dict containing:
            - sheetName: String, configured sheet/account name
            - date: String in format 'YYYY-MM-DD'

    Returns:
        Dict containing:
            - statusCode: Integer HTTP status code
            - body: {'events': list of slot dicts}
    """
    sheet_name = query.get('sheetName')
    date = query.get('date')
    if not sheet_name or not date:
        raise ValidationError('Missing sheetName or date')
    parse_date(date)
    calendar_id = _calendar_id(config, sheet_name, 'Invalid calendar ID for {name}')

    credentials = credentials_for(config)
    platform = PlatformFactory.get_platform(PLATFORM_NAME, calendar_id, config, credentials=credentials)

    mirror = PlatformFactory.get_sheets_mirror(config, credentials=credentials)
    if mirror is not None:
        try:
            mirror.ensure_sheet(sheet_name)
        except SHEET_ERRORS as e:
            logger.error("Failed to prepare sheet %s: %s", sheet_name, e)

    slots = platform.get_events(date)
    return {
        'statusCode': 200,
        'body': {'events': [slot.to_dict() for slot in slots]}
    }


def handle_add_all(query: Dict[str, Any], body: Dict[str, Any], config: AppConfig) -> Dict[str, Any]:
    """
    Add every slot as a calendar event on every requested date, then mirror the slots to the sheet.

    Args:
        query: Dict containing:
            - name: String, configured sheet/account name
        body: Dict containing:
            - events: List of slot dicts
            - dates / startDate+endDate / selectedDate: dates to add to
            - isRangeMode: Optional boolean, only changes the message
            - eventDuration: Optional integer minutes, defaults to 50

    Returns:
        Dict containing:
            - statusCode: Integer HTTP status code
            - body: Dict containing:
                - message: String summary
                - count: Integer events created
                - perDate: Dict of date to events created
                - sheetSynced: Boolean (when a spreadsheet is configured)
    """
    name = query.get('name')
    calendar_id = _calendar_id(config, name, 'Invalid or missing calendar ID for {name}. Check environment variables.')
    dates = resolve_dates(body)

    events = body.get('events')
    if not isinstance(events, list):
        raise ValidationError('Events must be an array')
    duration = _duration(body)
    slots = submittable(slots_from_payload(events, dates[0], config.time_zone, duration=duration))

    credentials = credentials_for(config)
    platform = PlatformFactory.get_platform(PLATFORM_NAME, calendar_id, config, credentials=credentials)
    mirror = PlatformFactory.get_sheets_mirror(config, credentials=credentials)

    result = platform.add_events(slots, dates, duration)
    response = {
        'message': _summary('added to', result['count'], dates, bool(body.get('isRangeMode'))),
        'count': result['count'],
        'perDate': result['perDate']
    }

    if mirror is not None:
        try:
            mirror.write_slots(name, _sheet_slots(platform, slots, dates[0], duration))
            response['sheetSynced'] = True
        except SHEET_ERRORS as e:
            logger.error("Failed to update sheet %s: %s", name, e)
            response['sheetSynced'] = False
            response['message'] += ' Sheet update failed.'

    return {
        'statusCode': 200,
        'body': response
    }


def handle_remove_all(query: Dict[str, Any], body: Dict[str, Any], config: AppConfig) -> Dict[str, Any]:
    """
    Delete every event on the requested dates, then clear the sheet rows.

    Args:
        query: Dict containing:
            - name: String, configured sheet/account name
        body: Dict containing:
            - dates / startDate+endDate / selectedDate: dates to clear
            - isRangeMode: Optional boolean, only changes the message

    Returns:
        Dict containing:
            - statusCode: Integer HTTP status code
            - body: Dict containing message, count, perDate and sheetSynced
    """
    name = query.get('name')
    calendar_id = _calendar_id(config, name, 'Invalid or missing calendar ID for {name}. Check environment variables.')
    dates = resolve_dates(body)

    credentials = credentials_for(config)
    platform = PlatformFactory.get_platform(PLATFORM_NAME, calendar_id, config, credentials=credentials)
    mirror = PlatformFactory.get_sheets_mirror(config, credentials=credentials)

    result = platform.remove_events(dates)
    response = {
        'message': _summary('removed from', result['count'], dates, bool(body.get('isRangeMode'))),
        'count': result['count'],
        'perDate': result['perDate']
    }

    if mirror is not None:
        try:
            mirror.clear_slots(name)
            response['sheetSynced'] = True
        except SHEET_ERRORS as e:
            logger.error("Failed to clear sheet %s: %s", name, e)
            response['sheetSynced'] = False
            response['message'] += ' Sheet clear failed.'

    return {
        'statusCode': 200,
        'body': response
    }
