from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple
import pytz
from errors import ValidationError

DATE_FORMAT = '%Y-%m-%d'


def parse_date(date_str: str) -> datetime:
    """Parse 'YYYY-MM-DD' into a naive midnight datetime, raising ValidationError otherwise"""
    if not isinstance(date_str, str):
        raise ValidationError(f'Invalid date: {date_str!r}. Expected YYYY-MM-DD')
    try:
        return datetime.strptime(date_str.strip(), DATE_FORMAT)
    except ValueError:
        raise ValidationError(f'Invalid date: {date_str!r}. Expected YYYY-MM-DD')


def expand_date_range(start: str, end: str) -> List[str]:
    """
    Every date from start to end inclusive, ascending.
    Endpoints given in reverse order are swapped.
    """
    first = parse_date(start)
    last = parse_date(end)
    if first > last:
        first, last = last, first

    dates = []
    current = first
    while current <= last:
        dates.append(current.strftime(DATE_FORMAT))
        current += timedelta(days=1)
    return dates


def resolve_dates(body: Dict[str, Any]) -> List[str]:
    """
    Work out which dates a write request applies to.

    Args:
        body: Request body, may contain:
            - dates: List of 'YYYY-MM-DD' strings (used when non-empty)
            - startDate / endDate: inclusive range
            - selectedDate: single date

    Returns:
        List of normalised date strings, duplicates removed, never empty

    Raises:
        ValidationError: malformed dates or no dates at all
    """
    dates = body.get('dates')
    if dates is not None and not isinstance(dates, list):
        raise ValidationError('dates must be an array')

    if dates:
        candidates = [parse_date(d).strftime(DATE_FORMAT) for d in dates]
    elif body.get('startDate') and body.get('endDate'):
        candidates = expand_date_range(body['startDate'], body['endDate'])
    elif body.get('selectedDate'):
        candidates = [parse_date(body['selectedDate']).strftime(DATE_FORMAT)]
    else:
        candidates = []

    resolved = []
    for date_str in candidates:
        if date_str not in resolved:
            resolved.append(date_str)

    if not resolved:
        raise ValidationError('No valid dates provided')
    return resolved


def format_for_google(dt: datetime, timezone) -> str:
    """Format a local naive datetime as an RFC3339 UTC timestamp for the Google API"""
    local_dt = timezone.localize(dt)
    utc_dt = local_dt.astimezone(pytz.UTC)
    return utc_dt.strftime('%Y-%m-%dT%H:%M:%S.000Z')


def padded_window(date_str: str, timezone) -> Tuple[str, str]:
    """
    Query window for one local calendar date, padded by a day on each side.

    Results must be post-filtered with local_date_of; the padding makes the
    query safe when the calendar's own time zone differs from ours.
    """
    day = parse_date(date_str)
    time_min = format_for_google(day - timedelta(days=1), timezone)
    time_max = format_for_google(day + timedelta(days=2), timezone)
    return time_min, time_max


def to_local(dt_str: str, timezone) -> datetime:
    """
    Convert a Google dateTime string to an aware datetime in the given zone.
    Handles both UTC ('Z') and offset formats (e.g., '+05:30').
    Naive strings are taken to be UTC.
    """
    if dt_str.endswith('Z'):
        dt_str = dt_str[:-1] + '+00:00'

    parsed = datetime.fromisoformat(dt_str)
    if parsed.tzinfo is None:
        parsed = pytz.utc.localize(parsed)
    return parsed.astimezone(timezone)


def local_date_of(event: Dict[str, Any], timezone) -> Optional[str]:
    """Local calendar date of a Google event's start, or None for all-day/unparseable events"""
    start = (event.get('start') or {}).get('dateTime')
    if not start:
        return None
    try:
        return to_local(start, timezone).strftime(DATE_FORMAT)
    except ValueError:
        return None
