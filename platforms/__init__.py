from .base_platform import CalendarPlatform
from .google_calendar import GoogleCalendarPlatform
from .google_sheets import GoogleSheetsMirror
from .platform_factory import PlatformFactory

__all__ = [
    'CalendarPlatform',
    'GoogleCalendarPlatform',
    'GoogleSheetsMirror',
    'PlatformFactory'
]
