from typing import Dict, Type, Optional
import httplib2
from google_auth_httplib2 import AuthorizedHttp
from googleapiclient.discovery import build
from .base_platform import CalendarPlatform
from .google_calendar import GoogleCalendarPlatform
from .google_sheets import GoogleSheetsMirror
from auth import credentials_for
from config import AppConfig


def build_service(api: str, version: str, credentials, timeout: float):
    """Discovery client whose every request is bounded by `timeout` seconds"""
    http = AuthorizedHttp(credentials, http=httplib2.Http(timeout=timeout))
    return build(api, version, http=http, cache_discovery=False)


class PlatformFactory:
    """Factory class for creating calendar platform instances"""

    _platforms: Dict[str, Type[CalendarPlatform]] = {
        'google': GoogleCalendarPlatform
    }

    @classmethod
    def get_platform(cls, platform_name: Optional[str], calendar_id: str, config: AppConfig,
                     credentials=None) -> CalendarPlatform:
        """
        Get an instance of the requested platform

        Args:
            platform_name: String identifier for the platform
            calendar_id: Calendar the platform writes to
            config: Process configuration
            credentials: Already-loaded credentials, loaded from config when omitted

        Returns:
            CalendarPlatform instance

        Raises:
            ValueError: If platform_name is not supported
            ConfigurationError: If credentials cannot be loaded
        """
        if platform_name is None:
            supported = ", ".join(cls._platforms.keys())
            raise ValueError(
                f"Unsupported platform: None. "
                f"Supported platforms are: {supported}"
            )

        platform_class = cls._platforms.get(platform_name.lower())
        if not platform_class:
            supported = ", ".join(cls._platforms.keys())
            raise ValueError(
                f"Unsupported platform: {platform_name}. "
                f"Supported platforms are: {supported}"
            )

        if credentials is None:
            credentials = credentials_for(config)
        service = build_service('calendar', 'v3', credentials, config.request_timeout)
        return platform_class(calendar_id, service=service, time_zone=config.time_zone)

    @classmethod
    def get_sheets_mirror(cls, config: AppConfig, credentials=None) -> Optional[GoogleSheetsMirror]:
        """Sheets mirror for the configured spreadsheet, or None when none is configured"""
        if not config.spreadsheet_id:
            return None
        if credentials is None:
            credentials = credentials_for(config)
        service = build_service('sheets', 'v4', credentials, config.request_timeout)
        return GoogleSheetsMirror(config.spreadsheet_id, service=service)
