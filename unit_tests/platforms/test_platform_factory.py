import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

import pytest
from unittest.mock import Mock, patch
from config import AppConfig, CredentialSource, SERVICE_ACCOUNT_FILE
from errors import ConfigurationError
from platforms.platform_factory import PlatformFactory
from platforms.base_platform import CalendarPlatform
from platforms.google_calendar import GoogleCalendarPlatform
from platforms.google_sheets import GoogleSheetsMirror

CONFIG = AppConfig(
    calendar_ids={'Vivek': 'vivek@group.calendar.google.com'},
    credential_source=CredentialSource(kind=SERVICE_ACCOUNT_FILE, path='/tmp/key.json'),
    spreadsheet_id='sheet123',
    time_zone='Asia/Kolkata',
    request_timeout=12
)


@pytest.fixture(autouse=True)
def mock_google():
    """Mock Google credential and discovery dependencies"""
    with patch('platforms.platform_factory.credentials_for', return_value=Mock()) as mock_creds, \
         patch('platforms.platform_factory.build', return_value=Mock()) as mock_build, \
         patch('platforms.platform_factory.AuthorizedHttp') as mock_http:
        yield mock_creds, mock_build, mock_http


def test_get_platform_google():
    """Test getting Google Calendar platform"""
    platform = PlatformFactory.get_platform('google', 'vivek@group.calendar.google.com', CONFIG)

    assert isinstance(platform, CalendarPlatform)
    assert isinstance(platform, GoogleCalendarPlatform)
    assert platform.calendar_id == 'vivek@group.calendar.google.com'
    assert platform.time_zone == 'Asia/Kolkata'


def test_get_platform_case_insensitive():
    """Test that platform name is case insensitive"""
    platforms = [PlatformFactory.get_platform(name, 'cal', CONFIG) for name in ('GOOGLE', 'Google', 'google')]

    assert all(isinstance(p, GoogleCalendarPlatform) for p in platforms)


def test_service_is_built_with_timeout(mock_google):
    mock_creds, mock_build, mock_http = mock_google

    with patch('platforms.platform_factory.httplib2.Http') as mock_httplib2:
        PlatformFactory.get_platform('google', 'cal', CONFIG)

    mock_httplib2.assert_called_once_with(timeout=12)
    mock_http.assert_called_once_with(mock_creds.return_value, http=mock_httplib2.return_value)
    mock_build.assert_called_once_with('calendar', 'v3', http=mock_http.return_value, cache_discovery=False)


def test_supplied_credentials_are_reused(mock_google):
    mock_creds, _, mock_http = mock_google
    credentials = Mock()

    PlatformFactory.get_platform('google', 'cal', CONFIG, credentials=credentials)

    mock_creds.assert_not_called()
    assert mock_http.call_args.args[0] is credentials


def test_get_platform_unsupported():
    """Test error handling for unsupported platform"""
    with pytest.raises(ValueError) as exc_info:
        PlatformFactory.get_platform('outlook', 'cal', CONFIG)

    error_msg = str(exc_info.value)
    assert 'Unsupported platform: outlook' in error_msg
    assert 'Supported platforms are: google' in error_msg


def test_get_platform_none():
    """Test error handling for None platform name"""
    with pytest.raises(ValueError) as exc_info:
        PlatformFactory.get_platform(None, 'cal', CONFIG)

    assert 'Unsupported platform: None' in str(exc_info.value)


def test_credential_problem_propagates(mock_google):
    mock_creds, _, _ = mock_google
    mock_creds.side_effect = ConfigurationError('Failed to authenticate with Google APIs', 'bad key')

    with pytest.raises(ConfigurationError):
        PlatformFactory.get_platform('google', 'cal', CONFIG)


def test_sheets_mirror_built_when_configured(mock_google):
    _, mock_build, _ = mock_google

    mirror = PlatformFactory.get_sheets_mirror(CONFIG)

    assert isinstance(mirror, GoogleSheetsMirror)
    assert mirror.spreadsheet_id == 'sheet123'
    assert mock_build.call_args.args[:2] == ('sheets', 'v4')


def test_no_sheets_mirror_without_spreadsheet(mock_google):
    mock_creds, mock_build, _ = mock_google
    config = AppConfig(calendar_ids=CONFIG.calendar_ids, credential_source=CONFIG.credential_source)

    assert PlatformFactory.get_sheets_mirror(config) is None
    mock_creds.assert_not_called()
    mock_build.assert_not_called()


def test_platform_registration():
    """Test that platforms are properly registered"""
    platforms = PlatformFactory._platforms

    assert platforms['google'] == GoogleCalendarPlatform
    assert all(issubclass(platform, CalendarPlatform) for platform in platforms.values())
