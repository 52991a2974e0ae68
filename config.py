from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional
import json
import logging
import os

import pytz

from constants import (
    CALENDAR_ID_SUFFIX,
    DEFAULT_CALENDAR_ACCOUNT,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_TIME_ZONE
)

logger = logging.getLogger(__name__)

# Credential source kinds, in precedence order
SERVICE_ACCOUNT_INFO = 'service_account_info'
SERVICE_ACCOUNT_FILE = 'service_account_file'
USER_TOKEN_FILE = 'user_token_file'


@dataclass(frozen=True)
class CredentialSource:
    """Where Google credentials come from. Resolved once by load_config."""
    kind: str
    info: Optional[Dict[str, Any]] = None
    path: Optional[str] = None

    def describe(self) -> str:
        if self.kind == SERVICE_ACCOUNT_INFO:
            return f"inline service account ({(self.info or {}).get('client_email', 'unknown')})"
        return f'{self.kind} at {self.path}'


@dataclass(frozen=True)
class AppConfig:
    calendar_ids: Dict[str, str] = field(default_factory=dict)
    credential_source: Optional[CredentialSource] = None
    credential_error: Optional[str] = None
    spreadsheet_id: Optional[str] = None
    time_zone: str = DEFAULT_TIME_ZONE
    calendar_account: str = DEFAULT_CALENDAR_ACCOUNT
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    @property
    def sheet_names(self):
        return sorted(self.calendar_ids)

    def calendar_id_for(self, name: Optional[str]) -> Optional[str]:
        if not name:
            return None
        return self.calendar_ids.get(name)


def _load_calendar_ids(environ: Mapping[str, str]) -> Dict[str, str]:
    calendar_ids = {}
    for key, value in environ.items():
        if not key.endswith(CALENDAR_ID_SUFFIX):
            continue
        name = key[:-len(CALENDAR_ID_SUFFIX)]
        if name and value and value.strip():
            calendar_ids[name] = value.strip()
    return calendar_ids


def _select_account_credentials(parsed: Any, account: str) -> Optional[Dict[str, Any]]:
    """Accept both {"Home": {...}} and a flat service account key"""
    if not isinstance(parsed, dict):
        return None
    nested = parsed.get(account)
    if isinstance(nested, dict):
        return nested
    if 'client_email' in parsed or parsed.get('type') == 'service_account':
        return parsed
    return None


def resolve_credential_source(environ: Mapping[str, str], account: str):
    """
    Resolve the single credential source for this process.

    Precedence:
        1. GOOGLE_SERVICE_ACCOUNT_KEY - inline JSON, flat or nested per account
        2. GOOGLE_SERVICE_ACCOUNT_FILE, then GOOGLE_APPLICATION_CREDENTIALS - key file path
        3. GOOGLE_TOKEN_FILE - pickled OAuth user token

    Returns:
        Tuple of (CredentialSource or None, error message or None). A present but
        unusable inline key is an error and does not fall through to later sources.
    """
    inline = environ.get('GOOGLE_SERVICE_ACCOUNT_KEY')
    if inline and inline.strip():
        try:
            parsed = json.loads(inline)
        except json.JSONDecodeError as e:
            return None, f'GOOGLE_SERVICE_ACCOUNT_KEY is not valid JSON: {e}'
        info = _select_account_credentials(parsed, account)
        if info is None:
            return None, f'Service account credentials missing for {account}'
        return CredentialSource(kind=SERVICE_ACCOUNT_INFO, info=info), None

    for variable in ('GOOGLE_SERVICE_ACCOUNT_FILE', 'GOOGLE_APPLICATION_CREDENTIALS'):
        path = environ.get(variable)
        if path and path.strip():
            return CredentialSource(kind=SERVICE_ACCOUNT_FILE, path=path.strip()), None

    token_path = environ.get('GOOGLE_TOKEN_FILE')
    if token_path and token_path.strip():
        return CredentialSource(kind=USER_TOKEN_FILE, path=token_path.strip()), None

    return None, 'No Google credentials configured'


def _load_time_zone(environ: Mapping[str, str]) -> str:
    time_zone = environ.get('TIME_ZONE') or DEFAULT_TIME_ZONE
    try:
        pytz.timezone(time_zone)
    except pytz.UnknownTimeZoneError:
        logger.error("Unknown TIME_ZONE %s, using %s", time_zone, DEFAULT_TIME_ZONE)
        time_zone = DEFAULT_TIME_ZONE
    return time_zone


def _load_timeout(environ: Mapping[str, str]) -> float:
    raw = environ.get('GOOGLE_API_TIMEOUT')
    if not raw:
        return DEFAULT_REQUEST_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError:
        timeout = 0
    if timeout <= 0:
        logger.error("Invalid GOOGLE_API_TIMEOUT %s, using %s", raw, DEFAULT_REQUEST_TIMEOUT)
        return DEFAULT_REQUEST_TIMEOUT
    return timeout


def load_config(environ: Mapping[str, str] = None) -> AppConfig:
    """Build the process configuration from environment variables. Never raises."""
    if environ is None:
        environ = os.environ

    account = environ.get('CALENDAR_ACCOUNT') or DEFAULT_CALENDAR_ACCOUNT
    credential_source, credential_error = resolve_credential_source(environ, account)
    if credential_error:
        logger.error("Credential configuration problem: %s", credential_error)

    calendar_ids = _load_calendar_ids(environ)
    if not calendar_ids:
        logger.warning("No *%s environment variables found", CALENDAR_ID_SUFFIX)

    spreadsheet_id = (environ.get('SPREADSHEET_ID') or '').strip() or None

    return AppConfig(
        calendar_ids=calendar_ids,
        credential_source=credential_source,
        credential_error=credential_error,
        spreadsheet_id=spreadsheet_id,
        time_zone=_load_time_zone(environ),
        calendar_account=account,
        request_timeout=_load_timeout(environ)
    )
