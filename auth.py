from google.oauth2 import service_account
from google.auth.transport.requests import Request
from google.auth.exceptions import GoogleAuthError
import logging
import os
import pickle
from config import (
    CredentialSource,
    SERVICE_ACCOUNT_FILE,
    SERVICE_ACCOUNT_INFO,
    USER_TOKEN_FILE
)
from constants import GOOGLE_API_SCOPES
from errors import ConfigurationError

logger = logging.getLogger(__name__)


def _save_user_token(creds, token_path):
    """Write a refreshed token back; a read-only deployment keeps using it in memory"""
    try:
        with open(token_path, 'wb') as token:
            pickle.dump(creds, token)
    except OSError as e:
        logger.warning("Could not save refreshed token to %s: %s", token_path, e)


def _load_user_token(token_path):
    """Load a pickled OAuth user token and refresh it if it has expired."""
    if not os.path.exists(token_path):
        raise ConfigurationError(
            'Failed to authenticate with Google APIs',
            f'Token file not found: {token_path}. Run scripts/regenerate_token.py'
        )

    with open(token_path, 'rb') as token:
        creds = pickle.load(token)

    if not creds.valid:
        if creds.expired and creds.refresh_token:
            logger.info("Refreshing expired user token from %s", token_path)
            creds.refresh(Request())
            _save_user_token(creds, token_path)
        else:
            raise ConfigurationError(
                'Failed to authenticate with Google APIs',
                'Stored token is invalid and has no refresh token'
            )
    return creds


def get_credentials(source: CredentialSource, scopes=None):
    """Gets valid credentials for the configured source.

    Returns:
        Credentials, the obtained credential.

    Raises:
        ConfigurationError: the source is missing or unusable.
    """
    scopes = scopes or GOOGLE_API_SCOPES
    if source is None:
        raise ConfigurationError('Failed to authenticate with Google APIs', 'No Google credentials configured')

    try:
        if source.kind == SERVICE_ACCOUNT_INFO:
            creds = service_account.Credentials.from_service_account_info(source.info, scopes=scopes)
        elif source.kind == SERVICE_ACCOUNT_FILE:
            creds = service_account.Credentials.from_service_account_file(source.path, scopes=scopes)
        elif source.kind == USER_TOKEN_FILE:
            creds = _load_user_token(source.path)
        else:
            raise ConfigurationError('Failed to authenticate with Google APIs',
                                     f'Unknown credential source: {source.kind}')
    except (GoogleAuthError, ValueError, KeyError, OSError, pickle.UnpicklingError) as e:
        logger.error("Authentication failed for %s: %s", source.describe(), e)
        raise ConfigurationError('Failed to authenticate with Google APIs', str(e)) from e

    logger.info("Authentication successful using %s", source.describe())
    return creds


def credentials_for(config):
    """Credentials for the process configuration, reporting any problem found at load time"""
    if config.credential_source is None:
        raise ConfigurationError(
            'Failed to authenticate with Google APIs',
            config.credential_error or 'No Google credentials configured'
        )
    return get_credentials(config.credential_source)
