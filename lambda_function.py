from typing import Any, Dict
import base64
import binascii
import json
import traceback
import logging
from config import AppConfig, load_config
from errors import ConfigurationError, ValidationError
from handlers import HANDLERS

# Set up logging
logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

# Loaded once per cold start and passed to every handler
CONFIG = load_config()

JSON_HEADERS = {'Content-Type': 'application/json'}


def _response(status_code: int, body: Dict[str, Any]) -> Dict[str, Any]:
    return {
        'statusCode': status_code,
        'headers': dict(JSON_HEADERS),
        'body': json.dumps(body)
    }


def _error(status_code: int, message: str, details: str = None) -> Dict[str, Any]:
    body = {'error': message}
    if details:
        body['details'] = details
    return _response(status_code, body)


def _method(event: Dict[str, Any]) -> str:
    method = event.get('httpMethod')
    if not method:
        # HTTP API (payload format 2.0)
        method = event.get('requestContext', {}).get('http', {}).get('method')
    return (method or 'GET').upper()


def _parse_body(event: Dict[str, Any]) -> Dict[str, Any]:
    """Decode the JSON request body, raising ValidationError when it is not a JSON object"""
    raw = event.get('body')
    if raw is None or raw == '':
        raise ValidationError('Invalid JSON in request body', 'Body is empty')
    if isinstance(raw, dict):
        return raw
    try:
        if event.get('isBase64Encoded'):
            raw = base64.b64decode(raw).decode('utf-8')
        body = json.loads(raw)
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        raise ValidationError('Invalid JSON in request body', str(e))
    if not isinstance(body, dict):
        raise ValidationError('Invalid JSON in request body', 'Body must be a JSON object')
    return body


def dispatch(event: Dict[str, Any], config: AppConfig) -> Dict[str, Any]:
    """Route an API Gateway event to the handler for its method and action"""
    method = _method(event)
    handlers = HANDLERS.get(method)
    if handlers is None:
        logger.error("Unsupported method: %s", method)
        return _error(405, f'Method {method} not allowed')

    query = event.get('queryStringParameters') or {}

    try:
        if method == 'GET':
            body = {}
            action = query.get('action') or 'health'
        else:
            body = _parse_body(event)
            action = body.get('action')
            if not action:
                logger.error("No action found in request body")
                return _error(400, 'Missing action in request body')

        handler = handlers.get(action)
        if not handler:
            logger.error("No handler found for action: %s", action)
            return _error(400, 'Invalid or missing action' if method == 'GET' else 'Invalid action')

        logger.info("Executing %s handler for action: %s", method, action)
        result = handler(query, body, config)
        logger.info("Handler result: %s", result)
        return _response(result['statusCode'], result['body'])

    except ValidationError as e:
        logger.error("ValidationError: %s", e)
        message = e.args[0] if e.args else str(e)
        details = e.args[1] if len(e.args) > 1 else None
        return _error(400, message, details)
    except ConfigurationError as e:
        logger.error("ConfigurationError: %s (%s)", e, e.details)
        return _error(500, str(e), e.details)
    except Exception as e:
        logger.error("Error details: %s", str(e))
        logger.error("Error type: %s", type(e))
        logger.error("Traceback: %s", traceback.format_exc())
        return _error(500, 'Failed to process request', str(e))


def lambda_handler(event, context):
    """Handle API Gateway proxy events (REST and HTTP API payloads)"""
    logger.info("Received %s request with query %s", _method(event), event.get('queryStringParameters'))
    return dispatch(event, CONFIG)
