from typing import Any, Dict
import json
from lambda_function import CONFIG, dispatch

QUERY_FIELDS = ('action', 'name', 'sheetName', 'date', 'titles')


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    AWS Lambda handler for direct invocations (console tests, scheduled rules).

    Args:
        event: Dict containing:
            - method: 'GET' or 'POST' (defaults to 'POST' when the event has an
              action other than a read action, 'GET' otherwise)
            - action: 'health', 'getSheetNames', 'getSlots', 'getEvents',
              'addAll' or 'removeAll'
            - name / sheetName / date / titles: query parameters
            - Any body fields for POST actions (events, dates, selectedDate,
              startDate, endDate, isRangeMode, eventDuration)
        context: AWS Lambda context

    Returns:
        dict: Response with statusCode and JSON body
    """
    event = dict(event)
    action = event.get('action')
    default_method = 'POST' if action in ('addAll', 'removeAll') else 'GET'
    method = (event.pop('method', None) or default_method).upper()

    if method == 'GET':
        query = {key: event[key] for key in QUERY_FIELDS if event.get(key) is not None}
        gateway_event = {'httpMethod': 'GET', 'queryStringParameters': query}
    else:
        query = {'name': event.pop('name')} if event.get('name') else {}
        gateway_event = {
            'httpMethod': method,
            'queryStringParameters': query,
            'body': json.dumps(event)
        }

    return dispatch(gateway_event, CONFIG)
