from .schedule_handlers import (
    handle_health,
    handle_get_sheet_names,
    handle_get_slots,
    handle_get_events,
    handle_add_all,
    handle_remove_all
)

# Map (method, action) to their handlers
GET_HANDLERS = {
    'health': handle_health,
    'getSheetNames': handle_get_sheet_names,
    'getSlots': handle_get_slots,
    'getEvents': handle_get_events
}

POST_HANDLERS = {
    'addAll': handle_add_all,
    'removeAll': handle_remove_all
}

HANDLERS = {
    'GET': GET_HANDLERS,
    'POST': POST_HANDLERS
}
