"""
Maps kinship errors to (status, body) tuples for the ninja views
"""
import logging
from typing import Any, Dict, Tuple

from kinship.exceptions import BackingStoreError, InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)

STORE_UNAVAILABLE_MESSAGE = "Spreadsheet storage is unavailable"
SERVER_ERROR_MESSAGE = "Server error occurred"

# Checked in order; the first matching type wins
CLIENT_ERROR_STATUS = (
    (NotFoundError, 404),
    (InvalidInputError, 400),
)


def _body(success: bool, message: str) -> Dict[str, Any]:
    return {'success': success, 'message': message}


def error_response_for(exc: Exception) -> Tuple[int, Dict[str, Any]]:
    """
    Turn an exception raised by a service into an error response

    Lookup failures and bad input carry their own message back to the client.
    Store failures and unexpected errors are logged with the traceback and get
    a generic message.

    Args:
        exc: Exception caught in the view

    Returns:
        (status_code, {'success': False, 'message': ...})
    """
    for error_type, status_code in CLIENT_ERROR_STATUS:
        if isinstance(exc, error_type):
            logger.warning(f"⚠️ {exc}")
            return status_code, _body(False, str(exc))

    if isinstance(exc, BackingStoreError):
        logger.error(f"❌ {exc}", exc_info=True)
        return 502, _body(False, STORE_UNAVAILABLE_MESSAGE)

    logger.error(f"❌ Unexpected error: {exc}", exc_info=True)
    return 500, _body(False, SERVER_ERROR_MESSAGE)


def connected_response(store_title: str) -> Tuple[int, Dict[str, Any]]:
    """Answer of the initialize endpoint once the store responded"""
    logger.info(f"✅ Connected to {store_title}")
    body = _body(True, "Connected to spreadsheet")
    body['store'] = store_title
    return 200, body
