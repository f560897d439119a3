"""Helpers for coarse validation of request input in route handlers."""
from typing import Any, Dict, Optional, Tuple

from flask import current_app, request

from utils.errors import ValidationError


def parse_id(value: Optional[str], name: str = 'id') -> int:
    """Parse a positive integer identifier.

    Args:
        value: Raw value from the path or query string.
        name: Parameter name used in the error message.

    Raises:
        ValidationError: If the value is missing, not an integer or not positive.
    """
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'Invalid {name}') from None
    if parsed <= 0:
        raise ValidationError(f'Invalid {name}')
    return parsed


def parse_pagination() -> Tuple[int, int, str]:
    """Read ``limit``, ``offset`` and ``searchText`` from the query string.

    Returns:
        Tuple of (limit, offset, search).

    Raises:
        ValidationError: If limit is not in 1..MAX_PAGE_LIMIT or offset is negative.
    """
    try:
        limit = int(request.args.get('limit', current_app.config['DEFAULT_PAGE_LIMIT']))
        offset = int(request.args.get('offset', 0))
    except ValueError:
        raise ValidationError('Invalid limit or offset') from None

    if limit <= 0 or offset < 0 or limit > current_app.config['MAX_PAGE_LIMIT']:
        raise ValidationError('Invalid limit or offset')

    return limit, offset, request.args.get('searchText', '').strip()


def json_body() -> Dict[str, Any]:
    """Decoded JSON object body of the current request.

    Raises:
        ValidationError: If the body is missing or not a JSON object.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('No body provided')
    return data
