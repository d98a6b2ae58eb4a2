# ==============================================================================
# dsr_commission/main/utils.py
# ------------------------------------------------------------------------------
# Request parsing helpers shared by the API routes.
# ==============================================================================

import json
import os

from dsr_commission.calculator.schema import FALSE_VALUES, TRUE_VALUES


class RequestError(ValueError):
    """Raised for a request the API cannot act on. Rendered as HTTP 400."""


def allowed_file(filename, allowed_extensions):
    """Checks if the file extension is in the allowed set."""
    return '.' in filename and os.path.splitext(filename)[1].lower() in allowed_extensions


def parse_approval(value):
    """Maps a JSON/form approval value to True, False or None (pending)."""
    if value is None or isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ('', 'null', 'none', 'pending'):
        return None
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    raise RequestError(f"'admin_approved' must be true, false or null, not '{value}'.")


def require_int(source, name, minimum=0):
    """Reads a whole number from a mapping of request values."""
    raw = source.get(name)
    if raw is None or str(raw).strip() == '':
        raise RequestError(f"'{name}' is required.")
    try:
        value = int(str(raw).strip())
    except ValueError:
        raise RequestError(f"'{name}' must be a whole number, not '{raw}'.")
    if value < minimum:
        raise RequestError(f"'{name}' must be at least {minimum}.")
    return value


def parse_joined_dates(raw):
    """Parses the optional JSON object of dsr_id -> joining date."""
    if not raw:
        return {}
    try:
        joined = json.loads(raw)
    except ValueError:
        raise RequestError("'joined' must be a JSON object of dsr_id to date.")
    if not isinstance(joined, dict):
        raise RequestError("'joined' must be a JSON object of dsr_id to date.")
    return {str(dsr_id): joined_on for dsr_id, joined_on in joined.items()}
