# app/utils/json_parser.py
"""
Helpers for reading JSON payloads from the identity provider
(webhook deliveries and the /auth/v1/user response).
"""

import json
from typing import Optional, Any


def safe_parse_json(raw_body: bytes) -> Optional[dict]:
    """Parse JSON bytes safely. Returns None on error or when the top level is not an object."""
    try:
        data = json.loads(raw_body.decode("utf-8", errors="replace"))
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    return data if isinstance(data, dict) else None


def get_nested(data: dict, *keys: str, default: Any = None) -> Any:
    """Safely navigate nested dict keys. Returns default if any key is missing."""
    current = data
    for key in keys:
        if not isinstance(current, dict):
            return default
        current = current.get(key, default)
        if current is default:
            return default
    return current
