"""
Text utility functions.
"""
import json
from typing import Any, Dict


def format_reference(value: Any) -> str:
    """
    Format an identifier for log output.

    Binary ids (Shopware stores UUIDs as BINARY(16)) are shown as hex.
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()
    return str(value)


def format_values(values: Dict[str, Any]) -> str:
    """Render a column -> value mapping as compact JSON for logging."""
    return json.dumps(
        {key: format_reference(value) if isinstance(value, (bytes, bytearray, memoryview)) else value
         for key, value in values.items()},
        ensure_ascii=False,
        default=str,
    )


def is_empty(value: Any) -> bool:
    """True for None and the empty string."""
    return value is None or value == ""
