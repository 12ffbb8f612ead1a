"""Encode/decode boundary for JSON text columns.

Three columns hold structured data as JSON text:
- products.images: ordered list of URL strings
- stores.opening_hours: {day: {"open": "HH:MM", "close": "HH:MM"} | "closed" | null}
- delivery_zones.postal_codes: list of postal code strings

Contract: decode(encode(x)) == x. Corrupt text or a value of the wrong
JSON shape raises DecodeError instead of leaking a bare JSONDecodeError.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import TypeAdapter, ValidationError

from catalog_api.errors import DecodeError
from catalog_api.schemas import OpeningHours

_string_list: TypeAdapter[list[str]] = TypeAdapter(list[str])
_opening_hours: TypeAdapter[OpeningHours] = TypeAdapter(OpeningHours)


def encode_json_field(value: Any) -> str:
    """Serialize a structured value for storage in a text column."""
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def decode_json_field(raw: str | bytes | None, *, field: str, record_id: str | None = None) -> Any:
    """Parse a JSON text column.

    Raises:
        DecodeError: If the stored text is missing or not valid JSON.
    """
    if raw is None:
        raise DecodeError(field, record_id, "value is null")
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError, UnicodeDecodeError) as e:
        raise DecodeError(field, record_id, str(e)) from e


def _validate(adapter: TypeAdapter, value: Any, *, field: str, record_id: str | None) -> Any:
    try:
        return adapter.validate_python(value)
    except ValidationError as e:
        reason = "; ".join(err["msg"] for err in e.errors()[:3])
        raise DecodeError(field, record_id, reason) from e


def decode_images(raw: str | None, *, record_id: str | None = None) -> list[str]:
    """Decode products.images into an ordered list of URLs."""
    value = decode_json_field(raw, field="images", record_id=record_id)
    return _validate(_string_list, value, field="images", record_id=record_id)


def decode_opening_hours(raw: str | None, *, record_id: str | None = None) -> OpeningHours:
    """Decode stores.opening_hours into a day -> interval mapping."""
    value = decode_json_field(raw, field="openingHours", record_id=record_id)
    return _validate(_opening_hours, value, field="openingHours", record_id=record_id)


def decode_postal_codes(raw: str | None, *, record_id: str | None = None) -> list[str]:
    """Decode delivery_zones.postal_codes into a list of strings."""
    value = decode_json_field(raw, field="postalCodes", record_id=record_id)
    return _validate(_string_list, value, field="postalCodes", record_id=record_id)
