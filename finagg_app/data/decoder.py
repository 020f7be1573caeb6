"""
Columnar payload decoding.

The provider answers every endpoint with the same shape:

    {"fields": ["ts_code", "end_date", ...],
     "items": [["000001.SZ", "20231231", ...], ...]}

Each inner array lines up position by position with ``fields``. Decoding
zips the two into field-keyed records, preserving row order.
"""

from typing import Any, Optional

from ..errors import MalformedPayloadError
from .models import Record


class TabularDecoder:
    """Converts provider ``(fields, items)`` payloads into records."""

    def decode(self, payload: Optional[dict[str, Any]]) -> list[Record]:
        """
        Decode a provider ``data`` payload.

        Args:
            payload: The ``data`` member of a provider reply (may be None)

        Returns:
            One record per item row, in provider order. Empty when there
            are no items.

        Raises:
            MalformedPayloadError: If fields are missing or repeated while
                items exist, or a row does not have exactly one value per field
        """
        if not payload:
            return []

        if not isinstance(payload, dict):
            raise MalformedPayloadError("Payload must be a dictionary")

        items = payload.get("items")
        if not items:
            return []

        if not isinstance(items, list):
            raise MalformedPayloadError("'items' field must be a list")

        fields = payload.get("fields")
        if not fields:
            raise MalformedPayloadError(
                f"Missing 'fields' for {len(items)} item rows",
                context={"item_count": len(items)}
            )

        duplicates = sorted({name for name in fields if fields.count(name) > 1})
        if duplicates:
            raise MalformedPayloadError(
                f"Duplicate field names: {', '.join(map(str, duplicates))}",
                context={"duplicates": duplicates}
            )

        width = len(fields)
        records = []

        for row_index, row in enumerate(items):
            if not isinstance(row, (list, tuple)):
                raise MalformedPayloadError(
                    f"Row {row_index} must be a list, got {type(row).__name__}",
                    row_index=row_index
                )
            if len(row) != width:
                raise MalformedPayloadError(
                    f"Row {row_index} has {len(row)} values for {width} fields",
                    row_index=row_index,
                    context={"expected": width, "actual": len(row)}
                )
            records.append(dict(zip(fields, row)))

        return records
