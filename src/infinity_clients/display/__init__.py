"""Display formatting for raw API items."""

from infinity_clients.display.fields import (
    FieldSpec,
    format_timestamp,
    map_account,
    map_email,
    map_email_detail,
    map_event,
    map_item,
    map_items,
    truncate,
)

__all__ = [
    "FieldSpec",
    "format_timestamp",
    "map_account",
    "map_email",
    "map_email_detail",
    "map_event",
    "map_item",
    "map_items",
    "truncate",
]
