"""Detect the wrapper convention of a list response and normalize it.

Servers behind the mock API return collections as a bare array, as an array
nested under ``data``, ``items`` or ``results``, or as a single object. The
rules below are checked in order and the first match wins; an unrecognized
value is treated as a single item rather than an error.
"""

from __future__ import annotations

import logging
from typing import Any

from infinity_clients.resources.models import NormalizedResult

logger = logging.getLogger(__name__)

# Checked in this order; servers may rely on which key is looked at first.
WRAPPER_KEYS = ("data", "items", "results")


def detect_shape(value: Any) -> str:
    """Return the name of the rule that matches ``value``."""
    if isinstance(value, list):
        return "list"
    if isinstance(value, dict):
        for key in WRAPPER_KEYS:
            if isinstance(value.get(key), list):
                return key
    return "object"


def extract_items(value: Any) -> list[Any]:
    shape = detect_shape(value)
    if shape == "list":
        return value
    if shape == "object":
        return [value]
    return value[shape]


def normalize(value: Any) -> NormalizedResult:
    """Normalize a decoded JSON value into a successful ``NormalizedResult``.

    ``count`` is always the length of the extracted list; sibling keys such
    as a server-claimed ``total`` are ignored.
    """
    shape = detect_shape(value)
    items = extract_items(value)
    if shape == "object":
        keys = list(value.keys()) if isinstance(value, dict) else type(value).__name__
        logger.debug(f"No list wrapper found, treating response as a single item ({keys})")
    return NormalizedResult(
        success=True,
        items=items,
        count=len(items),
        shape=shape,
        raw=value,
    )
