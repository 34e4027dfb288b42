"""Known response envelopes of the AMC API.

The AMC API has wrapped list payloads differently across versions:

- HAL:   ``{"_embedded": {"movies": [...]}, "_links": {...}}``
- keyed: ``{"movies": [...]}`` (or ``theatres``, ``showtimes``, ...)
- data:  ``{"data": [...]}``

Each shape has its own extractor. ``unwrap`` tries them in a fixed priority
order and returns the first non-empty list, or an empty list when nothing
matches.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class EnvelopeShape(str, Enum):
    HAL_EMBEDDED = "hal_embedded"
    KEYED = "keyed"
    DATA = "data"
    BARE_LIST = "bare_list"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Envelope:
    shape: EnvelopeShape
    items: list[dict[str, Any]] = field(default_factory=list)


def _non_empty_list(value: Any) -> list[dict[str, Any]] | None:
    if isinstance(value, list) and value:
        return value
    return None


def _from_hal(payload: Any, keys: Sequence[str]) -> list[dict[str, Any]] | None:
    if not isinstance(payload, dict):
        return None
    embedded = payload.get("_embedded")
    if not isinstance(embedded, dict):
        return None
    for key in keys:
        items = _non_empty_list(embedded.get(key))
        if items:
            return items
    return None


def _from_keyed(payload: Any, keys: Sequence[str]) -> list[dict[str, Any]] | None:
    if not isinstance(payload, dict):
        return None
    for key in keys:
        items = _non_empty_list(payload.get(key))
        if items:
            return items
    return None


def _from_data(payload: Any, keys: Sequence[str]) -> list[dict[str, Any]] | None:
    if not isinstance(payload, dict):
        return None
    return _non_empty_list(payload.get("data"))


def _from_bare_list(payload: Any, keys: Sequence[str]) -> list[dict[str, Any]] | None:
    return _non_empty_list(payload)


Extractor = Callable[[Any, Sequence[str]], list[dict[str, Any]] | None]

# Priority order matters: the HAL form is what the current API returns.
EXTRACTORS: tuple[tuple[EnvelopeShape, Extractor], ...] = (
    (EnvelopeShape.HAL_EMBEDDED, _from_hal),
    (EnvelopeShape.KEYED, _from_keyed),
    (EnvelopeShape.DATA, _from_data),
    (EnvelopeShape.BARE_LIST, _from_bare_list),
)


def classify(payload: Any, keys: Sequence[str]) -> Envelope:
    """
    Identify which envelope shape carries the list for any of ``keys``.

    Args:
        payload: Decoded JSON body
        keys: Candidate list keys, most preferred first (e.g. ``("theatres", "theaters")``)

    Returns:
        The matching envelope, or an UNKNOWN envelope with no items
    """
    for shape, extract in EXTRACTORS:
        items = extract(payload, keys)
        if items:
            return Envelope(shape=shape, items=items)
    return Envelope(shape=EnvelopeShape.UNKNOWN)


def unwrap(payload: Any, *keys: str) -> list[dict[str, Any]]:
    """Return the list carried by ``payload`` under any known envelope, or ``[]``."""
    return classify(payload, keys).items
