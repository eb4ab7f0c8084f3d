"""Coercion of raw property text into typed values.

The bridge only ever returns text. Every numeric or boolean interpretation
happens here and fails with a PropertyCoercionError that names the property
and the offending text.
"""

from __future__ import annotations

from tunebridge.core.player_properties import PLAYER_STATE_PLAYING

SECONDS_PER_MINUTE = 60

_TRUE_VALUES = frozenset({"true", "1"})
_FALSE_VALUES = frozenset({"false", "0"})


class PropertyCoercionError(ValueError):
    """Raised when a raw property value cannot be converted to the expected type."""

    def __init__(self, expression: str, raw_value: str, expected: str) -> None:
        """Initialize the coercion error.

        Args:
            expression: Property the value was read from
            raw_value: Text returned by the host
            expected: Name of the expected type

        """
        super().__init__(f"Cannot read {expression}={raw_value!r} as {expected}")
        self.expression = expression
        self.raw_value = raw_value
        self.expected = expected


def coerce_int(raw_value: str, expression: str = "value") -> int:
    """Parse trimmed text as an integer.

    Raises:
        PropertyCoercionError: If the text is not an integer

    """
    text = raw_value.strip()
    try:
        return int(text)
    except ValueError as e:
        raise PropertyCoercionError(expression, raw_value, "int") from e


def coerce_bool(raw_value: str, expression: str = "value") -> bool:
    """Parse ``True``/``False`` (any case) or ``1``/``0``.

    Raises:
        PropertyCoercionError: For any other text

    """
    text = raw_value.strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise PropertyCoercionError(expression, raw_value, "bool")


def coerce_player_state(raw_value: str) -> bool:
    """Return True when the player state reports playback."""
    return raw_value.strip() == PLAYER_STATE_PLAYING


def format_minutes_seconds(seconds: int) -> str:
    """Format seconds as ``M:SS``; minutes are not capped (3725 -> ``62:05``).

    Raises:
        ValueError: For negative input

    """
    if seconds < 0:
        msg = f"seconds must not be negative: {seconds}"
        raise ValueError(msg)
    minutes, remainder = divmod(seconds, SECONDS_PER_MINUTE)
    return f"{minutes}:{remainder:02d}"
