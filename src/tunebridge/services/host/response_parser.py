"""Batch probe response parsing.

The host cannot label its output, so the i-th output line belongs to the i-th
requested expression. A response with fewer lines than expressions (or with
extra non-blank lines) cannot be attributed safely and is rejected as a whole.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence


class MisalignedBatchResponseError(ValueError):
    """Raised when the batch output line count does not match the request."""

    def __init__(self, expected: int, received: int, expressions: Sequence[str]) -> None:
        """Initialize the alignment error.

        Args:
            expected: Number of requested expressions
            received: Number of usable output lines
            expressions: The requested expressions, in order

        """
        super().__init__(f"Batch probe expected {expected} output lines, received {received}")
        self.expected = expected
        self.received = received
        self.expressions = tuple(expressions)


class ProbeResponse(Mapping[str, str]):
    """Ordered association of requested expressions to raw output lines.

    Positional entries are kept as returned; the mapping interface is a
    name-keyed view over them. A repeated expression maps to its last line.
    """

    __slots__ = ("_entries", "_index")

    def __init__(self, entries: Sequence[tuple[str, str]] = ()) -> None:
        self._entries: tuple[tuple[str, str], ...] = tuple(entries)
        self._index: dict[str, str] = dict(self._entries)

    @property
    def entries(self) -> tuple[tuple[str, str], ...]:
        """(expression, raw value) pairs in request order."""
        return self._entries

    def __getitem__(self, expression: str) -> str:
        return self._index[expression]

    def __iter__(self) -> Iterator[str]:
        return iter(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def __repr__(self) -> str:
        return f"ProbeResponse({list(self._entries)!r})"


def split_output_lines(raw: str) -> list[str]:
    """Split host output on line boundaries, dropping ``\\n``/``\\r\\n`` terminators.

    Only newlines delimit lines; other Unicode separators are part of the value.
    """
    if not raw:
        return []
    lines = [line.removesuffix("\r") for line in raw.split("\n")]
    # A terminating newline does not open another line
    if raw.endswith("\n"):
        lines.pop()
    return lines


def parse_batch_response(raw: str, expressions: Sequence[str]) -> ProbeResponse:
    """Attribute each output line to the expression at the same position.

    Args:
        raw: Verbatim host output
        expressions: Requested expressions, in the order they were rendered

    Returns:
        ProbeResponse holding exactly one entry per requested expression

    Raises:
        MisalignedBatchResponseError: Fewer lines than expressions, or
            non-blank lines beyond the expected count

    """
    lines = split_output_lines(raw)
    expected = len(expressions)

    if len(lines) < expected:
        raise MisalignedBatchResponseError(expected, len(lines), expressions)

    # Trailing blank lines are tolerated; trailing data is not
    if any(line.strip() for line in lines[expected:]):
        raise MisalignedBatchResponseError(expected, len(lines), expressions)

    return ProbeResponse(list(zip(expressions, lines[:expected], strict=True)))
