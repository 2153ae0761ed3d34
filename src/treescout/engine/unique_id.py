#
# src/treescout/engine/unique_id.py
#
"""
Hierarchical, typed-segment identifiers for discovery tree nodes.

The canonical string form is ``type1:value1/type2:value2``. Values are
percent-encoded for ``%``, ``:`` and ``/`` so that any id survives a
``str()``/``UniqueId.parse()`` round trip.
"""

import re

from attrs import define, field

from treescout.exceptions import MalformedIdError

ENGINE_SEGMENT_TYPE = "engine"
SEGMENT_DELIMITER = "/"
TYPE_VALUE_SEPARATOR = ":"

_SEGMENT_TYPE_PATTERN = re.compile(r"[A-Za-z][A-Za-z0-9_.\-]*")
_ESCAPES = {"%": "%25", ":": "%3A", "/": "%2F"}
_UNESCAPES = {escape: char for char, escape in _ESCAPES.items()}
_ESCAPE_PATTERN = re.compile(r"%.{0,2}", re.DOTALL)


def _encode(value: str) -> str:
    return "".join(_ESCAPES.get(char, char) for char in value)


def _decode(text: str, encoded_value: str) -> str:
    """Reverses _encode; any other use of '%' is outside the grammar."""

    def replace(match: re.Match) -> str:
        escape = match.group(0).upper()
        if escape not in _UNESCAPES:
            raise MalformedIdError(text, f"invalid escape '{match.group(0)}' in '{encoded_value}'")
        return _UNESCAPES[escape]

    return _ESCAPE_PATTERN.sub(replace, encoded_value)


def _validate_segment_type(inst, attr, value: str) -> None:
    if not _SEGMENT_TYPE_PATTERN.fullmatch(value):
        raise ValueError(f"Invalid segment type '{value}'")


def _validate_segment_value(inst, attr, value: str) -> None:
    if not value:
        raise ValueError("Segment value must not be empty")


@define(frozen=True, slots=True)
class Segment:
    """One typed step of a UniqueId."""

    type: str = field(validator=_validate_segment_type)
    value: str = field(validator=_validate_segment_value)

    def __str__(self) -> str:
        return f"{self.type}{TYPE_VALUE_SEPARATOR}{_encode(self.value)}"


@define(frozen=True, slots=True)
class UniqueId:
    """
    Immutable, ordered path of segments.

    Equality is structural; two ids are equal iff their segments are equal
    element-wise. ``append`` never mutates, it returns a longer id.
    """

    segments: tuple[Segment, ...] = field(converter=tuple)

    @segments.validator
    def _check_segments(self, attribute, value) -> None:
        if not value:
            raise ValueError("A UniqueId needs at least one segment")

    @classmethod
    def for_engine(cls, engine_id: str) -> "UniqueId":
        return cls((Segment(ENGINE_SEGMENT_TYPE, engine_id),))

    @classmethod
    def parse(cls, text: str) -> "UniqueId":
        """
        Parses the canonical string form back into a UniqueId.

        Raises:
            MalformedIdError: If the text does not match the segment grammar.
        """
        if not isinstance(text, str) or not text:
            raise MalformedIdError(str(text), "empty input")

        segments = []
        for position, raw in enumerate(text.split(SEGMENT_DELIMITER)):
            if not raw:
                raise MalformedIdError(text, f"empty segment at position {position}")
            segment_type, separator, encoded_value = raw.partition(TYPE_VALUE_SEPARATOR)
            if not separator:
                raise MalformedIdError(text, f"segment '{raw}' has no type separator")
            if not _SEGMENT_TYPE_PATTERN.fullmatch(segment_type):
                raise MalformedIdError(text, f"invalid segment type '{segment_type}'")
            if not encoded_value:
                raise MalformedIdError(text, f"segment '{raw}' has an empty value")
            segments.append(Segment(segment_type, _decode(text, encoded_value)))
        return cls(tuple(segments))

    def append(self, segment_type: str, value: str) -> "UniqueId":
        return UniqueId((*self.segments, Segment(segment_type, value)))

    @property
    def last_segment(self) -> Segment:
        return self.segments[-1]

    @property
    def engine_segment(self) -> Segment:
        return self.segments[0]

    def parent_id(self) -> "UniqueId | None":
        """Returns the id one segment shorter, or None for a single-segment id."""
        if len(self.segments) == 1:
            return None
        return UniqueId(self.segments[:-1])

    def is_prefix_of(self, other: "UniqueId") -> bool:
        return (
            len(self.segments) <= len(other.segments)
            and other.segments[: len(self.segments)] == self.segments
        )

    def __len__(self) -> int:
        return len(self.segments)

    def __str__(self) -> str:
        return SEGMENT_DELIMITER.join(str(segment) for segment in self.segments)

# 🔼⚙️
