# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Value model for XMP properties.

A property value is one of four kinds: :class:`Text`, :class:`LangAlt`,
:class:`Struct` or :class:`Array`. The set is closed; the element writer
handles each kind explicitly and rejects anything else.
"""

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Union

from .namespaces import Namespace

# Language tag of the default entry in an XMP language alternative
DEFAULT_LANGUAGE = "x-default"

# XMP Date: ISO 8601 subset, from year-only up to seconds with an offset
_XMP_DATE_RE = re.compile(
    r"(?P<year>\d{4})"
    r"(-(?P<month>\d{2})"
    r"(-(?P<day>\d{2})"
    r"(T(?P<hour>\d{2}):(?P<minute>\d{2})"
    r"(:(?P<second>\d{2}))?"
    r"(?P<tz>Z|[+-]\d{2}:\d{2})?"
    r")?"
    r")?"
    r")?$"
)


class ArrayKind(Enum):
    """XMP array kinds and the RDF container each is written as."""

    UNORDERED = "Bag"
    ORDERED = "Seq"
    ALTERNATIVE = "Alt"

    @property
    def rdf_type(self) -> str:
        return self.value


@dataclass(frozen=True)
class Text:
    """A simple (leaf) value."""

    value: str


@dataclass(frozen=True)
class LangAlt:
    """The same text in several languages.

    Entries are ``(language, text)`` pairs written in the given order. A
    language of ``None`` marks the default entry, which is written without
    an ``xml:lang`` attribute; a value may hold at most one of them. An
    empty language also declares "no language" and counts as a default.
    """

    items: tuple[tuple[str | None, str], ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(tuple(i) for i in self.items))


@dataclass(frozen=True)
class Struct:
    """A record of named fields, written in insertion order.

    Fields are written in ``namespace`` when given, otherwise in the
    namespace of the property that holds the struct.
    """

    fields: Mapping[str, "Value"] = field(default_factory=dict)
    namespace: Namespace | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", dict(self.fields))


@dataclass(frozen=True)
class Array:
    """An ordered, unordered or alternative array of values."""

    kind: ArrayKind
    items: tuple["Value", ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))

    @classmethod
    def of(cls, kind: ArrayKind, items: Iterable[Any]) -> "Array":
        """Build an array, wrapping plain scalars in :class:`Text`."""
        return cls(kind, tuple(as_value(item) for item in items))


Value = Union[Text, LangAlt, Struct, Array]


@dataclass(frozen=True)
class DateTime:
    """An XMP date with explicit precision.

    Components are filled from the year downwards; everything after the
    first ``None`` must also be ``None``, except that seconds may be
    omitted when a timezone offset is given. A zero offset is written as
    ``+00:00``.
    """

    year: int
    month: int | None = None
    day: int | None = None
    hour: int | None = None
    minute: int | None = None
    second: int | None = None
    tz_hour: int | None = None
    tz_minute: int | None = None

    def __post_init__(self) -> None:
        if not 0 <= self.year <= 9999:
            raise ValueError(f"Year out of range: {self.year}")
        if self.day is not None and self.month is None:
            raise ValueError("A day requires a month")
        if self.hour is not None and self.day is None:
            raise ValueError("A time requires a full date")
        if self.minute is not None and self.hour is None:
            raise ValueError("Minutes require an hour")
        if self.second is not None and self.minute is None:
            raise ValueError("Seconds require minutes")
        if self.tz_hour is not None and self.hour is None:
            raise ValueError("A timezone offset requires a time")
        if self.tz_minute is not None and self.tz_hour is None:
            raise ValueError("Timezone minutes require a timezone hour")

        if self.month is not None and not 1 <= self.month <= 12:
            raise ValueError(f"Month out of range: {self.month}")
        if self.day is not None:
            # Raises ValueError for days the month does not have
            datetime(self.year or 1, self.month, self.day)
        if self.hour is not None and not 0 <= self.hour <= 23:
            raise ValueError(f"Hour out of range: {self.hour}")
        if self.minute is not None and not 0 <= self.minute <= 59:
            raise ValueError(f"Minute out of range: {self.minute}")
        if self.second is not None and not 0 <= self.second <= 59:
            raise ValueError(f"Second out of range: {self.second}")
        if self.tz_hour is not None and not -14 <= self.tz_hour <= 14:
            raise ValueError(f"Timezone hour out of range: {self.tz_hour}")
        if self.tz_minute is not None and not 0 <= self.tz_minute <= 59:
            raise ValueError(f"Timezone minute out of range: {self.tz_minute}")

    @classmethod
    def year_only(cls, year: int) -> "DateTime":
        return cls(year)

    @classmethod
    def year_month(cls, year: int, month: int) -> "DateTime":
        return cls(year, month)

    @classmethod
    def date(cls, year: int, month: int, day: int) -> "DateTime":
        return cls(year, month, day)

    @classmethod
    def local_time(
        cls, year: int, month: int, day: int, hour: int, minute: int, second: int
    ) -> "DateTime":
        """A date and time without timezone information."""
        return cls(year, month, day, hour, minute, second)

    @classmethod
    def new(
        cls,
        year: int,
        month: int,
        day: int,
        hour: int,
        minute: int,
        second: int,
        tz_hour: int,
        tz_minute: int = 0,
    ) -> "DateTime":
        """A date and time with a timezone offset.

        A negative ``tz_hour`` gives a negative offset; ``tz_minute`` is
        always the unsigned minute part.
        """
        return cls(year, month, day, hour, minute, second, tz_hour, tz_minute)

    @classmethod
    def from_datetime(cls, dt: datetime) -> "DateTime":
        """Convert a :class:`datetime.datetime`, keeping its offset if aware."""
        offset = dt.utcoffset()
        if offset is None:
            return cls.local_time(
                dt.year, dt.month, dt.day, dt.hour, dt.minute, dt.second
            )
        sign = -1 if offset < timedelta(0) else 1
        total_minutes = abs(int(offset.total_seconds())) // 60
        tz_hour, tz_minute = divmod(total_minutes, 60)
        return cls(
            dt.year,
            dt.month,
            dt.day,
            dt.hour,
            dt.minute,
            dt.second,
            sign * tz_hour,
            tz_minute,
        )

    @classmethod
    def parse(cls, text: str) -> "DateTime":
        """Parse an XMP date string such as ``2024-01-15T12:00:00+02:00``.

        Raises:
            ValueError: If the text is not an XMP date.
        """
        match = _XMP_DATE_RE.match(text.strip())
        if not match:
            raise ValueError(f"Not an XMP date: {text!r}")
        parts = {
            key: int(val)
            for key, val in match.groupdict().items()
            if key != "tz" and val is not None
        }
        tz = match.group("tz")
        if tz == "Z":
            parts["tz_hour"] = 0
            parts["tz_minute"] = 0
        elif tz:
            sign = -1 if tz[0] == "-" else 1
            parts["tz_hour"] = sign * int(tz[1:3])
            parts["tz_minute"] = int(tz[4:6])
        return cls(**parts)

    def __str__(self) -> str:
        text = f"{self.year:04d}"
        if self.month is None:
            return text
        text += f"-{self.month:02d}"
        if self.day is None:
            return text
        text += f"-{self.day:02d}"
        if self.hour is None:
            return text
        text += f"T{self.hour:02d}:{self.minute or 0:02d}"
        if self.second is not None:
            text += f":{self.second:02d}"
        if self.tz_hour is not None:
            sign = "-" if self.tz_hour < 0 else "+"
            text += f"{sign}{abs(self.tz_hour):02d}:{self.tz_minute or 0:02d}"
        return text


def format_scalar(value: Any) -> str:
    """Render a Python scalar as XMP text (before escaping).

    Raises:
        TypeError: If the value has no XMP text form.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "True" if value else "False"
    if isinstance(value, int | float):
        return str(value)
    if isinstance(value, DateTime):
        return str(value)
    if isinstance(value, datetime):
        return str(DateTime.from_datetime(value))
    if isinstance(value, Enum):
        return format_scalar(value.value)
    raise TypeError(f"Cannot write {type(value).__name__} as an XMP value")


def as_value(value: Any) -> Value:
    """Return ``value`` if it already is a Value, else wrap it in Text."""
    if isinstance(value, Text | LangAlt | Struct | Array):
        return value
    return Text(format_scalar(value))
