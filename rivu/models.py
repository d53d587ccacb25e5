"""Data models for Rivu feeds."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, fields
from datetime import date, datetime
from typing import Any, Literal

from dateutil import parser as date_parser

# Days on which aggregators may skip fetching the feed (<skipDays>).
Day = Literal[
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
]

# Hour of the day on a 24-hour clock, 0-23 (<skipHours>).
Hour = int

REQUIRED_CHANNEL_FIELDS = ("title", "link", "description")
DATE_FIELDS = ("pub_date", "last_build_date")

# Two fill-in dates that differ in every calendar part; text that leaves any
# of them out parses differently against each.
_PARSE_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))

# RSS element names that differ from the Python attribute names.
_RSS_KEY_ALIASES = {
    "managingEditor": "managing_editor",
    "webMaster": "web_master",
    "pubDate": "pub_date",
    "lastBuildDate": "last_build_date",
    "skipHours": "skip_hours",
    "skipDays": "skip_days",
    "textInput": "text_input",
}


def _normalize_keys(cls: type, data: Mapping[str, Any]) -> dict[str, Any]:
    """Map RSS or attribute names onto the dataclass fields, dropping unknowns."""
    known = {f.name for f in fields(cls)}
    values = {}
    for key, value in data.items():
        name = _RSS_KEY_ALIASES.get(key, key)
        if name in known:
            values[name] = value
    return values


def _parse_date(text: str) -> datetime | None:
    """Parse full date text; partial or unparseable text gives None.

    A missing time of day is midnight, but a missing year, month or day is
    rejected rather than filled in from the current date.
    """
    try:
        first, second = (
            date_parser.parse(text, default=default) for default in _PARSE_DEFAULTS
        )
    except (ValueError, OverflowError):
        return None

    if first != second:
        return None
    return first


def _parse_dates(values: dict[str, Any]) -> dict[str, Any]:
    """Parse date strings in place."""
    for name in DATE_FIELDS:
        value = values.get(name)
        if isinstance(value, str):
            values[name] = _parse_date(value)
    return values


@dataclass(frozen=True)
class TextInput:
    """Represents the <textInput> form of a channel.

    Accepted into the model but not serialized.
    """

    title: str
    description: str
    name: str
    link: str


@dataclass(frozen=True)
class Item:
    """Represents a single <item> of a feed.

    Every field is optional, though an item is expected to carry at least a
    title or a description. Only ``title`` and ``description`` are written to
    the feed; the other fields are kept for callers that need them.
    """

    title: str | None = None
    description: str | None = None
    link: str | None = None
    author: str | None = None
    category: str | None = None
    comments: str | None = None
    pub_date: date | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Item":
        """Build an item from a mapping, ignoring unsupported keys."""
        return cls(**_parse_dates(_normalize_keys(cls, data)))


@dataclass(frozen=True)
class ChannelMetadata:
    """Represents the metadata of an RSS <channel>."""

    title: str
    link: str
    description: str
    language: str | None = None
    copyright: str | None = None
    managing_editor: str | None = None
    web_master: str | None = None
    pub_date: date | None = None
    last_build_date: date | None = None
    category: str | None = None
    generator: str | None = None
    docs: str | None = None
    ttl: int | None = None  # minutes
    image: str | None = None
    skip_hours: Hour | None = None
    skip_days: Day | None = None
    text_input: TextInput | None = None
    items: Sequence[Item] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ChannelMetadata":
        """Build channel metadata from a mapping such as decoded JSON.

        Keys may use either the RSS element names (``managingEditor``,
        ``pubDate``, ...) or the attribute names (``managing_editor``,
        ``pub_date``, ...). Unknown keys are ignored.

        Args:
            data: Mapping of channel fields, with ``items`` as a list of
                mappings or ``Item`` instances

        Returns:
            ChannelMetadata instance

        Raises:
            ValueError: If a required field is missing
        """
        values = _parse_dates(_normalize_keys(cls, data))

        for name in REQUIRED_CHANNEL_FIELDS:
            if name not in values:
                raise ValueError(f"Missing required channel field: {name}")

        text_input = values.get("text_input")
        if isinstance(text_input, Mapping):
            values["text_input"] = TextInput(**_normalize_keys(TextInput, text_input))

        raw_items = values.get("items")
        if raw_items is None:
            values["items"] = ()
        else:
            values["items"] = tuple(
                Item.from_dict(item) if isinstance(item, Mapping) else item
                for item in raw_items
            )

        return cls(**values)
