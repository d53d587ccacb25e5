"""RSS 2.0 serialization for Rivu."""

import re
import xml.etree.ElementTree as ET
from collections.abc import Callable, Iterable, Mapping
from datetime import date, datetime, timezone
from email.utils import format_datetime
from typing import Any, NamedTuple, Protocol

from .config import FeedConfig
from .logging_config import create_execution_logger
from .models import ChannelMetadata, Item

XML_DECLARATION = '<?xml version="1.0"?>'
RSS_VERSION = "2.0"

# Anything outside the XML 1.0 Char production.
_INVALID_XML_CHAR = re.compile(
    "[^\t\n\r\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]"
)


def _attr(name: str) -> Callable[[Any], Any]:
    return lambda obj: getattr(obj, name, None)


def format_rfc1123(value: Any) -> str | None:
    """Format a date as an RFC 1123 string in GMT.

    Naive datetimes are taken to be UTC, and a plain ``date`` is rendered at
    midnight UTC.

    Args:
        value: Candidate date value

    Returns:
        Date text such as ``Tue, 15 Nov 1994 12:45:26 GMT``, or None when
        ``value`` is not a usable date so the field can be skipped
    """
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, date):
        moment = datetime(value.year, value.month, value.day)
    else:
        return None

    try:
        if moment.utcoffset() is None:
            moment = moment.replace(tzinfo=timezone.utc)
        # format_datetime(usegmt=True) only accepts the stdlib UTC singleton
        return format_datetime(moment.astimezone(timezone.utc), usegmt=True)
    except (OverflowError, ValueError):
        return None


class Field(NamedTuple):
    """One element of the output: its tag, where its value comes from and how
    the value becomes text."""

    name: str
    extract: Callable[[Any], Any]
    format: Callable[[Any], str | None] = str


# Channel elements in output order.
CHANNEL_FIELDS: tuple[Field, ...] = (
    Field("title", _attr("title")),
    Field("link", _attr("link")),
    Field("description", _attr("description")),
    Field("language", _attr("language")),
    Field("copyright", _attr("copyright")),
    Field("managingEditor", _attr("managing_editor")),
    Field("webMaster", _attr("web_master")),
    Field("pubDate", _attr("pub_date"), format_rfc1123),
    Field("lastBuildDate", _attr("last_build_date"), format_rfc1123),
    Field("category", _attr("category")),
    Field("generator", _attr("generator")),
    Field("docs", _attr("docs")),
    Field("ttl", _attr("ttl")),
    # TODO: image, skipHours and skipDays are written as plain text; RSS 2.0
    # defines sub-elements (<url>, <hour>, <day>) for them. textInput is not
    # written at all.
    Field("image", _attr("image")),
    Field("skipHours", _attr("skip_hours")),
    Field("skipDays", _attr("skip_days")),
)

# Item elements in output order. The other Item fields are not written.
ITEM_FIELDS: tuple[Field, ...] = (
    Field("title", _attr("title")),
    Field("description", _attr("description")),
)


class RSS(Protocol):
    """Anything that describes a channel and renders it as an RSS document."""

    @property
    def channel_elements(self) -> ChannelMetadata: ...

    def describe(self) -> ChannelMetadata: ...

    def generate(self) -> str: ...


class Feed:
    """Generates an RSS 2.0 document from channel metadata.

    The metadata is stored as given and never modified; validation, if any,
    happens before it reaches the feed.
    """

    def __init__(
        self,
        channel: ChannelMetadata,
        config: FeedConfig | None = None,
        execution_id: str | None = None,
    ):
        """Initialize the feed.

        Args:
            channel: Metadata describing the channel and its items
            config: Output configuration, defaults to ``FeedConfig()``
            execution_id: Execution ID for logging context
        """
        self._channel = channel
        self.config = config or FeedConfig()
        self.logger = create_execution_logger("serializer", execution_id)

    @property
    def channel_elements(self) -> ChannelMetadata:
        return self._channel

    def describe(self) -> ChannelMetadata:
        """Return the channel metadata this feed renders."""
        return self._channel

    def _build(self, parent: ET.Element, field: Field, source: Any) -> None:
        """Append ``field`` to ``parent`` unless its value is absent."""
        value = field.extract(source)
        if value is None:
            return

        text = field.format(value)
        if text is None:
            self.logger.log_field_skipped(field.name, "not a valid date")
            return

        invalid = _INVALID_XML_CHAR.search(text)
        if invalid:
            raise ValueError(
                f"Field {field.name} contains a character not allowed in XML: "
                f"{invalid.group()!r}"
            )

        ET.SubElement(parent, field.name).text = text

    def _add_channel_elements(self, channel: ET.Element) -> None:
        for field in CHANNEL_FIELDS:
            self._build(channel, field, self._channel)

    def _add_items(self, channel: ET.Element) -> int:
        items = getattr(self._channel, "items", None)
        if items is None or not isinstance(items, Iterable):
            return 0

        count = 0
        for item in items:
            if isinstance(item, Mapping):
                item = Item.from_dict(item)
            item_el = ET.SubElement(channel, "item")
            for field in ITEM_FIELDS:
                self._build(item_el, field, item)
            count += 1
        return count

    def generate(self) -> str:
        """Generate the RSS 2.0 XML document for this feed.

        Required channel fields are always written. Optional fields are only
        written when they hold a value, so no empty placeholder tags appear.

        Returns:
            Pretty-printed RSS 2.0 XML text

        Raises:
            ValueError: If a written value holds a character XML cannot carry
        """
        started_at = self.logger.log_execution_start(
            channel_title=self._channel.title
        )

        rss = ET.Element("rss", version=RSS_VERSION)
        channel = ET.SubElement(rss, "channel")

        self._add_channel_elements(channel)
        items_count = self._add_items(channel)

        ET.indent(rss, space=" " * self.config.indent)
        body = ET.tostring(rss, encoding="unicode", short_empty_elements=False)
        # Parsers turn a raw \r into \n; only text nodes can hold one.
        body = body.replace("\r", "&#13;")
        output = f"{XML_DECLARATION}\n{body}" if self.config.xml_declaration else body

        self.logger.log_execution_end(
            started_at,
            items_count=items_count,
            output_length=len(output),
        )
        return output


def generate(channel: ChannelMetadata, config: FeedConfig | None = None) -> str:
    """Generate an RSS 2.0 document for ``channel`` in one call."""
    return Feed(channel, config).generate()

