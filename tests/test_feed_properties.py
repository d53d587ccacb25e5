"""Property-based tests for RSS 2.0 serialization."""

import re
import xml.etree.ElementTree as ET
from datetime import datetime, timedelta, timezone
from email.utils import parsedate_to_datetime

import pytest
from hypothesis import given
from hypothesis import strategies as st

from rivu.feed import Feed
from rivu.models import ChannelMetadata, Item

# Text that survives an XML round trip: no surrogates, control characters or
# unassigned code points.
xml_text = st.text(
    alphabet=st.characters(blacklist_categories=("Cs", "Cc", "Cn")),
    max_size=60,
)

RFC1123_PATTERN = re.compile(
    r"^(Mon|Tue|Wed|Thu|Fri|Sat|Sun), \d{2} "
    r"(Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec) "
    r"\d{4} \d{2}:\d{2}:\d{2} GMT$"
)

OPTIONAL_CHANNEL_FIELDS = [
    ("language", "language", "en-US"),
    ("copyright", "copyright", "2025 Example"),
    ("managing_editor", "managingEditor", "editor@example.com"),
    ("web_master", "webMaster", "webmaster@example.com"),
    ("pub_date", "pubDate", datetime(2025, 1, 10, 12, 0, tzinfo=timezone.utc)),
    ("last_build_date", "lastBuildDate", datetime(2025, 1, 10, tzinfo=timezone.utc)),
    ("category", "category", "Tech"),
    ("generator", "generator", "Rivu"),
    ("docs", "docs", "https://www.rssboard.org/rss-specification"),
    ("ttl", "ttl", 60),
    ("image", "image", "https://example.com/logo.png"),
    ("skip_hours", "skipHours", 4),
    ("skip_days", "skipDays", "Saturday"),
]

datetimes = st.datetimes(
    min_value=datetime(1900, 1, 2),
    max_value=datetime(9999, 12, 30),
    timezones=st.sampled_from(
        [
            None,
            timezone.utc,
            timezone(timedelta(hours=5, minutes=30)),
            timezone(timedelta(hours=-8)),
        ]
    ),
)

items_strategy = st.lists(
    st.builds(
        Item,
        title=st.one_of(st.none(), xml_text),
        description=st.one_of(st.none(), xml_text),
        link=st.one_of(st.none(), xml_text),
        author=st.one_of(st.none(), xml_text),
        category=st.one_of(st.none(), xml_text),
        comments=st.one_of(st.none(), xml_text),
        pub_date=st.one_of(st.none(), datetimes),
    ),
    max_size=8,
)


def _channel_element(xml: str) -> ET.Element:
    return ET.fromstring(xml).find("channel")


class TestFeedProperties:
    """Property-based tests for Feed.generate()."""

    @given(xml_text, xml_text, xml_text)
    def test_required_fields_only_property(self, title, link, description):
        """
        For any channel with only required fields, the output holds exactly one
        title, link and description with the given text and nothing else.
        """
        channel = ChannelMetadata(title=title, link=link, description=description)

        children = list(_channel_element(Feed(channel).generate()))

        assert [child.tag for child in children] == ["title", "link", "description"]
        assert [child.text or "" for child in children] == [title, link, description]

    @pytest.mark.parametrize("attribute,tag,value", OPTIONAL_CHANNEL_FIELDS)
    def test_absence_implies_omission(self, attribute, tag, value):
        """
        Each optional field appears when set and disappears when None, without
        affecting any other element.
        """
        base = {"title": "T", "link": "https://example.com", "description": "D"}

        present = Feed(ChannelMetadata(**base, **{attribute: value})).generate()
        absent = Feed(ChannelMetadata(**base, **{attribute: None})).generate()

        assert len(_channel_element(present).findall(tag)) == 1
        assert _channel_element(absent).findall(tag) == []
        assert f"<{tag}>" not in absent
        assert absent == Feed(ChannelMetadata(**base)).generate()

    @given(datetimes)
    def test_date_format_property(self, moment):
        """
        For any valid datetime, pubDate is RFC 1123 text in GMT that denotes the
        same instant.
        """
        channel = ChannelMetadata(
            title="T", link="https://example.com", description="D", pub_date=moment
        )

        text = _channel_element(Feed(channel).generate()).find("pubDate").text

        assert RFC1123_PATTERN.match(text), text
        assert text.endswith("GMT")
        expected = moment if moment.tzinfo else moment.replace(tzinfo=timezone.utc)
        assert parsedate_to_datetime(text) == expected.replace(microsecond=0)

    @given(
        st.one_of(
            st.none(),
            st.text(max_size=30),
            st.integers(),
            st.floats(allow_nan=True),
            st.booleans(),
        )
    )
    def test_invalid_date_property(self, value):
        """For any non-date value, the date fields are omitted without error."""
        channel = ChannelMetadata(
            title="T",
            link="https://example.com",
            description="D",
            pub_date=value,
            last_build_date=value,
        )

        xml = Feed(channel).generate()

        assert "<pubDate>" not in xml
        assert "<lastBuildDate>" not in xml

    @given(st.integers(min_value=0, max_value=10**9))
    def test_ttl_coercion_property(self, ttl):
        """For any non-negative ttl, the element text is its decimal form."""
        channel = ChannelMetadata(
            title="T", link="https://example.com", description="D", ttl=ttl
        )

        assert _channel_element(Feed(channel).generate()).find("ttl").text == str(ttl)

    @given(items_strategy)
    def test_items_property(self, items):
        """
        For any item list, one <item> per entry in the same order, each holding
        only the title and description that were set.
        """
        channel = ChannelMetadata(
            title="T", link="https://example.com", description="D", items=items
        )

        elements = _channel_element(Feed(channel).generate()).findall("item")

        assert len(elements) == len(items)
        for item, element in zip(items, elements):
            expected_tags = [
                name
                for name in ("title", "description")
                if getattr(item, name) is not None
            ]
            assert [child.tag for child in element] == expected_tags
            for child in element:
                assert (child.text or "") == getattr(item, child.tag)

    @given(xml_text, st.one_of(st.none(), xml_text), items_strategy)
    def test_determinism_property(self, title, language, items):
        """Generating twice from equal input gives byte-identical output."""
        first = ChannelMetadata(
            title=title,
            link="https://example.com",
            description="D",
            language=language,
            items=list(items),
        )
        second = ChannelMetadata(
            title=title,
            link="https://example.com",
            description="D",
            language=language,
            items=list(items),
        )

        assert Feed(first).generate() == Feed(second).generate()
