"""Rivu: RSS 2.0 feed generation."""

from .config import Config, FeedConfig
from .feed import RSS, Feed, format_rfc1123, generate
from .models import ChannelMetadata, Day, Hour, Item, TextInput

__version__ = "0.1.0"
