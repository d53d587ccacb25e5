"""Configuration management for Rivu."""

import os
from dataclasses import dataclass

from .logging_config import create_execution_logger

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass(frozen=True)
class FeedConfig:
    """Configuration for XML output."""

    indent: int = 2  # spaces per nesting level
    xml_declaration: bool = True


class Config:
    """Reads Rivu settings from environment variables."""

    def __init__(self):
        """Initialize configuration from environment variables."""
        self.indent = os.getenv("RIVU_INDENT", "2")
        self.xml_declaration = os.getenv("RIVU_XML_DECLARATION", "true")
        self.logger = create_execution_logger("config")

    def get_indent(self) -> int:
        """Get the indentation width for pretty-printed output."""
        try:
            indent = int(self.indent)
        except ValueError as e:
            raise ValueError(f"Invalid RIVU_INDENT value: {e}")

        if indent < 0:
            raise ValueError(f"RIVU_INDENT must not be negative: {indent}")
        return indent

    def get_xml_declaration(self) -> bool:
        """Get whether the XML declaration line is written."""
        value = self.xml_declaration.strip().lower()
        if value in _TRUE_VALUES:
            return True
        if value in _FALSE_VALUES:
            return False
        raise ValueError(f"Invalid RIVU_XML_DECLARATION value: {self.xml_declaration}")

    def get_feed_config(self) -> FeedConfig:
        """Get output configuration."""
        feed_config = FeedConfig(
            indent=self.get_indent(),
            xml_declaration=self.get_xml_declaration(),
        )
        self.logger.debug(
            "Configuration loaded",
            indent=feed_config.indent,
            xml_declaration=feed_config.xml_declaration,
        )
        return feed_config
