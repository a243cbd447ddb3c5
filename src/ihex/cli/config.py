"""
ihexdump Configuration
======================

Listing settings for the ihexdump tool. Configuration can come from:
- Default values (defined here)
- Environment variables
- Command-line options (applied last, by the CLI)
"""

from dataclasses import dataclass
import logging
import os

logger = logging.getLogger(__name__)

_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class DumpConfig:
    """
    Configuration for ihexdump output.

    Attributes:
        bytes_per_line: Bytes shown per hex dump row (default: 16)
        show_ascii: Print the ASCII column next to hex dump rows (default: True)
    """

    bytes_per_line: int = 16
    show_ascii: bool = True

    @classmethod
    def from_env(cls) -> "DumpConfig":
        """
        Create DumpConfig from environment variables.

        Environment variables (all optional):
            IHEXDUMP_WIDTH: Bytes per hex dump row (positive integer)
            IHEXDUMP_ASCII: Set to 0/false/no/off to hide the ASCII column

        Returns:
            DumpConfig with values from environment variables
        """
        config = cls()

        if width := os.environ.get("IHEXDUMP_WIDTH"):
            try:
                value = int(width)
            except ValueError:
                value = 0
            if value > 0:
                config.bytes_per_line = value
            else:
                logger.warning(f"Ignoring invalid IHEXDUMP_WIDTH={width!r}")

        if ascii_flag := os.environ.get("IHEXDUMP_ASCII"):
            config.show_ascii = ascii_flag.strip().lower() not in _FALSE_VALUES

        return config
