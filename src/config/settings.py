"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use PRESENT_ prefix (e.g., PRESENT_DEBUG_MODE=true).

Settings can also be loaded from a .env file in the project root.
"""

from typing import Dict, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use PRESENT_ prefix.

    Examples:
        PRESENT_HEADER_HEIGHT=4
        PRESENT_BODY_MARGIN=4
        PRESENT_PRESENTATION_OPTIONS='{"cmdheight": 0}'
        PRESENT_LOG_FILE=/tmp/present.log
    """

    model_config = SettingsConfigDict(
        env_prefix="PRESENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Parser configuration
    separator_prefix: str = Field(
        default="#",
        description="Lines starting with this prefix (at column 0) begin a new slide",
    )

    fence_marker: str = Field(
        default="```",
        description="Lines starting with this marker open or close a code block",
    )

    # Rendering configuration
    code_heading: str = Field(
        default="# Code",
        description="Heading line of the section appended after executing a block",
    )

    header_height: int = Field(
        default=3,
        description="Height of the header surface in lines",
    )

    footer_height: int = Field(
        default=1,
        description="Height of the footer surface in lines",
    )

    body_margin: int = Field(
        default=8,
        description="Left margin (columns) of the body surface",
    )

    body_padding: int = Field(
        default=5,
        description="Lines reserved around the body besides header and footer",
    )

    # Host environment
    presentation_options: Dict[str, int] = Field(
        default_factory=lambda: {"cmdheight": 0},
        description="Host options overridden while presenting and restored on quit",
    )

    # Logging / debugging
    log_file: Optional[str] = Field(
        default=None,
        description="Send log output to this file instead of stderr",
    )

    debug_mode: bool = Field(
        default=False,
        description="Enable debug output while presenting",
    )

    def fence_is(self, line: str) -> bool:
        """
        Check whether a body line opens or closes a code block.

        Example:
            >>> settings = AppSettings()
            >>> settings.fence_is("```python")
            True
        """
        return line.startswith(self.fence_marker)

    def language_extract(self, line: str) -> str:
        """
        Extract the language tag following a fence marker.

        Args:
            line: Fence line (e.g. "```python")

        Returns:
            Everything after the marker, or "" for a bare fence

        Example:
            >>> settings = AppSettings()
            >>> settings.language_extract("```lua")
            'lua'
        """
        if not self.fence_is(line):
            return ""
        return line[len(self.fence_marker):]


# Singleton instance - import this in your code
appsettings = AppSettings()
