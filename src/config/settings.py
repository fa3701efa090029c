"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use PRINTEXPR_ prefix (e.g., PRINTEXPR_ENABLED=false).

Settings can also be loaded from a .env file in the working directory.
"""

import sys
from typing import List, Literal, TextIO

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use PRINTEXPR_ prefix.

    Examples:
        PRINTEXPR_ENABLED=false
        PRINTEXPR_TRACE=true
        PRINTEXPR_OUTPUT=stdout
        PRINTEXPR_MODULES='["myapp", "tests.*"]'
    """

    model_config = SettingsConfigDict(
        env_prefix="PRINTEXPR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Filter configuration
    enabled: bool = Field(
        default=True,
        description="Rewrite directive comments; when false they stay plain comments",
    )

    trace: bool = Field(
        default=False,
        description="Echo the rewritten source to stderr after filtering",
    )

    trace_color: bool = Field(
        default=False,
        description="Highlight traced source with pygments terminal colors",
    )

    modules: List[str] = Field(
        default_factory=list,
        description="Module name patterns filtered by the import hook",
    )

    # Output configuration
    output: Literal["stderr", "stdout"] = Field(
        default="stderr",
        description="Stream receiving directive output when no handle is set",
    )

    dump_width: int = Field(
        default=80,
        ge=20,
        description="Line width for structured dumps of the \\ sigil",
    )

    def stream_resolve(self) -> TextIO:
        """
        Resolve the configured output stream at call time.

        The lookup is done on every call so that a replaced sys.stderr
        (e.g. under test capture) is honoured.

        Returns:
            sys.stderr or sys.stdout

        Example:
            >>> AppSettings(output="stdout").stream_resolve() is sys.stdout
            True
        """
        return sys.stdout if self.output == "stdout" else sys.stderr


# Singleton instance - import this in your code
appsettings = AppSettings()
