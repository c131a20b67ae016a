"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use ADOCPREP_ prefix (e.g., ADOCPREP_DEBUG_MODE=true).

Settings can also be loaded from a .env file in the project root.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use ADOCPREP_ prefix.

    Examples:
        ADOCPREP_INCLUDE_ENCODING=latin-1
        ADOCPREP_DEFAULT_BACKEND=docbook45
        ADOCPREP_DEBUG_MODE=true
    """

    model_config = SettingsConfigDict(
        env_prefix="ADOCPREP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Reader configuration
    include_encoding: str = Field(
        default="utf-8",
        description="Encoding used to read the input document and include:: targets",
    )

    # Document configuration
    default_backend: str = Field(
        default="html5",
        description="Value of the 'backend' attribute a new Document starts with",
    )

    # Output configuration
    output_suffix: str = Field(
        default=".adoc",
        description="File suffix of the preprocessed source written by the CLI",
    )

    debug_mode: bool = Field(
        default=False,
        description="Force the most verbose logging level in the CLI",
    )

    def outputName_make(self, input_file: str) -> str:
        """
        Build the output filename for a preprocessed input document.

        Args:
            input_file: Input document filename (may include directories)

        Returns:
            Bare filename: input stem plus output_suffix

        Example:
            >>> settings = AppSettings()
            >>> settings.outputName_make('chapters/intro.txt')
            'intro.adoc'
        """
        return f"{Path(input_file).stem}{self.output_suffix}"


# Singleton instance - import this in your code
appsettings = AppSettings()
