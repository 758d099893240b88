"""
Runtime configuration, read from PAYMENTS_* environment variables.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Payments engine configuration"""

    model_config = SettingsConfigDict(env_prefix="PAYMENTS_", case_sensitive=False)

    # Diagnostics: one stderr line per rejected row. Off by default, since
    # inputs with huge numbers of bad rows spend most of their time here.
    # Independent of log_level: enabled diagnostics are logged even at ERROR.
    report_errors: bool = False
    # Print processed/rejected counts once the input is exhausted
    report_summary: bool = False

    # Logging configuration
    log_level: str = "WARNING"


def get_settings() -> EngineSettings:
    """Build settings from the current environment"""
    return EngineSettings()
