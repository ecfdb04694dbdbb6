"""Runtime configuration — env-driven via pydantic-settings.

Reads from a .env file and HASHPUT_* environment variables.  CLI options
override individual fields for a single invocation.
"""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

TLSVersionName = Literal["TLSv1.2", "TLSv1.3"]


class UploadSettings(BaseSettings):
    """Upload configuration with environment variable overrides.

    Examples
    --------
    Override via environment::

        export HASHPUT_API_KEY=AKCp8...
        export HASHPUT_MIN_TLS_VERSION=TLSv1.3
        export HASHPUT_TIMEOUT_SECONDS=120

    Or via .env file::

        HASHPUT_LOG_LEVEL=DEBUG
        HASHPUT_API_KEY_HEADER=X-JFrog-Art-Api
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="HASHPUT_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"

    # Credential (the env var is a caller convenience; the core takes it as an argument)
    api_key: str = ""
    api_key_header: str = "X-JFrog-Art-Api"

    # Response header carrying the server-computed SHA-256, if the server sends one
    server_checksum_header: str = "X-Checksum-Sha256"

    # Transport
    min_tls_version: TLSVersionName = "TLSv1.2"
    timeout_seconds: float | None = None  # None blocks until the server answers
    user_agent: str = "hashput"

    # Hashing
    chunk_size: int = 1024 * 1024


# Module-level singleton; import as `from hashput.config import settings`
settings = UploadSettings()
