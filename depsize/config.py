"""Application configuration management."""

import os
from typing import Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEPENDENCY_DIR_NAME = "node_modules"
MANIFEST_NAME = "package.json"
LOCKFILE_YARN = "yarn.lock"
VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

DEFAULT_BUNDLER_COMMAND = (
    "npx --no-install esbuild {input} --bundle --minify "
    "--outfile={output} --log-level=warning"
)
DEFAULT_BUNDLER_CONFIG_COMMAND = (
    "npx --no-install webpack-cli --config {config} --entry {input} "
    "--output-path {output_dir} --output-filename {output_name} "
    "--env target={name} --env targetOnly={target_only}"
)


class Settings(BaseSettings):
    """Tool settings loaded from environment variables."""

    # Environment
    environment: Literal["development", "production", "testing"] = "development"

    # Logging
    log_level: str = "INFO"
    log_format: Literal["text", "json"] = "text"

    # Concurrency
    fs_concurrency: int = Field(
        default=64,
        validation_alias=AliasChoices("DEPSIZE_FS_CONCURRENCY", "UV_THREADPOOL_SIZE"),
    )
    process_concurrency: int = Field(default_factory=lambda: os.cpu_count() or 1)

    # Cache
    cache_name: str = "depsize"

    # Bundler
    bundler_command: str = DEFAULT_BUNDLER_COMMAND
    bundler_config_command: str = DEFAULT_BUNDLER_CONFIG_COMMAND
    bundler_external_flag: str = "--external:{name}"

    model_config = SettingsConfigDict(
        env_prefix="DEPSIZE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def is_testing(self) -> bool:
        """Check if running under the test suite."""
        pytest_flag = bool(os.getenv("PYTEST_CURRENT_TEST"))
        return self.environment == "testing" or pytest_flag

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(
                f"LOG_LEVEL must be one of {', '.join(sorted(VALID_LOG_LEVELS))}, got {v!r}"
            )
        return level

    @field_validator("fs_concurrency", "process_concurrency")
    @classmethod
    def validate_concurrency(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Concurrency must be >= 1")
        return v


# Global settings instance
settings = Settings()
