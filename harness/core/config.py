"""
Configuration management for the browser test harness.

Handles environment variables, defaults, and configuration validation
for the poller, the failure capturer and the token cache.
"""

import os
from typing import Optional, Dict, Any
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import urljoin


DEFAULT_POLL_TIMEOUT_MS = 30000
DEFAULT_POLL_INTERVAL_MS = 500
SCREENSHOTS_SUBDIR = "selenium-screenshots"


@dataclass
class Config:
    """Configuration class for the harness with environment variable support."""

    # Environment detection
    ci_mode: bool = field(default=False)

    # Browser settings
    headless_mode: Optional[bool] = field(default=None)
    base_url: str = field(default="http://localhost:8080")

    # Logging configuration
    log_level: str = field(default="INFO")
    log_format: str = field(default="text")

    # Polling
    poll_timeout_ms: int = field(default=DEFAULT_POLL_TIMEOUT_MS)
    poll_interval_ms: int = field(default=DEFAULT_POLL_INTERVAL_MS)

    # Anti-CSRF token refresh
    registration_path: str = field(default="/xwiki/bin/register/XWiki/Register")
    home_path: str = field(default="/xwiki/bin/view/Main/WebHome")
    token_field_locator: str = field(default="//input[@name='form_token']")

    # Directory paths
    output_dir: Path = field(default_factory=lambda: Path.cwd() / "target")
    logs_dir: Path = field(default_factory=lambda: Path.cwd() / "logs")

    def __post_init__(self):
        """Post-initialization validation and environment overrides."""
        if os.getenv("CI", "").lower() == "true" and self.ci_mode is False:
            self.ci_mode = True

        headless_env = os.getenv("HARNESS_HEADLESS")
        if headless_env is not None:
            self.headless_mode = headless_env.lower() == "true"

        base_url_env = os.getenv("HARNESS_BASE_URL")
        if base_url_env:
            self.base_url = base_url_env

        output_env = os.getenv("HARNESS_OUTPUT_DIR")
        if output_env:
            self.output_dir = Path(output_env)

        log_env = os.getenv("HARNESS_LOG_LEVEL")
        if log_env:
            self.log_level = log_env
        valid_log_levels = ["DEBUG", "INFO", "WARN", "ERROR"]
        if self.log_level.upper() not in valid_log_levels:
            self.log_level = "INFO"
        else:
            self.log_level = self.log_level.upper()

        # JSON logs in CI unless explicitly set otherwise
        if self.ci_mode and self.log_format == "text":
            self.log_format = "json"

        timeout_env = os.getenv("HARNESS_POLL_TIMEOUT_MS")
        if timeout_env is not None:
            try:
                self.poll_timeout_ms = int(timeout_env)
            except ValueError:
                pass

        self.output_dir = Path(self.output_dir)
        self.logs_dir = Path(self.logs_dir)

    @property
    def is_ci_mode(self) -> bool:
        """Check if running in CI environment."""
        return self.ci_mode

    @property
    def debug_enabled(self) -> bool:
        """Check if debug logging is enabled."""
        return self.log_level == "DEBUG"

    @property
    def screenshots_dir(self) -> Path:
        """Directory where failure screenshots are written."""
        return self.output_dir / SCREENSHOTS_SUBDIR

    def get_log_file_path(self) -> Path:
        """Get the main log file path."""
        self.logs_dir.mkdir(parents=True, exist_ok=True)
        return self.logs_dir / "harness.log"

    def resolve_url(self, url: str) -> str:
        """Resolve a path against the base URL. Absolute URLs are returned as is."""
        return urljoin(self.base_url.rstrip("/") + "/", url)

    def get_effective_headless_mode(self) -> bool:
        """Get effective headless mode based on CI and override settings."""
        if self.headless_mode is not None:
            return self.headless_mode
        return self.ci_mode

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary for logging."""
        return {
            "ci_mode": self.ci_mode,
            "headless_mode": self.headless_mode,
            "base_url": self.base_url,
            "log_level": self.log_level,
            "log_format": self.log_format,
            "poll_timeout_ms": self.poll_timeout_ms,
            "poll_interval_ms": self.poll_interval_ms,
            "registration_path": self.registration_path,
            "home_path": self.home_path,
            "token_field_locator": self.token_field_locator,
            "output_dir": str(self.output_dir),
            "logs_dir": str(self.logs_dir),
        }

    @classmethod
    def from_env(cls) -> "Config":
        """Create configuration from environment variables."""
        ci = os.getenv("CI", "").lower() == "true"
        headless_env = os.getenv("HARNESS_HEADLESS")
        headless = None if headless_env is None else headless_env.lower() == "true"

        return cls(
            ci_mode=ci,
            headless_mode=headless,
            base_url=os.getenv("HARNESS_BASE_URL", "http://localhost:8080"),
            log_level=os.getenv("HARNESS_LOG_LEVEL", "INFO").upper(),
            log_format="json" if ci else "text",
            poll_timeout_ms=int(
                os.getenv("HARNESS_POLL_TIMEOUT_MS", str(DEFAULT_POLL_TIMEOUT_MS))
            ),
            output_dir=Path(os.getenv("HARNESS_OUTPUT_DIR", str(Path.cwd() / "target"))),
        )

    def validate(self) -> None:
        """Validate configuration and raise ValidationError if invalid."""
        from .exceptions import ValidationError

        errors = []

        valid_log_levels = ["DEBUG", "INFO", "WARN", "ERROR"]
        if self.log_level not in valid_log_levels:
            errors.append(
                f"Invalid log level: {self.log_level}. Must be one of {valid_log_levels}"
            )

        if self.log_format not in ["text", "json"]:
            errors.append(f"Invalid log format: {self.log_format}")

        if not self.base_url.startswith(("http://", "https://")):
            errors.append(f"Base URL must be http(s): {self.base_url}")

        if self.poll_timeout_ms <= 0:
            errors.append(f"Poll timeout must be positive: {self.poll_timeout_ms}")

        if self.poll_interval_ms <= 0:
            errors.append(f"Poll interval must be positive: {self.poll_interval_ms}")
        elif self.poll_interval_ms > self.poll_timeout_ms:
            errors.append(
                f"Poll interval ({self.poll_interval_ms}ms) exceeds poll timeout "
                f"({self.poll_timeout_ms}ms)"
            )

        if not self.token_field_locator:
            errors.append("Token field locator cannot be empty")

        if errors:
            message = "Configuration validation failed: " + "; ".join(errors)
            raise ValidationError(
                message,
                validation_type="config",
                violations=errors,
            )
