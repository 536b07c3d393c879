"""Configuration management for the Bot API client.

Replaces the process-wide constants of the legacy PHP helpers (``api``,
``LOG_LVL``, ``LOG_CHANNEL``) with an explicit settings object that is passed
into a client at construction. Values come from environment variables, an
optional YAML file, and defaults, in that order of precedence.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "tgbase.yml"


class BotApiSettings(BaseSettings):
    """Telegram Bot API client settings.

    Attributes:
        bot_token: Bot token issued by @BotFather.
        base_url: Bot API host, without the ``/bot<token>`` suffix.
        timeout: Request deadline in seconds.
        log_level: Verbosity of response logging (legacy ``LOG_LVL``).
        log_threshold: Raw responses are forwarded when ``log_level`` exceeds it.
        log_channel: Chat that receives forwarded responses (legacy ``LOG_CHANNEL``).
        user_agent: User-Agent header sent with every request.
    """

    # the prefix only applies to field-name lookups, aliases are read as-is
    model_config = SettingsConfigDict(env_prefix="TGBASE_", populate_by_name=True, extra="ignore")

    bot_token: str = Field(..., validation_alias="BOT_TOKEN")
    base_url: str = Field(default="https://api.telegram.org", validation_alias="BOT_API_BASE_URL")
    timeout: float = Field(default=20.0, validation_alias="BOT_API_TIMEOUT")
    log_level: int = Field(default=0, validation_alias="LOG_LVL")
    log_threshold: int = Field(default=3, validation_alias="LOG_THRESHOLD")
    log_channel: str | None = Field(default=None, validation_alias="LOG_CHANNEL")
    user_agent: str = Field(default="tgbase/0.3", validation_alias="BOT_API_USER_AGENT")

    @property
    def endpoint(self) -> str:
        """Get the token-scoped API endpoint.

        Returns:
            URL of the form ``<base_url>/bot<token>``.
        """
        return f"{self.base_url.rstrip('/')}/bot{self.bot_token}"

    @property
    def response_logging(self) -> bool:
        """Whether raw responses should be forwarded to the logging collaborator."""
        return self.log_level > self.log_threshold

    def is_log_channel(self, chat_id: Any) -> bool:
        """Check if a chat id points at the configured log channel.

        Args:
            chat_id: Numeric id or ``@username`` of the target chat.

        Returns:
            True when responses for this chat must not be forwarded.
        """
        if self.log_channel is None or chat_id is None:
            return False
        return str(chat_id) == str(self.log_channel)


class Config:
    """Client configuration manager.

    Loads ``BotApiSettings`` from the environment, letting an optional YAML
    file supply values the environment does not set.
    """

    def __init__(self, config_dir: Path | None = None, config_file: str = DEFAULT_CONFIG_FILE):
        """Initialize configuration manager.

        Args:
            config_dir: Directory holding the YAML file, defaults to the working directory.
            config_file: YAML file name inside ``config_dir``.
        """
        if config_dir is None:
            config_dir = Path.cwd()

        self.config_dir = Path(config_dir)
        self.config_path = self.config_dir / config_file

        overrides = self._load_yaml_overrides()
        self.bot = BotApiSettings(**overrides)

    def _load_yaml_overrides(self) -> dict[str, Any]:
        """Read settings from the YAML file that the environment leaves unset.

        Returns:
            Mapping of field name to value, empty if the file does not exist.
        """
        if not self.config_path.exists():
            return {}

        with open(self.config_path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring {self.config_path}: top level must be a mapping")
            return {}

        overrides = {}
        for name, field in BotApiSettings.model_fields.items():
            if name not in data:
                continue
            if isinstance(field.validation_alias, str) and os.getenv(field.validation_alias):
                continue
            overrides[name] = data[name]

        return overrides
