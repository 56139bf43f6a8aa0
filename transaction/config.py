"""
Settings for the transaction client.

Values come from defaults, an optional YAML file and environment variables,
in increasing order of precedence.
"""

import os
import logging
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator

from transaction.extractor import ON_DEMAND_FILE_URL


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 14_6_1) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.5 Safari/605.1.15"
)

ENV_VARS = {
    "home_url": "XCT_HOME_URL",
    "migrate_url": "XCT_MIGRATE_URL",
    "ondemand_url": "XCT_ONDEMAND_URL",
    "language": "XCT_LANGUAGE",
    "user_agent": "XCT_USER_AGENT",
    "proxy": "XCT_PROXY",
    "impersonate": "XCT_IMPERSONATE",
    "timeout": "XCT_TIMEOUT",
    "log_level": "LOG_LEVEL",
}

CONFIG_PATH_ENV = "XCT_CONFIG"


class TransactionConfig(BaseModel):
    """Where the home page lives and how to ask for it."""

    home_url: str = Field(default="https://twitter.com", description="First page requested on init")
    migrate_url: str = Field(default="https://x.com/x/migrate", description="Form target of the migration hop")
    referer: str = "https://x.com"
    ondemand_url: str = Field(default=ON_DEMAND_FILE_URL, description="Script URL with a {filename} placeholder")
    language: str = "en-US"
    user_agent: str = DEFAULT_USER_AGENT
    proxy: Optional[str] = None
    impersonate: str = "chrome124"
    timeout: float = Field(default=30.0, gt=0)
    log_level: str = "INFO"

    @field_validator("ondemand_url")
    @classmethod
    def validate_ondemand_url(cls, v):
        """The script URL must leave room for the hash fragment."""
        if "{filename}" not in v:
            raise ValueError("ondemand_url must contain a {filename} placeholder")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    def init_headers(self) -> Dict[str, str]:
        """Headers sent with the home page and on-demand script requests."""
        return {
            "Accept-Language": f"{self.language},{self.language.split('-')[0]};q=0.9",
            "Cache-Control": "no-cache",
            "Referer": self.referer,
            "User-Agent": self.user_agent,
        }

    @classmethod
    def load(
        cls,
        config_path: Optional[Union[str, Path]] = None,
        environ: Optional[Mapping[str, str]] = None
    ) -> "TransactionConfig":
        """
        Build the configuration.

        Args:
            config_path: Optional YAML file; defaults to the XCT_CONFIG env var
            environ: Environment mapping (defaults to os.environ)

        Returns:
            Validated configuration

        Raises:
            FileNotFoundError: If the YAML file does not exist
            ValueError: If the YAML file does not hold a mapping
            pydantic.ValidationError: If a value is invalid
        """
        env = os.environ if environ is None else environ
        config_path = config_path or env.get(CONFIG_PATH_ENV)

        values = {}
        if config_path:
            path = Path(config_path)
            if not path.exists():
                raise FileNotFoundError(f"Configuration file not found: {path}")

            with open(path, "r", encoding="utf-8") as file:
                data = yaml.safe_load(file) or {}

            if not isinstance(data, dict):
                raise ValueError(f"Configuration file must hold a mapping: {path}")
            values.update(data)

        for field_name, env_var in ENV_VARS.items():
            if env.get(env_var):
                values[field_name] = env[env_var]

        return cls(**values)
