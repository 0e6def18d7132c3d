from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from truthscore.errors import ConfigurationError

load_dotenv()

CONFIG_FILE = Path("truthscore_config.json")

REQUIRED_ENV_VARS = [
    "GEMINI_API_KEY",
    "NEWSAPI_KEY",
]

DEFAULT_CONFIG: dict[str, Any] = {
    "gemini_models": [
        "gemini-2.5-flash",
        "gemini-2.5-flash-latest",
        "gemini-2.5-pro",
        "gemini-2.5-pro-latest",
    ],
    "gemini_base_url": "https://generativelanguage.googleapis.com/v1beta",
    "newsapi_base_url": "https://newsapi.org/v2",
    "youtube_api_base_url": "https://www.googleapis.com/youtube/v3",
    "max_retries": 3,
    "retry_base_delay": 1.0,
    "request_timeout": 30,
    "headlines_country": "us",
    "log_file": "truthscore.log",
}


@dataclass
class Settings:
    """Holds all application configuration loaded from environment variables and config file."""

    gemini_api_key: str = ""
    newsapi_key: str = ""
    youtube_api_key: str = ""
    gemini_models: list[str] = field(
        default_factory=lambda: list(DEFAULT_CONFIG["gemini_models"])
    )
    gemini_base_url: str = DEFAULT_CONFIG["gemini_base_url"]
    newsapi_base_url: str = DEFAULT_CONFIG["newsapi_base_url"]
    youtube_api_base_url: str = DEFAULT_CONFIG["youtube_api_base_url"]
    max_retries: int = 3
    retry_base_delay: float = 1.0
    request_timeout: int = 30
    headlines_country: str = "us"
    log_file: str = "truthscore.log"


def _load_config_file() -> dict[str, Any]:
    if CONFIG_FILE.exists():
        with open(CONFIG_FILE, encoding="utf-8") as f:
            user_config = json.load(f)
        merged = {**DEFAULT_CONFIG, **user_config}
        return merged
    return dict(DEFAULT_CONFIG)


def _validate_env_vars(require_keys: bool) -> dict[str, str]:
    env_values: dict[str, str] = {}
    missing: list[str] = []
    for var in REQUIRED_ENV_VARS:
        value = os.getenv(var)
        if not value:
            missing.append(var)
        else:
            env_values[var] = value
    if missing and require_keys:
        raise ConfigurationError(
            f"Missing required environment variables: {', '.join(missing)}. "
            "Please set them in your .env file or system environment."
        )
    return env_values


def load_settings(require_keys: bool = True) -> Settings:
    env_values = _validate_env_vars(require_keys)
    config = _load_config_file()

    return Settings(
        gemini_api_key=env_values.get("GEMINI_API_KEY", ""),
        newsapi_key=env_values.get("NEWSAPI_KEY", ""),
        youtube_api_key=os.getenv("YOUTUBE_API_KEY", ""),
        gemini_models=config.get("gemini_models", DEFAULT_CONFIG["gemini_models"]),
        gemini_base_url=config.get("gemini_base_url", DEFAULT_CONFIG["gemini_base_url"]),
        newsapi_base_url=config.get("newsapi_base_url", DEFAULT_CONFIG["newsapi_base_url"]),
        youtube_api_base_url=config.get(
            "youtube_api_base_url", DEFAULT_CONFIG["youtube_api_base_url"]
        ),
        max_retries=int(config.get("max_retries", DEFAULT_CONFIG["max_retries"])),
        retry_base_delay=float(
            config.get("retry_base_delay", DEFAULT_CONFIG["retry_base_delay"])
        ),
        request_timeout=int(config.get("request_timeout", DEFAULT_CONFIG["request_timeout"])),
        headlines_country=config.get("headlines_country", DEFAULT_CONFIG["headlines_country"]),
        log_file=config.get("log_file", DEFAULT_CONFIG["log_file"]),
    )
