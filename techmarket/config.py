"""Application configuration loaded from config.yaml + environment variables."""

from __future__ import annotations

import yaml
from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings

_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///data/techmarket.db"


def _load_yaml() -> dict:
    if _CONFIG_PATH.exists():
        with open(_CONFIG_PATH) as f:
            return yaml.safe_load(f) or {}
    return {}


_yaml = _load_yaml()


class AuthConfig(BaseSettings):
    jwt_algorithm: str = "HS256"
    token_expire_minutes: int = 60
    bcrypt_rounds: int = 10


class Settings(BaseSettings):
    database_url: str = DEFAULT_DATABASE_URL
    # An empty secret disables token issuance and makes every verification fail.
    jwt_secret: str = ""
    log_level: str = "INFO"
    auth: AuthConfig = Field(default_factory=AuthConfig)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


def _fill_unset(model: BaseSettings, values: dict) -> BaseSettings:
    """Apply YAML values only to fields the environment left unset."""
    updates = {
        k: v for k, v in values.items()
        if v is not None and k in type(model).model_fields and k not in model.model_fields_set
    }
    return model.model_copy(update=updates)


def get_settings() -> Settings:
    """Build Settings: environment (and .env) first, then config.yaml, then defaults."""
    y = _yaml
    auth = _fill_unset(AuthConfig(), y.get("auth", {}))
    settings = _fill_unset(Settings(), {
        "database_url": y.get("database", {}).get("url"),
        "log_level": y.get("logging", {}).get("level"),
    })
    return settings.model_copy(update={"auth": auth})
