"""Environment-driven settings."""

import os
from functools import lru_cache
from typing import List, Literal, Mapping, Optional
from urllib.parse import quote_plus

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

PRODUCTION_ORIGIN = "https://front-end-virid-theta.vercel.app"


class Settings(BaseModel):
    port: int = 5000
    environment: str = "development"
    cors_origin: Optional[str] = None

    # DATABASE_URL wins over the discrete fields
    database_url: Optional[str] = None
    db_host: str = "localhost"
    db_port: int = 27017
    db_user: Optional[str] = None
    db_password: Optional[str] = None
    database_name: str = "moodjournal"

    youtube_api_key: Optional[str] = None
    quote_source: Literal["remote", "static"] = "remote"
    http_timeout: float = Field(10.0, gt=0)

    log_level: str = "INFO"
    log_json: bool = False

    @field_validator("quote_source", "environment", mode="before")
    @classmethod
    def lowercase(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def allowed_origins(self) -> List[str]:
        if self.cors_origin:
            return [o.strip() for o in self.cors_origin.split(",") if o.strip()]
        return [PRODUCTION_ORIGIN] if self.is_production else ["*"]

    def mongo_uri(self) -> str:
        if self.database_url:
            return self.database_url
        auth = ""
        if self.db_user:
            auth = quote_plus(self.db_user)
            if self.db_password:
                auth += ":" + quote_plus(self.db_password)
            auth += "@"
        return f"mongodb://{auth}{self.db_host}:{self.db_port}/"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        values = {
            "port": env.get("PORT"),
            "environment": env.get("APP_ENV") or env.get("NODE_ENV"),
            "cors_origin": env.get("CORS_ORIGIN"),
            "database_url": env.get("DATABASE_URL"),
            "db_host": env.get("DB_HOST"),
            "db_port": env.get("DB_PORT"),
            "db_user": env.get("DB_USER"),
            "db_password": env.get("DB_PASSWORD"),
            "database_name": env.get("DATABASE_NAME") or env.get("DB_NAME"),
            "youtube_api_key": env.get("YOUTUBE_API_KEY"),
            "quote_source": env.get("QUOTE_SOURCE"),
            "http_timeout": env.get("HTTP_TIMEOUT"),
            "log_level": env.get("LOG_LEVEL"),
            "log_json": env.get("LOG_JSON"),
        }
        return cls(**{k: v for k, v in values.items() if v not in (None, "")})


@lru_cache
def load_settings() -> Settings:
    """Read settings once, after loading a local .env file if present."""
    load_dotenv()
    return Settings.from_env()
