"""Configuration management for the company store service."""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = Field(default="Company Store")
    version: str = Field(default="0.1.0")
    docs_url: str | None = Field(default="/docs")
    redoc_url: str | None = Field(default="/redoc")
    openapi_url: str = Field(default="/openapi.json")
    log_config_path: str | None = Field(default=None)

    database_url: str = Field(default="postgresql+psycopg://store:store@db:5432/store")

    hosted_service_url: str = Field(default="http://localhost:54321")
    hosted_service_key: str = Field(default="")
    hosted_service_timeout_seconds: float = Field(default=10.0)

    jwt_secret: str = Field(default="dev-store-secret-change-me")
    jwt_algorithm: str = Field(default="HS256")
    jwt_audience: str | None = Field(default="authenticated")

    report_source: Literal["database", "hosted"] = Field(default="database")
    report_timezone: str = Field(default="America/Sao_Paulo")
    report_default_format: str = Field(default="csv")
    currency_symbol: str = Field(default="R$")
    workbook_max_column_width: int = Field(default=50)

    broadcast_enabled: bool = Field(default=False)
    broadcast_topic: str = Field(default="store-purchases")

    aws_region: str = Field(default="us-east-1")
    s3_endpoint_url: str | None = Field(default=None)
    report_archive_bucket: str = Field(default="company-store-reports")
    report_archive_prefix: str = Field(default="reports/monthly")
    export_companies: list[str] = Field(default_factory=lambda: ["", "FA", "BF"])

    enable_metrics: bool = Field(default=True)
    enable_tracing: bool = Field(default=True)
    otel_exporter_endpoint: str | None = Field(default=None)

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()


__all__ = ["Settings", "get_settings"]
