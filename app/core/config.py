"""
Core configuration settings for RetailPOS application.
"""
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Application
    app_name: str = "RetailPOS"
    debug: bool = False
    api_v1_str: str = "/api/v1"

    # Redis (named-slot storage)
    redis_url: str = "redis://localhost:6379"
    redis_db: int = 0
    products_slot: str = "retail-store-products"
    bills_slot: str = "retail-store-bills"
    email_settings_slot: str = "retail-store-email-settings"

    # Analytics
    low_stock_threshold: int = 5
    top_sellers_limit: int = 5

    # Email (SendGrid)
    sendgrid_api_url: str = "https://api.sendgrid.com/v3"
    sendgrid_api_key: str = ""
    sender_email: str = ""
    sender_name: str = "Retail Store"
    email_timeout: int = 10  # seconds

    # Payments
    upi_id: str = "retailstore@okicici"
    merchant_name: str = "Retail Store"
    qr_service_url: str = "https://api.qrserver.com/v1/create-qr-code/"

    # Celery
    celery_broker_url: str = "redis://localhost:6379/1"
    celery_result_backend: str = "redis://localhost:6379/2"

    # Logging
    log_level: str = "INFO"

    @field_validator("redis_url", "celery_broker_url", "celery_result_backend")
    @classmethod
    def validate_redis_url(cls, v):
        if not v.startswith(("redis://", "rediss://")):
            raise ValueError("Redis URL must start with redis:// or rediss://")
        return v

    @field_validator("sendgrid_api_url", "qr_service_url")
    @classmethod
    def validate_http_url(cls, v):
        if not v.startswith(("http://", "https://")):
            raise ValueError("Service URL must be an http(s) URL")
        return v

    @field_validator("low_stock_threshold", "top_sellers_limit")
    @classmethod
    def validate_positive(cls, v):
        if v <= 0:
            raise ValueError("Analytics thresholds must be positive")
        return v


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
