from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROJECT_NAME: str = "hubdispatch"

    # Webhook settings
    WEBHOOK_SECRET: str = ""
    ALLOW_UNSIGNED: bool = False  # Accept unsigned hooks when no secret is set
    WEBHOOK_PATH: str = "/webhooks/github"

    # Request headers
    EVENT_HEADER: str = "X-GitHub-Event"
    SIGNATURE_HEADER: str = "X-Hub-Signature"
    SIGNATURE_256_HEADER: str = "X-Hub-Signature-256"
    DELIVERY_HEADER: str = "X-GitHub-Delivery"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_PAYLOADS: bool = False  # Log raw bodies at debug level

    model_config = {
        "env_file": ".env"
    }


@lru_cache
def get_settings():
    return Settings()
