"""Application configuration via environment variables.

Uses pydantic-settings to load config from env vars with the SHOPFRONT_
prefix. The products file is the only state the service keeps; everything
else here is server and chat presentation settings.
"""

from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All app configuration. Set via SHOPFRONT_* env vars."""

    # Storage
    products_file: Path = Path("data/products.json")

    # Server
    environment: str = "development"
    debug: bool = False
    host: str = "0.0.0.0"
    admin_port: int = 8082
    shop_port: int = 3000

    # CORS
    cors_origins: list[str] = ["*"]

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # Support chat
    chat_sender: str = "server"
    chat_welcome_text: str = "Добро пожаловать в чат поддержки!"

    model_config = {"env_prefix": "SHOPFRONT_"}


# Singleton — import this everywhere
settings = Settings()
