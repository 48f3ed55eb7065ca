from urllib.parse import quote_plus
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # --- Basic configuration ---
    APP_NAME: str = "Order Service"
    APP_DESCRIPTION: str = "Order management API built on a generic repository layer"
    APP_VERSION: str = "1.0.0"
    APP_ENV: str = "development"  # development, production, testing
    DEBUG: bool = True

    # --- Database (SQLModel / async SQLAlchemy) ---
    DB_DRIVER: str = "mysql+aiomysql"
    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_USER: str = "root"
    DB_PASSWORD: str = "root"
    DB_NAME: str = "orders_db"
    DB_ECHO: bool = False
    DB_CREATE_TABLES: bool = True  # create_all on startup; no migrations

    @property
    def DATABASE_URL(self) -> str:
        if self.DB_DRIVER.startswith("sqlite"):
            return f"{self.DB_DRIVER}:///{self.DB_NAME}"
        safe_password = quote_plus(self.DB_PASSWORD)
        return f"{self.DB_DRIVER}://{self.DB_USER}:{safe_password}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    # --- Repositories ---
    # True: orders are queried with items and products eagerly loaded
    ORDER_REPOSITORY_EAGER_LOADING: bool = True

    # --- Logging ---
    LOG_DIR: str = "logs"
    LOG_LEVEL: str = "INFO"

    # --- API route prefixes ---
    API_V1_ORDERS_PREFIX: str = "/api/v1/orders"

    # Priority: env vars > .env > defaults
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True,
    )


# Singleton settings instance
settings = Settings()
