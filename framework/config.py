from typing import Literal, Optional
from urllib.parse import quote_plus
from pydantic_settings import BaseSettings, SettingsConfigDict

# Per-deployment defaults; both deployables share one codebase
DEPLOYMENT_PROFILES = {
    "demo": {
        "app_name": "Products Demo API",
        "db_name": "urf_demo",
        "api_prefix": "/api/products",
        "seed": False,
    },
    "sample": {
        "app_name": "Products Sample API",
        "db_name": "urf_sample",
        "api_prefix": "/api/product",
        "seed": True,
    },
}


class Settings(BaseSettings):
    # --- Basic configuration ---
    APP_TITLE: Optional[str] = None  # Fallback to the deployment profile name
    APP_DESCRIPTION: str = "Product CRUD service over a repository / unit-of-work data layer"
    APP_VERSION: str = "1.0.0"
    APP_ENV: str = "development"  # development, production, testing
    DEBUG: bool = True

    # --- Deployment (demo, sample) ---
    DEPLOYMENT: Literal["demo", "sample"] = "demo"

    # --- Database (SQLModel, async engine) ---
    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_USER: str = "root"
    DB_PASSWORD: str = "root"
    DB_NAME: Optional[str] = None  # Fallback to the deployment profile database
    DB_URL: Optional[str] = None  # Full SQLAlchemy async URL; overrides DB_* when set
    DB_ECHO: bool = False
    AUTO_CREATE_SCHEMA: bool = True

    @property
    def profile(self) -> dict:
        return DEPLOYMENT_PROFILES[self.DEPLOYMENT]

    @property
    def APP_NAME(self) -> str:
        return self.APP_TITLE or self.profile["app_name"]

    @property
    def DATABASE_URL(self) -> str:
        if self.DB_URL:
            return self.DB_URL
        # Build async MySQL connection URL
        safe_password = quote_plus(self.DB_PASSWORD)
        db_name = self.DB_NAME or self.profile["db_name"]
        return f"mysql+aiomysql://{self.DB_USER}:{safe_password}@{self.DB_HOST}:{self.DB_PORT}/{db_name}"

    @property
    def API_PRODUCTS_PREFIX(self) -> str:
        return self.profile["api_prefix"]

    @property
    def SEED_SAMPLE_DATA(self) -> bool:
        return self.profile["seed"]

    # --- Logging ---
    LOG_DIR: str = "logs"

    # --- Gunicorn process name (optional) ---
    GUNICORN_PROC_NAME: Optional[str] = None  # Fallback to APP_NAME when empty

    # --- Pydantic ---
    # Load env from project root .env; priority: env vars > .env > defaults
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True,
    )


# Singleton settings instance
settings = Settings()
