"""Configuration management using pydantic-settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    database_path: str = "./data/neighborfit.db"
    api_prefix: str = "/api"
    port: int = 5000

    # "development" exposes storage error details in responses
    environment: str = "development"

    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:8000",
        "http://localhost:8001",
        "http://localhost:8002",
        "https://summer-pep-xnka.vercel.app",
        "https://summer-pep-qoz3.vercel.app",
    ]
    # Preview deployments get a generated subdomain
    cors_origin_regex: str = r"^https://summer-pep[a-z0-9-]*\.vercel\.app$"

    # JWT Configuration
    jwt_secret_key: str = "change-me-in-production-use-env-var"
    jwt_expiry_days: int = 7

    # Bcrypt work factor (higher = more secure but slower)
    # Tests run with 4
    bcrypt_work_factor: int = 12

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False
    )

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"


settings = Settings()
