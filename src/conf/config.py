from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database settings
    sqlalchemy_database_url: str = "sqlite:///./contacts.db"

    # JWT settings
    secret_key: str = "change-me"
    algorithm: str = "HS256"
    access_token_expire_seconds: int = 3600

    # Redis settings
    redis_host: str = 'localhost'
    redis_port: int = 6379

    cors_origins: list[str] = ["*"]
    log_level: str = "INFO"


settings = Settings()
