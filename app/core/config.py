from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "Split Ledger"
    LOG_LEVEL: str = "INFO"

    JWT_SECRET: str = "dev-secret-key-change-me-0123456789abcdef"
    JWT_ALGO: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # dashboard defaults
    RECENT_ACTIVITY_LIMIT: int = 5
    PREVIOUS_MONTHS: int = 3

settings = Settings()
