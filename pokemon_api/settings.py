from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_TITLE: str = "Pokemon Manager API"

    # Basic-auth credentials guarding POST/PUT/DELETE (override via env)
    AUTH_USERNAME: str = "admin"
    AUTH_PASSWORD: str = "admin"


settings = Settings()
