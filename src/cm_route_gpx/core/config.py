"""Runtime configuration read from the environment."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    api_base_url: str = "https://api.carrismetropolitana.pt"
    request_timeout: float = 30.0
    gpx_creator: str = "Carris Metropolitana"
    log_level: str = "WARNING"

    model_config = SettingsConfigDict(env_prefix="CM_ROUTE_", case_sensitive=False)


settings = Settings()
