import os

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DATA_DIR: str = "arcade/data"
    HISTORY_FILE: str = "tournament_history.json"
    MAX_HISTORY_RECORDS: int = 20
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    model_config = SettingsConfigDict(env_prefix="ARCADE_", env_file=".env", extra="ignore")

    @property
    def history_file_path(self) -> str:
        return os.path.join(self.DATA_DIR, self.HISTORY_FILE)


settings = Settings()
