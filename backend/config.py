import os
from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field
import platformdirs

APP_NAME = "Tuneshelf"
APP_AUTHOR = "TuneshelfDev"

class Settings(BaseSettings):
    # App Info
    APP_NAME: str = APP_NAME
    APP_AUTHOR: str = APP_AUTHOR
    ENV: str = "prod"

    # Paths
    # platformdirs by default; DB_PATH / STORAGE_DIR from the environment take precedence
    USER_DATA_DIR: str = Field(default_factory=lambda: platformdirs.user_data_dir(APP_NAME, APP_AUTHOR))
    DB_PATH: str | None = None
    STORAGE_DIR: str | None = None

    # Network
    TUNESHELF_PORT: int = 8080
    CORS_ORIGINS: List[str] = ["*"]
    # 共有リンク (share_url) の生成先。/share/<token> を配信するフロントエンドのオリジンを指定する
    PUBLIC_BASE_URL: str | None = None

    # Auth
    SECRET_KEY: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Upload ceilings (bytes)
    MAX_TRACK_UPLOAD_BYTES: int = 100 * 1024 * 1024
    MAX_LYRICS_UPLOAD_BYTES: int = 10 * 1024 * 1024

    # Listing
    MUSIC_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100

    # Logging
    TUNESHELF_LOG_DIR: str | None = None

    class Config:
        env_file = ".env"
        extra = "ignore"

    def model_post_init(self, __context):
        if not self.DB_PATH:
            self.DB_PATH = os.path.join(self.USER_DATA_DIR, "tuneshelf.duckdb")

        if not self.STORAGE_DIR:
            self.STORAGE_DIR = os.path.join(self.USER_DATA_DIR, "uploads")

        if not self.TUNESHELF_LOG_DIR:
            self.TUNESHELF_LOG_DIR = os.path.join(self.USER_DATA_DIR, "logs")

    @property
    def database_url(self) -> str:
        return f"duckdb:///{self.DB_PATH}"

    def setup_environment(self):
        """Export settings that are read by modules at import time."""
        if self.TUNESHELF_LOG_DIR:
            os.environ["TUNESHELF_LOG_DIR"] = self.TUNESHELF_LOG_DIR

settings = Settings()
