from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from urllib.parse import quote_plus

class Settings(BaseSettings):
    mongo_username: Optional[str] = None
    mongo_password: Optional[str] = None
    mongo_host: str = "localhost"
    mongo_port: int = 27017
    mongo_database: str = "image-database"

    bind_host: str = "0.0.0.0"
    port: int = 5000
    # Prefix for absolute file URLs, e.g. "http://images.example.com"
    public_host: str = ""

    storage_dir: str = "images"
    keep_original_filename: bool = False
    upload_chunk_size: int = 64 * 1024

    session_secret: str = "dev-session-secret-change-me-in-production"
    token_expire_days: int = 7
    token_header: str = "x-access-token"
    auth_required: bool = True

    admin_email: Optional[str] = None
    admin_name: Optional[str] = None
    admin_password: Optional[str] = None

    log_level: str = "INFO"
    app_title: str = "Image Database API Server"
    app_version: str = "1.0.0"

    model_config = SettingsConfigDict(env_file=".env", extra="allow")

    @property
    def mongo_url(self) -> str:
        if self.mongo_username and self.mongo_password:
            return (
                f"mongodb://{quote_plus(self.mongo_username)}:{quote_plus(self.mongo_password)}"
                f"@{self.mongo_host}:{self.mongo_port}/?authSource={self.mongo_database}"
            )
        return f"mongodb://{self.mongo_host}:{self.mongo_port}/"

settings = Settings()
