from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # --- DB ---
    DATABASE_URL: str = "sqlite:///./work_tickets.db"
    # "sql" uses DATABASE_URL, "memory" keeps everything in process
    STORE_BACKEND: Literal["sql", "memory"] = "sql"

    # --- session cookie ---
    SESSION_SECRET: str = "change-me"
    SESSION_ALGORITHM: str = "HS256"
    SESSION_COOKIE_NAME: str = "WorkTicketAuth"
    SESSION_EXPIRE_MINUTES: int = 480
    SESSION_COOKIE_SECURE: bool = False

    # --- passwords ---
    BCRYPT_ROUNDS: int = 12
    RESET_TOKEN_EXPIRE_MINUTES: int = 60
    FRONTEND_BASE_URL: str = "http://localhost:5173"

    # first admin account, created at startup when both are set
    ADMIN_USERNAME: Optional[str] = None
    ADMIN_PASSWORD: Optional[str] = None

    # --- logging ---
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_TO_FILE: bool = True

    CORS_ORIGINS: list[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True
    )

settings = Settings()
