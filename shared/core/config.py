import os
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Always load .env from root
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
load_dotenv(os.path.join(BASE_DIR, ".env"))


class Settings(BaseSettings):
    # Storage: SQL when DATABASE_URL is set, JSON files under DATA_DIR otherwise
    DATABASE_URL: str | None = os.getenv("DATABASE_URL") or None
    DATA_DIR: str = os.getenv("DATA_DIR", os.path.join(os.getcwd(), "data"))

    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:5173")

    # Admin login
    ADMIN_EMAIL: str | None = os.getenv("ADMIN_EMAIL")
    ADMIN_PASSWORD: str | None = os.getenv("ADMIN_PASSWORD")
    ADMIN_JWT_SECRET: str | None = os.getenv("ADMIN_JWT_SECRET")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    ADMIN_JWT_EXPIRE_DAYS: int = int(os.getenv("ADMIN_JWT_EXPIRE_DAYS", 7))

    # Email configuration for order notifications
    SMTP_HOST: str | None = os.getenv("SMTP_HOST")
    SMTP_PORT: int = int(os.getenv("SMTP_PORT", 587))
    SMTP_USERNAME: str | None = os.getenv("SMTP_USERNAME")
    SMTP_PASSWORD: str | None = os.getenv("SMTP_PASSWORD")
    SMTP_USE_SSL: bool = os.getenv(
        "SMTP_USE_SSL", str(int(os.getenv("SMTP_PORT", 587)) == 465)).lower() == "true"
    EMAIL_SENDER: str | None = os.getenv("EMAIL_SENDER")
    ORDER_NOTIFY_EMAIL: str | None = os.getenv("ORDER_NOTIFY_EMAIL")

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def smtp_configured(self) -> bool:
        return bool(self.SMTP_HOST and self.SMTP_PORT and self.SMTP_USERNAME and self.SMTP_PASSWORD)

    @property
    def admin_auth_configured(self) -> bool:
        return bool(self.ADMIN_EMAIL and self.ADMIN_PASSWORD and self.ADMIN_JWT_SECRET)


settings = Settings()
