from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    DATABASE_URL: str = "sqlite:///./joblink.db"

    # JWT Authentication
    SECRET_KEY: str = "supersecretjwtkey-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 30

    # Password hashing
    BCRYPT_ROUNDS: int = 10

    # Seeded superadmin
    SUPERADMIN_EMAIL: str = "admin@joblink.com"
    SUPERADMIN_PASSWORD: str = "admin123"

    # Outbound mail
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 465
    SMTP_USER: str = ""
    SMTP_PASS: str = ""
    ADMIN_NOTIFY_EMAIL: str = ""

    # Application
    APP_NAME: str = "JobLink"
    DEBUG: bool = False
    FRONTEND_URL: str = "http://localhost:3000"
    BACKEND_CORS_ORIGINS: str = "http://localhost:3000,http://127.0.0.1:3000"


settings = Settings()
