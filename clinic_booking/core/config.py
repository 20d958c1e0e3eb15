from typing import List

from pydantic_settings import BaseSettings

# Known EMAIL_SERVICE names and the SMTP host behind them
SMTP_HOSTS = {
    "gmail": "smtp.gmail.com",
    "outlook": "smtp.office365.com",
    "hotmail": "smtp.office365.com",
    "yahoo": "smtp.mail.yahoo.com",
}

class Settings(BaseSettings):
    PROJECT_NAME: str = "HARMONIA Booking System API"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    ENVIRONMENT: str = "development"
    CORS_ORIGINS: List[str] = ["*"]

    # Storage
    STORAGE_BACKEND: str = "json"  # json | sqlite
    DATA_DIR: str = "data"
    BOOKINGS_FILE: str = "data/bookings.json"
    DATABASE_URL: str = "sqlite:///data/bookings.db"

    # Email
    EMAIL_SERVICE: str = "gmail"
    EMAIL_USER: str = ""
    EMAIL_PASS: str = ""
    SMTP_SERVER: str = ""
    SMTP_PORT: int = 587
    CLINIC_EMAIL: str = "harmonia.sibo@gmail.com"

    # Clinic details used in the client confirmation
    CLINIC_NAME: str = "HARMONIA"
    CLINIC_ADDRESS: str = "ul. Zacisze 16/1, 31-156 Kraków"
    CLINIC_PHONE: str = "692 922 926"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/errors.log"

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"

    @property
    def smtp_host(self) -> str:
        """SMTP_SERVER wins; otherwise derive the host from EMAIL_SERVICE."""
        if self.SMTP_SERVER:
            return self.SMTP_SERVER
        return SMTP_HOSTS.get(self.EMAIL_SERVICE.lower(), f"smtp.{self.EMAIL_SERVICE.lower()}.com")

settings = Settings()
