from clinic_booking.core.config import Settings

def test_smtp_host_derived_from_email_service():
    assert Settings(_env_file=None, EMAIL_SERVICE="gmail").smtp_host == "smtp.gmail.com"
    assert Settings(_env_file=None, EMAIL_SERVICE="Outlook").smtp_host == "smtp.office365.com"

def test_smtp_server_overrides_email_service():
    settings = Settings(_env_file=None, EMAIL_SERVICE="gmail", SMTP_SERVER="mail.clinic.pl")

    assert settings.smtp_host == "mail.clinic.pl"

def test_settings_read_from_environment(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.setenv("STORAGE_BACKEND", "sqlite")

    settings = Settings(_env_file=None)

    assert settings.PORT == 8080
    assert settings.STORAGE_BACKEND == "sqlite"
    assert settings.is_development is False
