import pytest
from fastapi.testclient import TestClient

from clinic_booking.core.config import Settings
from clinic_booking.main import create_app
from factories import FakeMailer


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        ENVIRONMENT="test",
        BOOKINGS_FILE=str(tmp_path / "bookings.json"),
        DATABASE_URL=f"sqlite:///{tmp_path / 'bookings.db'}",
        EMAIL_USER="",
        EMAIL_PASS="",
        CLINIC_EMAIL="clinic@example.com",
        LOG_FILE="",
    )


@pytest.fixture
def fake_mailer():
    return FakeMailer()


@pytest.fixture(params=["json", "sqlite"])
def client(request, settings, fake_mailer):
    settings.STORAGE_BACKEND = request.param
    with TestClient(create_app(settings)) as test_client:
        test_client.app.state.dispatcher.mailer = fake_mailer
        yield test_client
