from clinic_booking.models.booking import Booking


def make_booking(**overrides) -> Booking:
    data = {
        "id": "1741600000000",
        "first_name": "Anna",
        "last_name": "Kowalska",
        "email": "anna@example.com",
        "phone": "600100200",
        "service": "Konsultacja",
        "date": "2025-03-10",
        "time": "09:00",
        "price": "200 zł",
    }
    data.update(overrides)
    return Booking(**data)


class FakeMailer:
    """Records every email instead of talking to SMTP."""

    def __init__(self, succeed: bool = True):
        self.succeed = succeed
        self.sent = []

    def send_email(self, subject, body, to_email):
        self.sent.append({"subject": subject, "body": body, "to": to_email})
        return self.succeed
