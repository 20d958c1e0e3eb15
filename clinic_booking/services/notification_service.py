import smtplib
from html import escape
from typing import Optional, Tuple
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart

from fastapi import BackgroundTasks

from clinic_booking.core.config import Settings
from clinic_booking.core.logger import logger
from clinic_booking.models.booking import Booking


def render_clinic_notification(booking: Booking) -> Tuple[str, str]:
    """Subject and HTML body of the message sent to the clinic inbox."""
    b = {key: escape(str(value)) for key, value in booking.model_dump().items()}
    notes = f"<p><strong>Notatki:</strong> {b['notes']}</p>" if booking.notes else ""

    subject = f"Nowa rezerwacja: {booking.service}"
    body = f"""
      <h2>Nowa rezerwacja wizyty</h2>
      <p><strong>Pacjent:</strong> {b['first_name']} {b['last_name']}</p>
      <p><strong>Email:</strong> {b['email']}</p>
      <p><strong>Telefon:</strong> {b['phone']}</p>
      <p><strong>Usługa:</strong> {b['service']}</p>
      <p><strong>Data:</strong> {b['date']}</p>
      <p><strong>Godzina:</strong> {b['time']}</p>
      <p><strong>Cena:</strong> {b['price']}</p>
      {notes}
      <hr>
      <p><small>ID rezerwacji: {b['id']}</small></p>
    """
    return subject, body


def render_client_confirmation(booking: Booking, settings: Settings) -> Tuple[str, str]:
    """Subject and HTML body of the confirmation sent to the client."""
    b = {key: escape(str(value)) for key, value in booking.model_dump().items()}

    subject = f"Potwierdzenie rezerwacji - {settings.CLINIC_NAME}"
    body = f"""
      <h2>Dziękujemy za rezerwację!</h2>
      <p>Szanowny/a {b['first_name']} {b['last_name']},</p>
      <p>Potwierdzamy Twoją rezerwację:</p>
      <ul>
        <li><strong>Usługa:</strong> {b['service']}</li>
        <li><strong>Data:</strong> {b['date']}</li>
        <li><strong>Godzina:</strong> {b['time']}</li>
        <li><strong>Cena:</strong> {b['price']}</li>
      </ul>
      <p><strong>Adres:</strong> {escape(settings.CLINIC_ADDRESS)}</p>
      <p>Prosimy o przybycie 5 minut przed umówioną godziną.</p>
      <p>W razie pytań prosimy o kontakt:</p>
      <ul>
        <li>Tel: {escape(settings.CLINIC_PHONE)}</li>
        <li>Email: {escape(settings.CLINIC_EMAIL)}</li>
      </ul>
      <hr>
      <p><small>Numer rezerwacji: {b['id']}</small></p>
    """
    return subject, body


class Mailer:
    """SMTP transport. Built once at startup and shared by all requests."""

    def __init__(self, settings: Settings):
        self.host = settings.smtp_host
        self.port = settings.SMTP_PORT
        self.username = settings.EMAIL_USER
        self.password = settings.EMAIL_PASS

    @property
    def configured(self) -> bool:
        return bool(self.username and self.password)

    def verify(self) -> bool:
        """
        Logs whether the SMTP service accepts our credentials.
        Returns: True if ready, False otherwise. Never raises.
        """
        if not self.configured:
            logger.warning("⚠️ Email service not configured. Set EMAIL_USER and EMAIL_PASS; emails will not be sent.")
            return False

        try:
            with smtplib.SMTP(self.host, self.port, timeout=10) as server:
                server.starttls()
                server.login(self.username, self.password)
            logger.info("✅ Email service is ready")
            return True
        except (smtplib.SMTPException, OSError) as e:
            logger.warning(f"⚠️ Email service not configured properly: {e}")
            return False

    def send_email(self, subject: str, body: str, to_email: Optional[str]) -> bool:
        """
        Sends an HTML email.
        Returns: True if successful, False otherwise.
        """
        if not to_email:
            logger.error("❌ No recipient email given.")
            return False

        if not self.configured:
            logger.error("❌ SMTP credentials missing (EMAIL_USER / EMAIL_PASS).")
            return False

        try:
            msg = MIMEMultipart()
            msg['From'] = self.username
            msg['To'] = to_email
            msg['Subject'] = subject

            msg.attach(MIMEText(body, 'html'))

            with smtplib.SMTP(self.host, self.port) as server:
                server.starttls()
                server.login(self.username, self.password)
                server.sendmail(self.username, to_email, msg.as_string())

            logger.info(f"✅ Email sent to {to_email} with subject: '{subject}'")
            return True
        except Exception as e:
            logger.error(f"❌ Error sending email to {to_email}: {e}")
            return False


class NotificationDispatcher:
    """
    Schedules the two booking emails as background tasks so they run after
    the HTTP response has been sent. Failures are logged, never raised.
    """

    def __init__(self, mailer: Mailer, settings: Settings):
        self.mailer = mailer
        self.settings = settings

    def send_clinic_notification(self, booking: Booking) -> bool:
        subject, body = render_clinic_notification(booking)
        sent = self.mailer.send_email(subject, body, self.settings.CLINIC_EMAIL)
        if not sent:
            logger.error(f"❌ Failed to send clinic notification for booking {booking.id}")
        return sent

    def send_client_confirmation(self, booking: Booking) -> bool:
        subject, body = render_client_confirmation(booking, self.settings)
        sent = self.mailer.send_email(subject, body, booking.email)
        if not sent:
            logger.error(f"❌ Failed to send client confirmation for booking {booking.id}")
        return sent

    def notify_booking_created(self, booking: Booking, background_tasks: BackgroundTasks):
        background_tasks.add_task(self.send_clinic_notification, booking)
        background_tasks.add_task(self.send_client_confirmation, booking)
        logger.info(f"📤 Notifications queued for booking {booking.id}")
