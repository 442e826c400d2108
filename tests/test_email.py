import smtplib
from unittest.mock import MagicMock, patch

import pytest

from planit.core.errors import DeliveryFailure
from planit.modules.notifications.email import EmailService

TRIP = {"id": "t1", "title": "Bandon <Dunes>", "slug": "bandon-2027"}


def test_unconfigured_sends_are_skipped():
    service = EmailService(server_token="", app_url="https://planit.test")
    assert service.is_configured is False
    with patch("planit.modules.notifications.email.smtplib.SMTP") as smtp:
        assert service.send_invite("tok", TRIP, "a@example.com") == {"skipped": True}
        assert service.send_rsvp_reminder(TRIP, "a@example.com") == {"skipped": True}
        assert service.send_deposit_reminder(TRIP, "a@example.com", "soon") == {"skipped": True}
    smtp.assert_not_called()


def test_links_use_app_url():
    service = EmailService(server_token="x", app_url="https://planit.test/")
    assert service.invite_url("abc") == "https://planit.test/invite/abc"
    assert service.trip_url("bandon-2027") == "https://planit.test/trips/bandon-2027"


def test_configured_invite_goes_through_smtp():
    service = EmailService(server_token="server-token", app_url="https://planit.test")
    with patch("planit.modules.notifications.email.smtplib.SMTP") as smtp:
        server = smtp.return_value.__enter__.return_value
        result = service.send_invite("tok123", TRIP, "a@example.com")

    assert result == {"skipped": False}
    server.starttls.assert_called_once()
    server.login.assert_called_once_with("server-token", "server-token")
    from_addr, to_addrs, message = server.sendmail.call_args.args
    assert to_addrs == ["a@example.com"]
    assert "https://planit.test/invite/tok123" in message
    assert "Bandon &lt;Dunes&gt;" in message


def test_smtp_error_raises_delivery_failure():
    service = EmailService(server_token="server-token")
    with patch("planit.modules.notifications.email.smtplib.SMTP") as smtp:
        server = MagicMock()
        server.sendmail.side_effect = smtplib.SMTPRecipientsRefused({"a@example.com": (550, b"no")})
        smtp.return_value.__enter__.return_value = server
        with pytest.raises(DeliveryFailure):
            service.send_deposit_reminder(TRIP, "a@example.com", "March 1, 2027")
