import smtplib

from infrastructure.mail import MailService
from infrastructure.mail import mail_service as mail_module
from settings import Settings


class FakeSMTP:
    instances = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.sent = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def sendmail(self, sender, recipients, message):
        self.sent.append((sender, recipients, message))


class FailingSMTP(FakeSMTP):
    def sendmail(self, sender, recipients, message):
        raise smtplib.SMTPRecipientsRefused({recipients[0]: (550, b"unknown")})


def _config(**overrides):
    values = dict(MAIL_ACTIVATED=True, MAIL_HOST="smtp.test", MAIL_PORT=2525, MAIL_TO="ops@acme.com")
    values.update(overrides)
    return Settings(**values)


def test_sendmail_disabled(monkeypatch):
    FakeSMTP.instances = []
    monkeypatch.setattr(mail_module.smtplib, "SMTP", FakeSMTP)

    assert MailService(_config(MAIL_ACTIVATED=False)).sendmail("New auto 1", "body") is False
    assert FakeSMTP.instances == []


def test_sendmail_sends_html(monkeypatch):
    FakeSMTP.instances = []
    monkeypatch.setattr(mail_module.smtplib, "SMTP", FakeSMTP)

    sent = MailService(_config()).sendmail("New auto 7", "<strong>Neu</strong>")

    assert sent is True
    smtp = FakeSMTP.instances[0]
    assert (smtp.host, smtp.port) == ("smtp.test", 2525)
    sender, recipients, message = smtp.sent[0]
    assert sender == "auto-catalog@acme.com"
    assert recipients == ["ops@acme.com"]
    assert "Subject: New auto 7" in message
    assert "text/html" in message


def test_sendmail_smtp_error_is_not_raised(monkeypatch):
    monkeypatch.setattr(mail_module.smtplib, "SMTP", FailingSMTP)

    assert MailService(_config()).sendmail("New auto 7", "body") is False


def test_sendmail_connection_refused(monkeypatch):
    def refuse(*args, **kwargs):
        raise ConnectionRefusedError("refused")

    monkeypatch.setattr(mail_module.smtplib, "SMTP", refuse)

    assert MailService(_config()).sendmail("New auto 7", "body") is False
