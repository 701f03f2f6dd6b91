from __future__ import annotations

import smtplib

import pytest

from ulsconnect.container import build_notifier
from ulsconnect.notifications.log_notifier import LogNotifier
from ulsconnect.notifications.smtp_notifier import SmtpConfig, SmtpNotifier


class FakeServer:
    instances = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.calls = []
        self.messages = []
        FakeServer.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.calls.append("quit")
        return False

    def starttls(self):
        self.calls.append("starttls")

    def login(self, user, password):
        self.calls.append(("login", user))

    def send_message(self, msg):
        self.messages.append(msg)


class FailingServer(FakeServer):
    def send_message(self, msg):
        raise smtplib.SMTPRecipientsRefused({msg["To"]: (550, b"rejected")})


@pytest.fixture(autouse=True)
def fake_smtp(monkeypatch):
    FakeServer.instances = []
    monkeypatch.setattr(smtplib, "SMTP", FakeServer)
    monkeypatch.setattr(smtplib, "SMTP_SSL", FakeServer)


def _notifier(port=587, **kwargs):
    return SmtpNotifier(SmtpConfig(host="smtp.test", port=port, user="bot", password="pw", **kwargs))


def test_plain_port_upgrades_with_starttls():
    assert _notifier().activity_closed(
        email="ana@alumnouls.cl", name="Ana", activity_title="Limpieza <playa>", reason="cupo_completo"
    )

    (server,) = FakeServer.instances
    assert server.calls[:2] == ["starttls", ("login", "bot")]
    (msg,) = server.messages
    assert msg["To"] == "ana@alumnouls.cl"
    html = msg.get_body(preferencelist=("html",)).get_content()
    assert "Limpieza &lt;playa&gt;" in html
    assert "El cupo de la actividad se ha completado" in html


def test_ssl_port_skips_starttls(monkeypatch):
    ssl_servers = []

    class SslServer(FakeServer):
        def __init__(self, *args, **kwargs):
            super().__init__(*args, **kwargs)
            ssl_servers.append(self)

    monkeypatch.setattr(smtplib, "SMTP_SSL", SslServer)

    assert _notifier(port=465).registration_approved(email="ana@alumnouls.cl", name="Ana")

    (server,) = ssl_servers
    assert "starttls" not in server.calls
    assert server.port == 465


def test_registration_requests_go_to_admin():
    _notifier(admin_email="jefa@userena.cl").registration_requested(email="nuevo@alumnouls.cl", name="Nuevo")

    assert FakeServer.instances[0].messages[0]["To"] == "jefa@userena.cl"


def test_delivery_failure_returns_false(monkeypatch):
    monkeypatch.setattr(smtplib, "SMTP", FailingServer)

    assert _notifier().registration_rejected(email="ana@alumnouls.cl", name="Ana", notes="Sin cupo") is False


def test_connection_error_returns_false(monkeypatch):
    def refuse(*args, **kwargs):
        raise ConnectionRefusedError("no server")

    monkeypatch.setattr(smtplib, "SMTP", refuse)

    assert _notifier().registration_approved(email="ana@alumnouls.cl", name="Ana") is False


def test_build_notifier_needs_full_smtp_settings():
    assert isinstance(build_notifier({"SMTP_HOST": "smtp.test", "SMTP_USER": "bot"}), LogNotifier)
    assert isinstance(
        build_notifier({"SMTP_HOST": "smtp.test", "SMTP_USER": "bot", "SMTP_PASS": "pw"}), SmtpNotifier
    )
