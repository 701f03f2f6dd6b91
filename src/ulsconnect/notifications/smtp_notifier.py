from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from html import escape
from typing import Optional

from .notifier import Notifier

logger = logging.getLogger(__name__)

CLOSE_REASONS = {
    "cupo_completo": "El cupo de la actividad se ha completado",
}
DEFAULT_CLOSE_TEXT = "La fecha de cierre ha sido alcanzada"


@dataclass(frozen=True)
class SmtpConfig:
    host: str
    port: int = 587
    user: str = ""
    password: str = ""
    sender: str = "noreply@ulsconnect.dev"
    admin_email: str = "admin@ulsconnect.dev"
    app_url: str = "http://localhost:3000"
    timeout: float = 10.0


class SmtpNotifier(Notifier):
    def __init__(self, config: SmtpConfig):
        self._config = config

    def _send(self, to: str, subject: str, html: str) -> bool:
        msg = EmailMessage()
        msg["From"] = self._config.sender
        msg["To"] = to
        msg["Subject"] = subject
        msg.set_content("Este mensaje requiere un cliente con soporte HTML.")
        msg.add_alternative(html, subtype="html")

        cfg = self._config
        try:
            if cfg.port == 465:
                server = smtplib.SMTP_SSL(cfg.host, cfg.port, timeout=cfg.timeout)
            else:
                server = smtplib.SMTP(cfg.host, cfg.port, timeout=cfg.timeout)
            with server:
                if cfg.port != 465:
                    server.starttls()
                if cfg.user:
                    server.login(cfg.user, cfg.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("email to %s failed: %s", to, e)
            return False
        logger.info("email sent to %s: %s", to, subject)
        return True

    def activity_closed(self, *, email: str, name: str, activity_title: str, reason: str) -> bool:
        reason_text = CLOSE_REASONS.get(reason, DEFAULT_CLOSE_TEXT)
        title = escape(activity_title)
        return self._send(
            email,
            f"Convocatoria cerrada: {activity_title}",
            f"<h2>Convocatoria cerrada</h2>"
            f"<p>Hola {escape(name)},</p>"
            f"<p>La convocatoria para la actividad <strong>{title}</strong> ha sido cerrada.</p>"
            f"<p><strong>Razón:</strong> {escape(reason_text)}</p>"
            f"<p>No se aceptarán más inscripciones para esta actividad.</p>",
        )

    def registration_requested(self, *, email: str, name: str) -> bool:
        return self._send(
            self._config.admin_email,
            f"Nueva solicitud de registro: {name}",
            f"<h2>Nueva solicitud de registro</h2>"
            f"<p><strong>Nombre:</strong> {escape(name)}</p>"
            f"<p><strong>Correo:</strong> {escape(email)}</p>"
            f"<p>Revisa la solicitud en el panel de administración.</p>",
        )

    def registration_approved(self, *, email: str, name: str) -> bool:
        login_url = self._config.app_url.rstrip("/") + "/login"
        return self._send(
            email,
            "Tu solicitud de registro ha sido aprobada",
            f"<h2>¡Bienvenido {escape(name)}!</h2>"
            f"<p>Tu solicitud de registro ha sido aprobada.</p>"
            f'<p><a href="{escape(login_url)}">Iniciar sesión</a></p>',
        )

    def registration_rejected(self, *, email: str, name: str, notes: Optional[str]) -> bool:
        notes_html = f"<p><strong>Razón:</strong> {escape(notes)}</p>" if notes else ""
        return self._send(
            email,
            "Tu solicitud de registro ha sido rechazada",
            f"<h2>Solicitud rechazada</h2>"
            f"<p>Lamentablemente, tu solicitud de registro ha sido rechazada.</p>"
            f"{notes_html}"
            f"<p>Si tienes preguntas, contacta con administración.</p>",
        )
