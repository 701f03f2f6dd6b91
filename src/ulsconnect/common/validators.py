from __future__ import annotations

import math
from typing import Any, Optional

from ..core.constants import ALLOWED_EMAIL_DOMAINS
from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} requerido")
    return str(value).strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} mínima {min_len} caracteres")
    return value


def require_institutional_email(value: Optional[str]) -> str:
    email = require_non_empty(value, "Correo").lower()
    local, _, domain = email.partition("@")
    if not local or not domain:
        raise ValidationError("Correo inválido")
    if domain not in ALLOWED_EMAIL_DOMAINS:
        allowed = " o ".join(f"@{d}" for d in ALLOWED_EMAIL_DOMAINS)
        raise ValidationError(f"Solo correos {allowed} son permitidos")
    return email


def parse_bool(value: Any) -> Optional[bool]:
    """Lenient boolean parsing for query strings and JSON bodies; None when unrecognised."""
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    normalized = str(value).strip().lower()
    if normalized in {"1", "true", "si", "yes", "y", "t"}:
        return True
    if normalized in {"0", "false", "no", "n", "f"}:
        return False
    return None


def parse_number(value: Any, fallback: float) -> float:
    """Return `value` as a finite number, or `fallback`."""
    if isinstance(value, bool) or value is None:
        return fallback
    try:
        number = float(value)
    except (TypeError, ValueError):
        return fallback
    if not math.isfinite(number):
        return fallback
    return int(number) if number.is_integer() else number


def parse_int(value: Any, default: int, *, minimum: int = 1, maximum: Optional[int] = None) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        number = default
    number = max(number, minimum)
    if maximum is not None:
        number = min(number, maximum)
    return number
