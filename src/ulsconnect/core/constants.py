"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

POINT_HISTORY_LIMIT = 50
DEFAULT_SCORE_HISTORY_LIMIT = 20
DEFAULT_LEADERBOARD_LIMIT = 10

DEFAULT_CLOSE_REASON = "fecha_alcanzada"

DEFAULT_POINTS_PRESENTE = 10
DEFAULT_POINTS_JUSTIFICADA = 2
DEFAULT_POINTS_AUSENTE = -5

ALLOWED_EMAIL_DOMAINS = ("userena.cl", "alumnouls.cl")
PASSWORD_MIN_LENGTH = 6

DEFAULT_USERS_PAGE_SIZE = 50
MAX_USERS_PAGE_SIZE = 200
DEFAULT_REPORTS_LIMIT = 20
