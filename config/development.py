import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# "mongo" or "file" (JSON file store, no database needed)
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "file")
MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
MONGO_DB = os.getenv("MONGO_DB", "ulsconnect")
DATA_FILE = os.getenv("DATA_FILE", "data/ulsconnect.json")

# Create Mongo indexes on startup (idempotent)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

SMTP_HOST = os.getenv("SMTP_HOST", "")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USER = os.getenv("SMTP_USER", "")
SMTP_PASS = os.getenv("SMTP_PASS", "")
SMTP_FROM = os.getenv("SMTP_FROM", "noreply@ulsconnect.dev")
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@ulsconnect.dev")
APP_URL = os.getenv("APP_URL", "http://localhost:5000")
