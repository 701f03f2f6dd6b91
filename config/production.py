import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "mongo")
MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
MONGO_DB = os.getenv("MONGO_DB", "ulsconnect")
DATA_FILE = os.getenv("DATA_FILE", "data/ulsconnect.json")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

SMTP_HOST = os.getenv("SMTP_HOST", "")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USER = os.getenv("SMTP_USER", "")
SMTP_PASS = os.getenv("SMTP_PASS", "")
SMTP_FROM = os.getenv("SMTP_FROM", "noreply@ulsconnect.dev")
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@ulsconnect.dev")
APP_URL = os.getenv("APP_URL", "http://localhost:3000")
