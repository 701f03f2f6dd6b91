import os

SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

STORAGE_BACKEND = "file"
MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
MONGO_DB = os.getenv("MONGO_DB", "ulsconnect_test")
DATA_FILE = os.getenv("DATA_FILE", "data/ulsconnect-test.json")

AUTO_INIT_DB = False

# SMTP disabled: notifications are only logged
SMTP_HOST = ""
SMTP_PORT = 587
SMTP_USER = ""
SMTP_PASS = ""
SMTP_FROM = "noreply@ulsconnect.dev"
ADMIN_EMAIL = "admin@ulsconnect.dev"
APP_URL = "http://localhost:5000"
