
import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///local.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    MAX_CONTENT_LENGTH = 10 * 1024

    ADMIN_TOKEN = os.getenv("ADMIN_TOKEN", "dev-admin-token")
    CORS_ORIGIN = os.getenv("CORS_ORIGIN", "*")

    MAX_ADVANCE_MONTHS = int(os.getenv("MAX_ADVANCE_MONTHS", "3"))
    RATE_WINDOW_SECONDS = int(os.getenv("RATE_WINDOW_SECONDS", "3600"))
    RATE_MAX_BOOKINGS = int(os.getenv("RATE_MAX_BOOKINGS", "10"))
    API_RATE_WINDOW_SECONDS = int(os.getenv("API_RATE_WINDOW_SECONDS", "900"))
    API_RATE_MAX_REQUESTS = int(os.getenv("API_RATE_MAX_REQUESTS", "100"))

    MAIL_SERVER = os.getenv("MAIL_SERVER", "ssl0.ovh.net")
    MAIL_PORT = int(os.getenv("MAIL_PORT", "465"))
    MAIL_USE_SSL = os.getenv("MAIL_USE_SSL", "true").lower() == "true"
    MAIL_USE_TLS = False
    MAIL_USERNAME = os.getenv("MAIL_USERNAME")
    MAIL_PASSWORD = os.getenv("MAIL_PASSWORD")
    MAIL_DEFAULT_SENDER = os.getenv("MAIL_DEFAULT_SENDER", "reservations@lavoutesavoie.fr")
    RESTAURANT_EMAIL = os.getenv("RESTAURANT_EMAIL")
