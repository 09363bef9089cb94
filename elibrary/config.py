import os
from datetime import timedelta


class Config:
    ENV = os.getenv("FLASK_ENV", "production")
    SECRET_KEY = os.getenv("SECRET_KEY", "super-secret-key")

    SQLALCHEMY_DATABASE_URI = os.getenv("SQLALCHEMY_DATABASE_URI", "sqlite:///elibrary.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "jwt-super-secret")
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=int(os.getenv("JWT_EXPIRE_DAYS", "7")))

    # Mail
    MAIL_SERVER = os.getenv("MAIL_SERVER", "smtp.gmail.com")
    MAIL_PORT = int(os.getenv("MAIL_PORT", "587"))
    MAIL_USE_TLS = True
    MAIL_USERNAME = os.getenv("MAIL_USERNAME", "")
    MAIL_PASSWORD = os.getenv("MAIL_PASSWORD", "")
    MAIL_DEFAULT_SENDER = os.getenv("MAIL_DEFAULT_SENDER", "E-Library System <noreply@elibrary.local>")
    # SMTP ayarı yoksa mailler loglanır, gönderilmez
    MAIL_SUPPRESS_SEND = os.getenv("MAIL_SUPPRESS_SEND", "0" if os.getenv("MAIL_USERNAME") else "1") == "1"

    FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")

    # Borrow kuralları
    FINE_PER_DAY = int(os.getenv("FINE_PER_DAY", "5"))
    MAX_ACTIVE_BORROWS = int(os.getenv("MAX_ACTIVE_BORROWS", "5"))
    MAX_RENEWALS = int(os.getenv("MAX_RENEWALS", "2"))
    RENEWAL_DAYS = int(os.getenv("RENEWAL_DAYS", "14"))

    # Scheduler (UTC saat)
    SCHEDULER_ENABLED = os.getenv("SCHEDULER_ENABLED", "1") == "1"
    DUE_SOON_HOUR = int(os.getenv("DUE_SOON_HOUR", "9"))
    OVERDUE_HOUR = int(os.getenv("OVERDUE_HOUR", "10"))


class TestConfig(Config):
    TESTING = True
    ENV = "testing"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    JWT_SECRET_KEY = "test-jwt-secret-key-with-enough-length"
    MAIL_SUPPRESS_SEND = True
    SCHEDULER_ENABLED = False
