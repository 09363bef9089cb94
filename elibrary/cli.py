# elibrary/cli.py
from datetime import datetime, timedelta

import click
from werkzeug.security import generate_password_hash

from elibrary.extensions import db
from elibrary.models.book import Book
from elibrary.models.user import User
from elibrary.services.notification_service import NotificationService

SEED_USERS = [
    dict(username="admin", name="Admin User", email="admin@library.com", role="admin",
         phone="1234567890", address="123 Admin Street, Admin City"),
    dict(username="john", name="John Doe", email="john@example.com", student_id="STU001",
         phone="1234567891", address="123 Student Street, Student City"),
    dict(username="jane", name="Jane Smith", email="jane@example.com", student_id="STU002",
         phone="1234567892", address="456 Student Avenue, Student City"),
]

SEED_BOOKS = [
    dict(title="The Great Gatsby", author="F. Scott Fitzgerald", isbn="978-0-7432-7356-5",
         publisher="Scribner", published_year=1925, category="Fiction", total_copies=5,
         shelf="A1", section="Fiction"),
    dict(title="A Brief History of Time", author="Stephen Hawking", isbn="978-0-553-38016-3",
         publisher="Bantam", published_year=1988, category="Science", total_copies=3,
         shelf="C2", section="Science"),
    dict(title="Clean Code", author="Robert C. Martin", isbn="978-0-13-235088-4",
         publisher="Prentice Hall", published_year=2008, category="Technology", total_copies=4,
         shelf="D1", section="Technology"),
    dict(title="Sapiens", author="Yuval Noah Harari", isbn="978-0-06-231609-7",
         publisher="Harper", published_year=2011, category="History", total_copies=2,
         shelf="B3", section="History"),
]


def register_cli(app):
    @app.cli.command("init-db")
    def init_db():
        """Tabloları oluşturur (migration kullanılmıyorsa)."""
        db.create_all()
        click.echo("[init-db] tables created")

    @app.cli.command("seed")
    @click.option("--password", default="password", show_default=True)
    def seed(password):
        """Örnek kullanıcı ve kitapları ekler (varsa atlar)."""
        db.create_all()
        admin = None
        for row in SEED_USERS:
            user = User.query.filter_by(email=row["email"]).first()
            if not user:
                user = User(password_hash=generate_password_hash(password), **row)
                db.session.add(user)
            if user.role == "admin":
                admin = user
        db.session.flush()

        for row in SEED_BOOKS:
            if Book.query.filter_by(isbn=row["isbn"]).first():
                continue
            db.session.add(Book(
                available_copies=row["total_copies"],
                added_by_id=admin.id if admin else None,
                **row,
            ))
        db.session.commit()
        click.echo(f"[seed] users={User.query.count()} books={Book.query.count()}")

    @app.cli.command("run-sweeps")
    @click.option("--days-ahead", default=0, type=int, help="Taramayı ileri bir tarih için çalıştır.")
    def run_sweeps(days_ahead):
        """Due-soon ve overdue taramalarını hemen çalıştırır."""
        now = datetime.utcnow() + timedelta(days=days_ahead)
        click.echo(f"[due_soon] {NotificationService.run_due_soon_sweep(now)}")
        click.echo(f"[overdue] {NotificationService.run_overdue_sweep(now)}")
