from flask import Flask, jsonify
from elibrary.config import Config
from elibrary.extensions import db, migrate, jwt, mail
from elibrary.errors import register_error_handlers


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    # 1) Extension'lar
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    mail.init_app(app)

    # 2) Modeller metadata'ya kayıt olsun (migrate / create_all için)
    from elibrary.models import user, book, borrow, review, notification_log  # noqa: F401

    register_error_handlers(app)

    from elibrary.cli import register_cli
    register_cli(app)

    # 3) API blueprintleri
    from elibrary.controllers.auth_controller import auth_bp
    from elibrary.controllers.book_controller import book_bp
    from elibrary.controllers.borrow_controller import borrow_bp
    from elibrary.controllers.user_controller import user_bp
    from elibrary.controllers.review_controller import review_bp
    from elibrary.controllers.notification_controller import notif_bp
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(book_bp, url_prefix="/api/books")
    app.register_blueprint(borrow_bp, url_prefix="/api/borrow")
    app.register_blueprint(user_bp, url_prefix="/api/users")
    app.register_blueprint(review_bp, url_prefix="/api/reviews")
    app.register_blueprint(notif_bp, url_prefix="/api/notifications")

    @app.get("/api/health")
    def health():
        return jsonify({"success": True, "message": "E-Library API is running", "status": "OK"})

    # Scheduler (günlük bildirim taramaları + mail kuyruğu)
    from elibrary.tasks.scheduler import NotificationScheduler
    NotificationScheduler(app).start()

    return app
