import logging
import random
import uuid
from datetime import timedelta
import click
from flask import Flask, abort, jsonify, request
from flask.cli import with_appcontext
from flask_cors import CORS
from werkzeug.exceptions import HTTPException
from .extensions import db, migrate, mail, reservation_service, SERVICE_KEY
from .config import Config
from .errors import CapacityConflict, ReservationError
from .http import jerror
from .ratelimit import api_limiter, client_ip
from .blueprints.reservations import bp as reservations_bp
from .blueprints.availability import bp as availability_bp
from .blueprints.admin import bp as admin_bp
from .schemas import Reservation, Status
from .services.reservations import ReservationService
from .store import ReservationStore, SqlDocumentStore
from .utils.time import js_weekday, local_today, long_date, utc_now


def create_app(overrides: dict | None = None, store: ReservationStore | None = None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="[%(asctime)s] %(levelname)s in %(name)s: %(message)s",
    )
    app.logger.setLevel(app.config["LOG_LEVEL"])

    CORS(
        app,
        origins=app.config["CORS_ORIGIN"],
        methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization", "X-API-Key"],
    )

    db.init_app(app)
    migrate.init_app(app, db)
    mail.init_app(app)

    with app.app_context():
        from . import models

    app.extensions[SERVICE_KEY] = ReservationService(store or SqlDocumentStore())
    app.add_template_filter(long_date, "longdate")

    app.register_blueprint(reservations_bp, url_prefix="/api/reservations")
    app.register_blueprint(availability_bp, url_prefix="/api/availability")
    app.register_blueprint(admin_bp, url_prefix="/api/admin")

    @app.before_request
    def log_request():
        app.logger.info("%s %s", request.method, request.path)

    @app.before_request
    def limit_api():
        if not request.path.startswith("/api/"):
            return None
        limit = app.config["MAX_CONTENT_LENGTH"]
        if limit and (request.content_length or 0) > limit:
            abort(413)
        if not api_limiter.allow(
            client_ip(),
            app.config["API_RATE_MAX_REQUESTS"],
            app.config["API_RATE_WINDOW_SECONDS"],
        ):
            return jerror(429, "RATE_LIMITED", "Trop de requêtes. Veuillez réessayer plus tard.")
        return None

    @app.errorhandler(CapacityConflict)
    def capacity_conflict(e: CapacityConflict):
        return jerror(
            e.status,
            e.code,
            str(e),
            details={"suggestedTimes": e.availability.suggested_times or []},
        )

    @app.errorhandler(ReservationError)
    def reservation_error(e: ReservationError):
        if e.status >= 500:
            app.logger.error("Reservation error: %s", e)
            return jerror(e.status, e.code, "Une erreur est survenue")
        return jerror(e.status, e.code, str(e))

    @app.errorhandler(HTTPException)
    def http_error(e: HTTPException):
        return jerror(e.code or 500, e.name.upper().replace(" ", "_"), e.description or e.name)

    @app.errorhandler(Exception)
    def unhandled(e: Exception):
        app.logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jerror(500, "INTERNAL_ERROR", "Une erreur est survenue")

    @app.get("/api/health")
    def health():
        return jsonify(status="ok", timestamp=utc_now().isoformat())

    @click.command("init-db")
    @with_appcontext
    def init_db_command():
        """Creates the documents table and stores the default configuration."""
        db.create_all()
        config = reservation_service().get_config()
        print(f"Database ready with {len(config.tables)} tables.")

    @click.command("seed")
    @click.option("--days", default=7, show_default=True, help="Number of days to fill.")
    @click.option("--count", default=35, show_default=True, help="Reservations to attempt.")
    @with_appcontext
    def seed_command(days, count):
        """Creates sample reservations over the coming days."""
        service = reservation_service()
        config = service.get_config()
        today = local_today()
        open_days = [
            today + timedelta(days=offset)
            for offset in range(1, days + 1)
            if js_weekday(today + timedelta(days=offset)) not in config.effective_closed_days
        ]
        if not open_days:
            print("No open days in range.")
            return

        created = 0
        for i in range(count):
            day = random.choice(open_days)
            reservation = Reservation(
                id=str(uuid.uuid4()),
                name=f"Customer {i + 1}",
                email=f"customer{i + 1}@example.com",
                phone=f"06123456{i % 100:02d}",
                date=day,
                time=random.choice(config.time_slots.catalog()),
                guests=random.randint(1, 8),
                status=random.choice(list(Status)),
                created_at=utc_now(),
            )
            try:
                service.create_reservation(reservation)
            except CapacityConflict:
                continue
            created += 1

        print(f"Created {created} reservations between {long_date(open_days[0])} and {long_date(open_days[-1])}.")

    app.cli.add_command(init_db_command)
    app.cli.add_command(seed_command)

    return app
