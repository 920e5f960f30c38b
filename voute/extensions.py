from flask import current_app
from flask_mail import Mail
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
migrate = Migrate()
mail = Mail()

SERVICE_KEY = "voute.reservations"


def reservation_service():
    """Returns the ReservationService bound to the current app."""
    return current_app.extensions[SERVICE_KEY]
