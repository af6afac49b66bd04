from loguru import logger
from app.core.db import engine, Base

# Import all models so SQLAlchemy registers them
from app.models.user import User
from app.models.school import SchoolClass, StudentProfile
from app.models.presence import Presence
from app.models.location_log import LocationLog
from app.models.notification import Notification
from app.models.push_token import PushSubscription

def init_db(bind=None):
    logger.info("Creating database tables")
    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database tables created")
