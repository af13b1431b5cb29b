# Cleanup Tracker — Database Models
# Import all models here for SQLAlchemy discovery

from cleanup_tracker.models.user import User                         # noqa
from cleanup_tracker.models.job import Job, TechnicianSession        # noqa
