# Import all models so they register with SQLAlchemy Base.metadata
# This ensures Base.metadata.create_all() creates all tables

from models.scoreboard import Scoreboard

__all__ = [
    "Scoreboard",
]
