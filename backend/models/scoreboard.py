from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, DateTime
from database import Base


class Scoreboard(Base):
    __tablename__ = "scoreboards"

    id = Column(Integer, primary_key=True, autoincrement=True)
    player1 = Column(String(50), nullable=False)
    player2 = Column(String(50), nullable=False)
    player1_score = Column(Integer, default=0, nullable=False)
    player2_score = Column(Integer, default=0, nullable=False)
    daily_tasks = Column(Text, nullable=False, default="[]")  # JSON array of task objects
    daily_history = Column(Text, nullable=False, default="[]")  # JSON array, most recent first
    last_reset = Column(DateTime(timezone=True), nullable=False)
    next_reset = Column(DateTime(timezone=True), nullable=False)
    last_updated = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    version = Column(Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version}
