"""Wipe the scoreboard from the command line: python reset_db.py"""

import logging

from database import SessionLocal, init_db
from services.scoreboard_repository import ScoreboardRepository

logger = logging.getLogger("reset_db")


def main():
    init_db()
    db = SessionLocal()
    try:
        state = ScoreboardRepository.wipe(db)
        logger.info(f"Scoreboard reset complete: {len(state.tasks)} default task(s), next reset {state.next_reset.isoformat()}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
