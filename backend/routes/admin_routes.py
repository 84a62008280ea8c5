import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database import get_db
from dependencies import get_now, get_policy
from services.scoreboard_repository import ScoreboardRepository
from services.scoring import ScoringPolicy

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Admin"])


@router.post("/reset-database")
async def reset_database(db: Session = Depends(get_db), now: datetime = Depends(get_now),
                         policy: ScoringPolicy = Depends(get_policy)):
    """Wipe the scoreboard (scores, custom tasks, history) and start from the defaults."""
    try:
        state = ScoreboardRepository.wipe(db, now, policy)
        logger.warning("Scoreboard reset through the admin endpoint")
        return state.to_dict(now)
    except Exception:
        logger.exception("Database reset failed")
        raise HTTPException(status_code=500, detail="Internal server error")
