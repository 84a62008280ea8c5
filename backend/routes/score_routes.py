import logging
from datetime import datetime
from typing import Any, Callable, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session

from database import get_db
from dependencies import get_now, get_policy
from services.errors import ScoreError
from services.reset_service import ResetService
from services.score_service import ScoreService
from services.scoreboard_repository import ScoreboardRepository
from services.scoreboard_state import ScoreState
from services.scoring import ScoringPolicy

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/scores", tags=["Scores"])


class PlayerAction(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    player: Any = None  # checked by the service: must be exactly 1 or 2


class IncrementRequest(PlayerAction):
    change: float = 0


class WaterRequest(PlayerAction):
    amount: Optional[float] = None


class WorkoutRequest(PlayerAction):
    hours: Optional[float] = None
    minutes: Optional[float] = None


class RenameRequest(BaseModel):
    newName: Optional[str] = None


class TaskCreate(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    name: Optional[str] = None
    type: Optional[str] = "checkbox"
    maxValue: Optional[float] = None
    pointsPerUnit: Optional[float] = None
    unitsPerClick: Optional[float] = None
    unitLabel: Optional[str] = None


def run_on_scoreboard(db: Session, now: datetime, policy: ScoringPolicy,
                      mutate: Optional[Callable[[ScoreState], Any]] = None) -> dict:
    """Load (or create) the scoreboard, roll the day over if due, apply `mutate`, persist."""
    try:
        state = ScoreboardRepository.load_or_create(db, now, policy)
        was_reset = ResetService.check_and_reset(state, now, policy)
        if mutate is not None:
            try:
                mutate(state)
            except ScoreError:
                # the rejected change never touched the state, but a rollover still counts
                if was_reset:
                    ScoreboardRepository.save(db, state, now, policy)
                raise
        if mutate is not None or was_reset:
            ScoreboardRepository.save(db, state, now, policy)
        return state.to_dict(now)
    except ScoreError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Scoreboard operation failed")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("")
async def get_scores(db: Session = Depends(get_db), now: datetime = Depends(get_now),
                     policy: ScoringPolicy = Depends(get_policy)):
    return run_on_scoreboard(db, now, policy)


# Quick-add routes come before the /task/{index} ones so "water"/"workout" never hit the index parser.

@router.post("/task/water/increment")
async def add_water(body: WaterRequest, db: Session = Depends(get_db), now: datetime = Depends(get_now),
                    policy: ScoringPolicy = Depends(get_policy)):
    return run_on_scoreboard(
        db, now, policy,
        lambda state: ScoreService.add_water(state, body.player, body.amount, policy),
    )


@router.post("/task/workout/increment")
async def add_workout(body: WorkoutRequest, db: Session = Depends(get_db), now: datetime = Depends(get_now),
                      policy: ScoringPolicy = Depends(get_policy)):
    return run_on_scoreboard(
        db, now, policy,
        lambda state: ScoreService.add_workout(state, body.player, body.hours, body.minutes, policy),
    )


@router.post("/task")
async def create_task(body: TaskCreate, db: Session = Depends(get_db), now: datetime = Depends(get_now),
                      policy: ScoringPolicy = Depends(get_policy)):
    return run_on_scoreboard(
        db, now, policy,
        lambda state: ScoreService.add_task(
            state, body.name, body.type, body.maxValue,
            points_per_unit=body.pointsPerUnit,
            units_per_click=body.unitsPerClick,
            unit_label=body.unitLabel,
        ),
    )


@router.post("/task/{index}/toggle")
async def toggle_task(index: int, body: PlayerAction, db: Session = Depends(get_db),
                      now: datetime = Depends(get_now), policy: ScoringPolicy = Depends(get_policy)):
    return run_on_scoreboard(
        db, now, policy,
        lambda state: ScoreService.toggle_checkbox(state, index, body.player, policy),
    )


@router.post("/task/{index}/increment")
async def increment_task(index: int, body: IncrementRequest, db: Session = Depends(get_db),
                         now: datetime = Depends(get_now), policy: ScoringPolicy = Depends(get_policy)):
    return run_on_scoreboard(
        db, now, policy,
        lambda state: ScoreService.increment_task(state, index, body.player, body.change, policy),
    )


@router.put("/task/{index}/rename")
async def rename_task(index: int, body: RenameRequest, db: Session = Depends(get_db),
                      now: datetime = Depends(get_now), policy: ScoringPolicy = Depends(get_policy)):
    return run_on_scoreboard(
        db, now, policy,
        lambda state: ScoreService.rename_task(state, index, body.newName),
    )


@router.delete("/task/{index}")
async def delete_task(index: int, db: Session = Depends(get_db), now: datetime = Depends(get_now),
                      policy: ScoringPolicy = Depends(get_policy)):
    return run_on_scoreboard(
        db, now, policy,
        lambda state: ScoreService.delete_task(state, index, policy),
    )
