from typing import Annotated

from fastapi import APIRouter, Depends, Query

from config import Settings, get_settings
from dependencies import get_score_store
from repository.scores_repo import ScoreStore
from schemas.score import LeaderboardEntry

router = APIRouter(tags=["leaderboard"])


@router.get("/leaderboard", response_model=list[LeaderboardEntry])
def get_leaderboard(
    game: Annotated[int, Query(description="Game identifier")],
    store: Annotated[ScoreStore, Depends(get_score_store)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    """Top scores for a game, best first"""
    return store.top_scores(game, settings.LEADERBOARD_LIMIT)
