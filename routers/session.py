from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from config import Settings, get_settings
from dependencies import get_now_ms
from schemas.score import SessionToken
from utils.session_tokens import issue_token

router = APIRouter(tags=["session"])


@router.get("/session", response_model=SessionToken)
def start_session(
    settings: Annotated[Settings, Depends(get_settings)],
    now_ms: Annotated[int, Depends(get_now_ms)],
    game_id: Optional[str] = None,
    player_id: Optional[str] = None,
):
    """
    Issues a short-lived token proving this session was legitimately started.
    Nothing is stored; POST /score recomputes it.
    """
    if not game_id or not player_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="game_id and player_id are required",
        )
    token = issue_token(
        settings.SESSION_HMAC_SECRET.get_secret_value(),
        game_id,
        player_id,
        now_ms,
        settings.SESSION_WINDOW_SECONDS,
    )
    return {"token": token}
