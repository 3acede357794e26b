import logging
from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from config import Settings, get_settings
from dependencies import get_client_ip, get_human_verifier, get_now_ms, get_score_store
from repository.scores_repo import ScoreStore
from schemas.score import ScoreAccepted, ScoreSubmission
from utils.session_tokens import verify_token
from utils.turnstile import HumanVerifier

logger = logging.getLogger(__name__)

router = APIRouter(tags=["scores"])


def iso_timestamp(now_ms: int) -> str:
    """Epoch milliseconds as ISO-8601 UTC with a Z suffix."""
    dt = datetime.fromtimestamp(now_ms / 1000, tz=timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@router.post("/score", response_model=ScoreAccepted)
def submit_score(
    submission: ScoreSubmission,
    store: Annotated[ScoreStore, Depends(get_score_store)],
    verifier: Annotated[HumanVerifier, Depends(get_human_verifier)],
    settings: Annotated[Settings, Depends(get_settings)],
    now_ms: Annotated[int, Depends(get_now_ms)],
    client_ip: Annotated[str, Depends(get_client_ip)],
):
    """
    Records a score once every check has passed.

    Order matters and the first failure wins:
    body validation (400), session token (401), Turnstile (401),
    game existence (404). Nothing is written before the insert.
    """
    # 1. Session token, current or previous window
    session_valid = verify_token(
        settings.SESSION_HMAC_SECRET.get_secret_value(),
        submission.game_id,
        submission.player_id,
        now_ms,
        submission.session_token,
        settings.SESSION_WINDOW_SECONDS,
    )
    if not session_valid:
        logger.warning(
            f"Rejected session token for game {submission.game_id}, player {submission.player_id!r}"
        )
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid session token")

    # 2. Turnstile proves a real browser submitted this
    if not verifier.check(submission.turnstile_token, client_ip):
        logger.warning(
            f"Human verification failed for game {submission.game_id}, player {submission.player_id!r}"
        )
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Human verification failed")

    # 3. Game must exist
    if not store.game_exists(submission.game_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Game not found")

    player_name = submission.player_name.strip()
    player_id = submission.player_id.strip()
    store.insert_score(
        game_id=submission.game_id,
        player_name=player_name,
        player_id=player_id,
        player_score=submission.player_score,
        created_at=iso_timestamp(now_ms),
    )
    logger.info(f"Score {submission.player_score} saved for game {submission.game_id}, player {player_id!r}")
    return {"ok": True}
