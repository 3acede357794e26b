import time
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from config import Settings, get_settings
from db import database
from repository.scores_repo import ScoreStore, SqlScoreStore
from utils.turnstile import HumanVerifier, TurnstileVerifier


def get_db():
    db = database.SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_score_store(db: Annotated[Session, Depends(get_db)]) -> ScoreStore:
    return SqlScoreStore(db)


def get_human_verifier(
    settings: Annotated[Settings, Depends(get_settings)]
) -> HumanVerifier:
    return TurnstileVerifier(
        secret=settings.TURNSTILE_SECRET.get_secret_value(),
        verify_url=settings.TURNSTILE_VERIFY_URL,
        timeout=settings.TURNSTILE_TIMEOUT_SECONDS,
    )


def get_now_ms() -> int:
    """Wall clock in epoch milliseconds."""
    return int(time.time() * 1000)


def get_client_ip(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)]
) -> str:
    ip = request.headers.get(settings.CLIENT_IP_HEADER)
    if ip:
        return ip.strip()
    if request.client:
        return request.client.host
    return ""
