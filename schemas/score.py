import math
from typing import Annotated

from pydantic import BaseModel, Field, StrictStr, field_validator

from config import settings


class ScoreSubmission(BaseModel):
    game_id: Annotated[int, Field(strict=True)]
    player_name: StrictStr
    player_id: StrictStr
    player_score: Annotated[float, Field(strict=True, ge=0, le=settings.MAX_PLAYER_SCORE)]
    session_token: StrictStr
    turnstile_token: StrictStr

    @field_validator("game_id", mode="before")
    @classmethod
    def integral_game_id(cls, v):
        # JSON numbers: 42 and 42.0 are the same game, 42.5 and true are not
        if isinstance(v, bool):
            raise ValueError("game_id must be a number")
        if isinstance(v, float):
            if not v.is_integer():
                raise ValueError("game_id must be an integer")
            return int(v)
        return v

    @field_validator("player_name", "player_id")
    @classmethod
    def not_blank(cls, v: str) -> str:
        # Only checked here; player_id is signed untrimmed and trimmed on insert
        if not v.strip():
            raise ValueError("must not be empty or whitespace")
        return v

    @field_validator("player_score")
    @classmethod
    def finite_score(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("player_score must be a finite number")
        return v


class ScoreAccepted(BaseModel):
    ok: bool = True


class LeaderboardEntry(BaseModel):
    player_name: str
    player_score: float
    created_at: str


class SessionToken(BaseModel):
    token: str
