from typing import Protocol

from sqlalchemy.orm import Session

from db.models import Game, Score


class ScoreStore(Protocol):
    def top_scores(self, game_id: int, limit: int) -> list[dict]: ...

    def game_exists(self, game_id: int) -> bool: ...

    def insert_score(
        self,
        game_id: int,
        player_name: str,
        player_id: str,
        player_score: float,
        created_at: str,
    ) -> None: ...


class SqlScoreStore:
    """ScoreStore backed by a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def top_scores(self, game_id: int, limit: int) -> list[dict]:
        # Best first; ties go to whoever got there earlier
        rows = (
            self.db.query(Score.player_name, Score.player_score, Score.created_at)
            .filter(Score.game_id == game_id)
            .order_by(Score.player_score.desc(), Score.created_at.asc())
            .limit(limit)
            .all()
        )
        return [
            {
                "player_name": r[0],
                "player_score": r[1],
                "created_at": r[2],
            }
            for r in rows
        ]

    def game_exists(self, game_id: int) -> bool:
        return (
            self.db.query(Game.game_id).filter(Game.game_id == game_id).first()
            is not None
        )

    def insert_score(
        self,
        game_id: int,
        player_name: str,
        player_id: str,
        player_score: float,
        created_at: str,
    ) -> None:
        row = Score(
            game_id=game_id,
            player_name=player_name,
            player_id=player_id,
            player_score=player_score,
            created_at=created_at,
        )
        self.db.add(row)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
