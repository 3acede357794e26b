from sqlalchemy import Column, Float, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from db import database


class Game(database.Base):
    __tablename__ = "games"

    game_id = Column(Integer, primary_key=True, autoincrement=False)
    scores = relationship("Score", back_populates="game")


class Score(database.Base):
    __tablename__ = "scores"

    id = Column(Integer, primary_key=True)
    game_id = Column(Integer, ForeignKey("games.game_id"), nullable=False)
    player_name = Column(String, nullable=False)
    player_id = Column(String, nullable=False)
    player_score = Column(Float, nullable=False)
    # ISO-8601 UTC, e.g. 2026-10-18T09:15:02.431Z
    created_at = Column(String(32), nullable=False)

    game = relationship("Game", back_populates="scores")

    __table_args__ = (
        Index("ix_scores_game_id_player_score", "game_id", "player_score"),
    )
