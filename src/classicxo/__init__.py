"""ClassicXO package exposing the board, the game engine, the AI and the web application."""

from .ai import MinimaxAI
from .engine import (
    ChoiceResult,
    GameEngine,
    GameState,
    MoveResult,
    Outcome,
    Rejection,
    Scores,
)
from .game import Board, CellOccupied, Mark
from .ui import app

__all__ = [
    "Board",
    "CellOccupied",
    "ChoiceResult",
    "GameEngine",
    "GameState",
    "Mark",
    "MinimaxAI",
    "MoveResult",
    "Outcome",
    "Rejection",
    "Scores",
    "app",
]
