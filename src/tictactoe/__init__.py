"""Tic-tac-toe package exposing the game engine and the web application."""

from .game import (
    GameEngine,
    InProgress,
    InvalidPosition,
    MoveRejected,
    RejectReason,
    Snapshot,
    Tied,
    Won,
)
from .ui import app

__all__ = [
    "GameEngine",
    "InProgress",
    "InvalidPosition",
    "MoveRejected",
    "RejectReason",
    "Snapshot",
    "Tied",
    "Won",
    "app",
]
