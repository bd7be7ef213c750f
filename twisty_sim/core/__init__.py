# twisty_sim/core/__init__.py
from twisty_sim.core.errors import ConfigurationError, SolverBusyError, TwistyError
from twisty_sim.core.move import AXES, Move
from twisty_sim.core.puzzle_state import MAX_ORDER, Piece, PieceSnapshot, PuzzleState

__all__ = [
    "AXES",
    "ConfigurationError",
    "MAX_ORDER",
    "Move",
    "Piece",
    "PieceSnapshot",
    "PuzzleState",
    "SolverBusyError",
    "TwistyError",
]
