# twisty_sim/logic/history.py
from __future__ import annotations

from typing import List, Optional

from twisty_sim.core.move import Move
from twisty_sim.logic.moves import inverse_move, inverse_sequence


class MoveHistory:
    """Historial de movimientos aplicados al estado autoritativo (undo/redo).

    Uso típico desde un reproductor de movimientos:
        - `push(m)` cada vez que se aplica un movimiento nuevo (limpia el redo).
        - `undo()` devuelve el movimiento a aplicar para deshacer.
        - `redo()` devuelve el movimiento a aplicar para rehacer.
    """

    def __init__(self) -> None:
        self.history: List[Move] = []
        self.redo_stack: List[Move] = []

    def __len__(self) -> int:
        return len(self.history)

    def push(self, move: Move) -> None:
        """Registra un movimiento nuevo e invalida el redo."""
        self.history.append(move)
        self.redo_stack.clear()

    def extend(self, moves: List[Move]) -> None:
        for m in moves:
            self.push(m)

    def undo(self) -> Optional[Move]:
        """Saca el último movimiento del historial.

        Returns:
            El inverso del último movimiento (lo que hay que aplicar), o None si no hay historial.
        """
        if not self.history:
            return None
        move = self.history.pop()
        self.redo_stack.append(move)
        return inverse_move(move)

    def redo(self) -> Optional[Move]:
        """Recupera el último movimiento deshecho.

        Returns:
            El movimiento a volver a aplicar, o None si no hay nada para rehacer.
        """
        if not self.redo_stack:
            return None
        move = self.redo_stack.pop()
        self.history.append(move)
        return move

    def clear(self) -> None:
        self.history.clear()
        self.redo_stack.clear()

    def reverse_solution(self) -> List[Move]:
        """Solución por inversión del historial (siempre funciona, no es óptima).

        Returns:
            Los movimientos del historial invertidos y en orden inverso.
        """
        return inverse_sequence(self.history)
