# twisty_sim/solve/heuristic.py
from __future__ import annotations

from typing import Callable

from twisty_sim.core.puzzle_state import PuzzleState

Heuristic = Callable[[PuzzleState], int]


def misplaced_heuristic(state: PuzzleState) -> int:
    """Estimación de movimientos restantes.

    Cuenta las piezas fuera de lugar y, para las que están en su lugar, las
    entradas de orientación que no coinciden; suma, divide por 4 y redondea hacia
    arriba. No está demostrado que sea admisible: un giro mueve varias piezas a
    la vez pero la cota exacta no está derivada.
    """
    total = 0
    for p in state.pieces:
        if p.cell != p.id:
            total += 1
            continue
        if p.faces != p.home_faces:
            total += sum(1 for a, b in zip(p.faces, p.home_faces) if a != b)
    return -(-total // 4)
