# twisty_sim/solve/search.py
from __future__ import annotations

import logging
from time import perf_counter
from typing import Callable, Generator, Iterator, Optional, Tuple

from twisty_sim.core.move import Move
from twisty_sim.core.puzzle_state import PuzzleState
from twisty_sim.logic.moves import filter_moves, generate_legal_moves
from twisty_sim.solve.result import SearchOutcome, SearchProgress, SearchStats

logger = logging.getLogger(__name__)

# Expansiones entre dos puntos de suspensión cooperativa
DEFAULT_YIELD_EVERY = 500

GoalFn = Callable[[PuzzleState], bool]
NeighborFn = Callable[[PuzzleState, Optional[Move]], Iterator[Tuple[Move, PuzzleState]]]
ProgressFn = Callable[[str], None]
SearchGenerator = Generator[SearchProgress, None, SearchOutcome]


def is_solved_goal(state: PuzzleState) -> bool:
    return state.is_solved()


def make_neighbor_fn(order: int, include_center: bool = False) -> NeighborFn:
    """Construye la función de vecinos por defecto: generar, podar inversos, clonar y aplicar.

    Args:
        order: Orden del puzzle.
        include_center: Pasa a `generate_legal_moves`.

    Returns:
        Función `(state, last_move) -> iterador de (move, child)`; cada hijo es un clon propio.
    """
    legal = generate_legal_moves(order, include_center)

    def neighbors(state: PuzzleState, last_move: Optional[Move]) -> Iterator[Tuple[Move, PuzzleState]]:
        for move in filter_moves(legal, last_move):
            child = state.clone()
            child.apply_move(move)
            yield move, child

    return neighbors


class Ticker:
    """Cuenta expansiones y decide cuándo ceder el control al host."""

    def __init__(self, stats: SearchStats, yield_every: int, on_progress: Optional[ProgressFn]) -> None:
        self.stats = stats
        self.yield_every = max(1, yield_every)
        self.on_progress = on_progress
        self.started = perf_counter()

    def elapsed(self) -> float:
        return perf_counter() - self.started

    def expand(self) -> bool:
        """Registra una expansión. Devuelve True si toca suspender."""
        self.stats.nodes_expanded += 1
        return self.stats.nodes_expanded % self.yield_every == 0

    def progress(self) -> SearchProgress:
        """Actualiza el tiempo, avisa al callback y arma el valor a ceder."""
        self.stats.elapsed = self.elapsed()
        message = self.stats.status_line()
        logger.debug(message)
        if self.on_progress is not None:
            self.on_progress(message)
        return SearchProgress(stats=self.stats, message=message)

    def finish(self, outcome: SearchOutcome) -> SearchOutcome:
        self.stats.elapsed = self.elapsed()
        outcome.stats = self.stats
        return outcome


def run_to_completion(search: SearchGenerator) -> SearchOutcome:
    """Ejecuta una búsqueda cooperativa hasta el final sin devolver el control a nadie."""
    while True:
        try:
            next(search)
        except StopIteration as stop:
            return stop.value
