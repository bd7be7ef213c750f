# twisty_sim/solve/ida_solver.py
from __future__ import annotations

import logging
from typing import Dict, Generator, List, Optional

from twisty_sim.core.move import Move
from twisty_sim.core.puzzle_state import PuzzleState
from twisty_sim.solve.heuristic import Heuristic, misplaced_heuristic
from twisty_sim.solve.result import (
    Budget,
    NotFound,
    ResourceExhausted,
    SearchProgress,
    SearchStats,
    Solved,
)
from twisty_sim.solve.search import (
    DEFAULT_YIELD_EVERY,
    GoalFn,
    NeighborFn,
    ProgressFn,
    SearchGenerator,
    Ticker,
    is_solved_goal,
    make_neighbor_fn,
)

logger = logging.getLogger(__name__)


class _Pass:
    """Estado de una iteración externa de IDA* (un umbral)."""

    def __init__(self, threshold: int, ticker: Ticker) -> None:
        self.threshold = threshold
        self.nodes = 0
        self.started = ticker.elapsed()
        self.next_threshold: Optional[int] = None
        self.depth_cut = False
        self.exhausted: Optional[Budget] = None
        # Tabla de transposición: encode -> menor g con el que se visitó en esta iteración
        self.seen: Dict[str, int] = {}

    def prune(self, f: int) -> None:
        if self.next_threshold is None or f < self.next_threshold:
            self.next_threshold = f


def ida_star_search(
    state: PuzzleState,
    is_goal: GoalFn = is_solved_goal,
    neighbor_fn: Optional[NeighborFn] = None,
    max_depth: int = 12,
    threshold_max: int = 12,
    node_budget: int = 200_000,
    time_budget: float = 10.0,
    on_progress: Optional[ProgressFn] = None,
    heuristic: Heuristic = misplaced_heuristic,
    yield_every: int = DEFAULT_YIELD_EVERY,
) -> SearchGenerator:
    """Busca una solución con IDA* (profundización iterativa sobre f = g + h).

    Cada iteración hace un DFS acotado por el umbral actual. La tabla de
    transposición se vacía entre iteraciones, porque un estado puede volver a
    aparecer con otro umbral. Las ramas podadas aportan su f y el mínimo de esos
    valores es el umbral siguiente.

    Args:
        state: Estado inicial (no se modifica; se trabaja sobre clones).
        is_goal: Predicado de meta.
        neighbor_fn: Vecinos `(state, last_move) -> (move, child)`.
        max_depth: Profundidad máxima de cualquier rama (g).
        threshold_max: Umbral f máximo que se llega a probar.
        node_budget: Expansiones permitidas por iteración.
        time_budget: Segundos permitidos por iteración.
        on_progress: Callback opcional con un texto de estado.
        heuristic: Estimación h(state); no se asume admisible.
        yield_every: Expansiones entre suspensiones.

    Returns:
        `Solved`; `ResourceExhausted("nodes" | "time" | "depth")`; o `NotFound`
        con `reason` "threshold" (superaría `threshold_max`), "stalled" (el
        umbral no crece) o "exhausted" (nada se podó ni se cortó).
    """
    if neighbor_fn is None:
        neighbor_fn = make_neighbor_fn(state.order)

    stats = SearchStats(algorithm="ida")
    ticker = Ticker(stats, yield_every, on_progress)

    root = state.clone()
    if is_goal(root):
        return ticker.finish(Solved(moves=[]))

    threshold = heuristic(root)

    def dfs(
        run: _Pass, node: PuzzleState, g: int, path: List[Move], last: Optional[Move]
    ) -> Generator[SearchProgress, None, Optional[List[Move]]]:
        stats.max_depth = max(stats.max_depth, g)

        if is_goal(node):
            return list(path)

        f = g + heuristic(node)
        if f > run.threshold:
            run.prune(f)
            return None

        if g >= max_depth:
            run.depth_cut = True
            return None
        if run.nodes >= node_budget:
            run.exhausted = "nodes"
            return None
        if ticker.elapsed() - run.started >= time_budget:
            run.exhausted = "time"
            return None

        run.nodes += 1
        if ticker.expand():
            yield ticker.progress()

        for move, child in neighbor_fn(node, last):
            key = child.encode()
            best = run.seen.get(key)
            if best is not None and best <= g + 1:
                continue
            run.seen[key] = g + 1

            path.append(move)
            found = yield from dfs(run, child, g + 1, path, move)
            path.pop()

            if found is not None:
                return found
            if run.exhausted is not None:
                return None

        return None

    while True:
        if threshold > threshold_max:
            logger.info(f"IDA*: el umbral {threshold} supera threshold_max={threshold_max}")
            return ticker.finish(NotFound(reason="threshold"))

        stats.iterations += 1
        stats.threshold = threshold
        logger.debug(f"IDA*: iteración {stats.iterations}, umbral {threshold}")

        run = _Pass(threshold, ticker)
        run.seen[root.encode()] = 0
        found = yield from dfs(run, root, 0, [], None)

        if found is not None:
            logger.info(f"IDA*: solución de {len(found)} movimientos (umbral {threshold})")
            return ticker.finish(Solved(moves=found))

        if run.exhausted is not None:
            logger.info(f"IDA*: presupuesto '{run.exhausted}' agotado en umbral {threshold}")
            return ticker.finish(ResourceExhausted(budget=run.exhausted))

        if run.next_threshold is None:
            if run.depth_cut:
                return ticker.finish(ResourceExhausted(budget="depth"))
            return ticker.finish(NotFound(reason="exhausted"))

        # Guarda: prune() solo registra f > umbral, así que hoy no se alcanza
        if run.next_threshold <= threshold:
            logger.warning(f"IDA*: el umbral no crece ({threshold} -> {run.next_threshold})")
            return ticker.finish(NotFound(reason="stalled"))

        threshold = run.next_threshold
