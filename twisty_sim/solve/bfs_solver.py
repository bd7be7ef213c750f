# twisty_sim/solve/bfs_solver.py
from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Optional, Set, Tuple

from twisty_sim.core.move import Move
from twisty_sim.core.puzzle_state import PuzzleState
from twisty_sim.solve.result import NotFound, ResourceExhausted, SearchStats, Solved
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

# (estado, camino, último movimiento)
Node = Tuple[PuzzleState, Tuple[Move, ...], Optional[Move]]


def bfs_search(
    state: PuzzleState,
    is_goal: GoalFn = is_solved_goal,
    neighbor_fn: Optional[NeighborFn] = None,
    max_depth: int = 8,
    max_nodes: int = 100_000,
    timeout: float = 10.0,
    on_progress: Optional[ProgressFn] = None,
    yield_every: int = DEFAULT_YIELD_EVERY,
) -> SearchGenerator:
    """Busca una solución por anchura (BFS) con conjunto global de visitados.

    La frontera es FIFO y los estados se deduplican con `encode()`, así que la
    primera meta encontrada es la más corta sujeta a la poda de inversos. Es un
    generador: cada `yield_every` expansiones llama a `on_progress` y cede un
    `SearchProgress`; el resultado final es el valor de retorno.

    Args:
        state: Estado inicial (no se modifica; se trabaja sobre clones).
        is_goal: Predicado de meta.
        neighbor_fn: Vecinos `(state, last_move) -> (move, child)`; por defecto
            `make_neighbor_fn(state.order)`.
        max_depth: Longitud máxima de solución.
        max_nodes: Máximo de expansiones.
        timeout: Segundos de reloj permitidos.
        on_progress: Callback opcional con un texto de estado.
        yield_every: Expansiones entre suspensiones.

    Returns:
        `Solved`, `ResourceExhausted("nodes" | "time" | "depth")` o `NotFound`.
    """
    if neighbor_fn is None:
        neighbor_fn = make_neighbor_fn(state.order)

    stats = SearchStats(algorithm="bfs")
    ticker = Ticker(stats, yield_every, on_progress)

    root = state.clone()
    if is_goal(root):
        return ticker.finish(Solved(moves=[]))

    visited: Set[str] = {root.encode()}
    frontier: Deque[Node] = deque([(root, (), None)])
    cut_by_depth = False

    logger.info(f"BFS: inicio (max_depth={max_depth}, max_nodes={max_nodes}, timeout={timeout}s)")

    while frontier:
        node, path, last = frontier.popleft()

        if len(path) >= max_depth:
            cut_by_depth = True
            continue
        if stats.nodes_expanded >= max_nodes:
            logger.info(f"BFS: sin presupuesto de nodos ({stats.nodes_expanded})")
            return ticker.finish(ResourceExhausted(budget="nodes"))
        if ticker.elapsed() >= timeout:
            logger.info(f"BFS: sin tiempo ({timeout}s)")
            return ticker.finish(ResourceExhausted(budget="time"))

        suspend = ticker.expand()

        for move, child in neighbor_fn(node, last):
            key = child.encode()
            if key in visited:
                continue
            visited.add(key)

            child_path = path + (move,)
            stats.max_depth = max(stats.max_depth, len(child_path))

            if is_goal(child):
                logger.info(f"BFS: solución de {len(child_path)} movimientos")
                return ticker.finish(Solved(moves=list(child_path)))

            frontier.append((child, child_path, move))

        if suspend:
            yield ticker.progress()

    if cut_by_depth:
        logger.info(f"BFS: límite de profundidad {max_depth} alcanzado sin solución")
        return ticker.finish(ResourceExhausted(budget="depth"))
    return ticker.finish(NotFound(reason="exhausted"))
