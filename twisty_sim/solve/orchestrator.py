# twisty_sim/solve/orchestrator.py
from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

from twisty_sim.core.errors import ConfigurationError, SolverBusyError
from twisty_sim.core.puzzle_state import PuzzleState
from twisty_sim.logic.history import MoveHistory
from twisty_sim.solve.bfs_solver import bfs_search
from twisty_sim.solve.config import (
    FALLBACK_POLICY,
    PolicyKey,
    SolverPolicy,
    load_policies,
    policy_for,
)
from twisty_sim.solve.ida_solver import ida_star_search
from twisty_sim.solve.result import Cancelled, SearchOutcome, SearchStats, Solved
from twisty_sim.solve.search import ProgressFn, SearchGenerator, make_neighbor_fn

logger = logging.getLogger(__name__)


class SolveTask:
    """Búsqueda en curso que el host avanza paso a paso.

    Cada `step()` corre la búsqueda hasta su próximo punto de suspensión
    (como máximo `yield_every` expansiones) y devuelve el control.
    """

    def __init__(
        self,
        orchestrator: Optional["SolverOrchestrator"],
        policy: SolverPolicy,
        search: Optional[SearchGenerator] = None,
        result: Optional[SearchOutcome] = None,
    ) -> None:
        self._orchestrator = orchestrator
        self.policy = policy
        self._search = search
        self._cancel_requested = False
        self._stepping = False
        self._stats = SearchStats(algorithm=policy.algorithm)
        self.result: Optional[SearchOutcome] = result

    @property
    def done(self) -> bool:
        return self.result is not None

    @property
    def stats(self) -> SearchStats:
        return self.result.stats if self.result is not None else self._stats

    def cancel(self) -> None:
        """Pide detener la búsqueda en el próximo `step()`."""
        self._cancel_requested = True

    def step(self) -> bool:
        """Avanza hasta el próximo punto de suspensión.

        Returns:
            True si la búsqueda sigue en curso; False si terminó (ver `result`).
        """
        if self.result is not None:
            return False

        self._stepping = True
        try:
            if self._cancel_requested:
                if self._search is not None:
                    self._search.close()
                logger.info("Búsqueda cancelada")
                self.result = Cancelled(stats=self._stats)
                return False

            try:
                progress = next(self._search)  # type: ignore[arg-type]
            except StopIteration as stop:
                self.result = stop.value
                return False

            self._stats = progress.stats
            return True
        except Exception:
            # Una búsqueda rota no debe dejar al orquestador ocupado
            self._finish()
            raise
        finally:
            self._stepping = False
            if self.result is not None:
                self._finish()

    def run(self) -> SearchOutcome:
        """Avanza hasta terminar y devuelve el resultado."""
        while self.step():
            pass
        assert self.result is not None
        return self.result

    def _finish(self) -> None:
        if self._orchestrator is not None:
            self._orchestrator._release(self)
            self._orchestrator = None


class SolverOrchestrator:
    """Elige algoritmo y presupuestos por (orden, variante) y corre una búsqueda a la vez.

    El estado recibido nunca se modifica: se clona antes de buscar. Quien llama
    es responsable de aplicar (o animar) los movimientos devueltos.
    """

    def __init__(
        self,
        policies: Optional[Mapping[PolicyKey, SolverPolicy]] = None,
        fallback: SolverPolicy = FALLBACK_POLICY,
    ) -> None:
        """
        Args:
            policies: Tabla (orden, variante) -> política. None usa la de fábrica.
            fallback: Política para combinaciones que no están en la tabla.
        """
        self.policies: Optional[Dict[PolicyKey, SolverPolicy]] = (
            dict(policies) if policies is not None else None
        )
        self.fallback = fallback
        self._active: Optional[SolveTask] = None

    @classmethod
    def from_config(cls, path: Union[str, Path]) -> "SolverOrchestrator":
        """Crea un orquestador con las políticas de un archivo JSON."""
        table, fallback = load_policies(path)
        return cls(table, fallback)

    @property
    def busy(self) -> bool:
        return self._active is not None

    def policy_for(self, order: int, variant: str) -> SolverPolicy:
        return policy_for(order, variant, self.policies, self.fallback)

    def start(
        self,
        state: PuzzleState,
        on_progress: Optional[ProgressFn] = None,
        history: Optional[MoveHistory] = None,
        algorithm: Optional[str] = None,
    ) -> SolveTask:
        """Prepara una búsqueda sobre un clon de `state`.

        Args:
            state: Estado autoritativo (no se modifica).
            on_progress: Callback opcional con textos de progreso.
            history: Movimientos que llevaron del resuelto a `state`. Solo lo usa
                el modo "reverse".
            algorithm: Reemplaza el algoritmo de la política ("bfs", "ida" o "reverse").

        Returns:
            Tarea a avanzar con `step()`. Si el estado ya está resuelto, o el modo
            es "reverse", la tarea ya viene terminada.

        Raises:
            SolverBusyError: Si ya hay una búsqueda en curso.
            ConfigurationError: Si el algoritmo no existe, o si "reverse" no tiene
                historial o el historial no resuelve `state`.
        """
        if self._active is not None:
            raise SolverBusyError("Ya hay una búsqueda en curso.")

        policy = self.policy_for(state.order, state.variant)
        if algorithm is not None and algorithm != policy.algorithm:
            policy = replace(policy, algorithm=algorithm)
        start = state.clone()

        if start.is_solved():
            logger.info("El puzzle ya está resuelto")
            solved = Solved(moves=[], stats=SearchStats(algorithm=policy.algorithm))
            return SolveTask(None, policy, result=solved)

        if policy.algorithm == "reverse":
            return SolveTask(None, policy, result=self._reverse(start, history))

        neighbor_fn = make_neighbor_fn(start.order, policy.include_center_slice)
        if not policy.include_center_slice and start.order % 2 == 1 and start.order >= 3:
            logger.debug(
                f"Orden {start.order}: la capa central no se usa en la búsqueda; "
                "mezclas que la usen pueden no tener solución"
            )

        search: SearchGenerator
        if policy.algorithm == "bfs":
            search = bfs_search(
                start,
                neighbor_fn=neighbor_fn,
                max_depth=policy.max_depth,
                max_nodes=policy.max_nodes,
                timeout=policy.timeout,
                on_progress=on_progress,
                yield_every=policy.yield_every,
            )
        else:
            search = ida_star_search(
                start,
                neighbor_fn=neighbor_fn,
                max_depth=policy.max_depth,
                threshold_max=policy.threshold_max,
                node_budget=policy.node_budget,
                time_budget=policy.time_budget,
                on_progress=on_progress,
                yield_every=policy.yield_every,
            )

        logger.info(f"Resolviendo orden {start.order} ({start.variant}) con {policy.algorithm}")
        task = SolveTask(self, policy, search=search)
        self._active = task
        return task

    def _reverse(self, start: PuzzleState, history: Optional[MoveHistory]) -> Solved:
        if history is None:
            raise ConfigurationError("El modo 'reverse' necesita el historial de la mezcla")
        moves = history.reverse_solution()
        check = start.clone()
        check.apply_sequence(moves)
        if not check.is_solved():
            raise ConfigurationError("El historial no corresponde al estado a resolver")
        logger.info(f"Solución por inversión del historial: {len(moves)} movimientos")
        stats = SearchStats(algorithm="reverse", max_depth=len(moves))
        return Solved(moves=moves, stats=stats)

    def solve(
        self,
        state: PuzzleState,
        on_progress: Optional[ProgressFn] = None,
        history: Optional[MoveHistory] = None,
        algorithm: Optional[str] = None,
    ) -> SearchOutcome:
        """Corre una búsqueda completa sin ceder el control."""
        return self.start(state, on_progress, history, algorithm).run()

    def cancel(self) -> bool:
        """Detiene la búsqueda en curso.

        Entre dos `step()` la búsqueda siempre está parada en un punto de
        suspensión, así que se cierra en el acto y el orquestador queda libre.

        Returns:
            True si había una búsqueda en curso.
        """
        task = self._active
        if task is None:
            return False
        task.cancel()
        if not task._stepping:
            task.step()
        return True

    def _release(self, task: SolveTask) -> None:
        if self._active is task:
            self._active = None
