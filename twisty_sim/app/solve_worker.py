# twisty_sim/app/solve_worker.py
from __future__ import annotations

import logging
import traceback
from typing import Optional

from PySide6.QtCore import QObject, QTimer, Signal

from twisty_sim.core.puzzle_state import PuzzleState
from twisty_sim.logic.history import MoveHistory
from twisty_sim.solve.orchestrator import SolverOrchestrator, SolveTask

logger = logging.getLogger(__name__)


class SolveWorker(QObject):
    """Avanza una búsqueda del solver desde el loop de eventos de Qt sin bloquearlo.

    En vez de un hilo aparte, usa un `QTimer` de intervalo 0: en cada vuelta del
    loop se llama una vez a `SolveTask.step()`, que como máximo expande
    `yield_every` nodos antes de devolver el control.

    Signals:
        progress(str): Texto de estado (profundidad/umbral, nodos, tiempo).
        finished_solution(object): Lista de `Move` (vacía si ya estaba resuelto).
        failed(object): Resultado de fallo (`ResourceExhausted`, `NotFound` o `Cancelled`).
        error(str): Traceback si algo falla de forma inesperada.
    """

    progress = Signal(str)
    finished_solution = Signal(object)  # list[Move]
    failed = Signal(object)             # SearchOutcome
    error = Signal(str)                 # traceback si algo falla

    def __init__(self, orchestrator: Optional[SolverOrchestrator] = None, parent: Optional[QObject] = None) -> None:
        """Crea el worker.

        Args:
            orchestrator: Orquestador a usar; por defecto uno con las políticas de fábrica.
            parent: Padre Qt opcional.
        """
        super().__init__(parent)
        self.orchestrator: SolverOrchestrator = orchestrator or SolverOrchestrator()
        self._task: Optional[SolveTask] = None
        self._timer = QTimer(self)
        self._timer.setInterval(0)
        self._timer.timeout.connect(self._tick)

    @property
    def running(self) -> bool:
        return self._task is not None

    def start(
        self,
        state: PuzzleState,
        history: Optional[MoveHistory] = None,
        algorithm: Optional[str] = None,
    ) -> None:
        """Empieza a resolver un clon de `state`.

        Args:
            state: Estado autoritativo; no se modifica.
            history: Historial de la mezcla (necesario para el modo "reverse").
            algorithm: Fuerza "bfs", "ida" o "reverse" en vez de la política.

        Raises:
            SolverBusyError: Si ya hay una búsqueda en curso.
        """
        self._task = self.orchestrator.start(
            state, on_progress=self.progress.emit, history=history, algorithm=algorithm
        )
        self._timer.start()

    def cancel(self) -> None:
        """Detiene la búsqueda en curso y libera el orquestador.

        Fuera de un `step()` la búsqueda se cierra en el acto y `failed` se emite
        con `Cancelled` antes de volver, así que se puede llamar a `start()` justo
        después. Si se llama desde un slot de `progress`, el cierre ocurre en la
        próxima vuelta del loop.
        """
        task = self._task
        if task is None or task.done:
            return
        self.orchestrator.cancel()
        if task.done:
            self._timer.stop()
            self._task = None
            self.failed.emit(task.result)

    def _tick(self) -> None:
        task = self._task
        if task is None:
            self._timer.stop()
            return

        try:
            if task.step():
                return
        except Exception:
            self._timer.stop()
            self._task = None
            msg = traceback.format_exc()
            logger.error(msg)
            self.error.emit(msg)
            return

        self._timer.stop()
        self._task = None
        result = task.result
        if result is not None and result.ok:
            self.finished_solution.emit(list(result.moves))  # type: ignore[attr-defined]
        else:
            self.failed.emit(result)
