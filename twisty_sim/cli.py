# twisty_sim/cli.py
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, NoReturn, Optional

from PySide6.QtCore import QCoreApplication

from twisty_sim.app.solve_worker import SolveWorker
from twisty_sim.core import ConfigurationError, Move, PuzzleState
from twisty_sim.logic.history import MoveHistory
from twisty_sim.logic.moves import format_sequence, parse_sequence
from twisty_sim.logic.scramble import generate_scramble
from twisty_sim.solve import SolverOrchestrator
from twisty_sim.solve.result import ResourceExhausted, SearchOutcome

logger = logging.getLogger(__name__)

MODES = ("auto", "bfs", "ida", "reverse")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Lee los argumentos de línea de comandos."""
    parser = argparse.ArgumentParser(description="Twisty Sim - mezcla y resuelve un puzzle NxNxN")
    parser.add_argument("--order", "-n", type=int, default=3, help="Orden del puzzle (default: 3)")
    parser.add_argument("--variant", default="normal", choices=["normal", "mirror"])
    parser.add_argument("--scramble", "-s", type=int, default=4, help="Movimientos de mezcla aleatoria")
    parser.add_argument("--seed", type=int, default=None, help="Semilla de la mezcla")
    parser.add_argument("--sequence", default=None, help="Mezcla explícita, ej: \"R U x0+\"")
    parser.add_argument(
        "--mode",
        default="auto",
        choices=MODES,
        help="auto: política por orden; reverse: invierte la mezcla (siempre funciona, no es óptimo)",
    )
    parser.add_argument("--config", default=None, help="JSON con políticas del solver")
    parser.add_argument("--verbose", "-v", action="store_true", help="Logs de depuración")
    return parser.parse_args(argv)


def describe_failure(result: SearchOutcome) -> str:
    stats = result.stats.status_line()
    if isinstance(result, ResourceExhausted):
        return f"Presupuesto agotado ({result.budget}): {stats}"
    return f"{type(result).__name__}: {stats}"


def main(argv: Optional[List[str]] = None) -> NoReturn:
    """Punto de entrada: mezcla el puzzle y lo resuelve sobre el loop de eventos de Qt.

    No abre ventanas: usa `QCoreApplication`, así que funciona sin display.

    Returns:
        No retorna (finaliza con `sys.exit`: 0 resuelto, 1 sin solución,
        2 configuración inválida, 3 error inesperado).
    """
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    algorithm = None if args.mode == "auto" else args.mode

    try:
        state = PuzzleState(args.order, args.variant)
        if args.sequence:
            scramble: List[Move] = parse_sequence(args.sequence, args.order)
        else:
            scramble = generate_scramble(args.order, args.scramble, seed=args.seed)
        state.apply_sequence(scramble)
        history = MoveHistory()
        history.extend(scramble)
        orchestrator = (
            SolverOrchestrator.from_config(args.config) if args.config else SolverOrchestrator()
        )
    except ConfigurationError as e:
        logger.error(str(e))
        sys.exit(2)

    print(f"Mezcla: {format_sequence(scramble)}")

    worker = SolveWorker(orchestrator)
    exit_code = {"value": 0}

    def on_solution(moves: List[Move]) -> None:
        check = state.clone()
        check.apply_sequence(moves)
        print(f"Solución ({len(moves)}): {format_sequence(moves)}")
        print("Estado: resuelto" if check.is_solved() else "Estado: NO resuelto")
        app.quit()

    def on_failed(result: SearchOutcome) -> None:
        print(describe_failure(result))
        exit_code["value"] = 1
        app.quit()

    def on_error(msg: str) -> None:
        print("=== ERROR SOLVER ===")
        print(msg)
        exit_code["value"] = 3
        app.quit()

    worker.progress.connect(lambda text: logger.info(text))
    worker.finished_solution.connect(on_solution)
    worker.failed.connect(on_failed)
    worker.error.connect(on_error)
    try:
        worker.start(state, history=history, algorithm=algorithm)
    except ConfigurationError as e:
        logger.error(str(e))
        sys.exit(2)

    app.exec()
    sys.exit(exit_code["value"])
