# twisty_sim/solve/__init__.py
from twisty_sim.solve.bfs_solver import bfs_search
from twisty_sim.solve.config import DEFAULT_POLICIES, FALLBACK_POLICY, SolverPolicy, load_policies
from twisty_sim.solve.heuristic import misplaced_heuristic
from twisty_sim.solve.ida_solver import ida_star_search
from twisty_sim.solve.orchestrator import SolverOrchestrator, SolveTask
from twisty_sim.solve.result import (
    Cancelled,
    NotFound,
    ResourceExhausted,
    SearchOutcome,
    SearchProgress,
    SearchStats,
    Solved,
)
from twisty_sim.solve.search import make_neighbor_fn, run_to_completion

__all__ = [
    "Cancelled",
    "DEFAULT_POLICIES",
    "FALLBACK_POLICY",
    "NotFound",
    "ResourceExhausted",
    "SearchOutcome",
    "SearchProgress",
    "SearchStats",
    "SolveTask",
    "Solved",
    "SolverOrchestrator",
    "SolverPolicy",
    "bfs_search",
    "ida_star_search",
    "load_policies",
    "make_neighbor_fn",
    "misplaced_heuristic",
    "run_to_completion",
]
