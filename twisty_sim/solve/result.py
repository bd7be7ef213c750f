# twisty_sim/solve/result.py
"""
Resultados de búsqueda.

Todas las salidas del motor son valores, nunca excepciones:
    - Solved: lista ordenada de movimientos (vacía si ya estaba resuelto)
    - ResourceExhausted: se agotó un presupuesto ("nodes", "time" o "depth")
    - NotFound: el espacio bajo el límite se exploró sin encontrar solución
    - Cancelled: la búsqueda se detuvo en un punto de suspensión por pedido externo

Cada resultado lleva SearchStats con los contadores de diagnóstico.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Optional

from twisty_sim.core.move import Move

Budget = Literal["nodes", "time", "depth"]
NotFoundReason = Literal["exhausted", "threshold", "stalled"]


@dataclass
class SearchStats:
    """
    Contadores de una búsqueda.

    Attributes:
        algorithm: "bfs" o "ida"
        nodes_expanded: Nodos expandidos (en IDA*, acumulado de todas las iteraciones)
        max_depth: Profundidad más honda alcanzada
        threshold: Último umbral f probado (solo IDA*)
        iterations: Iteraciones externas completadas o en curso (solo IDA*)
        elapsed: Segundos de reloj transcurridos
    """
    algorithm: str = ""
    nodes_expanded: int = 0
    max_depth: int = 0
    threshold: Optional[int] = None
    iterations: int = 0
    elapsed: float = 0.0

    def status_line(self) -> str:
        """Texto de progreso legible para un panel de UI."""
        parts = [self.algorithm.upper() or "SEARCH"]
        if self.threshold is not None:
            parts.append(f"umbral {self.threshold}")
        parts.append(f"prof {self.max_depth}")
        parts.append(f"nodos {self.nodes_expanded}")
        parts.append(f"{self.elapsed:.2f}s")
        return " | ".join(parts)


@dataclass
class SearchProgress:
    """Valor cedido en cada punto de suspensión cooperativa."""
    stats: SearchStats
    message: str


@dataclass
class SearchOutcome:
    stats: SearchStats = field(default_factory=SearchStats)

    @property
    def ok(self) -> bool:
        return False


@dataclass
class Solved(SearchOutcome):
    moves: List[Move] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return True


@dataclass
class ResourceExhausted(SearchOutcome):
    budget: Budget = "nodes"


@dataclass
class NotFound(SearchOutcome):
    reason: NotFoundReason = "exhausted"


@dataclass
class Cancelled(SearchOutcome):
    pass
