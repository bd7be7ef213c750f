# twisty_sim/solve/config.py
"""
Políticas del solver por (orden, variante).

La tabla por defecto se puede reemplazar por instancia (SolverOrchestrator) o
fusionar con un archivo JSON:

    {
        "3/normal": {"algorithm": "bfs", "max_depth": 7},
        "default": {"timeout": 5.0}
    }
"""

import json
import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Literal, Mapping, Optional, Tuple, Union

from twisty_sim.core.errors import ConfigurationError
from twisty_sim.core.puzzle_state import VARIANTS
from twisty_sim.solve.search import DEFAULT_YIELD_EVERY

logger = logging.getLogger(__name__)

Algorithm = Literal["bfs", "ida", "reverse"]
PolicyKey = Tuple[int, str]

ALGORITHMS = ("bfs", "ida", "reverse")


@dataclass(frozen=True)
class SolverPolicy:
    """
    Algoritmo y presupuestos para un tipo de puzzle.

    Attributes:
        algorithm: "bfs", "ida" o "reverse" (invertir el historial de la mezcla)
        max_depth: Profundidad máxima de solución
        max_nodes: Expansiones máximas (BFS)
        timeout: Segundos de reloj (BFS)
        threshold_max: Umbral f máximo (IDA*)
        node_budget: Expansiones por iteración (IDA*)
        time_budget: Segundos por iteración (IDA*)
        yield_every: Expansiones entre suspensiones cooperativas
        include_center_slice: Usar la capa central en órdenes impares
    """
    algorithm: Algorithm = "bfs"
    max_depth: int = 8
    max_nodes: int = 200_000
    timeout: float = 15.0
    threshold_max: int = 12
    node_budget: int = 200_000
    time_budget: float = 15.0
    yield_every: int = DEFAULT_YIELD_EVERY
    include_center_slice: bool = False

    def __post_init__(self) -> None:
        if self.algorithm not in ALGORITHMS:
            raise ConfigurationError(f"Algoritmo no soportado: {self.algorithm!r}")
        for name in ("max_depth", "max_nodes", "threshold_max", "node_budget", "yield_every"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ConfigurationError(f"{name} debe ser un entero >= 0: {value!r}")
        for name in ("timeout", "time_budget"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
                raise ConfigurationError(f"{name} debe ser un número >= 0: {value!r}")


FALLBACK_POLICY = SolverPolicy(
    algorithm="ida",
    max_depth=10,
    threshold_max=10,
    node_budget=300_000,
    time_budget=20.0,
)

DEFAULT_POLICIES: Dict[PolicyKey, SolverPolicy] = {
    (2, "normal"): SolverPolicy(algorithm="bfs", max_depth=8, max_nodes=300_000, timeout=15.0),
    (3, "normal"): SolverPolicy(algorithm="bfs", max_depth=6, max_nodes=200_000, timeout=20.0),
    (3, "mirror"): SolverPolicy(algorithm="bfs", max_depth=6, max_nodes=200_000, timeout=20.0),
    (4, "normal"): SolverPolicy(
        algorithm="ida", max_depth=8, threshold_max=8, node_budget=250_000, time_budget=20.0
    ),
    (5, "normal"): SolverPolicy(
        algorithm="ida", max_depth=8, threshold_max=8, node_budget=250_000, time_budget=20.0
    ),
}

_POLICY_FIELDS = {f.name for f in fields(SolverPolicy)}


def policy_for(
    order: int,
    variant: str,
    policies: Optional[Mapping[PolicyKey, SolverPolicy]] = None,
    fallback: SolverPolicy = FALLBACK_POLICY,
) -> SolverPolicy:
    """Busca la política de (orden, variante); si no está, usa `fallback`."""
    table = DEFAULT_POLICIES if policies is None else policies
    return table.get((order, variant), fallback)


def parse_policy_key(key: str) -> PolicyKey:
    """Convierte "3/normal" (o "3") en (3, "normal").

    Raises:
        ConfigurationError: Si el formato no es válido.
    """
    order_text, _, variant = key.partition("/")
    variant = variant or "normal"
    try:
        order = int(order_text)
    except ValueError:
        raise ConfigurationError(f"Clave de política inválida: {key!r}") from None
    if variant not in VARIANTS:
        raise ConfigurationError(f"Variante inválida en clave de política: {key!r}")
    return (order, variant)


def _apply_overrides(base: SolverPolicy, overrides: Mapping[str, Any], key: str) -> SolverPolicy:
    if not isinstance(overrides, Mapping):
        raise ConfigurationError(f"La política '{key}' debe ser un objeto")
    unknown = set(overrides) - _POLICY_FIELDS
    if unknown:
        raise ConfigurationError(f"Campos desconocidos en '{key}': {sorted(unknown)}")
    return replace(base, **overrides)


def merge_policies(
    overrides: Mapping[str, Mapping[str, Any]],
    policies: Optional[Mapping[PolicyKey, SolverPolicy]] = None,
    fallback: SolverPolicy = FALLBACK_POLICY,
) -> Tuple[Dict[PolicyKey, SolverPolicy], SolverPolicy]:
    """
    Fusiona sobreescrituras {"orden/variante": {campo: valor}} con una tabla.

    La clave "default" modifica la política de respaldo. Una clave que no está
    en la tabla parte de la política de respaldo.

    Returns:
        (tabla nueva, respaldo nuevo)

    Raises:
        ConfigurationError: Si alguna clave, campo o valor no es válido.
    """
    table = dict(DEFAULT_POLICIES if policies is None else policies)
    if "default" in overrides:
        fallback = _apply_overrides(fallback, overrides["default"], "default")

    for key, values in overrides.items():
        if key == "default":
            continue
        pk = parse_policy_key(key)
        table[pk] = _apply_overrides(table.get(pk, fallback), values, key)

    return table, fallback


def load_policies(
    path: Union[str, Path],
) -> Tuple[Dict[PolicyKey, SolverPolicy], SolverPolicy]:
    """
    Carga políticas desde un archivo JSON y las fusiona con las de fábrica.

    Args:
        path: Ruta del JSON

    Returns:
        (tabla, respaldo). Si el archivo no existe o no se puede leer, las de fábrica.

    Raises:
        ConfigurationError: Si el JSON se lee pero tiene claves o valores inválidos.
    """
    path = Path(path)
    if not path.exists():
        logger.debug(f"Archivo de políticas no encontrado ({path}), usando valores de fábrica")
        return dict(DEFAULT_POLICIES), FALLBACK_POLICY

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        logger.warning(f"No se pudo leer {path}: {e}, usando valores de fábrica")
        return dict(DEFAULT_POLICIES), FALLBACK_POLICY

    if not isinstance(data, dict):
        raise ConfigurationError(f"{path}: se esperaba un objeto JSON")

    table, fallback = merge_policies(data)
    logger.debug(f"Políticas cargadas desde {path}: {sorted(data)}")
    return table, fallback
