# twisty_sim/logic/moves.py
from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from twisty_sim.core.errors import ConfigurationError
from twisty_sim.core.move import AXES, Move, from_half_units, to_half_units

VALID_FACES: Set[str] = {"U", "D", "L", "R", "F", "B"}
VALID_SUFFIX: Set[str] = {"", "'", "2"}

# Cara -> (eje, signo de la capa exterior, dirección del giro horario visto desde la cara).
# Horario visto desde la cara = -90° alrededor de su normal exterior.
FACE_TURNS: Dict[str, Tuple[str, int, int]] = {
    "U": ("y", 1, -1),
    "D": ("y", -1, 1),
    "R": ("x", 1, -1),
    "L": ("x", -1, 1),
    "F": ("z", 1, -1),
    "B": ("z", -1, 1),
}

_AXIS_TOKEN = re.compile(r"^([xyz])(-?\d+(?:\.[05])?)([+-])$")


def slice_values(order: int) -> List[float]:
    """Coordenadas de capa que existen para un orden.

    Ejemplos:
        - order=2 -> [-0.5, 0.5]
        - order=3 -> [-1, 0, 1]
    """
    if order < 1:
        raise ConfigurationError(f"Orden no soportado: {order!r}")
    return [from_half_units(v) for v in range(-(order - 1), order, 2)]


def generate_legal_moves(order: int, include_center: bool = False) -> List[Move]:
    """Enumera todos los cuartos de vuelta de un puzzle de orden `order`.

    En órdenes impares se omite la capa central exacta de cada eje, salvo que
    `include_center` sea True. Esa omisión solo es inocua en modelos que no
    distinguen las piezas centrales por posición; en este modelo la capa
    central sí mueve aristas y centros, así que un estado mezclado con ella
    puede ser inalcanzable sin `include_center`.

    Args:
        order: Orden del puzzle.
        include_center: Si True, incluye la capa central en órdenes impares.

    Returns:
        Lista de movimientos: eje x capa x dirección, en ese orden.
    """
    moves: List[Move] = []
    for axis in AXES:
        for s in slice_values(order):
            if order % 2 == 1 and s == 0 and not include_center:
                continue
            for direction in (1, -1):
                moves.append(Move(axis, s, direction))
    return moves


def filter_moves(moves: Iterable[Move], last_move: Optional[Move]) -> List[Move]:
    """Quita el inverso exacto del último movimiento (misma capa, dirección opuesta).

    Es una poda del árbol de búsqueda, no un requisito de corrección.
    """
    if last_move is None:
        return list(moves)
    return [m for m in moves if not m.is_inverse_of(last_move)]


def normalize_token(tok: str) -> str:
    """Normaliza un token de cara a un formato estándar.

    Reglas principales:
    - Elimina espacios y convierte comilla tipográfica (’ o ‘) a comilla simple (').
    - Acepta una cara con sufijo opcional "", "'" o "2".
    - Corrige "D2'" -> "D2" (el inverso de un 180° es el mismo).

    Args:
        tok: Token (por ejemplo: "R", "U'", "F2", "D2'").

    Returns:
        Token normalizado.

    Raises:
        ConfigurationError: Si la cara o el sufijo no son válidos.
    """
    tok = tok.strip().replace("’", "'").replace("‘", "'")
    if not tok:
        return ""

    base = tok[0]
    suf = tok[1:]

    if base not in VALID_FACES:
        raise ConfigurationError(f"Movimiento inválido: {tok}")

    if suf == "2'":
        suf = "2"

    if suf not in VALID_SUFFIX:
        raise ConfigurationError(f"Sufijo inválido en: {tok}")

    return base + suf


def parse_token(tok: str, order: int) -> List[Move]:
    """Convierte un token en uno o más movimientos.

    Acepta:
        - Notación de caras (capa exterior): "R", "U'", "F2".
        - Notación de ejes: "x1+", "y-0.5-", "z0+".

    Args:
        tok: Token a convertir.
        order: Orden del puzzle (define dónde está la capa exterior).

    Returns:
        Lista de movimientos (dos para los giros "2").

    Raises:
        ConfigurationError: Si el token no es válido.
    """
    tok = tok.strip()
    if not tok:
        return []

    m = _AXIS_TOKEN.match(tok)
    if m is not None:
        axis, value, sign = m.groups()
        return [Move(axis, from_half_units(to_half_units(float(value))), 1 if sign == "+" else -1)]  # type: ignore[arg-type]

    tok = normalize_token(tok)
    axis, side, cw = FACE_TURNS[tok[0]]
    outer = from_half_units(side * (order - 1))
    suf = tok[1:]

    if suf == "'":
        return [Move(axis, outer, -cw)]  # type: ignore[arg-type]
    move = Move(axis, outer, cw)  # type: ignore[arg-type]
    if suf == "2":
        return [move, move]
    return [move]


def parse_sequence(text: str, order: int) -> List[Move]:
    """Convierte una secuencia escrita como texto en una lista de movimientos.

    La entrada separa movimientos por espacios. Por ejemplo, para order=3:
        "R U x0+" -> [x1-, y1-, x0+]

    Raises:
        ConfigurationError: Si algún token es inválido.
    """
    out: List[Move] = []
    for t in text.split():
        out.extend(parse_token(t, order))
    return out


def format_sequence(moves: Sequence[Move]) -> str:
    """Texto con los movimientos en notación de ejes, separados por espacios."""
    return " ".join(str(m) for m in moves)


def inverse_move(m: Move) -> Move:
    """Devuelve el movimiento inverso (misma capa, dirección contraria)."""
    return m.inverse()


def inverse_sequence(moves: Sequence[Move]) -> List[Move]:
    """Secuencia que deshace `moves`: inversos en orden inverso."""
    return [inverse_move(m) for m in reversed(moves)]
