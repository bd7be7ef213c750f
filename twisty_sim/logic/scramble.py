# twisty_sim/logic/scramble.py
from __future__ import annotations

import random
from typing import List, Optional

from twisty_sim.core.errors import ConfigurationError
from twisty_sim.core.move import Move
from twisty_sim.logic.moves import filter_moves, generate_legal_moves


def generate_scramble(
    order: int,
    n: int,
    seed: Optional[int] = None,
    include_center: bool = False,
) -> List[Move]:
    """Genera una mezcla (scramble) aleatoria para un puzzle de orden `order`.

    Nunca elige el inverso exacto del movimiento anterior, así que la mezcla no
    se deshace a sí misma paso a paso (y su inversa es alcanzable por la búsqueda
    con la misma poda).

    Args:
        order: Orden del puzzle.
        n: Cantidad de movimientos a generar.
        seed: Semilla opcional para obtener resultados reproducibles.
        include_center: Si True, también usa la capa central en órdenes impares.

    Returns:
        Lista de `n` movimientos.

    Raises:
        ConfigurationError: Si `n` es menor o igual a 0 o el orden no tiene movimientos.
    """
    if n <= 0:
        raise ConfigurationError("n debe ser mayor que 0.")

    legal = generate_legal_moves(order, include_center)
    if not legal:
        raise ConfigurationError(f"El orden {order} no tiene movimientos legales.")

    rng = random.Random(seed)

    seq: List[Move] = []
    last: Optional[Move] = None

    for _ in range(n):
        move = rng.choice(filter_moves(legal, last))
        seq.append(move)
        last = move

    return seq
