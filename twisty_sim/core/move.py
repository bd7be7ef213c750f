# twisty_sim/core/move.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Tuple

from twisty_sim.core.errors import ConfigurationError

Axis = Literal["x", "y", "z"]
AXES: Tuple[Axis, ...] = ("x", "y", "z")
AXIS_INDEX = {"x": 0, "y": 1, "z": 2}


def to_half_units(value: float) -> int:
    """Convierte una coordenada de la grilla (entera o semientera) a medias unidades.

    Args:
        value: Coordenada, por ejemplo 1, -0.5 o 1.5.

    Returns:
        `2 * value` como entero exacto.

    Raises:
        ConfigurationError: Si el valor no es múltiplo de 0.5.
    """
    doubled = value * 2
    if doubled != int(doubled):
        raise ConfigurationError(f"Coordenada fuera de la grilla: {value}")
    return int(doubled)


def from_half_units(doubled: int) -> float:
    """Inversa de `to_half_units`; devuelve int si la coordenada es entera."""
    if doubled % 2 == 0:
        return doubled // 2
    return doubled / 2


@dataclass(frozen=True)
class Move:
    """Cuarto de vuelta de una capa.

    Attributes:
        axis: Eje de giro ('x', 'y' o 'z').
        slice: Coordenada de la capa sobre ese eje (ej: 1, -1, 0.5).
        direction: +1 giro de +90° alrededor del eje positivo (mano derecha), -1 el contrario.
    """

    axis: Axis
    slice: float
    direction: int

    @property
    def layer(self) -> int:
        """Capa en medias unidades (2 * slice)."""
        return to_half_units(self.slice)

    def inverse(self) -> "Move":
        """Devuelve el mismo giro en sentido contrario."""
        return Move(self.axis, self.slice, -self.direction)

    def is_inverse_of(self, other: "Move") -> bool:
        return (
            self.axis == other.axis
            and self.layer == other.layer
            and self.direction == -other.direction
        )

    def __str__(self) -> str:
        sign = "+" if self.direction > 0 else "-"
        return f"{self.axis}{from_half_units(self.layer)}{sign}"
