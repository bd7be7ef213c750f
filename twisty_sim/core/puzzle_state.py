# twisty_sim/core/puzzle_state.py
from __future__ import annotations

from operator import attrgetter
from types import MappingProxyType
from typing import Dict, Iterable, List, Literal, Mapping, NamedTuple, Optional, Tuple

from twisty_sim.core.errors import ConfigurationError
from twisty_sim.core.move import AXIS_INDEX, Move, from_half_units, to_half_units

Variant = Literal["normal", "mirror"]
Label = str  # Etiqueta de cara original: "R", "L", "U", "D", "F", "B"
Vec3i = Tuple[int, int, int]
Faces = Tuple[Optional[Label], ...]

MAX_ORDER = 9
VARIANTS: Tuple[str, ...] = ("normal", "mirror")

# Direcciones fijas del mundo; el índice es la posición en la tupla de orientación.
DIRECTIONS: Tuple[str, ...] = ("+x", "-x", "+y", "-y", "+z", "-z")
DIRECTION_VECTORS: Tuple[Vec3i, ...] = (
    (1, 0, 0),
    (-1, 0, 0),
    (0, 1, 0),
    (0, -1, 0),
    (0, 0, 1),
    (0, 0, -1),
)

# Etiqueta de cara que mira hacia cada dirección en el estado resuelto
SOLVED_LABELS: Tuple[Label, ...] = ("R", "L", "U", "D", "F", "B")

# Colores de pantalla por etiqueta (solo metadatos para un renderer)
LABEL_COLORS: Dict[Label, str] = {
    "U": "W",
    "D": "Y",
    "L": "O",
    "R": "R",
    "F": "G",
    "B": "B",
}


def _rot_x(v: Vec3i, turns: int) -> Vec3i:
    """Rota un vector 90°*turns alrededor de X (regla de la mano derecha)."""
    x, y, z = v
    turns %= 4
    if turns == 0:
        return (x, y, z)
    if turns == 1:
        return (x, -z, y)
    if turns == 2:
        return (x, -y, -z)
    return (x, z, -y)


def _rot_y(v: Vec3i, turns: int) -> Vec3i:
    """Rota un vector 90°*turns alrededor de Y (regla de la mano derecha)."""
    x, y, z = v
    turns %= 4
    if turns == 0:
        return (x, y, z)
    if turns == 1:
        return (z, y, -x)
    if turns == 2:
        return (-x, y, -z)
    return (-z, y, x)


def _rot_z(v: Vec3i, turns: int) -> Vec3i:
    """Rota un vector 90°*turns alrededor de Z (regla de la mano derecha)."""
    x, y, z = v
    turns %= 4
    if turns == 0:
        return (x, y, z)
    if turns == 1:
        return (-y, x, z)
    if turns == 2:
        return (-x, -y, z)
    return (y, -x, z)


_ROTATIONS = (_rot_x, _rot_y, _rot_z)


def _direction_cycle(axis_idx: int, direction: int) -> Tuple[int, ...]:
    """Precalcula a qué dirección pasa cada una de las 6 al girar 90° en `direction`.

    Las dos direcciones del propio eje quedan fijas; las otras cuatro forman un 4-ciclo.
    """
    rot = _ROTATIONS[axis_idx]
    return tuple(DIRECTION_VECTORS.index(rot(v, direction)) for v in DIRECTION_VECTORS)


_DIRECTION_CYCLES: Dict[Tuple[int, int], Tuple[int, ...]] = {
    (a, d): _direction_cycle(a, d) for a in range(3) for d in (1, -1)
}


class PieceSnapshot(NamedTuple):
    """Vista de solo lectura de una pieza para un renderer externo."""

    id: Tuple[float, float, float]
    position: Tuple[float, float, float]
    faces: Mapping[str, Label]
    colors: Mapping[str, str]


class Piece:
    """Sub-cubo del puzzle.

    Las coordenadas se guardan en medias unidades (2 * coordenada) para que
    tanto órdenes pares como impares queden en una grilla entera exacta.

    Attributes:
        id: Posición original en medias unidades; nunca se reasigna.
        cell: Posición actual en medias unidades.
        faces: Etiqueta original que mira hacia cada dirección de `DIRECTIONS`
            (None si la pieza no está en el borde en esa dirección).
        home_faces: Orientación del estado resuelto (compartida entre clones, es inmutable).
    """

    __slots__ = ("id", "cell", "faces", "home_faces", "_key")

    def __init__(self, piece_id: Vec3i, cell: Vec3i, faces: Faces, home_faces: Faces) -> None:
        self.id = piece_id
        self.cell = cell
        self.faces = faces
        self.home_faces = home_faces
        self._key = "{},{},{}".format(*piece_id)

    def copy(self) -> "Piece":
        return Piece(self.id, self.cell, self.faces, self.home_faces)

    @property
    def position(self) -> Tuple[float, float, float]:
        """Posición actual en coordenadas de la grilla (semienteras en órdenes pares)."""
        x, y, z = self.cell
        return (from_half_units(x), from_half_units(y), from_half_units(z))

    @property
    def in_place(self) -> bool:
        return self.cell == self.id

    def token(self) -> str:
        """Token de formato fijo: id, posición y las 6 entradas de orientación."""
        labels = "".join(label or "." for label in self.faces)
        return "{}@{},{},{}:{}".format(self._key, *self.cell, labels)


class PuzzleState:
    """Estado discreto de un puzzle NxNxN (posición + orientación simbólica por pieza).

    Representación:
        - `pieces`: exactamente `order**3` piezas, una por punto de la grilla.
        - Cada pieza lleva su orientación como tupla de etiquetas indexada por
          dirección del mundo, así que no hay matrices ni errores de redondeo.

    El estado se crea resuelto y solo cambia con `apply_move`. La variante
    ("normal" / "mirror") es metadato para el renderer y no afecta la resolución.
    """

    def __init__(self, order: int = 3, variant: Variant = "normal") -> None:
        """Crea el puzzle resuelto.

        Args:
            order: Tamaño del puzzle (2 para 2x2, 3 para 3x3, ...).
            variant: "normal" o "mirror".

        Raises:
            ConfigurationError: Si el orden o la variante no son válidos.
        """
        if isinstance(order, bool) or not isinstance(order, int) or not 1 <= order <= MAX_ORDER:
            raise ConfigurationError(f"Orden no soportado: {order!r} (1..{MAX_ORDER})")
        if variant not in VARIANTS:
            raise ConfigurationError(f"Variante no soportada: {variant!r}")

        self.order: int = order
        self.variant: Variant = variant
        self.pieces: List[Piece] = self._build_solved()

    # --------------------------
    # Construcción
    # --------------------------
    @property
    def edge(self) -> int:
        """Coordenada del borde exterior en medias unidades (order - 1)."""
        return self.order - 1

    def _home_faces(self, cell: Vec3i) -> Faces:
        """Etiquetas del estado resuelto: solo en las direcciones donde la pieza toca el borde."""
        faces: List[Optional[Label]] = []
        for i, vec in enumerate(DIRECTION_VECTORS):
            axis_idx = i // 2
            on_boundary = cell[axis_idx] == vec[axis_idx] * self.edge
            faces.append(SOLVED_LABELS[i] if on_boundary else None)
        return tuple(faces)

    def _build_solved(self) -> List[Piece]:
        coords = range(-self.edge, self.edge + 1, 2)
        pieces: List[Piece] = []
        for x in coords:
            for y in coords:
                for z in coords:
                    cell = (x, y, z)
                    home = self._home_faces(cell)
                    pieces.append(Piece(cell, cell, home, home))
        return pieces

    def reset(self) -> None:
        """Reinicia el puzzle a estado resuelto."""
        self.pieces = self._build_solved()

    def clone(self) -> "PuzzleState":
        """Copia independiente: ninguna pieza se comparte con el original."""
        c = PuzzleState.__new__(PuzzleState)
        c.order = self.order
        c.variant = self.variant
        c.pieces = [p.copy() for p in self.pieces]
        return c

    # --------------------------
    # Public API
    # --------------------------
    def validate_move(self, move: Move) -> None:
        """Verifica que el movimiento exista para este orden.

        Raises:
            ConfigurationError: Si el eje, la capa o la dirección no son válidos.
        """
        if move.axis not in AXIS_INDEX:
            raise ConfigurationError(f"Eje inválido: {move.axis!r}")
        if move.direction not in (1, -1):
            raise ConfigurationError(f"Dirección inválida: {move.direction!r}")
        layer = move.layer
        if abs(layer) > self.edge or (layer + self.edge) % 2 != 0:
            raise ConfigurationError(
                f"Capa {move.slice} no existe en un puzzle de orden {self.order}"
            )

    def apply_move(self, move: Move) -> None:
        """Aplica un cuarto de vuelta.

        Args:
            move: Movimiento a aplicar.

        Raises:
            ConfigurationError: Si el movimiento no es válido para este orden.
        """
        self.validate_move(move)
        self._rotate_layer(AXIS_INDEX[move.axis], move.layer, move.direction)

    def rotate_layer(self, axis: str, slice: float, direction: int) -> None:
        """Igual que `apply_move` pero recibiendo eje, capa y dirección sueltos."""
        self.apply_move(Move(axis, slice, direction))  # type: ignore[arg-type]

    def apply_sequence(self, moves: Iterable[Move]) -> None:
        """Aplica una secuencia de movimientos en orden."""
        for move in moves:
            self.apply_move(move)

    def is_solved(self) -> bool:
        """Indica si cada pieza está en su posición y orientación originales."""
        for p in self.pieces:
            if p.cell != p.id or p.faces != p.home_faces:
                return False
        return True

    def encode(self) -> str:
        """Clave canónica para deduplicar estados.

        Independiente del orden interno de `pieces`: se ordena por id.
        Solo debe compararse por igualdad.
        """
        return "|".join(p.token() for p in sorted(self.pieces, key=attrgetter("id")))

    def snapshot(self) -> Tuple[PieceSnapshot, ...]:
        """Consulta de solo lectura de posición y orientación de cada pieza."""
        out: List[PieceSnapshot] = []
        for p in self.pieces:
            faces = {d: label for d, label in zip(DIRECTIONS, p.faces) if label is not None}
            colors = {d: LABEL_COLORS[label] for d, label in faces.items()}
            x, y, z = p.id
            out.append(
                PieceSnapshot(
                    id=(from_half_units(x), from_half_units(y), from_half_units(z)),
                    position=p.position,
                    faces=MappingProxyType(faces),
                    colors=MappingProxyType(colors),
                )
            )
        return tuple(out)

    def piece_at(self, position: Tuple[float, float, float]) -> Piece:
        """Devuelve la pieza que ocupa actualmente `position`.

        Raises:
            KeyError: Si la posición no está en la grilla.
        """
        cell = tuple(to_half_units(v) for v in position)
        for p in self.pieces:
            if p.cell == cell:
                return p
        raise KeyError(position)

    # --------------------------
    # Core rotation logic
    # --------------------------
    def _rotate_layer(self, axis_idx: int, layer: int, direction: int) -> None:
        """Rota una capa 90° en `direction`.

        Args:
            axis_idx: 0, 1 o 2 (x, y, z).
            layer: Capa en medias unidades.
            direction: +1 o -1.
        """
        rot = _ROTATIONS[axis_idx]
        cycle = _DIRECTION_CYCLES[(axis_idx, direction)]
        for p in self.pieces:
            if p.cell[axis_idx] != layer:
                continue
            p.cell = rot(p.cell, direction)
            faces: List[Optional[Label]] = [None] * 6
            for i, label in enumerate(p.faces):
                if label is not None:
                    faces[cycle[i]] = label
            p.faces = tuple(faces)

    def __repr__(self) -> str:
        return f"PuzzleState(order={self.order}, variant={self.variant!r}, solved={self.is_solved()})"
