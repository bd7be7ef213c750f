# twisty_sim/core/errors.py
from __future__ import annotations


class TwistyError(Exception):
    """Error base del simulador."""


class ConfigurationError(TwistyError, ValueError):
    """Parámetros inválidos (orden, variante, eje, capa, token o política).

    Se lanza siempre antes de que empiece cualquier búsqueda.
    """


class SolverBusyError(TwistyError, RuntimeError):
    """Ya hay una búsqueda en curso y solo se permite una a la vez."""
