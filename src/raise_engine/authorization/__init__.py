"""Authorization matrix and RAISE level calculation."""

from .engine import LevelCalculator, LevelResult, calculate_raise_level
from .matrix import DEFAULT_AUTHORIZATION_MATRIX, AuthorizationLevel, AuthorizationMatrix

__all__ = [
    "AuthorizationLevel",
    "AuthorizationMatrix",
    "DEFAULT_AUTHORIZATION_MATRIX",
    "LevelCalculator",
    "LevelResult",
    "calculate_raise_level",
]
