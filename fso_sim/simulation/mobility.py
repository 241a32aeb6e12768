"""
Endpoint positions.
"""

from typing import Sequence

import numpy as np


class ConstantPositionMobility:
    """Mobility provider for an endpoint that never moves."""

    def __init__(self, position: Sequence[float] = (0.0, 0.0, 0.0)):
        self.set_position(position)

    def set_position(self, position: Sequence[float]):
        position = np.asarray(position, dtype=float)
        if position.shape != (3,):
            raise ValueError(f"Position must be (x, y, z), got shape {position.shape}")
        self._position = position

    def get_position(self) -> np.ndarray:
        """Position (x, y, z) in metres."""
        return self._position.copy()

    def distance_from(self, other: 'ConstantPositionMobility') -> float:
        return float(np.linalg.norm(self._position - other.get_position()))

    def __repr__(self):
        x, y, z = self._position
        return f"ConstantPositionMobility(({x}, {y}, {z}))"
