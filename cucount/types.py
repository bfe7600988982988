"""Core data types: particle sets, mesh attributes and particle meshes."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass

import numpy as np

NDIM = 3
MAX_NMESH = 3
MAX_NBIN = 3
MAX_POLE = 8
DTORAD = math.pi / 180.0


class MeshType(enum.Enum):
    """How particles are assigned to mesh cells."""

    CARTESIAN = 0
    ANGULAR = 1


class VarType(enum.IntEnum):
    """Variables that pair counts can be binned or selected in."""

    NONE = 0
    S = 1
    MU = 2
    THETA = 3
    POLE = 4
    K = 5


class LosType(enum.IntEnum):
    """Line-of-sight definitions."""

    NONE = 0
    FIRSTPOINT = 1
    ENDPOINT = 2
    MIDPOINT = 3


class Particles:
    """A set of particles: Cartesian positions of shape (n, 3) and weights of shape (n,)."""

    def __init__(self, positions, weights):
        positions = np.ascontiguousarray(positions, dtype=np.float64)
        weights = np.ascontiguousarray(weights, dtype=np.float64)
        if positions.ndim != 2 or positions.shape[1] != NDIM:
            raise ValueError(
                f"positions must have shape (n, {NDIM}), got {positions.shape}"
            )
        if weights.ndim != 1 or weights.shape[0] != positions.shape[0]:
            raise ValueError(
                f"weights must have shape ({positions.shape[0]},), got {weights.shape}"
            )
        self.positions = positions
        self.weights = weights

    @property
    def size(self):
        """Number of particles."""
        return int(self.positions.shape[0])

    def __repr__(self):
        return f"Particles(size={self.size})"


@dataclass(frozen=True)
class MeshAttrs:
    """Geometry of a mesh; a zero mesh size means it is chosen from the particles."""

    meshsize: tuple = (0, 0, 0)
    boxsize: tuple = (0.0, 0.0, 0.0)
    boxcenter: tuple = (0.0, 0.0, 0.0)
    smax: float = 0.0
    type: MeshType = MeshType.CARTESIAN


@dataclass(eq=False)
class Mesh:
    """Particles sorted by mesh cell, with per-cell counts and offsets."""

    size: int
    total_nparticles: int
    nparticles: np.ndarray
    cumnparticles: np.ndarray
    positions: np.ndarray
    spositions: np.ndarray
    weights: np.ndarray

    def cell_particles(self, cell):
        """Return (positions, unit positions, weights) of the particles in ``cell``."""
        if not 0 <= cell < self.size:
            raise IndexError(f"cell {cell} out of range for mesh of size {self.size}")
        start = int(self.cumnparticles[cell])
        stop = start + int(self.nparticles[cell])
        return (
            self.positions[start:stop],
            self.spositions[start:stop],
            self.weights[start:stop],
        )