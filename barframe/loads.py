# loads.py - Element loads (distributed and concentrated)
"""
Loads applied along a bar element.

Two kinds of element load are supported:

- UniformLoad: constant force per unit ELEMENT LENGTH along a direction,
  over the iso span [start_xi, end_xi] (whole element by default)
- ConcentratedLoad: force and moment vectors at one iso coordinate

Either can be expressed in the global frame or in the element's local
frame. The element helpers turn them into equivalent nodal loads and, for
exact internal force queries, into their resultants along the member.

Sign convention: components act in the positive axis directions of the
chosen frame. A gravity load on a horizontal member is therefore

    UniformLoad(direction=[0, 0, -1], magnitude=5e3)     # 5 kN/m down
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple, TYPE_CHECKING

import numpy as np

from .errors import ConfigurationError
from .iso import check_iso
from .model import DEFAULT_LOAD_CASE, LoadCase

if TYPE_CHECKING:
    from .elements import BarElement


class CoordinateSystem(Enum):
    GLOBAL = "global"
    LOCAL = "local"


def _to_local(element: "BarElement", vector: np.ndarray, system: CoordinateSystem) -> np.ndarray:
    if system is CoordinateSystem.LOCAL:
        return vector
    return element.transform_manager().global_to_local(vector)


@dataclass
class UniformLoad:
    """
    Uniformly distributed force along (part of) an element.

    Parameters:
    -----------
    direction : array-like, shape (3,)
        Direction of the load; normalized on construction
    magnitude : float
        Force per unit element length (N/m)
    case : LoadCase
        Load case the load belongs to
    coordinate_system : CoordinateSystem
        Frame of `direction`
    start_xi, end_xi : float
        Loaded iso span, −1 ≤ start_xi < end_xi ≤ 1
    """
    direction: np.ndarray
    magnitude: float
    case: LoadCase = DEFAULT_LOAD_CASE
    coordinate_system: CoordinateSystem = CoordinateSystem.GLOBAL
    start_xi: float = -1.0
    end_xi: float = 1.0

    def __post_init__(self):
        direction = np.asarray(self.direction, dtype=float)
        norm = np.linalg.norm(direction)
        if direction.shape != (3,) or norm == 0.0:
            raise ConfigurationError(f"Load direction must be a non-zero 3-vector, got {self.direction!r}")
        self.direction = direction / norm
        self.start_xi = check_iso(self.start_xi)
        self.end_xi = check_iso(self.end_xi)
        if self.start_xi >= self.end_xi:
            raise ConfigurationError(
                f"Uniform load span is empty: start_xi={self.start_xi}, end_xi={self.end_xi}"
            )

    def local_intensity(self, element: "BarElement") -> np.ndarray:
        """Force per unit length [qx, qy, qz] in the element's local frame."""
        return _to_local(element, self.direction * self.magnitude, self.coordinate_system)

    def local_span(self, element: "BarElement") -> Tuple[float, float]:
        """Loaded span as arc lengths (x_start, x_end) from the start node."""
        return element.iso_to_local(self.start_xi), element.iso_to_local(self.end_xi)

    def discretization_points(self) -> List[float]:
        return [self.start_xi, self.end_xi]


@dataclass
class ConcentratedLoad:
    """
    Point force and moment on an element.

    Parameters:
    -----------
    force : array-like, shape (3,)
        [Fx, Fy, Fz] (N)
    moment : array-like, shape (3,)
        [Mx, My, Mz] (N·m)
    xi : float
        Iso coordinate of the point of application
    case : LoadCase
    coordinate_system : CoordinateSystem
    """
    force: np.ndarray
    moment: np.ndarray = field(default_factory=lambda: np.zeros(3))
    xi: float = 0.0
    case: LoadCase = DEFAULT_LOAD_CASE
    coordinate_system: CoordinateSystem = CoordinateSystem.GLOBAL

    def __post_init__(self):
        self.force = np.asarray(self.force, dtype=float)
        self.moment = np.asarray(self.moment, dtype=float)
        if self.force.shape != (3,) or self.moment.shape != (3,):
            raise ConfigurationError("Concentrated load force and moment must be 3-vectors")
        self.xi = check_iso(self.xi)

    def local_components(self, element: "BarElement") -> Tuple[np.ndarray, np.ndarray]:
        """(force, moment) in the element's local frame."""
        return (
            _to_local(element, self.force, self.coordinate_system),
            _to_local(element, self.moment, self.coordinate_system),
        )

    def local_position(self, element: "BarElement") -> float:
        return element.iso_to_local(self.xi)

    def discretization_points(self) -> List[float]:
        return [self.xi]


ELEMENT_LOAD_TYPES = (UniformLoad, ConcentratedLoad)
