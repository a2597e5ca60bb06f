# barframe/helpers/rod.py
"""
Axial (truss) and torsional (shaft) behaviour of a 2-node bar.

Both are second-order rods with linear shape functions N = [1 − s, s]:

    truss:  k = EA/L · [[1, −1], [−1, 1]]     m = ρAL/6 · [[2, 1], [1, 2]]
    shaft:  k = GJ/L · [[1, −1], [−1, 1]]     m = ρ(Iy+Iz)L/6 · [[2, 1], [1, 2]]
"""

from abc import abstractmethod
from typing import List, Tuple

import numpy as np

from ..kernel.dof import DoF
from ..loads import ConcentratedLoad, UniformLoad
from .base import ElementHelper, require

_ROD_STIFFNESS = np.array([[1.0, -1.0], [-1.0, 1.0]])
_ROD_MASS = np.array([[2.0, 1.0], [1.0, 2.0]]) / 6.0


def _linear_shapes(s: float) -> np.ndarray:
    return np.array([1.0 - s, s])


def _linear_integrals(a: float, b: float) -> np.ndarray:
    # ∫ N ds over [a, b]
    return np.array([(b - a) - 0.5 * (b * b - a * a), 0.5 * (b * b - a * a)])


class _RodHelper(ElementHelper):

    @abstractmethod
    def _rigidity(self, element) -> float:
        """EA or GJ."""

    @abstractmethod
    def _inertia(self, element) -> float:
        """Cross-section quantity multiplying density in the mass matrix."""

    def local_stiffness(self, element) -> np.ndarray:
        L = self.two_node_length(element)
        return self._rigidity(element) / L * _ROD_STIFFNESS

    def local_mass(self, element) -> np.ndarray:
        L = self.two_node_length(element)
        rho = require(element.material.density, "material.density", self)
        return rho * self._inertia(element) * L * _ROD_MASS

    def local_damping(self, element) -> np.ndarray:
        L = self.two_node_length(element)
        c = require(element.material.damping, "material.damping", self)
        return c * self._inertia(element) * L * _ROD_MASS

    def displacement_at(self, element, local_displacements, xi) -> List[Tuple[DoF, float]]:
        L = self.two_node_length(element)
        s = element.iso_to_local(xi) / L
        value = _linear_shapes(s) @ self.gather(element, local_displacements)
        return [(self.node_dofs[0], float(value))]


class TrussHelper(_RodHelper):
    """Axial force only: DX at every node."""

    node_dofs = (DoF.DX,)
    force_axes = (0,)
    moment_axes = ()

    def _rigidity(self, element) -> float:
        return require(element.material.E, "material.E", self) * element.section.A

    def _inertia(self, element) -> float:
        return element.section.A

    def equivalent_nodal_loads(self, element, load) -> np.ndarray:
        L = self.two_node_length(element)
        if isinstance(load, UniformLoad):
            a, b = load.local_span(element)
            qx = load.local_intensity(element)[0]
            return self.scatter(element, qx * L * _linear_integrals(a / L, b / L))
        if isinstance(load, ConcentratedLoad):
            force, _ = load.local_components(element)
            s = load.local_position(element) / L
            return self.scatter(element, force[0] * _linear_shapes(s))
        return np.zeros((element.node_count, 6))


class ShaftHelper(_RodHelper):
    """Uniform (St. Venant) torsion: RX at every node."""

    node_dofs = (DoF.RX,)
    force_axes = ()
    moment_axes = (0,)

    def _rigidity(self, element) -> float:
        G = require(element.material.G, "material.G", self)
        return G * require(element.section.J, "section.J", self)

    def _inertia(self, element) -> float:
        # polar moment of area
        Iy = require(element.section.Iy, "section.Iy", self)
        Iz = require(element.section.Iz, "section.Iz", self)
        return Iy + Iz

    def equivalent_nodal_loads(self, element, load) -> np.ndarray:
        L = self.two_node_length(element)
        if isinstance(load, ConcentratedLoad):
            _, moment = load.local_components(element)
            s = load.local_position(element) / L
            return self.scatter(element, moment[0] * _linear_shapes(s))
        # distributed forces act through the axis and carry no torque
        return np.zeros((element.node_count, 6))
