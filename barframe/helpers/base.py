# barframe/helpers/base.py
"""
ELEMENT HELPER: One Physical Behaviour of a Bar
===============================================

A bar element's full 6·n × 6·n local matrix is never written out as one
monolithic closed form. Instead every physical behaviour (bending about
one axis, axial, torsion) is an ElementHelper that only knows about the
DOFs it touches:

    TrussHelper                  DX          at every node
    ShaftHelper                  RX          at every node
    EulerBernoulliBeamHelper(Y)  DY, RZ      at every node
    EulerBernoulliBeamHelper(Z)  DZ, RY      at every node
    TimoshenkoBeamHelper(Y/Z)    same DOFs, with shear deformation

The element scatters each helper's small matrix into its own by the
helper's DOF order, so a bar can be a pure truss, a pure shaft, a planar
frame or a full space frame just by choosing which helpers take part.

INTERNAL FORCES:
----------------
Section resultants are reported as the force the part AFTER the cut
exerts on the part BEFORE it, in local axes. With the nodal end forces
f₀ (force ON the element at its start node) and the element loads on
[0, x), equilibrium of the segment before the cut gives

    F(x) = −f₀ − Σ Fₖ
    M(x) = −m₀ − Σ (Mₖ + (pₖ − x)·ê_x × Fₖ)

so axial force N = F_x is positive in tension.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple, TYPE_CHECKING

import numpy as np

from ..errors import ConfigurationError, UnsupportedConfiguration
from ..kernel.dof import DoF, DOF_PER_NODE
from ..loads import ConcentratedLoad, UniformLoad

if TYPE_CHECKING:
    from ..elements import BarElement

# (position along the element, force [3], moment [3]) in local axes
Action = Tuple[float, np.ndarray, np.ndarray]


def require(value: Optional[float], name: str, helper: "ElementHelper") -> float:
    """Return `value`, or fail if the data a helper needs is missing."""
    if value is None:
        raise ConfigurationError(f"{helper!r} needs {name}, which is not set")
    return float(value)


def cut_resultant(x: float, actions: Sequence[Action]) -> Tuple[np.ndarray, np.ndarray]:
    """
    Internal force and moment at arc length x from the actions before the cut.

    Parameters:
    -----------
    x : float
        Position of the cut
    actions : Sequence[Action]
        Forces/moments acting on the segment [0, x]

    Returns:
    --------
    (F, M) : Tuple[np.ndarray, np.ndarray]
        Resultants exerted by the part after the cut on the part before it
    """
    force = np.zeros(3)
    moment = np.zeros(3)
    for position, f, m in actions:
        arm = position - x
        force -= f
        # (arm, 0, 0) × f
        moment -= m + np.array([0.0, -arm * f[2], arm * f[1]])
    return force, moment


class ElementHelper(ABC):
    """
    Closed-form formulation of one behaviour of a prismatic bar.

    Subclasses declare which DOFs they use per node (`node_dofs`) and which
    local force/moment components they carry (`force_axes`, `moment_axes`),
    and implement the matrices, equivalent loads and displacement field.
    Internal-force recovery is shared: it is plain statics on the
    helper's own components.
    """

    node_dofs: Tuple[DoF, ...] = ()
    force_axes: Tuple[int, ...] = ()
    moment_axes: Tuple[int, ...] = ()

    # --- DOF bookkeeping ---------------------------------------------------

    def dof_order(self, element: "BarElement") -> List[Tuple[int, DoF]]:
        """(node_index, dof) pairs, in the row order of this helper's matrices."""
        return [(node, dof) for node in range(element.node_count) for dof in self.node_dofs]

    def local_indices(self, element: "BarElement") -> List[int]:
        """Rows of the element's 6·n local matrix addressed by this helper."""
        return [node * DOF_PER_NODE + int(dof) for node, dof in self.dof_order(element)]

    def gather(self, element: "BarElement", values: np.ndarray) -> np.ndarray:
        """Pick this helper's entries out of an (n, 6) per-node array."""
        values = np.asarray(values, dtype=float)
        return np.array([values[node, dof] for node, dof in self.dof_order(element)])

    def scatter(self, element: "BarElement", vector: np.ndarray) -> np.ndarray:
        """Spread a vector in dof_order into an (n, 6) per-node array."""
        out = np.zeros((element.node_count, DOF_PER_NODE))
        for (node, dof), value in zip(self.dof_order(element), vector):
            out[node, dof] += value
        return out

    def two_node_length(self, element: "BarElement") -> float:
        if element.node_count != 2:
            raise UnsupportedConfiguration(
                f"{self!r} has closed forms for 2-node bars only, got {element.node_count} nodes"
            )
        return element.length

    # --- matrices ------------------------------------------------------------

    @abstractmethod
    def local_stiffness(self, element: "BarElement") -> np.ndarray:
        ...

    @abstractmethod
    def local_mass(self, element: "BarElement") -> np.ndarray:
        ...

    @abstractmethod
    def local_damping(self, element: "BarElement") -> np.ndarray:
        ...

    # --- loads and fields ----------------------------------------------------

    @abstractmethod
    def equivalent_nodal_loads(self, element: "BarElement", load) -> np.ndarray:
        """Statically equivalent local nodal loads, shape (n, 6)."""

    @abstractmethod
    def displacement_at(self, element: "BarElement", local_displacements: np.ndarray,
                        xi: float) -> List[Tuple[DoF, float]]:
        """Interpolated local displacement/rotation components at xi."""

    # --- internal forces -----------------------------------------------------

    def _own(self, force: np.ndarray, moment: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        f = np.zeros(3)
        m = np.zeros(3)
        for axis in self.force_axes:
            f[axis] = force[axis]
        for axis in self.moment_axes:
            m[axis] = moment[axis]
        return f, m

    def _report(self, force: np.ndarray, moment: np.ndarray) -> List[Tuple[DoF, float]]:
        return ([(DoF(axis), float(force[axis])) for axis in self.force_axes]
                + [(DoF(3 + axis), float(moment[axis])) for axis in self.moment_axes])

    def _node_actions(self, element: "BarElement", nodal: np.ndarray, x: float) -> List[Action]:
        actions = []
        for node in range(element.node_count):
            position = element.node_arc_length(node)
            if node == 0 or position < x:
                f, m = self._own(nodal[node, :3], nodal[node, 3:])
                actions.append((position, f, m))
        return actions

    def internal_force_at(self, element: "BarElement", local_displacements: np.ndarray,
                          xi: float) -> List[Tuple[DoF, float]]:
        """
        Section resultants from the nodal displacements alone.

        Exact for an unloaded prismatic member; element loads are added by
        `load_internal_force_at`.
        """
        k = self.local_stiffness(element)
        end_forces = self.scatter(element, k @ self.gather(element, local_displacements))
        x = element.iso_to_local(xi)
        force, moment = cut_resultant(x, self._node_actions(element, end_forces, x))
        return self._report(force, moment)

    def load_internal_force_at(self, element: "BarElement", load,
                               xi: float) -> List[Tuple[DoF, float]]:
        """
        Correction of `internal_force_at` for one element load.

        Removes the load's equivalent nodal loads from the end forces and
        adds the part of the load that acts before the cut.
        """
        x = element.iso_to_local(xi)
        actions = self._node_actions(element, -self.equivalent_nodal_loads(element, load), x)
        actions.extend(self._load_actions(element, load, x))
        force, moment = cut_resultant(x, actions)
        return self._report(force, moment)

    def _load_actions(self, element: "BarElement", load, x: float) -> List[Action]:
        if isinstance(load, UniformLoad):
            start, end = load.local_span(element)
            end = min(end, x)
            if end <= start:
                return []
            q, _ = self._own(load.local_intensity(element), np.zeros(3))
            return [(0.5 * (start + end), q * (end - start), np.zeros(3))]

        if isinstance(load, ConcentratedLoad):
            position = load.local_position(element)
            if position >= x:
                return []
            f, m = self._own(*load.local_components(element))
            return [(position, f, m)]

        raise ConfigurationError(f"Unknown element load type {type(load).__name__}")

    def __repr__(self) -> str:
        return type(self).__name__ + "()"
