# barframe/elements.py
"""
BAR ELEMENT: Composition of Helpers, Releases and Internal Forces
=================================================================

PURPOSE:
--------
A BarElement is a line element through two or more nodes. Its physical
behaviour is a BarBehaviour bitmask; every flag contributes one
ElementHelper, and the element's 6·n × 6·n local matrices are the sum of
the helper matrices scattered to the helper DOFs:

    K_local = Σ_h  P_hᵀ · k_h · P_h

Global matrices follow from the congruence transform

    K_global = Tᵀ · K_local · T        T = diag(Λ, Λ, …)

NODAL RELEASES:
---------------
`releases[i]` says how the element is connected to its i-th node, in the
element's LOCAL axes. A FREE entry is released (e.g. a moment hinge at
RZ). Released DOFs b are condensed out of the element, keeping a:

    K* = K_aa − K_ab · K_bb⁻¹ · K_ba
    f* = f_a  − K_ab · K_bb⁻¹ · f_b

so the element adds nothing at the released DOFs. After the solve the
released end displacements are recovered from

    d_b = K_bb⁻¹ · (f_b − K_ba · d_a)

The node itself keeps its own supports: a restrained node DOF stays
restrained even if every element attached to it releases that DOF.

INTERNAL FORCES:
----------------
`internal_force_at` interpolates from nodal displacements only and is exact
for unloaded members. `exact_internal_force_at` adds the effect of every
element load of the case, and refuses to evaluate exactly on a node or on
a load point, where the resultants jump.
"""

from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from .errors import ConfigurationError, DiscontinuityQueryError
from .helpers import BarBehaviour, helpers_for, validate_behaviour
from .iso import check_iso, fit_iso_to_local, local_to_iso, node_iso_coordinates
from .kernel.dof import DOF_PER_NODE
from .loads import ELEMENT_LOAD_TYPES
from .model import (
    Constraint,
    DEFAULT_LOAD_CASE,
    LoadCase,
    LoadCombination,
    LoadSelector,
    Material,
    Node,
    Section,
)
from .transform import TransformManager, transformation_matrix


class BarElement:
    """
    A bar/frame element between nodes.

    Parameters:
    -----------
    nodes : Sequence[Node]
        Element nodes in order; first and last define the element axis
    material : Material
    section : Section
    behaviour : BarBehaviour
        Bitmask of the behaviours to include (default FULL_FRAME)
    web_rotation : float
        Rotation of the section about local x (degrees)
    releases : Sequence[Constraint], optional
        Connection of the element to each node, in local axes.
        Default: fully connected (Constraint.fixed()) at every node.
    label : str, optional

    Example:
    --------
    >>> a, b = Node(0, 0, 0), Node(3, 0, 0)
    >>> bar = BarElement([a, b], Material(E=210e9), Section(A=1e-3),
    ...                  behaviour=BarBehaviour.TRUSS)
    >>> bar.length
    3.0
    """

    def __init__(
        self,
        nodes: Sequence[Node],
        material: Material,
        section: Section,
        behaviour: int = BarBehaviour.FULL_FRAME,
        web_rotation: float = 0.0,
        releases: Optional[Sequence[Constraint]] = None,
        label: Optional[str] = None,
    ):
        self.nodes: List[Node] = list(nodes)
        if len(self.nodes) < 2:
            raise ConfigurationError(f"A bar element needs at least 2 nodes, got {len(self.nodes)}")
        self.material = material
        self.section = section
        self.behaviour = validate_behaviour(behaviour)
        self.helpers = helpers_for(self.behaviour)
        self.web_rotation = float(web_rotation)
        self.label = label
        self.loads: list = []

        if releases is None:
            releases = [Constraint.fixed() for _ in self.nodes]
        self.releases: List[Constraint] = list(releases)
        if len(self.releases) != len(self.nodes):
            raise ConfigurationError(
                f"Expected {len(self.nodes)} release constraints, got {len(self.releases)}"
            )

        self._iso_poly: Optional[np.poly1d] = None
        self._iso_signature: Optional[Tuple[Tuple[float, float, float], ...]] = None

    def __repr__(self) -> str:
        name = self.label or "BarElement"
        return f"{name}({self.behaviour!r}, {self.node_count} nodes)"

    # --- geometry ------------------------------------------------------------

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    def _arc_lengths(self) -> np.ndarray:
        points = np.array([n.location for n in self.nodes])
        segments = np.linalg.norm(np.diff(points, axis=0), axis=1)
        return np.concatenate([[0.0], np.cumsum(segments)])

    @property
    def length(self) -> float:
        """Arc length through all nodes (m)."""
        return float(self._arc_lengths()[-1])

    def node_arc_length(self, node: int) -> float:
        """Distance of the element's `node`-th node from its first node."""
        return float(self._arc_lengths()[node])

    def node_indices(self) -> List[int]:
        """Structure-wide node numbers, as assigned by Structure."""
        indices = [n.index for n in self.nodes]
        if min(indices) < 0:
            raise ConfigurationError(f"{self!r} has nodes that are not numbered by a structure")
        return indices

    # --- iso mapping ---------------------------------------------------------

    def _geometry_signature(self) -> Tuple[Tuple[float, float, float], ...]:
        return tuple((n.x, n.y, n.z) for n in self.nodes)

    def _iso_polynomial(self) -> np.poly1d:
        signature = self._geometry_signature()
        if self._iso_poly is None:
            self._iso_poly = fit_iso_to_local(self._arc_lengths())
            self._iso_signature = signature
        elif signature != self._iso_signature:
            raise ConfigurationError(
                f"Node geometry of {self!r} changed after first use; build a new element"
            )
        return self._iso_poly

    def iso_to_local(self, xi: float) -> float:
        """Arc length from the first node at iso coordinate xi."""
        return float(self._iso_polynomial()(check_iso(xi)))

    def local_to_iso(self, x: float) -> float:
        """Iso coordinate at arc length x."""
        return local_to_iso(self._iso_polynomial(), x)

    def internal_force_discretization_points(self) -> List[float]:
        """Iso coordinates of the nodes, where internal forces may jump."""
        return node_iso_coordinates(self.node_count).tolist()

    # --- transformation ------------------------------------------------------

    def transformation_matrix(self) -> np.ndarray:
        """3×3 direction cosines Λ, rows = local axes in global components."""
        return transformation_matrix(
            self.nodes[0].location, self.nodes[-1].location, self.web_rotation
        )

    def transform_manager(self) -> TransformManager:
        return TransformManager.from_transformation_matrix(self.transformation_matrix())

    # --- local matrices ------------------------------------------------------

    def _sum_helpers(self, method: str) -> np.ndarray:
        size = DOF_PER_NODE * self.node_count
        out = np.zeros((size, size))
        for helper in self.helpers:
            idx = helper.local_indices(self)
            out[np.ix_(idx, idx)] += getattr(helper, method)(self)
        return out

    def local_stiffness(self) -> np.ndarray:
        """Unreleased local stiffness, 6n × 6n."""
        return self._sum_helpers("local_stiffness")

    def local_mass(self) -> np.ndarray:
        return self._sum_helpers("local_mass")

    def local_damping(self) -> np.ndarray:
        return self._sum_helpers("local_damping")

    # --- releases ------------------------------------------------------------

    def _release_partition(self, K: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """(kept, released) local indices; released DOFs without stiffness are ignored."""
        released = []
        for node, constraint in enumerate(self.releases):
            for dof in constraint.free_dofs():
                i = node * DOF_PER_NODE + int(dof)
                if K[i, i] != 0.0:
                    released.append(i)
        released = np.array(released, dtype=int)
        kept = np.setdiff1d(np.arange(K.shape[0]), released)
        return kept, released

    def _released_block(self, K: np.ndarray, released: np.ndarray) -> np.ndarray:
        Kbb = K[np.ix_(released, released)]
        if np.linalg.matrix_rank(Kbb) < len(released):
            raise ConfigurationError(f"Releases of {self!r} leave a mechanism inside the element")
        return Kbb

    def condensed_local_stiffness(self) -> np.ndarray:
        """Local stiffness with released DOFs statically condensed out."""
        K = self.local_stiffness()
        kept, released = self._release_partition(K)
        if not len(released):
            return K

        Kbb = self._released_block(K, released)
        Kab = K[np.ix_(kept, released)]
        out = np.zeros_like(K)
        out[np.ix_(kept, kept)] = K[np.ix_(kept, kept)] - Kab @ np.linalg.solve(Kbb, Kab.T)
        return out

    # --- global matrices -----------------------------------------------------

    def global_stiffness(self) -> np.ndarray:
        return self.transform_manager().matrix_local_to_global(self.condensed_local_stiffness())

    def global_mass(self) -> np.ndarray:
        return self.transform_manager().matrix_local_to_global(self.local_mass())

    def global_damping(self) -> np.ndarray:
        return self.transform_manager().matrix_local_to_global(self.local_damping())

    # --- loads ---------------------------------------------------------------

    def add_load(self, load):
        """Attach a UniformLoad or ConcentratedLoad to the element."""
        if not isinstance(load, ELEMENT_LOAD_TYPES):
            raise ConfigurationError(f"Not an element load: {type(load).__name__}")
        self.loads.append(load)
        return load

    def loads_for(self, case: LoadCase) -> list:
        return [load for load in self.loads if load.case == case]

    def load_cases(self) -> List[LoadCase]:
        cases = []
        for load in self.loads:
            if load.case not in cases:
                cases.append(load.case)
        return cases

    def _raw_local_loads(self, loads) -> np.ndarray:
        total = np.zeros((self.node_count, DOF_PER_NODE))
        for load in loads:
            for helper in self.helpers:
                total += helper.equivalent_nodal_loads(self, load)
        return total

    def local_load_vector(self, case: LoadCase) -> np.ndarray:
        """(n, 6) local equivalent nodal loads of all loads in `case`, ignoring releases."""
        return self._raw_local_loads(self.loads_for(case))

    def local_equivalent_nodal_loads(self, load) -> np.ndarray:
        """(n, 6) local equivalent nodal loads of one load, condensed for releases."""
        f = self._raw_local_loads([load]).ravel()
        K = self.local_stiffness()
        kept, released = self._release_partition(K)
        if len(released):
            Kbb = self._released_block(K, released)
            Kab = K[np.ix_(kept, released)]
            f[kept] -= Kab @ np.linalg.solve(Kbb, f[released])
            f[released] = 0.0
        return f.reshape(self.node_count, DOF_PER_NODE)

    def global_equivalent_nodal_loads(self, load) -> np.ndarray:
        """(n, 6) global equivalent nodal loads of one load."""
        return self.transform_manager().local_to_global(self.local_equivalent_nodal_loads(load))

    def global_load_vector(self, case: LoadCase) -> np.ndarray:
        """Sum of the global equivalent nodal loads of all loads in `case`, flattened."""
        total = np.zeros((self.node_count, DOF_PER_NODE))
        for load in self.loads_for(case):
            total += self.global_equivalent_nodal_loads(load)
        return total.ravel()

    # --- results -------------------------------------------------------------

    def local_displacements(self, case: LoadCase) -> np.ndarray:
        """
        (n, 6) element end displacements in local axes for one solved case.

        Released DOFs carry the element's own end displacement, recovered by
        the condensation relation, not the node's.
        """
        tm = self.transform_manager()
        d = tm.global_to_local(np.array([n.get_nodal_displacement(case) for n in self.nodes]))
        d = d.ravel()

        K = self.local_stiffness()
        kept, released = self._release_partition(K)
        if len(released):
            Kbb = self._released_block(K, released)
            f = self.local_load_vector(case).ravel()
            d[released] = np.linalg.solve(Kbb, f[released] - K[np.ix_(released, kept)] @ d[kept])
        return d.reshape(self.node_count, DOF_PER_NODE)

    def _per_case(self, selector: LoadSelector, compute: Callable[[LoadCase], np.ndarray]) -> np.ndarray:
        if isinstance(selector, LoadCombination):
            return selector.combine({case: compute(case) for case in selector})
        return compute(selector)

    def _approximate(self, xi: float, case: LoadCase) -> np.ndarray:
        d = self.local_displacements(case)
        result = np.zeros(DOF_PER_NODE)
        for helper in self.helpers:
            for dof, value in helper.internal_force_at(self, d, xi):
                result[dof] += value
        return result

    def _exact(self, xi: float, case: LoadCase) -> np.ndarray:
        loads = self.loads_for(case)
        points = list(self.internal_force_discretization_points())
        for load in loads:
            points.extend(load.discretization_points())
        if xi in points:
            raise DiscontinuityQueryError(
                f"Internal force of {self!r} is discontinuous at xi={xi}; query at xi ± ε"
            )

        result = self._approximate(xi, case)
        for load in loads:
            for helper in self.helpers:
                for dof, value in helper.load_internal_force_at(self, load, xi):
                    result[dof] += value
        return result

    def internal_force_at(self, xi: float, selector: LoadSelector = DEFAULT_LOAD_CASE) -> np.ndarray:
        """
        Section resultants [N, Vy, Vz, T, My, Mz] at xi from nodal displacements.

        Element loads between the nodes are not accounted for; see
        `exact_internal_force_at`.
        """
        xi = check_iso(xi)
        return self._per_case(selector, lambda case: self._approximate(xi, case))

    def exact_internal_force_at(self, xi: float, selector: LoadSelector = DEFAULT_LOAD_CASE) -> np.ndarray:
        """
        Section resultants [N, Vy, Vz, T, My, Mz] at xi including element loads.

        Raises:
        -------
        DiscontinuityQueryError
            If xi is a node or a load point of the queried case(s)
        """
        xi = check_iso(xi)
        return self._per_case(selector, lambda case: self._exact(xi, case))

    def internal_displacement_at(self, xi: float, selector: LoadSelector = DEFAULT_LOAD_CASE) -> np.ndarray:
        """Local displacement field [u, v, w, θx, θy, θz] at xi, interpolated from the nodes."""
        xi = check_iso(xi)

        def compute(case: LoadCase) -> np.ndarray:
            d = self.local_displacements(case)
            result = np.zeros(DOF_PER_NODE)
            for helper in self.helpers:
                for dof, value in helper.displacement_at(self, d, xi):
                    result[dof] += value
            return result

        return self._per_case(selector, compute)


__all__ = ["BarBehaviour", "BarElement"]
