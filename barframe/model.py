# barframe/model.py
"""
MODEL DEFINITIONS: Nodes, Constraints, Materials, Sections, Load Cases
======================================================================

PURPOSE:
--------
This module defines the basic data structures for space frame analysis:
- Constraint: per-DOF support (or element release) state for the 6 DOFs
- Material / Section: plain scalar inputs consumed by the element helpers
- LoadCase / LoadCombination: independent solves and their superposition
- NodalLoad: a global force/moment applied at a node
- Node: a point in 3D space that also owns its solved results

ENGINEERING CONTEXT:
--------------------
Each node has 6 DOFs (ux, uy, uz, rx, ry, rz). A DOF is either FREE,
FIXED (zero displacement) or PRESCRIBED (a known settlement per load case).
The same Constraint type describes an element's connection to a node,
where FREE means "released" (a hinge local to that connection).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional, Tuple, Union

import numpy as np

from .kernel.dof import DoF, DOF_PER_NODE


class DofConstraint(Enum):
    """State of a single DOF."""
    FREE = "free"
    FIXED = "fixed"
    PRESCRIBED = "prescribed"

    @property
    def is_restrained(self) -> bool:
        return self is not DofConstraint.FREE


@dataclass(frozen=True)
class Constraint:
    """
    Constraint state of the six DOFs of a node (or of an element end).

    Examples:
    ---------
    >>> Constraint.fixed().is_restrained(DoF.RZ)
    True
    >>> Constraint.pinned().is_restrained(DoF.RZ)
    False
    """
    dx: DofConstraint = DofConstraint.FREE
    dy: DofConstraint = DofConstraint.FREE
    dz: DofConstraint = DofConstraint.FREE
    rx: DofConstraint = DofConstraint.FREE
    ry: DofConstraint = DofConstraint.FREE
    rz: DofConstraint = DofConstraint.FREE

    def as_tuple(self) -> Tuple[DofConstraint, ...]:
        return (self.dx, self.dy, self.dz, self.rx, self.ry, self.rz)

    def __getitem__(self, dof: int) -> DofConstraint:
        return self.as_tuple()[int(dof)]

    def is_restrained(self, dof: int) -> bool:
        return self[dof].is_restrained

    def restrained_dofs(self) -> List[DoF]:
        return [d for d in DoF if self.is_restrained(d)]

    def free_dofs(self) -> List[DoF]:
        return [d for d in DoF if not self.is_restrained(d)]

    @classmethod
    def from_flags(cls, flags: str, state: DofConstraint = DofConstraint.FIXED) -> "Constraint":
        """
        Build from a 6-character string, '1' = `state`, '0' = free.

        >>> Constraint.from_flags("111000") == Constraint.pinned()
        True
        """
        if len(flags) != DOF_PER_NODE or set(flags) - {"0", "1"}:
            raise ValueError(f"Constraint flags must be 6 characters of 0/1, got {flags!r}")
        return cls(*[state if c == "1" else DofConstraint.FREE for c in flags])

    @classmethod
    def fixed(cls) -> "Constraint":
        return cls.from_flags("111111")

    @classmethod
    def free(cls) -> "Constraint":
        return cls()

    @classmethod
    def pinned(cls) -> "Constraint":
        """Translations fixed, rotations free."""
        return cls.from_flags("111000")

    @classmethod
    def moment_release(cls) -> "Constraint":
        """Element-end connection transmitting forces and torsion but no bending moment."""
        return cls.from_flags("111100")


@dataclass(frozen=True)
class Material:
    """
    Linear elastic material.

    Parameters:
    -----------
    E : float
        Young's modulus (Pa)
    G : float, optional
        Shear modulus (Pa); needed by shaft and Timoshenko behaviour
    density : float, optional
        Mass density (kg/m³); needed for mass matrices
    damping : float, optional
        Viscous damping coefficient per unit volume; needed for damping matrices
    """
    E: float
    G: Optional[float] = None
    density: Optional[float] = None
    damping: Optional[float] = None


@dataclass(frozen=True)
class Section:
    """
    Uniform cross-section properties.

    Parameters:
    -----------
    A : float
        Area (m²)
    Iy, Iz : float, optional
        Second moments of area about local y and z (m⁴).
        Iz governs bending in the local x-y plane, Iy in the x-z plane.
    J : float, optional
        Torsional constant (m⁴)
    shear_factor_y, shear_factor_z : float, optional
        Shear correction (shape) factors k, shear area = k·A, for shear
        along local y and z. Required by Timoshenko behaviour only.
    """
    A: float
    Iy: Optional[float] = None
    Iz: Optional[float] = None
    J: Optional[float] = None
    shear_factor_y: Optional[float] = None
    shear_factor_z: Optional[float] = None


@dataclass(frozen=True)
class LoadCase:
    """An independent linear load case."""
    name: str = "default"
    load_type: str = "default"


DEFAULT_LOAD_CASE = LoadCase()


class LoadCombination(dict):
    """
    Scalar-weighted combination of load cases: {LoadCase: factor}.

    Results are never re-solved; they are superposed from the solved cases.

    >>> dead, live = LoadCase("dead"), LoadCase("live")
    >>> combo = LoadCombination({dead: 2.0, live: 0.5})
    >>> combo.combine({dead: np.ones(2), live: np.ones(2)}).tolist()
    [2.5, 2.5]
    """

    def combine(self, values: Mapping[LoadCase, np.ndarray]) -> np.ndarray:
        """Weighted sum of per-case arrays."""
        if not self:
            raise ValueError("Load combination is empty")
        total = None
        for case, factor in self.items():
            if case not in values:
                raise KeyError(f"No result for load case {case.name!r}")
            term = factor * np.asarray(values[case], dtype=float)
            total = term if total is None else total + term
        return total


LoadSelector = Union[LoadCase, LoadCombination]


@dataclass
class NodalLoad:
    """Concentrated global force/moment [Fx, Fy, Fz, Mx, My, Mz] at a node."""
    force: np.ndarray
    case: LoadCase = DEFAULT_LOAD_CASE

    def __post_init__(self):
        self.force = np.asarray(self.force, dtype=float)
        if self.force.shape != (DOF_PER_NODE,):
            raise ValueError(f"Nodal load needs 6 components, got shape {self.force.shape}")


@dataclass(eq=False)
class Node:
    """
    A node (joint) in 3D space.

    Parameters:
    -----------
    x, y, z : float
        Global coordinates (m)
    constraints : Constraint
        Support conditions (default: free)
    label : str, optional
        Name for reporting

    Results are written by the solver into `displacements` and
    `reactions`, keyed by LoadCase, as 6-vectors in global axes.
    """
    x: float
    y: float
    z: float
    constraints: Constraint = field(default_factory=Constraint.free)
    label: Optional[str] = None
    loads: List[NodalLoad] = field(default_factory=list)
    settlements: Dict[LoadCase, np.ndarray] = field(default_factory=dict)
    index: int = field(default=-1, repr=False)
    displacements: Dict[LoadCase, np.ndarray] = field(default_factory=dict, repr=False)
    reactions: Dict[LoadCase, np.ndarray] = field(default_factory=dict, repr=False)

    @property
    def location(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)

    def add_load(self, force, case: LoadCase = DEFAULT_LOAD_CASE) -> NodalLoad:
        load = NodalLoad(force, case)
        self.loads.append(load)
        return load

    def set_settlement(self, values, case: LoadCase = DEFAULT_LOAD_CASE) -> None:
        """Prescribed displacement values, read at PRESCRIBED DOFs only."""
        values = np.asarray(values, dtype=float)
        if values.shape != (DOF_PER_NODE,):
            raise ValueError(f"Settlement needs 6 components, got shape {values.shape}")
        self.settlements[case] = values

    def prescribed_values(self, case: LoadCase) -> np.ndarray:
        values = np.zeros(DOF_PER_NODE)
        settlement = self.settlements.get(case)
        for dof in DoF:
            if self.constraints[dof] is DofConstraint.PRESCRIBED and settlement is not None:
                values[dof] = settlement[dof]
        return values

    def load_vector(self, case: LoadCase) -> np.ndarray:
        total = np.zeros(DOF_PER_NODE)
        for load in self.loads:
            if load.case == case:
                total += load.force
        return total

    def get_nodal_displacement(self, selector: LoadSelector = DEFAULT_LOAD_CASE) -> np.ndarray:
        return _lookup(self.displacements, selector, "displacement")

    def get_support_reaction(self, selector: LoadSelector = DEFAULT_LOAD_CASE) -> np.ndarray:
        return _lookup(self.reactions, selector, "reaction")


def _lookup(results: Dict[LoadCase, np.ndarray], selector: LoadSelector, what: str) -> np.ndarray:
    if isinstance(selector, LoadCombination):
        return selector.combine(results)
    if selector not in results:
        raise KeyError(f"No {what} for load case {selector.name!r}; solve the structure first")
    return results[selector]
