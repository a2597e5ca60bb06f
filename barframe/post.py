# barframe/post.py
"""
POST-PROCESSING: End Forces, Member Diagrams, Result Tables
===========================================================

Turns solved node results into engineering quantities:

- element_end_forces_local: member end forces f = k·d − f_eq (local axes)
- member_diagram:           sampled N, Vy, Vz, T, My, Mz along a member
- nodal_results_frame:      displacements and reactions as a DataFrame

SIGN CONVENTIONS:
-----------------
End forces are the forces the nodes exert ON the element, in local axes.
Diagram resultants are section forces (part after the cut acting on the
part before it):

- Positive N: Tension
- Positive Mz: Sagging for a load acting in local −y
"""

from dataclasses import dataclass
from typing import List, Optional

import numpy as np
import pandas as pd

from .config import CONFIG
from .elements import BarElement
from .model import DEFAULT_LOAD_CASE, LoadCase, LoadCombination, LoadSelector
from .structure import Structure

DISPLACEMENT_COLUMNS = ["ux", "uy", "uz", "rx", "ry", "rz"]
REACTION_COLUMNS = ["Fx", "Fy", "Fz", "Mx", "My", "Mz"]
RESULTANT_COLUMNS = ["N", "Vy", "Vz", "T", "My", "Mz"]


@dataclass
class DiagramPoint:
    """A single point on a member force diagram."""
    xi: float           # Iso coordinate
    x_local: float      # Arc length from the start node (m)
    N: float            # Axial force (N)
    Vy: float           # Shear along local y (N)
    Vz: float           # Shear along local z (N)
    T: float            # Torsion (N·m)
    My: float           # Bending moment about local y (N·m)
    Mz: float           # Bending moment about local z (N·m)


def element_end_forces_local(element: BarElement, case: LoadCase = DEFAULT_LOAD_CASE) -> np.ndarray:
    """
    Element end forces in LOCAL coordinates for a solved load case.

    The process:
    1. Element end displacements in local axes (released DOFs recovered)
    2. f = k_local × d
    3. Subtract the equivalent nodal loads of the element loads

    Returns:
    --------
    np.ndarray
        Shape (n, 6): [Fx, Fy, Fz, Mx, My, Mz] acting on the element at each node
    """
    d = element.local_displacements(case).ravel()
    f = element.local_stiffness() @ d - element.local_load_vector(case).ravel()
    return f.reshape(element.node_count, -1)


def _jump_points(element: BarElement, selector: LoadSelector) -> List[float]:
    cases = list(selector) if isinstance(selector, LoadCombination) else [selector]
    points = list(element.internal_force_discretization_points())
    for case in cases:
        for load in element.loads_for(case):
            points.extend(load.discretization_points())
    return points


def member_diagram(
    element: BarElement,
    selector: LoadSelector = DEFAULT_LOAD_CASE,
    n_points: Optional[int] = None,
    exact: bool = True,
) -> List[DiagramPoint]:
    """
    Sample the internal forces of a member at evenly spaced iso coordinates.

    With `exact=True` element loads are included; samples that fall on a
    node or a load point are moved inside by CONFIG.discontinuity_offset,
    towards the start node (towards the end node at ξ = −1).

    Parameters:
    -----------
    element : BarElement
    selector : LoadCase or LoadCombination
    n_points : int, optional
        Number of samples (default CONFIG.diagram_points)
    exact : bool
        Use exact_internal_force_at instead of internal_force_at

    Returns:
    --------
    List[DiagramPoint]
    """
    if n_points is None:
        n_points = CONFIG.diagram_points
    offset = CONFIG.discontinuity_offset
    jumps = _jump_points(element, selector) if exact else []

    points = []
    for xi in np.linspace(-1.0, 1.0, n_points):
        xi = float(xi)
        if xi in jumps:
            xi = xi + offset if xi == -1.0 else xi - offset
        if exact:
            forces = element.exact_internal_force_at(xi, selector)
        else:
            forces = element.internal_force_at(xi, selector)
        points.append(DiagramPoint(xi, element.iso_to_local(xi), *(float(v) for v in forces)))
    return points


def nodal_results_frame(structure: Structure, selector: LoadSelector = DEFAULT_LOAD_CASE) -> pd.DataFrame:
    """
    Nodal displacements and support reactions of a solved structure.

    One row per node (indexed by label, or node index when unlabeled),
    columns ux..rz for displacements and Fx..Mz for reactions, global axes.
    """
    rows = []
    index = []
    for node in structure.nodes:
        d = node.get_nodal_displacement(selector)
        r = node.get_support_reaction(selector)
        rows.append(np.concatenate([d, r]))
        index.append(node.label if node.label is not None else node.index)

    df = pd.DataFrame(rows, index=index, columns=DISPLACEMENT_COLUMNS + REACTION_COLUMNS)
    df.index.name = "node"
    return df


def max_abs_resultants(points: List[DiagramPoint]) -> pd.Series:
    """Largest absolute value of every resultant over a sampled diagram."""
    df = pd.DataFrame([p.__dict__ for p in points])
    return df[RESULTANT_COLUMNS].abs().max()
