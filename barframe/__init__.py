# barframe - Linear static analysis of skeletal (bar/frame) structures
"""
BARFRAME: Direct Stiffness Analysis of Space Frames
===================================================

This package provides:
- Bar elements combining truss, torsion and Euler-Bernoulli/Timoshenko bending
- Local-to-global transformation with web rotation
- Nodal releases by static condensation
- Multi-load-case linear solve and load combinations
- Internal forces along members, with element loads included exactly

ARCHITECTURE:
-------------
    kernel/         Element-agnostic core (DOF numbering, assembly, solve, modal)
    helpers/        One ElementHelper per physical behaviour
    model.py        Nodes, constraints, materials, sections, load cases
    loads.py        Element loads (uniform, concentrated)
    elements.py     BarElement: helper composition, releases, queries
    transform.py    Direction cosines and the TransformManager
    iso.py          Iso-coordinate to arc-length mapping
    structure.py    Structure: solve entry point
    post.py         End forces, member diagrams, result tables
"""

from .config import CONFIG, SolverConfig
from .elements import BarBehaviour, BarElement
from .errors import (
    ConfigurationError,
    DiscontinuityQueryError,
    StructuralSingularityError,
    UnsupportedConfiguration,
)
from .kernel import DoF
from .loads import ConcentratedLoad, CoordinateSystem, UniformLoad
from .model import (
    Constraint,
    DEFAULT_LOAD_CASE,
    DofConstraint,
    LoadCase,
    LoadCombination,
    Material,
    Node,
    Section,
)
from .structure import StaticResult, Structure

__version__ = "0.1.0"
