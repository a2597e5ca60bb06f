# barframe/config.py
"""
Solver configuration and defaults.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class SolverConfig:
    """Global solver configuration."""

    # Max condition number of K_ff before the structure counts as a mechanism
    cond_limit: float = 1e12

    # Relative tolerance on the X/Y components of a vertical element axis
    axis_tolerance: float = 1e-9

    # Max residual of the iso-to-local polynomial at the nodes
    iso_fit_tolerance: float = 1e-10

    # Threads used for per-element matrices (None = serial)
    max_workers: Optional[int] = None

    # Diagram sampling
    diagram_points: int = 21
    discontinuity_offset: float = 1e-9


# Global config instance
CONFIG = SolverConfig()
