# barframe/kernel/solve.py
"""Linear system solver with boundary conditions and mechanism detection."""

import logging
from typing import Optional

import numpy as np
import scipy.linalg

from ..config import CONFIG
from ..errors import StructuralSingularityError

logger = logging.getLogger(__name__)


def solve_linear(
    K: np.ndarray,
    F: np.ndarray,
    fixed_dofs: list[int],
    prescribed: Optional[np.ndarray] = None,
    cond_limit: Optional[float] = None,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Solve K·d = F with restrained DOFs enforced by partitioning.

    F may hold several load cases as columns; they share a single
    factorisation of K_ff.

        K_ff·d_f = F_f − K_fr·d_r
        R_r      = K_rf·d_f + K_rr·d_r − F_r

    Args:
        K: Global stiffness matrix (ndof x ndof)
        F: Global load vector (ndof,) or matrix (ndof, n_cases)
        fixed_dofs: Restrained DOF indices
        prescribed: Restrained displacement values, same shape as F
            (only entries at fixed_dofs are read). None means zero.
        cond_limit: Max condition number of K_ff (default CONFIG.cond_limit)

    Returns:
        d: Displacement vector/matrix, same shape as F
        R: Reactions, same shape as F, zero at free DOFs
        free: Array of free DOF indices

    Raises:
        StructuralSingularityError: If K_ff is singular or cond > cond_limit
    """
    if cond_limit is None:
        cond_limit = CONFIG.cond_limit

    ndof = K.shape[0]
    F = np.asarray(F, dtype=float)

    # Partition DOFs
    fixed = np.array(sorted(set(fixed_dofs)), dtype=int)
    fixed_set = set(fixed.tolist())
    free = np.array([i for i in range(ndof) if i not in fixed_set], dtype=int)

    d = np.zeros_like(F)
    if prescribed is not None and len(fixed):
        d[fixed] = np.asarray(prescribed, dtype=float)[fixed]

    if len(free):
        Kff = K[np.ix_(free, free)]
        Ff = F[free] - K[np.ix_(free, fixed)] @ d[fixed]

        # Check conditioning
        cond = np.linalg.cond(Kff)
        if not np.isfinite(cond) or cond > cond_limit:
            raise StructuralSingularityError(
                f"Structure is under-restrained or unstable (cond={cond:.2e}, limit {cond_limit:.0e}). "
                f"Check supports and element releases."
            )
        logger.info("Solving %d free DOFs (%d restrained), cond(K_ff)=%.2e", len(free), len(fixed), cond)

        lu = scipy.linalg.lu_factor(Kff)
        d[free] = scipy.linalg.lu_solve(lu, Ff)
    else:
        logger.info("All %d DOFs restrained, nothing to solve", ndof)

    # Reactions at restrained DOFs: R = K·d − F
    R = np.zeros_like(F)
    if len(fixed):
        R[fixed] = K[fixed] @ d - F[fixed]

    return d, R, free
