# barframe/kernel/modal.py
"""Modal analysis: natural frequencies of the restrained structure."""

import numpy as np
from scipy.linalg import eigh
from typing import List, Optional, Tuple

from ..errors import StructuralSingularityError


def natural_frequencies(
    K: np.ndarray,
    M: np.ndarray,
    fixed_dofs: List[int],
    n_modes: Optional[int] = 5
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Compute natural frequencies and mode shapes.

    Solves the generalized eigenvalue problem: K·φ = ω²·M·φ

    Args:
        K: Global stiffness matrix
        M: Global (consistent) mass matrix
        fixed_dofs: Constrained DOF indices
        n_modes: Number of modes to return (None = all)

    Returns:
        frequencies_hz: Natural frequencies in Hz, sorted ascending
        mode_shapes: Mode shapes expanded to all DOFs (ndof x n_modes),
            zero at fixed DOFs, mass-normalized

    Raises:
        ValueError: If there are no free DOFs
        StructuralSingularityError: If the reduced mass matrix is not
            positive definite (free DOFs without mass)
    """
    ndof = K.shape[0]

    # Partition to free DOFs
    fixed = set(fixed_dofs)
    free = np.array([i for i in range(ndof) if i not in fixed], dtype=int)

    if len(free) == 0:
        raise ValueError("No free DOFs - cannot compute modes")

    Kff = K[np.ix_(free, free)]
    Mff = M[np.ix_(free, free)]

    n_free = len(free)
    n_actual = n_free if n_modes is None else min(n_modes, n_free)

    try:
        eigenvalues, eigenvectors = eigh(Kff, Mff, subset_by_index=[0, n_actual - 1])
    except np.linalg.LinAlgError as e:
        raise StructuralSingularityError(
            f"Mass matrix is not positive definite on the free DOFs: {e}"
        ) from e

    # ω² = eigenvalue, f = ω / (2π); tiny negatives are round-off
    omega = np.sqrt(np.maximum(eigenvalues, 0))
    frequencies_hz = omega / (2.0 * np.pi)

    shapes = np.zeros((ndof, n_actual))
    shapes[free] = eigenvectors

    return frequencies_hz, shapes
