# barframe/transform.py
"""
LOCAL ↔ GLOBAL TRANSFORMATION
=============================

The orientation of a line element is described by the 3×3 direction
cosine matrix Λ whose ROWS are the element's local x, y, z axes written in
global components:

    v_local  = Λ · v_global
    v_global = Λᵀ · v_local

Local x runs from the start node to the end node. Without a separate
up-vector the local y axis is taken horizontal (perpendicular to x and to
global Z) and local z completes the right-handed triad:

    cx = (cxx, cyx, czx)          unit axial direction
    d  = √(cxx² + cyx²)
    y  = (−cyx/d,  cxx/d, 0)
    z  = (−cxx·czx/d, −cyx·czx/d, d)

When the axis is vertical d → 0 and the closed form is used instead:

    +Z:  x = ( 0, 0, 1),  y = (0, 1, 0),  z = (−1, 0, 0)
    −Z:  x = ( 0, 0, −1), y = (0, 1, 0),  z = ( 1, 0, 0)

Web rotation θ (degrees) then turns y and z about local x:

    y' =  y·cos θ + z·sin θ
    z' = −y·sin θ + z·cos θ

For a 6-DOF-per-node vector, Λ is repeated block-diagonally: once for the
translations and once for the rotations of every node, so that

    T = diag(Λ, Λ, Λ, Λ, ...)        K_global = Tᵀ · K_local · T
"""

from typing import Optional

import numpy as np

from .config import CONFIG
from .errors import ConfigurationError


def transformation_matrix(
    start: np.ndarray,
    end: np.ndarray,
    web_rotation: float = 0.0,
    axis_tolerance: Optional[float] = None,
) -> np.ndarray:
    """
    Direction cosine matrix Λ of a line element (rows = local axes).

    Parameters:
    -----------
    start, end : np.ndarray
        Global coordinates of the first and last node
    web_rotation : float
        Rotation of the section about the local x axis (degrees)
    axis_tolerance : float, optional
        Relative tolerance on the X/Y components for the vertical case
        (default CONFIG.axis_tolerance)

    Returns:
    --------
    np.ndarray
        3×3 orthonormal matrix

    Raises:
    -------
    ConfigurationError
        If the element has zero length
    """
    if axis_tolerance is None:
        axis_tolerance = CONFIG.axis_tolerance

    v = np.asarray(end, dtype=float) - np.asarray(start, dtype=float)
    length = float(np.linalg.norm(v))
    if length <= 0.0:
        raise ConfigurationError(f"Element has zero length (both ends at {tuple(start)})")

    tol = axis_tolerance * length
    if abs(v[0]) <= tol and abs(v[1]) <= tol:
        if v[2] > 0:
            x_axis = np.array([0.0, 0.0, 1.0])
            y_axis = np.array([0.0, 1.0, 0.0])
            z_axis = np.array([-1.0, 0.0, 0.0])
        else:
            x_axis = np.array([0.0, 0.0, -1.0])
            y_axis = np.array([0.0, 1.0, 0.0])
            z_axis = np.array([1.0, 0.0, 0.0])
    else:
        cxx, cyx, czx = v / length
        d = np.sqrt(cxx * cxx + cyx * cyx)
        x_axis = np.array([cxx, cyx, czx])
        y_axis = np.array([-cyx / d, cxx / d, 0.0])
        z_axis = np.array([-cxx * czx / d, -cyx * czx / d, d])

    if web_rotation:
        theta = np.radians(web_rotation)
        s, c = np.sin(theta), np.cos(theta)
        y_axis, z_axis = y_axis * c + z_axis * s, -y_axis * s + z_axis * c

    return np.vstack([x_axis, y_axis, z_axis])


class TransformManager:
    """
    Applies the local/global congruence transform of one element.

    Works on 3-vectors, 6-vectors [F, M] / [u, θ], per-node arrays of shape
    (n, 6) and square matrices of size 6·n.
    """

    def __init__(self, lambda_matrix: np.ndarray):
        self.lambda_matrix = np.asarray(lambda_matrix, dtype=float)

    @classmethod
    def from_transformation_matrix(cls, lambda_matrix: np.ndarray) -> "TransformManager":
        return cls(lambda_matrix)

    def expanded(self, node_count: int) -> np.ndarray:
        """Block-diagonal T of size 6·node_count."""
        return np.kron(np.eye(2 * node_count), self.lambda_matrix)

    # vectors -----------------------------------------------------------

    def global_to_local(self, values: np.ndarray) -> np.ndarray:
        """Transform a 3-vector, a 6-vector or an (n, 6) array into the local frame."""
        return self._apply(values, self.lambda_matrix)

    def local_to_global(self, values: np.ndarray) -> np.ndarray:
        """Transform a 3-vector, a 6-vector or an (n, 6) array into the global frame."""
        return self._apply(values, self.lambda_matrix.T)

    @staticmethod
    def _apply(values: np.ndarray, rotation: np.ndarray) -> np.ndarray:
        values = np.asarray(values, dtype=float)
        # group trailing axis in triples, rotate each triple
        triples = values.reshape(values.shape[:-1] + (-1, 3))
        return (triples @ rotation.T).reshape(values.shape)

    # matrices ----------------------------------------------------------

    def matrix_local_to_global(self, local: np.ndarray) -> np.ndarray:
        """K_global = Tᵀ · K_local · T"""
        T = self.expanded(local.shape[0] // 6)
        return T.T @ local @ T
