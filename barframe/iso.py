# barframe/iso.py
"""
ISO-COORDINATE ↔ ARC-LENGTH MAPPING
===================================

Points along a line element are addressed by the iso coordinate ξ:
−1 at the start node, +1 at the end node, with the n nodes at equal
steps of ξ in between:

    ξᵢ = −1 + 2·i / (n − 1)

The local coordinate x is the arc length measured from the start node.
x(ξ) is the degree-(n−1) polynomial through the n pairs (ξᵢ, xᵢ), found by
solving the Vandermonde system once:

    [ξ₀ⁿ⁻¹ … ξ₀ 1] [aₙ₋₁]   [x₀]
    [  ⋮        ⋮ ] [ ⋮  ] = [ ⋮ ]
    [ξₙ₋₁ⁿ⁻¹ …  1] [a₀  ]   [xₙ₋₁]

For a straight 2-node element this is x = L·(ξ + 1)/2.
"""

from typing import Optional, Sequence

import numpy as np

from .config import CONFIG
from .errors import ConfigurationError


def node_iso_coordinates(node_count: int) -> np.ndarray:
    """Iso coordinates of the nodes of an element with `node_count` nodes."""
    if node_count < 2:
        raise ConfigurationError(f"A line element needs at least 2 nodes, got {node_count}")
    return np.linspace(-1.0, 1.0, node_count)


def check_iso(xi: float) -> float:
    """Validate an iso coordinate, returning it as float."""
    xi = float(xi)
    if not -1.0 <= xi <= 1.0:
        raise ConfigurationError(f"Iso coordinate must lie in [-1, 1], got {xi}")
    return xi


def fit_iso_to_local(
    arc_lengths: Sequence[float],
    tolerance: Optional[float] = None,
) -> np.poly1d:
    """
    Fit x(ξ) through the node arc lengths.

    Parameters:
    -----------
    arc_lengths : Sequence[float]
        Distance of every node from the start node, in node order
    tolerance : float, optional
        Max allowed residual at the nodes (default CONFIG.iso_fit_tolerance,
        scaled by the element length)

    Returns:
    --------
    np.poly1d
        x(ξ), highest power first
    """
    if tolerance is None:
        tolerance = CONFIG.iso_fit_tolerance

    xs = np.asarray(arc_lengths, dtype=float)
    xis = node_iso_coordinates(len(xs))

    vandermonde = np.vander(xis, len(xs))
    coefficients = np.linalg.solve(vandermonde, xs)
    poly = np.poly1d(coefficients)

    residual = np.max(np.abs(poly(xis) - xs))
    scale = max(abs(xs[-1]), 1.0)
    if residual > tolerance * scale:
        raise ConfigurationError(f"Iso-to-local fit failed (residual {residual:.2e})")

    return poly


def local_to_iso(poly: np.poly1d, x: float) -> float:
    """
    Invert x(ξ): the iso coordinate in [-1, 1] at arc length x.

    Raises:
    -------
    ConfigurationError
        If no real root lies inside the element
    """
    if poly.order == 1:
        return check_iso((x - poly.coeffs[1]) / poly.coeffs[0])

    roots = (poly - x).roots
    candidates = [
        float(r.real) for r in np.atleast_1d(roots)
        if abs(r.imag) < 1e-12 and -1.0 - 1e-12 <= r.real <= 1.0 + 1e-12
    ]
    if not candidates:
        raise ConfigurationError(f"Local coordinate {x} is outside the element")
    return float(np.clip(min(candidates), -1.0, 1.0))
