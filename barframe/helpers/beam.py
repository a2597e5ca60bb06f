# barframe/helpers/beam.py
"""
BEAM BENDING: Euler-Bernoulli and Timoshenko Closed Forms
=========================================================

PURPOSE:
--------
Bending of a prismatic 2-node bar in one principal plane. The same code
serves both theories: Euler-Bernoulli is the φ = 0 case of Timoshenko,
where

    φ = 12·E·I / (k·G·A·L²)

is the ratio of bending to shear flexibility (k = shear correction factor).

STIFFNESS (direction Y, DOFs [v₁, θz₁, v₂, θz₂]):
-------------------------------------------------

                     EI      [ 12     6L       -12    6L     ]
    k_local = ─────────── ×  [ 6L   (4+φ)L²   -6L   (2-φ)L²  ]
              L³·(1 + φ)     [-12    -6L        12   -6L     ]
                             [ 6L   (2-φ)L²   -6L   (4+φ)L²  ]

For direction Z the DOFs are [w₁, θy₁, w₂, θy₂]. With the right-hand rule
θy = −dw/dx, so the Y matrix is congruently transformed by

    S = diag(1, −1, 1, −1),      k_Z = S · k_Y · S

SHAPE FUNCTIONS (s = x/L):
--------------------------
Deflection and section rotation use the interdependent φ-shape functions,
which reduce to the Hermite cubics for φ = 0:

    N₁ = (1 − 3s² + 2s³ + φ(1−s)) / (1+φ)
    N₂ = L(s − 2s² + s³ + φ/2·(s − s²)) / (1+φ)
    N₃ = (3s² − 2s³ + φs) / (1+φ)
    N₄ = L(−s² + s³ − φ/2·(s − s²)) / (1+φ)

Consistent mass, damping and equivalent nodal loads are integrals of
these polynomials, evaluated exactly with numpy.polynomial.
"""

from enum import Enum
from typing import List, Tuple

import numpy as np
from numpy.polynomial import Polynomial

from ..errors import UnsupportedConfiguration
from ..kernel.dof import DoF
from ..loads import ConcentratedLoad, UniformLoad
from .base import ElementHelper, require

# congruence between the Y and Z bending planes
_Z_SIGNS = np.array([1.0, -1.0, 1.0, -1.0])


class BeamDirection(Enum):
    """Local axis along which the beam deflects."""
    Y = "y"
    Z = "z"


def _deflection_shapes(L: float, phi: float) -> List[Polynomial]:
    s = Polynomial([0.0, 1.0])
    c = 1.0 / (1.0 + phi)
    return [
        c * (1 - 3 * s**2 + 2 * s**3 + phi * (1 - s)),
        c * L * (s - 2 * s**2 + s**3 + 0.5 * phi * (s - s**2)),
        c * (3 * s**2 - 2 * s**3 + phi * s),
        c * L * (-s**2 + s**3 - 0.5 * phi * (s - s**2)),
    ]


def _rotation_shapes(L: float, phi: float) -> List[Polynomial]:
    s = Polynomial([0.0, 1.0])
    c = 1.0 / (1.0 + phi)
    return [
        c * 6 * (s**2 - s) / L,
        c * (1 - 4 * s + 3 * s**2 + phi * (1 - s)),
        -c * 6 * (s**2 - s) / L,
        c * (-2 * s + 3 * s**2 + phi * s),
    ]


def _integral(poly: Polynomial, a: float, b: float) -> float:
    antiderivative = poly.integ()
    return float(antiderivative(b) - antiderivative(a))


class _BeamHelper(ElementHelper):
    """Shared closed forms of both bending theories."""

    def __init__(self, direction: BeamDirection = BeamDirection.Y):
        self.direction = BeamDirection(direction)
        if self.direction is BeamDirection.Y:
            self.node_dofs = (DoF.DY, DoF.RZ)
            self.force_axes = (1,)
            self.moment_axes = (2,)
            self._signs = np.ones(4)
        else:
            self.node_dofs = (DoF.DZ, DoF.RY)
            self.force_axes = (2,)
            self.moment_axes = (1,)
            self._signs = _Z_SIGNS

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.direction.name})"

    # --- section data --------------------------------------------------------

    def _inertia(self, element) -> float:
        if self.direction is BeamDirection.Y:
            return require(element.section.Iz, "section.Iz", self)
        return require(element.section.Iy, "section.Iy", self)

    def shear_parameter(self, element) -> float:
        """φ = 12EI / (kGAL²); zero for Euler-Bernoulli."""
        return 0.0

    def _flip(self, matrix: np.ndarray) -> np.ndarray:
        return matrix * np.outer(self._signs, self._signs)

    # --- matrices ------------------------------------------------------------

    def local_stiffness(self, element) -> np.ndarray:
        L = self.two_node_length(element)
        EI = require(element.material.E, "material.E", self) * self._inertia(element)
        phi = self.shear_parameter(element)

        k = EI / (L**3 * (1.0 + phi)) * np.array([
            [12.0, 6 * L, -12.0, 6 * L],
            [6 * L, (4 + phi) * L**2, -6 * L, (2 - phi) * L**2],
            [-12.0, -6 * L, 12.0, -6 * L],
            [6 * L, (2 - phi) * L**2, -6 * L, (4 + phi) * L**2],
        ])
        return self._flip(k)

    def _consistent(self, element, coefficient: float) -> np.ndarray:
        L = self.two_node_length(element)
        shapes = _deflection_shapes(L, self.shear_parameter(element))
        m = np.array([[_integral(a * b, 0.0, 1.0) for b in shapes] for a in shapes])
        return self._flip(coefficient * L * m)

    def local_mass(self, element) -> np.ndarray:
        rho = require(element.material.density, "material.density", self)
        return self._consistent(element, rho * element.section.A)

    def local_damping(self, element) -> np.ndarray:
        c = require(element.material.damping, "material.damping", self)
        return self._consistent(element, c * element.section.A)

    # --- loads ---------------------------------------------------------------

    def equivalent_nodal_loads(self, element, load) -> np.ndarray:
        L = self.two_node_length(element)
        phi = self.shear_parameter(element)
        force_axis = self.force_axes[0]
        moment_axis = self.moment_axes[0]

        if isinstance(load, UniformLoad):
            q = load.local_intensity(element)[force_axis]
            a, b = load.local_span(element)
            shapes = _deflection_shapes(L, phi)
            f = q * L * np.array([_integral(n, a / L, b / L) for n in shapes])
            return self.scatter(element, self._signs * f)

        if isinstance(load, ConcentratedLoad):
            force, moment = load.local_components(element)
            s = load.local_position(element) / L
            f = force[force_axis] * np.array([n(s) for n in _deflection_shapes(L, phi)])
            rotations = np.array([n(s) for n in _rotation_shapes(L, phi)])
            # θy = −Σ Sᵢ Nθᵢ dᵢ, so My works against the Y-plane rotation
            moment_sign = 1.0 if self.direction is BeamDirection.Y else -1.0
            f = f + moment_sign * moment[moment_axis] * rotations
            return self.scatter(element, self._signs * f)

        return np.zeros((element.node_count, 6))

    # --- field ---------------------------------------------------------------

    def displacement_at(self, element, local_displacements, xi) -> List[Tuple[DoF, float]]:
        L = self.two_node_length(element)
        phi = self.shear_parameter(element)
        s = element.iso_to_local(xi) / L
        d = self._signs * self.gather(element, local_displacements)

        deflection = sum(n(s) * di for n, di in zip(_deflection_shapes(L, phi), d))
        rotation = sum(n(s) * di for n, di in zip(_rotation_shapes(L, phi), d))
        if self.direction is BeamDirection.Z:
            rotation = -rotation
        return [(self.node_dofs[0], float(deflection)), (self.node_dofs[1], float(rotation))]


class EulerBernoulliBeamHelper(_BeamHelper):
    """Slender-beam bending, plane sections stay normal to the axis."""


class TimoshenkoBeamHelper(_BeamHelper):
    """
    Bending with first-order shear deformation.

    Needs the shear modulus G and the shear correction factor for the
    deflection direction (`shear_factor_y` for Y, `shear_factor_z` for Z).
    There is no silent fallback to Euler-Bernoulli.
    """

    def shear_parameter(self, element) -> float:
        G = element.material.G
        if self.direction is BeamDirection.Y:
            k = element.section.shear_factor_y
        else:
            k = element.section.shear_factor_z
        if G is None or k is None:
            raise UnsupportedConfiguration(
                f"{self!r} needs material.G and section.shear_factor_{self.direction.value}"
            )

        L = self.two_node_length(element)
        EI = element.material.E * self._inertia(element)
        return 12.0 * EI / (k * G * element.section.A * L**2)
