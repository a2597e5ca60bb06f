"""
TEST: Modal Analysis of a Cantilever
====================================

First bending frequency of a uniform cantilever:

    f₁ = (1.875104²/2π)·√(EI/(ρAL⁴))

With consistent mass a 10-element mesh is within 0.1%.
"""

import numpy as np
import pytest

from barframe import (
    BarElement,
    ConfigurationError,
    Constraint,
    Material,
    Node,
    Section,
    Structure,
)
from barframe.kernel import DOF_3D_FRAME, DoF

L = 4.0
E = 210e9
G = 81e9
RHO = 7850.0
A = 0.01
IZ = 1.0e-5
IY = 4.0e-5


def make_cantilever(n_elements=10, material=None):
    material = material or Material(E=E, G=G, density=RHO)
    section = Section(A=A, Iy=IY, Iz=IZ, J=2 * IZ)
    structure = Structure()
    xs = np.linspace(0.0, L, n_elements + 1)
    nodes = [structure.add_node(Node(x, 0.0, 0.0)) for x in xs]
    nodes[0].constraints = Constraint.fixed()
    for i, j in zip(nodes[:-1], nodes[1:]):
        structure.add_element(BarElement([i, j], material, section))
    return structure


def test_first_bending_frequency():
    structure = make_cantilever()
    freqs, shapes = structure.modal_analysis(n_modes=3)

    expected = 1.875104**2 / (2 * np.pi) * np.sqrt(E * IZ / (RHO * A * L**4))
    assert freqs[0] == pytest.approx(expected, rel=1e-3)
    # the weak axis governs: the first mode moves along y only
    tip = shapes[-6:, 0]
    assert abs(tip[DoF.DY]) > 0
    assert tip[DoF.DZ] == pytest.approx(0.0, abs=1e-9)
    # second mode: the same shape about the strong axis
    assert freqs[1] == pytest.approx(2 * freqs[0], rel=1e-6)


def test_modes_are_mass_normalised():
    structure = make_cantilever(4)
    freqs, shapes = structure.modal_analysis(n_modes=4)
    M = structure.mass_matrix()
    np.testing.assert_allclose(shapes.T @ M @ shapes, np.eye(4), atol=1e-8)
    assert np.all(np.diff(freqs) >= 0)
    np.testing.assert_array_equal(shapes[:6], 0.0)


def test_rigid_translation_carries_the_full_mass():
    bar = BarElement(
        [Node(0, 0, 0), Node(1.0, 2.0, 2.0)],
        Material(E=E, G=G, density=RHO),
        Section(A=A, Iy=IY, Iz=IZ, J=2 * IZ),
    )
    M = bar.global_mass()
    for dof in (DoF.DX, DoF.DY, DoF.DZ):
        u = np.zeros(12)
        u[[int(dof), 6 + int(dof)]] = 1.0
        assert u @ M @ u == pytest.approx(RHO * A * bar.length, rel=1e-10)


def test_missing_density():
    structure = make_cantilever(2, material=Material(E=E, G=G))
    with pytest.raises(ConfigurationError):
        structure.modal_analysis()


def test_damping_assembly_scatters_element_matrices():
    material = Material(E=E, G=G, density=RHO, damping=0.02 * RHO)
    structure = make_cantilever(3, material=material)
    C = structure.damping_matrix()

    expected = np.zeros_like(C)
    for bar in structure.elements:
        dofs = DOF_3D_FRAME.element_dof_map(bar.node_indices())
        expected[np.ix_(dofs, dofs)] += bar.global_damping()
    np.testing.assert_allclose(C, expected)
    np.testing.assert_allclose(C, 0.02 * structure.mass_matrix())


def test_damping_needs_a_coefficient():
    structure = make_cantilever(2)
    with pytest.raises(ConfigurationError, match="damping"):
        structure.damping_matrix()
