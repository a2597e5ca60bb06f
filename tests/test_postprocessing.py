# File: tests/test_postprocessing.py
"""
TEST: Postprocessing End Forces and Diagrams
============================================

This test validates that element_end_forces_local and member_diagram
recover internal forces from the solved displacements. We test:

1. Simple cantilever with point load (known solution)
2. Simply supported beam with UDL (end forces balance the load)
3. Diagram sampling around discontinuities
4. Tabular results with pandas
"""

import numpy as np
import pandas as pd
import pytest

from barframe import (
    CONFIG,
    BarElement,
    ConcentratedLoad,
    Constraint,
    Material,
    Node,
    Section,
    Structure,
    UniformLoad,
)
from barframe.kernel import DoF
from barframe.post import (
    RESULTANT_COLUMNS,
    element_end_forces_local,
    max_abs_resultants,
    member_diagram,
    nodal_results_frame,
)

L = 3.0
E = 210e9
I = 8.0e-6
A = 0.01
STEEL = Material(E=E, G=81e9)
SECTION = Section(A=A, Iy=I, Iz=I, J=2 * I)


def make_cantilever(P=1000.0):
    structure = Structure()
    a = structure.add_node(Node(0.0, 0.0, 0.0, Constraint.fixed(), label="root"))
    b = structure.add_node(Node(L, 0.0, 0.0, label="tip"))
    bar = structure.add_element(BarElement([a, b], STEEL, SECTION))
    b.add_load([0, -P, 0, 0, 0, 0])
    structure.solve()
    return structure, bar


def test_cantilever_end_forces():
    """
    Cantilever with a downward tip load P.

    VERIFY:
        - Fixed end shear force equals P (upward, on the element)
        - Fixed end moment equals P·L
        - Tip carries the load and no moment
    """
    P = 1000.0
    structure, bar = make_cantilever(P)
    f = element_end_forces_local(bar)

    assert f.shape == (2, 6)
    assert f[0, DoF.DY] == pytest.approx(P, rel=1e-10)
    assert f[0, DoF.RZ] == pytest.approx(P * L, rel=1e-10)
    assert f[1, DoF.DY] == pytest.approx(-P, rel=1e-10)
    assert f[1, DoF.RZ] == pytest.approx(0.0, abs=1e-6)


def test_udl_end_forces_balance_the_load():
    """Simply supported beam: end shears take wL/2 each, end moments vanish."""
    w = 2000.0
    structure = Structure()
    a = structure.add_node(Node(0.0, 0.0, 0.0, Constraint.from_flags("111100")))
    b = structure.add_node(Node(L, 0.0, 0.0, Constraint.from_flags("011100")))
    bar = structure.add_element(BarElement([a, b], STEEL, SECTION))
    bar.add_load(UniformLoad([0, -1, 0], w))
    structure.solve()

    f = element_end_forces_local(bar)
    assert f[0, DoF.DY] == pytest.approx(w * L / 2, rel=1e-10)
    assert f[1, DoF.DY] == pytest.approx(w * L / 2, rel=1e-10)
    assert f[:, DoF.RZ] == pytest.approx([0.0, 0.0], abs=1e-6)

    # equilibrium: end forces plus the load resultant sum to zero
    assert f[:, DoF.DY].sum() - w * L == pytest.approx(0.0, abs=1e-6)


def test_member_diagram_sampling():
    w = 2000.0
    structure = Structure()
    a = structure.add_node(Node(0.0, 0.0, 0.0, Constraint.from_flags("111100")))
    b = structure.add_node(Node(L, 0.0, 0.0, Constraint.from_flags("011100")))
    bar = structure.add_element(BarElement([a, b], STEEL, SECTION))
    bar.add_load(UniformLoad([0, -1, 0], w))
    structure.solve()

    points = member_diagram(bar, n_points=5)
    assert len(points) == 5
    # the end samples are moved inside the element
    assert points[0].xi == pytest.approx(-1.0 + CONFIG.discontinuity_offset)
    assert points[-1].xi == pytest.approx(1.0 - CONFIG.discontinuity_offset)
    assert points[2].xi == 0.0
    assert points[2].x_local == pytest.approx(L / 2)
    assert points[2].Mz == pytest.approx(w * L**2 / 8, rel=1e-10)
    assert points[0].Mz == pytest.approx(0.0, abs=1e-3)

    # the approximate diagram samples the nodes directly
    approximate = member_diagram(bar, n_points=3, exact=False)
    assert [p.xi for p in approximate] == [-1.0, 0.0, 1.0]


def test_diagram_steps_around_a_point_load():
    P = 3000.0
    structure = Structure()
    a = structure.add_node(Node(0.0, 0.0, 0.0, Constraint.from_flags("111100")))
    b = structure.add_node(Node(L, 0.0, 0.0, Constraint.from_flags("011100")))
    bar = structure.add_element(BarElement([a, b], STEEL, SECTION))
    bar.add_load(ConcentratedLoad([0, -P, 0], xi=0.0))
    structure.solve()

    points = member_diagram(bar, n_points=3)
    assert points[1].xi == pytest.approx(-CONFIG.discontinuity_offset)
    assert points[1].Mz == pytest.approx(P * L / 4, rel=1e-6)

    peaks = max_abs_resultants(points)
    assert isinstance(peaks, pd.Series)
    assert list(peaks.index) == RESULTANT_COLUMNS
    assert peaks["Mz"] == pytest.approx(P * L / 4, rel=1e-6)
    assert peaks["Vy"] == pytest.approx(P / 2, rel=1e-6)


def test_nodal_results_frame():
    P = 1000.0
    structure, bar = make_cantilever(P)
    df = nodal_results_frame(structure)

    assert df.index.name == "node"
    assert list(df.index) == ["root", "tip"]
    assert df.shape == (2, 12)
    assert df.loc["tip", "uy"] == pytest.approx(-P * L**3 / (3 * E * I))
    assert df.loc["root", "Fy"] == pytest.approx(P)
    assert df.loc["root", "Mz"] == pytest.approx(P * L)
    assert np.allclose(df.loc["tip", ["Fx", "Fy", "Fz", "Mx", "My", "Mz"]], 0.0)
