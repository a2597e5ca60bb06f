"""
Load cases, settlements and combinations.

All cases are solved together against one factorisation; combinations are
superposed from the solved cases, never re-solved.
"""

import numpy as np
import pytest

from barframe import (
    BarElement,
    Constraint,
    DofConstraint,
    LoadCase,
    LoadCombination,
    Material,
    Node,
    Section,
    Structure,
    UniformLoad,
)
from barframe.kernel import DoF
from barframe.post import nodal_results_frame

L = 3.0
E = 210e9
I = 6.0e-6
STEEL = Material(E=E, G=81e9)
SECTION = Section(A=0.01, Iy=I, Iz=I, J=2 * I)

DEAD = LoadCase("dead", "permanent")
LIVE = LoadCase("live", "variable")


def make_propped_cantilever():
    """Fixed at x = 0, vertical support at x = L with a prescribed value."""
    structure = Structure()
    a = structure.add_node(Node(0.0, 0.0, 0.0, Constraint.fixed(), label="A"))
    b = structure.add_node(Node(L, 0.0, 0.0, Constraint(dy=DofConstraint.PRESCRIBED), label="B"))
    bar = structure.add_element(BarElement([a, b], STEEL, SECTION))
    return structure, a, b, bar


class TestSettlement:

    def test_prescribed_displacement_is_imposed(self):
        delta = 0.01
        structure, a, b, bar = make_propped_cantilever()
        b.set_settlement([0, -delta, 0, 0, 0, 0])
        structure.solve()

        assert b.get_nodal_displacement()[DoF.DY] == pytest.approx(-delta)
        # tip force of a cantilever pushed down by delta
        k = 3 * E * I / L**3
        assert b.get_support_reaction()[DoF.DY] == pytest.approx(-k * delta)
        assert a.get_support_reaction()[DoF.DY] == pytest.approx(+k * delta)
        assert b.get_nodal_displacement()[DoF.RZ] == pytest.approx(-1.5 * delta / L)

    def test_only_prescribed_dofs_are_read(self):
        structure, a, b, bar = make_propped_cantilever()
        b.set_settlement([0.5, -0.01, 0.5, 0.5, 0.5, 0.5])
        structure.solve()
        assert b.get_nodal_displacement()[DoF.DX] == pytest.approx(0.0, abs=1e-12)

    def test_settlement_belongs_to_its_case(self):
        structure, a, b, bar = make_propped_cantilever()
        b.set_settlement([0, -0.01, 0, 0, 0, 0], case=DEAD)
        b.add_load([0, 0, -1000.0, 0, 0, 0], case=LIVE)
        structure.solve()

        assert b.get_nodal_displacement(DEAD)[DoF.DY] == pytest.approx(-0.01)
        assert b.get_nodal_displacement(LIVE)[DoF.DY] == pytest.approx(0.0)
        assert b.get_nodal_displacement(LIVE)[DoF.DZ] < 0.0

    def test_bad_settlement_shape(self):
        with pytest.raises(ValueError):
            Node(0, 0, 0).set_settlement([0.0, 1.0])


class TestCombinations:

    @pytest.fixture
    def solved(self):
        structure, a, b, bar = make_propped_cantilever()
        bar.add_load(UniformLoad([0, -1, 0], 2000.0, case=DEAD))
        b.add_load([0, 0, -500.0, 0, 0, 0], case=LIVE)
        b.set_settlement([0, -0.002, 0, 0, 0, 0], case=LIVE)
        results = structure.solve()
        return structure, a, b, bar, results

    def test_every_case_is_solved(self, solved):
        structure, a, b, bar, results = solved
        assert set(results) == {DEAD, LIVE}
        assert set(structure.results) == {DEAD, LIVE}
        assert results[DEAD].displacements.shape == (12,)

    def test_nodal_results_superpose(self, solved):
        structure, a, b, bar, results = solved
        combo = LoadCombination({DEAD: 1.35, LIVE: 1.5})

        expected = 1.35 * b.get_nodal_displacement(DEAD) + 1.5 * b.get_nodal_displacement(LIVE)
        np.testing.assert_allclose(b.get_nodal_displacement(combo), expected)
        expected = 1.35 * a.get_support_reaction(DEAD) + 1.5 * a.get_support_reaction(LIVE)
        np.testing.assert_allclose(a.get_support_reaction(combo), expected)

    def test_results_frame(self, solved):
        structure, a, b, bar, results = solved
        combo = LoadCombination({DEAD: 1.0, LIVE: 1.0})
        df = nodal_results_frame(structure, combo)

        assert list(df.index) == ["A", "B"]
        assert list(df.columns[:3]) == ["ux", "uy", "uz"]
        assert df.loc["B", "uy"] == pytest.approx(
            b.get_nodal_displacement(DEAD)[DoF.DY] + b.get_nodal_displacement(LIVE)[DoF.DY]
        )
        assert df.loc["A", "Fy"] == pytest.approx(a.get_support_reaction(combo)[DoF.DY])

    def test_unsolved_case_raises(self, solved):
        structure, a, b, bar, results = solved
        with pytest.raises(KeyError):
            b.get_nodal_displacement(LoadCase("wind"))
        with pytest.raises(KeyError):
            b.get_nodal_displacement(LoadCombination({DEAD: 1.0, LoadCase("wind"): 1.0}))

    def test_empty_combination(self, solved):
        structure, a, b, bar, results = solved
        with pytest.raises(ValueError):
            b.get_nodal_displacement(LoadCombination())

    def test_equilibrium_of_each_case(self, solved):
        structure, a, b, bar, results = solved
        # vertical reactions balance the dead UDL
        total = a.get_support_reaction(DEAD)[DoF.DY] + b.get_support_reaction(DEAD)[DoF.DY]
        assert total == pytest.approx(2000.0 * L)
        # the live load along z is carried by the fixed end only
        assert a.get_support_reaction(LIVE)[DoF.DZ] == pytest.approx(500.0)
