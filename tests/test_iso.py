"""Iso coordinate mapping along elements with two and more nodes."""

import numpy as np
import pytest

from barframe import BarBehaviour, BarElement, ConfigurationError, Material, Node, Section
from barframe.iso import check_iso, fit_iso_to_local, local_to_iso, node_iso_coordinates

STEEL = Material(E=210e9, G=81e9)
SECTION = Section(A=0.01, Iy=1e-5, Iz=1e-5, J=2e-5)


def make_bar(*xs):
    return BarElement([Node(x, 0.0, 0.0) for x in xs], STEEL, SECTION, behaviour=BarBehaviour.TRUSS)


def test_node_iso_coordinates():
    np.testing.assert_allclose(node_iso_coordinates(2), [-1.0, 1.0])
    np.testing.assert_allclose(node_iso_coordinates(4), [-1.0, -1 / 3, 1 / 3, 1.0])
    with pytest.raises(ConfigurationError):
        node_iso_coordinates(1)


def test_two_node_mapping_is_linear():
    bar = make_bar(0.0, 5.0)
    assert bar.iso_to_local(-1.0) == pytest.approx(0.0)
    assert bar.iso_to_local(0.0) == pytest.approx(2.5)
    assert bar.iso_to_local(0.5) == pytest.approx(3.75)
    assert bar.local_to_iso(1.25) == pytest.approx(-0.5)


def test_three_node_mapping_passes_through_the_nodes():
    bar = make_bar(0.0, 1.0, 4.0)
    assert bar.length == pytest.approx(4.0)
    assert bar.iso_to_local(-1.0) == pytest.approx(0.0, abs=1e-12)
    assert bar.iso_to_local(0.0) == pytest.approx(1.0)
    assert bar.iso_to_local(1.0) == pytest.approx(4.0)
    assert bar.local_to_iso(1.0) == pytest.approx(0.0, abs=1e-12)
    assert bar.internal_force_discretization_points() == [-1.0, 0.0, 1.0]


def test_local_to_iso_round_trip():
    poly = fit_iso_to_local([0.0, 1.0, 4.0])
    for xi in (-0.8, -0.1, 0.6):
        assert local_to_iso(poly, poly(xi)) == pytest.approx(xi)


def test_out_of_range():
    bar = make_bar(0.0, 5.0)
    with pytest.raises(ConfigurationError):
        check_iso(1.0001)
    with pytest.raises(ConfigurationError):
        bar.iso_to_local(-2.0)
    with pytest.raises(ConfigurationError):
        bar.local_to_iso(6.0)


def test_geometry_change_after_first_use():
    a, b = Node(0.0, 0.0, 0.0), Node(2.0, 0.0, 0.0)
    bar = BarElement([a, b], STEEL, SECTION)
    bar.iso_to_local(0.0)
    b.x = 3.0
    with pytest.raises(ConfigurationError, match="changed"):
        bar.iso_to_local(0.0)
