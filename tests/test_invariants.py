import itertools

import numpy as np
import pytest

from barframe import (
    BarBehaviour,
    BarElement,
    ConfigurationError,
    Constraint,
    Material,
    Node,
    Section,
    StructuralSingularityError,
    Structure,
    UniformLoad,
)
from barframe.helpers import BEHAVIOUR_HELPERS
from barframe.kernel import DoF

STEEL = Material(E=210e9, G=81e9, density=7850.0, damping=10.0)
SECTION = Section(A=0.01, Iy=2.0e-5, Iz=8.0e-6, J=1.5e-5, shear_factor_y=0.85, shear_factor_z=0.85)

SINGLE_FLAGS = list(BEHAVIOUR_HELPERS)


def _combinations():
    valid, invalid = [], []
    for r in range(1, len(SINGLE_FLAGS) + 1):
        for combo in itertools.combinations(SINGLE_FLAGS, r):
            flags = BarBehaviour(0)
            for flag in combo:
                flags |= flag
            y_both = BarBehaviour.BEAM_Y_EULER_BERNOULLI | BarBehaviour.BEAM_Y_TIMOSHENKO
            z_both = BarBehaviour.BEAM_Z_EULER_BERNOULLI | BarBehaviour.BEAM_Z_TIMOSHENKO
            if flags & y_both == y_both or flags & z_both == z_both:
                invalid.append(flags)
            else:
                valid.append(flags)
    return valid, invalid


VALID, INVALID = _combinations()


def make_bar(behaviour, end=(2.0, 1.5, 1.0), web_rotation=30.0):
    return BarElement(
        [Node(0.0, 0.0, 0.0), Node(*end)], STEEL, SECTION,
        behaviour=behaviour, web_rotation=web_rotation,
    )


@pytest.mark.parametrize("behaviour", VALID, ids=repr)
def test_stiffness_matrix_symmetry(behaviour):
    """
    WHAT IS THIS TEST?
    ==================
    K[i,j] = K[j,i] for every valid behaviour combination (Maxwell's
    reciprocal theorem), in local and global axes. Mass and damping too.
    """
    bar = make_bar(behaviour)
    for K in (bar.local_stiffness(), bar.global_stiffness(), bar.global_mass(), bar.global_damping()):
        np.testing.assert_allclose(K, K.T, rtol=1e-10, atol=1e-6,
                                   err_msg="Element matrix is not symmetric!")


@pytest.mark.parametrize("behaviour", INVALID, ids=repr)
def test_overlapping_bending_flags_rejected(behaviour):
    with pytest.raises(ConfigurationError):
        make_bar(behaviour)


def test_empty_behaviour_rejected():
    with pytest.raises(ConfigurationError):
        make_bar(BarBehaviour(0))


def test_local_stiffness_positive_semidefinite():
    K = make_bar(BarBehaviour.FULL_FRAME).local_stiffness()
    eigenvalues = np.linalg.eigvalsh(K)
    assert eigenvalues.min() > -1e-6 * eigenvalues.max()
    # six rigid body modes
    assert np.sum(np.abs(eigenvalues) < 1e-9 * eigenvalues.max()) == 6


def test_no_restraints_is_singular():
    structure = Structure()
    structure.add_element(make_bar(BarBehaviour.FULL_FRAME))
    structure.nodes[1].add_load([0, 0, -1000.0, 0, 0, 0])
    with pytest.raises(StructuralSingularityError, match="under-restrained"):
        structure.solve()


def make_portal():
    """3D portal: two columns and a skew beam, fixed bases, loaded beam."""
    structure = Structure()
    a = structure.add_node(Node(0.0, 0.0, 0.0, Constraint.fixed()))
    b = structure.add_node(Node(0.0, 0.0, 4.0))
    c = structure.add_node(Node(5.0, 2.0, 4.0))
    d = structure.add_node(Node(5.0, 2.0, 0.0, Constraint.fixed()))
    for i, j in [(a, b), (b, c), (c, d)]:
        structure.add_element(BarElement([i, j], STEEL, SECTION))
    return structure, (a, b, c, d)


def test_equilibrium_forces_and_moments():
    """
    ΣF = 0 and ΣM = 0 about the origin, over applied nodal loads, element
    loads and support reactions.
    """
    structure, (a, b, c, d) = make_portal()
    b.add_load([10e3, 0, 0, 0, 0, 0])
    c.add_load([0, -5e3, -20e3, 0, 2e3, 0])
    beam = structure.elements[1]
    q = 4e3
    beam.add_load(UniformLoad([0, 0, -1], q))
    structure.solve()

    total_force = np.zeros(3)
    total_moment = np.zeros(3)
    for node in structure.nodes:
        action = node.load_vector(structure.load_cases()[0]) + node.get_support_reaction()
        total_force += action[:3]
        total_moment += action[3:] + np.cross(node.location, action[:3])

    # element UDL: resultant q·L at the beam midpoint
    resultant = np.array([0.0, 0.0, -q * beam.length])
    midpoint = 0.5 * (b.location + c.location)
    total_force += resultant
    total_moment += np.cross(midpoint, resultant)

    np.testing.assert_allclose(total_force, 0.0, atol=1e-6)
    np.testing.assert_allclose(total_moment, 0.0, atol=1e-5)


def test_free_nodes_carry_no_reactions():
    structure, (a, b, c, d) = make_portal()
    c.add_load([0, 0, -20e3, 0, 0, 0])
    structure.solve()
    np.testing.assert_allclose(b.get_support_reaction(), 0.0)
    np.testing.assert_allclose(c.get_support_reaction(), 0.0)
    assert abs(a.get_support_reaction()[DoF.DZ]) > 0
