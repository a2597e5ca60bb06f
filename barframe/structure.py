# barframe/structure.py
"""
STRUCTURE: Model Container and Static Solve
===========================================

PURPOSE:
--------
Holds the ordered nodes and elements of a skeletal structure and runs the
direct stiffness method on them:

    1. Number nodes           node.index = position in `nodes`
    2. Assemble K             Σ element global stiffness (releases condensed)
    3. Build F                one column per load case: nodal loads +
                              element equivalent nodal loads
    4. Solve                  K_ff·d_f = F_f − K_fr·d_r, one LU for all cases
    5. Write back             node.displacements[case], node.reactions[case]

Element queries (internal forces, deflections) read the node results, so
they are available as soon as `solve()` has returned.

USAGE:
------
    structure = Structure()
    a = structure.add_node(Node(0, 0, 0, Constraint.fixed()))
    b = structure.add_node(Node(3, 0, 0))
    structure.add_element(BarElement([a, b], steel, ipe))
    b.add_load([0, 0, -10e3, 0, 0, 0])
    structure.solve()
    b.get_nodal_displacement()
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np

from .config import CONFIG
from .elements import BarElement
from .errors import ConfigurationError
from .kernel import (
    DOF_3D_FRAME,
    add_nodal_load,
    assemble_global_F,
    assemble_global_K,
    compute_contributions,
    natural_frequencies,
    solve_linear,
)
from .model import DEFAULT_LOAD_CASE, DofConstraint, LoadCase, Node

logger = logging.getLogger(__name__)


@dataclass
class StaticResult:
    """Global displacement and reaction vectors of one solved load case."""
    case: LoadCase
    displacements: np.ndarray
    reactions: np.ndarray


class Structure:
    """Ordered nodes and elements, and the solve entry point."""

    def __init__(self):
        self.nodes: List[Node] = []
        self.elements: List[BarElement] = []
        self.results: Dict[LoadCase, StaticResult] = {}
        self.dof = DOF_3D_FRAME

    def add_node(self, node: Node) -> Node:
        if any(n is node for n in self.nodes):
            raise ConfigurationError(f"Node {node.label or node.location} is already in the structure")
        self.nodes.append(node)
        return node

    def add_element(self, element: BarElement) -> BarElement:
        """Add an element; its nodes are added too if they are not yet known."""
        for node in element.nodes:
            if not any(n is node for n in self.nodes):
                self.nodes.append(node)
        self.elements.append(element)
        return element

    # --- bookkeeping ---------------------------------------------------------

    def number_nodes(self) -> int:
        for i, node in enumerate(self.nodes):
            node.index = i
        return self.dof.ndof(len(self.nodes))

    def load_cases(self) -> List[LoadCase]:
        """Every load case referenced by a nodal load, settlement or element load."""
        cases: List[LoadCase] = []

        def see(case):
            if case not in cases:
                cases.append(case)

        for node in self.nodes:
            for load in node.loads:
                see(load.case)
            for case in node.settlements:
                see(case)
        for element in self.elements:
            for case in element.load_cases():
                see(case)
        return cases or [DEFAULT_LOAD_CASE]

    def restrained_dofs(self) -> List[int]:
        """Global indices of FIXED and PRESCRIBED node DOFs. Element releases play no part."""
        return [
            self.dof.idx(node.index, dof)
            for node in self.nodes
            for dof in node.constraints.restrained_dofs()
        ]

    def has_prescribed(self) -> bool:
        return any(
            c is DofConstraint.PRESCRIBED for node in self.nodes for c in node.constraints.as_tuple()
        )

    # --- assembly ------------------------------------------------------------

    def _assemble(self, matrix: str, max_workers: Optional[int]) -> np.ndarray:
        ndof = self.number_nodes()
        contributions = compute_contributions(
            self.elements,
            lambda e: (self.dof.element_dof_map(e.node_indices()), getattr(e, matrix)()),
            max_workers=max_workers,
        )
        logger.debug("Assembled %s of %d elements into %d DOFs", matrix, len(contributions), ndof)
        return assemble_global_K(ndof, contributions)

    def stiffness_matrix(self, max_workers: Optional[int] = None) -> np.ndarray:
        return self._assemble("global_stiffness", max_workers)

    def mass_matrix(self, max_workers: Optional[int] = None) -> np.ndarray:
        return self._assemble("global_mass", max_workers)

    def damping_matrix(self, max_workers: Optional[int] = None) -> np.ndarray:
        return self._assemble("global_damping", max_workers)

    def load_vector(self, case: LoadCase, max_workers: Optional[int] = None) -> np.ndarray:
        """Global load vector of one case: nodal loads plus element equivalent loads."""
        ndof = self.number_nodes()
        loaded = [e for e in self.elements if e.loads_for(case)]
        contributions = compute_contributions(
            loaded,
            lambda e: (self.dof.element_dof_map(e.node_indices()), e.global_load_vector(case)),
            max_workers=max_workers,
        )
        F = assemble_global_F(ndof, contributions)
        for node in self.nodes:
            add_nodal_load(F, node.index, node.load_vector(case), self.dof.dof_per_node)
        return F

    def _prescribed_vector(self, case: LoadCase) -> np.ndarray:
        values = np.zeros(self.dof.ndof(len(self.nodes)))
        for node in self.nodes:
            values[self.dof.node_dofs(node.index)] = node.prescribed_values(case)
        return values

    # --- analysis ------------------------------------------------------------

    def solve(
        self,
        load_cases: Optional[Iterable[LoadCase]] = None,
        max_workers: Optional[int] = None,
    ) -> Dict[LoadCase, StaticResult]:
        """
        Linear static solve of all load cases with one factorisation.

        Parameters:
        -----------
        load_cases : Iterable[LoadCase], optional
            Cases to solve (default: every case referenced in the model)
        max_workers : int, optional
            Threads for element matrices (default CONFIG.max_workers)

        Returns:
        --------
        Dict[LoadCase, StaticResult]

        Raises:
        -------
        StructuralSingularityError
            If the structure is under-restrained
        """
        if max_workers is None:
            max_workers = CONFIG.max_workers
        cases = list(load_cases) if load_cases is not None else self.load_cases()
        if not self.elements:
            raise ConfigurationError("Structure has no elements")

        ndof = self.number_nodes()
        logger.info(
            "Solving %d nodes, %d elements, %d DOFs, %d load case(s)",
            len(self.nodes), len(self.elements), ndof, len(cases),
        )

        K = self.stiffness_matrix(max_workers)
        F = np.column_stack([self.load_vector(case, max_workers) for case in cases])
        prescribed = None
        if self.has_prescribed():
            prescribed = np.column_stack([self._prescribed_vector(case) for case in cases])

        d, R, _ = solve_linear(K, F, self.restrained_dofs(), prescribed)

        results = {}
        for j, case in enumerate(cases):
            results[case] = StaticResult(case, d[:, j].copy(), R[:, j].copy())
            for node in self.nodes:
                dofs = self.dof.node_dofs(node.index)
                node.displacements[case] = d[dofs, j]
                node.reactions[case] = R[dofs, j]

        self.results.update(results)
        return results

    def modal_analysis(
        self,
        n_modes: Optional[int] = 5,
        max_workers: Optional[int] = None,
    ) -> Tuple[np.ndarray, np.ndarray]:
        """
        Natural frequencies (Hz) and mass-normalised mode shapes.

        Uses the consistent mass matrices, so every element needs
        `material.density`.
        """
        if max_workers is None:
            max_workers = CONFIG.max_workers
        K = self.stiffness_matrix(max_workers)
        M = self.mass_matrix(max_workers)
        frequencies, shapes = natural_frequencies(K, M, self.restrained_dofs(), n_modes)
        logger.info("Modal analysis: first frequency %.4g Hz", frequencies[0])
        return frequencies, shapes
