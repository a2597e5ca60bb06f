# barframe/kernel/assemble.py
"""
ASSEMBLY: Global Matrix Assembly
================================

PURPOSE:
--------
This module handles the assembly of element contributions into global matrices.
This is the scatter-add operation that builds K, M and F from element-level data.

The key insight: assembly doesn't care about element BEHAVIOUR.
It just needs:
- Total number of DOFs
- For each element: its DOF map and its matrix in global coordinates

Computing the element matrices is independent per element, so it may run
on a thread pool. Only the scatter-add into the shared matrix is serial.

USAGE:
------
    contributions = compute_contributions(
        elements,
        lambda e: (dof.element_dof_map(e.node_indices()), e.global_stiffness()),
        max_workers=4,
    )
    K = assemble_global_K(ndof, contributions)
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, List, Optional, Tuple, TypeVar

import numpy as np

logger = logging.getLogger(__name__)

T = TypeVar("T")
Contribution = Tuple[List[int], np.ndarray]


def compute_contributions(
    items: Iterable[T],
    compute: Callable[[T], Contribution],
    max_workers: Optional[int] = None,
) -> List[Contribution]:
    """
    Evaluate `compute` for every item, optionally on a thread pool.

    Results come back in input order. The first exception raised by any
    item propagates unchanged and no partial list is returned, since an
    incomplete global matrix cannot be solved.

    Parameters:
    -----------
    items : Iterable
        Elements (or anything `compute` understands)
    compute : Callable
        Function item -> (dof_map, matrix)
    max_workers : int, optional
        Thread count; None or 1 evaluates serially

    Returns:
    --------
    List[Tuple[List[int], np.ndarray]]
    """
    items = list(items)
    if not max_workers or max_workers <= 1 or len(items) <= 1:
        return [compute(item) for item in items]

    logger.debug("Computing %d element contributions on %d threads", len(items), max_workers)
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        return list(pool.map(compute, items))


def assemble_global_K(
    ndof: int,
    contributions: List[Contribution]
) -> np.ndarray:
    """
    Assemble a global square matrix from element contributions.

    Used for stiffness, mass and damping alike.

    ALGORITHM:
    ----------
    K = zeros(ndof × ndof)
    for each element:
        for each (local_i, local_j) in element ke:
            K[dof_map[local_i], dof_map[local_j]] += ke[local_i, local_j]

    Parameters:
    -----------
    ndof : int
        Total number of DOFs in the system (6 × n_nodes)
    contributions : List[Tuple[List[int], np.ndarray]]
        (dof_map, ke) per element, ke in global coordinates

    Returns:
    --------
    np.ndarray
        Global matrix, shape (ndof, ndof). Symmetric positive
        semi-definite for stiffness (becomes PD after BCs applied)
    """
    K = np.zeros((ndof, ndof), dtype=float)

    for dof_map, ke in contributions:
        n_element_dofs = len(dof_map)

        assert ke.shape == (n_element_dofs, n_element_dofs), \
            f"Element ke shape {ke.shape} doesn't match dof_map length {n_element_dofs}"

        # np.ix_ scatter-add; dof_map has no duplicates within one element
        K[np.ix_(dof_map, dof_map)] += ke

    return K


def assemble_global_F(
    ndof: int,
    contributions: List[Contribution]
) -> np.ndarray:
    """
    Assemble global load vector from element contributions.

    Same scatter-add logic as assemble_global_K, but for load vectors
    (equivalent nodal loads of element loads, already in global coordinates).

    Parameters:
    -----------
    ndof : int
        Total number of DOFs in the system
    contributions : List[Tuple[List[int], np.ndarray]]
        (dof_map, fe) per loaded element, fe of shape (len(dof_map),)

    Returns:
    --------
    np.ndarray
        Global load vector F, shape (ndof,)
    """
    F = np.zeros(ndof, dtype=float)

    for dof_map, fe in contributions:
        n_element_dofs = len(dof_map)

        assert fe.shape == (n_element_dofs,), \
            f"Element fe shape {fe.shape} doesn't match dof_map length {n_element_dofs}"

        F[dof_map] += fe

    return F


def add_nodal_load(
    F: np.ndarray,
    node_id: int,
    load_vector: np.ndarray,
    dof_per_node: int
) -> None:
    """
    Add a nodal load to the global load vector (in-place).

    Parameters:
    -----------
    F : np.ndarray
        Global load vector (modified in-place)
    node_id : int
        Node index to apply load to
    load_vector : np.ndarray
        [Fx, Fy, Fz, Mx, My, Mz] at the node
    dof_per_node : int
        Number of DOFs per node

    Example:
    --------
    >>> F = np.zeros(12)
    >>> add_nodal_load(F, node_id=1, load_vector=np.array([0, 0, -1000, 0, 0, 0]), dof_per_node=6)
    >>> float(F[8])
    -1000.0
    """
    base_dof = dof_per_node * node_id
    for i, val in enumerate(load_vector):
        F[base_dof + i] += val
