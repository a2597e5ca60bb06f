# barframe/kernel/dof.py
"""
DOF MANAGER: Degree of Freedom Indexing
=======================================

PURPOSE:
--------
Maps (node_index, dof) to a global DOF index. Every node of a skeletal
structure carries six DOFs, in this order:

    DX, DY, DZ   translations along the x, y, z axes
    RX, RY, RZ   rotations about the x, y, z axes

so the global index of a DOF is simply

    global_index = 6 * node_index + dof

The same ordinals are used for the element's LOCAL frame (DX is axial,
RX is torsion), which is why element matrices are laid out in 6-blocks
per node as well.

USAGE:
------
    dof = DOFManager(dof_per_node=6)

    # Node 2, rotation about z
    global_idx = dof.idx(node_id=2, local_dof=DoF.RZ)  # → 17
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import List


class DoF(IntEnum):
    """The six nodal degrees of freedom, in storage order."""
    DX = 0
    DY = 1
    DZ = 2
    RX = 3
    RY = 4
    RZ = 5


DOF_PER_NODE = len(DoF)


@dataclass
class DOFManager:
    """
    Manages degree-of-freedom indexing for structural analysis.

    This is the bridge between "node 5, y-displacement" and "global DOF index 31".

    Attributes:
    -----------
    dof_per_node : int
        Number of DOFs per node (6 for a space frame)

    Examples:
    ---------
    >>> dof = DOFManager(dof_per_node=6)
    >>> dof.idx(0, DoF.DY)
    1
    >>> dof.idx(1, DoF.DX)
    6
    >>> dof.ndof(4)
    24
    """
    dof_per_node: int = DOF_PER_NODE

    def idx(self, node_id: int, local_dof: int) -> int:
        """
        Get the global DOF index for a node's DOF.

        Parameters:
        -----------
        node_id : int
            The node index (0-indexed, position in the structure's node list)
        local_dof : int
            DOF ordinal within the node (a DoF member or plain int)

        Returns:
        --------
        int
            Global DOF index in the system matrices
        """
        return self.dof_per_node * node_id + int(local_dof)

    def ndof(self, n_nodes: int) -> int:
        """Total number of DOFs for a system with n_nodes."""
        return self.dof_per_node * n_nodes

    def node_dofs(self, node_id: int) -> List[int]:
        """
        Get all global DOF indices for a single node.

        Examples:
        ---------
        >>> DOFManager(dof_per_node=6).node_dofs(1)
        [6, 7, 8, 9, 10, 11]
        """
        base = self.dof_per_node * node_id
        return list(range(base, base + self.dof_per_node))

    def element_dof_map(self, node_ids: List[int]) -> List[int]:
        """
        Get the DOF map for an element connecting multiple nodes.

        This returns the indices needed to scatter/gather element
        matrices into/from the global matrices.

        Examples:
        ---------
        >>> DOFManager(dof_per_node=6).element_dof_map([0, 2])
        [0, 1, 2, 3, 4, 5, 12, 13, 14, 15, 16, 17]
        """
        result = []
        for node_id in node_ids:
            result.extend(self.node_dofs(node_id))
        return result


# Pre-configured manager for space frames: ux, uy, uz, rx, ry, rz
DOF_3D_FRAME = DOFManager(dof_per_node=DOF_PER_NODE)
