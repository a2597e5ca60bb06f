# barframe/kernel - Element-agnostic structural analysis core
"""
KERNEL: THE ELEMENT-AGNOSTIC FOUNDATION
=======================================

Assembly and solving don't care what an element is made of.
They just need:
- A way to map (node_index, dof) → global_dof_index
- Element matrices in global coordinates (any size)
- Restrained DOF lists (and prescribed values)
- Load vectors, one column per load case

The element formulation (helpers, transformation, releases) lives in
barframe.elements and barframe.helpers; the kernel plumbing is universal.
"""

from .dof import DoF, DOFManager, DOF_3D_FRAME, DOF_PER_NODE
from .assemble import assemble_global_K, assemble_global_F, add_nodal_load, compute_contributions
from .solve import solve_linear
from .modal import natural_frequencies

__all__ = [
    'DoF', 'DOFManager', 'DOF_3D_FRAME', 'DOF_PER_NODE',
    'assemble_global_K', 'assemble_global_F', 'add_nodal_load', 'compute_contributions',
    'solve_linear', 'natural_frequencies',
]
