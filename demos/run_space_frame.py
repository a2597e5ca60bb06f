#!/usr/bin/env python3
"""
RUN_SPACE_FRAME: 3D Portal Frame With Load Cases and a Hinge
============================================================

This demo walks through a complete barframe analysis:
1. Build a two-bay space portal (columns along Z, beams along X and Y)
2. Release the bending moment at one beam end (a pinned connection)
3. Apply a dead UDL and a live point load as separate load cases
4. Solve both cases with one factorisation
5. Combine them (1.35·dead + 1.5·live) and print node results
6. Sample member diagrams and run a modal analysis

Run with:
    python demos/run_space_frame.py
"""

import logging
import sys
from pathlib import Path

import numpy as np

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from barframe import (
    BarElement,
    ConcentratedLoad,
    Constraint,
    LoadCase,
    LoadCombination,
    Material,
    Node,
    Section,
    Structure,
    UniformLoad,
)
from barframe.post import max_abs_resultants, member_diagram, nodal_results_frame


def print_header(text: str):
    """Print a formatted section header."""
    print("\n" + "=" * 60)
    print(f"  {text}")
    print("=" * 60)


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print_header("3D SPACE FRAME ANALYSIS")

    # =========================================================================
    # STEP 1: GEOMETRY AND PROPERTIES
    # =========================================================================
    span = 6.0      # m
    height = 4.0    # m
    steel = Material(E=210e9, G=81e9, density=7850.0)
    column = Section(A=5.38e-3, Iy=3.69e-5, Iz=1.34e-5, J=2.0e-7)  # HEA 200-ish
    beam = Section(A=4.59e-3, Iy=2.77e-5, Iz=1.42e-6, J=1.4e-7)    # IPE 240-ish

    structure = Structure()
    bases = [
        structure.add_node(Node(x, y, 0.0, Constraint.fixed(), label=f"base_{i}"))
        for i, (x, y) in enumerate([(0, 0), (span, 0), (0, span)])
    ]
    tops = [
        structure.add_node(Node(b.x, b.y, height, label=f"top_{i}"))
        for i, b in enumerate(bases)
    ]

    for b, t in zip(bases, tops):
        structure.add_element(BarElement([b, t], steel, column, label=f"col_{b.label}"))

    beam_x = structure.add_element(BarElement([tops[0], tops[1]], steel, beam, label="beam_x"))
    # the Y beam sits on a pinned seat at its far end
    beam_y = structure.add_element(BarElement(
        [tops[0], tops[2]], steel, beam,
        releases=[Constraint.fixed(), Constraint.moment_release()],
        label="beam_y",
    ))

    print(f"\nNodes: {len(structure.nodes)}   Elements: {len(structure.elements)}")

    # =========================================================================
    # STEP 2: LOADS
    # =========================================================================
    dead = LoadCase("dead", "permanent")
    live = LoadCase("live", "variable")
    for bar in (beam_x, beam_y):
        bar.add_load(UniformLoad([0, 0, -1], 4.0e3, case=dead))
    beam_x.add_load(ConcentratedLoad([0, 0, -12.0e3], xi=0.0, case=live))
    tops[1].add_load([2.0e3, 0, 0, 0, 0, 0], case=live)

    # =========================================================================
    # STEP 3: SOLVE
    # =========================================================================
    print_header("STEP 3: Solve")
    results = structure.solve()
    for case, result in results.items():
        print(f"  {case.name:6s} max |u| = {np.max(np.abs(result.displacements[0::6])) * 1000:.3f} mm (ux)")

    # =========================================================================
    # STEP 4: COMBINATION
    # =========================================================================
    print_header("STEP 4: ULS Combination 1.35·G + 1.5·Q")
    uls = LoadCombination({dead: 1.35, live: 1.5})
    df = nodal_results_frame(structure, uls)
    print(df[["ux", "uy", "uz"]].mul(1000).round(3).to_string())
    print()
    print(df.loc[[b.label for b in bases], ["Fx", "Fy", "Fz", "My"]].div(1000).round(2).to_string())

    total = df[["Fx", "Fy", "Fz"]].sum()
    print(f"\n  -> Sum of reactions (kN): {total.div(1000).round(3).to_dict()}")

    # =========================================================================
    # STEP 5: MEMBER DIAGRAMS
    # =========================================================================
    print_header("STEP 5: Member Peaks (kN, kN·m)")
    for bar in (beam_x, beam_y):
        peaks = max_abs_resultants(member_diagram(bar, uls))
        print(f"  {bar.label}: " + ", ".join(f"{k}={v / 1000:.2f}" for k, v in peaks.items()))

    # =========================================================================
    # STEP 6: MODAL ANALYSIS
    # =========================================================================
    print_header("STEP 6: Natural Frequencies")
    freqs, _ = structure.modal_analysis(n_modes=4)
    for i, f in enumerate(freqs, 1):
        print(f"  Mode {i}: {f:.2f} Hz")


if __name__ == "__main__":
    main()
