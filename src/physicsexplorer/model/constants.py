"""Physical constants used by the closed-form formulas."""
import math

COULOMB_K: float = 8.99e9
"""Coulomb constant in N·m²/C²."""

EPSILON_0: float = 8.85e-12
"""Vacuum permittivity in F/m."""

MU_0: float = 4 * math.pi * 1e-7
"""Vacuum permeability in H/m."""
