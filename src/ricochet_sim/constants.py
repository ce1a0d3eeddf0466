# MIT License (see LICENSE)
"""
Physical constants and material table values used throughout the simulation.

Units follow the game-scale conventions of the material table:
density in kg/L (g/cm³), hardness in GPa-scaled units, projectile
diameter in mm, projectile mass in g and speed in m/s. The conversion
factors below bring these into SI where an equation needs it.
"""
from __future__ import annotations

# Standard gravity in m/s².
G_EARTH: float = 9.80665

# kg/L → kg/m³
DENSITY_TO_SI: float = 1e3

# GPa → Pa
HARDNESS_TO_SI: float = 1e9

# GPa → psi, for the empirical ballistic-limit relation (maths.md Eq 3).
GPA_TO_PSI: float = 145037.738

# Floors that keep ratios finite for liquids and degenerate input.
DENSITY_EPS: float = 1e-6
HARDNESS_EPS: float = 1e-9

# -----------------------------------------------------------------------------
# Reference materials: (density kg/L, hardness GPa-scaled)
# -----------------------------------------------------------------------------
STEEL: tuple[float, float] = (7.8, 200.0)
GRANITE: tuple[float, float] = (2.7, 12.0)
WATER: tuple[float, float] = (1.0, 0.0)
CONCRETE: tuple[float, float] = (2.4, 10.0)

# Loose terrain sub-cases
WET_SOIL: tuple[float, float] = (1.9, 0.1)
ICE: tuple[float, float] = (0.93, 8.7)
CLAY: tuple[float, float] = (1.7, 0.01)
SAND: tuple[float, float] = (1.6, 0.05)
LOOSE_SOIL: tuple[float, float] = (1.4, 0.2)

# Concrete-like terrain resolves to Frangible with this probability,
# Malleable otherwise.
CONCRETE_FRANGIBLE_CHANCE: float = 0.8

# Fertility above this marks clay-rich soil.
HIGH_FERTILITY: float = 1.0

# Recursion cap for terrain → material → terrain reference chains.
MAX_CLASSIFY_DEPTH: int = 5

# -----------------------------------------------------------------------------
# Ricochet model defaults
# -----------------------------------------------------------------------------
# Birkhoff's critical skipping angle for a sphere on water, in degrees.
BIRKHOFF_ANGLE_DEG: float = 18.0

# Reference calibre for the gravity-sinkage term of the frangible model, mm.
REFERENCE_DIAMETER_MM: float = 100.0

# Projectile length as a multiple of its diameter.
LENGTH_FACTOR: float = 3.0

# Exit angles (degrees above the surface).
MALLEABLE_EXIT_DEG: float = 80.0
UNYIELDING_EXIT_DEG: float = 2.0

# Height of a roof slab above ground level, and of the ground itself.
DEFAULT_ROOF_HEIGHT: float = 2.0
GROUND_EPS: float = 1e-3
TOP_EPS: float = 1e-3
