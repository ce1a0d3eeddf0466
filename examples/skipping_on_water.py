# examples/skipping_on_water.py
"""
Fire the same shot at a pond from the JSON level in this directory,
lowering the angle until it skips.

Run:
  python examples/skipping_on_water.py
"""
from pathlib import Path

import numpy as np

from ricochet_sim import ImpactEvent, ImpactOrchestrator, ProjectileProperties, RecordingMotion
from ricochet_sim.io import load_config, load_map

LEVEL = Path(__file__).with_name("pond.json")

grid, catalog = load_map(str(LEVEL))
motion = RecordingMotion()
orchestrator = ImpactOrchestrator(motion, catalog, load_config(str(LEVEL)))
rng = np.random.default_rng(7)

for name, projectile in [
    ("5.56mm", ProjectileProperties()),
    ("9mm", ProjectileProperties(density=11.3, hardness=0.8, diameter=9.0, mass=8.0)),
    ("120mm", ProjectileProperties(density=7.8, hardness=1.5, diameter=120.0, mass=20000.0)),
]:
    for alpha in (15.0, 10.0, 7.5, 5.0, 2.5):
        a = np.radians(alpha)
        event = ImpactEvent(None, (3.5, 0.0, 3.5), grid, 350.0, (np.cos(a), -np.sin(a), 0.0), projectile)
        outcome = orchestrator.on_impact(event, rng)
        print(f"{name:>7s} α={alpha:4.1f}°  {outcome.kind.value:9s} v'={outcome.new_speed:6.1f}")
    print()

print("relaunches:", len(motion.launches))
