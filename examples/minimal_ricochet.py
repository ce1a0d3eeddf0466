# examples/minimal_ricochet.py
import logging

import numpy as np

from ricochet_sim import (
    DebugMotion, GridMap, ImpactEvent, ImpactOrchestrator, MaterialCatalog,
    StuffCategory, StuffDef, TerrainDef, Thing, ThingDef, Bounds,
)

logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

catalog = MaterialCatalog()
steel = catalog.add_stuff(StuffDef("Steel", {StuffCategory.METALLIC}, {
    "armor_sharp": 0.9, "armor_blunt": 0.45,
    "sharp_damage_multiplier": 1.0, "blunt_damage_multiplier": 1.0,
}))
soil = catalog.add_terrain(TerrainDef("Soil", affordances={"Diggable"}, fertility=1.0))

grid = GridMap(width=20, depth=20, default_terrain=soil)
wall = grid.place(Thing(ThingDef("Wall"), stuff=steel), Bounds(center=(10.5, 10.5), top=3.0))

orchestrator = ImpactOrchestrator(DebugMotion(), catalog)
rng = np.random.default_rng(0)

for alpha in (5.0, 10.0, 20.0):
    a = np.radians(alpha)
    ground = ImpactEvent(None, (4.5, 0.0, 4.5), grid, 400.0, (np.cos(a), -np.sin(a), 0.0))
    print(f"ground α={alpha:4.1f}:", orchestrator.on_impact(ground, rng).kind.value)

    side = ImpactEvent(wall, (10.0, 1.0, 10.5), grid, 400.0, (np.sin(a), 0.0, np.cos(a)))
    print(f"wall   α={alpha:4.1f}:", orchestrator.on_impact(side, rng).kind.value)
