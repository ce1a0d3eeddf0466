"""
Microbenchmark: time per impact vs surface mix.
Run:
  python benchmarks/bench_impacts.py
"""
import time
import numpy as np
from ricochet_sim import (
    GridMap, ImpactEvent, ImpactOrchestrator, MaterialCatalog, NullMotion,
    RoofDef, StuffCategory, StuffDef, TerrainDef, Thing, ThingDef, Bounds, SolverConfig,
)
from ricochet_sim.profiler import ImpactProfiler


def build_world(size: int = 32):
    catalog = MaterialCatalog()
    steel = catalog.add_stuff(StuffDef("Steel", {StuffCategory.METALLIC}, {"armor_sharp": 0.9, "armor_blunt": 0.45}))
    catalog.add_stuff(StuffDef("WoodLog", {StuffCategory.WOODY}, {"armor_sharp": 0.54, "armor_blunt": 0.54}))
    terrains = [
        catalog.add_terrain(TerrainDef("Soil", affordances={"Diggable"}, fertility=1.0)),
        catalog.add_terrain(TerrainDef("WaterShallow", tags={"Water"})),
        catalog.add_terrain(TerrainDef("Concrete", tags={"CE_Concrete"})),
        catalog.add_terrain(TerrainDef("Mud", affordances={"Diggable"}, dries_to="Soil")),
        catalog.add_terrain(TerrainDef("WoodPlankFloor", cost_list=("WoodLog",))),
    ]
    roof = catalog.add_roof(RoofDef("RoofRockThick", is_thick=True, is_natural=True))

    grid = GridMap(width=size, depth=size, default_terrain=terrains[0])
    for x in range(size):
        for z in range(size):
            grid.set_terrain((x, z), terrains[(x + 3 * z) % len(terrains)])
            grid.set_roof((x, z), roof)
    walls = [
        grid.place(Thing(ThingDef("Wall"), stuff=steel), Bounds(center=(x + 0.5, 0.5), top=3.0))
        for x in range(size)
    ]
    return catalog, grid, walls


def run(angle_model: str, n: int = 5000):
    prof = ImpactProfiler()
    catalog, grid, walls = build_world()
    orch = ImpactOrchestrator(NullMotion(), catalog, SolverConfig(angle_model=angle_model), profiler=prof)

    rng = np.random.default_rng(12345)
    events = []
    for i in range(n):
        x, z = rng.uniform(0.0, grid.width, size=2)
        alpha = rng.uniform(0.5, 45.0)
        a = np.radians(alpha)
        kind = i % 3
        if kind == 0:
            events.append(ImpactEvent(None, (x, 0.0, z), grid, 400.0, (np.cos(a), -np.sin(a), 0.0)))
        elif kind == 1:
            events.append(ImpactEvent(None, (x, 1.99, z), grid, 400.0, (np.cos(a), np.sin(a), 0.0)))
        else:
            wall = walls[int(x)]
            events.append(ImpactEvent(wall, (int(x) + 0.5, 1.0, 0.0), grid, 400.0, (np.cos(a), 0.0, np.sin(a))))

    t0 = time.perf_counter()
    for event in events:
        orch.on_impact(event, rng)
    t1 = time.perf_counter()

    return (t1 - t0) / n, prof.stats.summary()


if __name__ == "__main__":
    for model in ["analytic", "legacy"]:
        per_impact, summary = run(model)
        print(f"{model:8s}  impact={1e6*per_impact:8.2f} us  impacts/s={1/per_impact:10.0f}")
        for k in ["geometry", "classify", "solve", "outcomes"]:
            if k in summary:
                print(" ", k, summary[k])
        print()
