import numpy as np
import pytest

from ricochet_sim.materials import (
    MaterialCatalog, RoofDef, StuffCategory, StuffDef, TerrainDef,
)


def make_catalog() -> MaterialCatalog:
    """A small set of definitions modelled on a colony-sim base game."""
    cat = MaterialCatalog()

    cat.add_stuff(StuffDef("Steel", {StuffCategory.METALLIC}, {
        "armor_sharp": 0.9, "armor_blunt": 0.45,
        "sharp_damage_multiplier": 1.0, "blunt_damage_multiplier": 1.0,
    }))
    cat.add_stuff(StuffDef("WoodLog", {StuffCategory.WOODY}, {
        "armor_sharp": 0.54, "armor_blunt": 0.54,
        "sharp_damage_multiplier": 0.65, "blunt_damage_multiplier": 0.65,
    }))
    cat.add_stuff(StuffDef("BlocksGranite", {StuffCategory.STONY}, {
        "mass": 1.0, "max_hit_points": 0.0,
        "sharp_damage_multiplier": 1.0, "blunt_damage_multiplier": 1.0,
    }))
    cat.add_stuff(StuffDef("Cloth", {StuffCategory.FABRIC}, {
        "armor_sharp": 0.36, "armor_blunt": 0.0,
    }))
    cat.add_stuff(StuffDef("Leather_Plain", {StuffCategory.LEATHERY}, {
        "armor_sharp": 0.81, "armor_blunt": 0.24,
    }))

    cat.add_terrain(TerrainDef("WaterShallow", tags={"Water"}, take_splashes=True))
    cat.add_terrain(TerrainDef("WaterMovingShallow", affordances={"MovingFluid"}))
    cat.add_terrain(TerrainDef("Soil", affordances={"Diggable"}, fertility=1.0, generated_filth="Filth_Dirt"))
    cat.add_terrain(TerrainDef("SoilRich", affordances={"Diggable"}, fertility=1.4))
    cat.add_terrain(TerrainDef("Sand", affordances={"Diggable"}, generated_filth="Filth_Sand", take_footprints=True))
    cat.add_terrain(TerrainDef("Mud", affordances={"Diggable"}, dries_to="Soil", take_footprints=True))
    cat.add_terrain(TerrainDef("Ice", affordances={"Diggable"}, scatter_type="SoftGray"))
    cat.add_terrain(TerrainDef("Concrete", tags={"CE_Concrete"}))
    cat.add_terrain(TerrainDef("BrokenAsphalt", scatter_type="Rocky"))
    cat.add_terrain(TerrainDef("MetalTile", cost_list=("ComponentIndustrial", "Steel")))
    cat.add_terrain(TerrainDef("WoodPlankFloor", cost_list=("WoodLog",), burned_def="BurnedWoodPlankFloor"))
    cat.add_terrain(TerrainDef("BurnedWoodPlankFloor"))
    cat.add_terrain(TerrainDef("Marsh", dries_to="Soil"))
    cat.add_terrain(TerrainDef("Underwall"))

    cat.add_roof(RoofDef("RoofConstructed"))
    cat.add_roof(RoofDef("RoofRockThin", is_natural=True))
    cat.add_roof(RoofDef("RoofRockThick", is_thick=True, is_natural=True))
    return cat


@pytest.fixture
def catalog() -> MaterialCatalog:
    return make_catalog()


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(12345)
