# MIT License (see LICENSE)
"""
JSON serialization and deserialization for material catalogs, solver
configuration and maps.

JSON Schema Overview:
---------------------
{
  "stuffs": [
    {
      "name": string,                      # Required
      "categories": ["metallic" | "woody" | "stony" | "fabric" | "leathery", ...],
      "stats": {string: float}             # e.g. "armor_sharp": 0.9
    }
  ],
  "terrains": [
    {
      "name": string,                      # Required
      "tags": [string],                    # "Water", "CE_Concrete"
      "affordances": [string],             # "Diggable", "MovingFluid"
      "take_splashes": bool,               # Default: false
      "take_footprints": bool,             # Default: false
      "generated_filth": string,           # "Filth_Dirt", "Filth_Sand"
      "scatter_type": string,              # "Rocky", "SoftGray"
      "fertility": float,                  # Default: 0
      "dries_to": string,                  # Terrain name
      "burned_def": string,                # Terrain name
      "cost_list": [string]                # Stuff names, in order
    }
  ],
  "roofs": [
    {"name": string, "thick": bool, "natural": bool}
  ],
  "solver": {                              # Optional, see SolverConfig
    "angle_model": "analytic" | "legacy",
    "malleable_exit_deg": float,
    ...
  },
  "map": {                                 # Optional
    "width": int, "depth": int,
    "default_terrain": string,
    "roof_level": float,
    "terrain": [{"cell": [x, z], "terrain": string}],
    "roofs": [{"cell": [x, z], "roof": string}]
  }
}

Unknown keys are ignored for forward compatibility. Fields equal to
their defaults are omitted on save.
"""
from __future__ import annotations
import json
from dataclasses import fields
from typing import Any

from ..constants import DEFAULT_ROOF_HEIGHT
from ..materials import MaterialCatalog, RoofDef, StuffCategory, StuffDef, TerrainDef
from ..orchestrator import GridMap
from ..solver import SolverConfig


def load_catalog_raw(path: str) -> dict[str, Any]:
    """
    Load raw JSON data from a definitions file without object construction.

    Args:
        path: Absolute or relative path to the JSON file.
    """
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_catalog(path: str) -> MaterialCatalog:
    """
    Load a MaterialCatalog from a JSON file.

    Raises:
        FileNotFoundError: If the file cannot be found.
        json.JSONDecodeError: If the file is not valid JSON.
        ValueError: If a definition is missing its name or uses an
            unknown category.
    """
    return catalog_from_json(load_catalog_raw(path))


def catalog_from_json(data: dict[str, Any]) -> MaterialCatalog:
    catalog = MaterialCatalog()
    for d in data.get("stuffs", []):
        catalog.add_stuff(stuff_from_json(d))
    for d in data.get("terrains", []):
        catalog.add_terrain(terrain_from_json(d))
    for d in data.get("roofs", []):
        catalog.add_roof(roof_from_json(d))
    return catalog


def _name(d: dict[str, Any], kind: str) -> str:
    name = d.get("name")
    if not name:
        raise ValueError(f"{kind} definition missing required 'name' field.")
    return str(name)


def stuff_from_json(d: dict[str, Any]) -> StuffDef:
    name = _name(d, "Stuff")
    categories = []
    for value in d.get("categories", []):
        try:
            categories.append(StuffCategory(value))
        except ValueError:
            raise ValueError(f"Unknown stuff category '{value}' in '{name}'") from None
    stats = {str(k): float(v) for k, v in d.get("stats", {}).items()}
    return StuffDef(name=name, categories=frozenset(categories), stat_bases=stats)


def terrain_from_json(d: dict[str, Any]) -> TerrainDef:
    return TerrainDef(
        name=_name(d, "Terrain"),
        tags=frozenset(d.get("tags", [])),
        affordances=frozenset(d.get("affordances", [])),
        take_splashes=bool(d.get("take_splashes", False)),
        take_footprints=bool(d.get("take_footprints", False)),
        generated_filth=d.get("generated_filth"),
        scatter_type=d.get("scatter_type"),
        fertility=float(d.get("fertility", 0.0)),
        dries_to=d.get("dries_to"),
        burned_def=d.get("burned_def"),
        cost_list=tuple(d.get("cost_list", [])),
    )


def roof_from_json(d: dict[str, Any]) -> RoofDef:
    return RoofDef(
        name=_name(d, "Roof"),
        is_thick=bool(d.get("thick", False)),
        is_natural=bool(d.get("natural", False)),
    )


def stuff_to_json(stuff: StuffDef) -> dict[str, Any]:
    result: dict[str, Any] = {"name": stuff.name}
    if stuff.categories:
        result["categories"] = sorted(c.value for c in stuff.categories)
    if stuff.stat_bases:
        result["stats"] = dict(stuff.stat_bases)
    return result


def terrain_to_json(terrain: TerrainDef) -> dict[str, Any]:
    result: dict[str, Any] = {"name": terrain.name}
    if terrain.tags:
        result["tags"] = sorted(terrain.tags)
    if terrain.affordances:
        result["affordances"] = sorted(terrain.affordances)
    if terrain.take_splashes:
        result["take_splashes"] = True
    if terrain.take_footprints:
        result["take_footprints"] = True
    for key in ("generated_filth", "scatter_type", "dries_to", "burned_def"):
        value = getattr(terrain, key)
        if value is not None:
            result[key] = value
    if terrain.fertility != 0.0:
        result["fertility"] = terrain.fertility
    if terrain.cost_list:
        result["cost_list"] = list(terrain.cost_list)
    return result


def roof_to_json(roof: RoofDef) -> dict[str, Any]:
    result: dict[str, Any] = {"name": roof.name}
    if roof.is_thick:
        result["thick"] = True
    if roof.is_natural:
        result["natural"] = True
    return result


def catalog_to_json(catalog: MaterialCatalog) -> dict[str, Any]:
    """Serialize a MaterialCatalog (round-trip compatible)."""
    result: dict[str, Any] = {}
    if catalog.stuffs:
        result["stuffs"] = [stuff_to_json(s) for s in catalog.stuffs.values()]
    if catalog.terrains:
        result["terrains"] = [terrain_to_json(t) for t in catalog.terrains.values()]
    if catalog.roofs:
        result["roofs"] = [roof_to_json(r) for r in catalog.roofs.values()]
    return result


def save_catalog(catalog: MaterialCatalog, path: str, indent: int = 2) -> None:
    """Save a MaterialCatalog to a JSON file on disk."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(catalog_to_json(catalog), f, indent=indent)


# =============================================================================
# Solver configuration
# =============================================================================

# The fragmentation hook is code, not data.
_CONFIG_FIELDS = tuple(f for f in fields(SolverConfig) if f.name != "fragmentation")


def config_from_json(d: dict[str, Any]) -> SolverConfig:
    """
    Build a SolverConfig from a dictionary; missing fields keep their defaults.

    Raises:
        ValueError: If the angle model is unknown or a value is out of range.
    """
    kwargs: dict[str, Any] = {}
    for f in _CONFIG_FIELDS:
        if f.name in d:
            kwargs[f.name] = str(d[f.name]) if f.name == "angle_model" else float(d[f.name])
    return SolverConfig(**kwargs)


def config_to_json(config: SolverConfig) -> dict[str, Any]:
    """Serialize the non-default fields of a SolverConfig."""
    default = SolverConfig()
    return {
        f.name: getattr(config, f.name)
        for f in _CONFIG_FIELDS
        if getattr(config, f.name) != getattr(default, f.name)
    }


def load_config(path: str) -> SolverConfig:
    """Load the "solver" section of a JSON file."""
    return config_from_json(load_catalog_raw(path).get("solver", {}))


def save_config(config: SolverConfig, path: str, indent: int = 2) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump({"solver": config_to_json(config)}, f, indent=indent)


# =============================================================================
# Maps
# =============================================================================

def map_from_json(d: dict[str, Any], catalog: MaterialCatalog) -> GridMap:
    """
    Build a GridMap whose terrain and roofs reference catalog names.

    Raises:
        ValueError: If a referenced terrain or roof is not in the catalog,
            or width/depth are not positive.
    """
    width = int(d["width"])
    depth = int(d["depth"])
    if width <= 0 or depth <= 0:
        raise ValueError(f"Map size must be positive, got ({width}, {depth})")

    def terrain(name: str) -> TerrainDef:
        t = catalog.terrain(name)
        if t is None:
            raise ValueError(f"Map references unknown terrain '{name}'")
        return t

    default = d.get("default_terrain")
    grid = GridMap(
        width=width,
        depth=depth,
        default_terrain=terrain(default) if default is not None else None,
        roof_level=float(d.get("roof_level", DEFAULT_ROOF_HEIGHT)),
    )
    for entry in d.get("terrain", []):
        x, z = entry["cell"]
        grid.set_terrain((int(x), int(z)), terrain(entry["terrain"]))
    for entry in d.get("roofs", []):
        x, z = entry["cell"]
        roof = catalog.roof(entry["roof"])
        if roof is None:
            raise ValueError(f"Map references unknown roof '{entry['roof']}'")
        grid.set_roof((int(x), int(z)), roof)
    return grid


def load_map(path: str, catalog: MaterialCatalog | None = None) -> tuple[GridMap, MaterialCatalog]:
    """
    Load a map together with the catalog defined in the same file.

    If catalog is given, it is used instead of the file's definitions.
    """
    data = load_catalog_raw(path)
    if catalog is None:
        catalog = catalog_from_json(data)
    if "map" not in data:
        raise ValueError(f"No 'map' section in {path}")
    return map_from_json(data["map"], catalog), catalog
