# MIT License (see LICENSE)
"""
Input/Output utilities for ricochet resolution.

This subpackage provides:
    - Material catalogs: stuff, terrain and roof definitions to/from JSON.
    - Solver configuration: SolverConfig to/from JSON.
    - Maps: GridMap construction from JSON referencing catalog names.

Typical usage:
    from ricochet_sim.io import load_catalog, load_config

    catalog = load_catalog("defs.json")
    config = load_config("defs.json")
"""
from .json_io import (
    load_catalog,
    load_catalog_raw,
    save_catalog,
    catalog_from_json,
    catalog_to_json,
    stuff_from_json,
    stuff_to_json,
    terrain_from_json,
    terrain_to_json,
    roof_from_json,
    roof_to_json,
    config_from_json,
    config_to_json,
    load_config,
    save_config,
    map_from_json,
    load_map,
)

__all__ = [
    # Catalogs
    "load_catalog",
    "load_catalog_raw",
    "save_catalog",
    "catalog_from_json",
    "catalog_to_json",
    "stuff_from_json",
    "stuff_to_json",
    "terrain_from_json",
    "terrain_to_json",
    "roof_from_json",
    "roof_to_json",
    # Configuration
    "config_from_json",
    "config_to_json",
    "load_config",
    "save_config",
    # Maps
    "map_from_json",
    "load_map",
]
