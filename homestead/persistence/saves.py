"""Saves — YAML save files for a whole World.

Only the source of truth is written: cell types, planned markers,
resource amounts and stage flags.  Counts, the frontier and capacity are
cheap to recompute, so they are rebuilt on load.  A save that cannot be
read for any reason yields a fresh world instead of an error.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING, Any

import numpy as np
import yaml

from homestead.catalog.buildings import BuildingType
from homestead.catalog.resources import Resource
from homestead.catalog.stages import default_stages
from homestead.world.parcel import PARCEL_SIZE
from homestead.world.pos import Pos
from homestead.world.world import World

if TYPE_CHECKING:
    from homestead.simulation.config import GameConfig

logger = logging.getLogger(__name__)

SAVE_SUFFIX = ".yaml"

_LOAD_ERRORS = (
    OSError,
    yaml.YAMLError,
    AttributeError,
    KeyError,
    ValueError,
    TypeError,
    IndexError,
)


def _building_type(name: object) -> BuildingType:
    if not isinstance(name, str):
        msg = f"building name must be a string, got {name!r}"
        raise TypeError(msg)
    return BuildingType[name.upper()]


def save_path_for(save_dir: str | Path, name: str) -> Path:
    """Return the save file path for a world called *name*."""
    slug = re.sub(r"[^A-Za-z0-9_-]+", "_", name).strip("_") or "world"
    return Path(save_dir) / f"{slug}{SAVE_SUFFIX}"


def world_to_dict(world: World) -> dict[str, Any]:
    """Convert *world* into plain YAML-safe data."""
    parcels = []
    for pos, parcel in sorted(world.parcels.items()):
        parcels.append(
            {
                "x": pos.x,
                "y": pos.y,
                "cells": [
                    [cell.building_type.name.lower() for cell in row]
                    for row in parcel.cells
                ],
                "planned": [
                    {"x": p.x, "y": p.y, "building": bt.name.lower()}
                    for p, bt in sorted(parcel.planned.items())
                ],
            },
        )
    return {
        "name": world.name,
        "resources": {r.name.lower(): world.ledger[r] for r in Resource},
        "stages": [{"num": s.num, "enabled": s.enabled} for s in world.stages],
        "parcels": parcels,
    }


def world_from_dict(data: dict[str, Any], config: GameConfig) -> World:
    """Rebuild a World from data produced by ``world_to_dict``.

    Raises:
        KeyError: If a required key or an enum name is unknown.
        TypeError: If a building name or the resources block has the
            wrong type.
        ValueError: If a parcel grid has the wrong shape.
    """
    world = World(name=str(data["name"]), config=config)
    world.parcels.clear()
    for entry in data["parcels"]:
        pos = Pos(int(entry["x"]), int(entry["y"]))
        parcel = world.new_parcel(pos)
        codes = np.array(
            [[_building_type(name).value for name in row] for row in entry["cells"]],
            dtype=np.int64,
        )
        if codes.shape != (PARCEL_SIZE, PARCEL_SIZE):
            msg = f"parcel {pos} has shape {codes.shape}"
            raise ValueError(msg)
        parcel.grid = codes
        for mark in entry.get("planned", []):
            cell = Pos(int(mark["x"]), int(mark["y"]))
            parcel.plan(cell, _building_type(mark["building"]))
        world.parcels[pos] = parcel
    if not world.parcels:
        msg = "save holds no parcels"
        raise ValueError(msg)

    resources = data.get("resources", {})
    if not isinstance(resources, dict):
        msg = "resources must be a mapping"
        raise TypeError(msg)
    for resource in Resource:
        world.ledger[resource] = int(resources.get(resource.name.lower(), 0))

    stages = default_stages()
    stored = data.get("stages", [])
    if [s["num"] for s in stored] == [s.num for s in stages]:
        for stage, flags in zip(stages, stored, strict=True):
            if flags["enabled"]:
                stage.force_unlock()
    else:
        logger.info("Stage list changed since this save; resetting stages")
    world.stages = stages

    world.rebuild_caches()
    return world


def save_world(world: World, path: str | Path) -> Path:
    """Write *world* to *path*, creating parent directories.

    Raises:
        OSError: If the file cannot be written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w") as f:
        yaml.safe_dump(world_to_dict(world), f, sort_keys=False)
    logger.debug("Saved %s to %s", world.name, path)
    return path


def load_world(path: str | Path, config: GameConfig) -> World:
    """Load a world from *path*, or start fresh if that fails.

    Args:
        path: Save file to read.
        config: Configuration for the loaded (or fresh) world.

    Returns:
        The loaded world, or a new one if the save is missing or broken.
    """
    path = Path(path)
    try:
        with path.open("r") as f:
            data = yaml.safe_load(f)
        if not isinstance(data, dict):
            msg = f"{path} does not hold a mapping"
            raise TypeError(msg)
        world = world_from_dict(data, config)
    except _LOAD_ERRORS as exc:
        logger.warning("Could not load %s (%s); starting a new world", path, exc)
        return World(config=config)
    logger.info("Loaded %s from %s", world.name, path)
    return world


def list_saves(save_dir: str | Path) -> list[Path]:
    """Return save files in *save_dir*, newest first."""
    save_dir = Path(save_dir)
    if not save_dir.is_dir():
        return []
    saves = [p for p in save_dir.iterdir() if p.suffix == SAVE_SUFFIX and p.is_file()]
    return sorted(saves, key=lambda p: p.stat().st_mtime, reverse=True)


def load_latest(save_dir: str | Path, config: GameConfig) -> World:
    """Load the newest save in *save_dir*, or start a new world."""
    saves = list_saves(save_dir)
    if not saves:
        return World(config=config)
    return load_world(saves[0], config)
