"""
Renovation Estimator - Work Categories

Whole-project work configuration (demolition, electrical, plumbing, heating,
doors). One instance per project, configured by counts rather than geometry.
"""

from dataclasses import dataclass, field, fields, replace
from typing import Dict, Optional


@dataclass(frozen=True)
class ElectricalConfig:
    enabled: bool = True
    outlets: int = 10
    switches: int = 6
    lighting_points: int = 8
    ac_points: int = 1


@dataclass(frozen=True)
class PlumbingConfig:
    enabled: bool = True
    toilets: int = 1
    sinks: int = 2
    showers: int = 1
    bathtubs: int = 1


@dataclass(frozen=True)
class HeatingConfig:
    enabled: bool = True
    radiators: int = 4
    underfloor_area: float = 0.0
    boiler: bool = False


@dataclass(frozen=True)
class DoorsWindowsConfig:
    enabled: bool = True
    interior_doors: int = 4
    entrance_door: bool = False


@dataclass(frozen=True)
class WorkCategories:
    """Work configuration for the whole project. Defaults are the standard defaults."""
    demolition: bool = True
    electrical: ElectricalConfig = field(default_factory=ElectricalConfig)
    plumbing: PlumbingConfig = field(default_factory=PlumbingConfig)
    heating: HeatingConfig = field(default_factory=HeatingConfig)
    doors_windows: DoorsWindowsConfig = field(default_factory=DoorsWindowsConfig)


DEFAULT_WORK_CATEGORIES = WorkCategories()

# Upper bounds for counted units
COUNT_LIMITS: Dict[str, int] = {
    "outlets": 50,
    "switches": 30,
    "lighting_points": 40,
    "ac_points": 10,
    "toilets": 5,
    "sinks": 10,
    "showers": 5,
    "bathtubs": 3,
    "radiators": 20,
    "interior_doors": 15,
}


def _normalize(config, changes: dict) -> dict:
    """Validate field names and clamp counts for a sub-config update."""
    names = {f.name for f in fields(config)}
    unknown = set(changes) - names
    if unknown:
        raise TypeError(f"{type(config).__name__} has no field(s): {', '.join(sorted(unknown))}")

    normalized = {}
    for key, value in changes.items():
        if key in COUNT_LIMITS:
            normalized[key] = int(min(COUNT_LIMITS[key], max(0, round(value))))
        elif key == "underfloor_area":
            normalized[key] = max(0.0, float(value))
        else:
            normalized[key] = bool(value)
    return normalized


def update_electrical(work: WorkCategories, **changes) -> WorkCategories:
    """Merge a partial electrical update. Sibling categories are untouched."""
    electrical = replace(work.electrical, **_normalize(work.electrical, changes))
    return replace(work, electrical=electrical)


def update_plumbing(work: WorkCategories, **changes) -> WorkCategories:
    plumbing = replace(work.plumbing, **_normalize(work.plumbing, changes))
    return replace(work, plumbing=plumbing)


def update_heating(
    work: WorkCategories,
    max_underfloor_area: Optional[float] = None,
    **changes
) -> WorkCategories:
    """
    Merge a partial heating update.

    Args:
        work: Current work configuration
        max_underfloor_area: Total floor area across rooms; caps underfloor heating
        **changes: Heating fields to change

    Returns:
        New WorkCategories
    """
    heating = replace(work.heating, **_normalize(work.heating, changes))
    updated = replace(work, heating=heating)
    if max_underfloor_area is not None:
        updated = clamp_underfloor_area(updated, max_underfloor_area)
    return updated


def update_doors_windows(work: WorkCategories, **changes) -> WorkCategories:
    doors_windows = replace(work.doors_windows, **_normalize(work.doors_windows, changes))
    return replace(work, doors_windows=doors_windows)


def set_demolition(work: WorkCategories, enabled: bool) -> WorkCategories:
    return replace(work, demolition=bool(enabled))


def clamp_underfloor_area(work: WorkCategories, total_floor_area: float) -> WorkCategories:
    """Cap underfloor heating at the total floor area of the project."""
    limit = max(0.0, total_floor_area)
    if work.heating.underfloor_area <= limit:
        return work
    return replace(work, heating=replace(work.heating, underfloor_area=limit))


SUB_CONFIG_UPDATERS = {
    "electrical": update_electrical,
    "plumbing": update_plumbing,
    "heating": update_heating,
    "doors_windows": update_doors_windows,
}
