"""
Renovation Estimator - Room Geometry

This module models rectangular rooms and derives their floor, wall and
ceiling surfaces from raw dimensions.
"""

import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional


# Standard opening sizes (m²)
DOOR_AREA = 1.8     # ~0.9m x 2m interior door
WINDOW_AREA = 1.5   # ~1.0m x 1.5m window

# Accepted ranges, applied by the factories and update operations
LENGTH_RANGE = (1.0, 20.0)
HEIGHT_RANGE = (2.0, 4.0)
OPENING_COUNT_RANGE = (0, 6)


class RoomType(str, Enum):
    """Room types supported by the estimator."""
    LIVING = "living"
    BEDROOM = "bedroom"
    BATHROOM = "bathroom"
    KITCHEN = "kitchen"
    HALLWAY = "hallway"
    BALCONY = "balcony"


class FlooringType(str, Enum):
    LAMINATE = "laminate"
    PARQUET = "parquet"
    TILE = "tile"
    VINYL = "vinyl"
    CARPET = "carpet"


class WallType(str, Enum):
    PAINT = "paint"
    WALLPAPER = "wallpaper"
    TILE = "tile"
    DECORATIVE_PLASTER = "decorative_plaster"


class CeilingType(str, Enum):
    PAINT = "paint"
    STRETCH = "stretch"
    DRYWALL = "drywall"
    SUSPENDED = "suspended"


@dataclass(frozen=True)
class RoomDimensions:
    """Raw room dimensions in meters, plus opening counts."""
    length: float
    width: float
    height: float = 2.7
    doors: int = 1
    windows: int = 1


@dataclass(frozen=True)
class RoomMaterials:
    """Finish selections for a room."""
    flooring: FlooringType = FlooringType.LAMINATE
    walls: WallType = WallType.PAINT
    ceiling: CeilingType = CeilingType.PAINT


@dataclass(frozen=True)
class ComputedSurfaces:
    """Surfaces derived from RoomDimensions. Never set directly."""
    floor_area: float
    wall_area: float
    ceiling_area: float
    perimeter: float
    corners: int = 4


def calculate_surfaces(dimensions: RoomDimensions) -> ComputedSurfaces:
    """Calculate all surfaces for a room based on its dimensions."""
    floor_area = dimensions.length * dimensions.width
    perimeter = 2 * (dimensions.length + dimensions.width)

    openings_area = dimensions.doors * DOOR_AREA + dimensions.windows * WINDOW_AREA
    wall_area = max(0.0, perimeter * dimensions.height - openings_area)

    return ComputedSurfaces(
        floor_area=floor_area,
        wall_area=wall_area,
        ceiling_area=floor_area,
        perimeter=perimeter,
    )


@dataclass(frozen=True)
class Room:
    """
    A rectangular room.

    ``computed`` is always derived from ``dimensions`` when the Room is built,
    so a Room value can never carry stale surfaces. Use the module functions
    (create_room, update_room_dimensions, ...) rather than the constructor;
    they also clamp dimensions to the accepted ranges.
    """
    type: RoomType
    dimensions: RoomDimensions
    materials: RoomMaterials = field(default_factory=RoomMaterials)
    name: str = ""
    id: str = field(default_factory=lambda: generate_room_id())
    computed: ComputedSurfaces = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "computed", calculate_surfaces(self.dimensions))

    @property
    def display_name(self) -> str:
        return self.name or self.type.value


def generate_room_id() -> str:
    return f"room_{uuid.uuid4().hex[:12]}"


# Default dimensions by room type
ROOM_DIMENSIONS: Dict[RoomType, RoomDimensions] = {
    RoomType.LIVING: RoomDimensions(length=5, width=4, height=2.7, doors=1, windows=2),
    RoomType.BEDROOM: RoomDimensions(length=4, width=3.5, height=2.7, doors=1, windows=1),
    RoomType.BATHROOM: RoomDimensions(length=2.5, width=2, height=2.7, doors=1, windows=1),
    RoomType.KITCHEN: RoomDimensions(length=3.5, width=3, height=2.7, doors=1, windows=1),
    RoomType.HALLWAY: RoomDimensions(length=4, width=1.5, height=2.7, doors=2, windows=0),
    RoomType.BALCONY: RoomDimensions(length=3, width=1.2, height=2.7, doors=1, windows=0),
}

# Default materials by room type
ROOM_MATERIALS: Dict[RoomType, RoomMaterials] = {
    RoomType.LIVING: RoomMaterials(FlooringType.LAMINATE, WallType.PAINT, CeilingType.PAINT),
    RoomType.BEDROOM: RoomMaterials(FlooringType.LAMINATE, WallType.WALLPAPER, CeilingType.PAINT),
    RoomType.BATHROOM: RoomMaterials(FlooringType.TILE, WallType.TILE, CeilingType.STRETCH),
    RoomType.KITCHEN: RoomMaterials(FlooringType.TILE, WallType.PAINT, CeilingType.PAINT),
    RoomType.HALLWAY: RoomMaterials(FlooringType.LAMINATE, WallType.PAINT, CeilingType.PAINT),
    RoomType.BALCONY: RoomMaterials(FlooringType.TILE, WallType.PAINT, CeilingType.PAINT),
}


def _clamp(value: float, bounds: tuple) -> float:
    low, high = bounds
    return min(high, max(low, value))


def clamp_dimensions(dimensions: RoomDimensions) -> RoomDimensions:
    """Clamp dimensions to the accepted ranges. Out-of-range values are never rejected."""
    return RoomDimensions(
        length=_clamp(float(dimensions.length), LENGTH_RANGE),
        width=_clamp(float(dimensions.width), LENGTH_RANGE),
        height=_clamp(float(dimensions.height), HEIGHT_RANGE),
        doors=int(_clamp(round(dimensions.doors), OPENING_COUNT_RANGE)),
        windows=int(_clamp(round(dimensions.windows), OPENING_COUNT_RANGE)),
    )


def create_room(room_type: RoomType, name: str = "") -> Room:
    """Create a new room with default values based on its type."""
    room_type = RoomType(room_type)
    return Room(
        type=room_type,
        name=name,
        dimensions=ROOM_DIMENSIONS[room_type],
        materials=ROOM_MATERIALS[room_type],
    )


def create_room_with_params(
    room_type: Optional[RoomType] = None,
    name: str = "",
    length: Optional[float] = None,
    width: Optional[float] = None,
    height: Optional[float] = None,
    doors: Optional[int] = None,
    windows: Optional[int] = None,
    flooring: Optional[FlooringType] = None,
    walls: Optional[WallType] = None,
    ceiling: Optional[CeilingType] = None,
) -> Room:
    """
    Create a room from an arbitrary subset of parameters (e.g. from AI analysis).

    Any field left as None is filled from the defaults of the room type;
    the type itself defaults to living.

    Args:
        room_type: Room type, used to pick defaults for missing fields
        name: Optional display name
        length, width, height: Dimensions in meters
        doors, windows: Opening counts
        flooring, walls, ceiling: Finish selections

    Returns:
        Room with clamped dimensions and fully computed surfaces
    """
    room_type = RoomType(room_type) if room_type else RoomType.LIVING
    base = create_room(room_type, name)

    dimension_overrides = {
        key: value for key, value in (
            ("length", length), ("width", width), ("height", height),
            ("doors", doors), ("windows", windows),
        ) if value is not None
    }
    material_overrides = {
        key: value for key, value in (
            ("flooring", flooring), ("walls", walls), ("ceiling", ceiling),
        ) if value is not None
    }

    room = update_room_dimensions(base, **dimension_overrides)
    return update_room_materials(room, **material_overrides)


def update_room_dimensions(room: Room, **dimensions) -> Room:
    """
    Apply a partial dimension update and recompute surfaces.

    Returns a new Room; the original is left untouched.
    """
    merged = replace(room.dimensions, **dimensions)
    return replace(room, dimensions=clamp_dimensions(merged))


def update_room_materials(room: Room, **materials) -> Room:
    """Apply a partial material update. Returns a new Room."""
    coerced = {}
    enum_types = {"flooring": FlooringType, "walls": WallType, "ceiling": CeilingType}
    for key, value in materials.items():
        coerced[key] = enum_types[key](value)
    return replace(room, materials=replace(room.materials, **coerced))


def rename_room(room: Room, name: str) -> Room:
    return replace(room, name=name)


def calculate_total_area(rooms: List[Room]) -> float:
    """Total floor area of all rooms."""
    return sum(room.computed.floor_area for room in rooms)


def calculate_total_surfaces(rooms: List[Room]) -> ComputedSurfaces:
    """Sum every surface across rooms."""
    return ComputedSurfaces(
        floor_area=sum(r.computed.floor_area for r in rooms),
        wall_area=sum(r.computed.wall_area for r in rooms),
        ceiling_area=sum(r.computed.ceiling_area for r in rooms),
        perimeter=sum(r.computed.perimeter for r in rooms),
        corners=sum(r.computed.corners for r in rooms),
    )


# Apartment presets
APARTMENT_PRESETS: Dict[str, List[RoomType]] = {
    "studio": [RoomType.LIVING, RoomType.BATHROOM, RoomType.KITCHEN],
    "1br": [RoomType.LIVING, RoomType.BEDROOM, RoomType.BATHROOM, RoomType.KITCHEN, RoomType.HALLWAY],
    "2br": [
        RoomType.LIVING, RoomType.BEDROOM, RoomType.BEDROOM,
        RoomType.BATHROOM, RoomType.KITCHEN, RoomType.HALLWAY,
    ],
    "3br": [
        RoomType.LIVING, RoomType.BEDROOM, RoomType.BEDROOM, RoomType.BEDROOM,
        RoomType.BATHROOM, RoomType.BATHROOM, RoomType.KITCHEN, RoomType.HALLWAY,
    ],
}


def generate_preset_rooms(preset: str) -> List[Room]:
    """Generate the rooms of an apartment preset ('studio', '1br', '2br', '3br')."""
    if preset not in APARTMENT_PRESETS:
        raise ValueError(f"Unknown preset '{preset}'. Choose from: {', '.join(APARTMENT_PRESETS)}")
    return [create_room(room_type) for room_type in APARTMENT_PRESETS[preset]]


def format_area(area: float, unit: str = "sqm") -> str:
    """Format an area (m²) or a length (m) for display."""
    if unit == "lm":
        return f"{area:,.1f} m"
    return f"{area:,.1f} m²"
