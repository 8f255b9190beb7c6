"""Tests for room geometry: surfaces, type defaults, clamping and presets."""

from dataclasses import asdict

import pytest

from calculator.room_geometry import (
    APARTMENT_PRESETS,
    CeilingType,
    FlooringType,
    Room,
    RoomDimensions,
    RoomType,
    WallType,
    calculate_surfaces,
    calculate_total_area,
    calculate_total_surfaces,
    create_room,
    create_room_with_params,
    format_area,
    generate_preset_rooms,
    rename_room,
    update_room_dimensions,
    update_room_materials,
)


def test_surfaces_of_reference_room():
    surfaces = calculate_surfaces(RoomDimensions(length=4, width=3, height=2.7, doors=1, windows=1))

    assert surfaces.floor_area == pytest.approx(12)
    assert surfaces.ceiling_area == pytest.approx(12)
    assert surfaces.perimeter == pytest.approx(14)
    assert surfaces.wall_area == pytest.approx(34.5)
    assert surfaces.corners == 4


def test_wall_area_never_negative():
    surfaces = calculate_surfaces(RoomDimensions(length=1, width=1, height=2, doors=6, windows=6))
    assert surfaces.wall_area == 0


def test_computed_is_derived_on_construction():
    room = Room(type=RoomType.LIVING, dimensions=RoomDimensions(length=0, width=3))
    assert room.computed.floor_area == 0
    assert room.computed.perimeter == pytest.approx(6)


@pytest.mark.parametrize("room_type, length, width, doors, windows, flooring, walls, ceiling", [
    (RoomType.LIVING, 5, 4, 1, 2, FlooringType.LAMINATE, WallType.PAINT, CeilingType.PAINT),
    (RoomType.BEDROOM, 4, 3.5, 1, 1, FlooringType.LAMINATE, WallType.WALLPAPER, CeilingType.PAINT),
    (RoomType.BATHROOM, 2.5, 2, 1, 1, FlooringType.TILE, WallType.TILE, CeilingType.STRETCH),
    (RoomType.KITCHEN, 3.5, 3, 1, 1, FlooringType.TILE, WallType.PAINT, CeilingType.PAINT),
    (RoomType.HALLWAY, 4, 1.5, 2, 0, FlooringType.LAMINATE, WallType.PAINT, CeilingType.PAINT),
    (RoomType.BALCONY, 3, 1.2, 1, 0, FlooringType.TILE, WallType.PAINT, CeilingType.PAINT),
])
def test_type_defaults(room_type, length, width, doors, windows, flooring, walls, ceiling):
    room = create_room(room_type)

    assert room.dimensions == RoomDimensions(length, width, 2.7, doors, windows)
    assert (room.materials.flooring, room.materials.walls, room.materials.ceiling) == (flooring, walls, ceiling)
    assert room.computed.floor_area == pytest.approx(length * width)


def test_room_ids_are_unique():
    ids = {create_room(RoomType.BEDROOM).id for _ in range(50)}
    assert len(ids) == 50


def test_display_name_falls_back_to_type():
    assert create_room(RoomType.KITCHEN).display_name == "kitchen"
    assert create_room(RoomType.KITCHEN, "Main kitchen").display_name == "Main kitchen"


def test_create_room_with_params_fills_gaps_from_type():
    room = create_room_with_params(room_type=RoomType.KITCHEN, length=5, width=4)

    assert room.type == RoomType.KITCHEN
    assert room.dimensions.length == 5
    assert room.dimensions.width == 4
    assert room.dimensions.height == 2.7
    assert room.materials.flooring == FlooringType.TILE
    assert room.computed.floor_area == pytest.approx(20)


def test_create_room_with_params_defaults_to_living():
    room = create_room_with_params(name="Unknown space")
    assert room.type == RoomType.LIVING
    assert room.dimensions == create_room(RoomType.LIVING).dimensions
    assert room.name == "Unknown space"


def test_out_of_range_values_are_clamped():
    room = create_room_with_params(length=50, width=0.2, height=10, doors=9, windows=-2)

    assert room.dimensions.length == 20
    assert room.dimensions.width == 1
    assert room.dimensions.height == 4
    assert room.dimensions.doors == 6
    assert room.dimensions.windows == 0


def test_update_dimensions_recomputes_surfaces():
    room = create_room(RoomType.BEDROOM)
    updated = update_room_dimensions(room, length=4, width=3)

    assert updated.id == room.id
    assert updated.computed.floor_area == pytest.approx(12)
    assert updated.computed.wall_area == pytest.approx(34.5)
    # original value is untouched
    assert room.dimensions.length == 4
    assert room.dimensions.width == 3.5


def test_update_with_current_dimensions_is_identity():
    room = create_room(RoomType.HALLWAY)
    assert update_room_dimensions(room, **asdict(room.dimensions)) == room


def test_update_rounds_opening_counts():
    room = update_room_dimensions(create_room(RoomType.LIVING), doors=2.4, windows=2.6)
    assert room.dimensions.doors == 2
    assert room.dimensions.windows == 3


def test_update_materials_accepts_strings():
    room = update_room_materials(create_room(RoomType.LIVING), flooring="parquet", ceiling="stretch")

    assert room.materials.flooring == FlooringType.PARQUET
    assert room.materials.walls == WallType.PAINT
    assert room.materials.ceiling == CeilingType.STRETCH


def test_update_materials_rejects_unknown_finish():
    with pytest.raises(ValueError):
        update_room_materials(create_room(RoomType.LIVING), flooring="marble")


def test_rename_room():
    room = create_room(RoomType.BEDROOM)
    assert rename_room(room, "Guest room").display_name == "Guest room"


def test_totals_across_rooms():
    rooms = [create_room(RoomType.LIVING), create_room(RoomType.KITCHEN)]

    assert calculate_total_area(rooms) == pytest.approx(20 + 10.5)
    totals = calculate_total_surfaces(rooms)
    assert totals.floor_area == pytest.approx(30.5)
    assert totals.perimeter == pytest.approx(18 + 13)
    assert totals.corners == 8


def test_presets():
    for preset, types in APARTMENT_PRESETS.items():
        rooms = generate_preset_rooms(preset)
        assert [room.type for room in rooms] == types

    assert len(generate_preset_rooms("2br")) == 6
    with pytest.raises(ValueError):
        generate_preset_rooms("castle")


def test_format_area():
    assert format_area(12) == "12.0 m²"
    assert format_area(14, "lm") == "14.0 m"
