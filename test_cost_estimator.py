"""Tests for the cost engine: itemization, reconciliation, quality levels and the expected range."""

import pytest

from calculator import (
    CostCategory,
    CostEstimator,
    CostType,
    DEFAULT_WORK_CATEGORIES,
    QualityLevel,
    RoomType,
    calculate_full_breakdown,
    compare_quality_levels,
    create_room,
    create_room_with_params,
)
from calculator.cost_estimator import WHOLE_PROJECT_ID, round_half_up
from calculator.room_geometry import Room, RoomDimensions
from calculator.work_categories import (
    update_doors_windows,
    update_electrical,
    update_heating,
    update_plumbing,
)


def assert_reconciled(result):
    assert sum(room.subtotal for room in result.by_room) == pytest.approx(result.grand_total, abs=1e-6)
    assert sum(category.subtotal for category in result.by_category) == pytest.approx(result.grand_total, abs=1e-6)
    assert result.total_labor + result.total_materials == pytest.approx(result.grand_total, abs=1e-6)


@pytest.mark.parametrize("quality", list(QualityLevel))
@pytest.mark.parametrize("include_materials", [True, False])
def test_views_reconcile(sample_rooms, quality, include_materials):
    result = CostEstimator().calculate(sample_rooms, DEFAULT_WORK_CATEGORIES, quality, include_materials)
    assert_reconciled(result)
    assert result.grand_total > 0


def test_item_totals_are_quantity_times_price(sample_rooms):
    result = CostEstimator().calculate(sample_rooms, DEFAULT_WORK_CATEGORIES)

    for category in result.by_category:
        for item in category.items:
            assert item.total == pytest.approx(item.quantity * item.unit_price)
            assert item.category == category.category


def test_kitchen_items():
    kitchen = create_room_with_params(room_type=RoomType.KITCHEN, length=5, width=4)
    items = CostEstimator().calculate_room_costs(kitchen, QualityLevel.STANDARD, True)
    by_id = {item.id.replace(kitchen.id, ""): item for item in items}

    flooring = by_id["-flooring"]
    assert flooring.quantity == pytest.approx(20)
    assert flooring.unit_price == 50
    assert flooring.cost_type == CostType.LABOR

    flooring_material = by_id["-flooring-mat"]
    assert flooring_material.unit_price == 50
    assert flooring_material.cost_type == CostType.MATERIAL

    assert by_id["-baseboard"].quantity == pytest.approx(18)
    assert by_id["-screed"].quantity == pytest.approx(20)
    assert "-plastering" in by_id


def test_tiled_walls_skip_plastering():
    bathroom = create_room(RoomType.BATHROOM)
    items = CostEstimator().calculate_room_costs(bathroom, QualityLevel.STANDARD, True)
    assert not any(item.id.endswith("-plastering") for item in items)


def test_labor_scales_with_quality_level(sample_rooms):
    estimator = CostEstimator()
    labor = {
        level: estimator.calculate(sample_rooms, DEFAULT_WORK_CATEGORIES, level, include_materials=False).total_labor
        for level in QualityLevel
    }

    assert labor[QualityLevel.PREMIUM] / labor[QualityLevel.STANDARD] == pytest.approx(1.4)
    assert labor[QualityLevel.ECONOMY] / labor[QualityLevel.STANDARD] == pytest.approx(0.85)


def test_material_prices_follow_tier_only(sample_rooms):
    result = CostEstimator().calculate(sample_rooms, DEFAULT_WORK_CATEGORIES, QualityLevel.PREMIUM)
    flooring = next(c for c in result.by_category if c.category == CostCategory.FLOORING)
    laminate = next(item for item in flooring.items if item.name == "flooring_laminate_material")

    assert laminate.unit_price == 60


def test_scale_materials_option(sample_rooms):
    result = CostEstimator(scale_materials=True).calculate(sample_rooms, DEFAULT_WORK_CATEGORIES, QualityLevel.PREMIUM)
    flooring = next(c for c in result.by_category if c.category == CostCategory.FLOORING)
    laminate = next(item for item in flooring.items if item.name == "flooring_laminate_material")

    assert laminate.unit_price == pytest.approx(60 * 1.4)
    assert_reconciled(result)


def test_materials_toggle(sample_rooms):
    estimator = CostEstimator()
    with_materials = estimator.calculate(sample_rooms, DEFAULT_WORK_CATEGORIES, include_materials=True)
    labor_only = estimator.calculate(sample_rooms, DEFAULT_WORK_CATEGORIES, include_materials=False)

    assert with_materials.grand_total >= labor_only.grand_total
    assert labor_only.total_materials == 0
    assert labor_only.total_labor == pytest.approx(with_materials.total_labor)
    assert all(
        item.cost_type == CostType.LABOR
        for category in labor_only.by_category for item in category.items
    )


def test_expected_range(sample_rooms):
    result = CostEstimator().calculate(sample_rooms, DEFAULT_WORK_CATEGORIES)

    assert result.low_estimate == round_half_up(result.grand_total * 0.90)
    assert result.high_estimate == round_half_up(result.grand_total * 1.15)
    assert result.low_estimate < result.grand_total < result.high_estimate


def test_round_half_up():
    assert round_half_up(10.5) == 11
    assert round_half_up(11.5) == 12
    assert round_half_up(10.49) == 10


def test_disabled_and_zero_work_contribute_nothing(sample_rooms):
    work = update_electrical(DEFAULT_WORK_CATEGORIES, enabled=False)
    work = update_plumbing(work, toilets=0, sinks=0, showers=0, bathtubs=0)
    result = CostEstimator().calculate(sample_rooms, work)
    categories = {category.category for category in result.by_category}

    assert CostCategory.ELECTRICAL not in categories
    assert CostCategory.PLUMBING not in categories
    assert CostCategory.HEATING in categories


def test_work_items():
    work = update_heating(DEFAULT_WORK_CATEGORIES, underfloor_area=6, boiler=True)
    work = update_doors_windows(work, entrance_door=True)
    items = {item.id: item for item in CostEstimator().calculate_work_category_costs(work, 30, QualityLevel.STANDARD)}

    assert items["demolition"].quantity == 30
    assert items["elec-outlets"].quantity == 10
    assert items["elec-outlets"].unit_price == 60
    assert items["heat-underfloor"].quantity == 6
    assert items["heat-boiler"].quantity == 1
    assert items["doors-entrance"].total == 400
    assert all(item.cost_type == CostType.LABOR for item in items.values())


def test_shared_cost_allocated_by_floor_area():
    big = create_room_with_params(room_type=RoomType.LIVING, length=5, width=4)
    small = create_room_with_params(room_type=RoomType.BEDROOM, length=5, width=2)

    shares = CostEstimator.allocate_shared_cost([big, small], 300)

    assert shares == pytest.approx([200, 100])
    assert sum(shares) == 300


def test_shared_cost_split_equally_without_floor_area():
    rooms = [Room(type=RoomType.LIVING, dimensions=RoomDimensions(length=0, width=0)) for _ in range(3)]
    assert CostEstimator.allocate_shared_cost(rooms, 90) == pytest.approx([30, 30, 30])


def test_room_subtotal_includes_shared_cost(sample_rooms):
    result = CostEstimator().calculate(sample_rooms, DEFAULT_WORK_CATEGORIES)

    for breakdown in result.by_room:
        own = sum(item.total for item in breakdown.items)
        assert breakdown.shared_cost > 0
        assert breakdown.subtotal == pytest.approx(own + breakdown.shared_cost)

    assert result.by_room[0].room_name == "Living room"
    assert result.by_room[1].room_name == "kitchen"


def test_no_rooms_uses_whole_project_breakdown():
    result = CostEstimator().calculate([], DEFAULT_WORK_CATEGORIES)

    assert len(result.by_room) == 1
    assert result.by_room[0].room_id == WHOLE_PROJECT_ID
    assert result.grand_total > 0
    assert_reconciled(result)


def test_empty_project_costs_nothing():
    work = update_electrical(DEFAULT_WORK_CATEGORIES, enabled=False)
    work = update_plumbing(work, enabled=False)
    work = update_heating(work, enabled=False)
    work = update_doors_windows(work, enabled=False)

    result = CostEstimator().calculate([], work)

    assert result.by_room == []
    assert result.grand_total == 0
    assert result.low_estimate == 0


def test_by_category_order(sample_rooms):
    result = calculate_full_breakdown(sample_rooms, DEFAULT_WORK_CATEGORIES)
    order = [category.category for category in result.by_category]
    assert order == [category for category in CostCategory if category in order]


def test_compare_quality_levels(sample_rooms):
    totals = compare_quality_levels(sample_rooms, DEFAULT_WORK_CATEGORIES)

    assert set(totals) == {"economy", "standard", "premium"}
    assert totals["economy"] < totals["standard"] < totals["premium"]
    assert totals["standard"] == pytest.approx(
        calculate_full_breakdown(sample_rooms, DEFAULT_WORK_CATEGORIES).grand_total
    )
