"""
Renovation Estimator - Cost Estimation Engine

Turns rooms, the project work configuration, a quality level and the
materials flag into an itemized estimate with two reconciled views: by room
and by category.
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from .pricing import DefaultPriceCatalog, PriceCatalog, PriceCategory, QualityLevel, QUALITY_MULTIPLIERS
from .room_geometry import Room, WallType, calculate_total_area
from .work_categories import WorkCategories

logger = logging.getLogger(__name__)

# Confidence band around the grand total
LOW_ESTIMATE_FACTOR = 0.90
HIGH_ESTIMATE_FACTOR = 1.15

WHOLE_PROJECT_ID = "project"


class CostCategory(str, Enum):
    """Categories used to group breakdown items."""
    FLOORING = "flooring"
    WALLS = "walls"
    CEILING = "ceiling"
    DEMOLITION = "demolition"
    ELECTRICAL = "electrical"
    PLUMBING = "plumbing"
    HEATING = "heating"
    DOORS_WINDOWS = "doors_windows"


class CostType(str, Enum):
    LABOR = "labor"
    MATERIAL = "material"


@dataclass
class BreakdownItem:
    """One priced line of the estimate. total = quantity * unit_price."""
    id: str
    name: str
    category: CostCategory
    quantity: float
    unit: str
    unit_price: float
    total: float
    cost_type: CostType = CostType.LABOR


@dataclass
class RoomBreakdown:
    """
    Items priced for one room.

    shared_cost is the room's floor-area share of the project-wide work
    items; it is part of subtotal but its items live in the category view.
    """
    room_id: str
    room_name: str
    items: List[BreakdownItem] = field(default_factory=list)
    shared_cost: float = 0.0
    subtotal: float = 0.0


@dataclass
class CategoryBreakdown:
    category: CostCategory
    items: List[BreakdownItem] = field(default_factory=list)
    subtotal: float = 0.0


@dataclass
class CalculationResult:
    """Complete estimate. Both views sum to grand_total."""
    by_room: List[RoomBreakdown] = field(default_factory=list)
    by_category: List[CategoryBreakdown] = field(default_factory=list)
    total_labor: float = 0.0
    total_materials: float = 0.0
    grand_total: float = 0.0
    low_estimate: int = 0
    high_estimate: int = 0


def round_half_up(value: float) -> int:
    """Round to the nearest whole unit, halves away from zero for positive values."""
    return int(math.floor(value + 0.5))


class CostEstimator:
    """
    Calculate itemized renovation estimates from rooms and work categories.
    """

    def __init__(self, catalog: Optional[PriceCatalog] = None, scale_materials: bool = False):
        """
        Initialize the cost estimator.

        Args:
            catalog: Price catalog to price against (built-in catalog if None)
            scale_materials: Also apply the quality multiplier to material prices
        """
        self.catalog = catalog or DefaultPriceCatalog()
        self.scale_materials = scale_materials

    def _make_items(
        self,
        item_id: str,
        name: str,
        category: CostCategory,
        price_category: PriceCategory,
        item_key: str,
        quantity: float,
        quality: QualityLevel,
        include_materials: bool
    ) -> List[BreakdownItem]:
        """Price one quantity: a labor item, plus a material item when requested."""
        price = self.catalog.price(price_category, item_key, quality)
        multiplier = QUALITY_MULTIPLIERS[quality]

        labor_price = price.labor * multiplier
        items = [BreakdownItem(
            id=item_id,
            name=name,
            category=category,
            quantity=quantity,
            unit=price.unit,
            unit_price=labor_price,
            total=quantity * labor_price,
            cost_type=CostType.LABOR,
        )]

        if include_materials and price.material > 0:
            material_price = price.material * (multiplier if self.scale_materials else 1.0)
            items.append(BreakdownItem(
                id=f"{item_id}-mat",
                name=f"{name}_material",
                category=category,
                quantity=quantity,
                unit=price.unit,
                unit_price=material_price,
                total=quantity * material_price,
                cost_type=CostType.MATERIAL,
            ))

        return items

    def calculate_room_costs(
        self,
        room: Room,
        quality: QualityLevel,
        include_materials: bool
    ) -> List[BreakdownItem]:
        """
        Price the finishes of a single room.

        Args:
            room: Room to price
            quality: Quality level
            include_materials: Whether to add material items next to labor

        Returns:
            List of BreakdownItems for the room
        """
        computed, materials = room.computed, room.materials
        items = []

        # Flooring
        items += self._make_items(
            f"{room.id}-flooring", f"flooring_{materials.flooring.value}",
            CostCategory.FLOORING, PriceCategory.FLOORING, materials.flooring.value,
            computed.floor_area, quality, include_materials,
        )
        items += self._make_items(
            f"{room.id}-baseboard", "baseboard",
            CostCategory.FLOORING, PriceCategory.WORK, "baseboard_lm",
            computed.perimeter, quality, False,
        )
        items += self._make_items(
            f"{room.id}-screed", "floor_screed",
            CostCategory.FLOORING, PriceCategory.WORK, "screed_sqm",
            computed.floor_area, quality, False,
        )

        # Walls (tiled walls need no plastering)
        items += self._make_items(
            f"{room.id}-walls", f"walls_{materials.walls.value}",
            CostCategory.WALLS, PriceCategory.WALL_FINISH, materials.walls.value,
            computed.wall_area, quality, include_materials,
        )
        if materials.walls != WallType.TILE:
            items += self._make_items(
                f"{room.id}-plastering", "wall_plastering",
                CostCategory.WALLS, PriceCategory.WORK, "plastering_sqm",
                computed.wall_area, quality, False,
            )

        # Ceiling
        items += self._make_items(
            f"{room.id}-ceiling", f"ceiling_{materials.ceiling.value}",
            CostCategory.CEILING, PriceCategory.CEILING_FINISH, materials.ceiling.value,
            computed.ceiling_area, quality, include_materials,
        )

        return [item for item in items if item.quantity > 0]

    def calculate_work_category_costs(
        self,
        work: WorkCategories,
        total_floor_area: float,
        quality: QualityLevel
    ) -> List[BreakdownItem]:
        """Price the project-wide work categories. Disabled categories and zero counts add nothing."""
        # (item id, name, category, catalog key, quantity)
        lines = []

        if work.demolition:
            lines.append(("demolition", "demolition", CostCategory.DEMOLITION, "demolition_sqm", total_floor_area))

        electrical = work.electrical
        if electrical.enabled:
            lines += [
                ("elec-outlets", "electrical_outlets", CostCategory.ELECTRICAL, "outlet", electrical.outlets),
                ("elec-switches", "electrical_switches", CostCategory.ELECTRICAL, "switch", electrical.switches),
                ("elec-lighting", "electrical_lighting", CostCategory.ELECTRICAL, "lighting_point", electrical.lighting_points),
                ("elec-ac", "electrical_ac", CostCategory.ELECTRICAL, "ac_point", electrical.ac_points),
            ]

        plumbing = work.plumbing
        if plumbing.enabled:
            lines += [
                ("plumb-toilet", "plumbing_toilet", CostCategory.PLUMBING, "toilet", plumbing.toilets),
                ("plumb-sink", "plumbing_sink", CostCategory.PLUMBING, "sink", plumbing.sinks),
                ("plumb-shower", "plumbing_shower", CostCategory.PLUMBING, "shower", plumbing.showers),
                ("plumb-bathtub", "plumbing_bathtub", CostCategory.PLUMBING, "bathtub", plumbing.bathtubs),
            ]

        heating = work.heating
        if heating.enabled:
            lines += [
                ("heat-radiator", "heating_radiator", CostCategory.HEATING, "radiator", heating.radiators),
                ("heat-underfloor", "heating_underfloor", CostCategory.HEATING, "underfloor_sqm", heating.underfloor_area),
                ("heat-boiler", "heating_boiler", CostCategory.HEATING, "boiler", 1 if heating.boiler else 0),
            ]

        doors = work.doors_windows
        if doors.enabled:
            lines += [
                ("doors-interior", "doors_interior", CostCategory.DOORS_WINDOWS, "interior_door", doors.interior_doors),
                ("doors-entrance", "doors_entrance", CostCategory.DOORS_WINDOWS, "entrance_door", 1 if doors.entrance_door else 0),
            ]

        items = []
        for item_id, name, category, key, quantity in lines:
            if quantity > 0:
                items += self._make_items(item_id, name, category, PriceCategory.WORK, key, quantity, quality, False)
        return items

    @staticmethod
    def allocate_shared_cost(rooms: List[Room], shared_total: float) -> List[float]:
        """
        Split a project-wide cost across rooms by floor-area share.

        The last room takes the remainder so the shares add up to shared_total.
        Rooms are weighted equally when the total floor area is zero.
        """
        if not rooms:
            return []

        total_area = calculate_total_area(rooms)
        if total_area > 0:
            weights = [room.computed.floor_area / total_area for room in rooms]
        else:
            weights = [1.0 / len(rooms)] * len(rooms)

        shares = [shared_total * weight for weight in weights[:-1]]
        shares.append(shared_total - sum(shares))
        return shares

    def calculate(
        self,
        rooms: List[Room],
        work: WorkCategories,
        quality: QualityLevel = QualityLevel.STANDARD,
        include_materials: bool = True
    ) -> CalculationResult:
        """
        Calculate the complete estimate.

        Args:
            rooms: Rooms of the project
            work: Project work configuration
            quality: Quality level (scales labor prices)
            include_materials: Whether material costs are included

        Returns:
            CalculationResult with by-room and by-category views
        """
        quality = QualityLevel(quality)

        by_room = []
        for room in rooms:
            items = self.calculate_room_costs(room, quality, include_materials)
            by_room.append(RoomBreakdown(
                room_id=room.id,
                room_name=room.display_name,
                items=items,
            ))

        work_items = self.calculate_work_category_costs(work, calculate_total_area(rooms), quality)
        shared_total = sum(item.total for item in work_items)

        if by_room:
            for breakdown, share in zip(by_room, self.allocate_shared_cost(rooms, shared_total)):
                breakdown.shared_cost = share
        elif work_items:
            by_room.append(RoomBreakdown(
                room_id=WHOLE_PROJECT_ID,
                room_name="whole project",
                shared_cost=shared_total,
            ))

        for breakdown in by_room:
            breakdown.subtotal = sum(item.total for item in breakdown.items) + breakdown.shared_cost

        all_items = [item for breakdown in by_room for item in breakdown.items] + work_items

        # Group by category
        grouped: Dict[CostCategory, List[BreakdownItem]] = {}
        for item in all_items:
            grouped.setdefault(item.category, []).append(item)

        by_category = [
            CategoryBreakdown(
                category=category,
                items=grouped[category],
                subtotal=sum(item.total for item in grouped[category]),
            )
            for category in CostCategory if category in grouped
        ]

        total_labor = sum(item.total for item in all_items if item.cost_type == CostType.LABOR)
        total_materials = sum(item.total for item in all_items if item.cost_type == CostType.MATERIAL)
        grand_total = total_labor + total_materials

        logger.debug(
            "Estimate: %d rooms, %d items, labor=%.2f materials=%.2f total=%.2f",
            len(rooms), len(all_items), total_labor, total_materials, grand_total,
        )

        return CalculationResult(
            by_room=by_room,
            by_category=by_category,
            total_labor=total_labor,
            total_materials=total_materials,
            grand_total=grand_total,
            low_estimate=round_half_up(grand_total * LOW_ESTIMATE_FACTOR),
            high_estimate=round_half_up(grand_total * HIGH_ESTIMATE_FACTOR),
        )


def calculate_full_breakdown(
    rooms: List[Room],
    work: WorkCategories,
    quality: QualityLevel = QualityLevel.STANDARD,
    include_materials: bool = True,
    catalog: Optional[PriceCatalog] = None
) -> CalculationResult:
    """Calculate an estimate with a one-off CostEstimator."""
    return CostEstimator(catalog).calculate(rooms, work, quality, include_materials)


def compare_quality_levels(
    rooms: List[Room],
    work: WorkCategories,
    include_materials: bool = True,
    catalog: Optional[PriceCatalog] = None
) -> Dict[str, float]:
    """
    Compare the grand total across all quality levels.

    Returns:
        Dictionary mapping quality level name to grand total
    """
    estimator = CostEstimator(catalog)
    return {
        level.value: estimator.calculate(rooms, work, level, include_materials).grand_total
        for level in QualityLevel
    }
