"""
Renovation Estimator - Price Catalog

Maps a (category, item key, quality level) to a unit price. Labor rates are
quoted at the standard tier and scaled by the quality multiplier in the cost
engine; material prices differ per tier.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Protocol, Tuple


class QualityLevel(str, Enum):
    """Quality tiers for work and materials."""
    ECONOMY = "economy"
    STANDARD = "standard"
    PREMIUM = "premium"


# Labor price multipliers per quality level
QUALITY_MULTIPLIERS: Dict[QualityLevel, float] = {
    QualityLevel.ECONOMY: 0.85,
    QualityLevel.STANDARD: 1.00,
    QualityLevel.PREMIUM: 1.40,
}


class PriceCategory(str, Enum):
    """Catalog sections."""
    FLOORING = "flooring"
    WALL_FINISH = "wall_finish"
    CEILING_FINISH = "ceiling_finish"
    WORK = "work"


@dataclass(frozen=True)
class UnitPrice:
    """Price of one unit of an item at a given quality level."""
    labor: float
    material: float
    unit: str


@dataclass(frozen=True)
class CatalogEntry:
    """Catalog data for one item: a base labor rate and per-tier material prices."""
    labor_rate: float
    unit: str
    material_prices: Tuple[float, float, float] = (0.0, 0.0, 0.0)  # economy, standard, premium

    def material_price(self, tier: QualityLevel) -> float:
        index = list(QualityLevel).index(QualityLevel(tier))
        return self.material_prices[index]


class PriceCatalog(Protocol):
    """Keyed unit-price lookup consumed by the cost engine."""

    def price(self, category: PriceCategory, item_key: str, tier: QualityLevel) -> UnitPrice:
        """
        Look up the unit price of an item.

        Raises:
            KeyError: If the catalog has no entry for the key
        """
        ...


class DefaultPriceCatalog:
    """
    Built-in renovation price catalog.

    Prices are approximate per-unit averages (m², linear m, or piece) and are
    meant for budgeting, not quoting.
    """

    PRICING_DATA: Dict[PriceCategory, Dict[str, CatalogEntry]] = {
        # ==================== FLOORING ====================
        PriceCategory.FLOORING: {
            "laminate": CatalogEntry(25, "sqm", (20, 35, 60)),
            "parquet": CatalogEntry(50, "sqm", (60, 100, 180)),
            "tile": CatalogEntry(50, "sqm", (25, 50, 100)),
            "vinyl": CatalogEntry(18, "sqm", (15, 30, 50)),
            "carpet": CatalogEntry(12, "sqm", (15, 30, 60)),
        },

        # ==================== WALLS ====================
        PriceCategory.WALL_FINISH: {
            "paint": CatalogEntry(14, "sqm", (3, 6, 12)),
            "wallpaper": CatalogEntry(18, "sqm", (10, 25, 50)),
            "tile": CatalogEntry(55, "sqm", (25, 50, 100)),
            "decorative_plaster": CatalogEntry(55, "sqm", (20, 40, 80)),
        },

        # ==================== CEILING ====================
        PriceCategory.CEILING_FINISH: {
            "paint": CatalogEntry(16, "sqm", (3, 6, 12)),
            "stretch": CatalogEntry(55, "sqm", (20, 35, 60)),
            "drywall": CatalogEntry(45, "sqm", (15, 25, 40)),
            "suspended": CatalogEntry(60, "sqm", (25, 45, 70)),
        },

        # ==================== WORK ====================
        PriceCategory.WORK: {
            "demolition_sqm": CatalogEntry(18, "sqm"),
            "outlet": CatalogEntry(60, "unit"),
            "switch": CatalogEntry(50, "unit"),
            "lighting_point": CatalogEntry(75, "unit"),
            "ac_point": CatalogEntry(220, "unit"),
            "toilet": CatalogEntry(280, "unit"),
            "sink": CatalogEntry(180, "unit"),
            "shower": CatalogEntry(380, "unit"),
            "bathtub": CatalogEntry(300, "unit"),
            "radiator": CatalogEntry(130, "unit"),
            "underfloor_sqm": CatalogEntry(55, "sqm"),
            "boiler": CatalogEntry(900, "unit"),
            "interior_door": CatalogEntry(180, "unit"),
            "entrance_door": CatalogEntry(400, "unit"),
            "baseboard_lm": CatalogEntry(14, "lm"),
            "screed_sqm": CatalogEntry(30, "sqm"),
            "plastering_sqm": CatalogEntry(32, "sqm"),
        },
    }

    def __init__(self, overrides: Dict[PriceCategory, Dict[str, CatalogEntry]] = None):
        """
        Initialize the catalog.

        Args:
            overrides: Optional entries replacing or extending the built-in data
        """
        self.entries = {category: dict(items) for category, items in self.PRICING_DATA.items()}
        for category, items in (overrides or {}).items():
            self.entries.setdefault(PriceCategory(category), {}).update(items)

    def get_entry(self, category: PriceCategory, item_key: str) -> CatalogEntry:
        return self.entries[PriceCategory(category)][item_key]

    def price(self, category: PriceCategory, item_key: str, tier: QualityLevel) -> UnitPrice:
        """Get the unit price of an item at a quality level."""
        entry = self.get_entry(category, item_key)
        return UnitPrice(
            labor=entry.labor_rate,
            material=entry.material_price(tier),
            unit=entry.unit,
        )

    def items_in(self, category: PriceCategory) -> Dict[str, CatalogEntry]:
        """Get all entries in a catalog section."""
        return dict(self.entries.get(PriceCategory(category), {}))
