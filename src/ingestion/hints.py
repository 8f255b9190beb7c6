"""
Renovation Estimator - Analysis Hints

Tolerant models for the loosely-structured output of the AI service. Every
field is optional and unparsable values become None instead of failing
validation. These types never reach the estimator directly: the ingestion
adapter merges them onto the strict domain model.
"""

import math
import re
from typing import Any, ClassVar, List, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from calculator.pricing import QualityLevel
from calculator.room_geometry import CeilingType, FlooringType, RoomType, WallType


FEET_TO_METERS = 0.3048


class DimensionParser:
    """Parse a single length value such as 4.5, "4,5 m", "450 cm" or 14'-6"."""

    IMPERIAL_PATTERN = re.compile(r"^(\d+(?:\.\d+)?)\s*(?:'|ft|feet)\s*-?\s*(?:(\d+(?:\.\d+)?)\s*(?:\"|in))?$")
    METRIC_PATTERN = re.compile(r"^(\d+(?:[.,]\d+)?)\s*(mm|cm|m)?$")
    AREA_PATTERN = re.compile(r"^(\d+(?:[.,]\d+)?)\s*(m2|m²|sqm|sq\.?\s*m|sq\.?\s*ft|sqft|ft2|ft²)$")

    @classmethod
    def parse_length(cls, value: Any) -> Optional[float]:
        """Parse a length into meters. Returns None if it can't be read."""
        if isinstance(value, bool) or value is None:
            return None
        if isinstance(value, (int, float)):
            return float(value) if math.isfinite(value) and value >= 0 else None

        text = str(value).strip().lower()

        match = cls.IMPERIAL_PATTERN.match(text)
        if match:
            feet = float(match.group(1)) + float(match.group(2) or 0) / 12
            return feet * FEET_TO_METERS

        match = cls.METRIC_PATTERN.match(text)
        if match:
            number = float(match.group(1).replace(",", "."))
            divisor = {"mm": 1000.0, "cm": 100.0}.get(match.group(2), 1.0)
            return number / divisor

        return None

    @classmethod
    def parse_area(cls, value: Any) -> Optional[float]:
        """Parse an area such as "12 sqm", "12 m²" or "120 sq ft" into square meters."""
        if isinstance(value, str):
            match = cls.AREA_PATTERN.match(value.strip().lower())
            if match:
                number = float(match.group(1).replace(",", "."))
                if "ft" in match.group(2):
                    return number * FEET_TO_METERS ** 2
                return number
        return cls.parse_length(value)


class RoomTypeDetector:
    """Detect room type from a room name or a loose type label."""

    KITCHEN_KEYWORDS = ['kitchen', 'kitchenette', 'galley']
    BATHROOM_KEYWORDS = ['bathroom', 'bath', 'restroom', 'powder room', 'toilet',
                         'shower', 'ensuite', 'wc', 'lavatory']
    BEDROOM_KEYWORDS = ['bedroom', 'guest room', 'nursery', 'kids room', 'bed']
    HALLWAY_KEYWORDS = ['hallway', 'hall', 'corridor', 'entry', 'foyer', 'vestibule']
    BALCONY_KEYWORDS = ['balcony', 'loggia', 'terrace']
    LIVING_KEYWORDS = ['living', 'lounge', 'family room', 'great room',
                       'dining', 'office', 'study']

    @classmethod
    def detect(cls, text: str) -> Optional[RoomType]:
        """Detect room type from text. Returns None if nothing matches."""
        lowered = text.lower().strip()

        # Order matters: "bathroom" must win over "bed", "hallway" over "hall"
        for room_type, keywords in (
            (RoomType.KITCHEN, cls.KITCHEN_KEYWORDS),
            (RoomType.BATHROOM, cls.BATHROOM_KEYWORDS),
            (RoomType.BALCONY, cls.BALCONY_KEYWORDS),
            (RoomType.BEDROOM, cls.BEDROOM_KEYWORDS),
            (RoomType.HALLWAY, cls.HALLWAY_KEYWORDS),
            (RoomType.LIVING, cls.LIVING_KEYWORDS),
        ):
            for keyword in keywords:
                if keyword in lowered:
                    return room_type
        return None


FLOORING_SYNONYMS = {
    "hardwood": FlooringType.PARQUET,
    "wood": FlooringType.PARQUET,
    "ceramic": FlooringType.TILE,
    "porcelain": FlooringType.TILE,
    "stone": FlooringType.TILE,
    "linoleum": FlooringType.VINYL,
    "lvt": FlooringType.VINYL,
    "rug": FlooringType.CARPET,
}

WALL_SYNONYMS = {
    "painted": WallType.PAINT,
    "plaster": WallType.DECORATIVE_PLASTER,
    "venetian_plaster": WallType.DECORATIVE_PLASTER,
    "ceramic": WallType.TILE,
    "tiles": WallType.TILE,
}

CEILING_SYNONYMS = {
    "painted": CeilingType.PAINT,
    "gypsum": CeilingType.DRYWALL,
    "plasterboard": CeilingType.DRYWALL,
    "stretched": CeilingType.STRETCH,
    "drop": CeilingType.SUSPENDED,
    "armstrong": CeilingType.SUSPENDED,
}

QUALITY_SYNONYMS = {
    "budget": QualityLevel.ECONOMY,
    "basic": QualityLevel.ECONOMY,
    "low": QualityLevel.ECONOMY,
    "cheap": QualityLevel.ECONOMY,
    "medium": QualityLevel.STANDARD,
    "mid": QualityLevel.STANDARD,
    "average": QualityLevel.STANDARD,
    "high": QualityLevel.PREMIUM,
    "luxury": QualityLevel.PREMIUM,
    "high_end": QualityLevel.PREMIUM,
}


def _key(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    return re.sub(r"[\s\-]+", "_", value.strip().lower())


def _lenient_enum(value: Any, enum_type, synonyms: dict):
    key = _key(value)
    if key is None:
        return None
    try:
        return enum_type(key)
    except ValueError:
        return synonyms.get(key)


def _lenient_count(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return int(value)
    try:
        number = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return max(0, round(number))


def _lenient_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value > 0
    key = _key(value)
    if key in ("true", "yes", "y", "on", "1"):
        return True
    if key in ("false", "no", "n", "off", "0", "none"):
        return False
    return None


def lenient_quality_level(value: Any) -> Optional[QualityLevel]:
    return _lenient_enum(value, QualityLevel, QUALITY_SYNONYMS)


class HintModel(BaseModel):
    """Base for hint models: accepts snake_case and camelCase keys, ignores extras."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class RoomHint(HintModel):
    name: Optional[str] = None
    type: Optional[RoomType] = Field(default=None, validation_alias=AliasChoices("type", "roomType", "room_type"))
    length: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    doors: Optional[int] = Field(default=None, validation_alias=AliasChoices("doors", "doorCount", "door_count"))
    windows: Optional[int] = Field(default=None, validation_alias=AliasChoices("windows", "windowCount", "window_count"))
    flooring: Optional[FlooringType] = None
    walls: Optional[WallType] = Field(default=None, validation_alias=AliasChoices("walls", "wallFinish", "wall_finish"))
    ceiling: Optional[CeilingType] = Field(default=None, validation_alias=AliasChoices("ceiling", "ceilingFinish", "ceiling_finish"))

    @field_validator("name", mode="before")
    @classmethod
    def _parse_name(cls, value):
        return str(value).strip() if value is not None else None

    @field_validator("type", mode="before")
    @classmethod
    def _parse_type(cls, value):
        key = _key(value)
        if key is None:
            return None
        try:
            return RoomType(key)
        except ValueError:
            return RoomTypeDetector.detect(key.replace("_", " "))

    @field_validator("length", "width", "height", mode="before")
    @classmethod
    def _parse_length(cls, value):
        return DimensionParser.parse_length(value)

    @field_validator("doors", "windows", mode="before")
    @classmethod
    def _parse_count(cls, value):
        return _lenient_count(value)

    @field_validator("flooring", mode="before")
    @classmethod
    def _parse_flooring(cls, value):
        return _lenient_enum(value, FlooringType, FLOORING_SYNONYMS)

    @field_validator("walls", mode="before")
    @classmethod
    def _parse_walls(cls, value):
        return _lenient_enum(value, WallType, WALL_SYNONYMS)

    @field_validator("ceiling", mode="before")
    @classmethod
    def _parse_ceiling(cls, value):
        return _lenient_enum(value, CeilingType, CEILING_SYNONYMS)

    @model_validator(mode="after")
    def _detect_type_from_name(self):
        if self.type is None and self.name:
            self.type = RoomTypeDetector.detect(self.name)
        return self


class SubConfigHint(HintModel):
    """Work sub-config hint. A bare boolean is read as the enabled flag."""
    enabled: Optional[bool] = None

    @model_validator(mode="before")
    @classmethod
    def _from_flag(cls, value):
        if isinstance(value, dict):
            return value
        flag = _lenient_bool(value)
        return {"enabled": flag} if flag is not None else {}

    @field_validator("*", mode="before")
    @classmethod
    def _parse_field(cls, value, info):
        if info.field_name in cls.BOOL_FIELDS:
            return _lenient_bool(value)
        if info.field_name in cls.AREA_FIELDS:
            return DimensionParser.parse_area(value)
        return _lenient_count(value)

    BOOL_FIELDS: ClassVar[Tuple[str, ...]] = ("enabled",)
    AREA_FIELDS: ClassVar[Tuple[str, ...]] = ()


class ElectricalHint(SubConfigHint):
    outlets: Optional[int] = None
    switches: Optional[int] = None
    lighting_points: Optional[int] = None
    ac_points: Optional[int] = None


class PlumbingHint(SubConfigHint):
    toilets: Optional[int] = None
    sinks: Optional[int] = None
    showers: Optional[int] = None
    bathtubs: Optional[int] = None


class HeatingHint(SubConfigHint):
    radiators: Optional[int] = None
    underfloor_area: Optional[float] = None
    boiler: Optional[bool] = None

    BOOL_FIELDS: ClassVar[Tuple[str, ...]] = ("enabled", "boiler")
    AREA_FIELDS: ClassVar[Tuple[str, ...]] = ("underfloor_area",)


class DoorsWindowsHint(SubConfigHint):
    interior_doors: Optional[int] = None
    entrance_door: Optional[bool] = None

    BOOL_FIELDS: ClassVar[Tuple[str, ...]] = ("enabled", "entrance_door")


class WorkHints(HintModel):
    demolition: Optional[bool] = None
    electrical: Optional[ElectricalHint] = None
    plumbing: Optional[PlumbingHint] = None
    heating: Optional[HeatingHint] = None
    doors_windows: Optional[DoorsWindowsHint] = Field(
        default=None, validation_alias=AliasChoices("doors_windows", "doorsWindows", "doors")
    )

    @model_validator(mode="before")
    @classmethod
    def _ensure_dict(cls, value):
        return value if isinstance(value, dict) else {}

    @field_validator("demolition", mode="before")
    @classmethod
    def _parse_demolition(cls, value):
        return _lenient_bool(value)


class ProjectAnalysis(HintModel):
    """Best-effort result of the AI service's project analysis."""
    rooms: List[RoomHint] = Field(default_factory=list)
    work_suggestions: WorkHints = Field(default_factory=WorkHints)
    quality_level: Optional[QualityLevel] = None
    notes: List[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _ensure_dict(cls, value):
        return value if isinstance(value, dict) else {}

    @field_validator("rooms", mode="before")
    @classmethod
    def _parse_rooms(cls, value):
        if not isinstance(value, list):
            return []
        return [room for room in value if isinstance(room, dict)]

    @field_validator("work_suggestions", mode="before")
    @classmethod
    def _parse_work(cls, value):
        return value if isinstance(value, dict) else {}

    @field_validator("quality_level", mode="before")
    @classmethod
    def _parse_quality(cls, value):
        return lenient_quality_level(value)

    @field_validator("notes", mode="before")
    @classmethod
    def _parse_notes(cls, value):
        if isinstance(value, str):
            return [value] if value.strip() else []
        if not isinstance(value, list):
            return []
        return [str(note) for note in value if note is not None and str(note).strip()]
