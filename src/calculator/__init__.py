from .room_geometry import Room, RoomType, RoomDimensions, RoomMaterials, ComputedSurfaces, FlooringType, WallType, CeilingType, create_room, create_room_with_params, update_room_dimensions, update_room_materials, calculate_surfaces, calculate_total_area, generate_preset_rooms
from .work_categories import WorkCategories, ElectricalConfig, PlumbingConfig, HeatingConfig, DoorsWindowsConfig, DEFAULT_WORK_CATEGORIES
from .pricing import QualityLevel, QUALITY_MULTIPLIERS, PriceCatalog, DefaultPriceCatalog, PriceCategory, UnitPrice
from .cost_estimator import CostEstimator, CalculationResult, BreakdownItem, RoomBreakdown, CategoryBreakdown, CostCategory, CostType, calculate_full_breakdown, compare_quality_levels
from .wizard import WizardState, WizardStep, can_advance
from .project import ProjectModel, EstimatorSession
