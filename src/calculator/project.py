"""
Renovation Estimator - Project Model

ProjectModel is an immutable snapshot of everything the cost engine needs.
EstimatorSession owns the current snapshot plus the wizard position and
replaces them as the user (or the ingestion adapter) edits the project.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

from .cost_estimator import CalculationResult, CostEstimator
from .pricing import QualityLevel
from .room_geometry import (
    Room,
    RoomType,
    calculate_total_area,
    create_room,
    update_room_dimensions,
    update_room_materials,
)
from .wizard import WizardState, WizardStep
from .work_categories import (
    DEFAULT_WORK_CATEGORIES,
    SUB_CONFIG_UPDATERS,
    WorkCategories,
    clamp_underfloor_area,
    set_demolition,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectModel:
    """Rooms, work configuration and pricing options of one project."""
    rooms: Tuple[Room, ...] = field(default_factory=lambda: (create_room(RoomType.LIVING),))
    work_categories: WorkCategories = DEFAULT_WORK_CATEGORIES
    quality_level: QualityLevel = QualityLevel.STANDARD
    include_materials: bool = True

    def __post_init__(self):
        object.__setattr__(self, "rooms", tuple(self.rooms))

    @property
    def total_floor_area(self) -> float:
        return calculate_total_area(list(self.rooms))

    def get_room(self, room_id: str) -> Room:
        for room in self.rooms:
            if room.id == room_id:
                return room
        raise KeyError(f"No room with id '{room_id}'")


class EstimatorSession:
    """
    Single-user editing session over a ProjectModel.

    Every operation replaces ``project`` (and ``wizard``) with a new value;
    nothing is mutated in place.
    """

    def __init__(self, project: Optional[ProjectModel] = None, estimator: Optional[CostEstimator] = None):
        self.project = project or ProjectModel()
        self.wizard = WizardState()
        self.estimator = estimator or CostEstimator()

    @property
    def rooms(self) -> List[Room]:
        return list(self.project.rooms)

    @property
    def step(self) -> WizardStep:
        return self.wizard.step

    # =========================================================================
    # Rooms
    # =========================================================================

    def _replace_rooms(self, rooms: List[Room]):
        work = clamp_underfloor_area(self.project.work_categories, calculate_total_area(rooms))
        self.project = replace(self.project, rooms=tuple(rooms), work_categories=work)

    def add_room(self, room_type: RoomType, name: str = "") -> Room:
        room = create_room(room_type, name)
        self._replace_rooms(self.rooms + [room])
        return room

    def remove_room(self, room_id: str):
        """Remove a room. The project always keeps at least one room."""
        self.project.get_room(room_id)
        if len(self.project.rooms) <= 1:
            raise ValueError("Cannot remove the last room of a project")
        self._replace_rooms([room for room in self.rooms if room.id != room_id])

    def _replace_room(self, updated: Room) -> Room:
        self._replace_rooms([updated if room.id == updated.id else room for room in self.rooms])
        return updated

    def update_room_dimensions(self, room_id: str, **dimensions) -> Room:
        return self._replace_room(update_room_dimensions(self.project.get_room(room_id), **dimensions))

    def update_room_materials(self, room_id: str, **materials) -> Room:
        return self._replace_room(update_room_materials(self.project.get_room(room_id), **materials))

    # =========================================================================
    # Work categories and pricing options
    # =========================================================================

    def update_work(self, category: str, **changes) -> WorkCategories:
        """
        Merge a partial update into one work sub-config.

        Args:
            category: 'electrical', 'plumbing', 'heating' or 'doors_windows'
            **changes: Fields of that sub-config to change
        """
        if category not in SUB_CONFIG_UPDATERS:
            raise ValueError(f"Unknown work category '{category}'")
        work = SUB_CONFIG_UPDATERS[category](self.project.work_categories, **changes)
        work = clamp_underfloor_area(work, self.project.total_floor_area)
        self.project = replace(self.project, work_categories=work)
        return work

    def set_demolition(self, enabled: bool):
        self.project = replace(
            self.project, work_categories=set_demolition(self.project.work_categories, enabled)
        )

    def set_quality_level(self, level: QualityLevel):
        self.project = replace(self.project, quality_level=QualityLevel(level))

    def set_include_materials(self, include: bool):
        self.project = replace(self.project, include_materials=bool(include))

    def apply_project(self, project: ProjectModel):
        """Replace the whole project (used by ingestion)."""
        self.project = project
        logger.info("Project replaced: %d rooms", len(project.rooms))

    # =========================================================================
    # Navigation
    # =========================================================================

    def can_advance(self) -> bool:
        return self.wizard.can_advance(self.rooms)

    def next(self) -> WizardStep:
        self.wizard = self.wizard.next_step(self.rooms)
        return self.wizard.step

    def prev(self) -> WizardStep:
        self.wizard = self.wizard.prev_step()
        return self.wizard.step

    def go_to(self, step: WizardStep) -> WizardStep:
        self.wizard = self.wizard.go_to(step, self.rooms)
        return self.wizard.step

    # =========================================================================
    # Estimate
    # =========================================================================

    def calculate(self) -> CalculationResult:
        project = self.project
        return self.estimator.calculate(
            list(project.rooms),
            project.work_categories,
            project.quality_level,
            project.include_materials,
        )
