"""
Renovation Estimator - Wizard Controller

Linear four-step flow (rooms -> materials -> work -> summary). The state is an
immutable WizardState; every transition returns a new state.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import List

from .room_geometry import Room


class WizardStep(IntEnum):
    ROOMS = 1
    MATERIALS = 2
    WORK = 3
    SUMMARY = 4


FIRST_STEP = WizardStep.ROOMS
LAST_STEP = WizardStep.SUMMARY


def is_step_valid(step: WizardStep, rooms: List[Room]) -> bool:
    """Whether the data entered on a step is complete."""
    if WizardStep(step) == WizardStep.ROOMS:
        return len(rooms) > 0 and all(
            room.dimensions.length > 0 and room.dimensions.width > 0 for room in rooms
        )
    # Materials and work selections have safe defaults
    return True


def can_advance(step: WizardStep, rooms: List[Room]) -> bool:
    """Whether a forward transition out of ``step`` is allowed. Summary is terminal."""
    step = WizardStep(step)
    if step == LAST_STEP:
        return False
    return is_step_valid(step, rooms)


@dataclass(frozen=True)
class WizardState:
    """Current wizard position. Holds nothing but the step."""
    step: WizardStep = FIRST_STEP

    def can_advance(self, rooms: List[Room]) -> bool:
        return can_advance(self.step, rooms)

    def next_step(self, rooms: List[Room]) -> "WizardState":
        """Advance one step. No-op at the summary or while the current step is invalid."""
        if not self.can_advance(rooms):
            return self
        return WizardState(WizardStep(self.step + 1))

    def prev_step(self) -> "WizardState":
        """Go back one step. No-op on the first step."""
        if self.step == FIRST_STEP:
            return self
        return WizardState(WizardStep(self.step - 1))

    def is_step_reachable(self, step: WizardStep, rooms: List[Room]) -> bool:
        """
        Whether a direct jump to ``step`` is allowed.

        Any earlier step (or the current one) is reachable; a later step only
        if it is the next one and the current step is valid.
        """
        step = WizardStep(step)
        if step <= self.step:
            return True
        return step == self.step + 1 and self.can_advance(rooms)

    def go_to(self, step: WizardStep, rooms: List[Room]) -> "WizardState":
        """Jump directly to a step if it is reachable, otherwise stay."""
        if not self.is_step_reachable(step, rooms):
            return self
        return WizardState(WizardStep(step))

    @property
    def is_complete(self) -> bool:
        return self.step == LAST_STEP
