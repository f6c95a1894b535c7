from dataclasses import dataclass
from enum import Enum

from campus_nav.domain.entities.geography import Coord


class TrackingState(Enum):
    UNINITIALIZED = "uninitialized"
    TRACKING = "tracking"


class RejectReason(Enum):
    STALE = "stale_sample"
    LOW_ACCURACY = "low_accuracy_sample"
    IMPLAUSIBLE_JUMP = "implausible_jump"


@dataclass(frozen=True)
class PositionSample:
    coord: Coord
    t_ms: float  # epoch milliseconds at which the fix was taken
    accuracy_m: float | None = None


@dataclass
class FilterState:
    # raw, not smoothed: the jump guard compares fix to fix
    last_raw: PositionSample | None = None
    smoothed: Coord | None = None
    last_accuracy_m: float | None = None

    @property
    def state(self) -> TrackingState:
        return TrackingState.UNINITIALIZED if self.smoothed is None else TrackingState.TRACKING
