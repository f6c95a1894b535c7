from dataclasses import dataclass
from enum import Enum

from campus_nav.domain.entities.geography import Attachment, Coord, NodeId, NodeKey


class OriginKind(Enum):
    SNAPPED = "snapped"
    INSIDE_BUILDING = "inside_building"


class RouteErrorKind(Enum):
    NO_ENTRANCE_DEFINED = "no_entrance_defined"
    NO_EXIT_DEFINED = "no_exit_defined"
    NO_PATH_FOUND = "no_path_found"


@dataclass(frozen=True)
class RouteError:
    kind: RouteErrorKind
    message: str


@dataclass(frozen=True)
class SolvedPath:
    nodes: tuple[NodeKey, ...]
    total_length_m: float


@dataclass(frozen=True)
class RouteResult:
    node_ids: tuple[NodeKey, ...] = ()
    total_distance_m: int | None = None  # rounded to the meter
    polyline: tuple[Coord, ...] = ()
    origin_kind: OriginKind | None = None
    error: RouteError | None = None
    start_building: str | None = None
    origin: Attachment | None = None
    destination_node: NodeId | None = None
    exact_distance_m: float | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, kind: RouteErrorKind, message: str, **kw) -> "RouteResult":
        return cls(error=RouteError(kind, message), **kw)


@dataclass(frozen=True)
class RouteProgress:
    step: int  # index of the closest polyline vertex
    off_route_m: float  # distance from the position to that vertex
    remaining_m: float
    eta_s: float
    arrived: bool
