import os
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False


# ----------------- TRACKING ---------------------


class FilterModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    stale_threshold_ms: float = 8_000.0
    accuracy_max_m: float = 60.0
    jump_guard_speed_mps: float = 8.0
    jump_slack_m: float = 15.0
    alpha: float = 0.25  # EMA weight of the newest fix

    @field_validator("stale_threshold_ms", "accuracy_max_m", "jump_guard_speed_mps")
    @classmethod
    def _positive(cls, v: float, info: ValidationInfo) -> float:
        if v <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return v

    @field_validator("jump_slack_m")
    @classmethod
    def _nonneg(cls, v: float, info: ValidationInfo) -> float:
        if v < 0:
            raise ValueError(f"{info.field_name} must be >= 0")
        return v

    @field_validator("alpha")
    @classmethod
    def _unit(cls, v: float) -> float:
        if not 0.0 < v <= 1.0:
            raise ValueError("alpha must lie in (0, 1]")
        return v


# ----------------- MECHANICS ---------------------


class SnapperNearestEdgeModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["nearest_edge"] = "nearest_edge"
    margin_m: float = Field(default=0.1, ge=0.0)


class SnapperNearestNodeModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["nearest_node"] = "nearest_node"


SnapperUnion = Annotated[
    SnapperNearestEdgeModel | SnapperNearestNodeModel, Field(discriminator="kind")
]


class PathSolverDijkstraModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["dijkstra"] = "dijkstra"


class PathSolverAStarModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["astar"] = "astar"


PathSolverUnion = Annotated[
    PathSolverDijkstraModel | PathSolverAStarModel, Field(discriminator="kind")
]


class MechanicsModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    snapper: SnapperUnion = Field(default_factory=SnapperNearestEdgeModel)
    path_solver: PathSolverUnion = Field(default_factory=PathSolverDijkstraModel)


# ----------------- GRAPH DATA ---------------------


class GraphDataModel(BaseModel):
    """Snapshot handed over by the graph data supply; lat/lng in degrees."""

    model_config = ConfigDict(extra="forbid")
    nodes: dict[str, tuple[float, float]]
    chain: list[str] = Field(default_factory=list)
    links: list[tuple[str, str]] = Field(default_factory=list)
    edges: list[tuple[str, str, float]] = Field(default_factory=list)
    entrances: dict[str, str] = Field(default_factory=dict)
    exits: dict[str, str] = Field(default_factory=dict)
    polygons: dict[str, list[list[tuple[float, float]]]] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_nodes(self):
        if not self.nodes:
            raise ValueError("nodes must not be empty")
        return self


class GraphByPath(BaseModel):
    model_config = ConfigDict(extra="forbid")
    by: Literal["path"] = "path"
    file: str
    fmt: Literal["json"] = "json"

    @field_validator("file")
    @classmethod
    def _expand(cls, v: str) -> str:
        return os.path.expandvars(os.path.expanduser(v))


class GraphByName(BaseModel):
    model_config = ConfigDict(extra="forbid")
    by: Literal["name"] = "name"
    name: str = "campus"


class GraphInline(BaseModel):
    model_config = ConfigDict(extra="forbid")
    by: Literal["inline"] = "inline"
    data: GraphDataModel


GraphRef = Annotated[GraphByPath | GraphByName | GraphInline, Field(discriminator="by")]


# ------------------ NAVIGATION -----------------------------


class NavigationModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    walking_speed_mps: float = Field(default=1.4, gt=0.0)
    arrival_radius_m: float = Field(default=10.0, ge=0.0)
    reroute_min_move_m: float = Field(default=5.0, ge=0.0)


# ------------------------------------------------------------------


class NavigatorModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = "campus"
    log: LogModel = LogModel()
    graph: GraphRef = Field(default_factory=GraphByName)
    mechanics: MechanicsModel = Field(default_factory=MechanicsModel)
    tracking: FilterModel = Field(default_factory=FilterModel)
    navigation: NavigationModel = Field(default_factory=NavigationModel)
