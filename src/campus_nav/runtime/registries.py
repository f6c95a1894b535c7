# runtime/registries.py
from collections.abc import Callable

from campus_nav.app.protocols import PathSolver, Snapper
from campus_nav.config.models import (
    GraphByName,
    GraphByPath,
    GraphInline,
    GraphRef,
    PathSolverAStarModel,
    PathSolverDijkstraModel,
    PathSolverUnion,
    SnapperNearestEdgeModel,
    SnapperNearestNodeModel,
    SnapperUnion,
)
from campus_nav.domain.graph import GraphModel
from campus_nav.domain.mechanics.mechanics_path_solvers import AStarSolver, DijkstraSolver
from campus_nav.domain.mechanics.mechanics_snappers import NearestEdgeSnapper, NodeSnapper
from campus_nav.runtime.resources import graph_from_data, load_bundled_graph, load_graph_from_path

SnapperFactory = Callable[[SnapperUnion, dict], Snapper]
PathSolverFactory = Callable[[PathSolverUnion, dict], PathSolver]

_snapper_registry: dict[str, SnapperFactory] = {}
_path_solver_registry: dict[str, PathSolverFactory] = {}


# ------------------- Snappers ---------------------------


def register_snapper(kind: str):
    def deco(fn: SnapperFactory):
        _snapper_registry[kind] = fn
        return fn

    return deco


def make_snapper(cfg: SnapperUnion, *, deps: dict) -> Snapper:
    try:
        factory = _snapper_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown snapper kind {cfg.kind!r}") from None
    return factory(cfg, deps)


@register_snapper("nearest_edge")
def _make_nearest_edge(cfg: SnapperNearestEdgeModel, deps):
    return NearestEdgeSnapper(margin_m=cfg.margin_m)


@register_snapper("nearest_node")
def _make_nearest_node(cfg: SnapperNearestNodeModel, deps):
    return NodeSnapper()


# --------------------- Path Solvers  ---------------------


def register_path_solver(kind: str):
    def deco(fn: PathSolverFactory):
        _path_solver_registry[kind] = fn
        return fn

    return deco


def make_path_solver(cfg: PathSolverUnion, *, deps: dict) -> PathSolver:
    try:
        factory = _path_solver_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown path solver kind {cfg.kind!r}") from None
    return factory(cfg, deps)


@register_path_solver("dijkstra")
def _make_dijkstra(cfg: PathSolverDijkstraModel, deps):
    return DijkstraSolver()


@register_path_solver("astar")
def _make_astar(cfg: PathSolverAStarModel, deps):
    return AStarSolver()


# --------------------- Graphs ---------------------


def resolve_graph(ref: GraphRef | None, *, deps: dict) -> GraphModel:
    """
    deps can include:
      - 'graphs': dict[str, GraphModel]  # prebuilt graphs by name
      - 'graph': GraphModel              # a direct fallback/default
    """
    if ref is None:
        if "graph" in deps:
            return deps["graph"]
        raise ValueError("No graph provided")
    if isinstance(ref, GraphByName):
        graphs = deps.get("graphs") or {}
        if ref.name in graphs:
            return graphs[ref.name]
        return load_bundled_graph(ref.name)  # raises FileNotFoundError if unknown
    if isinstance(ref, GraphByPath):
        return load_graph_from_path(ref.file, ref.fmt)
    if isinstance(ref, GraphInline):
        return graph_from_data(ref.data)
    raise TypeError(ref)
