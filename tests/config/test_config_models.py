# tests/config/test_config_models.py
import pytest
from pydantic import ValidationError

from campus_nav.config.models import (
    FilterModel,
    GraphByName,
    GraphByPath,
    GraphDataModel,
    NavigatorModel,
    PathSolverAStarModel,
    SnapperNearestEdgeModel,
)


def test_defaults():
    m = NavigatorModel()
    assert m.tracking == FilterModel(
        stale_threshold_ms=8_000, accuracy_max_m=60, jump_guard_speed_mps=8, jump_slack_m=15, alpha=0.25
    )
    assert m.graph == GraphByName(name="campus")
    assert isinstance(m.mechanics.snapper, SnapperNearestEdgeModel)
    assert m.mechanics.snapper.margin_m == 0.1
    assert m.navigation.walking_speed_mps == 1.4
    assert m.navigation.arrival_radius_m == 10.0
    assert m.log.level == "INFO" and not m.log.debug


@pytest.mark.parametrize("alpha", [0.0, -0.1, 1.5])
def test_alpha_must_be_in_unit_interval(alpha):
    with pytest.raises(ValidationError):
        FilterModel(alpha=alpha)


@pytest.mark.parametrize(
    "field", ["stale_threshold_ms", "accuracy_max_m", "jump_guard_speed_mps"]
)
def test_thresholds_must_be_positive(field):
    with pytest.raises(ValidationError):
        FilterModel(**{field: 0})


def test_negative_slack_rejected():
    with pytest.raises(ValidationError):
        FilterModel(jump_slack_m=-1)
    assert FilterModel(jump_slack_m=0).jump_slack_m == 0


def test_unknown_keys_are_rejected():
    with pytest.raises(ValidationError):
        NavigatorModel.model_validate({"tracking": {"alpah": 0.3}})


def test_discriminated_unions():
    m = NavigatorModel.model_validate(
        {"mechanics": {"path_solver": {"kind": "astar"}}, "graph": {"by": "path", "file": "g.json"}}
    )
    assert isinstance(m.mechanics.path_solver, PathSolverAStarModel)
    assert isinstance(m.graph, GraphByPath)
    with pytest.raises(ValidationError):
        NavigatorModel.model_validate({"mechanics": {"path_solver": {"kind": "bfs"}}})


def test_graph_path_expands_env_and_home(monkeypatch):
    monkeypatch.setenv("CAMPUS_DATA", "/srv/campus")
    assert GraphByPath(file="$CAMPUS_DATA/g.json").file == "/srv/campus/g.json"
    assert not GraphByPath(file="~/g.json").file.startswith("~")


def test_graph_data_requires_nodes():
    with pytest.raises(ValidationError):
        GraphDataModel(nodes={})
    d = GraphDataModel.model_validate({"nodes": {"A": [1, 2]}, "links": [["A", "A"]]})
    assert d.nodes["A"] == (1.0, 2.0)
