# campus_nav/domain/mechanics/mechanics_factory.py

from campus_nav.config.models import MechanicsModel
from campus_nav.domain.mechanics.mechanics_core import Mechanics
from campus_nav.runtime.registries import make_path_solver, make_snapper


def build_mechanics(cfg: MechanicsModel | None = None) -> Mechanics:
    cfg = cfg or MechanicsModel()
    return Mechanics(
        snapper=make_snapper(cfg.snapper, deps={}),
        path_solver=make_path_solver(cfg.path_solver, deps={}),
    )
