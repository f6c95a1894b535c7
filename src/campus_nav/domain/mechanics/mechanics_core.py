# campus_nav/domain/mechanics/mechanics_core.py
from dataclasses import dataclass

from campus_nav.app.protocols import Mechanics, PathSolver, Snapper, WeightedGraph
from campus_nav.domain.entities.geography import Attachment, Coord, NodeKey
from campus_nav.domain.entities.route import SolvedPath


@dataclass
class Mechanics(Mechanics):
    snapper: Snapper
    path_solver: PathSolver

    def snap(self, p: Coord, graph) -> Attachment:
        return self.snapper.snap(p, graph)

    def shortest_path(self, graph: WeightedGraph, source: NodeKey, target: NodeKey) -> SolvedPath:
        return self.path_solver.shortest_path(graph, source, target)
