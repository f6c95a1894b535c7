# main.py
import json
import sys

from campus_nav.app.build import build
from campus_nav.domain.entities.geography import Coord, VirtualNode


def _node_label(n) -> str:
    return "<virtual>" if isinstance(n, VirtualNode) else n


def run(lat: float, lng: float, destination: str) -> int:
    app = build({"graph": {"by": "name", "name": "campus"}}, use_logging=False)
    res = app.routes.compute_route(Coord(lat, lng), destination)
    if not res.ok:
        print(json.dumps({"ok": False, "error": res.error.kind.value, "detail": res.error.message}))
        return 1
    print(
        json.dumps(
            {
                "ok": True,
                "distance_m": res.total_distance_m,
                "origin_kind": res.origin_kind.value,
                "nodes": [_node_label(n) for n in res.node_ids],
                "polyline": [(c.lat, c.lng) for c in res.polyline],
            }
        )
    )
    return 0


if __name__ == "__main__":
    if len(sys.argv) != 4:
        print("usage: main.py LAT LNG BUILDING", file=sys.stderr)
        sys.exit(2)
    sys.exit(run(float(sys.argv[1]), float(sys.argv[2]), sys.argv[3]))
