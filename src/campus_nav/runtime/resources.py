# campus_nav/runtime/resources.py
import json
from functools import lru_cache
from pathlib import Path

from campus_nav.config.models import GraphDataModel
from campus_nav.domain.graph import GraphModel

DATA_DIR = Path(__file__).resolve().parent.parent / "data"


def graph_from_data(data: GraphDataModel) -> GraphModel:
    return GraphModel.from_links(
        data.nodes,
        data.links,
        chain=data.chain,
        edges=data.edges,
        entrances=data.entrances,
        exits=data.exits,
        polygons=data.polygons,
    )


def load_graph_data(file: str | Path, fmt: str = "json") -> GraphDataModel:
    if fmt == "json":
        with open(file, encoding="utf-8") as f:
            return GraphDataModel.model_validate(json.load(f))
    raise ValueError(f"Unsupported graph fmt {fmt!r}")


# GraphModel is immutable, so one instance per file can be shared by every caller
@lru_cache(maxsize=8)
def load_graph_from_path(file: str, fmt: str = "json") -> GraphModel:
    return graph_from_data(load_graph_data(file, fmt))


def load_bundled_graph(name: str = "campus") -> GraphModel:
    path = DATA_DIR / f"{name}_graph.json"
    if not path.exists():
        raise FileNotFoundError(f"no bundled graph named {name!r}")
    return load_graph_from_path(str(path), "json")
