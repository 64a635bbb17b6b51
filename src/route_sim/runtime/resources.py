# route_sim/runtime/resources.py
import pickle
from functools import lru_cache

import networkx as nx


@lru_cache(maxsize=8)
def load_graph_from_path(file: str, fmt: str) -> nx.Graph:
    if fmt == "pickle":
        with open(file, "rb") as f:
            g = pickle.load(f)
    elif fmt == "graphml":
        g = nx.read_graphml(file, node_type=str)
    else:
        raise ValueError(f"Unsupported graph fmt {fmt!r}")
    if not isinstance(g, nx.Graph):
        raise TypeError(f"{file} does not hold a networkx graph (got {type(g).__name__})")
    return g
