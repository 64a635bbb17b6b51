import math

import networkx as nx

from route_sim.app.protocols import PathFinder
from route_sim.domain.entities.geography import Point


class StraightLinePathFinder(PathFinder):
    def shortest_path(self, a, b):
        return [a] if a == b else [a, b]


class ManhattanPathFinder(PathFinder):
    def shortest_path(self, a, b):
        if a == b:
            return [a]
        corner = Point(b.x, a.y)
        if corner in (a, b):
            return [a, b]
        return [a, corner, b]


class NetworkPathFinder(PathFinder):
    """
    Dijkstra over a networkx graph.
    Nodes carry projected "x"/"y" attributes; edges a length attribute.
    Points are snapped to their nearest node.
    """

    def __init__(self, graph: nx.Graph, weight: str = "length_m"):
        self.G, self.weight = graph, weight
        self._xy = {n: Point(float(d["x"]), float(d["y"])) for n, d in graph.nodes(data=True)}
        if not self._xy:
            raise ValueError("graph has no nodes")

    def nearest_node(self, p: Point):
        return min(self._xy, key=lambda n: math.hypot(self._xy[n].x - p.x, self._xy[n].y - p.y))

    def node_point(self, n) -> Point:
        return self._xy[n]

    def shortest_path(self, a, b):
        na, nb = self.nearest_node(a), self.nearest_node(b)
        try:
            nodes = nx.shortest_path(self.G, source=na, target=nb, weight=self.weight)
        except nx.NetworkXNoPath:
            return []
        return [self._xy[n] for n in nodes]
