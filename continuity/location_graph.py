"""
continuity/location_graph.py -- Location containment hierarchy (NetworkX)

Builds a directed graph with one node per location and one edge from each
location to its parent.  The world evaluator uses it to resolve parents
and to find containment cycles ("A is inside B, B is inside A").

Usage:
    from continuity.location_graph import LocationGraph

    lg = LocationGraph(series.locations)
    parent = lg.parent_of("havenport")
    for cycle in lg.find_cycles():
        ...
"""

import logging

logger = logging.getLogger(__name__)

try:
    import networkx as nx
except ImportError:
    raise ImportError(
        "The 'networkx' package is required but not installed. "
        "Install it with: pip install networkx"
    )


class LocationGraph:
    """Directed child -> parent graph over a series' locations.

    Parameters
    ----------
    locations : iterable of SharedLocation
        The locations of one series snapshot.  When two locations share an
        id the first one wins; duplicate names are a separate issue.
    """

    def __init__(self, locations):
        self.graph: nx.DiGraph = nx.DiGraph()
        # Parent ids that no location in the snapshot carries
        self.dangling: list[tuple[str, str]] = []

        for location in locations:
            if location.id in self.graph:
                continue
            self.graph.add_node(location.id, location=location)

        for location_id, attrs in self.graph.nodes(data=True):
            parent_id = attrs["location"].parent_location_id
            if not parent_id:
                continue
            if parent_id in self.graph:
                self.graph.add_edge(location_id, parent_id)
            else:
                self.dangling.append((location_id, parent_id))

        logger.debug(
            "Location graph: %d nodes, %d parent links, %d dangling",
            self.graph.number_of_nodes(),
            self.graph.number_of_edges(),
            len(self.dangling),
        )

    def locations(self):
        """Yield each location in the graph, in snapshot order."""
        for _, location in self.graph.nodes(data="location"):
            yield location

    def get(self, location_id):
        """Return the location with *location_id*, or None."""
        if location_id not in self.graph:
            return None
        return self.graph.nodes[location_id]["location"]

    def parent_of(self, location_id):
        """Return the resolved parent location, or None if absent or dangling."""
        if location_id not in self.graph:
            return None
        for parent_id in self.graph.successors(location_id):
            return self.graph.nodes[parent_id]["location"]
        return None

    def find_cycles(self):
        """Return each containment cycle as a list of location ids.

        Every location has at most one parent, so cycles are disjoint and
        each one is reported once.  Ids are rotated so the smallest comes
        first, which keeps the output deterministic.
        """
        cycles = []
        for cycle in nx.simple_cycles(self.graph):
            start = cycle.index(min(cycle))
            cycles.append(cycle[start:] + cycle[:start])
        cycles.sort()
        return cycles
