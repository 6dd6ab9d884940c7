from __future__ import annotations

import logging

from brainstorm.services.errors import GraphIntegrityError
from .materialize import Materialized
from .model import Graph, integrity_errors

logger = logging.getLogger(__name__)


def merge(graph: Graph, materialized: Materialized) -> Graph:
    """Return a new graph with the materialized nodes and edges appended.

    Existing nodes and edges are carried over untouched. The input graph is
    never modified, so a failed merge leaves it exactly as it was.
    """
    nodes = list(graph.nodes) + list(materialized.nodes)
    edges = list(graph.edges) + list(materialized.edges)

    errors = integrity_errors(nodes, edges)
    if errors:
        logger.warning("Rejected merge of %d nodes: %s", len(materialized.nodes), "; ".join(errors))
        raise GraphIntegrityError("; ".join(errors))

    return Graph.model_construct(nodes=nodes, edges=edges)
