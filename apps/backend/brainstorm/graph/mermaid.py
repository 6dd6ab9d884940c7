from __future__ import annotations

from typing import Any

from .model import MASTER_KIND, Graph


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def to_mermaid(graph: Graph) -> str:
    """Render the graph as a ``graph TD`` block for use as prompt context.

    One-way and lossy: positions are dropped and the text is never parsed
    back into a graph.
    """
    lines = ["graph TD"]

    master = next((n for n in graph.nodes if n.kind == MASTER_KIND), None)
    if master is not None:
        data = master.data
        lines.append(
            f"    {master.id}[{{problem: {_text(data.get('problem'))}, goal: {_text(data.get('goal'))}, "
            f"context: {_text(data.get('context'))}}}]:::{master.kind}"
        )

    for node in graph.nodes:
        if node.kind == MASTER_KIND:
            continue
        label = _text(node.data.get("label"))
        content = _text(node.data.get("content"))
        lines.append(f"    {node.id}[{label}-{content}]:::{node.kind}")

    for edge in graph.edges:
        lines.append(f"    {edge.source} --> {edge.target}")

    return "\n".join(lines) + "\n"
