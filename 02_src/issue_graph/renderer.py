"""Mermaid flowchart rendering of a built graph."""

from typing import List

from .graph_model import Graph, Node

CLASS_DONE = "status-done"
CLASS_NOT_DONE = "status-not-done"

_CLASS_DEFS = [
    # Purple border, gray text.
    f"  classDef {CLASS_DONE} stroke:#7048D4,stroke-width:8px,color:#636871",
    # Green border.
    f"  classDef {CLASS_NOT_DONE} stroke:#317236,stroke-width:8px",
]


def mermaid_quote(text: str) -> str:
    """See https://mermaid.js.org/syntax/flowchart.html#special-characters-that-break-syntax"""
    escaped = text.replace("#", "#35;").replace('"', "#quot;")
    return f'"{escaped}"'


def render_mermaid(graph: Graph) -> str:
    lines: List[str] = []
    if graph.title:
        lines.extend(["---", f"title: {graph.title}", "---"])
    lines.append("flowchart LR")
    lines.extend(_CLASS_DEFS)

    for node in graph:
        if not graph.is_visible(node):
            continue
        lines.extend(_node_lines(node))
        for url in node.depends_on_urls:
            prerequisite = graph.get_node_by_url(url)
            if prerequisite is None or not graph.is_visible(prerequisite):
                continue
            lines.append(f"  {prerequisite.id} --> {node.id}")

    return "\n".join(lines) + "\n"


def _node_lines(node: Node) -> List[str]:
    declaration = f"  {node.id}"
    if node.text:
        declaration += f"({mermaid_quote(node.text)})"
    lines = [declaration, f"  class {node.id} {CLASS_NOT_DONE if node.is_open else CLASS_DONE}"]
    if node.url:
        lines.append(f"  click {node.id} {mermaid_quote(node.url)}")
    return lines


def render_markdown(diagram: str, header: str | None = None) -> str:
    """Wrap the diagram in a markdown document with a short legend."""
    parts: List[str] = []
    if header is not None:
        parts.extend([header, ""])
    parts.extend(
        [
            "A &rarr; B means A blocks B, or B depends on A.",
            "Press &harr; for full screen.",
            "",
            "```mermaid",
            diagram.rstrip("\n"),
            "```",
        ]
    )
    return "\n".join(parts) + "\n"
