"""Diagram rendering phase."""

from typing import Any, Dict

from ..graph_model import Graph
from ..pipeline import PipelinePhase
from ..renderer import render_mermaid


class DiagramRenderPhase(PipelinePhase):
    phase_name = "rendering"
    requires = ("graph",)

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        graph: Graph = context["graph"]
        pruned = graph.prune() if context.get("prune") else []
        return {"diagram": render_mermaid(graph), "pruned_ids": pruned}
