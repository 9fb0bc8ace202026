"""Reference resolver phase: turns raw dependency URLs into graph edges."""

from typing import Any, Dict, List

from ..graph_builder import GraphBuilder
from ..pipeline import PipelinePhase


class ReferenceResolverPhase(PipelinePhase):
    phase_name = "reference_resolver"
    requires = ("builder",)

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        builder: GraphBuilder = context["builder"]
        graph = builder.build()

        resolved_count = 0
        unresolved_refs: List[Dict[str, str]] = []
        for node in graph:
            for url in node.depends_on_urls:
                if graph.get_node_by_url(url) is None:
                    unresolved_refs.append({"source_url": node.url, "ref_url": url, "reason": "no_matching_node"})
                else:
                    resolved_count += 1

        resolver_output = {
            "unresolved_refs": unresolved_refs,
            "summary": {
                "input_count": resolved_count + len(unresolved_refs),
                "resolved_count": resolved_count,
                "unresolved_count": len(unresolved_refs),
            },
        }
        return {"graph": graph, "resolver_output": resolver_output}
