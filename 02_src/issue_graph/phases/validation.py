"""Validation and QA phase for graph consistency."""

from typing import Any, Dict, List

from ..graph_model import Graph
from ..pipeline import PipelinePhase


def find_invariant_violations(graph: Graph) -> List[str]:
    """Dangling ids and forward/reverse adjacency mismatches, as messages."""
    violations: List[str] = []
    for node in graph:
        for dep_id in node.depends_on_ids:
            prerequisite = graph.get_node_by_id(dep_id)
            if prerequisite is None:
                violations.append(f"{node.id} depends on missing node {dep_id}")
            elif node.id not in prerequisite.depended_on_by_ids:
                violations.append(f"{dep_id} does not list dependent {node.id}")
        for dependent_id in node.depended_on_by_ids:
            dependent = graph.get_node_by_id(dependent_id)
            if dependent is None:
                violations.append(f"{node.id} is depended on by missing node {dependent_id}")
            elif node.id not in dependent.depends_on_ids:
                violations.append(f"{dependent_id} does not list prerequisite {node.id}")
    return violations


class ValidationAndQAPhase(PipelinePhase):
    phase_name = "validation"
    requires = ("graph",)

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        graph: Graph = context["graph"]
        qa_report = {
            "node_count": len(graph),
            "edge_count": sum(len(node.depends_on_ids) for node in graph),
            "visible_node_count": sum(1 for _ in graph.visible_nodes()),
            "warnings": find_invariant_violations(graph),
        }
        return {"validation_report": qa_report}
