"""Dependency extraction phase built as a LangGraph workflow."""

from typing import Any, Dict, List

from langgraph.graph import END, START, StateGraph
from typing_extensions import TypedDict

from ..graph_builder import GraphBuilder
from ..graph_model import Node
from ..logging_utils import get_logger
from ..pipeline import PipelinePhase
from ..records import IssueRecord
from ..relations import RelationExtractor

logger = get_logger(__name__)


class ExtractionState(TypedDict):
    records: List[IssueRecord]
    candidates: List[Dict[str, Any]]
    skipped: List[Dict[str, str]]
    node_count: int


class DependencyExtractionPhase(PipelinePhase):
    phase_name = "extraction"
    requires = ("builder", "ingestion_output")

    def __init__(self, extractor: RelationExtractor | None = None) -> None:
        self._extractor = extractor or RelationExtractor()

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        builder: GraphBuilder = context["builder"]
        records = context["ingestion_output"].get("records", [])

        workflow = self._build_workflow(builder)
        result_state = workflow.invoke(
            {"records": list(records), "candidates": [], "skipped": [], "node_count": 0}
        )

        candidates = result_state.get("candidates", [])
        return {
            "extraction_output": {
                "record_count": len(records),
                "node_count": result_state.get("node_count", 0),
                "dependency_url_count": sum(len(item["depends_on_urls"]) for item in candidates),
                "skipped": result_state.get("skipped", []),
            }
        }

    def _build_workflow(self, builder: GraphBuilder):
        def register_nodes(state: ExtractionState) -> Dict[str, Any]:
            return self._register_nodes(state, builder)

        graph = StateGraph(ExtractionState)
        graph.add_node("prepare_records", self._prepare_records)
        graph.add_node("extract_relations", self._extract_relations)
        graph.add_node("register_nodes", register_nodes)
        graph.add_edge(START, "prepare_records")
        graph.add_edge("prepare_records", "extract_relations")
        graph.add_edge("extract_relations", "register_nodes")
        graph.add_edge("register_nodes", END)
        return graph.compile()

    @staticmethod
    def _prepare_records(state: ExtractionState) -> Dict[str, Any]:
        # The same issue may appear in several exports; keep the first copy.
        seen_urls = set()
        unique: List[IssueRecord] = []
        skipped = list(state.get("skipped", []))
        for record in state.get("records", []):
            if record.url and record.url in seen_urls:
                logger.warning("Skipping duplicate issue %s (%r)", record.url, record.title)
                skipped.append({"url": record.url, "reason": "duplicate_url"})
                continue
            if record.url:
                seen_urls.add(record.url)
            unique.append(record)
        return {"records": unique, "skipped": skipped}

    def _extract_relations(self, state: ExtractionState) -> Dict[str, Any]:
        candidates: List[Dict[str, Any]] = []
        skipped = list(state.get("skipped", []))
        for record in state.get("records", []):
            depends_on_urls: List[str] = []
            repository = record.repository()
            if repository is None:
                logger.warning("Unexpected issue URL; couldn't parse repository: %r", record.url)
                skipped.append({"url": record.url, "reason": "unparseable_repository"})
            else:
                relations = self._extractor.relations(record.body, repository, record.title)
                # Task list entries count as dependencies too; keep first-seen order.
                depends_on_urls = list(dict.fromkeys(relation.target for relation in relations))
            candidates.append({"record": record, "depends_on_urls": depends_on_urls})
        return {"candidates": candidates, "skipped": skipped}

    @staticmethod
    def _register_nodes(state: ExtractionState, builder: GraphBuilder) -> Dict[str, Any]:
        for candidate in state.get("candidates", []):
            record: IssueRecord = candidate["record"]
            builder.insert(
                Node(
                    id=builder.allocate_id(),
                    text=record.title,
                    url=record.url,
                    state=record.state,
                    labels=list(record.labels),
                    project_titles=set(record.project_titles),
                    depends_on_urls=list(candidate["depends_on_urls"]),
                    updated_at=record.updated_at,
                )
            )
        return {"node_count": builder.node_count}
