"""CLI entrypoint for rendering issue dependency maps."""

import argparse
import json
import sys
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Sequence

from .config import load_settings
from .errors import ConfigError, InputDataError
from .filters import GraphFilter
from .graph_builder import GraphBuilder
from .logging_utils import configure_logging, get_logger
from .phases import (
    DependencyExtractionPhase,
    DiagramRenderPhase,
    IssueIngestionPhase,
    ReferenceResolverPhase,
    ValidationAndQAPhase,
)
from .pipeline import PipelinePhase, PipelineRunner
from .renderer import render_markdown

logger = get_logger(__name__)


def build_default_phases() -> List[PipelinePhase]:
    return [
        IssueIngestionPhase(),
        DependencyExtractionPhase(),
        ReferenceResolverPhase(),
        ValidationAndQAPhase(),
        DiagramRenderPhase(),
    ]


def run_pipeline(
    issue_paths: Sequence[Path] = (),
    title: str = "",
    show_all: bool = False,
    include_project: str | None = None,
    updated_after: datetime | None = None,
    project_items_path: Path | None = None,
    project_items_title: str = "",
    prune: bool = False,
    records: Sequence[Any] = (),
) -> Dict[str, Any]:
    builder = GraphBuilder(
        title=title,
        show_all=show_all,
        graph_filter=GraphFilter(include_project=include_project, updated_after=updated_after),
    )
    initial_context: Dict[str, Any] = {
        "issue_paths": list(issue_paths),
        "records": list(records),
        "project_items_path": project_items_path,
        "project_items_title": project_items_title,
        "prune": prune,
        "builder": builder,
    }
    runner = PipelineRunner(phases=build_default_phases())
    return runner.run(initial_context)


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="issue-graph", description="GitHub issue dependency analysis.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    map_parser = subparsers.add_parser("map", help="Visualize dependency map as a Mermaid diagram.")
    map_parser.add_argument("--header", help="Header markdown to output at the top of the diagram.")
    map_parser.add_argument("--title", default="", help="Mermaid diagram title.")
    map_parser.add_argument(
        "--all", "-a", dest="show_all", action="store_true", help="Output all tasks; don't use default filter."
    )
    map_parser.add_argument(
        "--issues",
        action="append",
        type=Path,
        default=[],
        help="JSON issues list stored in a file, '-' for stdin. You can use this multiple times.",
    )
    map_parser.add_argument("--include-project", help="Filter to only include given project title.")
    map_parser.add_argument(
        "--prior-days",
        type=int,
        help="Additionally include closed issues updated in the last N days. Defaults to ISSUE_GRAPH_PRIOR_DAYS or 7.",
    )
    map_parser.add_argument("--project-items", type=Path, help="JSON project item list marking project membership.")
    map_parser.add_argument(
        "--project-items-title",
        default="Project",
        help="Project title given to issues listed in --project-items.",
    )
    map_parser.add_argument("--prune", action="store_true", help="Drop filtered-out nodes before rendering.")
    map_parser.add_argument("--artifact-path", type=Path, help="Also save the built graph as JSON here.")
    return parser.parse_args(argv)


def main(argv: List[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        settings = load_settings()
        configure_logging(settings.log_level)
        if args.prior_days is not None and args.prior_days < 0:
            raise ConfigError("--prior-days must not be negative")
        prior_days = settings.prior_days if args.prior_days is None else args.prior_days
        final_context = run_pipeline(
            issue_paths=args.issues,
            title=args.title,
            show_all=args.show_all,
            include_project=args.include_project,
            updated_after=replace(settings, prior_days=prior_days).updated_after(),
            project_items_path=args.project_items,
            project_items_title=args.project_items_title,
            prune=args.prune,
        )
    except (ConfigError, InputDataError) as error:
        logger.error("%s", error)
        return 1

    graph = final_context["graph"]
    for warning in final_context["validation_report"]["warnings"]:
        logger.warning("Graph invariant violated: %s", warning)

    if args.artifact_path:
        output_path = Path(args.artifact_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        artifact = graph.to_json()
        artifact["meta"] = {
            "extraction_report": final_context["extraction_output"],
            "resolver_report": final_context["resolver_output"]["summary"],
            "validation_report": final_context["validation_report"],
        }
        output_path.write_text(json.dumps(artifact, ensure_ascii=False, indent=2), encoding="utf-8")
        logger.info("Graph artifact saved to: %s", output_path.resolve())

    sys.stdout.write(render_markdown(final_context["diagram"], header=args.header))
    return 0
