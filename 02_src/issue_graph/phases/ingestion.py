"""Issue ingestion phase: loads exported issues and project groupings."""

from pathlib import Path
from typing import Any, Dict, List

from ..pipeline import PipelinePhase
from ..records import IssueRecord, load_issue_records, load_project_item_urls


class IssueIngestionPhase(PipelinePhase):
    phase_name = "ingestion"

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        records: List[IssueRecord] = list(context.get("records") or [])
        issue_paths = [Path(str(path)) for path in context.get("issue_paths") or []]
        if issue_paths:
            records.extend(load_issue_records(issue_paths))

        project_items_path = context.get("project_items_path")
        grouped = 0
        if project_items_path:
            member_urls = load_project_item_urls(Path(str(project_items_path)))
            project_title = str(context.get("project_items_title") or "")
            for record in records:
                if record.url in member_urls and project_title not in record.project_titles:
                    record.project_titles.append(project_title)
                    grouped += 1

        return {
            "ingestion_output": {
                "records": records,
                "source_count": len(issue_paths),
                "grouped_count": grouped,
            }
        }
