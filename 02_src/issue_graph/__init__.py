"""Core package for the issue dependency graph pipeline."""

from .filters import GraphFilter
from .graph_builder import GraphBuilder
from .graph_model import Graph, ItemState, Node, NodeId
from .pipeline import PipelinePhase, PipelineRunner
from .relations import Relation, RelationExtractor, RelationKind
from .renderer import render_markdown, render_mermaid

__all__ = [
    "Node",
    "NodeId",
    "ItemState",
    "Graph",
    "GraphFilter",
    "GraphBuilder",
    "Relation",
    "RelationKind",
    "RelationExtractor",
    "PipelinePhase",
    "PipelineRunner",
    "render_mermaid",
    "render_markdown",
]
