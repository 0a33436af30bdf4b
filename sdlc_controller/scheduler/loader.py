"""Graph Loader - Read issue lists from dependency graph files."""

import json
from pathlib import Path
from typing import Any, Dict, List

from sdlc_controller.scheduler.errors import (
    GraphNotFoundError,
    GraphParseError,
    GraphValidationError,
)
from sdlc_controller.scheduler.models import IssueNode


def load_issues(file_path: str) -> List[IssueNode]:
    """Load issues from a JSON dependency graph file.

    Supported layouts:
    - a list of issue records
    - ``{"issues": [...]}``
    - ``{"nodes": [...], "edges": [{"from": ..., "to": ...}]}``, where
      ``from`` depends on ``to``

    Raises:
        GraphNotFoundError: If the file does not exist
        GraphParseError: If the file cannot be read or is not valid JSON
        GraphValidationError: If the content has the wrong structure
    """
    path = Path(file_path)
    if not path.exists():
        raise GraphNotFoundError(str(file_path))

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise GraphParseError(str(file_path), e) from e

    return parse_issues(data)


def parse_issues(data: Any) -> List[IssueNode]:
    """Turn decoded graph data into IssueNode records."""
    if isinstance(data, list):
        records = data
    elif isinstance(data, dict) and "issues" in data:
        records = data["issues"]
    elif isinstance(data, dict) and ("nodes" in data or "edges" in data):
        records = _merge_edges(data)
    else:
        raise GraphValidationError(['Graph must be a list of issues or contain "issues" or "nodes"'])

    if not isinstance(records, list):
        raise GraphValidationError(['"issues" must be an array'])

    errors: List[str] = []
    nodes: List[IssueNode] = []
    for index, record in enumerate(records):
        try:
            nodes.append(IssueNode.from_dict(record, index))
        except GraphValidationError as e:
            errors.extend(e.errors)

    if errors:
        raise GraphValidationError(errors)

    return nodes


def _merge_edges(data: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Fold a nodes/edges graph into issue records with dependency lists."""
    nodes = data.get("nodes")
    edges = data.get("edges", [])
    errors: List[str] = []

    if not isinstance(nodes, list):
        errors.append('Missing or invalid "nodes" array')
    if not isinstance(edges, list):
        errors.append('Missing or invalid "edges" array')
    if errors:
        raise GraphValidationError(errors)

    records: Dict[str, Dict[str, Any]] = {}
    ordered: List[Dict[str, Any]] = []
    for node in nodes:
        record = dict(node) if isinstance(node, dict) else node
        if isinstance(record, dict):
            record.setdefault("dependencies", [])
            if isinstance(record.get("id"), str):
                records.setdefault(record["id"], record)
        ordered.append(record)

    for index, edge in enumerate(edges):
        prefix = f"Edge at index {index}"
        if not isinstance(edge, dict):
            errors.append(f"{prefix} must be an object")
            continue
        source, target = edge.get("from"), edge.get("to")
        if not isinstance(source, str) or not source:
            errors.append(f'{prefix}: missing or invalid "from"')
            continue
        if not isinstance(target, str) or not target:
            errors.append(f'{prefix}: missing or invalid "to"')
            continue
        if source not in records:
            errors.append(f'{prefix}: "from" references unknown node "{source}"')
            continue
        dependencies = records[source]["dependencies"]
        if isinstance(dependencies, list):
            records[source]["dependencies"] = dependencies + [target]

    if errors:
        raise GraphValidationError(errors)

    return ordered
