"""Scheduler errors - Fatal validation and lookup failures."""

from typing import List, Optional


class ControllerError(Exception):
    """Base error for the issue scheduler."""


class GraphValidationError(ControllerError):
    """Raised when issue records fail structural validation."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__(f"Dependency graph validation failed: {'; '.join(self.errors)}")


class DuplicateIssueError(GraphValidationError):
    """Raised when two issues share the same id."""

    def __init__(self, issue_ids: List[str]):
        self.issue_ids = sorted(set(issue_ids))
        super().__init__([f"Duplicate issue ID: {issue_id}" for issue_id in self.issue_ids])


class GraphNotFoundError(ControllerError):
    """Raised when a dependency graph file does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Dependency graph file not found: {path}")


class GraphParseError(ControllerError):
    """Raised when a dependency graph file cannot be read or decoded."""

    def __init__(self, path: str, cause: Optional[Exception] = None):
        self.path = path
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Failed to parse dependency graph at {path}{detail}")


class IssueNotFoundError(ControllerError):
    """Raised when a lookup references an issue that is not in the result."""

    def __init__(self, issue_id: str, context: Optional[str] = None):
        self.issue_id = issue_id
        self.context = context
        where = f" (referenced in {context})" if context else ""
        super().__init__(f"Issue not found: {issue_id}{where}")
