"""FastAPI application for the SDLC Controller issue scheduler."""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from sdlc_controller import __version__
from sdlc_controller.core.config import AnalyzerConfig, load_analyzer_config, load_app_config
from sdlc_controller.scheduler import (
    DuplicateIssueError,
    GraphAnalysisResult,
    GraphValidationError,
    IssueNode,
    IssueStatus,
    Priority,
    PriorityAnalyzer,
)

load_dotenv()

logger = logging.getLogger(__name__)

# Global analyzer, configured at startup
priority_analyzer: Optional[PriorityAnalyzer] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    global priority_analyzer

    app_config = load_app_config()

    logging.basicConfig(
        level=getattr(logging, app_config.log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    analyzer_config = load_analyzer_config()
    priority_analyzer = PriorityAnalyzer(analyzer_config)
    logger.info("Priority analyzer initialized")

    yield

    priority_analyzer = None
    logger.info("Shutting down SDLC Controller...")


app = FastAPI(
    title="SDLC Controller",
    description="Issue dependency scheduling API",
    version=__version__,
    lifespan=lifespan,
)


# Request/Response models
class IssueInput(BaseModel):
    """An issue to schedule."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(min_length=1)
    title: str = ""
    effort: float = Field(
        default=0,
        ge=0,
        allow_inf_nan=False,
        validation_alias=AliasChoices("effort", "effortHours", "effort_hours"),
    )
    priority: Priority = Priority.P2
    dependencies: List[str] = []
    status: IssueStatus = IssueStatus.PENDING
    url: Optional[str] = None
    component_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("component_id", "componentId"),
    )

    def to_node(self) -> IssueNode:
        return IssueNode(
            id=self.id,
            title=self.title,
            effort=self.effort,
            priority=self.priority,
            dependencies=tuple(self.dependencies),
            status=self.status,
            url=self.url,
            component_id=self.component_id,
        )


class AnalyzeRequest(BaseModel):
    """Request for analyze endpoints."""
    issues: List[IssueInput]
    config: Optional[AnalyzerConfig] = None


class NextIssueResponse(BaseModel):
    """Next issue that can start."""
    issue_id: Optional[str]
    ready_count: int


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str


def _run_analysis(request: AnalyzeRequest) -> GraphAnalysisResult:
    if priority_analyzer is None:
        raise HTTPException(status_code=503, detail="Priority analyzer not initialized")

    analyzer = PriorityAnalyzer(request.config) if request.config else priority_analyzer

    try:
        return analyzer.analyze([issue.to_node() for issue in request.issues])
    except DuplicateIssueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except GraphValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors)


@app.get("/health", response_model=HealthResponse)
async def health():
    """Health check endpoint."""
    if priority_analyzer is None:
        raise HTTPException(status_code=503, detail="Service not initialized")
    return HealthResponse(status="healthy", version=__version__)


@app.post("/analyze")
async def analyze(request: AnalyzeRequest) -> Dict[str, Any]:
    """Analyze issues and return the full execution plan.

    The plan contains the execution order, parallel groups, critical path,
    prioritized queue, statistics and any dependency cycles.
    """
    return _run_analysis(request).to_dict()


@app.post("/analyze/next", response_model=NextIssueResponse)
async def next_issue(request: AnalyzeRequest):
    """Return the highest priority issue whose dependencies are resolved."""
    result = _run_analysis(request)
    return NextIssueResponse(
        issue_id=result.get_next_executable_issue(),
        ready_count=len(result.prioritized_queue.ready_for_execution),
    )
