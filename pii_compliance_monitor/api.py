"""
FastAPI routes for the compliance monitor.

Handlers stay thin and delegate to ComplianceMonitor.
"""

from typing import Any, Dict, Optional

from fastapi import Body, FastAPI, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .exceptions import ComplianceMonitorException, DocumentNotFoundException
from .manager import ComplianceMonitor


class AnalyzeRequest(BaseModel):
    """Body of POST /api/analyze."""
    content: Optional[str] = None
    source: str = "manual"
    author: str = "user"


class PolicySearchRequest(BaseModel):
    """Body of POST /api/policies/search."""
    query: str
    size: int = 10
    framework: Optional[str] = None


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def create_app(monitor: ComplianceMonitor) -> FastAPI:
    """
    Build the HTTP application around an explicitly constructed monitor.

    Args:
        monitor: The monitor serving every route
    """
    app = FastAPI(title="PII Compliance Monitor")
    app.state.monitor = monitor

    @app.exception_handler(DocumentNotFoundException)
    async def not_found_handler(request: Request, exc: DocumentNotFoundException):
        return _error(404, str(exc))

    @app.exception_handler(ComplianceMonitorException)
    async def monitor_error_handler(request: Request, exc: ComplianceMonitorException):
        monitor.logger.error(f"Request to {request.url.path} failed", exception=exc)
        return _error(500, str(exc))

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        monitor.logger.error(f"Unexpected failure on {request.url.path}", exception=exc)
        return _error(500, str(exc))

    @app.get("/api/health")
    def health():
        status = monitor.health()
        return JSONResponse(
            status_code=200 if status.overall_health else 503,
            content=status.to_dict()
        )

    @app.get("/api/stats")
    def stats():
        return monitor.get_stats()

    @app.get("/api/documents")
    def list_documents(
        source: Optional[str] = None,
        flagged: Optional[bool] = None,
        flagged_only: bool = Query(False, alias="flaggedOnly"),
        min_risk: Optional[float] = Query(None, alias="minRisk", ge=0.0, le=1.0),
        size: int = 50
    ):
        if flagged_only:
            flagged = True
        documents = monitor.list_documents(source=source, flagged=flagged, min_risk=min_risk, size=size)
        return {"documents": documents, "total": len(documents)}

    @app.get("/api/documents/flagged")
    def flagged_documents(size: int = 50):
        documents = monitor.flagged_documents(size=size)
        return {"documents": documents, "total": len(documents)}

    @app.get("/api/policies")
    def list_policies(framework: Optional[str] = None):
        policies = monitor.list_policies(framework=framework)
        return {"policies": policies, "total": len(policies)}

    @app.post("/api/policies/search")
    def search_policies(request: PolicySearchRequest):
        policies = monitor.search_policies(request.query, size=request.size, framework=request.framework)
        return {"policies": policies, "total": len(policies)}

    @app.post("/api/analyze")
    def analyze(request: AnalyzeRequest):
        if not request.content:
            return _error(400, "Content is required")
        return monitor.analyze_document(request.content, source=request.source, author=request.author)

    @app.get("/api/violations")
    def list_violations(status: Optional[str] = None):
        violations = monitor.list_violations(status=status)
        return {"violations": violations, "total": len(violations)}

    @app.post("/api/violations")
    def create_violation(fields: Dict[str, Any] = Body(...)):
        return monitor.create_violation(fields)

    @app.patch("/api/violations/{violation_id}")
    def update_violation(violation_id: str, updates: Dict[str, Any] = Body(...)):
        try:
            return monitor.update_violation(violation_id, updates)
        except ValueError as e:
            return _error(400, str(e))

    return app
