"""Framework-neutral request handlers for the dependency endpoints.

    GET    /api/specs/{specId}/dependencies           -> get_graph
    POST   /api/workitems/{id}/dependencies           -> add_dependency
           body: {"dependsOnId": "..."}
    DELETE /api/workitems/{id}/dependencies/{depId}   -> remove_dependency

Whatever web framework hosts these owns routing, authentication and
body parsing; it calls the matching method and writes ApiResponse.status
and ApiResponse.body back out.

Success bodies:
    200 {"data": {nodes, edges, criticalPath, cycles}}
    201 {"success": true}
    204 (no body)

Error bodies:
    {"error": {"code": "...", "message": "...", ...}}

Engine errors map through their own ``code``/``status``.  Anything else
is logged and becomes a 500 with an operation-specific code.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

from workgraph.domain.errors import CycleError, DependencyError, ValidationError
from workgraph.service.graph_service import GraphService

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ApiResponse:
    status: int
    body: dict[str, Any] | None = None

    def to_json(self) -> str:
        """Serialize the body ("" for bodiless responses such as 204)."""
        if self.body is None:
            return ""
        return json.dumps(self.body, separators=(",", ":"))

    @classmethod
    def error(cls, status: int, code: str, message: str, **extra: Any) -> ApiResponse:
        return cls(status=status, body={"error": {"code": code, "message": message, **extra}})


def error_response(exc: DependencyError) -> ApiResponse:
    """Render an engine error with its status, code and sub-reason."""
    extra: dict[str, Any] = {}
    if isinstance(exc, ValidationError):
        extra["reason"] = exc.reason.value
    elif isinstance(exc, CycleError):
        extra["cycle"] = list(exc.cycle)
    return ApiResponse.error(exc.status, exc.code, str(exc), **extra)


class GraphRoutes:
    """Handlers bound to one GraphService."""

    def __init__(self, service: GraphService) -> None:
        self._service = service

    def get_graph(self, spec_id: str) -> ApiResponse:
        try:
            graph = self._service.get_graph(spec_id)
        except DependencyError as exc:
            return error_response(exc)
        except Exception as exc:
            log.exception("Failed to build dependency graph for spec %s", spec_id)
            return ApiResponse.error(500, "DEPENDENCY_GRAPH_ERROR", str(exc))
        return ApiResponse(200, {"data": graph.to_dict()})

    def add_dependency(self, item_id: str, body: dict[str, Any] | None) -> ApiResponse:
        depends_on_id = (body or {}).get("dependsOnId")
        if not isinstance(depends_on_id, str) or not depends_on_id:
            return ApiResponse.error(400, "VALIDATION_ERROR", "dependsOnId is required")
        try:
            self._service.add_dependency(item_id, depends_on_id)
        except DependencyError as exc:
            return error_response(exc)
        except Exception as exc:
            log.exception("Failed to add dependency %s -> %s", item_id, depends_on_id)
            return ApiResponse.error(500, "ADD_DEPENDENCY_ERROR", str(exc))
        return ApiResponse(201, {"success": True})

    def remove_dependency(self, item_id: str, depends_on_id: str) -> ApiResponse:
        try:
            self._service.remove_dependency(item_id, depends_on_id)
        except DependencyError as exc:
            return error_response(exc)
        except Exception as exc:
            log.exception("Failed to remove dependency %s -> %s", item_id, depends_on_id)
            return ApiResponse.error(500, "REMOVE_DEPENDENCY_ERROR", str(exc))
        return ApiResponse(204)
