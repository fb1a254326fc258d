"""Request-layer adapter over GraphService."""
from workgraph.api.routes import ApiResponse, GraphRoutes, error_response

__all__ = [
    "ApiResponse",
    "GraphRoutes",
    "error_response",
]
