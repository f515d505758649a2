from .schemas import ErrorResponse, HealthResponse, RetouchRequest, RetouchResponse

__all__ = ["ErrorResponse", "HealthResponse", "RetouchRequest", "RetouchResponse"]
