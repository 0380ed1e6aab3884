from fastapi.responses import JSONResponse


class ErrorUtils:
    @staticmethod
    def format_error_response(message: str, error_type: str) -> dict:
        """
        Build the JSON error body returned by the monitoring endpoints.

        Args:
            message: Human readable description of the failure.
            error_type: Machine readable category, e.g. "internal_error" or "health_check_error".

        Returns:
            {"error": {"message": ..., "type": ...}}
        """
        return {"error": {"message": message, "type": error_type}}

    @staticmethod
    def error_response(error: Exception, context: str, error_type: str = "internal_error") -> JSONResponse:
        """Wrap an unexpected exception raised while serving context as a 500 response."""
        return JSONResponse(
            ErrorUtils.format_error_response(f"{context} failed: {error}", error_type),
            status_code=500,
        )
