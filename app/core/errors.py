from fastapi import Request, status
from fastapi.responses import JSONResponse


class AIServiceError(Exception):
    """Failure talking to, or making sense of, an upstream AI service.

    Rendered to clients as ``{"error": message}`` so the form pages can show
    the message directly.
    """

    def __init__(
        self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


async def ai_service_error_handler(request: Request, exc: AIServiceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})
