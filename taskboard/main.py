from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskboard.api.v1 import api_router
from taskboard.core.config import get_settings
from taskboard.core.exceptions import (
    APIException,
    InvalidCredentialError,
    InvariantViolationError,
    SelfLockoutError,
    ValidationError,
)
from taskboard.core.logging import configure_logging

settings = get_settings()
configure_logging()

app = FastAPI(
    title="Taskboard API",
    version="0.1.0",
    description="Task tracking with role-based permissions",
    docs_url="/docs",
    openapi_url="/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_response(
    status_code: int, code: str, message: str, details: dict | None = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {"code": code, "message": message, "details": details},
            "data": None,
        },
    )


@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException) -> JSONResponse:
    """Handle APIException and return standard error format."""
    # exc.detail already contains {"error": {...}}, add data: null
    response_content = exc.detail.copy()
    response_content["data"] = None
    return JSONResponse(
        status_code=exc.status_code,
        content=response_content,
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Wrap plain HTTP errors (including those raised by auth dependencies) in the error envelope."""
    if isinstance(exc.detail, dict) and "error" in exc.detail:
        content = {**exc.detail, "data": None}
    else:
        content = {
            "error": {"code": "HTTP_ERROR", "message": str(exc.detail), "details": None},
            "data": None,
        }
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors and format them as field-level details."""
    details = {}
    for error in exc.errors():
        # Extract field path (e.g., ["body", "title"] -> "title")
        field_path = error["loc"]
        field_name = field_path[-1] if len(field_path) > 1 else field_path[0]

        if field_name not in details:
            details[field_name] = []
        details[field_name].append(error["msg"])

    return _error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY, "VALIDATION_ERROR", "Validation failed", details
    )


@app.exception_handler(ValidationError)
async def domain_validation_exception_handler(
    request: Request, exc: ValidationError
) -> JSONResponse:
    """Handle validation failures raised by the services."""
    return _error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "VALIDATION_ERROR",
        "Validation failed",
        {exc.field: [exc.message]},
    )


@app.exception_handler(InvalidCredentialError)
async def invalid_credential_exception_handler(
    request: Request, exc: InvalidCredentialError
) -> JSONResponse:
    return _error_response(
        status.HTTP_401_UNAUTHORIZED, "AUTH_INVALID_TOKEN", "Invalid or expired token"
    )


@app.exception_handler(InvariantViolationError)
async def invariant_violation_exception_handler(
    request: Request, exc: InvariantViolationError
) -> JSONResponse:
    """Handle rejected units of work (nothing was saved)."""
    if isinstance(exc, SelfLockoutError):
        return _error_response(
            status.HTTP_409_CONFLICT,
            "PERMISSION_SELF_REMOVAL",
            str(exc),
            {"permission_id": exc.permission_id},
        )
    return _error_response(status.HTTP_409_CONFLICT, "INVARIANT_VIOLATION", str(exc))


@app.get("/healthz", tags=["system"])
def healthz():
    """Health check endpoint."""
    return {
        "status": "ok",
        "env": settings.ENV,
        "debug": settings.DEBUG,
    }


# Include API routers
app.include_router(api_router, prefix="/api/v1")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "taskboard.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
