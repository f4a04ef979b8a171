from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import uvicorn

from gathrio.config import get_settings
from gathrio.core.exceptions import GathrioError, ValidationError
from gathrio.logging_config import setup_logging
from gathrio.routers import auth, events

settings = get_settings()
setup_logging(settings.log_level)

app = FastAPI(title=settings.app_name)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _format_validation_error(error: dict) -> str:
    field = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path"))
    message = str(error.get("msg", "Invalid value"))
    # pydantic prefixes messages raised from validators
    message = message.removeprefix("Value error, ")
    return f"{field}: {message}" if field else message


@app.exception_handler(GathrioError)
async def gathrio_error_handler(request: Request, exc: GathrioError) -> JSONResponse:
    content: dict = {"detail": exc.message}
    if isinstance(exc, ValidationError):
        content["errors"] = exc.errors
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": "Validation failed",
            "errors": [_format_validation_error(error) for error in exc.errors()],
        },
    )


# Include routers
app.include_router(auth.router)
app.include_router(events.router)


@app.get("/api/health")
async def health_check() -> dict[str, str]:
    return {
        "status": "healthy",
        "service": "gathrio_api",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


if __name__ == "__main__":
    uvicorn.run(
        "gathrio.main:app",
        host="0.0.0.0",
        port=8000,
        reload=not settings.is_production,
        loop="asyncio",  # Explicitly use asyncio instead of auto (which tries uvloop)
    )
