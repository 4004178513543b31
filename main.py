import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.api.endpoints import router
from app.core.config import settings
from app.services.http_client import http_client_manager
from app.shared.correlation import CorrelationMiddleware
from app.shared.errors import (
    AnalysisError,
    ErrorCode,
    error_response,
    error_response_for,
    get_correlation_id,
    internal_error,
)
from app.shared.logging_config import setup_logging

SERVICE_NAME = "journal-analysis-service"

setup_logging(service_name=SERVICE_NAME)
logger = logging.getLogger("Journal.Analysis.Main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    await http_client_manager.startup()
    yield
    await http_client_manager.shutdown()


app = FastAPI(
    title="Journal Analysis Service",
    description="Stress scoring and supportive notes for journal entries",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_methods=["*"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)
app.add_middleware(CorrelationMiddleware)


@app.exception_handler(AnalysisError)
async def analysis_error_handler(request: Request, exc: AnalysisError):
    logger.error(f"Error in analyze-journal: {exc.message}", extra={"error_code": exc.code.value})
    return error_response_for(exc, correlation_id=get_correlation_id(request))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return error_response(
        code=ErrorCode.VALIDATION_ERROR,
        message="Invalid request body",
        status_code=400,
        details={"errors": [error.get("msg") for error in exc.errors()]},
        correlation_id=get_correlation_id(request),
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unexpected error")
    return internal_error(str(exc) or "Unknown error", correlation_id=get_correlation_id(request))


app.include_router(router, prefix="/api/v1")


@app.get("/")
async def root():
    return {"message": "Journal Analysis Service Running"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
