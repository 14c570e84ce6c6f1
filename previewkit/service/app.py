"""
Compile service FastAPI application.

POST /api/compile builds a source set and answers with a compile outcome.
Compile failures are still HTTP 200; only requests that cannot be built at
all (malformed body, unknown framework) get HTTP 400.
"""

from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from previewkit.compiler import OutOfProcessCompiler, build_service_compiler
from previewkit.config import get_config
from previewkit.errors import UnsupportedFrameworkError
from previewkit.logging import get_logger
from previewkit.orchestrator import compile_request
from previewkit.schemas import CompileFailure, CompileRequest, Framework

logger = get_logger(__name__)


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request body"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    if location:
        return f"Invalid request body: {location}: {first.get('msg', 'invalid value')}"
    return f"Invalid request body: {first.get('msg', 'invalid value')}"


def create_app(compiler: Optional[OutOfProcessCompiler] = None) -> FastAPI:
    """
    Build the compile service application.

    Args:
        compiler: Out-of-process compiler for complex sources; defaults to
            the Docker toolchain compiler from the environment configuration

    Returns:
        Configured FastAPI app
    """
    if compiler is None:
        compiler = build_service_compiler(get_config())

    app = FastAPI(title="previewkit compile service")
    app.state.compiler = compiler

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        failure = CompileFailure.of(_describe_validation_error(exc))
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=failure.model_dump())

    @app.exception_handler(UnsupportedFrameworkError)
    async def unsupported_framework(request: Request, exc: UnsupportedFrameworkError) -> JSONResponse:
        failure = CompileFailure.of(exc.message, exc.file)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=failure.model_dump())

    @app.get("/api/health")
    def health() -> dict:
        """Liveness probe."""
        return {"status": "ok"}

    @app.post("/api/compile")
    def compile_project_endpoint(body: CompileRequest, request: Request) -> JSONResponse:
        """Build the posted source set into a previewable document."""
        # Rejected here so it maps to 400 instead of a 200 failure body.
        Framework.parse(body.framework)

        logger.info("Compile request: framework=%s files=%d", body.framework, len(body.files))
        outcome = compile_request(body, compiler=request.app.state.compiler)
        if not outcome.success:
            logger.info("Compile failed at %s: %s", outcome.offending_file, outcome.message)
        return JSONResponse(status_code=status.HTTP_200_OK, content=outcome.model_dump())

    return app
