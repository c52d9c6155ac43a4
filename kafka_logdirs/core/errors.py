from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from kafka_logdirs.core.exceptions import (
    DispatchError,
    MetadataLookupError,
    ProblemDetail,
    SpecSyntaxError,
)


def _problem(status: int, title: str, detail: str, type_: str = "about:blank") -> JSONResponse:
    body = ProblemDetail(type=type_, status=status, title=title, detail=detail)
    return JSONResponse(
        status_code=status,
        content=body.model_dump(mode="json"),
        media_type="application/problem+json",
    )


def install_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(SpecSyntaxError)
    async def spec_syntax_handler(_: Request, exc: SpecSyntaxError):
        return _problem(400, "Bad Request", str(exc), type_="/spec-syntax")

    @app.exception_handler(MetadataLookupError)
    async def metadata_handler(_: Request, exc: MetadataLookupError):
        return _problem(502, "Bad Gateway", str(exc), type_="/metadata-lookup")

    @app.exception_handler(DispatchError)
    async def dispatch_handler(_: Request, exc: DispatchError):
        return _problem(502, "Bad Gateway", str(exc), type_="/dispatch")

    @app.exception_handler(ValueError)
    async def value_error_handler(_: Request, exc: ValueError):
        return _problem(400, "Bad Request", str(exc))

    # Catch-all
    @app.exception_handler(Exception)
    async def unhandled(_: Request, exc: Exception):
        return _problem(500, "Internal Server Error", str(exc))
