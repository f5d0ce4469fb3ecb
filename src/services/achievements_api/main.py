import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from models.achievements import ErrorResponse
from models.config.settings import settings
from models.infrastructure.github_client import GitHubContentsClient
from services.achievements_api.commit_service import CommitService

logger = logging.getLogger(__name__)

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def cors_headers() -> dict[str, str]:
    # The password is the access control, so every origin is allowed
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": "POST, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type",
        "Access-Control-Max-Age": "86400",
    }


# noinspection PyShadowingNames,PyUnresolvedReferences
@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    store = GitHubContentsClient(settings.to_github_config())
    app.state.commit_service = CommitService(settings.to_endpoint_config(), store)
    yield
    store.http.close()
    app.state.commit_service = None


app = FastAPI(lifespan=lifespan)


def get_commit_service(request: Request) -> CommitService:
    return request.app.state.commit_service


@app.middleware("http")
async def add_cors_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers.update(cors_headers())
    return response


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # The router's own 405 for methods outside ALL_METHODS reads differently
    detail = "Method not allowed" if exc.status_code == 405 else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=detail).model_dump(),
    )


# noinspection PyUnresolvedReferences
@app.api_route("/{path:path}", methods=ALL_METHODS)
async def commit_endpoint(
    request: Request, service: CommitService = Depends(get_commit_service)
):
    if request.method == "OPTIONS":
        return Response(status_code=200)
    if request.method != "POST":
        raise HTTPException(status_code=405, detail="Method not allowed")

    body = await request.body()
    try:
        return await run_in_threadpool(service.handle, body)
    except HTTPException:
        raise
    except Exception:
        # Parse errors land here too, indistinguishable from other failures
        logger.exception("Unhandled error while handling request")
        raise HTTPException(status_code=500, detail="Server error")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
