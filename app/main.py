import time
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from botocore.exceptions import ClientError
from app.core.config import settings
from app.core.logging import setup_logging, request_id_ctx
from dotenv import load_dotenv

# Load environment variables from .env file before anything else
load_dotenv()

from app.api.router import api_router
from app.core.db import init_models
from app.platform.provider_registry import registry


setup_logging()
app = FastAPI(title=settings.APP_NAME)

import logging
logger = logging.getLogger(__name__)

@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()

    response = await call_next(request)

    process_time = (time.time() - start_time) * 1000
    formatted_process_time = f"{process_time:.2f}ms"

    logger.info(
        f"Request: {request.method} {request.url.path} - Response: {response.status_code} - Time: {formatted_process_time}"
    )

    return response

# registered last so it runs first and the request log line carries the id
@app.middleware("http")
async def add_request_id(request: Request, call_next):
    rid = request.headers.get("x-request-id", "-")
    token = request_id_ctx.set(rid)
    try:
        return await call_next(request)
    finally:
        request_id_ctx.reset(token)


@app.exception_handler(ClientError)
async def storage_error_handler(request: Request, exc: ClientError):
    # storage service errors are passed through, never retried
    err = exc.response.get("Error", {})
    status = exc.response.get("ResponseMetadata", {}).get("HTTPStatusCode") or 502
    logger.error(f"Storage error for request {request.method} {request.url.path}: {err.get('Code')} {err.get('Message')}")
    return JSONResponse(
        status_code=status,
        content={"error": err.get("Code", "StorageServiceError"), "message": err.get("Message", str(exc))},
    )

@app.exception_handler(FileNotFoundError)
async def missing_object_handler(request: Request, exc: FileNotFoundError):
    logger.error(f"Missing local object for request {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=404, content={"error": "NoSuchKey", "message": str(exc)})

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.critical(f"Unhandled exception for request {request.method} {request.url.path}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"message": "An internal server error occurred."},
    )


@app.on_event("startup")
async def on_startup():
    await init_models()

@app.on_event("shutdown")
async def on_shutdown():
    await registry.close()


app.include_router(api_router, prefix=settings.API_PREFIX)
