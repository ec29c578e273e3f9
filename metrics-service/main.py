"""
Server Metrics Recorder - Metrics Service

Application entry point. Builds the FastAPI app, the single MetricsRecorder
and the middleware that measures every request.
"""

import logging
from typing import Optional

from api import router
from config import API_VERSION, EXCLUDED_PATHS, LOG_LEVEL, SERVICE_DESCRIPTION, SERVICE_NAME
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from metrics import MetricsRecorder
from response import ErrorCodes, error_response

# --- Logging ---
logging.basicConfig(level=LOG_LEVEL, format="%(message)s")
logger = logging.getLogger(__name__)


def create_app(recorder: Optional[MetricsRecorder] = None) -> FastAPI:
    """
    Build the app around one recorder.

    Args:
        recorder: Recorder to use; a new one is created when omitted
    """
    app = FastAPI(
        title=SERVICE_NAME,
        description=SERVICE_DESCRIPTION,
        version=API_VERSION,
    )
    app.state.recorder = recorder or MetricsRecorder()

    # --- Metrics middleware ---
    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next):
        path = request.url.path
        if path.startswith(EXCLUDED_PATHS):
            return await call_next(request)

        recorder = request.app.state.recorder
        start = recorder.start_timer()
        try:
            response = await call_next(request)
        except Exception:
            recorder.record(start, path, 500)
            raise
        recorder.record(start, path, response.status_code)
        return response

    # --- Error handling ---
    @app.exception_handler(Exception)
    async def unhandled_exception(request: Request, exc: Exception):
        # the server logs the traceback when the error is re-raised
        logger.error(f"unhandled error: path={request.url.path}")
        return JSONResponse(
            content=error_response(ErrorCodes.INTERNAL_ERROR, "internal server error").model_dump(),
            status_code=500,
        )

    # --- Include routes ---
    app.include_router(router)

    logger.info(
        f"metrics recorder ready: window={app.state.recorder.window_capacity} "
        f"excluded_paths={','.join(EXCLUDED_PATHS)}"
    )
    return app


app = create_app()
