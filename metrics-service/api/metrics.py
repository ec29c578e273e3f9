"""
Server Metrics Recorder - Metrics Endpoint

GET /metrics - Returns the live metrics snapshot.
"""

from fastapi import APIRouter, Depends, Request
from metrics import MetricsRecorder
from schemas import MetricsSnapshot

router = APIRouter(tags=["Metrics"])


def get_recorder(request: Request) -> MetricsRecorder:
    """The recorder built at startup and kept on app.state."""
    return request.app.state.recorder


@router.get(
    "/metrics",
    summary="Service metrics",
    description=(
        "Returns request and error totals, uptime, throughput, response-time "
        "statistics and the latest CPU, RAM and disk figures. Resource fields "
        "are refreshed in the background and may lag by one request."
    ),
    responses={
        200: {
            "description": "Metrics retrieved successfully",
            "content": {
                "application/json": {
                    "example": MetricsSnapshot.model_config["json_schema_extra"]["example"]
                }
            },
        },
    },
)
async def get_metrics(recorder: MetricsRecorder = Depends(get_recorder)):
    return recorder.snapshot().model_dump(by_alias=True)
