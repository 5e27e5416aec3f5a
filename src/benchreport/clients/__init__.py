"""Client for the benchmark reporting service."""

from benchreport.clients.api_client import (
    APIError,
    CodSpeedAPIClient,
    FetchRunReportRun,
    LatestFinishedRun,
    RunNotFoundError,
    RunStatus,
    SessionExpiredError,
)

__all__ = [
    "APIError",
    "CodSpeedAPIClient",
    "FetchRunReportRun",
    "LatestFinishedRun",
    "RunNotFoundError",
    "RunStatus",
    "SessionExpiredError",
]
