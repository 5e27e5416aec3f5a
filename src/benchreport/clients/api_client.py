"""GraphQL client for the CodSpeed reporting API."""

import json
import logging
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from benchreport.clients.queries import FETCH_RUN_REPORT, GET_LATEST_FINISHED_RUN
from benchreport.config import DEFAULT_ENDPOINT, DEFAULT_TIMEOUT, AppConfig
from benchreport.report.models import BenchmarkResult

logger = logging.getLogger(__name__)

SESSION_EXPIRED_MESSAGE = "Your session has expired, please login again using `codspeed auth login`"


class APIError(Exception):
    """Request to the reporting service failed."""


class SessionExpiredError(APIError):
    """The credential was rejected by the service."""


class RunNotFoundError(APIError):
    """The requested run does not exist or has not finished."""


class RunStatus(str, Enum):
    COMPLETED = "COMPLETED"
    FAILURE = "FAILURE"
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"


@dataclass
class FetchRunReportRun:
    """A run together with all of its benchmark results."""

    id: str
    status: RunStatus
    url: str
    results: List[BenchmarkResult] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FetchRunReportRun":
        return cls(
            id=data["id"],
            status=RunStatus(data["status"]),
            url=data.get("url", ""),
            results=[BenchmarkResult.from_api(item) for item in data.get("results") or []],
        )


@dataclass
class LatestFinishedRun:
    id: str
    date: str
    status: RunStatus

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LatestFinishedRun":
        return cls(id=data["id"], date=data.get("date", ""), status=RunStatus(data["status"]))


def _has_error_code(errors: List[Dict[str, Any]], code: str) -> bool:
    return any((error.get("extensions") or {}).get("code") == code for error in errors)


def _error_from_payload(errors: List[Dict[str, Any]], action: str) -> APIError:
    """Map a GraphQL ``errors`` list to the matching error kind."""
    if _has_error_code(errors, "UNAUTHENTICATED"):
        return SessionExpiredError(SESSION_EXPIRED_MESSAGE)
    messages = "; ".join(error.get("message", "unknown error") for error in errors)
    return APIError(f"Failed to {action}: {messages}")


def _read_error_body(error: urllib.error.HTTPError) -> Optional[Dict[str, Any]]:
    """Parsed JSON body of an HTTP error response, or None if it has none."""
    try:
        payload = json.loads(error.read())
    except (OSError, ValueError, AttributeError):
        return None
    return payload if isinstance(payload, dict) else None


class CodSpeedAPIClient:
    """Minimal GraphQL-over-HTTPS client with bearer credential."""

    def __init__(
        self,
        token: Optional[str],
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """Initialize the client.

        Args:
            token: Value sent in the Authorization header
            endpoint: GraphQL endpoint URL
            timeout: Socket timeout in seconds
        """
        self.token = token
        self.endpoint = endpoint
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: AppConfig) -> "CodSpeedAPIClient":
        return cls(token=config.api_token, endpoint=config.api_endpoint, timeout=config.api_timeout)

    def _query(self, query: str, variables: Dict[str, Any], action: str) -> Dict[str, Any]:
        """POST a GraphQL query and return its ``data`` object.

        Args:
            query: GraphQL document
            variables: Query variables (camelCase)
            action: Human description used in error messages

        Returns:
            The ``data`` member of the response
        """
        body = json.dumps({"query": query, "variables": variables}).encode()
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = self.token
        request = urllib.request.Request(self.endpoint, data=body, headers=headers)

        logger.debug(f"POST {self.endpoint} ({action}) variables={variables}")
        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                payload = json.loads(response.read())
        except urllib.error.HTTPError as e:
            error_payload = _read_error_body(e)
            if error_payload and error_payload.get("errors"):
                raise _error_from_payload(error_payload["errors"], action) from e
            if e.code == 401:
                raise SessionExpiredError(SESSION_EXPIRED_MESSAGE) from e
            raise APIError(f"Failed to {action}: HTTP {e.code} {e.reason}") from e
        except OSError as e:
            # URLError, timeouts and resets while reading the body
            raise APIError(f"Failed to {action}: {e}") from e
        except json.JSONDecodeError as e:
            raise APIError(f"Failed to {action}: invalid JSON response") from e

        if not isinstance(payload, dict):
            raise APIError(f"Failed to {action}: unexpected response")

        errors = payload.get("errors") or []
        if errors:
            raise _error_from_payload(errors, action)

        return payload.get("data") or {}

    @staticmethod
    def _decode(factory, data: Dict[str, Any], action: str):
        """Build a response model, turning shape mismatches into APIError."""
        try:
            return factory(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise APIError(f"Failed to {action}: unexpected response ({e!r})") from e

    def fetch_run_report(self, owner: str, name: str, run_id: str) -> FetchRunReportRun:
        """Fetch one run and its benchmark results."""
        data = self._query(
            FETCH_RUN_REPORT,
            {"owner": owner, "name": name, "runId": run_id},
            "fetch run report",
        )
        run = (data.get("repository") or {}).get("run")
        if run is None:
            raise RunNotFoundError(f"Run {run_id} not found in {owner}/{name}")

        report = self._decode(FetchRunReportRun.from_dict, run, "fetch run report")
        logger.info(f"Fetched run {report.id} ({report.status.value}) with {len(report.results)} results")
        return report

    def get_latest_finished_run(self, owner: str, name: str) -> Optional[LatestFinishedRun]:
        """Return the most recent finished run, or None if there is none."""
        data = self._query(
            GET_LATEST_FINISHED_RUN,
            {"owner": owner, "name": name},
            "get latest finished run",
        )
        runs = (data.get("repository") or {}).get("runs") or []
        if not runs:
            return None
        return self._decode(LatestFinishedRun.from_dict, runs[0], "get latest finished run")
