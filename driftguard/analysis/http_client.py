from typing import Any

import httpx

from driftguard.analysis.exceptions import AnalysisNetworkError, AnalysisServiceError


class AnalysisHttpClient:
    """Posts JSON to the analysis service and returns the decoded body."""

    def __init__(
        self,
        *,
        base_url: str,
        timeout_seconds: int,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not base_url:
            raise ValueError("analysis_base_url is required for the http analysis provider")
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._transport = transport

    async def post_json(self, path: str, payload: dict[str, Any]) -> Any:
        """Return the parsed JSON body, or None for an empty 204 response.

        Raises:
            AnalysisNetworkError: if the service cannot be reached.
            AnalysisServiceError: on a non-2xx status or a non-JSON body.
        """
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(path, json=payload)
        except (httpx.ConnectError, httpx.TimeoutException) as exc:
            raise AnalysisNetworkError(f"Analysis service network error: {exc}") from exc
        except httpx.HTTPError as exc:
            raise AnalysisServiceError(f"Analysis service request failed: {exc}") from exc

        if response.status_code == 204:
            return None
        if response.is_error:
            raise AnalysisServiceError(
                f"Analysis service returned {response.status_code} for {path}: "
                f"{response.text[:200]}"
            )
        try:
            return response.json()
        except ValueError as exc:
            raise AnalysisServiceError(f"Analysis service returned invalid JSON: {exc}") from exc
