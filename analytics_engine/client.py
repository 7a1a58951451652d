"""
Synchronous HTTP client for an Analytics Engine instance

    client = AnalyticsEngineClient("http://localhost:8000", authorization="secret")
    client.event("login", event_type="auth")
    stats = client.get_statistics("auth", lookback=30)
"""
import time
from typing import Any, Dict, Optional

import httpx
from urllib.parse import urlparse

from analytics_engine.schemas.analytics import AggregationResult


class AnalyticsEngineClientError(RuntimeError):
    """The instance rejected a request or returned an unexpected body"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AnalyticsEngineClient:

    def __init__(
            self,
            instance_url: str,
            authorization: str,
            http_client: Optional[httpx.Client] = None,
            timeout: float = 10.0
    ):
        if not instance_url:
            raise ValueError("Instance URL is required.")
        if not urlparse(instance_url).hostname:
            raise ValueError("Invalid instance URL.")

        self.instance_url = instance_url.rstrip("/")
        self.authorization = authorization
        self.http_client = http_client or httpx.Client(timeout=timeout)

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": self.authorization}

    def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = self.http_client.request(
                method, f"{self.instance_url}{path}", headers=self._headers(), **kwargs
            )
        except httpx.HTTPError as e:
            raise AnalyticsEngineClientError(f"Request failed: {e}") from e

        try:
            body = response.json()
        except ValueError as e:
            raise AnalyticsEngineClientError("Invalid response data.", response.status_code) from e

        if not isinstance(body, dict):
            raise AnalyticsEngineClientError("Invalid response data.", response.status_code)
        if "error" in body:
            raise AnalyticsEngineClientError(str(body["error"]), response.status_code)
        if response.is_error or "data" not in body:
            raise AnalyticsEngineClientError("Invalid response data.", response.status_code)

        return body["data"]

    def check_instance(self) -> None:
        """Raise unless the instance answers on its root route"""
        self._request("GET", "/")

    def event(
            self,
            name: str,
            event_type: str,
            created_at: Optional[int] = None,
            unique_id: Optional[str] = None
    ) -> bool:
        """Record an event; created_at defaults to the current time in epoch ms"""
        payload = {
            "name": name,
            "type": event_type,
            "createdAt": created_at or int(time.time() * 1000),
        }
        if unique_id is not None:
            payload["uniqueId"] = unique_id
        return bool(self._request("POST", "/event", json=payload))

    def get_statistics(
            self,
            event_type: str,
            lookback: Optional[int] = None,
            unique_id: Optional[str] = None
    ) -> AggregationResult:
        params = {"type": event_type}
        if lookback is not None:
            params["lookback"] = lookback
        if unique_id is not None:
            params["uniqueId"] = unique_id
        data = self._request("GET", "/analytics", params=params)
        return AggregationResult.model_validate(data)

    def flush_statistics(self, event_type: str) -> bool:
        return bool(self._request("DELETE", "/analytics", params={"type": event_type}))

    def get_stats(self) -> Dict[str, Any]:
        return self._request("GET", "/stats")

    def close(self) -> None:
        self.http_client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
