"""Data source client for places and ratings.

Talks to a Supabase project through its PostgREST endpoint:
- locations: places shown on the map
- location_stats: per-place view with rating count and average stars
- ratings: individual reviews

All failures (network, HTTP status, malformed payload) are raised as
DataSourceError carrying a human-readable message suitable for the UI.

Example:
    client = PlacesClient.from_config()
    records = client.fetch_points()
"""

import logging
from typing import Any

import requests

from rollmap.constants import DataSourceConfig

logger = logging.getLogger(__name__)

Record = dict[str, Any]


class DataSourceError(Exception):
    """Raised when a read or write against the data source fails."""


class PlacesClient:
    """Thin PostgREST client for the places database."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        session: requests.Session | None = None,
        timeout_s: float = DataSourceConfig.TIMEOUT_S,
    ) -> None:
        """Initialize client.

        Args:
            base_url: Project URL, e.g. https://xyz.supabase.co
            api_key: Anonymous (public) API key
            session: Optional requests session (tests pass a fake)
            timeout_s: Per-request timeout in seconds
        """
        if not base_url or not api_key:
            raise DataSourceError(DataSourceConfig.NOT_CONFIGURED)
        self.rest_url = base_url.rstrip("/") + DataSourceConfig.REST_PATH
        self.timeout_s = timeout_s
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
            }
        )

    @classmethod
    def from_config(cls) -> "PlacesClient":
        """Create client from SUPABASE_URL / SUPABASE_ANON_KEY.

        Raises:
            DataSourceError: If either variable is missing.
        """
        return cls(base_url=DataSourceConfig.URL, api_key=DataSourceConfig.ANON_KEY)

    # =========================================================================
    # Places
    # =========================================================================

    def fetch_points(self) -> list[Record]:
        """Newest places first, capped at DataSourceConfig.LOCATIONS_LIMIT."""
        return self._select(
            table=DataSourceConfig.LOCATIONS_TABLE,
            params={
                "select": DataSourceConfig.LOCATIONS_COLUMNS,
                "order": "created_at.desc",
                "limit": DataSourceConfig.LOCATIONS_LIMIT,
            },
        )

    def insert_point(self, record: Record) -> None:
        """Insert a new place (name, description, lat, lng)."""
        self._insert(table=DataSourceConfig.LOCATIONS_TABLE, record=record)

    def fetch_point_detail(self, point_id: str) -> Record:
        """One place with its rating summary.

        Raises:
            DataSourceError: If the place does not exist.
        """
        rows = self._select(
            table=DataSourceConfig.STATS_VIEW,
            params={
                "select": DataSourceConfig.STATS_COLUMNS,
                "location_id": f"eq.{point_id}",
                "limit": 1,
            },
        )
        if not rows:
            raise DataSourceError(f"Location {point_id} not found.")
        return rows[0]

    # =========================================================================
    # Ratings
    # =========================================================================

    def fetch_ratings_for_point(self, point_id: str) -> list[Record]:
        """Newest ratings for one place, capped at DataSourceConfig.RATINGS_LIMIT."""
        return self._select(
            table=DataSourceConfig.RATINGS_TABLE,
            params={
                "select": DataSourceConfig.RATINGS_COLUMNS,
                "location_id": f"eq.{point_id}",
                "order": "created_at.desc",
                "limit": DataSourceConfig.RATINGS_LIMIT,
            },
        )

    def insert_rating(self, record: Record) -> None:
        """Insert a rating payload (see RatingDraft.to_payload)."""
        self._insert(table=DataSourceConfig.RATINGS_TABLE, record=record)

    # =========================================================================
    # Transport
    # =========================================================================

    def _select(self, table: str, params: dict[str, Any]) -> list[Record]:
        url = f"{self.rest_url}/{table}"
        logger.debug(f"[FETCH] GET {table} {params}")
        response = self._request("GET", url, params=params)
        try:
            data = response.json()
        except ValueError as e:
            raise DataSourceError(f"Invalid response from {table}: {e}") from e
        if not isinstance(data, list):
            raise DataSourceError(f"Unexpected response from {table}: expected a list of rows")
        logger.info(f"[FETCH] {table}: {len(data)} row(s)")
        return data

    def _insert(self, table: str, record: Record) -> None:
        url = f"{self.rest_url}/{table}"
        logger.info(f"[FETCH] POST {table}")
        self._request("POST", url, json=[record], headers={"Prefer": "return=minimal"})

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        try:
            response = self.session.request(method, url, timeout=self.timeout_s, **kwargs)
        except requests.RequestException as e:
            logger.warning(f"[FETCH] {method} {url} failed: {e}")
            raise DataSourceError(f"Could not reach the data source: {e}") from e

        if not response.ok:
            message = _error_message(response)
            logger.warning(f"[FETCH] {method} {url} -> {response.status_code}: {message}")
            raise DataSourceError(message)
        return response


def _error_message(response: requests.Response) -> str:
    """Extract PostgREST's error message, falling back to the HTTP status."""
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return f"Request failed with status {response.status_code}"
