"""
J-Quants API Client

Source for listed-company master data, financial statements and daily quotes.
https://jpx.gitbook.io/j-quants-en/api-reference

Authentication is two-step: e-mail/password -> refresh token -> ID token.
Every data endpoint needs the ID token as a Bearer header.
"""

from typing import Dict, List, Optional

import requests
import structlog

from stock_checker.exceptions import AuthenticationError, RemoteRequestError
from stock_checker.models import CompanyRecord, QuoteRecord, StatementRecord

logger = structlog.get_logger(__name__)

DEFAULT_BASE_URL = "https://api.jquants.com/v1"


def _error_message(response: requests.Response) -> str:
    """Prefer the API's own ``message`` field over the HTTP reason."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"HTTP {response.status_code} {response.reason}"


class JQuantsClient:
    """Thin typed wrapper over the J-Quants REST endpoints."""

    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: int = 30):
        """
        Initialize the client.

        Args:
            base_url: API root, without trailing slash
            timeout: Per-request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.id_token: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.id_token is not None

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    def get_refresh_token(self, email: str, password: str) -> str:
        """Exchange account credentials for a refresh token."""
        url = f"{self.base_url}/token/auth_user"
        try:
            response = requests.post(
                url,
                json={"mailaddress": email, "password": password},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise AuthenticationError(f"Failed to get refresh token: {e}") from e

        if not response.ok:
            raise AuthenticationError(
                f"Failed to get refresh token: {_error_message(response)}"
            )

        token = response.json().get("refreshToken")
        if not token:
            raise AuthenticationError("Failed to get refresh token: empty response")
        return token

    def get_id_token(self, refresh_token: str) -> str:
        """Exchange a refresh token for an ID token and keep it for later calls."""
        url = f"{self.base_url}/token/auth_refresh"
        try:
            response = requests.post(
                url,
                params={"refreshtoken": refresh_token},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise AuthenticationError(f"Failed to get ID token: {e}") from e

        if not response.ok:
            raise AuthenticationError(f"Failed to get ID token: {_error_message(response)}")

        token = response.json().get("idToken")
        if not token:
            raise AuthenticationError("Failed to get ID token: empty response")

        self.id_token = token
        return token

    def authenticate(self, email: str, password: str) -> str:
        """
        Run the full credential exchange.

        Returns:
            The ID token, also stored on the client
        """
        refresh_token = self.get_refresh_token(email, password)
        id_token = self.get_id_token(refresh_token)
        logger.info("jquants_authenticated")
        return id_token

    # ------------------------------------------------------------------
    # Data endpoints
    # ------------------------------------------------------------------

    def _get_paginated(self, endpoint: str, key: str, params: Dict[str, str]) -> List[dict]:
        """
        GET an endpoint and follow ``pagination_key`` until exhausted.

        Args:
            endpoint: Path below the base URL, e.g. "/listed/info"
            key: Name of the list in the response body
            params: Query parameters

        Returns:
            Concatenated raw items from all pages
        """
        if not self.id_token:
            raise AuthenticationError("Not authenticated. Call authenticate() first.")

        url = f"{self.base_url}{endpoint}"
        headers = {"Authorization": f"Bearer {self.id_token}"}
        query = dict(params)
        items: List[dict] = []

        while True:
            try:
                response = requests.get(url, headers=headers, params=query, timeout=self.timeout)
            except requests.exceptions.RequestException as e:
                raise RemoteRequestError(
                    f"Request to {endpoint} failed: {e}", endpoint=endpoint
                ) from e

            if not response.ok:
                raise RemoteRequestError(
                    f"Request to {endpoint} failed: {_error_message(response)}",
                    endpoint=endpoint,
                    status_code=response.status_code,
                )

            try:
                body = response.json()
            except ValueError as e:
                raise RemoteRequestError(
                    f"Invalid JSON from {endpoint}", endpoint=endpoint
                ) from e

            items.extend(body.get(key) or [])

            pagination_key = body.get("pagination_key")
            if not pagination_key:
                break
            query["pagination_key"] = pagination_key

        return items

    def list_companies(self) -> List[CompanyRecord]:
        """All listed companies (GET /listed/info)."""
        items = self._get_paginated("/listed/info", "info", {})
        companies = [CompanyRecord.from_api(item) for item in items]
        logger.debug("jquants_companies_fetched", count=len(companies))
        return companies

    def list_statements(self, code: str) -> List[StatementRecord]:
        """Every disclosure for one company (GET /fins/statements)."""
        items = self._get_paginated("/fins/statements", "statements", {"code": code})
        return [StatementRecord.from_api(item) for item in items]

    def list_quotes(
        self,
        code: str,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
    ) -> List[QuoteRecord]:
        """
        Daily quotes for one company (GET /prices/daily_quotes).

        Args:
            code: Company code
            from_date: Inclusive start, YYYY-MM-DD or YYYYMMDD
            to_date: Inclusive end, same formats
        """
        params = {"code": code}
        if from_date:
            params["from"] = from_date
        if to_date:
            params["to"] = to_date

        items = self._get_paginated("/prices/daily_quotes", "daily_quotes", params)
        return [QuoteRecord.from_api(item) for item in items]
