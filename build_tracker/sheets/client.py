"""
Sheet Client Module

Async HTTP access to the remote sheet store. Three calls are needed: fetch the
whole sheet, append rows, and replace rows. The client either talks to the
store directly (attaching a bearer token when one is configured) or wraps every
call in a ``{path, method, body}`` envelope for a forwarding proxy that injects
the credential itself.

Every failure is raised as a ``SheetError`` subclass; nothing is retried.
"""
import logging
from typing import Any, List, Optional

import httpx
from pydantic import ValidationError

from build_tracker.sheets.errors import DecodeError, StoreError, TransportError
from build_tracker.sheets.rows import SheetRow

logger = logging.getLogger(__name__)


class SheetClient:
    """Async client for one sheet of the remote row store."""

    def __init__(
        self,
        base_url: str,
        sheet_id: str,
        *,
        token: Optional[str] = None,
        proxy_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Args:
            base_url: Store API root, e.g. https://api.smartsheet.com/2.0
            sheet_id: Identifier of the sheet holding the rows
            token: Bearer token for direct access; ignored in proxy mode
            proxy_url: Forwarding endpoint; when set, all calls go through it
            timeout: Seconds; None keeps the httpx default
            transport: Custom httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.sheet_id = sheet_id
        self.token = token
        self.proxy_url = proxy_url
        self.timeout = timeout
        self._transport = transport

    @property
    def sheet_path(self) -> str:
        return f"sheets/{self.sheet_id}"

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.token and not self.proxy_url:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _client(self) -> httpx.AsyncClient:
        kwargs: dict = {"headers": self._headers(), "transport": self._transport}
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        return httpx.AsyncClient(**kwargs)

    async def _send(self, method: str, path: str, body: Any = None) -> httpx.Response:
        try:
            async with self._client() as client:
                if self.proxy_url:
                    envelope = {"path": path, "method": method, "body": body}
                    return await client.post(self.proxy_url, json=envelope)
                url = f"{self.base_url}/{path}"
                if body is None:
                    return await client.request(method, url)
                return await client.request(method, url, json=body)
        except httpx.HTTPError as e:
            logger.warning("Sheet store unreachable (%s %s): %s", method, path, e)
            raise TransportError(f"Could not reach the sheet store: {e}") from e

    @staticmethod
    def _handle_response(response: httpx.Response, action: str) -> Any:
        """
        Check the status and parse the JSON body.

        Raises:
            StoreError: For any non-2xx status
            DecodeError: If the body is not JSON
        """
        if not response.is_success:
            logger.error("Sheet store %s failed: %s %s", action, response.status_code, response.text)
            raise StoreError(
                f"Sheet store rejected {action} (HTTP {response.status_code})",
                status_code=response.status_code,
                body=response.text,
            )
        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(f"Sheet store returned a non-JSON body for {action}") from e

    @staticmethod
    def _parse_rows(data: Any) -> List[SheetRow]:
        """
        Validate rows one at a time.

        A row whose shape cannot be read (no cell list, a cell without a
        column id) is skipped with a warning; the rest of the sheet survives.
        """
        if not isinstance(data, dict) or not isinstance(data.get("rows"), list):
            raise DecodeError("Sheet payload has no 'rows' list")
        rows = []
        for index, raw in enumerate(data["rows"]):
            try:
                rows.append(SheetRow.model_validate(raw))
            except ValidationError as e:
                row_id = raw.get("id") if isinstance(raw, dict) else None
                logger.warning(
                    "Skipping malformed row %s (position %d): %d error(s)",
                    row_id, index, e.error_count(),
                )
        return rows

    async def get_rows(self) -> List[SheetRow]:
        """Fetch every row of the sheet in one call."""
        response = await self._send("GET", self.sheet_path)
        rows = self._parse_rows(self._handle_response(response, "fetch"))
        logger.debug("Fetched %d rows from sheet %s", len(rows), self.sheet_id)
        return rows

    async def add_rows(self, rows: List[SheetRow]) -> Any:
        """Append rows; the store assigns their row ids."""
        body = [row.to_payload() for row in rows]
        response = await self._send("POST", f"{self.sheet_path}/rows", body)
        return self._handle_response(response, "append")

    async def update_rows(self, rows: List[SheetRow]) -> Any:
        """Replace rows identified by their row ids."""
        body = [row.to_payload() for row in rows]
        response = await self._send("PUT", f"{self.sheet_path}/rows", body)
        return self._handle_response(response, "update")
