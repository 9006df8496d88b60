# tests/fakes.py

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx


@dataclass
class RecordedCall:
    method: str
    path: str
    body: Any
    headers: Dict[str, str]


class FakeSheetStore:
    """
    In-memory sheet store served through ``httpx.MockTransport``.

    - Keeps rows in the store's wire shape ({"id", "cells": [{"columnId", "value"}]})
    - Assigns row ids on append, replaces rows by id on update
    - Records every call for assertions
    - Understands both direct calls and the proxy envelope
    """

    def __init__(self, rows: Optional[List[dict]] = None, proxy_path: str = "/proxy") -> None:
        self.rows: List[dict] = list(rows or [])
        self.calls: List[RecordedCall] = []
        self.proxy_path = proxy_path
        self.fail_status: Optional[int] = None
        self.raw_body: Optional[str] = None
        self._next_id = 1000 + len(self.rows)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    def calls_with(self, method: str) -> List[RecordedCall]:
        return [c for c in self.calls if c.method == method]

    def _handle(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        if request.url.path == self.proxy_path:
            method, path, body = body["method"], "/" + body["path"], body["body"]
        else:
            method, path = request.method, request.url.path
        self.calls.append(RecordedCall(method, path, body, dict(request.headers)))

        if self.fail_status is not None:
            return httpx.Response(self.fail_status, json={"errorCode": 1004, "message": "Not authorized"})
        if self.raw_body is not None:
            return httpx.Response(200, text=self.raw_body)

        if method == "GET":
            return httpx.Response(200, json={"id": 42, "rows": self.rows})
        if method == "POST":
            created = []
            for row in body:
                row = dict(row, id=self._next_id)
                self._next_id += 1
                self.rows.append(row)
                created.append(row)
            return httpx.Response(200, json={"message": "SUCCESS", "result": created})
        if method == "PUT":
            for row in body:
                for i, existing in enumerate(self.rows):
                    if existing["id"] == row["id"]:
                        self.rows[i] = row
            return httpx.Response(200, json={"message": "SUCCESS", "result": body})
        return httpx.Response(405)


def failing_transport(exc: Exception) -> httpx.MockTransport:
    """Transport whose every request raises ``exc``."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise exc

    return httpx.MockTransport(handler)
