"""HTTP client for the admin menu API."""

from pathlib import Path
from typing import Any

import requests
from loguru import logger

from menutree.config import API_BASE_URL, API_TOKEN_FILES, REQUEST_TIMEOUT
from menutree.errors import GatewayError


def read_api_token(token_files: list[Path]) -> str:
    """Return the token from the first readable file."""
    for token_path in token_files:
        try:
            token = token_path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            continue
        logger.debug("API token read from {}", token_path)
        return token
    msg = f"Cannot find menu API token file, was looking at {token_files!r}"
    raise RuntimeError(msg)


class MenuApi:
    """Encapsulated admin menu API.

    Every procedure answers with an envelope ``{"success": bool, "data": ...}``;
    anything else is reported as a GatewayError.
    """

    def __init__(
        self,
        *,
        base_url: str = API_BASE_URL,
        token: str | None = None,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.api_token = token if token is not None else read_api_token(API_TOKEN_FILES)
        self.sess = requests.Session()
        self.sess.headers["Authorization"] = f"Bearer {self.api_token}"
        logger.debug("API ready: base_url {!r}, timeout {}s", self.base_url, self.timeout)

    def call(self, procedure: str, args: dict[str, Any]) -> Any:
        """Invoke a procedure and return the ``data`` part of its response."""
        logger.debug("Making request: {!r} {}", procedure, repr(args)[:64])
        try:
            r = self.sess.post(f"{self.base_url}/{procedure}", json=args, timeout=self.timeout)
            r.raise_for_status()
            rv = r.json()
        except (requests.RequestException, ValueError) as e:
            msg = f"API call failed: {procedure!r} -> {e}"
            raise GatewayError(msg) from e

        if not isinstance(rv, dict) or not rv.get("success"):
            error = rv.get("message") if isinstance(rv, dict) else rv
            msg = f"API call failed: ({procedure!r}, {args!r}) -> {error!r}"
            raise GatewayError(msg)
        return rv.get("data")
