"""
Ethnode API Python client example.

Uses the requests library.
Run: pip install requests

Usage:
    from docs.python_sdk_example import EthnodeClient
    client = EthnodeClient("http://localhost:3030")
    wei = client.get_balance("0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266")
"""

from __future__ import annotations

from typing import Any

import requests

# First Anvil dev account (funded with 10000 ETH on a fresh node)
ANVIL_ACCOUNT_0 = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"


class EthnodeClientError(Exception):
    """Raised when the API returns an error response."""

    def __init__(self, message: str, status_code: int | None = None, response: requests.Response | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class EthnodeClient:
    """Client for the Ethnode balance API."""

    def __init__(self, base_url: str = "http://localhost:3030", timeout: float = 30.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = requests.Session()

    def _request(self, method: str, path: str, *, params: dict[str, Any] | None = None) -> requests.Response:
        url = f"{self.base_url}{path}"
        resp = self._session.request(method, url, params=params, timeout=self.timeout)
        if not resp.ok:
            detail = resp.json().get("detail", resp.text) if resp.headers.get("content-type", "").startswith("application/json") else resp.text
            raise EthnodeClientError(
                f"API error: {detail}",
                status_code=resp.status_code,
                response=resp,
            )
        return resp

    def health(self) -> dict[str, str]:
        """Liveness probe."""
        return self._request("GET", "/health").json()

    def ready(self) -> dict[str, Any]:
        """Readiness probe (chain id and head block of the node)."""
        return self._request("GET", "/ready").json()

    def get_balance(self, address: str, block: str = "latest") -> int:
        """Balance in wei. The API sends it as a string; int() keeps full precision."""
        r = self._request("GET", f"/balance/{address}/balance", params={"block": block})
        return int(r.json()["balance"])


# -----------------------------------------------------------------------------
# Example usage
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    client = EthnodeClient("http://localhost:3030")

    print("Health:", client.health())
    print("Ready:", client.ready())

    wei = client.get_balance(ANVIL_ACCOUNT_0)
    print("Balance (wei):", wei)
    print("Balance (ETH):", wei / 10**18)

    try:
        client.get_balance("0x1234")
    except EthnodeClientError as e:
        print("Rejected:", e.status_code, e)
