"""JSON-RPC access to a Snapcast server over a WebSocket."""

from __future__ import annotations

import json
import uuid
from typing import Any

import websocket

INTERNAL_ERROR = -32603


class SnapctlError(Exception):
    """Raised when a command against the server cannot be carried out."""


def send_websocket_message(url: str, message: Any) -> Any:
    """Send one JSON message and return the first JSON text reply."""
    try:
        ws = websocket.create_connection(url)
    except (websocket.WebSocketException, OSError, ValueError) as exc:
        raise SnapctlError(str(exc)) from exc
    try:
        ws.send(json.dumps(message, separators=(",", ":")))
        opcode, data = ws.recv_data()
    except websocket.WebSocketConnectionClosedException as exc:
        raise SnapctlError("No response received") from exc
    except (websocket.WebSocketException, OSError) as exc:
        raise SnapctlError(str(exc)) from exc
    finally:
        ws.close()

    if opcode != websocket.ABNF.OPCODE_TEXT:
        raise SnapctlError("Unexpected message type")
    try:
        text = data.decode("utf-8") if isinstance(data, bytes) else data
        return json.loads(text)
    except ValueError as exc:
        raise SnapctlError(str(exc)) from exc


def new_request(method: str, params: Any = None) -> dict[str, Any]:
    """Build a JSON-RPC 2.0 request with a fresh random id."""
    request: dict[str, Any] = {
        "id": str(uuid.uuid4()),
        "jsonrpc": "2.0",
        "method": method,
    }
    if params is not None:
        request["params"] = params
    return request


def raise_for_error(response: Any, prefix: str, fallback: str) -> None:
    """Raise SnapctlError if the response carries an internal-error reply.

    The error message from the server is appended to prefix; without one,
    fallback is used as the whole message.
    """
    error = response.get("error") if isinstance(response, dict) else None
    if not isinstance(error, dict):
        return
    code = error.get("code")
    if isinstance(code, bool) or not isinstance(code, int) or code != INTERNAL_ERROR:
        return
    message = error.get("message")
    if isinstance(message, str):
        raise SnapctlError(f"{prefix}: {message}")
    raise SnapctlError(fallback)


class SnapcastRpcClient:
    """Sends JSON-RPC requests to one Snapcast server."""

    def __init__(self, server_url: str) -> None:
        self.server_url = server_url

    def send_rpc_message(self, message: Any) -> Any:
        """Send a prepared request and return the raw response."""
        try:
            return send_websocket_message(self.server_url, message)
        except SnapctlError as exc:
            raise SnapctlError(f"Failed to send websocket message: {exc}") from exc

    def request(self, method: str, params: Any = None) -> Any:
        """Send a new request for method with params and return the response."""
        return self.send_rpc_message(new_request(method, params))

    def get_status(self) -> Any:
        """Return the server object of a Server.GetStatus reply."""
        response = self.request("Server.GetStatus")
        result = response.get("result") if isinstance(response, dict) else None
        server = result.get("server") if isinstance(result, dict) else None
        if server is None:
            raise SnapctlError("Failed to get server information from response")
        return server