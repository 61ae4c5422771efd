"""Command that changes the settings of a group."""

from __future__ import annotations

from typing import Any

from snapctl.display import print_table
from snapctl.rpc import SnapcastRpcClient, raise_for_error

HEADERS = ["GROUP ID", "NAME", "MUTED", "STREAM ID", "CLIENTS"]
NOTHING_TO_SET = (
    "No parameters specified to set. Use --name, --mute, --stream-id, or --clients."
)

_CLEARING_WORDS = frozenset({"none", "null"})


def _is_clearing(value: str) -> bool:
    return value.lower() in _CLEARING_WORDS


def _field(value: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def _text(value: Any, *keys: str) -> str | None:
    found = _field(value, *keys)
    return found if isinstance(found, str) else None


def _bool(value: Any, *keys: str) -> bool | None:
    found = _field(value, *keys)
    return found if isinstance(found, bool) else None


def _has_result(response: Any) -> bool:
    return isinstance(response, dict) and "result" in response


def parse_clients(clients: str) -> list[str]:
    """Parse a comma-separated client list; "none" or "null" means no clients."""
    if _is_clearing(clients):
        return []
    return [part.strip() for part in clients.split(",") if part.strip()]


def set_group(
    server_url: str,
    group_id: str,
    name: str | None = None,
    mute: bool | None = None,
    stream_id: str | None = None,
    clients: str | None = None,
) -> None:
    """Apply the given settings to a group and print its resulting state."""
    rpc = SnapcastRpcClient(server_url)

    response = rpc.request("Group.GetStatus", {"id": group_id})
    raise_for_error(response, "Group not found", "Group not found")

    group = _field(response, "result", "group")
    final_name = _text(group, "name")
    final_muted = _bool(group, "muted")
    final_stream_id = _text(group, "stream_id")
    final_clients = [
        cid for c in (_field(group, "clients") or []) if (cid := _text(c, "id")) is not None
    ] if isinstance(_field(group, "clients"), list) else []

    if name is not None:
        name_to_set = "" if _is_clearing(name) else name
        response = rpc.request("Group.SetName", {"id": group_id, "name": name_to_set})
        raise_for_error(
            response,
            "Failed to set group name",
            "Failed to set group name: Group not found",
        )
        final_name = name_to_set

    if mute is not None:
        response = rpc.request("Group.SetMute", {"id": group_id, "mute": mute})
        raise_for_error(
            response,
            "Failed to set group mute status",
            "Failed to set group mute status: Group not found",
        )
        if _has_result(response):
            final_muted = _bool(response["result"], "mute")

    if stream_id is not None:
        stream_to_set = "" if _is_clearing(stream_id) else stream_id
        response = rpc.request(
            "Group.SetStream", {"id": group_id, "stream_id": stream_to_set}
        )
        raise_for_error(
            response,
            "Failed to set group stream",
            "Failed to set group stream: Group not found",
        )
        if _has_result(response):
            final_stream_id = _text(response["result"], "stream_id")

    if clients is not None:
        client_ids = parse_clients(clients)
        response = rpc.request(
            "Group.SetClients", {"id": group_id, "clients": client_ids}
        )
        raise_for_error(
            response,
            "Failed to set group clients",
            "Failed to set group clients: Group not found",
        )
        final_clients = client_ids

    if name is None and mute is None and stream_id is None and clients is None:
        print(NOTHING_TO_SET)
        return

    muted_text = "unknown" if final_muted is None else ("true" if final_muted else "false")
    print_table(HEADERS, [[
        group_id,
        "unknown" if final_name is None else final_name,
        muted_text,
        "none" if final_stream_id is None else final_stream_id,
        ", ".join(final_clients),
    ]])