"""Command that changes the settings of a client."""

from __future__ import annotations

from typing import Any

from snapctl.display import print_table
from snapctl.rpc import SnapcastRpcClient, SnapctlError, raise_for_error

HEADERS = [
    "CLIENT ID", "STATUS", "INSTANCE", "NAME", "IP", "MAC", "VERSION",
    "MUTED", "VOLUME", "LATENCY", "GROUP ID", "GROUP NAME", "STREAM ID",
]
NOT_AVAILABLE = "N/A"
UNKNOWN = "unknown"

_REMOVAL_WORDS = frozenset({"none", "null"})
_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1


def _field(value: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def _text(value: Any, *keys: str, default: str | None = None) -> str | None:
    found = _field(value, *keys)
    return found if isinstance(found, str) else default


def _flag(value: Any, *keys: str) -> bool:
    found = _field(value, *keys)
    return found if isinstance(found, bool) else False


def _integer(value: Any, *keys: str) -> int | None:
    found = _field(value, *keys)
    if isinstance(found, bool) or not isinstance(found, int):
        return None
    return found if _I64_MIN <= found <= _I64_MAX else None


def _number_text(value: int | None) -> str:
    return UNKNOWN if value is None else str(value)


def _instance(client: Any) -> str:
    config = _field(client, "config")
    if not isinstance(config, dict) or "instance" not in config:
        return UNKNOWN
    instance = config["instance"]
    if isinstance(instance, (int, float)) and not isinstance(instance, bool):
        return _number_text(_integer(config, "instance"))
    return instance if isinstance(instance, str) else UNKNOWN


def _present(value: Any, *keys: str) -> bool:
    """True when the last key exists, whatever value it holds."""
    *parents, last = keys
    container = _field(value, *parents)
    return isinstance(container, dict) and last in container


def _member_ids(group: Any) -> list[str]:
    clients = _field(group, "clients")
    if not isinstance(clients, list):
        return []
    return [cid for c in clients if (cid := _text(c, "id")) is not None]


def _should_remove(group: str) -> bool:
    return not group or group.lower() in _REMOVAL_WORDS


def find_client_group(client: SnapcastRpcClient, client_id: str) -> str | None:
    """Return the id of the group holding client_id, or None if it is in none."""
    groups = _field(client.get_status(), "groups")
    if not isinstance(groups, list):
        return None
    for group in groups:
        if client_id in _member_ids(group):
            return _text(group, "id", default=UNKNOWN)
    return None


def _group_status(rpc: SnapcastRpcClient, group_id: str) -> Any:
    response = rpc.request("Group.GetStatus", {"id": group_id})
    raise_for_error(
        response,
        "Failed to get group status",
        "Failed to get group status: Group not found",
    )
    return response


def _set_group_clients(rpc: SnapcastRpcClient, group_id: str, clients: list[str]) -> None:
    response = rpc.request("Group.SetClients", {"id": group_id, "clients": clients})
    raise_for_error(
        response,
        "Failed to update group clients",
        "Failed to update group clients: Group not found",
    )


def set_client(
    server_url: str,
    client_id: str,
    mute: bool | None = None,
    volume: int | None = None,
    latency: int | None = None,
    name: str | None = None,
    group: str | None = None,
) -> None:
    """Apply the given settings to a client and print its resulting state.

    A group of "", "none" or "null" removes the client from its current group.
    """
    rpc = SnapcastRpcClient(server_url)

    group_id = NOT_AVAILABLE
    stream_id = NOT_AVAILABLE
    group_name = NOT_AVAILABLE

    response = rpc.request("Client.GetStatus", {"id": client_id})
    raise_for_error(response, "Client not found", "Client not found")

    if name is not None:
        response = rpc.request("Client.SetName", {"id": client_id, "name": name})
        raise_for_error(
            response,
            "Failed to set client name",
            "Failed to set client name: Client not found",
        )

    if mute is not None or volume is not None:
        volume_params: dict[str, Any] = {}
        if mute is not None:
            volume_params["muted"] = mute
        if volume is not None:
            volume_params["percent"] = volume
        response = rpc.request(
            "Client.SetVolume", {"id": client_id, "volume": volume_params}
        )
        raise_for_error(
            response,
            "Failed to set client volume",
            "Failed to set client volume: Client not found",
        )

    if latency is not None:
        response = rpc.request(
            "Client.SetLatency", {"id": client_id, "latency": latency}
        )
        raise_for_error(
            response,
            "Failed to set client latency",
            "Failed to set client latency: Client not found",
        )

    if group is not None:
        if _should_remove(group):
            current_group_id = find_client_group(rpc, client_id)
            if current_group_id is not None:
                group_id = current_group_id
                response = _group_status(rpc, current_group_id)
                if _present(response, "result", "group"):
                    info = response["result"]["group"]
                    group_id = _text(info, "id", default=group_id)
                    group_name = _text(info, "name", default=group_name)
                    stream_id = _text(info, "stream_id", default=stream_id)
                remaining = [
                    cid for cid in _member_ids(_field(response, "result", "group"))
                    if cid != client_id
                ]
                _set_group_clients(rpc, current_group_id, remaining)
        else:
            response = _group_status(rpc, group)
            if _present(response, "result", "group"):
                info = response["result"]["group"]
                group_id = group
                group_name = _text(info, "name", default=group_name)
                stream_id = _text(info, "stream_id", default=stream_id)
            members = _member_ids(_field(response, "result", "group"))
            if client_id not in members:
                members.append(client_id)
            _set_group_clients(rpc, group, members)

    current_group_id = find_client_group(rpc, client_id)
    if current_group_id is not None:
        response = rpc.request("Group.GetStatus", {"id": current_group_id})
        if _present(response, "result", "group"):
            info = response["result"]["group"]
            group_id = _text(info, "id", default=current_group_id)
            group_name = _text(info, "name", default=NOT_AVAILABLE)
            stream_id = _text(info, "stream_id", default=NOT_AVAILABLE)

    response = rpc.request("Client.GetStatus", {"id": client_id})
    raise_for_error(
        response,
        "Failed to get final client status",
        "Failed to get final client status: Client not found",
    )
    if not _present(response, "result", "client"):
        raise SnapctlError("Failed to get client data")
    data = response["result"]["client"]

    print_table(HEADERS, [[
        _text(data, "id", default=UNKNOWN),
        "connected" if _flag(data, "connected") else "disconnected",
        _instance(data),
        _text(data, "config", "name", default=UNKNOWN),
        _text(data, "host", "ip", default=UNKNOWN),
        _text(data, "host", "mac", default=UNKNOWN),
        _text(data, "snapclient", "version", default=UNKNOWN),
        "true" if _flag(data, "config", "volume", "muted") else "false",
        _number_text(_integer(data, "config", "volume", "percent")),
        _number_text(_integer(data, "config", "latency")),
        group_id,
        group_name,
        stream_id,
    ]])