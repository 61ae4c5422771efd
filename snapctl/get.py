"""Read-only commands: list and show streams, groups and clients."""

from __future__ import annotations

import json
from collections.abc import Iterator
from typing import Any

from snapctl.display import print_table
from snapctl.rpc import SnapcastRpcClient, SnapctlError

STREAMS_HEADERS = ["STREAM ID", "STATUS"]
STREAM_HEADERS = ["STREAM ID", "STATUS", "VERSION", "GROUP ID", "CLIENTS", "URI"]
GROUPS_HEADERS = ["GROUP ID", "NAME", "STATUS", "STREAM ID", "CLIENTS"]
GROUP_HEADERS = ["GROUP ID", "NAME", "VERSION", "STATUS", "STREAM ID", "CLIENTS"]
CLIENTS_HEADERS = ["CLIENT ID", "STATUS", "GROUP ID", "STREAM ID"]
CLIENT_HEADERS = [
    "CLIENT ID", "STATUS", "INSTANCE", "NAME", "IP", "MAC", "VERSION",
    "MUTED", "VOLUME", "GROUP ID", "STREAM ID",
]

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


def _items(value: Any, *keys: str) -> list | None:
    found = _field(value, *keys)
    return found if isinstance(found, list) else None


def _groups(server_info: Any) -> list:
    return _items(server_info, "groups") or []


def _group_clients(group: Any) -> Iterator[Any]:
    yield from _items(group, "clients") or []


def _client_ids(group: Any) -> str:
    clients = _items(group, "clients")
    if clients is None:
        return "None"
    return ", ".join(cid for c in clients if (cid := _text(c, "id")) is not None)


def _connection_status(client: Any) -> str:
    """Whether the client reports itself connected, as shown in tables."""
    return "connected" if _flag(client, "connected") else "disconnected"


def _debug_list(items: list[str]) -> str:
    return "[" + ", ".join(json.dumps(item, ensure_ascii=False) for item in items) + "]"


def _server_version(server_info: Any) -> str:
    return _text(server_info, "server", "snapserver", "version", default="unknown")


def _number_text(value: int | None) -> str:
    return "unknown" if value is None else str(value)


def _instance(client: Any) -> str:
    config = _field(client, "config")
    if not isinstance(config, dict) or "instance" not in config:
        return "unknown"
    instance = config["instance"]
    if isinstance(instance, (int, float)) and not isinstance(instance, bool):
        return _number_text(_integer(config, "instance"))
    return instance if isinstance(instance, str) else "unknown"


def streams_rows(server_info: Any) -> list[list[str]]:
    """Rows of stream id and status for every stream."""
    return [
        [_text(s, "id", default="unknown"), _text(s, "status", default="unknown")]
        for s in _items(server_info, "streams") or []
    ]


def stream_rows(server_info: Any, stream_id: str) -> list[list[str]]:
    """Rows describing one stream and each group that plays it."""
    version = _server_version(server_info)
    streams = _items(server_info, "streams") or []
    stream = next((s for s in streams if _text(s, "id") == stream_id), None)
    if stream is None:
        available = [sid for s in streams if (sid := _text(s, "id")) is not None]
        raise SnapctlError(
            f"Stream with ID '{stream_id}' not found. "
            f"Available streams: {_debug_list(available)}"
        )

    own_id = _text(stream, "id", default="unknown")
    status = _text(stream, "status", default="unknown")
    uri = _text(stream, "uri", "raw", default="unknown")
    groups = [g for g in _groups(server_info) if _text(g, "stream_id") == own_id]

    if not groups:
        return [[own_id, status, version, "None", "None", uri]]

    first, *rest = groups
    rows = [[own_id, status, version, _text(first, "id", default="unknown"),
             _client_ids(first), uri]]
    rows.extend(
        ["", "", "", _text(g, "id", default="unknown"), _client_ids(g), uri]
        for g in rest
    )
    return rows


def groups_rows(server_info: Any) -> list[list[str]] | None:
    """Rows for every group, or None when the server reports no groups."""
    groups = _items(server_info, "groups")
    if not groups:
        return None
    return [
        [
            _text(g, "id", default="unknown"),
            _text(g, "name", default=""),
            "muted" if _flag(g, "muted") else "unmuted",
            _text(g, "stream_id", default="none"),
            _client_ids(g),
        ]
        for g in groups
    ]


def group_rows(server_info: Any, identifier: str) -> list[list[str]]:
    """The row for the group whose id or name equals identifier."""
    version = _server_version(server_info)
    groups = _groups(server_info)
    group = next(
        (g for g in groups
         if _text(g, "id") == identifier or _text(g, "name") == identifier),
        None,
    )
    if group is None:
        available = [
            f"{_text(g, 'id', default='unknown')} ({_text(g, 'name', default='unnamed')})"
            for g in groups
        ]
        raise SnapctlError(
            f"Group with identifier '{identifier}' not found. "
            f"Available groups: {_debug_list(available)}"
        )
    return [[
        _text(group, "id", default="unknown"),
        _text(group, "name", default="undefined"),
        version,
        "muted" if _flag(group, "muted") else "unmuted",
        _text(group, "stream_id", default="none"),
        _client_ids(group),
    ]]


def clients_rows(server_info: Any) -> list[list[str]] | None:
    """Rows for every client, or None when the server reports no groups."""
    groups = _items(server_info, "groups")
    if groups is None:
        return None
    rows = []
    for group in groups:
        group_id = _text(group, "id", default="unknown")
        stream_id = _text(group, "stream_id", default="unknown")
        rows.extend(
            [_text(c, "id", default="unknown"), _connection_status(c),
             group_id, stream_id]
            for c in _group_clients(group)
        )
    return rows


def client_rows(server_info: Any, client_id: str) -> list[list[str]]:
    """The row describing one client and the group it belongs to."""
    groups = _groups(server_info)
    found = next(
        ((g, c) for g in groups for c in _group_clients(g) if _text(c, "id") == client_id),
        None,
    )
    if found is None:
        available = [
            cid for g in groups for c in _group_clients(g)
            if (cid := _text(c, "id")) is not None
        ]
        raise SnapctlError(
            f"Client with ID '{client_id}' not found. "
            f"Available clients: {_debug_list(available)}"
        )
    group, client = found
    return [[
        _text(client, "id", default="unknown"),
        _connection_status(client),
        _instance(client),
        _text(client, "config", "name", default=""),
        _text(client, "host", "ip", default="unknown"),
        _text(client, "host", "mac", default="unknown"),
        _text(client, "snapclient", "version", default="unknown"),
        "true" if _flag(client, "config", "volume", "muted") else "false",
        _number_text(_integer(client, "config", "volume", "percent")),
        _text(group, "id", default="unknown"),
        _text(group, "stream_id", default="unknown"),
    ]]


def _server_info(server_url: str) -> Any:
    return SnapcastRpcClient(server_url).get_status()


def get_streams(server_url: str) -> None:
    """Print every stream on the server."""
    print_table(STREAMS_HEADERS, streams_rows(_server_info(server_url)))


def get_stream(server_url: str, stream_id: str) -> None:
    """Print one stream and the groups playing it."""
    print_table(STREAM_HEADERS, stream_rows(_server_info(server_url), stream_id))


def get_groups(server_url: str) -> None:
    """Print every group on the server."""
    rows = groups_rows(_server_info(server_url))
    if rows is None:
        print("No groups found.")
        return
    print_table(GROUPS_HEADERS, rows)


def get_group(server_url: str, identifier: str) -> None:
    """Print the group with the given id or name."""
    print_table(GROUP_HEADERS, group_rows(_server_info(server_url), identifier))


def get_clients(server_url: str) -> None:
    """Print every client on the server."""
    rows = clients_rows(_server_info(server_url))
    if rows is None:
        print("No clients found (no groups available).")
        return
    print_table(CLIENTS_HEADERS, rows)


def get_client(server_url: str, client_id: str) -> None:
    """Print one client."""
    print_table(CLIENT_HEADERS, client_rows(_server_info(server_url), client_id))