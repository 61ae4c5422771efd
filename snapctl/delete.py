"""Commands that remove clients from the server."""

from __future__ import annotations

from snapctl.display import print_table
from snapctl.get import CLIENTS_HEADERS, clients_rows
from snapctl.rpc import SnapcastRpcClient, SnapctlError, raise_for_error

NO_CLIENTS = "No clients found (no groups available)."


def split_client_ids(client_ids: str) -> list[str]:
    """Split a comma-separated list of client ids, dropping blank entries."""
    return [part.strip() for part in client_ids.split(",") if part.strip()]


def _print_remaining_clients(rpc: SnapcastRpcClient) -> None:
    rows = clients_rows(rpc.get_status())
    if rows is None:
        print(NO_CLIENTS)
        return
    print_table(CLIENTS_HEADERS, rows)


def delete_client(server_url: str, client_id: str) -> None:
    """Delete one client and print the clients that remain."""
    rpc = SnapcastRpcClient(server_url)

    response = rpc.request("Client.GetStatus", {"id": client_id})
    raise_for_error(response, "Client not found", "Client not found")

    rpc.request("Server.DeleteClient", {"id": client_id})
    _print_remaining_clients(rpc)


def delete_clients(server_url: str, client_ids: str) -> None:
    """Delete every client in a comma-separated list and print those that remain.

    All clients are checked first; nothing is deleted if any one is unknown.
    """
    rpc = SnapcastRpcClient(server_url)

    ids = split_client_ids(client_ids)
    if not ids:
        raise SnapctlError("No valid client IDs provided")

    for client_id in ids:
        response = rpc.request("Client.GetStatus", {"id": client_id})
        raise_for_error(
            response,
            f"Client not found: {client_id}",
            f"Client not found: {client_id}",
        )

    for client_id in ids:
        rpc.request("Server.DeleteClient", {"id": client_id})

    _print_remaining_clients(rpc)