"""Command-line entry point for controlling a Snapcast server."""

from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Callable, Sequence
from typing import Any

from snapctl import delete, get, set_client, set_group
from snapctl.rpc import SnapctlError

VERSION = "1.0.0"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = "1780"
HOST_ENV = "SNAPSERVER_HOST"
PORT_ENV = "SNAPSERVER_PORT"

_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1

Handler = Callable[[argparse.Namespace, str], None]


def parse_bool(text: str) -> bool:
    """Accept exactly "true" or "false"."""
    if text == "true":
        return True
    if text == "false":
        return False
    raise argparse.ArgumentTypeError(
        f"invalid value '{text}': possible values are true, false"
    )


def _port(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid port '{text}'") from None
    if not 0 <= value <= 65535:
        raise argparse.ArgumentTypeError(f"port '{text}' is not in 0..=65535")
    return value


def _i64(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number '{text}'") from None
    if not _I64_MIN <= value <= _I64_MAX:
        raise argparse.ArgumentTypeError(f"number '{text}' is out of range")
    return value


def server_url(host: str, port: int) -> str:
    """The JSON-RPC WebSocket URL of a server."""
    return f"ws://{host}:{port}/jsonrpc"


def _print_version(args: argparse.Namespace, url: str) -> None:
    print(f"Version: v{VERSION}")


def _add_connection_options(parser: argparse.ArgumentParser, **defaults: Any) -> None:
    parser.add_argument(
        "-H", "--host",
        help=f"Host address for the Snapcast server [env: {HOST_ENV}]",
        **defaults.get("host", {}),
    )
    parser.add_argument(
        "-p", "--port",
        type=_port,
        help=f"Port number for the Snapcast server [env: {PORT_ENV}]",
        **defaults.get("port", {}),
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for every command."""
    parser = argparse.ArgumentParser(prog="snapctl", description="Snapcast Control Utility")
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {VERSION}")
    _add_connection_options(
        parser,
        host={"default": os.environ.get(HOST_ENV, DEFAULT_HOST)},
        port={"default": os.environ.get(PORT_ENV, DEFAULT_PORT)},
    )

    # Connection options may also follow any subcommand.
    connection = argparse.ArgumentParser(add_help=False)
    _add_connection_options(
        connection,
        host={"default": argparse.SUPPRESS},
        port={"default": argparse.SUPPRESS},
    )

    def add(subparsers: Any, name: str, run: Handler | None = None) -> argparse.ArgumentParser:
        sub = subparsers.add_parser(name, parents=[connection])
        if run is not None:
            sub.set_defaults(run=run)
        return sub

    commands = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")

    get_parser = add(commands, "get")
    get_sub = get_parser.add_subparsers(dest="subcommand", required=True, metavar="SUBCOMMAND")
    add(get_sub, "streams", lambda a, url: get.get_streams(url))
    add(get_sub, "stream", lambda a, url: get.get_stream(url, a.stream_id)).add_argument(
        "stream_id"
    )
    add(get_sub, "groups", lambda a, url: get.get_groups(url))
    add(get_sub, "group", lambda a, url: get.get_group(url, a.identifier)).add_argument(
        "identifier"
    )
    add(get_sub, "clients", lambda a, url: get.get_clients(url))
    add(get_sub, "client", lambda a, url: get.get_client(url, a.client_id)).add_argument(
        "client_id"
    )

    set_parser = add(commands, "set")
    set_sub = set_parser.add_subparsers(dest="subcommand", required=True, metavar="SUBCOMMAND")
    client_parser = add(
        set_sub,
        "client",
        lambda a, url: set_client.set_client(
            url, a.client_id, a.mute, a.volume, a.latency, a.name, a.group
        ),
    )
    client_parser.add_argument("client_id")
    client_parser.add_argument("--mute", type=parse_bool)
    client_parser.add_argument("--volume", type=_i64)
    client_parser.add_argument("--latency", type=_i64)
    client_parser.add_argument("--name")
    client_parser.add_argument("--group")

    group_parser = add(
        set_sub,
        "group",
        lambda a, url: set_group.set_group(
            url, a.group_id, a.name, a.mute, a.stream_id, a.clients
        ),
    )
    group_parser.add_argument("group_id")
    group_parser.add_argument("--name")
    group_parser.add_argument("--mute", type=parse_bool)
    group_parser.add_argument("--stream-id", dest="stream_id")
    group_parser.add_argument("--clients")

    delete_parser = add(commands, "delete")
    delete_sub = delete_parser.add_subparsers(
        dest="subcommand", required=True, metavar="SUBCOMMAND"
    )
    add(delete_sub, "client", lambda a, url: delete.delete_client(url, a.client_id)).add_argument(
        "client_id"
    )
    add(
        delete_sub, "clients", lambda a, url: delete.delete_clients(url, a.client_ids)
    ).add_argument("client_ids")

    add(commands, "version", _print_version)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run one command; return the process exit status."""
    args = build_parser().parse_args(argv)
    url = server_url(args.host, args.port)
    try:
        args.run(args, url)
    except SnapctlError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())