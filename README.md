# snapctl

A small command-line tool for inspecting and managing a Snapcast server
over its JSON-RPC WebSocket interface.

## Installation

```
pip install .
```

This installs the `snapctl` command.

## Connecting

By default `snapctl` talks to `ws://127.0.0.1:1780/jsonrpc`. Use the
connection options, or environment variables, to point it elsewhere:

| Option         | Environment variable | Default     |
|----------------|----------------------|-------------|
| `-H, --host`   | `SNAPSERVER_HOST`    | `127.0.0.1` |
| `-p, --port`   | `SNAPSERVER_PORT`    | `1780`      |

The options may be given before the command or after any subcommand, for
example `snapctl get clients -H 192.0.2.10`. The port must lie between 0 and
65535.

## Usage

Show information:

```
snapctl get streams
snapctl get stream <stream_id>
snapctl get groups
snapctl get group <group_id_or_name>
snapctl get clients
snapctl get client <client_id>
```

`get stream` lists every group playing the stream, one row per group.
`get group` matches either the group's id or its name. When a stream, group
or client cannot be found, the error lists the ones that are available.

Change a client:

```
snapctl set client <client_id> --volume 40 --mute false
snapctl set client <client_id> --latency 20 --name kitchen
snapctl set client <client_id> --group <group_id>
snapctl set client <client_id> --group none
```

`--mute` takes exactly `true` or `false`. Passing `--group` with an empty
value, `none` or `null` takes the client out of its current group; any other
value adds it to that group. After the changes the client's resulting state,
including its group and stream, is printed.

Change a group:

```
snapctl set group <group_id> --name "Living room" --mute true
snapctl set group <group_id> --stream-id <stream_id>
snapctl set group <group_id> --clients client-a,client-b
```

For `--name`, `--stream-id` and `--clients`, the values `none` and `null`
clear the setting. `--clients` replaces the group's whole client list. With
no option given, nothing is changed and a notice is printed.

Remove clients from the server:

```
snapctl delete client <client_id>
snapctl delete clients client-a,client-b
```

Every client is checked before anything is removed. If one of them is
unknown, nothing is deleted. The clients that remain are printed afterwards.

Print the version:

```
snapctl version
snapctl --version
```

Results are printed as plain aligned tables; an empty result prints
`No data to display.` Errors reported by the server or the connection are
printed to standard error prefixed with `Error:`, and the command exits with
status 1.

## Use from Python

The modules can also be used directly:

- `snapctl.rpc.SnapcastRpcClient` sends requests (`request`,
  `send_rpc_message`, `get_status`); failures raise `snapctl.rpc.SnapctlError`.
- `snapctl.get` has functions such as `streams_rows`, `groups_rows` and
  `client_rows` that turn a `Server.GetStatus` result into table rows without
  printing.
- `snapctl.display.format_table` renders rows as a text table.

## What it does not do

`snapctl` sends one request per connection and exits. It does not listen for
server notifications, add or remove streams, or start, stop or configure the
server itself.

## Development

```
pip install -e ".[test]"
pytest
```