import json

import pytest
import websocket

from snapctl.rpc import SnapcastRpcClient, SnapctlError
from snapctl.set_client import HEADERS, find_client_group, set_client

URL = "ws://localhost:1780/jsonrpc"
INTERNAL_ERROR = -32603


class FakeServer:
    def __init__(self):
        self.clients = {
            "kitchen": {
                "id": "kitchen",
                "connected": True,
                "config": {
                    "instance": 1,
                    "name": "Kitchen",
                    "latency": 0,
                    "volume": {"muted": False, "percent": 50},
                },
                "host": {"ip": "192.0.2.10", "mac": "00:00:5e:00:53:01"},
                "snapclient": {"version": "0.27.0"},
            },
            "office": {
                "id": "office",
                "connected": False,
                "config": {
                    "instance": 1,
                    "name": "",
                    "latency": 0,
                    "volume": {"muted": True, "percent": 10},
                },
                "host": {"ip": "192.0.2.11", "mac": "00:00:5e:00:53:02"},
                "snapclient": {"version": "0.27.0"},
            },
        }
        self.groups = [
            {"id": "g1", "name": "Downstairs", "muted": False,
             "stream_id": "default", "clients": ["kitchen"]},
            {"id": "g2", "name": "Upstairs", "muted": False,
             "stream_id": "radio", "clients": ["office"]},
        ]
        self.requests = []
        self.fail = {}

    def _group(self, group_id):
        return next((g for g in self.groups if g["id"] == group_id), None)

    def _group_json(self, group):
        return {**group, "clients": [self.clients[c] for c in group["clients"]]}

    def handle(self, request):
        self.requests.append(request)
        method = request["method"]
        params = request.get("params", {})
        if method in self.fail:
            return {"id": request["id"], "jsonrpc": "2.0",
                    "error": {"code": INTERNAL_ERROR, "message": self.fail[method]}}
        result = getattr(self, "_" + method.replace(".", "_"))(params)
        if isinstance(result, str):
            return {"id": request["id"], "jsonrpc": "2.0",
                    "error": {"code": INTERNAL_ERROR, "message": result}}
        return {"id": request["id"], "jsonrpc": "2.0", "result": result}

    def _Server_GetStatus(self, params):
        return {"server": {"groups": [self._group_json(g) for g in self.groups],
                           "streams": []}}

    def _Client_GetStatus(self, params):
        client = self.clients.get(params["id"])
        return "Client not found" if client is None else {"client": client}

    def _Client_SetName(self, params):
        self.clients[params["id"]]["config"]["name"] = params["name"]
        return {"name": params["name"]}

    def _Client_SetVolume(self, params):
        self.clients[params["id"]]["config"]["volume"].update(params["volume"])
        return {"volume": self.clients[params["id"]]["config"]["volume"]}

    def _Client_SetLatency(self, params):
        self.clients[params["id"]]["config"]["latency"] = params["latency"]
        return {"latency": params["latency"]}

    def _Group_GetStatus(self, params):
        group = self._group(params["id"])
        return "Group not found" if group is None else {"group": self._group_json(group)}

    def _Group_SetClients(self, params):
        group = self._group(params["id"])
        if group is None:
            return "Group not found"
        for other in self.groups:
            other["clients"] = [c for c in other["clients"] if c not in params["clients"]]
        group["clients"] = list(params["clients"])
        return {"server": {}}


class FakeConnection:
    def __init__(self, server):
        self.server = server
        self.reply = None

    def send(self, text):
        self.reply = self.server.handle(json.loads(text))

    def recv_data(self):
        return websocket.ABNF.OPCODE_TEXT, json.dumps(self.reply).encode("utf-8")

    def close(self):
        pass


@pytest.fixture
def server(monkeypatch):
    fake = FakeServer()
    monkeypatch.setattr(
        websocket, "create_connection", lambda url, *a, **k: FakeConnection(fake)
    )
    return fake


def parse_table(text):
    lines = text.rstrip("\n").split("\n")
    header = lines[0]
    starts = []
    offset = 0
    for name in HEADERS:
        index = header.index(name, offset)
        starts.append(index)
        offset = index + len(name)
    bounds = list(zip(starts, starts[1:] + [None]))
    return [
        {name: line[a:b].strip() for name, (a, b) in zip(HEADERS, bounds)}
        for line in lines[1:]
    ]


def methods(server):
    return [r["method"] for r in server.requests]


def test_find_client_group_returns_group_id(server):
    rpc = SnapcastRpcClient(URL)
    assert find_client_group(rpc, "office") == "g2"
    assert find_client_group(rpc, "nobody") is None


def test_unknown_client_raises_and_changes_nothing(server):
    with pytest.raises(SnapctlError, match="^Client not found: Client not found$"):
        set_client(URL, "nobody", name="x")
    assert methods(server) == ["Client.GetStatus"]


def test_no_changes_prints_current_state(server, capsys):
    set_client(URL, "kitchen")
    rows = parse_table(capsys.readouterr().out)
    assert rows == [{
        "CLIENT ID": "kitchen", "STATUS": "connected", "INSTANCE": "1",
        "NAME": "Kitchen", "IP": "192.0.2.10", "MAC": "00:00:5e:00:53:01",
        "VERSION": "0.27.0", "MUTED": "false", "VOLUME": "50", "LATENCY": "0",
        "GROUP ID": "g1", "GROUP NAME": "Downstairs", "STREAM ID": "default",
    }]
    assert methods(server) == [
        "Client.GetStatus", "Server.GetStatus", "Group.GetStatus", "Client.GetStatus",
    ]


def test_set_name(server, capsys):
    set_client(URL, "kitchen", name="Living Room")
    request = next(r for r in server.requests if r["method"] == "Client.SetName")
    assert request["params"] == {"id": "kitchen", "name": "Living Room"}
    assert parse_table(capsys.readouterr().out)[0]["NAME"] == "Living Room"


def test_set_mute_and_volume_in_one_request(server, capsys):
    set_client(URL, "kitchen", mute=True, volume=35)
    volume_requests = [r for r in server.requests if r["method"] == "Client.SetVolume"]
    assert len(volume_requests) == 1
    assert volume_requests[0]["params"] == {
        "id": "kitchen", "volume": {"muted": True, "percent": 35},
    }
    row = parse_table(capsys.readouterr().out)[0]
    assert (row["MUTED"], row["VOLUME"]) == ("true", "35")


def test_set_volume_only_omits_muted(server, capsys):
    set_client(URL, "office", volume=70)
    request = next(r for r in server.requests if r["method"] == "Client.SetVolume")
    assert request["params"]["volume"] == {"percent": 70}
    row = parse_table(capsys.readouterr().out)[0]
    assert (row["CLIENT ID"], row["MUTED"], row["VOLUME"]) == ("office", "true", "70")


def test_set_latency(server, capsys):
    set_client(URL, "kitchen", latency=120)
    request = next(r for r in server.requests if r["method"] == "Client.SetLatency")
    assert request["params"] == {"id": "kitchen", "latency": 120}
    assert parse_table(capsys.readouterr().out)[0]["LATENCY"] == "120"


def test_move_client_to_other_group(server, capsys):
    set_client(URL, "kitchen", group="g2")
    set_request = next(r for r in server.requests if r["method"] == "Group.SetClients")
    assert set_request["params"] == {"id": "g2", "clients": ["office", "kitchen"]}
    assert find_client_group(SnapcastRpcClient(URL), "kitchen") == "g2"
    row = parse_table(capsys.readouterr().out)[0]
    assert (row["GROUP ID"], row["GROUP NAME"], row["STREAM ID"]) == (
        "g2", "Upstairs", "radio",
    )


def test_adding_to_current_group_keeps_single_entry(server, capsys):
    set_client(URL, "kitchen", group="g1")
    set_request = next(r for r in server.requests if r["method"] == "Group.SetClients")
    assert set_request["params"]["clients"] == ["kitchen"]
    row = parse_table(capsys.readouterr().out)[0]
    assert (row["GROUP ID"], row["GROUP NAME"], row["STREAM ID"]) == (
        "g1", "Downstairs", "default",
    )


@pytest.mark.parametrize("word", ["", "none", "NULL"])
def test_remove_client_from_group(server, capsys, word):
    set_client(URL, "kitchen", group=word)
    set_request = next(r for r in server.requests if r["method"] == "Group.SetClients")
    assert set_request["params"] == {"id": "g1", "clients": []}
    assert find_client_group(SnapcastRpcClient(URL), "kitchen") is None
    row = parse_table(capsys.readouterr().out)[0]
    assert (row["GROUP ID"], row["GROUP NAME"], row["STREAM ID"]) == (
        "g1", "Downstairs", "default",
    )


def test_unknown_target_group_raises(server):
    with pytest.raises(SnapctlError, match="^Failed to get group status: Group not found$"):
        set_client(URL, "kitchen", group="missing")
    assert "Group.SetClients" not in methods(server)


def test_set_name_failure_is_reported(server):
    server.fail["Client.SetName"] = "boom"
    with pytest.raises(SnapctlError, match="^Failed to set client name: boom$"):
        set_client(URL, "kitchen", name="x")


def test_set_volume_failure_is_reported(server):
    server.fail["Client.SetVolume"] = "boom"
    with pytest.raises(SnapctlError, match="^Failed to set client volume: boom$"):
        set_client(URL, "kitchen", mute=False)


def test_set_latency_failure_stops_before_group_change(server):
    server.fail["Client.SetLatency"] = "boom"
    with pytest.raises(SnapctlError, match="^Failed to set client latency: boom$"):
        set_client(URL, "kitchen", latency=5, group="g2")
    assert "Group.SetClients" not in methods(server)


def test_unreachable_server_raises(monkeypatch):
    def refuse(url, *args, **kwargs):
        raise ConnectionRefusedError("refused")

    monkeypatch.setattr(websocket, "create_connection", refuse)
    with pytest.raises(SnapctlError, match="^Failed to send websocket message"):
        set_client(URL, "kitchen")