"""
Brief: End-to-end tests for the nschain CLI with the UDP transport stubbed.

Inputs:
  - None

Outputs:
  - None
"""

import runpy
import sys

import pytest
from dnslib import RCODE, DNSRecord

import nschain.query as query_mod
from conftest import make_response
from nschain import main as main_mod
from nschain.transports.udp import UDPError

LOCAL = "192.0.2.53"

# (zone, server) -> (section, NS targets)
TREE = {
    (".", LOCAL): ("answer", ["b.root.", "a.root."]),
    ("com.", "a.root."): ("authority", ["a.gtld.", "b.gtld."]),
    ("com.", "b.root."): ("authority", ["a.gtld.", "b.gtld."]),
    ("example.com.", "a.gtld."): ("authority", ["ns2.example.com.", "ns1.example.com."]),
    ("example.com.", "b.gtld."): ("authority", ["ns2.example.com.", "ns1.example.com."]),
}


@pytest.fixture
def resolv_conf(tmp_path):
    path = tmp_path / "resolv.conf"
    path.write_text(f"nameserver {LOCAL}\nnameserver 192.0.2.54\n")
    return str(path)


@pytest.fixture
def fake_network(monkeypatch):
    calls = []

    def fake_udp_query(host, port, wire, *, timeout_ms):
        req = DNSRecord.parse(wire)
        zone = str(req.q.qname)
        calls.append((zone, host))
        if (zone, host) not in TREE:
            raise UDPError(f"UDP timeout after {timeout_ms}ms talking to {host}")
        section, targets = TREE[(zone, host)]
        kw = {section: targets}
        return make_response(zone, request=req, **kw).pack()

    monkeypatch.setattr(query_mod, "udp_query", fake_udp_query)
    return calls


def test_successful_walk_prints_every_level(resolv_conf, fake_network, capsys) -> None:
    """
    Brief: A walk to example.com prints three blocks and exits 0.

    Inputs:
      - resolv_conf, fake_network, capsys: fixtures

    Outputs:
      - None: Asserts exit code, headers, markers and call sequence
    """
    rc = main_mod.main(["--resolv-conf", resolv_conf, "--seed", "5", "example.com"])
    out = capsys.readouterr().out.splitlines()

    assert rc == 0
    assert out[0] == "Retrieving list of root nameservers:"
    assert out[1:3] in ([" - a.root.", " ➡️ b.root."], [" ➡️ a.root.", " - b.root."])
    assert out[3] == ""
    assert out[4].startswith("Finding nameservers for zone 'com.' using parent nameserver '")
    assert sum("➡️" in line for line in out[5:7]) == 1
    assert out[8].startswith("Finding nameservers for zone 'example.com.'")
    assert out[9:] == [" - ns1.example.com.", " - ns2.example.com."]
    assert [zone for zone, _host in fake_network] == [".", "com.", "example.com."]
    assert fake_network[0][1] == LOCAL


def test_seed_makes_output_reproducible(resolv_conf, fake_network, capsys) -> None:
    main_mod.main(["--resolv-conf", resolv_conf, "--seed", "11", "example.com."])
    first = capsys.readouterr().out
    main_mod.main(["--resolv-conf", resolv_conf, "--seed", "11", "example.com."])
    assert capsys.readouterr().out == first


def test_failing_level_header_is_last_output(resolv_conf, fake_network, capsys) -> None:
    """
    Brief: The header of the level that fails is printed, nothing after it.

    Inputs:
      - resolv_conf, fake_network, capsys: fixtures

    Outputs:
      - None: Asserts stdout ends with the failing zone's header and rc 1
    """
    rc = main_mod.main(["--resolv-conf", resolv_conf, "www.example.com"])
    captured = capsys.readouterr()
    out = captured.out.splitlines()

    assert rc == 1
    assert out[-2] == ""
    assert out[-1].startswith(
        "Finding nameservers for zone 'www.example.com.' using parent nameserver 'ns"
    )
    assert sum(line.startswith("Finding nameservers") for line in out) == 3
    assert "Query failed:" in captured.err
    assert [zone for zone, _ in fake_network] == [
        ".",
        "com.",
        "example.com.",
        "www.example.com.",
    ]


def test_servfail_is_fatal(resolv_conf, monkeypatch, capsys) -> None:
    def servfail(host, port, wire, *, timeout_ms):
        req = DNSRecord.parse(wire)
        return make_response(str(req.q.qname), rcode=RCODE.SERVFAIL, request=req).pack()

    monkeypatch.setattr(query_mod, "udp_query", servfail)
    rc = main_mod.main(["--resolv-conf", resolv_conf, "com"])
    captured = capsys.readouterr()
    assert rc == 1
    assert captured.out == "Retrieving list of root nameservers:\n"
    assert "no nameserver answered the question" in captured.err


def test_missing_resolv_conf_returns_one(tmp_path, capsys) -> None:
    rc = main_mod.main(["--resolv-conf", str(tmp_path / "nope"), "example.com"])
    assert rc == 1
    assert "Cannot initialize the local resolver" in capsys.readouterr().err


def test_invalid_config_file_returns_one(tmp_path, capsys) -> None:
    cfg = tmp_path / "nschain.yaml"
    cfg.write_text("timeout: -3\n")
    rc = main_mod.main(["--config", str(cfg), "example.com"])
    assert rc == 1
    assert "Invalid configuration" in capsys.readouterr().err


def test_config_file_supplies_resolv_conf(tmp_path, resolv_conf, fake_network, capsys) -> None:
    cfg = tmp_path / "nschain.yaml"
    cfg.write_text(f"resolv_conf: {resolv_conf}\nseed: 2\nlogging:\n  level: error\n")
    assert main_mod.main(["--config", str(cfg), "com"]) == 0
    assert "Finding nameservers for zone 'com.'" in capsys.readouterr().out


def test_invalid_zone_returns_one(resolv_conf, fake_network, capsys) -> None:
    rc = main_mod.main(["--resolv-conf", resolv_conf, "a..com"])
    assert rc == 1
    assert fake_network == []


def test_missing_argument_exits_two(capsys) -> None:
    with pytest.raises(SystemExit) as ei:
        main_mod.main([])
    assert ei.value.code == 2


def test_module_entrypoint(resolv_conf, fake_network, monkeypatch, capsys) -> None:
    monkeypatch.setattr(sys, "argv", ["nschain", "--resolv-conf", resolv_conf, "com"])
    with pytest.raises(SystemExit) as ei:
        runpy.run_module("nschain", run_name="__main__")
    assert ei.value.code == 0


def test_unwritable_log_file_returns_one(tmp_path, resolv_conf, capsys) -> None:
    """
    Brief: A log file that cannot be created is a fatal setup error, not a traceback.

    Inputs:
      - tmp_path, resolv_conf, capsys: fixtures

    Outputs:
      - None: Asserts rc 1 and a message on stderr
    """
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")
    cfg = tmp_path / "nschain.yaml"
    cfg.write_text(f"logging:\n  file: {blocker / 'sub' / 'nschain.log'}\n")

    rc = main_mod.main(["--config", str(cfg), "--resolv-conf", resolv_conf, "com"])

    assert rc == 1
    assert "Cannot initialize logging" in capsys.readouterr().err
