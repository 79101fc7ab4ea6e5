"""
Dev-node launcher: snapshot-driven startup mode and restart continuity.

A small Python script stands in for anvil: it loads --load-state when given,
bumps a boot counter and writes --dump-state, like a node that persists its chain.
"""

from __future__ import annotations

import json
import os
import signal
import subprocess
import sys
import textwrap
import time
from pathlib import Path

import pytest

from ethnode_api.core.exceptions import ConfigError
from ethnode_api.devnode import AnvilConfig, StartupMode, build_anvil_command, detect_startup_mode, run_anvil

DEV_ACCOUNT = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
OTHER_ACCOUNT = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"

FAKE_ANVIL = textwrap.dedent(
    """
    import json
    import sys

    args = sys.argv[1:]

    def opt(name):
        return args[args.index(name) + 1] if name in args else None

    dump, load = opt("--dump-state"), opt("--load-state")
    state = {"boots": 0, "accounts": {}}
    if load:
        with open(load) as f:
            state = json.load(f)
    state["boots"] += 1
    state["loaded_from"] = load
    state["accounts"].setdefault("%s", "10000000000000000000000")
    with open(dump, "w") as f:
        json.dump(state, f)
    """
    % DEV_ACCOUNT
)


@pytest.fixture
def fake_anvil(tmp_path):
    script = tmp_path / "fake_anvil.py"
    script.write_text(FAKE_ANVIL)
    return (sys.executable, str(script))


def test_detect_startup_mode(tmp_path):
    state = tmp_path / "anvil_state.json"
    assert detect_startup_mode(state) is StartupMode.FRESH
    state.write_text("{}")
    assert detect_startup_mode(state) is StartupMode.RESTORED


def test_directory_is_not_a_snapshot(tmp_path):
    assert detect_startup_mode(tmp_path) is StartupMode.FRESH


def test_fresh_command_dumps_without_loading(tmp_path):
    config = AnvilConfig(state_path=tmp_path / "s.json")
    cmd = build_anvil_command(config, StartupMode.FRESH)
    assert cmd == [
        "anvil",
        "--host", "0.0.0.0",
        "--port", "8545",
        "--dump-state", str(tmp_path / "s.json"),
        "--gas-limit", "3000000000",
    ]
    assert "--load-state" not in cmd


def test_restored_command_loads_and_dumps_same_path(tmp_path):
    path = str(tmp_path / "s.json")
    config = AnvilConfig(state_path=tmp_path / "s.json", extra_args=("--block-time", "2"))
    cmd = build_anvil_command(config, StartupMode.RESTORED)
    assert cmd[cmd.index("--dump-state") + 1] == path
    assert cmd[cmd.index("--load-state") + 1] == path
    assert cmd[-2:] == ["--block-time", "2"]


def test_empty_command_rejected(tmp_path):
    with pytest.raises(ConfigError):
        build_anvil_command(AnvilConfig(state_path=tmp_path / "s.json", command=()), StartupMode.FRESH)


def test_first_boot_creates_snapshot(tmp_path, fake_anvil):
    state = tmp_path / "data" / "anvil_state.json"
    config = AnvilConfig(state_path=state, command=fake_anvil)
    assert run_anvil(config) == 0
    assert state.is_file()
    snapshot = json.loads(state.read_text())
    assert snapshot["boots"] == 1
    assert snapshot["loaded_from"] is None


def test_restart_preserves_state(tmp_path, fake_anvil):
    state = tmp_path / "anvil_state.json"
    config = AnvilConfig(state_path=state, command=fake_anvil)
    assert run_anvil(config) == 0

    # Activity between restarts: a transfer funded another account
    snapshot = json.loads(state.read_text())
    snapshot["accounts"][OTHER_ACCOUNT] = "42"
    state.write_text(json.dumps(snapshot))

    assert run_anvil(config) == 0
    restored = json.loads(state.read_text())
    assert restored["boots"] == 2
    assert restored["loaded_from"] == str(state)
    assert restored["accounts"][OTHER_ACCOUNT] == "42"
    assert restored["accounts"][DEV_ACCOUNT] == "10000000000000000000000"


def test_nonzero_exit_code_propagated(tmp_path):
    config = AnvilConfig(
        state_path=tmp_path / "s.json",
        command=(sys.executable, "-c", "import sys; sys.exit(3)"),
    )
    assert run_anvil(config) == 3


def test_missing_binary(tmp_path):
    config = AnvilConfig(state_path=tmp_path / "s.json", command=(str(tmp_path / "no-such-anvil"),))
    with pytest.raises(ConfigError, match="not found"):
        run_anvil(config)


def test_cli_dry_run(tmp_path, monkeypatch, capsys):
    from ethnode_api.devnode.__main__ import main

    state = tmp_path / "anvil_state.json"
    state.write_text("{}")
    monkeypatch.setenv("ANVIL_STATE_PATH", str(state))
    monkeypatch.setenv("ETHEREUM_RPC_URL", "http://anvil:8545")
    monkeypatch.delenv("ANVIL_BIN", raising=False)
    monkeypatch.delenv("ANVIL_HOST", raising=False)
    assert main(["--dry-run", "--port", "9545", "--", "--block-time", "1"]) == 0
    out = capsys.readouterr().out.strip().splitlines()[-1]
    assert out.startswith("anvil --host 0.0.0.0 --port 9545")
    assert f"--load-state {state}" in out
    assert out.endswith("--block-time 1")


def test_cli_dry_run_fresh(tmp_path, monkeypatch, capsys):
    from ethnode_api.devnode.__main__ import main

    monkeypatch.setenv("ANVIL_STATE_PATH", str(tmp_path / "missing.json"))
    monkeypatch.delenv("ANVIL_BIN", raising=False)
    monkeypatch.delenv("ANVIL_HOST", raising=False)
    assert main(["--dry-run"]) == 0
    out = capsys.readouterr().out
    assert "--load-state" not in out
    assert "--dump-state" in out


# Node that only writes its snapshot when told to stop, like anvil --dump-state.
DUMP_ON_SIGTERM_NODE = textwrap.dedent(
    """
    import json
    import os
    import signal
    import sys
    import time

    args = sys.argv[1:]
    dump = args[args.index("--dump-state") + 1]

    def _dump(signum, frame):
        with open(dump, "w") as f:
            json.dump({"signal": signum, "own_session": os.getsid(0) == os.getpid()}, f)
        sys.exit(0)

    signal.signal(signal.SIGTERM, _dump)
    open(dump + ".ready", "w").close()
    while True:
        time.sleep(0.05)
    """
)

LAUNCHER = textwrap.dedent(
    """
    import sys
    from pathlib import Path

    from ethnode_api.devnode import AnvilConfig, run_anvil

    config = AnvilConfig(state_path=Path(sys.argv[1]), command=(sys.executable, sys.argv[2]))
    sys.exit(run_anvil(config))
    """
)


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals and sessions")
def test_sigterm_forwarded_so_node_dumps_state(tmp_path):
    node = tmp_path / "dump_on_sigterm.py"
    node.write_text(DUMP_ON_SIGTERM_NODE)
    state = tmp_path / "anvil_state.json"
    ready = Path(f"{state}.ready")

    repo_root = str(Path(__file__).resolve().parents[1])
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(p for p in (repo_root, env.get("PYTHONPATH")) if p)
    launcher = subprocess.Popen([sys.executable, "-c", LAUNCHER, str(state), str(node)], env=env)
    try:
        deadline = time.monotonic() + 15
        while not ready.exists():
            assert launcher.poll() is None, "launcher exited before the node started"
            assert time.monotonic() < deadline, "node never became ready"
            time.sleep(0.05)
        # Let the launcher finish installing its signal relay
        time.sleep(0.3)
        assert not state.exists()

        launcher.send_signal(signal.SIGTERM)
        assert launcher.wait(timeout=15) == 0
    finally:
        if launcher.poll() is None:
            launcher.kill()
            launcher.wait()

    snapshot = json.loads(state.read_text())
    assert snapshot["signal"] == signal.SIGTERM
    # Node runs in its own session, so a terminal Ctrl-C is not delivered twice
    assert snapshot["own_session"] is True
