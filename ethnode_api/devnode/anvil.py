"""
Anvil startup with snapshot persistence.

The startup mode is decided once, before the node starts, from whether the
snapshot file exists. It never changes for the lifetime of the process.
"""

from __future__ import annotations

import signal
import subprocess
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from ethnode_api.config.env import DEFAULT_GAS_LIMIT, DEFAULT_STATE_PATH
from ethnode_api.core.exceptions import ConfigError
from ethnode_api.ethnode_logging import get_logger

logger = get_logger(__name__)

_FORWARDED_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class StartupMode(str, Enum):
    FRESH = "fresh"  # no snapshot: start empty, dump state
    RESTORED = "restored"  # snapshot present: load it, keep dumping to it


@dataclass(frozen=True)
class AnvilConfig:
    """How to launch the dev-node."""

    state_path: Path = Path(DEFAULT_STATE_PATH)
    host: str = "0.0.0.0"
    port: int = 8545
    gas_limit: int = DEFAULT_GAS_LIMIT
    command: tuple[str, ...] = ("anvil",)
    extra_args: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_settings(cls, settings: Any) -> "AnvilConfig":
        return cls(
            state_path=Path(settings.anvil_state_path),
            host=settings.anvil_host,
            port=settings.anvil_port,
            gas_limit=settings.anvil_gas_limit,
            command=tuple(settings.anvil_command),
        )


def detect_startup_mode(state_path: str | Path) -> StartupMode:
    """RESTORED iff the snapshot is an existing regular file."""
    return StartupMode.RESTORED if Path(state_path).is_file() else StartupMode.FRESH


def build_anvil_command(config: AnvilConfig, mode: StartupMode) -> list[str]:
    """
    Command line for the node. Both modes dump to the snapshot path;
    only RESTORED loads from it.
    """
    if not config.command:
        raise ConfigError("anvil command must be non-empty")
    state = str(config.state_path)
    cmd = [
        *config.command,
        "--host", config.host,
        "--port", str(config.port),
        "--dump-state", state,
    ]
    if mode is StartupMode.RESTORED:
        cmd += ["--load-state", state]
    cmd += ["--gas-limit", str(config.gas_limit)]
    cmd += list(config.extra_args)
    return cmd


def _forward_signals(proc: subprocess.Popen) -> dict[int, Any]:
    """Relay SIGINT/SIGTERM to the node so it can write its final state dump."""

    def _relay(signum: int, frame: Any) -> None:
        logger.info("anvil_signal_forwarded", signal=signal.Signals(signum).name, pid=proc.pid)
        if proc.poll() is None:
            proc.send_signal(signum)

    previous: dict[int, Any] = {}
    for sig in _FORWARDED_SIGNALS:
        try:
            previous[sig] = signal.signal(sig, _relay)
        except (ValueError, OSError):
            # Signal only valid in main thread / not supported on this platform
            pass
    return previous


def _restore_signals(previous: dict[int, Any]) -> None:
    for sig, handler in previous.items():
        signal.signal(sig, handler)


def run_anvil(config: AnvilConfig) -> int:
    """
    Start the node in the mode chosen by the snapshot check and block until it exits.

    Returns:
        The node's exit code.

    Raises:
        ConfigError: the launch command cannot be executed.
    """
    mode = detect_startup_mode(config.state_path)
    config.state_path.parent.mkdir(parents=True, exist_ok=True)
    cmd = build_anvil_command(config, mode)
    logger.info(
        "anvil_starting",
        mode=mode.value,
        state_path=str(config.state_path),
        command=cmd,
    )
    try:
        # Own session: terminal Ctrl-C reaches the node once, through _relay
        proc = subprocess.Popen(cmd, start_new_session=True)
    except FileNotFoundError as e:
        logger.error("anvil_not_found", command=cmd[0])
        raise ConfigError(f"cannot execute {cmd[0]!r}: not found") from e

    previous = _forward_signals(proc)
    try:
        exit_code = proc.wait()
    finally:
        _restore_signals(previous)

    logger.info(
        "anvil_exited",
        exit_code=exit_code,
        mode=mode.value,
        state_file_exists=config.state_path.is_file(),
    )
    return exit_code
