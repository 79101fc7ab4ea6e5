"""
Dev-node entrypoint: python -m ethnode_api.devnode [options] [-- extra anvil args]

Env: ANVIL_STATE_PATH, ANVIL_HOST, ANVIL_PORT, ANVIL_GAS_LIMIT, ANVIL_BIN.
CLI options override the environment.
"""

from __future__ import annotations

import argparse
import dataclasses
import shlex
import sys
from pathlib import Path

from ethnode_api.config import get_settings
from ethnode_api.core.exceptions import ConfigError
from ethnode_api.devnode.anvil import AnvilConfig, build_anvil_command, detect_startup_mode, run_anvil
from ethnode_api.ethnode_logging import get_logger

logger = get_logger("devnode")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Start Anvil, restoring chain state from the snapshot when present.")
    p.add_argument("--state-path", type=Path, default=None, help="Snapshot file (default: ANVIL_STATE_PATH)")
    p.add_argument("--host", default=None, help="Bind host (default: ANVIL_HOST)")
    p.add_argument("--port", type=int, default=None, help="Bind port (default: ANVIL_PORT)")
    p.add_argument("--gas-limit", type=int, default=None, help="Block gas limit (default: ANVIL_GAS_LIMIT)")
    p.add_argument("--dry-run", action="store_true", help="Print the command that would run and exit")
    p.add_argument("extra", nargs=argparse.REMAINDER, help="Extra arguments passed to anvil after --")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    try:
        config = AnvilConfig.from_settings(get_settings())
    except ConfigError as e:
        logger.error("devnode_config_error", error=str(e))
        return 2

    overrides = {
        "state_path": args.state_path,
        "host": args.host,
        "port": args.port,
        "gas_limit": args.gas_limit,
    }
    extra = list(args.extra or [])
    if extra and extra[0] == "--":
        extra = extra[1:]
    config = dataclasses.replace(
        config,
        extra_args=tuple(extra),
        **{k: v for k, v in overrides.items() if v is not None},
    )

    if args.dry_run:
        mode = detect_startup_mode(config.state_path)
        print(shlex.join(build_anvil_command(config, mode)))
        return 0

    try:
        return run_anvil(config)
    except ConfigError as e:
        logger.error("devnode_start_failed", error=str(e))
        return 127


if __name__ == "__main__":
    sys.exit(main())
