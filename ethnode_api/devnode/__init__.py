"""
Dev-node launcher — starts Anvil with chain-state persistence.

On first boot there is no snapshot, so the node starts fresh and dumps its
state to the snapshot path. On later boots it loads that snapshot and keeps
dumping to the same path, preserving accounts and deployed contracts across
container restarts.
"""

from ethnode_api.devnode.anvil import (
    AnvilConfig,
    StartupMode,
    build_anvil_command,
    detect_startup_mode,
    run_anvil,
)

__all__ = [
    "AnvilConfig",
    "StartupMode",
    "build_anvil_command",
    "detect_startup_mode",
    "run_anvil",
]
