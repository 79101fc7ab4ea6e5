"""
Main entrypoint: FastAPI balance server in the main thread.

Env: ETHEREUM_RPC_URL, OTEL_EXPORTER_OTLP_ENDPOINT, API_HOST, API_PORT, LOG_LEVEL, etc.

Equivalent: python -m ethnode_api
Dev-node:   python -m ethnode_api.devnode
"""

import sys

from ethnode_api.__main__ import main

if __name__ == "__main__":
    sys.exit(main())
