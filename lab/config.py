# lab/config.py
"""
Runtime configuration, read once from the environment.
"""

import os

# ── Chain ─────────────────────────────────────────────────────────────────────

RPC_URL = os.environ.get("LAB_RPC_URL", "")
CONTRACT_ADDRESS = os.environ.get("LAB_CONTRACT_ADDRESS", "")  # empty -> per-chain default
PRIVATE_KEY = os.environ.get("LAB_PRIVATE_KEY", "")            # empty -> submit disabled
TX_TIMEOUT = int(os.environ.get("LAB_TX_TIMEOUT", "120"))

# ── Feed polling ──────────────────────────────────────────────────────────────

REFRESH_INTERVAL = float(os.environ.get("LAB_REFRESH_INTERVAL", "30"))
FAST_REFRESH_INTERVAL = float(os.environ.get("LAB_FAST_REFRESH_INTERVAL", "5"))
FAST_REFRESH_WINDOW = float(os.environ.get("LAB_FAST_REFRESH_WINDOW", "120"))
HISTORY_LIMIT = int(os.environ.get("LAB_HISTORY_LIMIT", "5"))

# ── Service ───────────────────────────────────────────────────────────────────

PORT = int(os.environ.get("LAB_PORT", "9200"))
SERVER_URL = os.environ.get("LAB_SERVER_URL", f"http://127.0.0.1:{PORT}")
