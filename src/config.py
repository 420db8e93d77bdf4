"""Central configuration -- all settings driven by environment variables.

With no Bonfires variables set the graph endpoint serves the bundled mock
graph, so a fresh checkout works without network access.

Scripts call ``load_dotenv()`` before importing this module, so a local
``.env`` file is honoured the same way as real environment variables.
"""

import os

# ---------------------------------------------------------------------------
# Upstream graph (Bonfires "delve" API)
# ---------------------------------------------------------------------------
# All three of URL, bonfire id and agent id must be set for the live
# loader; otherwise the mock graph is used.

BONFIRES_API_URL = os.environ.get("BONFIRES_API_URL", "")
BONFIRES_BONFIRE_ID = os.environ.get("BONFIRES_BONFIRE_ID", "")
BONFIRES_AGENT_ID = os.environ.get("BONFIRES_AGENT_ID", "")
BONFIRES_NUM_RESULTS = int(os.environ.get("BONFIRES_NUM_RESULTS", "30"))
BONFIRES_TIMEOUT = float(os.environ.get("BONFIRES_TIMEOUT", "30"))

# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------
# Sessions idle longer than this are purged on the next store access.

SESSION_EXPIRY_SECONDS = float(os.environ.get("SESSION_EXPIRY_SECONDS", str(30 * 60)))

# The viewer polls faster than the remote so remote-issued selections
# show up promptly on the big screen.
VIEWER_POLL_INTERVAL = float(os.environ.get("VIEWER_POLL_INTERVAL", "0.5"))
REMOTE_POLL_INTERVAL = float(os.environ.get("REMOTE_POLL_INTERVAL", "2.0"))

# Remote controllers and the CLI talk to the API here.
API_BASE_URL = os.environ.get("API_BASE_URL", "http://localhost:8000")

# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------
# FORCE_SEED unset keeps the historical unseeded initial placement.

_force_seed = os.environ.get("FORCE_SEED", "")
FORCE_SEED: int | None = int(_force_seed) if _force_seed else None
FORCE_TICKS = int(os.environ.get("FORCE_TICKS", "300"))

# Frame pacing for idle rotation and force reheats
FRAME_INTERVAL = float(os.environ.get("FRAME_INTERVAL", str(1 / 60)))

# Auto-play pauses this long after a manual selection
MANUAL_PAUSE_SECONDS = float(os.environ.get("MANUAL_PAUSE_SECONDS", "10"))


def bonfires_configured() -> bool:
    """True when the live Bonfires loader has everything it needs."""
    return bool(BONFIRES_API_URL and BONFIRES_BONFIRE_ID and BONFIRES_AGENT_ID)
