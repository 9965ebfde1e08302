"""
EtherMom Bot Configuration.
Edit these values according to your setup.

Note: WALLET_ADDRESS, BOT_TOKEN, CHAT_ID, IFTTT_KEY and IFTTT_EVENT are stored
in the .env file, not here. See .env.example for the template.
"""

# ===========================================================================
# JOB
# ===========================================================================

# Set to False to make the job exit without checking anything
ENABLED = True

# ===========================================================================
# API
# ===========================================================================

# Ethermine.org API base URL
API_BASE_URL = "https://api.ethermine.org"

# Timeout for every outgoing HTTP request (pool API and messaging)
REQUEST_TIMEOUT_SECONDS = 15

# ===========================================================================
# ALERTS
# ===========================================================================

# What to compare against the expected hashrate:
# - "total":      the wallet-wide reported hashrate only
# - "individual": every worker against its own expected hashrate
# - "mix":        the wallet-wide hashrate; workers are only checked (to find
#                 the culprit) when the total is below expectation
MODE = "total"

# Expected reported hashrate in H/s. Used for the wallet-wide check and as the
# default for workers not listed in WORKER_EXPECTED_HASH. Must be > 0.
EXPECTED_HASH = 0

# Per-worker expected hashrate in H/s, keyed by the worker name shown by the
# pool. Workers not listed here fall back to EXPECTED_HASH.
#
# Example:
#   WORKER_EXPECTED_HASH = {
#       "rig1": 180_000_000,
#       "rig2": 95_000_000,
#   }
WORKER_EXPECTED_HASH = {}

# Alert when stale shares exceed STALE_TOLERANCE_PERCENT of valid shares.
# The stale alert is sent on every run while the condition holds.
STALE_CHECK = False
STALE_TOLERANCE_PERCENT = 10

# False: alert once when a problem appears and once when it is resolved.
# True:  repeat the alert on every run until the problem is resolved.
CONTINUOUS_REPORT = False

# ===========================================================================
# MESSAGING
# ===========================================================================

# Channel used to deliver alerts: "telegram" or "ifttt"
MESSAGING = "telegram"

# ===========================================================================
# LOGGING
# ===========================================================================

# Log level for the bot. Valid values: "DEBUG", "INFO", "WARNING", "ERROR".
# - DEBUG:   Everything, very verbose (useful for troubleshooting)
# - INFO:    Normal operations + warnings + errors
# - WARNING: Only important events and errors (default, recommended)
# - ERROR:   Only errors
LOG_LEVEL = "WARNING"
