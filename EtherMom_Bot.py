#!/usr/bin/env python3
"""
EtherMom Bot.
Monitors an Ethereum wallet on ethermine.org and alerts the operator through
Telegram or IFTTT when the reported hashrate drops below expectation, and
again once it is back to normal. Designed to run periodically via cron.
"""

import logging
import os
import sqlite3
from html import escape as html_escape
from logging.handlers import RotatingFileHandler
from pathlib import Path

from dotenv import load_dotenv

import config
import database as db
from errors import ConfigError, DeliveryError, EtherMomError, JobDisabled
from ethermine import EthermineSource
from evaluator import convert_to_mhs, evaluate, global_below
from messaging import build_sink
from models import GLOBAL_KEY, Mode, ProblemSet, ThresholdSet

# Load environment variables
load_dotenv()

# Paths
SCRIPT_DIR = Path(__file__).parent
LOGS_DIR = SCRIPT_DIR / "Logs"
LOG_FILE = LOGS_DIR / "EtherMom_Bot.log"

logger = logging.getLogger("EtherMom")

PROBLEM_HEADER = "Reported hashrate is lower than expected for following worker(s)."
RECOVERY_MESSAGE = "Previously failed workers are back to normal."


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

def setup_logging(level: str = config.LOG_LEVEL) -> None:
    """Attach the rotating log file handler to the bot logger."""
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    if logger.handlers:
        return

    formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
    try:
        LOGS_DIR.mkdir(exist_ok=True)
        handler = RotatingFileHandler(
            str(LOG_FILE), maxBytes=1_000_000, backupCount=2, encoding="utf-8"
        )
    except OSError as e:
        # No writable log directory: keep logging, on stderr
        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.error("Could not open log file %s, logging to stderr: %s", LOG_FILE, e)
        return

    handler.setFormatter(formatter)
    logger.addHandler(handler)


# ===========================================================================
# Configuration
# ===========================================================================

def load_thresholds(cfg=config) -> ThresholdSet:
    """Build the threshold set from config.py (or any object shaped like it)."""
    if not cfg.ENABLED:
        raise JobDisabled("Job is disabled in config.py")

    try:
        worker_expected = {
            str(k): float(v) for k, v in (cfg.WORKER_EXPECTED_HASH or {}).items()
        }
        return ThresholdSet(
            mode=Mode.parse(cfg.MODE),
            expected_hash=float(cfg.EXPECTED_HASH or 0),
            worker_expected_hash=worker_expected,
            stale_check=bool(cfg.STALE_CHECK),
            stale_tolerance=float(cfg.STALE_TOLERANCE_PERCENT),
            continuous_report=bool(cfg.CONTINUOUS_REPORT),
        )
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value in config.py: {e}") from e


# ===========================================================================
# Report management
# ===========================================================================

def format_problems(problems: ProblemSet) -> str:
    """Build the alert text for a non-empty problem set."""
    if list(problems) == [GLOBAL_KEY]:
        return (
            "Reported hashrate is lower than expected "
            f"@{convert_to_mhs(problems[GLOBAL_KEY])}MH/s."
        )

    lines = [PROBLEM_HEADER]
    for worker, severity in problems.items():
        if severity < 0:
            lines.append(f"{html_escape(worker)} is offline")
        else:
            lines.append(f"{html_escape(worker)} @{convert_to_mhs(severity)}MH/s")
    return "\n".join(lines)


def manage_report(
    problems: ProblemSet,
    store: db.AlertStateStore,
    sink,
    continuous_report: bool = False,
) -> str | None:
    """
    Decide whether this cycle's problems are worth a message.

    The first cycle with problems sends an alert and marks it outstanding.
    While it stays outstanding, repeats are only sent with continuous
    reporting. The first cycle without problems afterwards sends a recovery
    message and clears the flag. The flag is only written after the message
    went out, so a failed delivery is attempted again on the next run.

    Returns the message sent, if any.
    """
    outstanding = store.is_outstanding()

    if problems:
        if outstanding and not continuous_report:
            logger.info("Problem already reported, skipping: %s", list(problems))
            return None
        message = format_problems(problems)
        sink.send(message)
        store.mark_outstanding()
        logger.warning("Alert sent: %s", message[:80].replace("\n", " "))
        return message

    if outstanding:
        sink.send(RECOVERY_MESSAGE)
        store.clear()
        logger.warning("Recovery sent")
        return RECOVERY_MESSAGE

    return None


def run_cycle(
    thresholds: ThresholdSet,
    source,
    sink,
    store: db.AlertStateStore,
) -> None:
    """Fetch, evaluate and report once."""
    mode = thresholds.mode

    stats = None
    if mode is not Mode.INDIVIDUAL or thresholds.stale_check:
        stats = source.fetch_global()

    workers = None
    if mode is Mode.INDIVIDUAL or (
        mode is Mode.MIX and global_below(stats, thresholds)
    ):
        workers = source.fetch_workers()

    problems, stale_message = evaluate(mode, stats, workers, thresholds)

    if stale_message:
        try:
            sink.send(stale_message)
            logger.warning("Stale share alert sent")
        except DeliveryError as e:
            logger.error("Could not deliver stale share alert: %s", e)

    manage_report(problems, store, sink, thresholds.continuous_report)


# ===========================================================================
# Main
# ===========================================================================

def main() -> None:
    """Main entry point for the bot. Always exits normally; errors are logged."""
    setup_logging()
    logger.info("Job started.")

    try:
        thresholds = load_thresholds()

        wallet = os.getenv("WALLET_ADDRESS")
        if not wallet:
            raise ConfigError("WALLET_ADDRESS not configured in .env")

        sink = build_sink(
            config.MESSAGING,
            bot_token=os.getenv("BOT_TOKEN"),
            chat_id=os.getenv("CHAT_ID"),
            ifttt_key=os.getenv("IFTTT_KEY"),
            ifttt_event=os.getenv("IFTTT_EVENT"),
        )

        # Initialize database. A broken database only costs the dedup state.
        try:
            db.init_db()
        except sqlite3.Error as e:
            logger.error("Could not initialise database: %s", e)

        run_cycle(
            thresholds,
            EthermineSource(wallet),
            sink,
            db.SQLiteAlertStateStore(),
        )
    except JobDisabled as e:
        logger.info("%s", e)
    except EtherMomError as e:
        logger.error("%s: %s", type(e).__name__, e)
    except Exception:
        logger.exception("Unexpected error during monitoring cycle")
    finally:
        logger.info("Job ended.")


if __name__ == "__main__":
    main()
