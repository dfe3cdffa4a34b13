# lab/scheduler.py
"""
Lab Feed Poller

Polls the lab contract for a query id and logs the decoded aggregate:
  1. Every REFRESH_INTERVAL seconds by default
  2. Every FAST_REFRESH_INTERVAL seconds for FAST_REFRESH_WINDOW seconds
     after a submission, then back to the default cadence

Usage:
  python3 -m lab.scheduler <query_id> --type uint256:18          # run until Ctrl-C
  python3 -m lab.scheduler <query_id> --type uint256:18 --once   # single refresh
"""

import argparse
import logging
import threading
import time
from datetime import datetime, timezone

from lab import config
from lab.contract import connect
from lab.descriptors import FieldDescriptor
from lab.format import describe_report

log = logging.getLogger("lab-scheduler")


class RefreshSchedule:
    """Refresh cadence: default interval, overridden by a fast window after each submission."""

    def __init__(self, interval=config.REFRESH_INTERVAL, fast_interval=config.FAST_REFRESH_INTERVAL,
                 fast_window=config.FAST_REFRESH_WINDOW, clock=time.monotonic):
        self.interval = interval
        self.fast_interval = fast_interval
        self.fast_window = fast_window
        self.clock = clock
        self.fast_until = None

    def note_submission(self, now=None):
        now = self.clock() if now is None else now
        self.fast_until = now + self.fast_window

    def is_fast(self, now=None) -> bool:
        if self.fast_until is None:
            return False
        now = self.clock() if now is None else now
        if now >= self.fast_until:
            self.fast_until = None
            return False
        return True

    def current_interval(self, now=None) -> float:
        return self.fast_interval if self.is_fast(now) else self.interval


class FeedPoller:
    """Runs `refresh` on the schedule until `cancel` is set."""

    def __init__(self, refresh, schedule=None, cancel=None):
        self.refresh = refresh
        self.schedule = schedule or RefreshSchedule()
        self.cancel = cancel or threading.Event()
        self.last_refresh = None
        self.refresh_count = 0

    def run_once(self):
        try:
            result = self.refresh()
        except Exception as e:
            log.error(f"Refresh failed: {e}")
            return None
        self.last_refresh = datetime.now(timezone.utc)
        self.refresh_count += 1
        return result

    def run_loop(self, max_refreshes=None):
        log.info("=== Lab feed poller: starting loop ===")
        while not self.cancel.is_set():
            self.run_once()
            if max_refreshes is not None and self.refresh_count >= max_refreshes:
                break
            wait = self.schedule.current_interval()
            log.info(f"Sleeping {wait:.0f}s until next refresh...")
            if self.cancel.wait(wait):
                break
        log.info("Lab feed poller stopped")

    def stop(self):
        self.cancel.set()


def feed_snapshot(lab, query_id, descriptors, history_limit=config.HISTORY_LIMIT) -> dict:
    """Current aggregate, entry count and the latest reports, each decoded for display."""
    current = lab.current_aggregate(query_id)
    count = lab.value_count(query_id)
    current_row = describe_report(current.value, descriptors)
    current_row.update(timestamp=current.timestamp, power=current.power)
    history = []
    for report in lab.history(query_id, limit=history_limit, count=count):
        row = describe_report(report.value, descriptors)
        row.update(index=report.index, timestamp=report.timestamp, power=report.power)
        history.append(row)
    return {"count": count, "current": current_row, "history": history}


def make_refresh(lab, query_id, descriptors, history_limit=config.HISTORY_LIMIT):
    def refresh():
        snap = feed_snapshot(lab, query_id, descriptors, history_limit)
        cur = snap["current"]
        log.info(f"Entries: {snap['count']}  current: {cur['decoded'] or cur['error'] or 'none'} "
                 f"(ts={cur['timestamp']}, power={cur['power']})")
        return snap
    return refresh


def parse_type_arg(text: str) -> FieldDescriptor:
    """'uint256:18' -> FieldDescriptor(type='uint256', scale='18')."""
    type_, _, scale = text.partition(":")
    return FieldDescriptor(type=type_, scale=scale or None)


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )
    parser = argparse.ArgumentParser(description="Poll the lab contract data feed")
    parser.add_argument("query_id", help="0x-prefixed 32-byte query id")
    parser.add_argument("--type", action="append", default=[], dest="types",
                        help="value type, optionally with scale (uint256:18); repeat per field")
    parser.add_argument("--rpc-url", default=config.RPC_URL)
    parser.add_argument("--contract", default=config.CONTRACT_ADDRESS)
    parser.add_argument("--once", action="store_true", help="refresh once and exit")
    args = parser.parse_args()

    if not args.rpc_url:
        parser.error("set --rpc-url or LAB_RPC_URL")

    lab = connect(args.rpc_url, args.contract)
    log.info(f"Lab contract: {lab.address}")
    poller = FeedPoller(make_refresh(lab, args.query_id, [parse_type_arg(t) for t in args.types]))
    if args.once:
        poller.run_once()
    else:
        try:
            poller.run_loop()
        except KeyboardInterrupt:
            poller.stop()
