"""Structured Logging — ledger events as structured log records.

Invariants:
    - Ledger facts travel on the record as one `ledger` payload built by ledger_fields()
      (user_id, amount, balance, holdings, outcome); None values are dropped
    - JSON lines carry the payload under "ledger"; text lines append it as key=value
    - Request facts (error_code, path) stay top-level next to the message
    - setup_logging is idempotent: a second lifespan replaces the handler, never stacks it

Design Decisions:
    - stdlib logging + hand-written formatters, no third-party log library
    - Payload built at the call site so executor and error handlers log the same shape
"""

import json
import logging
from datetime import datetime, timezone

from axie_ledger.core.domain_types import Account

LEDGER_KEY = "ledger"
REQUEST_FIELDS = ("error_code", "path")


def ledger_fields(
    user_id: str | None = None,
    amount: int | None = None,
    account: Account | None = None,
    outcome: str | None = None,
) -> dict:
    """Build the `extra=` mapping for a ledger log record."""
    payload = {"user_id": user_id, "amount": amount, "outcome": outcome}
    if account is not None:
        payload.update(
            user_id=account.user_id,
            balance=account.balance,
            holdings=account.holdings,
        )
    return {LEDGER_KEY: {k: v for k, v in payload.items() if v is not None}}


def _ledger_payload(record: logging.LogRecord) -> dict:
    payload = record.__dict__.get(LEDGER_KEY)
    return payload if isinstance(payload, dict) else {}


class JSONFormatter(logging.Formatter):
    """One JSON object per line; ledger facts nested under "ledger"."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in REQUEST_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        ledger = _ledger_payload(record)
        if ledger:
            log[LEDGER_KEY] = ledger
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


class LedgerTextFormatter(logging.Formatter):
    """Human-readable lines for development: message followed by key=value pairs."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        pairs = [
            f"{k}={v}" for k, v in _ledger_payload(record).items()
        ] + [
            f"{k}={record.__dict__[k]}" for k in REQUEST_FIELDS
            if record.__dict__.get(k) is not None
        ]
        if not pairs:
            return line
        head, sep, tail = line.partition("\n")
        return f"{head} [{' '.join(pairs)}]{sep}{tail}"


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Install the ledger handler on the root logger (replacing a previous one)."""
    for existing in list(logging.root.handlers):
        if getattr(existing, "_axie_ledger", False):
            logging.root.removeHandler(existing)
    handler = logging.StreamHandler()
    handler._axie_ledger = True
    handler.setFormatter(JSONFormatter() if fmt == "json" else LedgerTextFormatter())
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
