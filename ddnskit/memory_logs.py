"""In-memory log buffer and JSON result bodies for the web interface."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

__all__ = ["MemoryLogs", "Result", "memory_logs", "return_error", "return_ok"]

_STATUS_OK = 200
_STATUS_INTERNAL_SERVER_ERROR = 500

_HTML_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def _to_json(value: Any) -> str:
    text = json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    for raw, escaped in _HTML_ESCAPES.items():
        text = text.replace(raw, escaped)
    return text


@dataclass
class MemoryLogs:
    """Keeps the most recent ``max_num`` log writes; usable as a logging stream."""

    max_num: int = 50
    logs: list[str] = field(default_factory=list)

    def write(self, text: str) -> int:
        """Append ``text``, drop the oldest entries beyond ``max_num``, return its length."""
        self.logs.append(text)
        if len(self.logs) > self.max_num:
            del self.logs[: len(self.logs) - self.max_num]
        return len(text)

    def to_json(self) -> str:
        """Return the kept entries as a JSON array."""
        return _to_json(self.logs)

    def clear(self) -> None:
        """Drop every kept entry."""
        self.logs.clear()


# Shared buffer; attach with logging.StreamHandler(memory_logs).
memory_logs = MemoryLogs()


@dataclass
class Result:
    """Status code, message and payload sent back to the web page."""

    code: int
    msg: str
    data: Any = None

    def to_json(self) -> str:
        """Return the result as one line of JSON followed by a newline."""
        return _to_json({"Code": self.code, "Msg": self.msg, "Data": self.data}) + "\n"


def return_error(msg: str) -> str:
    """Return the JSON body of a failed result carrying ``msg``."""
    return Result(_STATUS_INTERNAL_SERVER_ERROR, msg).to_json()


def return_ok(msg: str, data: Any) -> str:
    """Return the JSON body of a successful result carrying ``msg`` and ``data``."""
    return Result(_STATUS_OK, msg, data).to_json()