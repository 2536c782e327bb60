from __future__ import annotations
"""
Tagged console logging shared by the proxy modules.
"""

from datetime import datetime

LEVEL_PREFIXES = {
    "INFO": "ℹ️ ",
    "SUCCESS": "✅",
    "ERROR": "❌",
    "WARNING": "⚠️ ",
    "PROGRESS": "⏳"
}


def log_event(scope: str, message: str, level: str = "INFO"):
    """Log with timestamp and scope context"""
    timestamp = datetime.now().strftime("%H:%M:%S")
    prefix = LEVEL_PREFIXES.get(level, "")
    print(f"[{timestamp}] [{scope}] {prefix} {message}")


def mask_token(value: str | None, length: int = 8) -> str:
    """Short, non-sensitive preview of a bearer token for logs."""
    if not value:
        return "<none>"
    return value[:length] + ("..." if len(value) > length else "")
