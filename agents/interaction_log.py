"""JSON trace of a single research run."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional
from uuid import uuid4

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def make_serializable(data: Any) -> Any:
    try:
        json.dumps(data)
        return data
    except TypeError:
        if isinstance(data, dict):
            return {str(key): make_serializable(value) for key, value in data.items()}
        if isinstance(data, list):
            return [make_serializable(item) for item in data]
        if isinstance(data, (set, tuple)):
            return [make_serializable(item) for item in data]
        value = getattr(data, "value", None)
        if isinstance(value, str):
            return value
        return repr(data)


class InteractionLog:
    """Collects workflow steps and writes them to ``log_dir`` when the run ends.

    A disabled log accepts every call and writes nothing.
    """

    def __init__(self, log_dir: Path | str = "logs", *, enabled: bool = True) -> None:
        self._log_dir = Path(log_dir)
        self._enabled = enabled
        self._current: Optional[Dict[str, Any]] = None
        self._path: Optional[Path] = None

    @property
    def path(self) -> Optional[Path]:
        return self._path

    def start(self, topic: str, plan_name: str) -> None:
        if not self._enabled:
            return
        try:
            self._log_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.warning("Unable to create log directory %s: %s", self._log_dir, exc)
        timestamp = _utc_now().strftime("%Y%m%d_%H%M%S")
        self._path = self._log_dir / f"research_{timestamp}_{uuid4().hex[:8]}.json"
        self._current = {
            "timestamp": timestamp,
            "topic": topic,
            "plan_name": plan_name,
            "steps": [],
        }

    def record(self, step: str, context: Dict[str, Any]) -> None:
        if not self._current:
            return
        entry = {
            "step": step,
            "timestamp": _utc_now().isoformat(timespec="seconds").replace("+00:00", "Z"),
            "context": make_serializable(context),
        }
        self._current["steps"].append(entry)

    def finish(self, *, status: str, reason: str = "", error: Optional[str] = None) -> None:
        if not self._current or not self._path:
            return
        self._current["status"] = status
        if reason:
            self._current["reason"] = reason
        if error:
            self._current["error"] = error
        try:
            serialized = json.dumps(self._current, indent=2, ensure_ascii=False)
            self._path.write_text(serialized, encoding="utf-8")
            logger.info("Wrote interaction log to %s", self._path)
        except OSError as exc:
            logger.warning("Failed to write interaction log %s: %s", self._path, exc)
        finally:
            self._current = None
