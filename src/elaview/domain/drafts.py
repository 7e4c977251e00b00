"""Campaign wizard auto-save.

``DraftCache`` is a write-through cache scoped to one form session. Progress
is written on every change, offered back on the next visit, and either
restored or discarded explicitly. The backing store is injected: anything
with ``get``/``set``/``delete`` over string keys and values.

Stored payload::

    {"formData": {...}, "currentStep": 2, "timestamp": "2026-01-01T00:00:00+00:00"}
"""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass
from datetime import date
from typing import Any, Protocol

from elaview.infra.time import utc_now
from elaview.observability.logging import get_logger

logger = get_logger(__name__)

DATE_FIELDS = ("start_date", "end_date")

# Defaults filled in on restore for payloads written by older wizard versions.
FORM_DEFAULTS: dict[str, Any] = {
    "content_type": [],
    "media_files": [],
    "media_dimensions": {"width": "", "height": ""},
}


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemoryStore:
    """Dict-backed ``KeyValueStore``."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


@dataclass(frozen=True)
class RestoredDraft:
    form_data: dict[str, Any]
    current_step: int
    saved_at: str | None


def is_meaningful(form_data: dict[str, Any], current_step: int) -> bool:
    """Worth saving: something typed in, or past the first step."""
    return bool(form_data.get("name") or form_data.get("brand_name") or current_step > 1)


def _encode(value: Any) -> Any:
    if isinstance(value, date):
        return value.isoformat()
    raise TypeError(f"Unserializable draft value: {type(value).__name__}")


class DraftCache:
    def __init__(self, store: KeyValueStore, scope: str) -> None:
        self.store = store
        self.scope = scope

    @property
    def key(self) -> str:
        return f"{self.scope}:form_data"

    def save(self, form_data: dict[str, Any], current_step: int) -> bool:
        """Write progress through to the store.

        Returns False when there was nothing worth saving or the write
        failed; failures are logged and never interrupt the wizard.
        """
        if not is_meaningful(form_data, current_step):
            return False
        try:
            payload = json.dumps(
                {
                    "formData": form_data,
                    "currentStep": current_step,
                    "timestamp": utc_now().isoformat(),
                },
                default=_encode,
            )
            self.store.set(self.key, payload)
        except Exception:
            logger.error(
                "failed to save form draft",
                exc_info=True,
                extra={"extra_fields": {"scope": self.scope}},
            )
            return False
        return True

    def _load(self) -> dict[str, Any] | None:
        raw = self.store.get(self.key)
        if raw is None:
            return None
        try:
            data = json.loads(raw)
            if not isinstance(data, dict) or not isinstance(data.get("formData"), dict):
                raise ValueError("malformed draft payload")
        except ValueError:
            logger.warning(
                "discarding corrupt form draft",
                extra={"extra_fields": {"scope": self.scope}},
            )
            self.store.delete(self.key)
            return None
        return data

    def has_saved(self) -> bool:
        data = self._load()
        if data is None:
            return False
        try:
            current_step = int(data.get("currentStep") or 1)
        except (TypeError, ValueError):
            current_step = 1
        return is_meaningful(data["formData"], current_step)

    def restore(self) -> RestoredDraft | None:
        data = self._load()
        if data is None:
            return None

        form_data = dict(data["formData"])
        try:
            for name in DATE_FIELDS:
                if form_data.get(name):
                    form_data[name] = date.fromisoformat(str(form_data[name])[:10])
            current_step = int(data.get("currentStep") or 1)
        except (TypeError, ValueError):
            logger.warning(
                "discarding unrestorable form draft",
                extra={"extra_fields": {"scope": self.scope}},
            )
            self.store.delete(self.key)
            return None

        for name, default in FORM_DEFAULTS.items():
            if not form_data.get(name):
                form_data[name] = copy.deepcopy(default)

        return RestoredDraft(
            form_data=form_data,
            current_step=current_step,
            saved_at=data.get("timestamp"),
        )

    def discard(self) -> None:
        self.store.delete(self.key)
