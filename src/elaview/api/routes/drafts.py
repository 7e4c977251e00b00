"""Campaign wizard draft endpoints.

Provides:
- GET /drafts/{scope}: saved progress (404 when nothing worth restoring)
- PUT /drafts/{scope}: write-through save
- DELETE /drafts/{scope}: discard
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Response
from pydantic import BaseModel, Field

from elaview.domain.drafts import DraftCache, KeyValueStore

router = APIRouter(prefix="/drafts", tags=["drafts"])


class SaveDraftRequest(BaseModel):
    form_data: dict[str, Any]
    current_step: int = Field(default=1, ge=1)


def _get_store() -> KeyValueStore:
    """Backing store (allows override in tests)."""
    from elaview.infra.repositories.drafts_repository import PostgresDraftStore

    return PostgresDraftStore()


@router.get("/{scope}")
def get_draft(scope: str) -> dict:
    cache = DraftCache(_get_store(), scope)
    restored = cache.restore() if cache.has_saved() else None
    if restored is None:
        raise HTTPException(status_code=404, detail="No saved draft")
    return {
        "form_data": restored.form_data,
        "current_step": restored.current_step,
        "saved_at": restored.saved_at,
    }


@router.put("/{scope}")
def put_draft(scope: str, body: SaveDraftRequest) -> dict:
    saved = DraftCache(_get_store(), scope).save(body.form_data, body.current_step)
    return {"saved": saved}


@router.delete("/{scope}", status_code=204)
def delete_draft(scope: str) -> Response:
    DraftCache(_get_store(), scope).discard()
    return Response(status_code=204)
