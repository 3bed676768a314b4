# backend/notevault/api/routes/notes.py
from __future__ import annotations

import uuid
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from notevault.api.deps.auth import get_identity
from notevault.api.deps.permissions import require_note_action
from notevault.auth.identity import IdentityContext
from notevault.auth.permissions import Action
from notevault.crud import notes as notes_crud
from notevault.db.session import get_db
from notevault.models.tenant import Tenant
from notevault.schemas.note import NoteCreate, NoteOut, NoteUpdate

router = APIRouter(prefix="/notes", tags=["notes"])


@router.get("", response_model=List[NoteOut])
async def list_notes(
    db: AsyncSession = Depends(get_db),
    tenant: Tenant = Depends(require_note_action(Action.NOTES_LIST)),
):
    return await notes_crud.list_notes(db, tenant.id)


@router.post("", response_model=NoteOut, status_code=status.HTTP_201_CREATED)
async def create_note(
    payload: NoteCreate,
    db: AsyncSession = Depends(get_db),
    identity: IdentityContext = Depends(get_identity),
    tenant: Tenant = Depends(require_note_action(Action.NOTES_CREATE)),
):
    """
    Free plan: at most 3 notes per tenant (403 quota_exceeded beyond that).
    """
    return await notes_crud.create_note(
        db,
        tenant=tenant,
        owner_id=uuid.UUID(identity.user_id),
        title=payload.title,
        content=payload.content,
    )


@router.get("/{note_id}", response_model=NoteOut)
async def get_note(
    note_id: str,
    db: AsyncSession = Depends(get_db),
    tenant: Tenant = Depends(require_note_action(Action.NOTES_READ)),
):
    return await notes_crud.get_note(db, tenant.id, note_id)


@router.put("/{note_id}", response_model=NoteOut)
async def update_note(
    note_id: str,
    payload: NoteUpdate,
    db: AsyncSession = Depends(get_db),
    tenant: Tenant = Depends(require_note_action(Action.NOTES_UPDATE)),
):
    return await notes_crud.update_note(
        db,
        tenant.id,
        note_id,
        title=payload.title,
        content=payload.content,
    )


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(
    note_id: str,
    db: AsyncSession = Depends(get_db),
    tenant: Tenant = Depends(require_note_action(Action.NOTES_DELETE)),
):
    await notes_crud.delete_note(db, tenant.id, note_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
