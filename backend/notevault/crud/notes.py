# notevault/crud/notes.py
"""
Tenant-scoped note storage.

Every function takes the caller's resolved tenant id and filters on it; a note
of another tenant is indistinguishable from a missing one (NoteNotFound).
"""
from __future__ import annotations

import uuid
from typing import Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from notevault.core.errors import NoteNotFound, ValidationError
from notevault.core.logging import get_logger
from notevault.crud.tenant_quota import check_create_allowed, release_note_slot, reserve_note_slot
from notevault.models.note import Note
from notevault.models.tenant import Tenant

log = get_logger(__name__)


def _parse_note_id(note_id: uuid.UUID | str) -> uuid.UUID:
    if isinstance(note_id, uuid.UUID):
        return note_id
    try:
        return uuid.UUID(str(note_id))
    except ValueError:
        raise NoteNotFound()


async def create_note(
    db: AsyncSession,
    *,
    tenant: Tenant,
    owner_id: uuid.UUID,
    title: Optional[str],
    content: Optional[str] = None,
) -> Note:
    if not title or not title.strip():
        raise ValidationError("title required")

    # fast rejection without taking the tenant row lock
    await check_create_allowed(db, tenant)

    try:
        await reserve_note_slot(db, tenant.id)
        note = Note(
            title=title,
            content=content or "",
            tenant_id=tenant.id,
            owner_id=owner_id,
        )
        db.add(note)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    await db.refresh(note)
    log.info("note_created", tenant=tenant.slug, note_id=str(note.id), owner_id=str(owner_id))
    return note


async def list_notes(db: AsyncSession, tenant_id: uuid.UUID) -> Sequence[Note]:
    """
    Most recent first. Returns a fresh list on every call.
    """
    stmt = (
        select(Note)
        .where(Note.tenant_id == tenant_id)
        .order_by(Note.created_at.desc(), Note.id.desc())
    )
    res = await db.execute(stmt)
    return list(res.scalars().all())


async def get_note(db: AsyncSession, tenant_id: uuid.UUID, note_id: uuid.UUID | str) -> Note:
    nid = _parse_note_id(note_id)
    stmt = select(Note).where(Note.id == nid, Note.tenant_id == tenant_id)
    note = (await db.execute(stmt)).scalar_one_or_none()
    if note is None:
        raise NoteNotFound()
    return note


async def update_note(
    db: AsyncSession,
    tenant_id: uuid.UUID,
    note_id: uuid.UUID | str,
    *,
    title: Optional[str] = None,
    content: Optional[str] = None,
) -> Note:
    """
    Merge update: None or empty values keep the stored value.
    """
    note = await get_note(db, tenant_id, note_id)

    if title and title.strip():
        note.title = title
    if content:
        note.content = content

    await db.commit()
    await db.refresh(note)
    return note


async def delete_note(db: AsyncSession, tenant_id: uuid.UUID, note_id: uuid.UUID | str) -> None:
    """
    Delete and give the quota slot back, atomically. A second delete of the
    same id raises NoteNotFound.
    """
    nid = _parse_note_id(note_id)
    try:
        res = await db.execute(
            delete(Note)
            .where(Note.id == nid, Note.tenant_id == tenant_id)
            .execution_options(synchronize_session=False)
        )
        if res.rowcount != 1:
            raise NoteNotFound()
        await release_note_slot(db, tenant_id)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    log.info("note_deleted", tenant_id=str(tenant_id), note_id=str(nid))
