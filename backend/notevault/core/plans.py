# ============================
# FILE: notevault/core/plans.py
# Canonical plan limits for NoteVault
# ============================
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional


class TenantPlan(str, enum.Enum):
    FREE = "free"
    PRO = "pro"


@dataclass(frozen=True)
class PlanNoteLimit:
    # None => unlimited
    max_notes: Optional[int]


PLAN_NOTE_LIMITS: dict[TenantPlan, PlanNoteLimit] = {
    TenantPlan.FREE: PlanNoteLimit(max_notes=3),
    TenantPlan.PRO: PlanNoteLimit(max_notes=None),
}

FREE_PLAN_NOTE_LIMIT: int = PLAN_NOTE_LIMITS[TenantPlan.FREE].max_notes  # type: ignore[assignment]


def normalize_plan(value) -> TenantPlan:
    """
    Supports Enum-like plan objects (plan.value) or plain strings.
    Unknown values fall back to FREE, the most restrictive plan.
    """
    v = getattr(value, "value", value)
    p = (v or "").strip().lower() if isinstance(v, str) else ""
    try:
        return TenantPlan(p)
    except ValueError:
        return TenantPlan.FREE


def get_note_limit_for_plan(plan) -> Optional[int]:
    """
    Returns the max number of notes a tenant on `plan` may hold, or None if unbounded.
    """
    return PLAN_NOTE_LIMITS[normalize_plan(plan)].max_notes


def get_next_plan(plan) -> Optional[TenantPlan]:
    """
    Returns the next plan in the upgrade path, or None if already highest.
    Plans only move forward (free -> pro).
    """
    return {TenantPlan.FREE: TenantPlan.PRO}.get(normalize_plan(plan))
