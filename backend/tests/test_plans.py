# tests/test_plans.py
from notevault.core.plans import (
    FREE_PLAN_NOTE_LIMIT,
    TenantPlan,
    get_next_plan,
    get_note_limit_for_plan,
    normalize_plan,
)


def test_free_plan_caps_at_three_notes():
    assert FREE_PLAN_NOTE_LIMIT == 3
    assert get_note_limit_for_plan("free") == 3
    assert get_note_limit_for_plan(TenantPlan.FREE) == 3


def test_pro_plan_is_unbounded():
    assert get_note_limit_for_plan("pro") is None


def test_unknown_plan_is_treated_as_free():
    assert normalize_plan("platinum") is TenantPlan.FREE
    assert normalize_plan(None) is TenantPlan.FREE
    assert normalize_plan(" PRO ") is TenantPlan.PRO


def test_upgrade_path_is_one_way():
    assert get_next_plan("free") is TenantPlan.PRO
    assert get_next_plan("pro") is None
