import pytest

from app.core.errors import InvalidTransition, ValidationError
from app.models import Company
from app.services import company_lifecycle as lifecycle


def new_company(**kwargs):
    company = Company(company_name="Acme Ltd", email="hr@acme.com", hashed_password="x", **kwargs)
    return lifecycle.initialize(company)


def assert_invariants(company):
    if company.status == lifecycle.APPROVED:
        assert company.is_approved
    if company.status in (lifecycle.DISABLED, lifecycle.DELETED):
        assert company.is_active is False
    if company.status == lifecycle.REJECTED:
        assert company.rejection_reason


def test_initialize_forces_pending():
    company = Company(is_approved=True, status="approved", is_active=False)
    lifecycle.initialize(company)
    assert company.is_approved is False
    assert company.status == lifecycle.PENDING
    assert company.is_active is True
    assert company.profile_completion_status == lifecycle.INCOMPLETE


def test_approve_sets_full_access():
    company = lifecycle.approve(new_company())
    assert company.is_approved and company.is_active
    assert company.profile_completion_status == lifecycle.COMPLETE
    assert company.profile_completed_at is not None
    assert lifecycle.is_admissible(company)
    assert_invariants(company)


def test_approve_is_idempotent():
    company = lifecycle.approve(new_company())
    lifecycle.approve(company)
    assert company.status == lifecycle.APPROVED


def test_reject_requires_reason_and_leaves_state_unchanged():
    company = new_company()
    with pytest.raises(ValidationError):
        lifecycle.reject(company, "   ")
    assert company.status == lifecycle.PENDING
    assert company.is_active is True
    assert company.rejection_reason is None


def test_reject_then_reapprove_clears_reason():
    company = lifecycle.reject(new_company(), "Missing documents")
    assert company.status == lifecycle.REJECTED
    assert company.is_active is False
    assert company.rejected_at is not None
    assert_invariants(company)

    lifecycle.reject(company, "Still missing")
    assert company.rejection_reason == "Still missing"

    lifecycle.approve(company)
    assert company.rejection_reason is None
    assert company.rejected_at is None
    assert_invariants(company)


def test_cannot_reject_an_approved_company():
    company = lifecycle.approve(new_company())
    with pytest.raises(InvalidTransition) as exc:
        lifecycle.reject(company, "Too late")
    assert exc.value.message == "Cannot reject a company with status 'approved'"


def test_disable_and_enable_restore_previous_standing():
    approved = lifecycle.disable(lifecycle.approve(new_company()))
    assert approved.status == lifecycle.DISABLED
    assert approved.disabled_at is not None
    assert_invariants(approved)
    lifecycle.enable(approved)
    assert approved.status == lifecycle.APPROVED
    assert approved.disabled_at is None
    assert approved.profile_completion_status == lifecycle.COMPLETE

    pending = lifecycle.enable(lifecycle.disable(new_company()))
    assert pending.status == lifecycle.PENDING
    assert pending.is_active is True


def test_enable_requires_disabled():
    with pytest.raises(InvalidTransition):
        lifecycle.enable(new_company())


def test_deleted_is_terminal():
    company = lifecycle.soft_delete(lifecycle.approve(new_company()))
    assert company.is_active is False
    assert company.deleted_at is not None
    assert_invariants(company)

    for action in (lifecycle.approve, lifecycle.disable, lifecycle.enable, lifecycle.activate, lifecycle.deactivate):
        with pytest.raises(InvalidTransition):
            action(company)
    with pytest.raises(InvalidTransition):
        lifecycle.reject(company, "reason")
    assert company.status == lifecycle.DELETED


def test_self_service_activate_picks_status():
    approved = lifecycle.activate(lifecycle.deactivate(lifecycle.approve(new_company())))
    assert approved.status == lifecycle.APPROVED

    rejected = lifecycle.reject(new_company(), "Bad documents")
    lifecycle.activate(lifecycle.deactivate(rejected))
    assert rejected.status == lifecycle.REJECTED
    assert rejected.is_active is True

    pending = lifecycle.activate(lifecycle.deactivate(new_company()))
    assert pending.status == lifecycle.PENDING


def test_self_service_activate_cannot_lift_admin_disable():
    company = lifecycle.disable(lifecycle.approve(new_company()))
    assert company.disabled_by == lifecycle.DISABLED_BY_ADMIN
    with pytest.raises(InvalidTransition):
        lifecycle.activate(company)
    assert company.status == lifecycle.DISABLED
    assert company.is_active is False

    # pausing an admin-disabled account does not turn it into a self pause
    lifecycle.deactivate(company)
    with pytest.raises(InvalidTransition):
        lifecycle.activate(company)

    lifecycle.enable(company)
    assert company.disabled_by is None
    assert company.status == lifecycle.APPROVED


def test_admin_disable_overrides_self_pause():
    company = lifecycle.deactivate(lifecycle.approve(new_company()))
    assert company.disabled_by == lifecycle.DISABLED_BY_COMPANY
    lifecycle.disable(company)
    with pytest.raises(InvalidTransition):
        lifecycle.activate(company)


@pytest.mark.parametrize(
    "about, documents, expected",
    [
        (None, None, lifecycle.INCOMPLETE),
        ("We build things", [], lifecycle.INCOMPLETE),
        ("   ", [{"url": "a"}], lifecycle.INCOMPLETE),
        ("We build things", [{"url": "a"}], lifecycle.PENDING_REVIEW),
    ],
)
def test_profile_completion_never_completes_without_approval(about, documents, expected):
    company = new_company(about=about, documents=documents)
    assert lifecycle.recompute_profile_completion(company) == expected
    assert company.profile_completion_status == expected


def test_profile_completion_of_approved_company_is_complete():
    company = lifecycle.approve(new_company())
    company.about = None
    assert lifecycle.recompute_profile_completion(company) == lifecycle.COMPLETE


def test_status_notice():
    company = new_company()
    assert lifecycle.status_notice(company).startswith("Complete your profile")
    company.about, company.documents = "About", [{"url": "a"}]
    lifecycle.recompute_profile_completion(company)
    assert "pending admin review" in lifecycle.status_notice(company)
    lifecycle.approve(company)
    assert lifecycle.status_notice(company) == "Your company is approved. You can now post jobs."
