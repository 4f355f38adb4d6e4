"""Administrative routes: interview overrides and account management."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from api.deps import get_account_service, get_interview_service, get_mock_scheduler, to_http
from api.schemas import (
    AccountListResp,
    AccountResp,
    AdminInterviewUpdate,
    EraseResp,
    InterviewResp,
    MessageResp,
    PlanUpdateReq,
    ReminderDue,
    ReminderSweepResp,
)
from services.accounts import AccountService
from services.errors import InterviewError
from services.lifecycle import InterviewService
from services.mocks import MockScheduler

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.put("/interviews/{interview_id}", response_model=InterviewResp)
def edit_interview(
    interview_id: str,
    req: AdminInterviewUpdate,
    service: InterviewService = Depends(get_interview_service),
) -> InterviewResp:
    try:
        interview = service.admin_edit(interview_id, req.model_dump(exclude_unset=True))
    except InterviewError as exc:
        raise to_http(exc) from exc
    return InterviewResp(interview=interview)


@router.delete("/interviews/{interview_id}", response_model=MessageResp)
def delete_interview(
    interview_id: str,
    service: InterviewService = Depends(get_interview_service),
) -> MessageResp:
    try:
        service.admin_delete(interview_id)
    except InterviewError as exc:
        raise to_http(exc) from exc
    return MessageResp(message="Interview deleted")


@router.get("/users", response_model=AccountListResp)
def list_users(service: AccountService = Depends(get_account_service)) -> AccountListResp:
    try:
        return AccountListResp(users=service.list_accounts())
    except InterviewError as exc:
        raise to_http(exc) from exc


@router.post("/user/{account_id}/plan", response_model=AccountResp)
def update_user_plan(
    account_id: str,
    req: PlanUpdateReq,
    service: AccountService = Depends(get_account_service),
) -> AccountResp:
    try:
        return AccountResp(user=service.set_plan(account_id, req.plan))
    except InterviewError as exc:
        raise to_http(exc) from exc


@router.delete("/user/{account_id}", response_model=EraseResp)
def erase_user(
    account_id: str,
    service: AccountService = Depends(get_account_service),
) -> EraseResp:
    try:
        return EraseResp(deleted=service.erase(account_id))
    except InterviewError as exc:
        raise to_http(exc) from exc


@router.post("/reminders/sweep", response_model=ReminderSweepResp)
def sweep_reminders(scheduler: MockScheduler = Depends(get_mock_scheduler)) -> ReminderSweepResp:
    """Advance every scheduled mock whose reminder window has opened."""

    try:
        due = scheduler.advance_reminders()
    except InterviewError as exc:
        raise to_http(exc) from exc
    return ReminderSweepResp(reminders=[ReminderDue(stage=stage, mock=mock) for mock, stage in due])
