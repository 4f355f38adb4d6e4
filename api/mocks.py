"""Premium-only scheduled mock interview routes."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Header, Query

from api.deps import get_account_service, get_mock_scheduler, resolve_identity, to_http
from api.schemas import MockListResp, MockResp, ScheduleMockReq
from services.accounts import AccountService
from services.errors import InterviewError
from services.mocks import MockScheduler

router = APIRouter(prefix="/api/mocks", tags=["mocks"])


@router.post("/schedule", response_model=MockResp, status_code=201)
def schedule_mock(
    req: ScheduleMockReq,
    x_user_id: Optional[str] = Header(default=None),
    accounts: AccountService = Depends(get_account_service),
    scheduler: MockScheduler = Depends(get_mock_scheduler),
) -> MockResp:
    try:
        account = accounts.require_premium(resolve_identity(x_user_id, req.user_id))
        mock = scheduler.schedule(
            account,
            scheduled_for=req.scheduled_for,
            mode=req.mode,
            job_role=req.job_role,
            industry=req.industry,
            experience=req.experience,
            resume_text=req.resume_text,
            job_description=req.job_description,
        )
    except InterviewError as exc:
        raise to_http(exc) from exc
    return MockResp(mock=mock)


@router.get("", response_model=MockListResp)
def list_mocks(
    user_id: Optional[str] = Query(default=None, alias="userId"),
    x_user_id: Optional[str] = Header(default=None),
    scheduler: MockScheduler = Depends(get_mock_scheduler),
) -> MockListResp:
    try:
        return MockListResp(mocks=scheduler.list(resolve_identity(x_user_id, user_id)))
    except InterviewError as exc:
        raise to_http(exc) from exc
