"""FastAPI routes for the interview lifecycle."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Header, HTTPException, Query, Response, UploadFile

from api.deps import get_interview_service, get_media_store, resolve_identity, to_http
from api.schemas import (
    CreateInterviewReq,
    InterviewListResp,
    InterviewResp,
    MessageResp,
    StartInterviewReq,
    StartInterviewResp,
    SubmitInterviewReq,
    SubmitInterviewResp,
)
from services.errors import InterviewError
from services.export import sessions_to_csv
from services.lifecycle import InterviewService
from storage.media import MediaStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/interview", tags=["interview"])


@router.post("/create", response_model=InterviewResp, status_code=201)
def create_interview(
    req: CreateInterviewReq,
    x_user_id: Optional[str] = Header(default=None),
    service: InterviewService = Depends(get_interview_service),
) -> InterviewResp:
    try:
        interview = service.create(
            account_id=resolve_identity(x_user_id, req.user_id),
            job_role=req.job_role,
            experience=req.experience,
            mode=req.mode,
            industry=req.industry,
            resume_text=req.resume_text,
            job_description=req.job_description,
            email=req.email,
        )
    except InterviewError as exc:
        raise to_http(exc) from exc
    return InterviewResp(interview=interview)


@router.post("/start", response_model=StartInterviewResp)
def start_interview(
    req: StartInterviewReq,
    service: InterviewService = Depends(get_interview_service),
) -> StartInterviewResp:
    try:
        interview = service.start(req.interview_id)
    except InterviewError as exc:
        raise to_http(exc) from exc
    return StartInterviewResp(questions=interview.questions)


@router.post("/submit", response_model=SubmitInterviewResp)
def submit_interview(
    req: SubmitInterviewReq,
    service: InterviewService = Depends(get_interview_service),
) -> SubmitInterviewResp:
    try:
        interview = service.submit(req.interview_id, req.answers, req.mode)
    except InterviewError as exc:
        raise to_http(exc) from exc
    return SubmitInterviewResp(
        feedback=interview.feedback,
        ideal_answers=interview.ideal_answers,
        overall_feedback=interview.overall_feedback or "",
        score=interview.score,
    )


@router.post("/upload-video", response_model=MessageResp)
def upload_video(
    interview_id: str = Form(..., alias="interviewId"),
    question_index: int = Form(..., alias="questionIndex"),
    video: Optional[UploadFile] = File(default=None),
    service: InterviewService = Depends(get_interview_service),
    media: MediaStore = Depends(get_media_store),
) -> MessageResp:
    if video is None:
        raise HTTPException(status_code=400, detail="No video file uploaded.")
    try:
        service.get(interview_id)
        ref = media.save(
            interview_id,
            question_index,
            video.file.read(),
            filename=video.filename,
            mimetype=video.content_type,
        )
        try:
            service.attach_media(interview_id, question_index, ref)
        except InterviewError:
            media.discard(ref)
            raise
    except InterviewError as exc:
        raise to_http(exc) from exc
    return MessageResp(message="Video uploaded and saved.")


@router.get("/all", response_model=InterviewListResp)
def list_interviews(
    user_id: Optional[str] = Query(default=None, alias="userId"),
    x_user_id: Optional[str] = Header(default=None),
    service: InterviewService = Depends(get_interview_service),
) -> InterviewListResp:
    try:
        interviews = service.list(resolve_identity(x_user_id, user_id))
    except InterviewError as exc:
        raise to_http(exc) from exc
    return InterviewListResp(interviews=interviews)


@router.get("/export/logs")
def export_interview_logs(service: InterviewService = Depends(get_interview_service)) -> Response:
    try:
        interviews = service.list()
    except InterviewError as exc:
        raise to_http(exc) from exc
    if not interviews:
        raise HTTPException(status_code=404, detail="No interview logs to export")
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
    headers = {"Content-Disposition": f'attachment; filename="interview-logs-{stamp}.csv"'}
    return Response(content=sessions_to_csv(interviews), media_type="text/csv; charset=utf-8", headers=headers)


@router.get("/{interview_id}", response_model=InterviewResp)
def get_interview(
    interview_id: str,
    service: InterviewService = Depends(get_interview_service),
) -> InterviewResp:
    try:
        return InterviewResp(interview=service.get(interview_id))
    except InterviewError as exc:
        raise to_http(exc) from exc
