from fastapi import APIRouter, Depends, File, Form, UploadFile
from typing import Optional
import logging

from lexai.models import User
from lexai.auth.dependencies import get_current_user
from lexai.assistant.schemas import (
    ChatRequest, ChatResponse, ResearchRequest, ResearchResponse,
    TriageResult, TriageResponse, DraftRequest, DraftResponse
)
from lexai.services import ai_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/assistant", tags=["AI Assistant"])


@router.post("/chat", response_model=ChatResponse)
def chat(
    request: ChatRequest,
    current_user: User = Depends(get_current_user)
):
    history = [msg.dict() for msg in request.history]
    reply = ai_service.legal_chat(history, request.message)
    return ChatResponse(reply=reply)


@router.post("/research", response_model=ResearchResponse)
def research(
    request: ResearchRequest,
    current_user: User = Depends(get_current_user)
):
    """Case-law research grounded on web search results."""
    result = ai_service.research_case_law(request.query)
    return ResearchResponse(**result)


@router.post("/triage", response_model=TriageResponse)
async def triage_email(
    body: str = Form(...),
    sender: str = Form(""),
    attachment: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user)
):
    """
    Extract the court movement from an email body and an optional attachment.

    An empty analysis means the model could not read the email; the caller
    fills the movement form manually in that case.
    """
    data = None
    mime_type = None
    filename = None
    if attachment is not None and attachment.filename:
        data = await attachment.read()
        mime_type = attachment.content_type
        filename = attachment.filename
        logger.info(f"Triage attachment received: {filename} ({mime_type}, {len(data)} bytes)")

    result = ai_service.analyze_court_email(body, sender, data, mime_type, filename)
    analysis = TriageResult(**{k: result.get(k) for k in TriageResult.model_fields})
    return TriageResponse(analysis=analysis, extracted=bool(result))


@router.post("/draft", response_model=DraftResponse)
def draft(
    request: DraftRequest,
    current_user: User = Depends(get_current_user)
):
    draft_text = ai_service.generate_legal_draft(request.analysis.dict())
    return DraftResponse(draft=draft_text)
