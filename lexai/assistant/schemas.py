from pydantic import BaseModel, Field
from typing import List, Literal, Optional

class ChatMessage(BaseModel):
    role: Literal["user", "model"]
    text: str

class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1)
    history: List[ChatMessage] = []

class ChatResponse(BaseModel):
    reply: str

class ResearchRequest(BaseModel):
    query: str = Field(..., min_length=1)

class ResearchSource(BaseModel):
    title: str
    url: str

class ResearchResponse(BaseModel):
    text: str
    sources: List[ResearchSource] = []

class TriageResult(BaseModel):
    case_number: Optional[str] = None
    date: Optional[str] = None
    description: Optional[str] = None
    movement_type: Optional[str] = None

class TriageResponse(BaseModel):
    analysis: TriageResult
    extracted: bool

class DraftRequest(BaseModel):
    analysis: TriageResult

class DraftResponse(BaseModel):
    draft: str
