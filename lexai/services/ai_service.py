from openai import OpenAI
import openai
import base64
import json
import logging
import re
from typing import Optional, List, Dict, Any

from lexai.config import OPENAI_API_KEY, OPENAI_MODEL, OPENAI_SEARCH_MODEL
from lexai.models import MovementType

# Setup logging
logger = logging.getLogger(__name__)

CHAT_FAILURE_MESSAGE = "Não foi possível obter uma resposta do assistente no momento. Tente novamente."
RESEARCH_FAILURE_MESSAGE = "Não foi possível concluir a pesquisa no momento. Tente novamente."
DRAFT_FAILURE_MESSAGE = "Não foi possível gerar a minuta no momento. Tente novamente."

CHAT_SYSTEM_PROMPT = """You are an elite legal assistant for the LexAI law office.
Your role is to help Brazilian lawyers with research, drafting of pleadings and case analysis.
Be professional, technical and concise, and answer in Brazilian Portuguese.
Always state that the information must be reviewed by a human lawyer."""

DRAFT_SYSTEM_PROMPT = "You are a specialist in Brazilian legal writing. Your tone is formal, technical and precise."

TRIAGE_SCHEMA = {
    "name": "court_movement",
    "strict": True,
    "schema": {
        "type": "object",
        "properties": {
            "case_number": {"type": "string", "description": "Formatted case number."},
            "date": {"type": "string", "description": "Deadline or hearing date as YYYY-MM-DD."},
            "description": {"type": "string", "description": "Concise summary of the court movement."},
            "movement_type": {
                "type": "string",
                "enum": ["hearing", "deadline", "notification"],
                "description": "Kind of event.",
            },
        },
        "required": ["case_number", "date", "description", "movement_type"],
        "additionalProperties": False,
    },
}

# Labels the model may still answer with
MOVEMENT_TYPE_ALIASES = {
    "audiência": MovementType.HEARING,
    "audiencia": MovementType.HEARING,
    "hearing": MovementType.HEARING,
    "prazo": MovementType.DEADLINE,
    "deadline": MovementType.DEADLINE,
    "notificação": MovementType.NOTIFICATION,
    "notificacao": MovementType.NOTIFICATION,
    "notification": MovementType.NOTIFICATION,
}

_client: Optional[OpenAI] = None


def get_client() -> OpenAI:
    global _client
    if _client is None:
        _client = OpenAI(api_key=OPENAI_API_KEY)
    return _client


def normalize_movement_type(value: Optional[str]) -> MovementType:
    return MOVEMENT_TYPE_ALIASES.get((value or "").strip().lower(), MovementType.NOTIFICATION)


# =====================================================
# CHAT
# =====================================================

def legal_chat(history: List[Dict[str, str]], user_input: str) -> str:
    """Multi-turn chat; history items carry `role` (user/model) and `text`."""
    messages = [{"role": "system", "content": CHAT_SYSTEM_PROMPT}]
    for msg in history:
        role = "assistant" if msg.get("role") in ("model", "assistant") else "user"
        messages.append({"role": role, "content": msg.get("text", "")})
    messages.append({"role": "user", "content": user_input})

    try:
        response = get_client().chat.completions.create(
            model=OPENAI_MODEL,
            messages=messages,
            temperature=0.3,
        )
        reply = response.choices[0].message.content or ""
        logger.info(f"Legal chat processed - history: {len(history)}, query length: {len(user_input)}")
        return reply
    except openai.APIError as e:
        logger.error(f"OpenAI API error: {str(e)}")
        return CHAT_FAILURE_MESSAGE
    except Exception as e:
        logger.exception(f"Legal chat failed: {e}")
        return CHAT_FAILURE_MESSAGE


# =====================================================
# GROUNDED RESEARCH
# =====================================================

def _citations(response) -> List[Dict[str, str]]:
    sources = []
    seen = set()
    for item in getattr(response, "output", None) or []:
        if getattr(item, "type", None) != "message":
            continue
        for content in getattr(item, "content", None) or []:
            for annotation in getattr(content, "annotations", None) or []:
                if getattr(annotation, "type", None) != "url_citation":
                    continue
                if annotation.url in seen:
                    continue
                seen.add(annotation.url)
                sources.append({"title": annotation.title or annotation.url, "url": annotation.url})
    return sources


def research_case_law(query: str) -> Dict[str, Any]:
    """Web-search grounded research; returns the answer text and cited sources."""
    prompt = (
        f"Research recent case law and news about: {query}. "
        "Focus on the Brazilian legal landscape and answer in Brazilian Portuguese."
    )
    try:
        response = get_client().responses.create(
            model=OPENAI_SEARCH_MODEL,
            tools=[{"type": "web_search_preview"}],
            input=prompt,
        )
        return {"text": response.output_text, "sources": _citations(response)}
    except Exception as e:
        logger.error(f"Research error: {str(e)}")
        return {"text": RESEARCH_FAILURE_MESSAGE, "sources": []}


# =====================================================
# EMAIL TRIAGE
# =====================================================

def _attachment_part(data: bytes, mime_type: str, filename: str) -> Optional[Dict[str, Any]]:
    encoded = base64.b64encode(data).decode("ascii")
    if mime_type.startswith("image/"):
        return {"type": "image_url", "image_url": {"url": f"data:{mime_type};base64,{encoded}"}}
    if mime_type == "application/pdf":
        return {
            "type": "file",
            "file": {"filename": filename or "attachment.pdf", "file_data": f"data:{mime_type};base64,{encoded}"},
        }
    if mime_type.startswith("text/"):
        return {"type": "text", "text": data.decode("utf-8", errors="ignore")}
    logger.warning(f"Unsupported attachment type ignored: {mime_type}")
    return None


def analyze_court_email(
    body: str,
    sender: str,
    attachment: Optional[bytes] = None,
    mime_type: Optional[str] = None,
    filename: Optional[str] = None
) -> Dict[str, Any]:
    """
    Extract case number, date, description and movement type from a court email.

    Returns an empty dict when the model fails or answers with invalid JSON.
    """
    parts: List[Dict[str, Any]] = [{"type": "text", "text": f"Analyze this legal email from {sender}:\n\n{body}"}]
    if attachment and mime_type:
        part = _attachment_part(attachment, mime_type, filename)
        if part:
            parts.append(part)

    try:
        response = get_client().chat.completions.create(
            model=OPENAI_MODEL,
            temperature=0,
            response_format={"type": "json_schema", "json_schema": TRIAGE_SCHEMA},
            messages=[
                {"role": "system", "content": "You extract court movements from Brazilian legal correspondence."},
                {"role": "user", "content": parts},
            ],
        )
        raw_content = response.choices[0].message.content or "{}"
    except Exception as e:
        logger.error(f"Email triage failed: {str(e)}")
        return {}

    cleaned = re.sub(r"^```(?:json)?\s*|\s*```$", "", raw_content.strip(), flags=re.DOTALL)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError:
        logger.error("AI returned non-JSON response: %s", raw_content[:500])
        return {}

    if not isinstance(data, dict):
        logger.error(f"AI returned a non-object JSON response: {type(data).__name__}")
        return {}

    if data.get("movement_type"):
        data["movement_type"] = normalize_movement_type(data["movement_type"]).value
    return data


def generate_legal_draft(analysis: Dict[str, Any]) -> str:
    prompt = (
        f"Based on the following court movement: {json.dumps(analysis, ensure_ascii=False)}, "
        "write a professional draft petition or legal filing in Brazilian Portuguese."
    )
    try:
        response = get_client().chat.completions.create(
            model=OPENAI_MODEL,
            temperature=0.4,
            messages=[
                {"role": "system", "content": DRAFT_SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
        )
        return response.choices[0].message.content or ""
    except Exception as e:
        logger.error(f"Draft generation failed: {str(e)}")
        return DRAFT_FAILURE_MESSAGE
