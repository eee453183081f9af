from types import SimpleNamespace

from lexai.models import MovementType
from lexai.services import ai_service


def completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class FakeCompletions:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return self.result


def fake_client(completions=None, responses=None):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions), responses=responses)


def test_chat_maps_history_roles(monkeypatch):
    completions = FakeCompletions(result=completion("ok"))
    monkeypatch.setattr(ai_service, "get_client", lambda: fake_client(completions))

    reply = ai_service.legal_chat([{"role": "user", "text": "a"}, {"role": "model", "text": "b"}], "c")

    assert reply == "ok"
    messages = completions.calls[0]["messages"]
    assert [m["role"] for m in messages] == ["system", "user", "assistant", "user"]
    assert messages[-1]["content"] == "c"


def test_chat_failure_returns_generic_message(monkeypatch):
    completions = FakeCompletions(error=RuntimeError("boom"))
    monkeypatch.setattr(ai_service, "get_client", lambda: fake_client(completions))

    assert ai_service.legal_chat([], "oi") == ai_service.CHAT_FAILURE_MESSAGE


def test_triage_strips_fences_and_normalizes_type(monkeypatch):
    content = '```json\n{"case_number": "123", "date": "2026-11-03", "description": "Audiência", "movement_type": "Audiência"}\n```'
    completions = FakeCompletions(result=completion(content))
    monkeypatch.setattr(ai_service, "get_client", lambda: fake_client(completions))

    result = ai_service.analyze_court_email("corpo", "tj@tjsp.jus.br", b"imagem", "image/png", "foto.png")

    assert result["movement_type"] == "hearing"
    assert result["case_number"] == "123"
    parts = completions.calls[0]["messages"][1]["content"]
    assert parts[1]["type"] == "image_url"
    assert parts[1]["image_url"]["url"].startswith("data:image/png;base64,")


def test_triage_invalid_json_returns_empty(monkeypatch):
    completions = FakeCompletions(result=completion("não sei"))
    monkeypatch.setattr(ai_service, "get_client", lambda: fake_client(completions))

    assert ai_service.analyze_court_email("corpo", "x") == {}


def test_triage_non_object_json_returns_empty(monkeypatch):
    for content in ('[{"case_number": "123"}]', '"audiencia"'):
        completions = FakeCompletions(result=completion(content))
        monkeypatch.setattr(ai_service, "get_client", lambda: fake_client(completions))

        assert ai_service.analyze_court_email("corpo", "x") == {}


def test_triage_api_failure_returns_empty(monkeypatch):
    completions = FakeCompletions(error=RuntimeError("timeout"))
    monkeypatch.setattr(ai_service, "get_client", lambda: fake_client(completions))

    assert ai_service.analyze_court_email("corpo", "x") == {}


def test_research_collects_unique_citations(monkeypatch):
    citation = SimpleNamespace(type="url_citation", url="https://stj.jus.br/a", title="STJ")
    response = SimpleNamespace(
        output_text="Resumo",
        output=[
            SimpleNamespace(type="web_search_call"),
            SimpleNamespace(type="message", content=[SimpleNamespace(annotations=[citation, citation])]),
        ],
    )
    responses = SimpleNamespace(create=lambda **kwargs: response)
    monkeypatch.setattr(ai_service, "get_client", lambda: fake_client(responses=responses))

    result = ai_service.research_case_law("dano moral")

    assert result == {"text": "Resumo", "sources": [{"title": "STJ", "url": "https://stj.jus.br/a"}]}


def test_draft_failure(monkeypatch):
    completions = FakeCompletions(error=RuntimeError("boom"))
    monkeypatch.setattr(ai_service, "get_client", lambda: fake_client(completions))

    assert ai_service.generate_legal_draft({"description": "x"}) == ai_service.DRAFT_FAILURE_MESSAGE


def test_normalize_movement_type():
    assert ai_service.normalize_movement_type("Prazo") == MovementType.DEADLINE
    assert ai_service.normalize_movement_type(" hearing ") == MovementType.HEARING
    assert ai_service.normalize_movement_type(None) == MovementType.NOTIFICATION
