import json

from ducktype.app import app
from ducktype.services.fallback import SOCRATIC_POLICY, STARTER_PROMPTS_POLICY
from ducktype.services.generation_client import GenerationClient, get_generation_client


def test_socratic_reply_from_json(client, fake_generator):
    fake_generator.replies = [json.dumps({"questions": ["What did you expect?", "What happened?", "Extra?"]})]
    res = client.post(
        "/gemini",
        json={
            "conversation": [
                {"role": "user", "parts": [{"text": "My loop never ends"}]},
                {"role": "model", "parts": [{"text": "What is the exit condition?"}]},
                {"role": "user", "content": "i < n"},
            ]
        },
    )
    assert res.status_code == 200
    assert res.json() == {"questions": ["What did you expect?", "What happened?"]}

    [call] = fake_generator.calls
    assert [m["role"] for m in call["context"]] == ["user", "assistant", "user"]
    assert call["context"][2]["content"] == "i < n"
    assert call["list_field"] == "questions"
    assert "NEVER provide answers" in call["instructions"]


def test_socratic_reply_falls_back_without_retry(client, fake_generator):
    fake_generator.replies = ["", '{"questions": ["should not be used?"]}']
    res = client.post("/gemini", json={"conversation": [{"role": "user", "content": "help"}]})
    assert res.status_code == 200
    assert res.json() == {"questions": SOCRATIC_POLICY.default_list()}
    assert len(fake_generator.calls) == 1


def test_socratic_reply_requires_conversation(client, fake_generator):
    for body in ({}, {"conversation": []}, {"conversation": [{"role": "user", "content": "  "}]}):
        res = client.post("/gemini", json=body)
        assert res.status_code == 400
        assert res.json() == {"error": "Missing conversation"}
    assert fake_generator.calls == []


def test_starter_prompts_from_embedded_json(client, fake_generator):
    fake_generator.replies = ['Here: {"prompts": ["Where does it break?", "What changed?", "Which input?"]}']
    res = client.post("/gemini/prompts")
    assert res.status_code == 200
    assert res.json() == {"prompts": ["Where does it break?", "What changed?", "Which input?"]}
    assert "no-store" in res.headers["cache-control"]
    assert res.headers["pragma"] == "no-cache"
    assert "nonce=" in fake_generator.calls[0]["context"][0]["content"]


def test_starter_prompts_defaults_without_context(client, fake_generator):
    res = client.post("/gemini/prompts", json={})
    assert res.json() == {"prompts": STARTER_PROMPTS_POLICY.default_list()}
    assert len(fake_generator.calls) == 1


def test_starter_prompts_retry_with_summaries(client, fake_generator):
    fake_generator.replies = ["??", '{"prompts": ["Revisit the parser bug?"]}']
    res = client.post("/gemini/prompts", json={"summaries": ["Parser bug in tokenizer", "  "]})
    assert res.json() == {"prompts": ["Revisit the parser bug?"]}
    assert len(fake_generator.calls) == 2
    assert "- Parser bug in tokenizer" in fake_generator.calls[1]["instructions"]


def test_starter_prompts_retry_then_defaults(client, fake_generator):
    res = client.post("/gemini/prompts", json={"summaries": ["Flaky CI job"]})
    assert res.json() == {"prompts": STARTER_PROMPTS_POLICY.default_list()}
    assert len(fake_generator.calls) == 2


def test_missing_credential_is_service_unavailable(client, monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    app.dependency_overrides[get_generation_client] = lambda: GenerationClient(provider="gemini")
    res = client.post("/gemini/prompts")
    assert res.status_code == 503
    assert res.json() == {"error": "Missing GEMINI_API_KEY"}


def test_socratic_reply_survives_deeply_nested_output(client, fake_generator):
    fake_generator.replies = ["[" * 5000]
    res = client.post("/gemini", json={"conversation": [{"role": "user", "content": "why?"}]})
    assert res.status_code == 200
    assert res.json() == {"questions": SOCRATIC_POLICY.default_list()}


def test_starter_prompts_survive_deeply_nested_output(client, fake_generator):
    fake_generator.replies = ["[" * 5000]
    res = client.post("/gemini/prompts")
    assert res.json() == {"prompts": STARTER_PROMPTS_POLICY.default_list()}


def test_starter_prompts_ignore_non_json_body(client, fake_generator):
    fake_generator.replies = ['{"prompts": ["What changed?"]}']
    res = client.post("/gemini/prompts", content=b"not json at all", headers={"Content-Type": "text/plain"})
    assert res.status_code == 200
    assert res.json() == {"prompts": ["What changed?"]}


def test_starter_prompts_malformed_json_is_treated_as_no_summaries(client, fake_generator):
    res = client.post("/gemini/prompts", content=b'{"summaries": ', headers={"Content-Type": "application/json"})
    assert res.status_code == 200
    assert res.json() == {"prompts": STARTER_PROMPTS_POLICY.default_list()}
    assert len(fake_generator.calls) == 1
