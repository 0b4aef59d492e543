from ducktype.schemas.conversations import reply_lines
from ducktype.schemas.gemini import ConversationTurn


def test_reply_lines_normalizes_both_shapes():
    assert reply_lines("What changed?") == ["What changed?"]
    assert reply_lines(["Why?", " ", "How?"]) == ["Why?", "How?"]
    assert reply_lines("   ") == []
    assert reply_lines(None) == []


def test_turn_accepts_parts_and_content():
    native = ConversationTurn.model_validate({"role": "model", "parts": [{"text": "a"}, {"text": "b"}]})
    assert native.text() == "a\nb"
    assert native.chat_role() == "assistant"

    plain = ConversationTurn.model_validate({"role": "user", "content": "hello"})
    assert plain.text() == "hello"
    assert plain.chat_role() == "user"
