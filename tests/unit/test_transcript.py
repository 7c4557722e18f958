"""Unit tests for transcript normalization."""

import pytest
import pytest_check as check

from assistant_relay.assistant.errors import MalformedMessage
from assistant_relay.assistant.provider import OtherBlock, ProviderMessage, TextBlock
from assistant_relay.assistant.transcript import extract_text, normalize_transcript
from assistant_relay.models.schemas import ChatMessage, MessageRole


def _message(message_id: str, role: str, *blocks: TextBlock | OtherBlock) -> ProviderMessage:
    return ProviderMessage(id=message_id, role=role, content=list(blocks))


class TestExtractText:
    """Tests for first-text-block extraction."""

    def test_returns_first_text_block(self) -> None:
        """The literal value of the first text block becomes the content."""
        message = _message(
            "msg_1", "assistant", TextBlock(text="first"), TextBlock(text="second")
        )

        assert extract_text(message) == "first"

    def test_empty_content_raises(self) -> None:
        """An empty content list raises MalformedMessage instead of yielding ''."""
        message = _message("msg_empty", "assistant")

        with pytest.raises(MalformedMessage) as exc_info:
            extract_text(message)

        check.equal(exc_info.value.message_id, "msg_empty")
        check.is_in("empty", exc_info.value.reason)

    def test_non_text_first_block_raises(self) -> None:
        """A leading image block is not silently skipped."""
        message = _message(
            "msg_img", "assistant", OtherBlock(type="image_file"), TextBlock(text="caption")
        )

        with pytest.raises(MalformedMessage) as exc_info:
            extract_text(message)

        assert "image_file" in exc_info.value.reason

    def test_empty_text_block_is_allowed(self) -> None:
        """A text block with an empty value is still a text block."""
        message = _message("msg_blank", "user", TextBlock(text=""))

        assert extract_text(message) == ""


class TestNormalizeTranscript:
    """Tests for mapping provider messages to ChatMessage entries."""

    def test_maps_id_content_and_role(self) -> None:
        """Each provider message becomes {id, content, role}."""
        transcript = normalize_transcript(
            [
                _message("msg_1", "user", TextBlock(text="Hello")),
                _message("msg_2", "assistant", TextBlock(text="Hi there")),
            ]
        )

        assert transcript == [
            ChatMessage(id="msg_1", content="Hello", role=MessageRole.USER),
            ChatMessage(id="msg_2", content="Hi there", role=MessageRole.ASSISTANT),
        ]

    def test_keeps_provider_order_and_duplicates(self) -> None:
        """Order is not changed and repeated content is not deduplicated."""
        transcript = normalize_transcript(
            [
                _message("msg_3", "assistant", TextBlock(text="later")),
                _message("msg_1", "user", TextBlock(text="same")),
                _message("msg_2", "user", TextBlock(text="same")),
            ]
        )

        assert [m.id for m in transcript] == ["msg_3", "msg_1", "msg_2"]

    def test_empty_list_returns_empty_transcript(self) -> None:
        """A thread with no messages normalizes to an empty list."""
        assert normalize_transcript([]) == []

    def test_unknown_role_raises(self) -> None:
        """Roles other than user/assistant are rejected."""
        with pytest.raises(MalformedMessage):
            normalize_transcript([_message("msg_1", "system", TextBlock(text="x"))])

    def test_provider_never_produces_error_role(self) -> None:
        """The locally synthesized error role is not accepted from the provider."""
        with pytest.raises(MalformedMessage):
            normalize_transcript([_message("msg_1", "error", TextBlock(text="x"))])

    def test_one_malformed_message_fails_whole_transcript(self) -> None:
        """A malformed message anywhere aborts normalization."""
        with pytest.raises(MalformedMessage) as exc_info:
            normalize_transcript(
                [
                    _message("msg_1", "user", TextBlock(text="Hello")),
                    _message("msg_2", "assistant"),
                ]
            )

        assert exc_info.value.message_id == "msg_2"
