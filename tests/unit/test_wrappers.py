"""Tests for the per-method wrappers.

Each wrapper only shapes parameters, so these tests inspect the query that
reaches the mocked session.
"""

import json
from unittest.mock import Mock

import pytest

from tgbase.api.client import BotClient
from tgbase.errors import MissingParameter
from tgbase.models import Flag, InlineButton, InputMedia, SendOptions

MARKDOWN = SendOptions(markdown=True)


@pytest.fixture
def client(settings, mock_session):
    return BotClient(settings, session=mock_session)


def method_of(session) -> str:
    url = str(session.get.call_args.args[0])
    return url.split("?", 1)[0].rsplit("/", 1)[1]


TEXT_WRAPPERS = [
    ("send_message", lambda c, o: c.send_message(1, "hi", o)),
    ("reply_to_message", lambda c, o: c.reply_to_message(1, "hi", 7, o)),
    ("edit_message_text", lambda c, o: c.edit_message_text(1, 2, "hi", o)),
    ("edit_message_caption", lambda c, o: c.edit_message_caption(1, 2, "cap", o)),
    ("send_photo", lambda c, o: c.send_photo(1, "file-id", o)),
    ("send_video", lambda c, o: c.send_video(1, "file-id", options=o)),
    ("send_voice", lambda c, o: c.send_voice(1, "file-id", options=o)),
]


@pytest.mark.parametrize("name,send", TEXT_WRAPPERS, ids=[w[0] for w in TEXT_WRAPPERS])
def test_markdown_switch(name, send, client, mock_session, sent_params):
    send(client, MARKDOWN)
    assert sent_params(mock_session)["parse_mode"] == "MarkdownV2"

    send(client, None)
    assert sent_params(mock_session)["parse_mode"] == "HTML"


class TestSendMessage:
    def test_defaults(self, client, mock_session, sent_params):
        client.send_message(123, "hello")

        assert method_of(mock_session) == "sendMessage"
        assert sent_params(mock_session) == {
            "chat_id": "123",
            "text": "hello",
            "parse_mode": "HTML",
            "disable_web_page_preview": "true",
            "disable_notification": "false",
        }

    def test_flags(self, client, mock_session, sent_params):
        client.send_message(123, "hello", SendOptions(enable_page_preview=True, disable_notification=True))

        params = sent_params(mock_session)
        assert params["disable_web_page_preview"] == "false"
        assert params["disable_notification"] == "true"

    def test_legacy_bitmask(self, client, mock_session, sent_params):
        client.send_message(123, "hello", Flag.MARKDOWN | Flag.DISABLE_NOTIFICATION)

        params = sent_params(mock_session)
        assert params["parse_mode"] == "MarkdownV2"
        assert params["disable_notification"] == "true"

    def test_keyboard(self, client, mock_session, sent_params):
        client.send_message(123, "pick", keyboard=[[{"text": "A"}]])

        assert sent_params(mock_session)["reply_markup"] == '{"inline_keyboard":[[{"text":"A"}]]}'

    def test_keyboard_of_models(self, client, mock_session, sent_params):
        client.send_message(123, "pick", keyboard=[[InlineButton(text="A", callback_data="a")]])

        markup = json.loads(sent_params(mock_session)["reply_markup"])
        assert markup == {"inline_keyboard": [[{"text": "A", "callback_data": "a"}]]}

    def test_empty_keyboard_is_not_attached(self, client, mock_session, sent_params):
        client.send_message(123, "no buttons", keyboard=[])

        assert "reply_markup" not in sent_params(mock_session)

    def test_reply_id_zero_means_no_reply(self, client, mock_session, sent_params):
        client.send_message(123, "hello", reply_to_message_id=0)

        assert "reply_to_message_id" not in sent_params(mock_session)

    def test_missing_text(self, client, mock_session):
        with pytest.raises(MissingParameter):
            client.send_message(123, "")

        mock_session.get.assert_not_called()


class TestReplyToMessage:
    def test_is_send_message_with_reply_target(self, client, mock_session, sent_params):
        client.reply_to_message(123, "answer", 55)

        assert method_of(mock_session) == "sendMessage"
        assert sent_params(mock_session)["reply_to_message_id"] == "55"

    def test_reported_as_reply(self, verbose_settings, mock_session):
        sink = Mock()
        client = BotClient(verbose_settings, response_sink=sink, session=mock_session)

        client.reply_to_message(123, "answer", 55)

        assert sink.call_args.args[0] == "replyToMessage"


class TestEditing:
    def test_edit_message_text_has_no_notification_parameter(self, client, mock_session, sent_params):
        client.edit_message_text(1, 2, "new", SendOptions(disable_notification=True))

        params = sent_params(mock_session)
        assert method_of(mock_session) == "editMessageText"
        assert "disable_notification" not in params
        assert params["disable_web_page_preview"] == "true"

    def test_edit_reply_markup(self, client, mock_session, sent_params):
        client.edit_message_reply_markup(1, 2, keyboard=[[{"text": "B", "callback_data": "b"}]])

        params = sent_params(mock_session)
        assert method_of(mock_session) == "editMessageReplyMarkup"
        assert json.loads(params["reply_markup"]) == {"inline_keyboard": [[{"text": "B", "callback_data": "b"}]]}

    def test_edit_reply_markup_empty_removes_keyboard(self, client, mock_session, sent_params):
        client.edit_message_reply_markup(1, 2, keyboard=[])

        assert sent_params(mock_session) == {"chat_id": "1", "message_id": "2"}

    def test_edit_reply_markup_keyboard_is_keyword_only(self, client, mock_session):
        with pytest.raises(TypeError):
            client.edit_message_reply_markup(1, [[{"text": "B", "callback_data": "b"}]], 2)

        mock_session.get.assert_not_called()

    def test_caption_with_newline(self, client, mock_session, sent_query):
        client.edit_message_caption(1, 2, "top\nbottom")

        assert "caption=top%0A%0Dbottom" in sent_query(mock_session)


class TestSimpleMethods:
    def test_delete_message(self, client, mock_session, sent_params):
        client.delete_message("@channel", 9)

        assert method_of(mock_session) == "deleteMessage"
        assert sent_params(mock_session) == {"chat_id": "@channel", "message_id": "9"}

    def test_delete_message_zero_id_is_missing(self, client, mock_session):
        with pytest.raises(MissingParameter) as exc_info:
            client.delete_message(1, 0)

        assert exc_info.value.parameter == "message_id"
        mock_session.get.assert_not_called()

    def test_forward_message(self, client, mock_session, sent_params):
        client.forward_message(1, 2, 3, SendOptions(disable_notification=True))

        assert sent_params(mock_session) == {
            "chat_id": "1",
            "from_chat_id": "2",
            "message_id": "3",
            "disable_notification": "true",
        }

    def test_pin_chat_message_flag_is_live(self, client, mock_session, sent_params):
        client.pin_chat_message(1, 3, Flag.DISABLE_NOTIFICATION)

        assert method_of(mock_session) == "pinChatMessage"
        assert sent_params(mock_session)["disable_notification"] == "true"

    def test_get_chat(self, client, mock_session, sent_params):
        client.get_chat(-100)

        assert method_of(mock_session) == "getChat"
        assert sent_params(mock_session) == {"chat_id": "-100"}

    def test_get_me(self, client, mock_session, sent_query):
        client.get_me()

        assert method_of(mock_session) == "getMe"
        assert sent_query(mock_session) == ""


class TestMedia:
    def test_send_photo_caption_is_optional(self, client, mock_session, sent_params):
        client.send_photo(1, "https://example.com/cat.jpg")

        params = sent_params(mock_session)
        assert params["photo"] == "https://example.com/cat.jpg"
        assert "caption" not in params

    def test_send_video_zero_duration_is_omitted(self, client, mock_session, sent_params):
        client.send_video(1, "file-id", duration=0)

        assert "duration" not in sent_params(mock_session)

    def test_send_video_duration(self, client, mock_session, sent_query):
        client.send_video(1, "file-id", duration=5)

        assert "duration=5" in sent_query(mock_session).split("&")

    def test_send_video_streaming(self, client, mock_session, sent_params):
        client.send_video(1, "file-id", options=SendOptions(supports_streaming=True))
        assert sent_params(mock_session)["supports_streaming"] == "true"

        client.send_video(1, "file-id")
        assert sent_params(mock_session)["supports_streaming"] == "false"

    def test_send_video_all_fields(self, client, mock_session, sent_params):
        client.send_video(
            1,
            "file-id",
            duration=12,
            width=640,
            height=480,
            thumb="thumb-id",
            caption="clip",
            reply_to_message_id=8,
            keyboard=[[{"text": "Open", "url": "https://example.com"}]],
        )

        params = sent_params(mock_session)
        assert params["width"] == "640"
        assert params["height"] == "480"
        assert params["thumb"] == "thumb-id"
        assert params["caption"] == "clip"
        assert params["reply_to_message_id"] == "8"
        assert "reply_markup" in params

    def test_send_voice(self, client, mock_session, sent_params):
        client.send_voice(1, "voice-id", caption="listen", duration=3)

        params = sent_params(mock_session)
        assert method_of(mock_session) == "sendVoice"
        assert params["duration"] == "3"
        assert params["caption"] == "listen"

    def test_send_media_group(self, client, mock_session, sent_params):
        media = [
            InputMedia(type="photo", media="p1", caption="first"),
            {"type": "video", "media": "v1", "parse_mode": "HTML"},
        ]

        client.send_media_group(1, media, SendOptions(markdown=True, disable_notification=True))

        params = sent_params(mock_session)
        items = json.loads(params["media"])
        assert method_of(mock_session) == "sendMediaGroup"
        assert params["disable_notification"] == "true"
        assert items[0] == {"type": "photo", "media": "p1", "caption": "first", "parse_mode": "MarkdownV2"}
        assert items[1]["parse_mode"] == "HTML"

    def test_media_newlines_never_reach_the_wire(self, client, mock_session, sent_query):
        client.send_media_group(1, [{"type": "photo", "media": "p", "caption": "a b\n#c 'd'"}])

        query = sent_query(mock_session)
        for char in ("\n", " ", "#", "'"):
            assert char not in query


class TestAnswers:
    def test_answer_callback_query_defaults(self, client, mock_session, sent_params):
        client.answer_callback_query("cb-1", "Done")

        assert sent_params(mock_session) == {
            "callback_query_id": "cb-1",
            "show_alert": "false",
            "text": "Done",
        }

    def test_answer_callback_query_alert_and_url(self, client, mock_session, sent_params):
        client.answer_callback_query("cb-1", "Careful", SendOptions(show_alert=True), url="https://t.me/bot?start=x")

        params = sent_params(mock_session)
        assert params["show_alert"] == "true"
        assert params["url"] == "https://t.me/bot?start=x"

    def test_answer_inline_query(self, client, mock_session, sent_params):
        results = [{"type": "article", "id": "1", "title": "T", "input_message_content": {"message_text": "x"}}]

        client.answer_inline_query("iq-1", results, cache_time=30)

        params = sent_params(mock_session)
        assert method_of(mock_session) == "answerInlineQuery"
        assert json.loads(params["results"]) == results
        assert params["cache_time"] == "30"
        assert "is_personal" not in params
