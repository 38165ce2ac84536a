"""Tests for the header set and header value encoding."""

from email.header import Header
from email.message import Message

from fluentmail.mime.headers import HeaderSet, apply_headers, canonical_name, encode_value


class TestCanonicalName:
    def test_capitalizes_each_word(self):
        assert canonical_name("content-type") == "Content-Type"
        assert canonical_name("TO") == "To"
        assert canonical_name("reply-TO") == "Reply-To"
        assert canonical_name("x-mailer") == "X-Mailer"

    def test_special_names(self):
        assert canonical_name("message-id") == "Message-ID"
        assert canonical_name("MIME-version") == "MIME-Version"


class TestHeaderSet:
    def test_set_replaces_case_insensitively(self):
        headers = HeaderSet()
        headers.set("subject", "first")
        headers.set("SUBJECT", "second")

        assert len(headers) == 1
        assert headers.get("Subject") == "second"
        assert headers.names() == ["Subject"]

    def test_keeps_insertion_order(self):
        headers = HeaderSet([("To", "a@x"), ("From", "b@x"), ("Subject", "s")])
        headers.set("to", "c@x")

        assert headers.names() == ["To", "From", "Subject"]
        assert headers.items()[0] == ("To", "c@x")

    def test_remove_and_contains(self):
        headers = HeaderSet([("Cc", "a@x")])
        assert "cc" in headers
        headers.remove("CC")
        assert "Cc" not in headers
        headers.remove("Cc")

    def test_copy_is_independent(self):
        headers = HeaderSet([("To", "a@x")])
        clone = headers.copy()
        clone.set("To", "b@x")

        assert headers.get("To") == "a@x"


class TestEncodeValue:
    def test_ascii_untouched(self):
        assert encode_value("Subject", "plain") == "plain"

    def test_non_ascii_becomes_encoded_word(self):
        value = encode_value("Subject", "Café")
        assert isinstance(value, Header)
        assert value.encode().startswith("=?utf-8?")

    def test_address_header_encodes_display_name_only(self):
        value = encode_value("To", "Zoë <zoe@example.com>, bob@example.com")
        assert isinstance(value, str)
        assert value.startswith("=?utf-8?")
        assert "<zoe@example.com>" in value
        assert value.endswith("bob@example.com")


class TestApplyHeaders:
    def test_without_overwrite_keeps_existing(self):
        message = Message()
        message["Subject"] = "kept"
        apply_headers(HeaderSet([("Subject", "new"), ("To", "a@x")]), message, overwrite=False)

        assert message.get_all("Subject") == ["kept"]
        assert message["To"] == "a@x"

    def test_with_overwrite_replaces(self):
        message = Message()
        message["Subject"] = "old"
        apply_headers(HeaderSet([("Subject", "new")]), message, overwrite=True)

        assert message.get_all("Subject") == ["new"]

    def test_skip(self):
        message = Message()
        apply_headers(
            HeaderSet([("Content-Type", "text/plain"), ("To", "a@x")]),
            message,
            overwrite=True,
            skip={"content-type"},
        )

        assert "Content-Type" not in message
        assert message["To"] == "a@x"
