"""Tests for MIME tree shape decisions."""

from email.message import Message

import pytest

from fluentmail import FileBytes, create_message
from fluentmail.mime.assembler import assemble, make_boundary
from fluentmail.mime.headers import HeaderSet
from fluentmail.mime.parts import HTML_DEFAULTS, TEXT_DEFAULTS, Attachment, TextPart


def _text(body="Hello"):
    return TextPart.create("text_body", body, {}, TEXT_DEFAULTS)


def _html(body="<p>Hello</p>"):
    return TextPart.create("html_body", body, {}, HTML_DEFAULTS)


def _attachment(content=b"\x89PNG....", **attrs):
    return Attachment.create(content, attrs)


class TestAssemble:
    def test_nothing_set_yields_headers_only_message(self):
        headers = HeaderSet([("To", "a@example.com"), ("From", "b@example.com")])
        message = assemble(headers, None, None, [])

        assert not message.is_multipart()
        assert message.get_payload() == ""
        assert message["To"] == "a@example.com"
        assert message.as_string().startswith("To: a@example.com\nFrom: b@example.com\n")

    def test_empty_builder_builds(self):
        message = create_message().build()

        assert isinstance(message, Message)
        assert message.get_payload() == ""

    def test_text_only_is_single_leaf(self):
        message = assemble(HeaderSet([("Subject", "s")]), _text(), None, [])

        assert not message.is_multipart()
        assert message.get_content_type() == "text/plain"
        assert message.get_content_charset() == "utf-8"
        assert message["Content-Transfer-Encoding"] == "quoted-printable"
        assert message["Subject"] == "s"

    def test_html_only_is_single_leaf(self):
        message = assemble(HeaderSet(), None, _html(), [])

        assert not message.is_multipart()
        assert message.get_content_type() == "text/html"

    def test_text_and_html_is_alternative(self):
        message = assemble(HeaderSet([("To", "a@example.com")]), _text(), _html(), [])

        assert message.get_content_type() == "multipart/alternative"
        children = message.get_payload()
        assert [c.get_content_type() for c in children] == ["text/plain", "text/html"]
        assert message["To"] == "a@example.com"

    def test_text_html_and_attachment_nests_alternative_in_mixed(self):
        message = assemble(HeaderSet(), _text(), _html(), [_attachment(filename="a.png")])

        assert message.get_content_type() == "multipart/mixed"
        alternative, attachment = message.get_payload()
        assert alternative.get_content_type() == "multipart/alternative"
        assert len(alternative.get_payload()) == 2
        assert attachment.get_content_type() == "image/png"

    def test_body_and_attachments_keep_order(self):
        message = assemble(
            HeaderSet(),
            _text(),
            None,
            [_attachment(b"%PDF-1", filename="one.pdf"), _attachment(b"x", filename="two.csv")],
        )

        assert [c.get_content_type() for c in message.get_payload()] == [
            "text/plain",
            "application/pdf",
            "text/csv",
        ]

    def test_attachments_without_body_are_mixed(self):
        message = assemble(HeaderSet(), None, None, [_attachment(), _attachment()])

        assert message.get_content_type() == "multipart/mixed"
        assert len(message.get_payload()) == 2

    def test_lone_attachment_is_promoted(self):
        headers = HeaderSet([("To", "a@example.com"), ("Subject", "file")])
        message = assemble(headers, None, None, [_attachment(filename="a.png")])

        assert not message.is_multipart()
        assert message.get_content_type() == "image/png"
        assert message["To"] == "a@example.com"
        assert message["Subject"] == "file"

    def test_promotion_never_clobbers_part_headers(self):
        headers = HeaderSet([("Content-Type", "application/x-bogus"), ("X-Tag", "1")])
        message = assemble(headers, _text(), None, [])

        assert message.get_content_type() == "text/plain"
        assert message.get_all("Content-Type") == ['text/plain; charset="utf-8"']
        assert message["X-Tag"] == "1"

    def test_mixed_root_keeps_its_structural_headers(self):
        headers = HeaderSet([("Content-Type", "text/plain"), ("Subject", "s")])
        message = assemble(headers, _text(), None, [_attachment()])

        assert message.get_content_type() == "multipart/mixed"
        assert len(message.get_all("Content-Type")) == 1
        assert message["Subject"] == "s"

    def test_mixed_root_headers_replace_defaults(self):
        message = assemble(HeaderSet([("MIME-Version", "1.0")]), _text(), None, [_attachment()])

        assert message.get_all("MIME-Version") == ["1.0"]

    def test_top_level_headers_not_copied_into_nested_parts(self):
        message = assemble(HeaderSet([("Subject", "s")]), _text(), _html(), [_attachment()])

        alternative, attachment = message.get_payload()
        assert alternative["Subject"] is None
        assert attachment["Subject"] is None


class TestIdempotence:
    def test_repeated_builds_serialize_identically(self, tmp_path):
        source = tmp_path / "data.csv"
        source.write_text("a,b\n1,2\n")
        builder = (
            create_message()
            .from_("a@example.com")
            .to("b@example.com")
            .subject("Report")
            .text_body("See attached")
            .html_body("<p>See attached</p>")
            .attach_file(source)
        )

        first = builder.build()
        second = builder.build()

        assert first is not second
        assert first.as_string() == second.as_string()
        assert builder.as_string() == first.as_string()

    def test_build_reflects_later_mutation(self):
        builder = create_message().text_body("one")
        assert not builder.build().is_multipart()

        builder.html_body("<b>two</b>")
        assert builder.build().get_content_type() == "multipart/alternative"

    def test_returned_tree_is_not_shared(self):
        builder = create_message().subject("s").text_body("hi")
        first = builder.build()
        first["X-Added"] = "later"

        assert builder.build()["X-Added"] is None

    def test_boundary_is_deterministic(self):
        parts = [_text().to_mime(), _html().to_mime()]
        assert make_boundary(parts) == make_boundary([_text().to_mime(), _html().to_mime()])
        assert make_boundary(parts) != make_boundary([_text("other").to_mime()])


@pytest.mark.parametrize(
    "text,html,attachments,expected",
    [
        (False, False, 0, "text/plain"),
        (True, False, 0, "text/plain"),
        (False, True, 0, "text/html"),
        (True, True, 0, "multipart/alternative"),
        (False, False, 1, "application/pdf"),
        (True, False, 1, "multipart/mixed"),
        (False, True, 1, "multipart/mixed"),
        (True, True, 1, "multipart/mixed"),
        (False, False, 2, "multipart/mixed"),
    ],
)
def test_shape_table(text, html, attachments, expected):
    builder = create_message().to("a@example.com")
    if text:
        builder.text_body("text")
    if html:
        builder.html_body("<p>html</p>")
    for index in range(attachments):
        builder.attach_file(FileBytes(b"%PDF-1.4", f"doc{index}.pdf"))

    assert builder.build().get_content_type() == expected
