"""Tests for Email.build_mime_message."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from umbrella_mail.errors import (
    EmailBuildError,
    EmailError,
    IllegalStateError,
    MissingFromAddressError,
    MissingRecipientsError,
    NoHostNameError,
)
from umbrella_mail.session import MAIL_HOST, MailSession
from umbrella_mail.simple import SimpleEmail


class TestBuildPreconditions:
    def test_twice_raises(self, ready_email: SimpleEmail):
        ready_email.build_mime_message()
        first = ready_email.get_mime_message()

        with pytest.raises(IllegalStateError):
            ready_email.build_mime_message()
        assert ready_email.get_mime_message() is first

    def test_no_from_address(self, email: SimpleEmail):
        email.set_host_name("smtp.example.com")
        email.add_to("recipient@example.com")
        with pytest.raises(MissingFromAddressError, match="From address required"):
            email.build_mime_message()

    def test_no_recipients(self, email: SimpleEmail):
        email.set_host_name("smtp.example.com")
        email.set_from("test@example.com")
        with pytest.raises(MissingRecipientsError):
            email.build_mime_message()

    def test_missing_from_and_host_name(self, email: SimpleEmail):
        email.add_to("recipient@example.com")
        with pytest.raises(EmailError):
            email.build_mime_message()

    def test_missing_host_wraps_no_host_error(self, email: SimpleEmail):
        email.set_from("test@example.com")
        email.add_to("recipient@example.com")
        with pytest.raises(EmailBuildError) as exc_info:
            email.build_mime_message()
        assert isinstance(exc_info.value.__cause__, NoHostNameError)

    def test_failed_build_can_be_retried(self, email: SimpleEmail):
        email.set_host_name("smtp.example.com")
        email.set_from("test@example.com")
        with pytest.raises(MissingRecipientsError):
            email.build_mime_message()
        assert email.is_built is False
        assert email.get_mime_message() is None

        email.add_to("recipient@example.com")
        email.build_mime_message()
        assert email.is_built is True

    @pytest.mark.parametrize("adder", ["add_cc", "add_bcc"])
    def test_cc_or_bcc_alone_is_enough(self, email: SimpleEmail, adder):
        email.set_host_name("smtp.example.com")
        email.set_from("test@example.com")
        getattr(email, adder)("only@example.com")
        email.build_mime_message()
        assert email.is_built


class TestBuildMessage:
    def test_valid_email(self, ready_email: SimpleEmail):
        ready_email.set_subject("Test Subject")
        ready_email.set_msg("This is a test email.")
        assert ready_email.get_mime_message() is None

        ready_email.build_mime_message()

        message = ready_email.get_mime_message()
        assert ready_email.is_built is True
        assert message.from_address.address == "test@example.com"
        assert [a.address for a in message.to_addresses] == ["recipient@example.com"]
        assert message.subject == "Test Subject"
        assert message.text == "This is a test email."
        assert message.host_name == "smtp.example.com"
        assert message.is_multipart is False

    def test_with_cc_and_bcc(self, ready_email: SimpleEmail):
        ready_email.add_cc("cc@example.com")
        ready_email.add_bcc("bcc@example.com")
        ready_email.build_mime_message()
        message = ready_email.get_mime_message()
        assert [a.address for a in message.cc_addresses] == ["cc@example.com"]
        assert [a.address for a in message.bcc_addresses] == ["bcc@example.com"]

    def test_subject_with_charset(self, ready_email: SimpleEmail):
        ready_email.set_subject("Test Subject")
        ready_email.set_charset("UTF-8")
        ready_email.set_msg("This is a test email.")
        ready_email.build_mime_message()
        message = ready_email.get_mime_message()
        assert message.charset == "UTF-8"
        assert message.subject == "Test Subject"

    def test_no_subject(self, ready_email: SimpleEmail):
        ready_email.set_msg("Test email body")
        ready_email.build_mime_message()
        assert ready_email.get_mime_message().subject is None

    def test_text_and_html_content(self, ready_email: SimpleEmail):
        html = "<html><body><p>This is a test email in HTML format.</p></body></html>"
        ready_email.set_msg("This is a test email in text format.")
        ready_email.set_content(html, "text/html")
        ready_email.build_mime_message()
        message = ready_email.get_mime_message()
        assert message.is_multipart is True
        assert message.text == "This is a test email in text format."
        assert message.content == html
        assert message.content_type == "text/html"

    def test_html_only_is_single_part(self, ready_email: SimpleEmail):
        ready_email.set_content("<p>hi</p>", "text/html")
        ready_email.build_mime_message()
        assert ready_email.get_mime_message().is_multipart is False

    def test_custom_date(self, ready_email: SimpleEmail):
        custom = datetime.fromtimestamp(1633036800, tz=UTC)
        ready_email.set_sent_date(custom)
        ready_email.build_mime_message()
        assert ready_email.get_sent_date() == custom
        assert ready_email.get_mime_message().sent_date == custom

    def test_default_date_is_build_time(self, ready_email: SimpleEmail):
        before = datetime.now(UTC)
        ready_email.build_mime_message()
        after = datetime.now(UTC)
        assert before <= ready_email.get_mime_message().sent_date <= after

    def test_reply_to(self, ready_email: SimpleEmail):
        ready_email.add_reply_to("reply@example.com")
        ready_email.build_mime_message()
        reply_to = ready_email.get_mime_message().reply_to
        assert len(reply_to) == 1
        assert reply_to[0].address == "reply@example.com"

    def test_add_headers(self, ready_email: SimpleEmail):
        ready_email.add_header("X-Custom-Header", "HeaderValue1")
        ready_email.add_header("X-Another-Header", "HeaderValue2")
        ready_email.build_mime_message()
        message = ready_email.get_mime_message()
        assert message.get_header("X-Custom-Header") == ["HeaderValue1"]
        assert message.get_header("x-another-header") == ["HeaderValue2"]
        assert message.get_header("X-Missing") is None

    def test_injected_session_host(self, email: SimpleEmail):
        email.set_mail_session(MailSession(properties={MAIL_HOST: "session.example.com"}))
        email.set_from("test@example.com")
        email.add_to("recipient@example.com")
        email.build_mime_message()
        assert email.get_mime_message().host_name == "session.example.com"


class TestBuiltMessageIsolation:
    def test_later_mutation_does_not_leak(self, ready_email: SimpleEmail):
        ready_email.add_header("X-Before", "1")
        ready_email.build_mime_message()
        message = ready_email.get_mime_message()

        ready_email.add_to("late@example.com")
        ready_email.add_header("X-After", "2")
        ready_email.set_subject("changed")
        ready_email.set_sent_date(datetime(2001, 1, 1, tzinfo=UTC))

        assert [a.address for a in message.to_addresses] == ["recipient@example.com"]
        assert message.get_header("X-After") is None
        assert message.subject is None
        assert message.sent_date.year != 2001

    def test_message_is_frozen(self, ready_email: SimpleEmail):
        from pydantic import ValidationError

        ready_email.build_mime_message()
        message = ready_email.get_mime_message()
        with pytest.raises(ValidationError):
            message.subject = "changed"  # type: ignore[misc]
