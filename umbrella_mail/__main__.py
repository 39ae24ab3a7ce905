"""Entry point: build a message from the command line and print it.

Usage::

    MAIL_HOST_NAME=smtp.example.com python -m umbrella_mail \
        --from me@example.com --to you@example.com --subject Hi --text "Hello"

Connection settings come from ``MAIL_*`` env vars; ``--host`` overrides
the host name.
"""

from __future__ import annotations

import argparse
import sys

from .base import TEXT_HTML
from .config import SessionConfig
from .errors import EmailError
from .logging import setup_logging
from .simple import SimpleEmail


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="python -m umbrella_mail")
    parser.add_argument("--host", help="SMTP host (overrides MAIL_HOST_NAME)")
    parser.add_argument("--from", dest="from_address", required=True)
    parser.add_argument("--to", action="append", default=[])
    parser.add_argument("--cc", action="append", default=[])
    parser.add_argument("--bcc", action="append", default=[])
    parser.add_argument("--reply-to", action="append", default=[])
    parser.add_argument("--subject")
    parser.add_argument("--charset")
    parser.add_argument("--text", help="Plain-text body")
    parser.add_argument("--html", help="HTML alternative body")
    parser.add_argument("--header", action="append", default=[], metavar="NAME=VALUE")
    parser.add_argument("--log-level", default="WARNING")
    return parser


def build(args: argparse.Namespace, config: SessionConfig | None = None) -> SimpleEmail:
    email = SimpleEmail(config)
    if args.host:
        email.set_host_name(args.host)
    email.set_from(args.from_address)
    for to in args.to:
        email.add_to(to)
    for cc in args.cc:
        email.add_cc(cc)
    if args.bcc:
        email.add_bcc(args.bcc)
    for reply_to in args.reply_to:
        email.add_reply_to(reply_to)
    for header in args.header:
        name, _, value = header.partition("=")
        email.add_header(name.strip(), value.strip())
    if args.subject is not None:
        email.set_subject(args.subject)
    if args.charset:
        email.set_charset(args.charset)
    if args.text:
        email.set_msg(args.text)
    if args.html:
        email.set_content(args.html, TEXT_HTML)

    email.build_mime_message()
    return email


def main(argv: list[str] | None = None) -> int:
    args = _parser().parse_args(argv)
    setup_logging(json=False, level=args.log_level)

    try:
        email = build(args)
    except (EmailError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    message = email.get_mime_message()
    assert message is not None
    sys.stdout.write(message.to_email_message().as_string())
    return 0


if __name__ == "__main__":
    sys.exit(main())
