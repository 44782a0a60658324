"""
Notemail Backend — Request Dependencies
=======================================

FastAPI dependencies that hand process-wide objects to route handlers.
The mail relay is built once in `create_app` and stored on `app.state`;
tests build the app with a relay that uses a fake transport.
"""

from fastapi import Request

from notemail.services.mail_relay import MailRelay


def get_mail_relay(request: Request) -> MailRelay:
    return request.app.state.mail_relay
