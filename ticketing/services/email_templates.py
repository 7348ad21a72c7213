from __future__ import annotations

from dataclasses import dataclass
from html import escape


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    html_body: str
    text_body: str


def login_code_email(code: str, ttl_minutes: int) -> RenderedEmail:
    text = (
        f"Your sign-in code is {code}.\n\n"
        f"It expires in {ttl_minutes} minutes. If you did not ask for it, ignore this email."
    )
    html = (
        f"<p>Your sign-in code is <strong>{escape(code)}</strong>.</p>"
        f"<p>It expires in {ttl_minutes} minutes. If you did not ask for it, ignore this email.</p>"
    )
    return RenderedEmail(subject="Your sign-in code", html_body=html, text_body=text)


def invitation_email(event_name: str, inviter: str, event_code: str, app_url: str) -> RenderedEmail:
    text = (
        f"{inviter} invited you to {event_name}.\n\n"
        f"Register at {app_url} with the event code {event_code}."
    )
    html = (
        f"<p>{escape(inviter)} invited you to <strong>{escape(event_name)}</strong>.</p>"
        f'<p>Register at <a href="{escape(app_url)}">{escape(app_url)}</a> '
        f"with the event code <strong>{escape(event_code)}</strong>.</p>"
    )
    return RenderedEmail(subject=f"You're invited to {event_name}", html_body=html, text_body=text)
