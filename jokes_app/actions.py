"""
Request handlers for the jokes pages, independent of the web framework wiring.

Every function takes its store and session service explicitly. Failed form
submissions come back as ActionData; transport-level failures (401, 404) are
raised as HTTPException subclasses and rendered by the app's exception handlers.
"""

import logging
import random
from typing import Any, Mapping, Optional, Union

from fastapi import Request
from fastapi.responses import RedirectResponse

from jokes_app.database import DBJoke
from jokes_app.exceptions import JokeNotFoundException
from jokes_app.models import ActionData
from jokes_app.session import SessionService
from jokes_app.store import JokeStore

logger = logging.getLogger(__name__)

DEFAULT_REDIRECT = "/jokes"
ALLOWED_REDIRECTS = ("/jokes", "/", "https://remix.run")

FORM_NOT_SUBMITTED = "Form not submitted correctly"
MAX_PASSWORD_BYTES = 72

ActionResult = Union[ActionData, RedirectResponse]


def bad_request(field_errors=None, fields=None, form_error: Optional[str] = None) -> ActionData:
    return ActionData(field_errors=field_errors, fields=fields, form_error=form_error)


# ── Validators ────────────────────────────────────────────────────────────────

def validate_joke_name(name: str) -> Optional[str]:
    if len(name) < 3:
        return "Name too short"
    return None


def validate_joke_content(content: str) -> Optional[str]:
    if len(content) < 10:
        return "Content too short"
    return None


def validate_username(username: str) -> Optional[str]:
    if len(username) < 3:
        return "Username must be at least 3 characters"
    return None


def validate_password(password: str) -> Optional[str]:
    if len(password) < 6:
        return "Password must be at least 6 characters"
    # bcrypt only accepts up to 72 bytes
    if len(password.encode()) > MAX_PASSWORD_BYTES:
        return f"Password must be at most {MAX_PASSWORD_BYTES} bytes"
    return None


def validate_url(url: str) -> str:
    """Only known destinations are honoured; anything else goes to /jokes."""
    if url in ALLOWED_REDIRECTS:
        return url
    return DEFAULT_REDIRECT


# ── Random joke ───────────────────────────────────────────────────────────────

def random_joke(store: JokeStore, rng=random) -> DBJoke:
    count = store.count_jokes()
    if count == 0:
        raise JokeNotFoundException()

    # count and fetch are separate queries; a row deleted in between shows as 404
    skip = rng.randrange(count)
    jokes = store.find_jokes(take=1, skip=skip)
    if not jokes:
        raise JokeNotFoundException()
    return jokes[0]


# ── New joke ──────────────────────────────────────────────────────────────────

def new_joke_loader(sessions: SessionService, request: Request) -> dict:
    sessions.require_user_id(request)
    return {}


def create_joke(
    store: JokeStore,
    sessions: SessionService,
    request: Request,
    form: Mapping[str, Any],
) -> ActionResult:
    name = form.get("name")
    content = form.get("content")
    if not isinstance(name, str) or not isinstance(content, str):
        return bad_request(form_error=FORM_NOT_SUBMITTED)

    field_errors = {
        "name": validate_joke_name(name),
        "content": validate_joke_content(content),
    }
    fields = {"name": name, "content": content}
    if any(field_errors.values()):
        return bad_request(field_errors=field_errors, fields=fields)

    user_id = sessions.require_user_id(request)
    joke = store.create_joke(name=name, content=content, jokester_id=user_id)
    logger.info("Created joke %r", joke.name, extra={"joke_id": joke.id, "user_id": user_id})
    return RedirectResponse(f"/jokes/{joke.id}", status_code=303)


# ── Login / register ──────────────────────────────────────────────────────────

def login(store: JokeStore, sessions: SessionService, form: Mapping[str, Any]) -> ActionResult:
    login_type = form.get("loginType")
    username = form.get("username")
    password = form.get("password")
    raw_redirect = form.get("redirectTo")
    redirect_to = validate_url(raw_redirect if isinstance(raw_redirect, str) and raw_redirect else DEFAULT_REDIRECT)

    if not isinstance(login_type, str) or not isinstance(username, str) or not isinstance(password, str):
        return bad_request(form_error=FORM_NOT_SUBMITTED)

    # the password is never sent back to the browser
    fields = {"loginType": login_type, "username": username}
    field_errors = {
        "username": validate_username(username),
        "password": validate_password(password),
    }
    if any(field_errors.values()):
        return bad_request(field_errors=field_errors, fields=fields)

    if login_type == "login":
        user = sessions.login(username, password)
        if not user:
            return bad_request(fields=fields, form_error="Username or password incorrect")
        return sessions.create_user_session(user.id, redirect_to)

    if login_type == "register":
        if store.find_user(username):
            return bad_request(fields=fields, form_error=f"User with username {username} already exists")
        user = sessions.register(username, password)
        if not user:
            return bad_request(fields=fields, form_error="Something went wrong trying to create a new user.")
        return sessions.create_user_session(user.id, redirect_to)

    return bad_request(fields=fields, form_error="Login type invalid")
