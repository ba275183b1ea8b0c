"""
Jokes App
Handles: random joke, joke submission, joke detail, login/register, logout
Port: 8000

- Store and session service are request-scoped dependencies, not globals
- Validation failures re-render the form (400); 401/404 are raised and rendered
  by exception handlers; anything else gets a generic apology page
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from jokes_app import actions, config
from jokes_app.database import init_db
from jokes_app.dependencies import get_sessions, get_store
from jokes_app.exceptions import JokeNotFoundException, UnauthorizedException
from jokes_app.models import ActionData, HealthResponse, JokeItem, JokeLink, JokesLayout
from jokes_app.observability import setup_logging
from jokes_app.session import SessionService
from jokes_app.store import JokeStore

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=os.path.join(os.path.dirname(__file__), "templates"))

DEFAULT_ERROR_MESSAGE = "Something unexpected went wrong. Sorry about that."
ERROR_MESSAGES = {
    "/jokes": "I did a whoopsies.",
}


# ── App ───────────────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(config.LOG_LEVEL, config.LOG_FORMAT)
    init_db(seed=config.SEED_DATA)
    logger.info("Jokes app started")
    yield
    logger.info("Jokes app shutting down")


app = FastAPI(title="Jokes App", version="1.0.0", lifespan=lifespan)


def _layout(store: JokeStore, sessions: SessionService, request: Request) -> JokesLayout:
    user = sessions.get_user(request)
    return JokesLayout(
        jokes=[JokeLink(id=j.id, name=j.name) for j in store.latest_jokes(5)],
        username=user.username if user else None,
    )


def _render_form(request: Request, template: str, data: ActionData, **context):
    return templates.TemplateResponse(
        request,
        template,
        {"action_data": data, **context},
        status_code=400,
    )


# ── Pages ─────────────────────────────────────────────────────────────────────

@app.get("/", response_class=HTMLResponse)
async def home(request: Request):
    return templates.TemplateResponse(request, "index.html", {})


@app.get("/jokes", response_class=HTMLResponse)
async def jokes_index(
    request: Request,
    store: JokeStore = Depends(get_store),
    sessions: SessionService = Depends(get_sessions),
):
    joke = actions.random_joke(store)
    return templates.TemplateResponse(
        request,
        "jokes_index.html",
        {
            "layout": _layout(store, sessions, request),
            "joke": JokeItem.model_validate(joke, from_attributes=True),
        },
    )


@app.get("/jokes/new", response_class=HTMLResponse)
async def new_joke_form(
    request: Request,
    store: JokeStore = Depends(get_store),
    sessions: SessionService = Depends(get_sessions),
):
    actions.new_joke_loader(sessions, request)
    return templates.TemplateResponse(
        request,
        "new_joke.html",
        {"layout": _layout(store, sessions, request), "action_data": None},
    )


@app.post("/jokes/new")
async def new_joke_submit(
    request: Request,
    store: JokeStore = Depends(get_store),
    sessions: SessionService = Depends(get_sessions),
):
    form = await request.form()
    result = actions.create_joke(store, sessions, request, form)
    if isinstance(result, ActionData):
        return _render_form(request, "new_joke.html", result, layout=_layout(store, sessions, request))
    return result


@app.get("/jokes/{joke_id}", response_class=HTMLResponse)
async def joke_detail(
    joke_id: str,
    request: Request,
    store: JokeStore = Depends(get_store),
    sessions: SessionService = Depends(get_sessions),
):
    joke = store.get_joke(joke_id)
    if not joke:
        raise JokeNotFoundException(detail="Joke not found", message=f"Huh? What the heck is {joke_id}?")
    return templates.TemplateResponse(
        request,
        "joke.html",
        {
            "layout": _layout(store, sessions, request),
            "joke": JokeItem.model_validate(joke, from_attributes=True),
        },
    )


@app.get("/login", response_class=HTMLResponse)
async def login_form(request: Request):
    return templates.TemplateResponse(
        request,
        "login.html",
        {"redirect_to": request.query_params.get("redirectTo", ""), "action_data": None},
    )


@app.post("/login")
async def login_submit(
    request: Request,
    store: JokeStore = Depends(get_store),
    sessions: SessionService = Depends(get_sessions),
):
    form = await request.form()
    result = actions.login(store, sessions, form)
    if isinstance(result, ActionData):
        redirect_to = form.get("redirectTo")
        return _render_form(
            request,
            "login.html",
            result,
            redirect_to=redirect_to if isinstance(redirect_to, str) else "",
        )
    return result


@app.post("/logout")
async def logout(request: Request, sessions: SessionService = Depends(get_sessions)):
    return sessions.logout(request)


@app.get("/health", response_model=HealthResponse)
async def health():
    return {"status": "ok", "service": "jokes"}


# ── Error pages ───────────────────────────────────────────────────────────────

@app.exception_handler(JokeNotFoundException)
async def joke_not_found(request: Request, exc: JokeNotFoundException):
    return templates.TemplateResponse(
        request,
        "error.html",
        {"message": exc.message, "login_link": False},
        status_code=exc.status_code,
    )


@app.exception_handler(UnauthorizedException)
async def unauthorized(request: Request, exc: UnauthorizedException):
    return templates.TemplateResponse(
        request,
        "error.html",
        {"message": "You must be logged in to create a joke.", "login_link": True},
        status_code=exc.status_code,
    )


@app.exception_handler(Exception)
async def server_error(request: Request, exc: Exception):
    """Catch-all: log the traceback, show no details."""
    logger.error(
        "Unhandled exception on %s: %s",
        request.url.path,
        exc,
        exc_info=True,
        extra={"path": request.url.path, "status_code": 500},
    )
    return templates.TemplateResponse(
        request,
        "error.html",
        {"message": ERROR_MESSAGES.get(request.url.path, DEFAULT_ERROR_MESSAGE), "login_link": False},
        status_code=500,
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("jokes_app.main:app", host="0.0.0.0", port=8000, reload=True)
