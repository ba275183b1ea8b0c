from typing import Dict, List, Optional

from pydantic import BaseModel


class ActionData(BaseModel):
    """Failed form submission: what to show inline and what to refill."""

    field_errors: Optional[Dict[str, Optional[str]]] = None
    fields: Optional[Dict[str, str]] = None
    form_error: Optional[str] = None


class JokeLink(BaseModel):
    id: str
    name: str


class JokeItem(BaseModel):
    id: str
    name: str
    content: str
    jokester_id: str
    created_at: Optional[str] = None


class JokesLayout(BaseModel):
    jokes: List[JokeLink]
    username: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    service: str
