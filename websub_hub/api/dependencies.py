"""Dependency injection for API routes.

The Hub is built once per application in create_app() and kept on
app.state; routes reach it through HubDep. Tests pass their own Hub to
create_app().
"""

import json
from typing import Annotated, Any

from fastapi import Depends, Request

from websub_hub.api.exceptions import InvalidRequestError
from websub_hub.hub.service import Hub

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def get_hub(request: Request) -> Hub:
    """Hub engine owned by the application."""
    return request.app.state.hub


async def get_hub_fields(request: Request) -> dict[str, Any]:
    """Read protocol fields from a form-encoded or JSON body.

    Raises:
        InvalidRequestError: If the body is not a JSON object or form
    """
    content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()

    if content_type in FORM_CONTENT_TYPES:
        form = await request.form()
        return {key: value for key, value in form.items() if isinstance(value, str)}

    raw = await request.body()
    if not raw:
        raise InvalidRequestError("Request body is empty")
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidRequestError(f"Request body is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise InvalidRequestError("Request body must be a JSON object")
    return data


HubDep = Annotated[Hub, Depends(get_hub)]
HubFieldsDep = Annotated[dict[str, Any], Depends(get_hub_fields)]
