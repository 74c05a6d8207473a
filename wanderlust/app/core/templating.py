"""
Server-side page rendering.

``render`` wraps ``Jinja2Templates`` and adds the values every page
needs: the flash notices (consumed here, so each is shown once) and
the current user for the navbar.
"""

from pathlib import Path

from fastapi import Request
from fastapi.templating import Jinja2Templates

from .session import pop_flashes


TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def render(request: Request, name: str, status_code: int = 200, **context):
    context.update(
        success=pop_flashes(request, "success"),
        error=pop_flashes(request, "error"),
        current_user=getattr(request.state, "user", None),
    )
    return templates.TemplateResponse(request, name, context, status_code=status_code)
