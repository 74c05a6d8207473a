"""
Signup, login and logout.

A successful signup or login stores the user id in the session (under
a fresh session id); logout removes it.  Failures are reported with a
flash notice on the form page rather than with an error status.
"""

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError

from wanderlust.app.api.deps import pop_redirect_url, require_login
from wanderlust.app.core.session import flash, get_session
from wanderlust.app.core.templating import render
from wanderlust.app.schemas import validation_message
from wanderlust.app.schemas.user import UserCreate, UserRead
from wanderlust.app.services.user_service import UserService


router = APIRouter()

LOGIN_FAILED_MESSAGE = "Password or username is incorrect"


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=status.HTTP_302_FOUND)


def _log_in(request: Request, user: UserRead) -> None:
    session = get_session(request)
    session.regenerate()
    session["user_id"] = user.id
    request.state.user = user


@router.get("/signup", response_class=HTMLResponse)
async def signup_form(request: Request):
    return render(request, "users/signup.html")


@router.post("/signup")
async def signup(request: Request):
    """Register a user and log them in straight away."""
    form = await request.form()
    try:
        data = UserCreate(
            username=form.get("username", ""),
            email=form.get("email", ""),
            password=form.get("password", ""),
        )
        user = await UserService.register(data)
    except ValidationError as e:
        flash(request, "error", validation_message(e))
        return _redirect("/signup")
    except ValueError as e:
        flash(request, "error", str(e))
        return _redirect("/signup")
    _log_in(request, user)
    flash(request, "success", "Welcome to Wanderlust!")
    return _redirect("/listings")


@router.get("/login", response_class=HTMLResponse)
async def login_form(request: Request):
    return render(request, "users/login.html")


@router.post("/login")
async def login(request: Request):
    """Check the credentials and return to the page that required a login."""
    form = await request.form()
    username = str(form.get("username", "")).strip()
    user = await UserService.authenticate(username, str(form.get("password", "")))
    if user is None:
        flash(request, "error", LOGIN_FAILED_MESSAGE)
        return _redirect("/login")
    redirect_url = pop_redirect_url(request)
    _log_in(request, user)
    logging.getLogger(__name__).info("User %s logged in", user.username)
    flash(request, "success", "Welcome back!")
    return _redirect(redirect_url or "/listings")


@router.get("/logout")
async def logout(request: Request, current_user: UserRead = Depends(require_login)):
    session = get_session(request)
    session.pop("user_id", None)
    session.regenerate()
    request.state.user = None
    flash(request, "success", "Logged out successfully!")
    return _redirect("/listings")
