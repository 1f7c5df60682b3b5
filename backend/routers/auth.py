import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse

from config import SESSION_COOKIE_NAME
from database import get_db
from models import User
from services.auth_gate import optional_user
from services import sessions
from services.credentials import UsernameTaken

logger = logging.getLogger(__name__)

router = APIRouter(tags=["认证"])


def redirect_with_session(session_id: str) -> RedirectResponse:
    response = RedirectResponse("/", status_code=302)
    response.set_cookie(SESSION_COOKIE_NAME, session_id, httponly=True)
    return response


@router.post("/login")
async def login(request: Request, username: str = Form(...), password: str = Form(...)):
    """用户名密码登录，成功后写入会话Cookie"""
    db = get_db(request)
    user = await sessions.authenticate(db, username, password)
    if user is None:
        return RedirectResponse("/?authError=true", status_code=302)

    session_id = await sessions.create_session(db, user.id)
    logger.info("User %s logged in", user.username)
    return redirect_with_session(session_id)


@router.post("/signup")
async def signup(request: Request, username: str = Form(...), password: str = Form(...)):
    """注册并直接登录"""
    db = get_db(request)
    try:
        user = await sessions.register(db, username, password)
    except UsernameTaken:
        return RedirectResponse("/?signupError=true", status_code=302)

    session_id = await sessions.create_session(db, user.id)
    return redirect_with_session(session_id)


@router.get("/logout")
async def logout(request: Request, user: Optional[User] = Depends(optional_user)):
    if user is None:
        return RedirectResponse("/", status_code=302)

    await sessions.destroy_session(get_db(request), request.state.session_id)
    logger.info("User %s logged out", user.username)
    response = RedirectResponse("/", status_code=302)
    response.delete_cookie(SESSION_COOKIE_NAME)
    return response
