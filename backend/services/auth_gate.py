"""认证守卫：HTTP 路由与 WebSocket 握手共用同一套会话解析"""
import logging
from typing import Optional

from fastapi import HTTPException, Request, WebSocket
from fastapi.responses import PlainTextResponse
from starlette.requests import HTTPConnection

from config import SESSION_COOKIE_NAME
from database import get_db
from models import User
from services import sessions

logger = logging.getLogger(__name__)

DENIAL_EXTENSION = "websocket.http.response"


async def resolve_identity(conn: HTTPConnection) -> Optional[User]:
    """从 Cookie 解析当前用户，并挂到 conn.state 上供后续处理使用"""
    session_id = conn.cookies.get(SESSION_COOKIE_NAME)
    conn.state.user = None
    conn.state.session_id = None
    if not session_id:
        return None

    user = await sessions.resolve_session(get_db(conn), session_id)
    conn.state.user = user
    conn.state.session_id = session_id
    return user


async def optional_user(request: Request) -> Optional[User]:
    return await resolve_identity(request)


async def require_user(request: Request) -> User:
    user = await resolve_identity(request)
    if user is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user


async def reject_handshake(websocket: WebSocket) -> None:
    """在升级完成前拒绝握手"""
    if DENIAL_EXTENSION in (websocket.scope.get("extensions") or {}):
        await websocket.send_denial_response(PlainTextResponse("Unauthorized", status_code=401))
    else:
        # 服务器不支持拒绝响应扩展时，未 accept 即 close 会返回 403
        await websocket.close(code=1008)


async def authenticate_websocket(websocket: WebSocket) -> Optional[User]:
    """握手阶段认证；失败时已拒绝连接并返回 None，调用方不得 accept"""
    user = await resolve_identity(websocket)
    if user is None:
        logger.info("Rejected WebSocket handshake from %s", websocket.client)
        await reject_handshake(websocket)
    return user
