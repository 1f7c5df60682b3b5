"""WebSocket 计时器实时推送

每个连接一个 TimerFeed：连接时推送全量快照，之后按固定间隔推送进行中的计时器，
客户端发送 {"message": "get_timers"} 时重发全量快照。
"""
import asyncio
import contextlib
import json
import logging
from enum import Enum
from typing import List, Optional

from fastapi import WebSocket, WebSocketDisconnect
from pymongo.errors import PyMongoError

from database import get_db
from models import Timer, User, now_ms
from services.auth_gate import authenticate_websocket
from services.timers import list_timers

logger = logging.getLogger(__name__)

ALL_TIMERS = "all_timers"
ACTIVE_TIMERS = "active_timers"
REFRESH_REQUEST = "get_timers"


class FeedState(str, Enum):
    CONNECTING = "connecting"
    AUTHENTICATED = "authenticated"
    STREAMING = "streaming"
    CLOSED = "closed"


def wants_refresh(payload) -> bool:
    """客户端消息是否请求全量快照；无法解析的消息一律视为否"""
    if payload is None:
        return False
    try:
        data = json.loads(payload)
    except (ValueError, RecursionError):
        # RecursionError: 嵌套过深的 JSON
        return False
    return isinstance(data, dict) and data.get("message") == REFRESH_REQUEST


class TimerFeed:
    def __init__(self, websocket: WebSocket, interval: float):
        self.websocket = websocket
        self.interval = interval
        self.state = FeedState.CONNECTING
        self.user: Optional[User] = None
        self._push_task: Optional[asyncio.Task] = None
        self._send_lock = asyncio.Lock()

    async def authenticate(self) -> bool:
        self.user = await authenticate_websocket(self.websocket)
        if self.user is None:
            self.state = FeedState.CLOSED
            return False
        self.state = FeedState.AUTHENTICATED
        return True

    async def run(self) -> None:
        if self.state is not FeedState.AUTHENTICATED:
            raise RuntimeError(f"cannot stream from state {self.state.value}")

        await self.websocket.accept()
        self.state = FeedState.STREAMING
        logger.info("Timer feed opened for user %s", self.user.username)
        try:
            await self.send_all_timers()
            self._push_task = asyncio.create_task(self._push_active_timers())
            await self._receive_loop()
        except WebSocketDisconnect:
            pass
        except PyMongoError:
            logger.exception("Timer feed for user %s failed", self.user.username)
            await self._close(code=1011)
        finally:
            await self._cancel_push()
            self.state = FeedState.CLOSED
            logger.info("Timer feed closed for user %s", self.user.username)

    async def send_all_timers(self) -> None:
        timers = await list_timers(get_db(self.websocket), self.user.id)
        await self._send(ALL_TIMERS, timers)

    async def send_active_timers(self) -> None:
        timers = await list_timers(get_db(self.websocket), self.user.id)
        await self._send(ACTIVE_TIMERS, [t for t in timers if t.is_active])

    async def _send(self, kind: str, timers: List[Timer]) -> None:
        now = now_ms()
        timers = sorted(timers, key=lambda t: t.start)
        async with self._send_lock:
            await self.websocket.send_json({
                "type": kind,
                "timers": [t.to_public(now) for t in timers],
            })

    async def _receive_loop(self) -> None:
        while True:
            message = await self.websocket.receive()
            if message["type"] == "websocket.disconnect":
                return
            payload = message.get("text")
            if payload is None:
                payload = message.get("bytes")
            if wants_refresh(payload):
                await self.send_all_timers()

    async def _push_active_timers(self) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time()
        while True:
            # 按固定节拍推送，落后时跳过错过的节拍
            deadline = max(deadline + self.interval, loop.time())
            await asyncio.sleep(deadline - loop.time())
            try:
                await self.send_active_timers()
            except PyMongoError:
                logger.exception("Active timer push for user %s failed", self.user.username)
                await self._close(code=1011)
                return
            except (WebSocketDisconnect, RuntimeError) as exc:
                logger.info("Active timer push stopped for user %s: %r", self.user.username, exc)
                return

    async def _cancel_push(self) -> None:
        task, self._push_task = self._push_task, None
        if task is None:
            return
        if task.done():
            # 推送任务已自行退出；取出异常，避免在 finally 中再次抛出
            if not task.cancelled() and task.exception() is not None:
                logger.error("Active timer push for user %s crashed", self.user.username,
                             exc_info=task.exception())
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _close(self, code: int) -> None:
        async with self._send_lock:
            with contextlib.suppress(RuntimeError):
                await self.websocket.close(code=code)
