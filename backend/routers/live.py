from fastapi import APIRouter, WebSocket

from services.live_sync import TimerFeed

router = APIRouter(tags=["实时"])


@router.websocket("/ws")
async def timers_feed(websocket: WebSocket):
    """计时器实时推送；未登录的握手直接拒绝"""
    feed = TimerFeed(websocket, interval=websocket.app.state.push_interval)
    if not await feed.authenticate():
        return
    await feed.run()
