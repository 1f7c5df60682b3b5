from fastapi import APIRouter, Depends, HTTPException, Query, Request
from typing import Optional

from database import get_db
from models import TimerCreateRequest, User, now_ms
from services.auth_gate import require_user
from services.timers import create_timer, list_timers, stop_timer

router = APIRouter(prefix="/timers", tags=["计时"])


@router.get("")
async def get_timers(
    request: Request,
    is_active: Optional[bool] = Query(default=None, alias="isActive"),
    user: User = Depends(require_user),
):
    """获取计时器列表

    isActive=true 返回进行中的计时器（附 progress），isActive=false 返回已停止的
    计时器（附 duration），不传时返回全部。
    """
    timers = await list_timers(get_db(request), user.id)
    if is_active is not None:
        timers = [t for t in timers if t.is_active == is_active]

    now = now_ms()
    return [t.to_public(now) for t in sorted(timers, key=lambda t: t.start)]


@router.post("")
async def start_timer(
    body: TimerCreateRequest,
    request: Request,
    user: User = Depends(require_user),
):
    """新建计时器 - 开始时间由服务器决定，返回新计时器ID"""
    timer = await create_timer(get_db(request), user.id, body.description)
    return timer.id


@router.post("/{timer_id}/stop")
async def stop(
    timer_id: str,
    request: Request,
    user: User = Depends(require_user),
):
    """停止计时 - 只能停止自己进行中的计时器"""
    timer = await stop_timer(get_db(request), timer_id, owner_id=user.id)
    if timer is None:
        raise HTTPException(status_code=404, detail="Timer not found")
    return timer.to_public()
