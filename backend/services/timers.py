import logging
from typing import List, Optional

from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase

from database import TIMERS
from models import Timer, now_ms
from security import generate_token

logger = logging.getLogger(__name__)


async def list_timers(db: AsyncDatabase, user_id: str) -> List[Timer]:
    """用户的全部计时器，顺序不保证"""
    docs = await db[TIMERS].find({"userId": user_id}).to_list(None)
    return [Timer.model_validate(doc) for doc in docs]


async def create_timer(db: AsyncDatabase, user_id: str, description: str) -> Timer:
    timer = Timer(
        id=generate_token(),
        user_id=user_id,
        description=description,
        start=now_ms(),
        is_active=True,
    )
    await db[TIMERS].insert_one(timer.model_dump(by_alias=True, exclude_none=True))
    logger.info("Created timer %s for user %s", timer.id, user_id)
    return timer


async def stop_timer(db: AsyncDatabase, timer_id: str, owner_id: Optional[str] = None) -> Optional[Timer]:
    """停止计时器，返回更新后的记录

    查找与更新在一次 find_one_and_update 中完成，并发的两次停止只有一次生效。
    计时器不存在、已停止或不属于 owner_id 时返回 None。
    """
    query = {"_id": timer_id, "isActive": True}
    if owner_id is not None:
        query["userId"] = owner_id

    doc = await db[TIMERS].find_one_and_update(
        query,
        {"$set": {"isActive": False, "end": now_ms()}},
        return_document=ReturnDocument.AFTER,
    )
    if doc is None:
        return None
    logger.info("Stopped timer %s", timer_id)
    return Timer.model_validate(doc)
