import logging
from typing import Optional

from pymongo.asynchronous.database import AsyncDatabase

from models import User
from security import generate_token, hash_password, verify_password
from services import credentials

logger = logging.getLogger(__name__)


async def create_session(db: AsyncDatabase, user_id: str) -> str:
    """为用户创建会话，返回会话令牌"""
    session_id = generate_token()
    await credentials.insert_session(db, session_id, user_id)
    return session_id


async def resolve_session(db: AsyncDatabase, session_id: str) -> Optional[User]:
    """根据会话令牌查找用户

    会话不存在，或会话指向的用户已不存在时返回 None。
    """
    session = await credentials.find_session(db, session_id)
    if session is None:
        return None
    user = await credentials.find_user_by_id(db, session.user_id)
    if user is None:
        logger.warning("Session points at missing user %s", session.user_id)
        return None
    return user.public()


async def destroy_session(db: AsyncDatabase, session_id: str) -> None:
    await credentials.delete_session(db, session_id)


async def register(db: AsyncDatabase, username: str, password: str) -> User:
    """注册新用户；用户名重复时抛出 UsernameTaken"""
    user_id = await credentials.insert_user(db, username, hash_password(password))
    logger.info("Registered user %s", username)
    return User(id=user_id, username=username)


async def authenticate(db: AsyncDatabase, username: str, password: str) -> Optional[User]:
    # 不区分"用户不存在"和"密码错误"
    user = await credentials.find_user_by_username(db, username)
    if user is None or not verify_password(user.password_hash, password):
        logger.info("Failed login for %s", username)
        return None
    return user.public()
