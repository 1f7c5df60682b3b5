"""用户与会话记录的持久化"""
from typing import Optional

from bson import ObjectId
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from database import SESSIONS, USERS
from models import Session, UserInDB


class UsernameTaken(Exception):
    def __init__(self, username: str):
        super().__init__(f"username already exists: {username}")
        self.username = username


async def find_user_by_username(db: AsyncDatabase, username: str) -> Optional[UserInDB]:
    doc = await db[USERS].find_one({"username": username})
    return UserInDB.model_validate(doc) if doc else None


async def find_user_by_id(db: AsyncDatabase, user_id: str) -> Optional[UserInDB]:
    if not ObjectId.is_valid(user_id):
        return None
    doc = await db[USERS].find_one({"_id": ObjectId(user_id)})
    return UserInDB.model_validate(doc) if doc else None


async def insert_user(db: AsyncDatabase, username: str, password_hash: str) -> str:
    """写入新用户，返回字符串形式的用户ID"""
    try:
        result = await db[USERS].insert_one({
            "username": username,
            "passwordHash": password_hash,
        })
    except DuplicateKeyError:
        raise UsernameTaken(username)
    return str(result.inserted_id)


async def insert_session(db: AsyncDatabase, session_id: str, user_id: str) -> None:
    session = Session(session_id=session_id, user_id=user_id)
    await db[SESSIONS].insert_one(session.model_dump(by_alias=True))


async def find_session(db: AsyncDatabase, session_id: str) -> Optional[Session]:
    doc = await db[SESSIONS].find_one(
        {"sessionId": session_id},
        projection={"_id": 0, "sessionId": 1, "userId": 1},
    )
    return Session.model_validate(doc) if doc else None


async def delete_session(db: AsyncDatabase, session_id: str) -> None:
    await db[SESSIONS].delete_one({"sessionId": session_id})
