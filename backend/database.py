import logging

from pymongo import ASCENDING, AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase
from starlette.requests import HTTPConnection

from config import MONGODB_URL, MONGODB_MAX_POOL_SIZE

logger = logging.getLogger(__name__)

# 集合
USERS = "users"
SESSIONS = "sessions"
TIMERS = "timers"


def connect_client() -> AsyncMongoClient:
    """创建进程级连接池，启动时调用一次"""
    logger.info("Opening MongoDB pool (maxPoolSize=%d)", MONGODB_MAX_POOL_SIZE)
    return AsyncMongoClient(MONGODB_URL, maxPoolSize=MONGODB_MAX_POOL_SIZE)


async def close_client(client) -> None:
    """关闭连接池，等待进行中的操作结束"""
    logger.info("Closing MongoDB pool")
    await client.close()


async def ensure_indexes(db: AsyncDatabase) -> None:
    # 创建索引
    await db[USERS].create_index("username", unique=True)
    await db[SESSIONS].create_index("sessionId", unique=True)
    await db[TIMERS].create_index([("userId", ASCENDING)])


def get_db(conn: HTTPConnection) -> AsyncDatabase:
    """从请求或WebSocket连接上取数据库句柄"""
    return conn.app.state.db
