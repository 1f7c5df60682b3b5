import os
from dotenv import load_dotenv

load_dotenv()

# MongoDB配置
MONGODB_URL = os.getenv("MONGODB_URL", "mongodb://localhost:27017")
DATABASE_NAME = os.getenv("DATABASE_NAME", "time_tracker")
MONGODB_MAX_POOL_SIZE = int(os.getenv("MONGODB_MAX_POOL_SIZE", "10"))

# 会话Cookie配置
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "sessionId")

# 随机令牌配置（会话ID与计时器ID共用）
TOKEN_ALPHABET = os.getenv("TOKEN_ALPHABET", "0123456789")
TOKEN_LENGTH = int(os.getenv("TOKEN_LENGTH", "12"))

# 实时推送间隔（秒）
PUSH_INTERVAL_SEC = float(os.getenv("PUSH_INTERVAL_SEC", "1.0"))

# 服务器配置
API_PREFIX = "/api"
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",") if o.strip()]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
