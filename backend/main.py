import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from config import API_PREFIX, CORS_ORIGINS, DATABASE_NAME, HOST, LOG_LEVEL, PORT, PUSH_INTERVAL_SEC
from database import close_client, connect_client, ensure_indexes
from models import User
from routers import auth_router, live_router, timer_router
from services.auth_gate import optional_user

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

AUTH_ERROR_MESSAGE = "Wrong username or password"


def create_app(client_factory=connect_client, push_interval_sec: float = PUSH_INTERVAL_SEC) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # 连接池在启动时建立一次，随 app.state 传给各请求
        client = client_factory()
        app.state.mongo = client
        app.state.db = client[DATABASE_NAME]
        app.state.push_interval = push_interval_sec
        await ensure_indexes(app.state.db)
        try:
            yield
        finally:
            await close_client(client)

    app = FastAPI(
        title="计时器 API",
        description="多用户计时记录服务，支持 WebSocket 实时推送",
        version="1.0.0",
        lifespan=lifespan,
    )

    # 配置CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(PyMongoError)
    async def database_error_handler(request: Request, exc: PyMongoError):
        logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    # 注册路由
    app.include_router(auth_router)
    app.include_router(timer_router, prefix=API_PREFIX)
    app.include_router(live_router)

    @app.get("/")
    async def root(request: Request, user: Optional[User] = Depends(optional_user)):
        """首页上下文：当前用户与登录错误提示"""
        auth_error = request.query_params.get("authError")
        return {
            "user": user.model_dump() if user else None,
            "authError": AUTH_ERROR_MESSAGE if auth_error == "true" else auth_error,
            "signupError": request.query_params.get("signupError") == "true",
        }

    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=HOST, port=PORT)
