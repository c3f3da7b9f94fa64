import os
import time
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from community.api import auth, posts, comments, upload, admin
from community.core.config import settings
from community.db.database import engine
from community.db.init_db import init
from community.schemas.common import HealthResponse
import cleanup

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ===== 启动阶段 =====
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)

    # 使用环境变量标记，多 worker 时只让一个进程建表
    if os.environ.get("SKIP_DB_INIT") != "1":
        try:
            init()   # 建表 + 默认管理员
        except Exception as e:
            logger.error(f"数据库初始化失败: {e}")
            # 不阻止应用启动，因为表可能已经被其他worker创建

    scheduler = cleanup.start_scheduler() if settings.CLEANUP_ENABLED else None
    logger.info("🚀 茶溪有灵服务端已启动")
    yield
    # ===== 关闭阶段 =====
    if scheduler:
        cleanup.stop_scheduler(scheduler)
    engine.dispose()
    logger.info("数据库连接已关闭")


app = FastAPI(
    title="茶溪有灵社区",
    lifespan=lifespan
)


# ===== 统一错误格式：{"success": false, "message": ...} =====
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"参数错误: {field} {first.get('msg', '')}".strip()
    return JSONResponse(status_code=400, content={"success": False, "message": message})


@app.exception_handler(SQLAlchemyError)
async def db_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"数据库错误 {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"success": False, "message": "服务器内部错误"})


# 挂载上传目录（目录在 lifespan 中创建）
uploads_app = StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False)
app.mount(settings.UPLOAD_URL_PREFIX, uploads_app, name="uploads")

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS_LIST,
    allow_credentials="*" not in settings.CORS_ORIGINS_LIST,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

# 注册路由
app.include_router(auth.router, prefix="/api", tags=["Authentication"])
app.include_router(upload.router, prefix="/api", tags=["Upload"])
app.include_router(posts.router, prefix="/api", tags=["Posts"])
app.include_router(comments.router, prefix="/api/comments", tags=["Comments"])
app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])


@app.get("/api/health", response_model=HealthResponse)
def health_check():
    """健康检查端点，用于监控服务状态"""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        database = "connected"
    except SQLAlchemyError as e:
        logger.error(f"健康检查数据库连接失败: {e}")
        database = "disconnected"
    return {
        "status": "ok" if database == "connected" else "degraded",
        "message": "茶溪有灵社区后端服务运行正常" if database == "connected" else "数据库不可用",
        "timestamp": int(time.time() * 1000),
        "database": database,
    }
