from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn
import os
import sqlite3
import time
from datetime import datetime, timezone

from routers import polygons
from store import store
from utils.logger import logger, log_api_request, log_error, log_validation_failure

VERSION = "1.0"

app = FastAPI(title="Polygon Manager API", version=VERSION)

# 配置 CORS - 从环境变量读取允许的域名，默认为本地开发地址
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """请求日志中间件"""
    start_time = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start_time) * 1000

    # 记录请求日志（跳过健康检查等高频请求）
    if request.url.path not in ["/health", "/", "/favicon.ico"]:
        log_api_request(request.method, request.url.path, response.status_code, duration_ms)

    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """参数校验失败统一返回 400"""
    # 不回显 input：NaN/Infinity 无法编码为 JSON
    errors = [{k: v for k, v in e.items() if k in ("type", "loc", "msg")} for e in exc.errors()]
    log_validation_failure(request.method, request.url.path, errors)
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(errors)})


@app.exception_handler(sqlite3.Error)
async def storage_exception_handler(request: Request, exc: sqlite3.Error):
    log_error(f"数据库操作失败: {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"detail": "数据库不可用"})


# 注册路由
app.include_router(polygons.router, prefix="/api/polygons", tags=["Polygons"])


@app.get("/")
async def root():
    return {"message": "Polygon Manager backend is running", "version": VERSION}


@app.get("/health")
async def health_check():
    """健康检查端点"""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": VERSION,
        "database": "sqlite",
        "polygons": store.count(),
    }


if __name__ == "__main__":
    port = int(os.getenv("PORT", "3000"))
    logger.info("="*50)
    logger.info("Polygon Manager Backend 启动中...")
    logger.info(f"数据库: {store.db_path}")
    logger.info(f"允许的CORS域名: {ALLOWED_ORIGINS}")
    logger.info("="*50)
    uvicorn.run("main:app", host="0.0.0.0", port=port, reload=True)
