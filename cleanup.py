# cleanup.py
import json
import time
import asyncio
import logging
from pathlib import Path
from concurrent.futures import ThreadPoolExecutor

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from sqlalchemy import select
from sqlalchemy.orm import Session

from community.core.config import settings
from community.db.database import SessionLocal
from community.models.post import Post
from community.models.user import User

logger = logging.getLogger(__name__)

# 创建线程池执行器，避免阻塞事件循环
executor = ThreadPoolExecutor(max_workers=2)


def referenced_filenames(db: Session) -> set[str]:
    """帖子图片和用户头像里还在用的文件名"""
    names = set()
    for images in db.scalars(select(Post.images)):
        try:
            urls = json.loads(images or "[]")
        except ValueError:
            continue
        names.update(url.rsplit("/", 1)[-1] for url in urls if isinstance(url, str))
    for avatar in db.scalars(select(User.avatar).where(User.avatar.is_not(None))):
        names.add(avatar.rsplit("/", 1)[-1])
    return names


def remove_orphan_uploads_sync(
    db: Session,
    upload_dir: Path | None = None,
    days_keep: int | None = None,
    now: float | None = None,
) -> int:
    """删除超过保留期且没有被任何帖子/用户引用的上传文件，返回删除数量"""
    upload_dir = Path(upload_dir or settings.UPLOAD_DIR)
    days_keep = settings.UPLOAD_RETENTION_DAYS if days_keep is None else days_keep
    now = now or time.time()

    if not upload_dir.is_dir():
        return 0

    in_use = referenced_filenames(db)
    deleted_count = 0
    for fpath in upload_dir.iterdir():
        # 跳过 .gitkeep / .gitignore 之类
        if not fpath.is_file() or fpath.name.startswith("."):
            continue
        if fpath.name in in_use:
            continue
        if now - fpath.stat().st_mtime > days_keep * 86400:
            try:
                fpath.unlink()
                deleted_count += 1
                logger.info(f"[cleanup] deleted {fpath}")
            except OSError as e:
                logger.error(f"[cleanup] failed to delete {fpath}: {e}")

    logger.info(f"[cleanup] 清理完成，删除了 {deleted_count} 个文件")
    return deleted_count


def _run_cleanup() -> int:
    db = SessionLocal()
    try:
        return remove_orphan_uploads_sync(db)
    finally:
        db.close()


async def remove_orphan_uploads():
    """异步包装器，在线程池中执行同步清理"""
    loop = asyncio.get_running_loop()
    try:
        await loop.run_in_executor(executor, _run_cleanup)
    except Exception as e:
        logger.error(f"[cleanup] 清理任务出错: {e}")


def start_scheduler() -> AsyncIOScheduler:
    """需要在事件循环里调用（FastAPI lifespan 中）"""
    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        remove_orphan_uploads, "cron",
        hour=settings.CLEANUP_HOUR, minute=settings.CLEANUP_MINUTE,
    )
    scheduler.start()
    logger.info("[cleanup] 定时清理任务已启动")
    return scheduler


def stop_scheduler(scheduler: AsyncIOScheduler):
    scheduler.shutdown()
    executor.shutdown(wait=False)
    logger.info("[cleanup] 定时清理任务已关闭")
