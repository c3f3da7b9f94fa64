from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool

from community.core.config import settings


def build_engine(uri: str):
    if uri.startswith("sqlite"):
        # SQLite 只允许创建连接的线程使用，FastAPI 的同步路由跑在线程池里
        return create_engine(uri, echo=False, connect_args={"check_same_thread": False})

    # MySQL：配置连接池，防止连接耗尽和超时
    return create_engine(
        uri,
        echo=False,
        poolclass=QueuePool,
        pool_size=10,
        max_overflow=20,
        pool_timeout=30,
        pool_recycle=3600,  # 1小时回收连接，防止MySQL超时断开
        pool_pre_ping=True,
        connect_args={
            "connect_timeout": 10,
            "read_timeout": 30,
            "write_timeout": 30,
        },
    )


engine = build_engine(settings.DATABASE_URI)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
