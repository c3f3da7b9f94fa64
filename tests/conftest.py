import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import main
from community.core.config import settings
from community.db.database import Base, get_db
from community.db.init_db import ensure_admin
from community.models.post import Post


@pytest.fixture
def engine():
    # 内存库 + StaticPool：所有会话共用同一个连接
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    ensure_admin(session)
    yield session
    session.close()


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    path = tmp_path / "uploads"
    path.mkdir()
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(path))
    # 静态挂载在导入时固定了目录，测试里指向临时目录
    monkeypatch.setattr(main.uploads_app, "directory", str(path))
    monkeypatch.setattr(main.uploads_app, "all_directories", [str(path)])
    return path


@pytest.fixture
def client(db, engine, session_factory, upload_dir, monkeypatch):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    monkeypatch.setattr(main, "engine", engine)
    main.app.dependency_overrides[get_db] = override_get_db
    # 不进入 with，避免 lifespan 去初始化真实数据库和定时任务
    yield TestClient(main.app)
    main.app.dependency_overrides.clear()


@pytest.fixture
def login(client):
    """登录并返回 Authorization 头"""
    def _login(username, password=None):
        body = {"username": username}
        if password is not None:
            body["password"] = password
        resp = client.post("/api/login", json=body)
        assert resp.status_code == 200, resp.text
        return {"Authorization": f"Bearer {resp.json()['token']}"}
    return _login


@pytest.fixture
def admin_headers(login):
    return login(settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD)


@pytest.fixture
def make_post(db):
    """直接写库造帖子，可以指定创建时间"""
    def _make_post(**kwargs):
        data = {
            "user_id": 1,
            "user_name": "admin",
            "user_avatar": "",
            "title": "标题",
            "description": "",
            "department": "生活",
            "images": "[]",
        }
        data.update(kwargs)
        post = Post(**data)
        db.add(post)
        db.commit()
        db.refresh(post)
        return post
    return _make_post
