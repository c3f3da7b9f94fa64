from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # ---------- 数据库 ----------
    # 默认使用内嵌 SQLite；配置了 DB_HOST 时改走 MySQL
    DATABASE_URL: str = "sqlite:///./community.db"
    DB_HOST: Optional[str] = None
    DB_PORT: int = 3306
    DB_USER: str = "root"
    DB_PASSWORD: str = ""
    DB_DATABASE: str = "community"

    @property
    def DATABASE_URI(self) -> str:
        if self.DB_HOST:
            return (
                f"mysql+pymysql://{self.DB_USER}:{self.DB_PASSWORD}"
                f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_DATABASE}?charset=utf8mb4"
            )
        return self.DATABASE_URL

    # ---------- 跨域 ----------
    CORS_ORIGINS: str = "*"

    @property
    def CORS_ORIGINS_LIST(self) -> List[str]:
        return [orig.strip() for orig in self.CORS_ORIGINS.split(",") if orig.strip()]

    # ---------- JWT ----------
    SECRET_KEY: str = "tea_creek_default_secret"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 24 * 60
    ADMIN_TOKEN_EXPIRE_MINUTES: int = 12 * 60

    # ---------- 默认管理员 ----------
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = "admin123"
    ADMIN_AVATAR: str = "https://api.dicebear.com/7.x/avataaars/svg?seed=Admin"

    # ---------- 板块 ----------
    RESERVED_DEPARTMENT: str = "村务公开"   # 仅管理员可发
    PINNED_DEPARTMENT: str = "村务公开"     # 置顶板块，留空则不置顶
    ALL_DEPARTMENTS_TAG: str = "全部"

    AVATAR_URL_TEMPLATE: str = "https://api.dicebear.com/7.x/avataaars/svg?seed={seed}"

    # ---------- 上传 ----------
    UPLOAD_DIR: str = "static/uploads"
    UPLOAD_URL_PREFIX: str = "/uploads"
    PUBLIC_BASE_URL: str = ""
    UPLOAD_RETENTION_DAYS: int = 7
    CLEANUP_ENABLED: bool = True
    CLEANUP_HOUR: int = 2
    CLEANUP_MINUTE: int = 30

    LOG_LEVEL: str = "INFO"


settings = Settings()
