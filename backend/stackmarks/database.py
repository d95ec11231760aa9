"""数据库配置"""
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy import event
from .config import settings
import asyncio
import os

# 确保数据目录存在
os.makedirs(settings.DATA_DIR, exist_ok=True)


class Base(DeclarativeBase):
    """模型基类"""
    pass


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """创建异步引擎并挂载 SQLite 连接事件"""
    new_engine = create_async_engine(url, echo=echo, future=True)

    if url.startswith("sqlite"):
        # SQLite 优化 - 同步连接事件
        @event.listens_for(new_engine.sync_engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            """外键级联 + 性能优化"""
            # 关闭驱动的隐式事务，由 begin 事件显式发出 BEGIN，SAVEPOINT 才能正常嵌套
            dbapi_connection.isolation_level = None
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA synchronous=NORMAL")
            cursor.execute("PRAGMA cache_size=-64000")
            cursor.execute("PRAGMA temp_store=MEMORY")
            cursor.close()

        @event.listens_for(new_engine.sync_engine, "begin")
        def do_begin(conn):
            conn.exec_driver_sql("BEGIN")

    return new_engine


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker:
    """异步会话工厂"""
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


# 创建异步引擎
engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)

# 异步会话工厂
AsyncSessionLocal = build_session_factory(engine)

# 全进程唯一的写锁：同一时刻只允许一个写事务
write_lock = asyncio.Lock()


async def init_db(bind: AsyncEngine = None):
    """初始化数据库表"""
    # 注册所有模型到 Base.metadata
    from . import models  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db():
    """获取数据库会话（只读请求）"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def get_write_db():
    """获取写会话：持有写锁，整个请求作为一个事务提交或回滚"""
    async with write_lock:
        async with AsyncSessionLocal() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()
