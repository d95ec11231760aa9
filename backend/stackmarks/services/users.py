"""用户服务：注册时初始化默认层级，偏好设置"""
from typing import Optional
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import DuplicateUsername, NotFound
from ..models import User
from .hierarchy import HierarchyStore

logger = logging.getLogger(__name__)

DEFAULT_WORKSPACE_TITLE = "Personal"
DEFAULT_FOLDER_TITLE = "Main"
DEFAULT_GROUP_TITLE = "Links"

PREFERENCE_FIELDS = ("theme", "view_mode", "bookmark_view_mode", "bookmarks_per_container")


async def find_user_by_username(db: AsyncSession, username: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()


async def get_user(db: AsyncSession, user_id: str) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFound("user", user_id)
    return user


async def create_user(db: AsyncSession, username: str, password_hash: str) -> User:
    """创建用户，并放入一个起始工作区 / 文件夹 / 分组，避免界面为空"""
    if await find_user_by_username(db, username):
        raise DuplicateUsername(f"Username already exists: {username}")

    user = User(username=username, password_hash=password_hash)
    db.add(user)
    await db.flush()

    store = HierarchyStore(db, user.id)
    workspace = await store.create_workspace(DEFAULT_WORKSPACE_TITLE)
    folder = await store.create_folder(workspace.id, DEFAULT_FOLDER_TITLE)
    await store.create_group(folder.id, DEFAULT_GROUP_TITLE)

    logger.info(f"[Users] 新用户 {username} ({user.id})")
    return user


async def update_preferences(db: AsyncSession, user_id: str, patch: dict) -> User:
    """合并部分偏好设置，未提供的字段保持不变"""
    user = await get_user(db, user_id)
    for name in PREFERENCE_FIELDS:
        value = patch.get(name)
        if value is not None:
            setattr(user, name, value)
    await db.flush()
    return user
