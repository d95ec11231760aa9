"""用户路由：当前用户、偏好设置、全部数据"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ...database import get_db, get_write_db
from ...models import User
from ...schemas import (
    UserResponse, Preferences, PreferencesUpdate, StateResponse,
    WorkspaceResponse, FolderResponse, GroupResponse, BookmarkResponse,
)
from ...services import HierarchyStore, update_preferences
from ..deps import get_current_user

router = APIRouter()


def user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        username=user.username,
        preferences=Preferences.model_validate(user),
        created_at=user.created_at,
    )


@router.get("/users/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """获取当前用户信息"""
    return user_response(current_user)


@router.patch("/users/me/preferences", response_model=Preferences)
async def patch_preferences(
    prefs_in: PreferencesUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_write_db)
):
    """更新偏好设置（只修改提供的字段）"""
    user = await update_preferences(db, current_user.id, prefs_in.model_dump(exclude_none=True))
    return Preferences.model_validate(user)


@router.get("/state", response_model=StateResponse)
async def get_state(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """获取全部工作区 / 文件夹 / 分组 / 书签"""
    state = await HierarchyStore(db, current_user.id).get_state()
    return StateResponse(
        workspaces=[WorkspaceResponse.model_validate(w) for w in state["workspaces"]],
        folders=[FolderResponse.model_validate(f) for f in state["folders"]],
        groups=[GroupResponse.model_validate(g) for g in state["groups"]],
        bookmarks=[BookmarkResponse.from_orm_bookmark(b) for b in state["bookmarks"]],
    )
