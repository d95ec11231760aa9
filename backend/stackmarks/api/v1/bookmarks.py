"""书签路由"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...database import get_db, get_write_db
from ...models import User
from ...schemas import BookmarkCreate, BookmarkUpdate, BookmarkResponse, MoveBookmarkRequest
from ...services import HierarchyStore
from ..deps import get_current_user

router = APIRouter()


@router.get("/{bookmark_id}", response_model=BookmarkResponse)
async def get_bookmark(
    bookmark_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """获取单个书签"""
    bookmark = await HierarchyStore(db, current_user.id).get_bookmark(bookmark_id)
    return BookmarkResponse.from_orm_bookmark(bookmark)


@router.post("", response_model=BookmarkResponse, status_code=status.HTTP_201_CREATED)
async def create_bookmark(
    bookmark_in: BookmarkCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_write_db)
):
    """创建书签（追加到分组末尾）"""
    bookmark = await HierarchyStore(db, current_user.id).create_bookmark(
        bookmark_in.group_id,
        url=bookmark_in.url,
        title=bookmark_in.title,
        description=bookmark_in.description,
        tags=bookmark_in.tags,
    )
    return BookmarkResponse.from_orm_bookmark(bookmark)


@router.patch("/{bookmark_id}", response_model=BookmarkResponse)
async def update_bookmark(
    bookmark_id: str,
    bookmark_in: BookmarkUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_write_db)
):
    """更新书签（tags 提供时整体替换）"""
    bookmark = await HierarchyStore(db, current_user.id).update_bookmark(
        bookmark_id,
        url=bookmark_in.url,
        title=bookmark_in.title,
        description=bookmark_in.description,
        tags=bookmark_in.tags,
    )
    return BookmarkResponse.from_orm_bookmark(bookmark)


@router.put("/{bookmark_id}/move", response_model=BookmarkResponse)
async def move_bookmark(
    bookmark_id: str,
    move_in: MoveBookmarkRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_write_db)
):
    """移动书签到另一个分组，并按 ordered_ids 重排目标分组"""
    bookmark = await HierarchyStore(db, current_user.id).move_bookmark(
        bookmark_id, move_in.group_id, move_in.ordered_ids
    )
    return BookmarkResponse.from_orm_bookmark(bookmark)


@router.delete("/{bookmark_id}")
async def delete_bookmark(
    bookmark_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_write_db)
):
    """删除书签"""
    await HierarchyStore(db, current_user.id).delete_bookmark(bookmark_id)
    return {"message": "删除成功"}
