"""分组路由"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from ...database import get_db, get_write_db
from ...models import User
from ...schemas import TitleIn, GroupCreate, MoveGroupRequest, ReorderRequest, GroupResponse, BookmarkResponse
from ...services import HierarchyStore
from ..deps import get_current_user

router = APIRouter()


@router.post("", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def create_group(
    group_in: GroupCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_write_db)
):
    """创建分组（追加到文件夹末尾）"""
    return await HierarchyStore(db, current_user.id).create_group(group_in.folder_id, group_in.title)


@router.get("/{group_id}/bookmarks", response_model=List[BookmarkResponse])
async def get_group_bookmarks(
    group_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """获取分组下的书签（按 position）"""
    bookmarks = await HierarchyStore(db, current_user.id).list_bookmarks(group_id)
    return [BookmarkResponse.from_orm_bookmark(b) for b in bookmarks]


@router.put("/{group_id}/bookmarks/reorder", response_model=List[BookmarkResponse])
async def reorder_bookmarks(
    group_id: str,
    reorder_in: ReorderRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_write_db)
):
    """重排分组内的全部书签"""
    store = HierarchyStore(db, current_user.id)
    await store.reorder_bookmarks(group_id, reorder_in.ordered_ids)
    return [BookmarkResponse.from_orm_bookmark(b) for b in await store.list_bookmarks(group_id)]


@router.put("/{group_id}/move", response_model=GroupResponse)
async def move_group(
    group_id: str,
    move_in: MoveGroupRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_write_db)
):
    """移动分组到另一个文件夹，并按 ordered_ids 重排目标文件夹"""
    return await HierarchyStore(db, current_user.id).move_group(group_id, move_in.folder_id, move_in.ordered_ids)


@router.patch("/{group_id}", response_model=GroupResponse)
async def update_group(
    group_id: str,
    group_in: TitleIn,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_write_db)
):
    """重命名分组"""
    return await HierarchyStore(db, current_user.id).update_group(group_id, group_in.title)


@router.delete("/{group_id}")
async def delete_group(
    group_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_write_db)
):
    """删除分组（级联删除书签）"""
    await HierarchyStore(db, current_user.id).delete_group(group_id)
    return {"message": "删除成功"}
