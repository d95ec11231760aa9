"""文件夹路由"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from ...database import get_db, get_write_db
from ...models import User
from ...schemas import (
    TitleIn, FolderCreate, FolderReorderRequest, MoveFolderRequest, ReorderRequest,
    FolderResponse, GroupResponse,
)
from ...services import HierarchyStore
from ..deps import get_current_user

router = APIRouter()


@router.post("", response_model=FolderResponse, status_code=status.HTTP_201_CREATED)
async def create_folder(
    folder_in: FolderCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_write_db)
):
    """创建文件夹（追加到工作区末尾）"""
    return await HierarchyStore(db, current_user.id).create_folder(folder_in.workspace_id, folder_in.title)


@router.put("/reorder", response_model=List[FolderResponse])
async def reorder_folders(
    reorder_in: FolderReorderRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_write_db)
):
    """重排工作区内的全部文件夹"""
    store = HierarchyStore(db, current_user.id)
    await store.reorder_folders(reorder_in.workspace_id, reorder_in.ordered_ids)
    return await store.list_folders(reorder_in.workspace_id)


@router.get("/{folder_id}/groups", response_model=List[GroupResponse])
async def get_folder_groups(
    folder_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """获取文件夹下的分组（按 position）"""
    return await HierarchyStore(db, current_user.id).list_groups(folder_id)


@router.put("/{folder_id}/groups/reorder", response_model=List[GroupResponse])
async def reorder_groups(
    folder_id: str,
    reorder_in: ReorderRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_write_db)
):
    """重排文件夹内的全部分组"""
    store = HierarchyStore(db, current_user.id)
    await store.reorder_groups(folder_id, reorder_in.ordered_ids)
    return await store.list_groups(folder_id)


@router.put("/{folder_id}/move", response_model=FolderResponse)
async def move_folder(
    folder_id: str,
    move_in: MoveFolderRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_write_db)
):
    """移动文件夹到另一个工作区，并按 ordered_ids 重排目标工作区"""
    return await HierarchyStore(db, current_user.id).move_folder(folder_id, move_in.workspace_id, move_in.ordered_ids)


@router.patch("/{folder_id}", response_model=FolderResponse)
async def update_folder(
    folder_id: str,
    folder_in: TitleIn,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_write_db)
):
    """重命名文件夹"""
    return await HierarchyStore(db, current_user.id).update_folder(folder_id, folder_in.title)


@router.delete("/{folder_id}")
async def delete_folder(
    folder_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_write_db)
):
    """删除文件夹（级联删除分组与书签）"""
    await HierarchyStore(db, current_user.id).delete_folder(folder_id)
    return {"message": "删除成功"}
