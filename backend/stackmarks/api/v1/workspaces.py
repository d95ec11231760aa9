"""工作区路由"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from ...database import get_db, get_write_db
from ...models import User
from ...schemas import TitleIn, ReorderRequest, WorkspaceResponse, FolderResponse
from ...services import HierarchyStore
from ..deps import get_current_user

router = APIRouter()


@router.get("", response_model=List[WorkspaceResponse])
async def get_workspaces(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """获取工作区列表（按 position）"""
    return await HierarchyStore(db, current_user.id).list_workspaces()


@router.post("", response_model=WorkspaceResponse, status_code=status.HTTP_201_CREATED)
async def create_workspace(
    workspace_in: TitleIn,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_write_db)
):
    """创建工作区（追加到末尾）"""
    return await HierarchyStore(db, current_user.id).create_workspace(workspace_in.title)


@router.put("/reorder", response_model=List[WorkspaceResponse])
async def reorder_workspaces(
    reorder_in: ReorderRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_write_db)
):
    """重排全部工作区"""
    store = HierarchyStore(db, current_user.id)
    await store.reorder_workspaces(reorder_in.ordered_ids)
    return await store.list_workspaces()


@router.get("/{workspace_id}/folders", response_model=List[FolderResponse])
async def get_workspace_folders(
    workspace_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """获取工作区下的文件夹（按 position）"""
    return await HierarchyStore(db, current_user.id).list_folders(workspace_id)


@router.patch("/{workspace_id}", response_model=WorkspaceResponse)
async def update_workspace(
    workspace_id: str,
    workspace_in: TitleIn,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_write_db)
):
    """重命名工作区"""
    return await HierarchyStore(db, current_user.id).update_workspace(workspace_id, workspace_in.title)


@router.delete("/{workspace_id}")
async def delete_workspace(
    workspace_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_write_db)
):
    """删除工作区（级联删除其下全部内容）"""
    await HierarchyStore(db, current_user.id).delete_workspace(workspace_id)
    return {"message": "删除成功"}
