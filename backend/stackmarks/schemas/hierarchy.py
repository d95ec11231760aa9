"""工作区 / 文件夹 / 分组 Schema"""
from pydantic import BaseModel, Field
from typing import List

from .bookmark import BookmarkResponse

TITLE_MAX = 200


class TitleIn(BaseModel):
    """创建工作区 / 重命名"""
    title: str = Field(..., min_length=1, max_length=TITLE_MAX)

    class Config:
        str_strip_whitespace = True


class FolderCreate(TitleIn):
    """创建文件夹"""
    workspace_id: str


class GroupCreate(TitleIn):
    """创建分组"""
    folder_id: str


class ReorderRequest(BaseModel):
    """范围内全部成员 id 的新顺序"""
    ordered_ids: List[str]


class FolderReorderRequest(ReorderRequest):
    workspace_id: str


class MoveFolderRequest(ReorderRequest):
    """移动文件夹：ordered_ids 为目标工作区移动后的完整顺序"""
    workspace_id: str


class MoveGroupRequest(ReorderRequest):
    """移动分组：ordered_ids 为目标文件夹移动后的完整顺序"""
    folder_id: str


class MoveBookmarkRequest(ReorderRequest):
    """移动书签：ordered_ids 为目标分组移动后的完整顺序"""
    group_id: str


class WorkspaceResponse(BaseModel):
    id: str
    title: str
    position: int

    class Config:
        from_attributes = True


class FolderResponse(BaseModel):
    id: str
    workspace_id: str
    title: str
    position: int

    class Config:
        from_attributes = True


class GroupResponse(BaseModel):
    id: str
    folder_id: str
    title: str
    position: int

    class Config:
        from_attributes = True


class StateResponse(BaseModel):
    """用户全部数据，每个列表按 position 排序"""
    workspaces: List[WorkspaceResponse]
    folders: List[FolderResponse]
    groups: List[GroupResponse]
    bookmarks: List[BookmarkResponse]
