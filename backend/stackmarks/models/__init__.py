"""数据模型"""
from .user import User
from .hierarchy import Workspace, Folder, Group
from .bookmark import Bookmark, Tag, BookmarkTag

__all__ = [
    "User",
    "Workspace", "Folder", "Group",
    "Bookmark", "Tag", "BookmarkTag",
]
