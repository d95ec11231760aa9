"""Pydantic Schemas"""
from .user import UserCreate, UserLogin, UserResponse, Preferences, PreferencesUpdate, Token
from .hierarchy import (
    TitleIn, FolderCreate, GroupCreate,
    ReorderRequest, FolderReorderRequest, MoveFolderRequest, MoveGroupRequest, MoveBookmarkRequest,
    WorkspaceResponse, FolderResponse, GroupResponse, StateResponse,
)
from .bookmark import BookmarkCreate, BookmarkUpdate, BookmarkResponse, TagResponse
from .transfer import (
    ImportStrategy, ImportResult, NetscapeImportRequest,
    JsonExport, JsonWorkspace, JsonFolder, JsonGroup, JsonBookmark,
)

__all__ = [
    "UserCreate", "UserLogin", "UserResponse", "Preferences", "PreferencesUpdate", "Token",
    "TitleIn", "FolderCreate", "GroupCreate",
    "ReorderRequest", "FolderReorderRequest", "MoveFolderRequest", "MoveGroupRequest", "MoveBookmarkRequest",
    "WorkspaceResponse", "FolderResponse", "GroupResponse", "StateResponse",
    "BookmarkCreate", "BookmarkUpdate", "BookmarkResponse", "TagResponse",
    "ImportStrategy", "ImportResult", "NetscapeImportRequest",
    "JsonExport", "JsonWorkspace", "JsonFolder", "JsonGroup", "JsonBookmark",
]
