"""导入 / 导出 Schema"""
from pydantic import BaseModel, Field, field_validator
from datetime import datetime, timezone
from enum import Enum
from typing import List, Literal, Optional

from ..config import settings

TITLE_MAX = 500
URL_MAX = 2048
DESCRIPTION_MAX = 4000


class ImportStrategy(str, Enum):
    """超出 文件夹→分组→书签 三层时的处理策略"""
    FLATTEN = "flatten"  # 深层书签全部放入当前分组
    SKIP = "skip"        # 跳过深层书签
    ROOT = "root"        # 放入顶层的导入文件夹


class ImportResult(BaseModel):
    """导入统计"""
    folders_created: int = 0
    groups_created: int = 0
    bookmarks_created: int = 0
    bookmarks_skipped: int = 0
    warnings: List[str] = []


class NetscapeImportRequest(BaseModel):
    """导入 Netscape HTML"""
    html: str = Field(..., min_length=1)
    strategy: ImportStrategy = ImportStrategy(settings.DEFAULT_IMPORT_STRATEGY)
    root_folder_name: Optional[str] = Field(None, min_length=1, max_length=200)

    @field_validator("html")
    @classmethod
    def check_size(cls, v: str) -> str:
        """限制请求体大小（字节）"""
        if len(v.encode("utf-8")) > settings.IMPORT_MAX_BYTES:
            raise ValueError(f"html exceeds {settings.IMPORT_MAX_BYTES} bytes")
        return v


# ==================== JSON 导出格式 ====================

class JsonBookmark(BaseModel):
    url: str = Field(..., min_length=1, max_length=URL_MAX)
    title: str = Field(..., min_length=1, max_length=TITLE_MAX)
    description: str = Field("", max_length=DESCRIPTION_MAX)
    tags: List[str] = []
    position: int = Field(..., ge=0)


class JsonGroup(BaseModel):
    title: str = Field(..., min_length=1, max_length=TITLE_MAX)
    position: int = Field(..., ge=0)
    bookmarks: List[JsonBookmark] = []


class JsonFolder(BaseModel):
    title: str = Field(..., min_length=1, max_length=TITLE_MAX)
    position: int = Field(..., ge=0)
    groups: List[JsonGroup] = []


class JsonWorkspace(BaseModel):
    title: str = Field(..., min_length=1, max_length=TITLE_MAX)
    position: int = Field(..., ge=0)
    folders: List[JsonFolder] = []


class JsonExport(BaseModel):
    """完整导出：{version: 1, exportedAt, workspaces: [...]}"""
    version: Literal[1] = 1
    exported_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
        alias="exportedAt",
    )
    workspaces: List[JsonWorkspace] = []

    @field_validator("version", mode="before")
    @classmethod
    def check_version(cls, v):
        """只接受整数 1（拒绝 true、1.0、"1"）"""
        if type(v) is not int:
            raise ValueError("version must be the integer 1")
        return v

    class Config:
        populate_by_name = True
