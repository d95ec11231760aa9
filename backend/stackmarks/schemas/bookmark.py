"""书签相关 Schema"""
from pydantic import BaseModel, Field
from typing import List, Optional

TAG_MAX = 64
TAGS_MAX = 50


class BookmarkCreate(BaseModel):
    """创建书签"""
    group_id: str
    url: str = Field(..., min_length=1, max_length=2048)
    title: str = Field(..., min_length=1, max_length=500)
    description: str = Field("", max_length=4000)
    tags: List[str] = Field(default_factory=list, max_length=TAGS_MAX)

    class Config:
        str_strip_whitespace = True


class BookmarkUpdate(BaseModel):
    """更新书签"""
    url: Optional[str] = Field(None, min_length=1, max_length=2048)
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = Field(None, max_length=4000)
    tags: Optional[List[str]] = Field(None, max_length=TAGS_MAX)

    class Config:
        str_strip_whitespace = True


class BookmarkResponse(BaseModel):
    """书签响应（tags 为按名称排序的集合）"""
    id: str
    group_id: str
    url: str
    title: str
    description: str
    tags: List[str] = []
    position: int

    @classmethod
    def from_orm_bookmark(cls, bookmark) -> "BookmarkResponse":
        return cls(
            id=bookmark.id,
            group_id=bookmark.group_id,
            url=bookmark.url,
            title=bookmark.title,
            description=bookmark.description,
            tags=bookmark.tag_names,
            position=bookmark.position,
        )


class TagResponse(BaseModel):
    """标签及使用次数"""
    id: str
    name: str
    bookmark_count: int = 0
