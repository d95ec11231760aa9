"""用户相关 Schema"""
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Literal, Optional


class UserCreate(BaseModel):
    """用户注册"""
    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1, max_length=256)

    class Config:
        str_strip_whitespace = True


class UserLogin(BaseModel):
    """用户登录"""
    username: str
    password: str


class Preferences(BaseModel):
    """偏好设置"""
    theme: Literal["light", "dark"] = "light"
    view_mode: Literal["tabbed", "grid"] = "tabbed"
    bookmark_view_mode: Literal["card", "list"] = "card"
    bookmarks_per_container: int = Field(20, ge=1, le=200)

    class Config:
        from_attributes = True


class PreferencesUpdate(BaseModel):
    """更新偏好（部分字段）"""
    theme: Optional[Literal["light", "dark"]] = None
    view_mode: Optional[Literal["tabbed", "grid"]] = None
    bookmark_view_mode: Optional[Literal["card", "list"]] = None
    bookmarks_per_container: Optional[int] = Field(None, ge=1, le=200)


class UserResponse(BaseModel):
    """用户响应"""
    id: str
    username: str
    preferences: Preferences
    created_at: datetime


class Token(BaseModel):
    """Token 响应"""
    access_token: str
    token_type: str = "bearer"
