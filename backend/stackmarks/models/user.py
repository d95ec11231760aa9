"""用户模型"""
from sqlalchemy import Column, String, Integer, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid

from ..database import Base


class User(Base):
    """用户表"""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    username = Column(String(64), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    # 偏好设置
    theme = Column(String(20), nullable=False, default="light")
    view_mode = Column(String(20), nullable=False, default="tabbed")
    bookmark_view_mode = Column(String(20), nullable=False, default="card")
    bookmarks_per_container = Column(Integer, nullable=False, default=20)
    created_at = Column(DateTime, default=datetime.utcnow)

    # 关系（删除由数据库外键级联完成）
    workspaces = relationship("Workspace", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    tags = relationship("Tag", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
