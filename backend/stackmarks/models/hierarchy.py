"""层级模型：工作区 → 文件夹 → 分组

position 在各自的父级范围内从 0 开始连续编号。
"""
from sqlalchemy import Column, String, DateTime, Integer, ForeignKey, Index
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid

from ..database import Base


class Workspace(Base):
    """工作区表（范围：用户）"""
    __tablename__ = "workspaces"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(200), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)

    # 关系
    user = relationship("User", back_populates="workspaces")
    folders = relationship("Folder", back_populates="workspace", cascade="all, delete-orphan", passive_deletes=True)

    __table_args__ = (Index("idx_workspaces_user_pos", "user_id", "position"),)


class Folder(Base):
    """文件夹表（范围：工作区）"""
    __tablename__ = "folders"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    workspace_id = Column(String(36), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(200), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)

    # 关系
    workspace = relationship("Workspace", back_populates="folders")
    groups = relationship("Group", back_populates="folder", cascade="all, delete-orphan", passive_deletes=True)

    __table_args__ = (Index("idx_folders_workspace_pos", "workspace_id", "position"),)


class Group(Base):
    """分组表（范围：文件夹）"""
    __tablename__ = "bookmark_groups"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    folder_id = Column(String(36), ForeignKey("folders.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(200), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)

    # 关系
    folder = relationship("Folder", back_populates="groups")
    bookmarks = relationship("Bookmark", back_populates="group", cascade="all, delete-orphan", passive_deletes=True)

    __table_args__ = (Index("idx_groups_folder_pos", "folder_id", "position"),)
