"""书签与标签模型"""
from sqlalchemy import Column, String, DateTime, Text, Integer, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid

from ..database import Base


class Bookmark(Base):
    """书签表（范围：分组）"""
    __tablename__ = "bookmarks"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    group_id = Column(String(36), ForeignKey("bookmark_groups.id", ondelete="CASCADE"), nullable=False)
    url = Column(String(2048), nullable=False)
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=False, default="")
    position = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)

    # 关系
    group = relationship("Group", back_populates="bookmarks")
    tags = relationship("BookmarkTag", back_populates="bookmark", cascade="all, delete-orphan", passive_deletes=True)

    __table_args__ = (Index("idx_bookmarks_group_pos", "group_id", "position"),)

    @property
    def tag_names(self) -> list[str]:
        """标签名（按名称排序）"""
        return sorted(bt.tag.name for bt in self.tags)


class Tag(Base):
    """标签表，(user_id, name) 唯一，区分大小写"""
    __tablename__ = "tags"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(64), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    # 关系
    user = relationship("User", back_populates="tags")
    bookmarks = relationship("BookmarkTag", back_populates="tag", cascade="all, delete-orphan", passive_deletes=True)

    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_tags_user_name"),)


class BookmarkTag(Base):
    """书签-标签关联表"""
    __tablename__ = "bookmark_tags"

    bookmark_id = Column(String(36), ForeignKey("bookmarks.id", ondelete="CASCADE"), primary_key=True)
    tag_id = Column(String(36), ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True)

    # 关系
    bookmark = relationship("Bookmark", back_populates="tags")
    tag = relationship("Tag", back_populates="bookmarks")
