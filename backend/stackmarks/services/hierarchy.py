"""
层级存储

工作区 / 文件夹 / 分组 / 书签的增删改与排序。所有操作都先校验归属
（user_id），再修改；同一父级范围内的 position 始终为 0..n-1：

- 新建：追加到末尾
- 重排：必须提供范围内全部成员的一个排列
- 移动：改父级后按调用方给出的完整列表重排目标范围，并压实原范围
- 删除：级联删除后代，并压实原范围

使用示例:
    store = HierarchyStore(db, user_id)
    folder = await store.create_folder(workspace_id, "Work")
    await store.reorder_folders(workspace_id, [folder.id, ...])
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence
import logging

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..config import settings
from ..exceptions import NotFound, ParentNotFound, InvalidReorderSet, ValidationFailed
from ..models import Workspace, Folder, Group, Bookmark, Tag, BookmarkTag
from ..modules.ordering import next_position, validate_reorder_set, assign_positions, compact_positions

logger = logging.getLogger(__name__)

MAX_URL_LENGTH = 2048
MAX_TITLE_LENGTH = 500
MAX_DESCRIPTION_LENGTH = 4000


@dataclass(frozen=True)
class Scope:
    """一种同级范围：成员模型 + 指向父级的外键列"""
    kind: str
    model: type
    parent_attr: str
    parent_model: Optional[type]
    parent_kind: str


WORKSPACES = Scope("workspace", Workspace, "user_id", None, "user")
FOLDERS = Scope("folder", Folder, "workspace_id", Workspace, "workspace")
GROUPS = Scope("group", Group, "folder_id", Folder, "folder")
BOOKMARKS = Scope("bookmark", Bookmark, "group_id", Group, "group")


def normalize_tags(tags: Optional[Iterable[str]]) -> List[str]:
    """标签去重（区分大小写）：去空白、去空、保序去重、最多 MAX_TAGS_PER_BOOKMARK 个"""
    clean: List[str] = []
    seen = set()
    for raw in tags or []:
        name = (raw or "").strip()
        if not name or name in seen:
            continue
        if len(name) > settings.MAX_TAG_LENGTH:
            raise ValidationFailed(f"Tag too long (max {settings.MAX_TAG_LENGTH}): {name[:20]}...")
        seen.add(name)
        clean.append(name)
    return clean[: settings.MAX_TAGS_PER_BOOKMARK]


def validate_bookmark_fields(url: str, title: str, description: str) -> None:
    """书签字段校验"""
    if not url:
        raise ValidationFailed("URL is required")
    if len(url) > MAX_URL_LENGTH:
        raise ValidationFailed(f"URL too long (max {MAX_URL_LENGTH})")
    if not title:
        raise ValidationFailed("Title is required")
    if len(title) > MAX_TITLE_LENGTH:
        raise ValidationFailed(f"Title too long (max {MAX_TITLE_LENGTH})")
    if len(description) > MAX_DESCRIPTION_LENGTH:
        raise ValidationFailed(f"Description too long (max {MAX_DESCRIPTION_LENGTH})")


class HierarchyStore:
    """某个用户的层级数据访问"""

    def __init__(self, db: AsyncSession, user_id: str):
        self.db = db
        self.user_id = user_id

    # ==================== 通用范围操作 ====================

    async def _get_owned(self, model: type, item_id: str, kind: str, error=NotFound):
        result = await self.db.execute(
            select(model).where(model.id == item_id, model.user_id == self.user_id)
        )
        item = result.scalar_one_or_none()
        if item is None:
            raise error(kind, item_id)
        return item

    async def _check_parent(self, scope: Scope, parent_id: str) -> None:
        if scope.parent_model is None:
            return
        await self._get_owned(scope.parent_model, parent_id, scope.parent_kind, error=ParentNotFound)

    async def _members(self, scope: Scope, parent_id: str) -> list:
        model = scope.model
        result = await self.db.execute(
            select(model)
            .where(getattr(model, scope.parent_attr) == parent_id, model.user_id == self.user_id)
            .order_by(model.position, model.created_at)
        )
        return list(result.scalars().all())

    async def _next_position(self, scope: Scope, parent_id: str) -> int:
        model = scope.model
        result = await self.db.execute(
            select(func.max(model.position)).where(getattr(model, scope.parent_attr) == parent_id)
        )
        return next_position([result.scalar()])

    async def _apply(self, members: Iterable, positions: Dict[str, int]) -> None:
        for item in members:
            if item.id in positions:
                item.position = positions[item.id]
        await self.db.flush()

    async def _compact(self, scope: Scope, parent_id: str) -> None:
        members = await self._members(scope, parent_id)
        changes = compact_positions(members)
        if changes:
            logger.info(f"[Store] 压实 {scope.kind} 范围 {parent_id}: {len(changes)} 项重新编号")
            await self._apply(members, changes)

    async def _reorder(self, scope: Scope, parent_id: str, ordered_ids: Sequence[str]) -> None:
        await self._check_parent(scope, parent_id)
        members = await self._members(scope, parent_id)
        try:
            validate_reorder_set([m.id for m in members], ordered_ids, scope.kind)
        except InvalidReorderSet as e:
            logger.info(f"[Store] 拒绝重排 {scope.kind} 范围 {parent_id}: {e}")
            raise
        await self._apply(members, assign_positions(ordered_ids))

    async def _move(self, scope: Scope, item_id: str, new_parent_id: str, ordered_ids: Sequence[str]):
        item = await self._get_owned(scope.model, item_id, scope.kind)
        await self._check_parent(scope, new_parent_id)
        old_parent_id = getattr(item, scope.parent_attr)

        # 先按移动后的成员集合校验，校验失败时不做任何修改
        members = await self._members(scope, new_parent_id)
        if item.id not in {m.id for m in members}:
            members.append(item)
        try:
            validate_reorder_set([m.id for m in members], ordered_ids, scope.kind)
        except InvalidReorderSet as e:
            logger.info(f"[Store] 拒绝移动 {scope.kind} {item_id} 到 {new_parent_id}: {e}")
            raise

        setattr(item, scope.parent_attr, new_parent_id)
        await self._apply(members, assign_positions(ordered_ids))

        if old_parent_id != new_parent_id:
            await self._compact(scope, old_parent_id)
        return item

    async def _delete(self, scope: Scope, item_id: str) -> None:
        item = await self._get_owned(scope.model, item_id, scope.kind)
        parent_id = getattr(item, scope.parent_attr)
        await self.db.delete(item)
        await self.db.flush()
        await self._compact(scope, parent_id)

    async def _rename(self, scope: Scope, item_id: str, title: str):
        item = await self._get_owned(scope.model, item_id, scope.kind)
        item.title = title
        await self.db.flush()
        return item

    # ==================== 工作区 ====================

    async def list_workspaces(self) -> List[Workspace]:
        return await self._members(WORKSPACES, self.user_id)

    async def first_workspace(self) -> Optional[Workspace]:
        """position 最小的工作区"""
        workspaces = await self.list_workspaces()
        return workspaces[0] if workspaces else None

    async def create_workspace(self, title: str) -> Workspace:
        workspace = Workspace(
            user_id=self.user_id,
            title=title,
            position=await self._next_position(WORKSPACES, self.user_id),
        )
        self.db.add(workspace)
        await self.db.flush()
        return workspace

    async def update_workspace(self, workspace_id: str, title: str) -> Workspace:
        return await self._rename(WORKSPACES, workspace_id, title)

    async def delete_workspace(self, workspace_id: str) -> None:
        await self._delete(WORKSPACES, workspace_id)

    async def reorder_workspaces(self, ordered_ids: Sequence[str]) -> None:
        await self._reorder(WORKSPACES, self.user_id, ordered_ids)

    # ==================== 文件夹 ====================

    async def list_folders(self, workspace_id: str) -> List[Folder]:
        await self._check_parent(FOLDERS, workspace_id)
        return await self._members(FOLDERS, workspace_id)

    async def create_folder(self, workspace_id: str, title: str) -> Folder:
        await self._check_parent(FOLDERS, workspace_id)
        folder = Folder(
            user_id=self.user_id,
            workspace_id=workspace_id,
            title=title,
            position=await self._next_position(FOLDERS, workspace_id),
        )
        self.db.add(folder)
        await self.db.flush()
        return folder

    async def get_or_create_folder(self, workspace_id: str, title: str) -> tuple:
        """按标题精确匹配，返回 (文件夹, 是否新建)"""
        result = await self.db.execute(
            select(Folder)
            .where(Folder.user_id == self.user_id, Folder.workspace_id == workspace_id, Folder.title == title)
            .order_by(Folder.position)
            .limit(1)
        )
        folder = result.scalar_one_or_none()
        if folder is not None:
            return folder, False
        return await self.create_folder(workspace_id, title), True

    async def update_folder(self, folder_id: str, title: str) -> Folder:
        return await self._rename(FOLDERS, folder_id, title)

    async def delete_folder(self, folder_id: str) -> None:
        await self._delete(FOLDERS, folder_id)

    async def reorder_folders(self, workspace_id: str, ordered_ids: Sequence[str]) -> None:
        await self._reorder(FOLDERS, workspace_id, ordered_ids)

    async def move_folder(self, folder_id: str, workspace_id: str, ordered_ids: Sequence[str]) -> Folder:
        return await self._move(FOLDERS, folder_id, workspace_id, ordered_ids)

    # ==================== 分组 ====================

    async def list_groups(self, folder_id: str) -> List[Group]:
        await self._check_parent(GROUPS, folder_id)
        return await self._members(GROUPS, folder_id)

    async def create_group(self, folder_id: str, title: str) -> Group:
        await self._check_parent(GROUPS, folder_id)
        group = Group(
            user_id=self.user_id,
            folder_id=folder_id,
            title=title,
            position=await self._next_position(GROUPS, folder_id),
        )
        self.db.add(group)
        await self.db.flush()
        return group

    async def get_or_create_group(self, folder_id: str, title: str) -> tuple:
        """按标题精确匹配，返回 (分组, 是否新建)"""
        result = await self.db.execute(
            select(Group)
            .where(Group.user_id == self.user_id, Group.folder_id == folder_id, Group.title == title)
            .order_by(Group.position)
            .limit(1)
        )
        group = result.scalar_one_or_none()
        if group is not None:
            return group, False
        return await self.create_group(folder_id, title), True

    async def update_group(self, group_id: str, title: str) -> Group:
        return await self._rename(GROUPS, group_id, title)

    async def delete_group(self, group_id: str) -> None:
        await self._delete(GROUPS, group_id)

    async def reorder_groups(self, folder_id: str, ordered_ids: Sequence[str]) -> None:
        await self._reorder(GROUPS, folder_id, ordered_ids)

    async def move_group(self, group_id: str, folder_id: str, ordered_ids: Sequence[str]) -> Group:
        return await self._move(GROUPS, group_id, folder_id, ordered_ids)

    # ==================== 书签 ====================

    async def get_bookmark(self, bookmark_id: str) -> Bookmark:
        """获取书签（含标签）"""
        result = await self.db.execute(
            select(Bookmark)
            .where(Bookmark.id == bookmark_id, Bookmark.user_id == self.user_id)
            .options(selectinload(Bookmark.tags).selectinload(BookmarkTag.tag))
            .execution_options(populate_existing=True)
        )
        bookmark = result.scalar_one_or_none()
        if bookmark is None:
            raise NotFound("bookmark", bookmark_id)
        return bookmark

    async def list_bookmarks(self, group_id: str) -> List[Bookmark]:
        await self._check_parent(BOOKMARKS, group_id)
        result = await self.db.execute(
            select(Bookmark)
            .where(Bookmark.group_id == group_id, Bookmark.user_id == self.user_id)
            .options(selectinload(Bookmark.tags).selectinload(BookmarkTag.tag))
            .order_by(Bookmark.position, Bookmark.created_at)
        )
        return list(result.scalars().all())

    async def create_bookmark(
        self,
        group_id: str,
        url: str,
        title: str,
        description: str = "",
        tags: Optional[Iterable[str]] = None,
    ) -> Bookmark:
        await self._check_parent(BOOKMARKS, group_id)
        url = (url or "").strip()
        title = (title or "").strip()
        description = (description or "").strip()
        validate_bookmark_fields(url, title, description)
        clean_tags = normalize_tags(tags)

        bookmark = Bookmark(
            user_id=self.user_id,
            group_id=group_id,
            url=url,
            title=title,
            description=description,
            position=await self._next_position(BOOKMARKS, group_id),
        )
        self.db.add(bookmark)
        await self.db.flush()
        await self._set_tags(bookmark.id, clean_tags)
        return await self.get_bookmark(bookmark.id)

    async def update_bookmark(
        self,
        bookmark_id: str,
        url: Optional[str] = None,
        title: Optional[str] = None,
        description: Optional[str] = None,
        tags: Optional[Iterable[str]] = None,
    ) -> Bookmark:
        """部分更新；tags 不为 None 时整体替换"""
        bookmark = await self._get_owned(Bookmark, bookmark_id, "bookmark")
        new_url = url.strip() if url is not None else bookmark.url
        new_title = title.strip() if title is not None else bookmark.title
        new_description = description.strip() if description is not None else bookmark.description
        validate_bookmark_fields(new_url, new_title, new_description)
        clean_tags = normalize_tags(tags) if tags is not None else None

        bookmark.url = new_url
        bookmark.title = new_title
        bookmark.description = new_description
        await self.db.flush()
        if clean_tags is not None:
            await self._set_tags(bookmark.id, clean_tags)
        return await self.get_bookmark(bookmark.id)

    async def delete_bookmark(self, bookmark_id: str) -> None:
        await self._delete(BOOKMARKS, bookmark_id)

    async def reorder_bookmarks(self, group_id: str, ordered_ids: Sequence[str]) -> None:
        await self._reorder(BOOKMARKS, group_id, ordered_ids)

    async def move_bookmark(self, bookmark_id: str, group_id: str, ordered_ids: Sequence[str]) -> Bookmark:
        await self._move(BOOKMARKS, bookmark_id, group_id, ordered_ids)
        return await self.get_bookmark(bookmark_id)

    # ==================== 标签 ====================

    async def _ensure_tag(self, name: str) -> Tag:
        result = await self.db.execute(
            select(Tag).where(Tag.user_id == self.user_id, Tag.name == name)
        )
        tag = result.scalar_one_or_none()
        if tag is None:
            tag = Tag(user_id=self.user_id, name=name)
            self.db.add(tag)
            await self.db.flush()
        return tag

    async def _set_tags(self, bookmark_id: str, names: List[str]) -> None:
        """替换书签的标签集合（关联表）"""
        result = await self.db.execute(
            select(BookmarkTag)
            .where(BookmarkTag.bookmark_id == bookmark_id)
            .options(selectinload(BookmarkTag.tag))
        )
        current = {link.tag.name: link for link in result.scalars().all()}

        for name, link in current.items():
            if name not in names:
                await self.db.delete(link)
        for name in names:
            if name not in current:
                tag = await self._ensure_tag(name)
                self.db.add(BookmarkTag(bookmark_id=bookmark_id, tag_id=tag.id))
        await self.db.flush()

    async def list_tags(self) -> list:
        """用户的标签及使用次数，按名称排序"""
        result = await self.db.execute(
            select(Tag, func.count(BookmarkTag.bookmark_id))
            .outerjoin(BookmarkTag, BookmarkTag.tag_id == Tag.id)
            .where(Tag.user_id == self.user_id)
            .group_by(Tag.id)
            .order_by(Tag.name)
        )
        return [(tag, count) for tag, count in result.all()]

    # ==================== 整体状态 ====================

    async def get_state(self) -> dict:
        """用户全部数据，每个列表按 position 排序"""
        folders = await self.db.execute(
            select(Folder).where(Folder.user_id == self.user_id).order_by(Folder.position, Folder.created_at)
        )
        groups = await self.db.execute(
            select(Group).where(Group.user_id == self.user_id).order_by(Group.position, Group.created_at)
        )
        bookmarks = await self.db.execute(
            select(Bookmark)
            .where(Bookmark.user_id == self.user_id)
            .options(selectinload(Bookmark.tags).selectinload(BookmarkTag.tag))
            .execution_options(populate_existing=True)
            .order_by(Bookmark.position, Bookmark.created_at)
        )
        return {
            "workspaces": await self.list_workspaces(),
            "folders": list(folders.scalars().all()),
            "groups": list(groups.scalars().all()),
            "bookmarks": list(bookmarks.scalars().all()),
        }
