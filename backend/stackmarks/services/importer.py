"""
Netscape 书签导入

把解析得到的 文件夹/书签 树映射到内部三层结构（文件夹 → 分组 → 书签），
全部放入用户 position 最小的工作区（没有则新建 "Imported"）：

- 顶层 PAGE="true"：透明，子节点按同一层处理
- 顶层 H3（含 BOOKMARKS="true"）：文件夹；其下 H3 为分组，
  直接位于文件夹下的书签进入 "Unsorted" 分组
- 顶层书签：没有所属文件夹，跳过并记录警告
- 分组下还有文件夹（超出三层）：按策略 flatten / skip / root 处理

单个书签创建失败只记为跳过，不影响整体导入。
"""

from typing import Optional, Sequence
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..exceptions import StoreError
from ..modules.netscape import (
    ParsedBookmark,
    ParsedFolder,
    parse_netscape_html,
    count_bookmarks,
    flatten_bookmarks,
)
from ..schemas.transfer import ImportResult, ImportStrategy
from .hierarchy import HierarchyStore

logger = logging.getLogger(__name__)

IMPORTED_WORKSPACE_TITLE = "Imported"
UNSORTED_GROUP_TITLE = "Unsorted"
UNTITLED = "Untitled"


class NetscapeImporter:
    """一次导入的上下文：目标工作区、策略与统计结果"""

    def __init__(
        self,
        db: AsyncSession,
        user_id: str,
        strategy: ImportStrategy = ImportStrategy.FLATTEN,
        root_folder_name: Optional[str] = None,
    ):
        self.db = db
        self.store = HierarchyStore(db, user_id)
        self.strategy = ImportStrategy(strategy)
        self.root_folder_name = root_folder_name or settings.IMPORT_ROOT_FOLDER_NAME
        self.result = ImportResult()
        self.workspace_id: Optional[str] = None

    async def run(self, html: str) -> ImportResult:
        nodes = parse_netscape_html(html)
        logger.info(f"[Import] 开始导入: {len(nodes)} 个顶层节点, strategy={self.strategy.value}")

        workspace = await self.store.first_workspace()
        if workspace is None:
            workspace = await self.store.create_workspace(IMPORTED_WORKSPACE_TITLE)
        self.workspace_id = workspace.id

        await self._import_top_level(nodes)

        logger.info(
            f"[Import] 完成: folders={self.result.folders_created} groups={self.result.groups_created} "
            f"bookmarks={self.result.bookmarks_created} skipped={self.result.bookmarks_skipped}"
        )
        return self.result

    async def _import_top_level(self, nodes: Sequence) -> None:
        # PAGE 文件夹可层层嵌套，用迭代器栈展开
        pending = [iter(nodes)]
        while pending:
            node = next(pending[-1], None)
            if node is None:
                pending.pop()
                continue

            if isinstance(node, ParsedBookmark):
                self._warn(f'Bookmark "{node.title}" at root level, skipping')
                self.result.bookmarks_skipped += 1
                continue

            if node.is_page:
                pending.append(iter(node.children))
                continue

            # BOOKMARKS="true" 与普通 H3 都映射为文件夹，子 H3 为分组
            folder = await self.store.create_folder(self.workspace_id, node.title or UNTITLED)
            self.result.folders_created += 1
            await self._import_folder_children(folder.id, node.children)

    async def _import_folder_children(self, folder_id: str, children: Sequence) -> None:
        for child in children:
            if isinstance(child, ParsedBookmark):
                group_id = await self._get_or_create_group(folder_id, UNSORTED_GROUP_TITLE)
                await self._add_bookmark(group_id, child)
            else:
                group = await self.store.create_group(folder_id, child.title or UNTITLED)
                self.result.groups_created += 1
                await self._import_group_children(group.id, child.children)

    async def _import_group_children(self, group_id: str, children: Sequence) -> None:
        for child in children:
            if isinstance(child, ParsedBookmark):
                await self._add_bookmark(group_id, child)
            else:
                await self._overflow(group_id, child)

    async def _overflow(self, group_id: str, folder: ParsedFolder) -> None:
        """分组之下的文件夹：内部模型没有更深的层级"""
        if self.strategy == ImportStrategy.FLATTEN:
            for bookmark in flatten_bookmarks(folder):
                await self._add_bookmark(group_id, bookmark)

        elif self.strategy == ImportStrategy.SKIP:
            count = count_bookmarks(folder)
            self.result.bookmarks_skipped += count
            self._warn(f'Skipped {count} bookmarks in nested folder "{folder.title}"')

        elif self.strategy == ImportStrategy.ROOT:
            root_folder, created = await self.store.get_or_create_folder(self.workspace_id, self.root_folder_name)
            if created:
                self.result.folders_created += 1
            target_id = await self._get_or_create_group(root_folder.id, folder.title or UNTITLED)
            for bookmark in flatten_bookmarks(folder):
                await self._add_bookmark(target_id, bookmark)

    async def _get_or_create_group(self, folder_id: str, title: str) -> str:
        group, created = await self.store.get_or_create_group(folder_id, title)
        if created:
            self.result.groups_created += 1
        return group.id

    async def _add_bookmark(self, group_id: str, bookmark: ParsedBookmark) -> None:
        """在 SAVEPOINT 中创建书签，失败只回滚这一条"""
        try:
            async with self.db.begin_nested():
                await self.store.create_bookmark(
                    group_id,
                    url=bookmark.url,
                    title=bookmark.title or bookmark.url,
                    description="",
                    tags=[],
                )
        except (StoreError, SQLAlchemyError) as e:
            self.result.bookmarks_skipped += 1
            self._warn(f'Failed to import bookmark "{bookmark.title}": {e}')
        else:
            self.result.bookmarks_created += 1

    def _warn(self, message: str) -> None:
        logger.warning(f"[Import] {message}")
        self.result.warnings.append(message)


async def import_from_netscape(
    db: AsyncSession,
    user_id: str,
    html: str,
    strategy: ImportStrategy = ImportStrategy.FLATTEN,
    root_folder_name: Optional[str] = None,
) -> ImportResult:
    """导入 Netscape 书签 HTML"""
    importer = NetscapeImporter(db, user_id, strategy=strategy, root_folder_name=root_folder_name)
    return await importer.run(html)
