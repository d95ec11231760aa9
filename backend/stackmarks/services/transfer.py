"""JSON 导入导出"""
from typing import Any
import logging

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import StoreError, UnsupportedVersion, ValidationFailed
from ..modules.ordering import sort_by_position
from ..modules.netscape import export_to_netscape
from ..schemas.transfer import (
    ImportResult,
    JsonBookmark,
    JsonExport,
    JsonFolder,
    JsonGroup,
    JsonWorkspace,
)
from .hierarchy import HierarchyStore

logger = logging.getLogger(__name__)

SUPPORTED_VERSION = 1


def build_json_export(state: dict) -> JsonExport:
    """把 get_state() 的结果组装为嵌套的 JSON 导出结构，每层按 position 排序"""

    def children(items, attr, parent_id):
        return sort_by_position(i for i in items if getattr(i, attr) == parent_id)

    workspaces = []
    for workspace in sort_by_position(state["workspaces"]):
        folders = []
        for folder in children(state["folders"], "workspace_id", workspace.id):
            groups = []
            for group in children(state["groups"], "folder_id", folder.id):
                bookmarks = [
                    JsonBookmark(
                        url=b.url,
                        title=b.title,
                        description=b.description,
                        tags=b.tag_names,
                        position=b.position,
                    )
                    for b in children(state["bookmarks"], "group_id", group.id)
                ]
                groups.append(JsonGroup(title=group.title, position=group.position, bookmarks=bookmarks))
            folders.append(JsonFolder(title=folder.title, position=folder.position, groups=groups))
        workspaces.append(JsonWorkspace(title=workspace.title, position=workspace.position, folders=folders))

    return JsonExport(version=SUPPORTED_VERSION, workspaces=workspaces)


def build_netscape_export(state: dict) -> str:
    """导出为 Netscape HTML"""
    return export_to_netscape(state["workspaces"], state["folders"], state["groups"], state["bookmarks"])


def parse_json_export(data: Any) -> JsonExport:
    """先校验版本，再校验结构；任何写入之前完成"""
    if not isinstance(data, dict):
        raise ValidationFailed("JSON export must be an object")
    version = data.get("version")
    # True == 1、1.0 == 1 在 Python 中成立，必须是整数 1
    if type(version) is not int or version != SUPPORTED_VERSION:
        raise UnsupportedVersion(version)
    try:
        return JsonExport.model_validate(data)
    except ValidationError as e:
        raise ValidationFailed(f"Invalid JSON export: {e.errors()[0].get('msg', 'invalid')}") from e


async def import_from_json(db: AsyncSession, user_id: str, data: Any) -> ImportResult:
    """导入 JSON：每个导出的工作区新建一个工作区（追加到已有工作区之后）"""
    export = parse_json_export(data)
    store = HierarchyStore(db, user_id)
    result = ImportResult()

    for json_workspace in sort_by_position(export.workspaces):
        workspace = await store.create_workspace(json_workspace.title)

        for json_folder in sort_by_position(json_workspace.folders):
            folder = await store.create_folder(workspace.id, json_folder.title)
            result.folders_created += 1

            for json_group in sort_by_position(json_folder.groups):
                group = await store.create_group(folder.id, json_group.title)
                result.groups_created += 1

                for json_bookmark in sort_by_position(json_group.bookmarks):
                    try:
                        async with db.begin_nested():
                            await store.create_bookmark(
                                group.id,
                                url=json_bookmark.url,
                                title=json_bookmark.title,
                                description=json_bookmark.description,
                                tags=json_bookmark.tags,
                            )
                    except (StoreError, SQLAlchemyError) as e:
                        message = f'Failed to import bookmark "{json_bookmark.title}": {e}'
                        logger.warning(f"[Import] {message}")
                        result.warnings.append(message)
                        result.bookmarks_skipped += 1
                    else:
                        result.bookmarks_created += 1

    logger.info(
        f"[Import] JSON 导入完成: workspaces={len(export.workspaces)} folders={result.folders_created} "
        f"groups={result.groups_created} bookmarks={result.bookmarks_created}"
    )
    return result
