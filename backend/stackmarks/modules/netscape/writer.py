"""Netscape 书签 HTML 导出"""
import html
from typing import Any, Iterable, List

from ..ordering import sort_by_position

HEADER = [
    "<!DOCTYPE NETSCAPE-Bookmark-file-1>",
    "<!-- This is an automatically generated file.",
    "     It will be read and overwritten.",
    "     DO NOT EDIT! -->",
    '<META HTTP-EQUIV="Content-Type" CONTENT="text/html; charset=UTF-8">',
    "<TITLE>Bookmarks</TITLE>",
    "<H1>Bookmarks</H1>",
]


def escape_html(text: str) -> str:
    """HTML 实体转义（& < > " '）"""
    return html.escape(text or "", quote=True)


def _children(items: Iterable[Any], attr: str, parent_id: str) -> List[Any]:
    return sort_by_position(i for i in items if getattr(i, attr) == parent_id)


def export_to_netscape(
    workspaces: Iterable[Any],
    folders: Iterable[Any],
    groups: Iterable[Any],
    bookmarks: Iterable[Any],
) -> str:
    """导出为 Netscape 格式，每层按 position 升序"""
    folders = list(folders)
    groups = list(groups)
    bookmarks = list(bookmarks)

    lines = list(HEADER)
    lines.append("<DL><p>")

    for workspace in sort_by_position(workspaces):
        lines.append(f"    <DT><H3>{escape_html(workspace.title)}</H3>")
        lines.append("    <DL><p>")

        for folder in _children(folders, "workspace_id", workspace.id):
            lines.append(f"        <DT><H3>{escape_html(folder.title)}</H3>")
            lines.append("        <DL><p>")

            for group in _children(groups, "folder_id", folder.id):
                lines.append(f"            <DT><H3>{escape_html(group.title)}</H3>")
                lines.append("            <DL><p>")

                for bookmark in _children(bookmarks, "group_id", group.id):
                    lines.append(
                        f'                <DT><A HREF="{escape_html(bookmark.url)}">'
                        f"{escape_html(bookmark.title)}</A>"
                    )
                    # 只有非空描述才输出 <DD>
                    if bookmark.description:
                        lines.append(f"                <DD>{escape_html(bookmark.description)}")

                lines.append("            </DL><p>")

            lines.append("        </DL><p>")

        lines.append("    </DL><p>")

    lines.append("</DL><p>")
    return "\n".join(lines)
