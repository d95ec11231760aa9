"""
Netscape 书签文件模块

浏览器通用的书签导出格式（HTML）：
- 解析：递归下降，显式计数匹配嵌套的 <DL>，容错处理残缺标记
- 导出：工作区 → 文件夹 → 分组 → 书签，每层一个 <DL>
"""

from .parser import (
    ParsedFolder,
    ParsedBookmark,
    parse_netscape_html,
    decode_html,
    count_bookmarks,
    flatten_bookmarks,
)
from .writer import (
    export_to_netscape,
    escape_html,
)

__all__ = [
    # 解析
    "ParsedFolder",
    "ParsedBookmark",
    "parse_netscape_html",
    "decode_html",
    "count_bookmarks",
    "flatten_bookmarks",
    # 导出
    "export_to_netscape",
    "escape_html",
]
