"""业务服务"""
from .hierarchy import HierarchyStore, normalize_tags
from .users import create_user, get_user, find_user_by_username, update_preferences
from .importer import NetscapeImporter, import_from_netscape
from .transfer import build_json_export, build_netscape_export, parse_json_export, import_from_json

__all__ = [
    "HierarchyStore", "normalize_tags",
    "create_user", "get_user", "find_user_by_username", "update_preferences",
    "NetscapeImporter", "import_from_netscape",
    "build_json_export", "build_netscape_export", "parse_json_export", "import_from_json",
]
