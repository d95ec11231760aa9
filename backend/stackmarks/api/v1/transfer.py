"""导入导出路由"""
from fastapi import APIRouter, Body, Depends
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any

from ...database import get_db, get_write_db
from ...models import User
from ...schemas import ImportResult, NetscapeImportRequest
from ...services import (
    HierarchyStore,
    import_from_netscape,
    import_from_json,
    build_json_export,
    build_netscape_export,
)
from ..deps import get_current_user

router = APIRouter()


@router.get("/export/netscape")
async def export_netscape(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """导出为 Netscape 书签 HTML（下载）"""
    state = await HierarchyStore(db, current_user.id).get_state()
    html = build_netscape_export(state)
    return Response(
        content=html.encode("utf-8"),
        media_type="text/html; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="bookmarks.html"'},
    )


@router.get("/export/json")
async def export_json(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """导出为 JSON（version 1）"""
    state = await HierarchyStore(db, current_user.id).get_state()
    export = build_json_export(state)
    return Response(
        content=export.model_dump_json(by_alias=True),
        media_type="application/json",
        headers={"Content-Disposition": 'attachment; filename="bookmarks.json"'},
    )


@router.post("/import/netscape", response_model=ImportResult)
async def import_netscape(
    import_in: NetscapeImportRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_write_db)
):
    """导入 Netscape 书签 HTML，整个导入为一个事务"""
    return await import_from_netscape(
        db,
        current_user.id,
        import_in.html,
        strategy=import_in.strategy,
        root_folder_name=import_in.root_folder_name,
    )


@router.post("/import/json", response_model=ImportResult)
async def import_json(
    payload: Any = Body(...),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_write_db)
):
    """导入 JSON 导出文件（version 必须为 1）"""
    return await import_from_json(db, current_user.id, payload)
