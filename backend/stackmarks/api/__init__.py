"""API 路由"""
from fastapi import APIRouter
from .v1 import auth, users, workspaces, folders, groups, bookmarks, tags, transfer

api_router = APIRouter()

# 注册路由
api_router.include_router(auth.router, prefix="/auth", tags=["认证"])
api_router.include_router(users.router, tags=["用户"])
api_router.include_router(workspaces.router, prefix="/workspaces", tags=["工作区"])
api_router.include_router(folders.router, prefix="/folders", tags=["文件夹"])
api_router.include_router(groups.router, prefix="/groups", tags=["分组"])
api_router.include_router(bookmarks.router, prefix="/bookmarks", tags=["书签"])
api_router.include_router(tags.router, prefix="/tags", tags=["标签"])
api_router.include_router(transfer.router, prefix="/transfer", tags=["导入导出"])
