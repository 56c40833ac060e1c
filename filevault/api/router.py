"""
API Router - Aggregates the file endpoints.
Base Path: /api
"""

from fastapi import APIRouter

from filevault.api import files

api_router = APIRouter()

api_router.include_router(files.router, tags=["files"])
