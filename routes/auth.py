# routes/auth.py
from fastapi import Depends, Header, Query
from typing import Optional
import logging

from services.errors import InternalError, ServiceError, Unauthorized
from services.teachers import TeacherService
from .deps import get_settings, get_teacher_service

logger = logging.getLogger(__name__)


async def require_api_key(
    x_api_key: Optional[str] = Header(None),
    apiKey: Optional[str] = Query(None),
    settings=Depends(get_settings),
):
    if not settings.api_key:
        logger.warning("API_KEY not set, skipping API key validation")
        return
    supplied = x_api_key or apiKey
    if not supplied or supplied != settings.api_key:
        raise Unauthorized("請提供有效的 API Key")


async def authorize_teacher(teacher_service: TeacherService, line_user_id: Optional[str]) -> dict:
    try:
        return await teacher_service.authorize(line_user_id)
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Teacher authorization failed: {e}")
        raise InternalError("身份驗證失敗")


async def current_teacher(
    x_teacher_id: Optional[str] = Header(None),
    teacherId: Optional[str] = Query(None),
    teacher_service: TeacherService = Depends(get_teacher_service),
) -> dict:
    """Teacher named by the X-Teacher-Id header or teacherId query parameter."""
    return await authorize_teacher(teacher_service, x_teacher_id or teacherId)


async def path_teacher(teacherId: str, teacher_service: TeacherService = Depends(get_teacher_service)) -> dict:
    """Teacher named by the {teacherId} path segment."""
    return await authorize_teacher(teacher_service, teacherId)
