# routes/teacher.py
from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse
from typing import Optional
from zoneinfo import ZoneInfo
import logging

from services.analytics import AnalyticsService
from services.errors import InternalError, ServiceError
from services.rendering import render
from services.teachers import TeacherService
from services.timeutil import local_today
from .auth import current_teacher, path_teacher
from .deps import get_analytics_service, get_settings, get_teacher_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["teacher"])

PAGES = {
    "dashboard": ("/teacher/dashboard/today/{}", "📊 教師 Dashboard 已準備就緒", "點擊下方連結查看今日學習統計"),
    "student-search": ("/teacher/student-search/{}", "🔍 學生查詢 Dashboard 已準備就緒", "點擊下方連結搜尋學生提問記錄"),
    "topic-analysis": ("/teacher/topic-analysis/{}", "📚 主題分析 Dashboard 已準備就緒", "點擊下方連結查看深度主題分析"),
}


async def run_query(awaitable, failure_message: str) -> dict:
    try:
        return await awaitable
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"{failure_message}: {e}")
        raise InternalError(failure_message)


@router.get("/api/teacher/dashboard/{date}", dependencies=[Depends(current_teacher)])
async def dashboard_statistics(date: str, analytics: AnalyticsService = Depends(get_analytics_service)):
    return await run_query(analytics.day_dashboard(date), "查詢失敗，請稍後再試")


@router.get("/api/teacher/student/{studentName}/{date}", dependencies=[Depends(current_teacher)])
async def student_detail(studentName: str, date: str, analytics: AnalyticsService = Depends(get_analytics_service)):
    return await run_query(analytics.student_detail(studentName, date), "查詢失敗，請稍後再試")


@router.get("/api/teacher/topic-analysis/{teacherId}", dependencies=[Depends(path_teacher)])
async def topic_analysis(
    dateRange: int = Query(7, ge=1, le=365),
    topic: Optional[str] = None,
    analytics: AnalyticsService = Depends(get_analytics_service),
):
    return await run_query(analytics.topic_analysis(dateRange, topic), "主題分析失敗")


@router.get("/api/teacher/student-search/{teacherId}", dependencies=[Depends(path_teacher)])
async def student_search(
    studentName: Optional[str] = None,
    dateRange: int = Query(7, ge=1, le=365),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=100),
    analytics: AnalyticsService = Depends(get_analytics_service),
):
    return await run_query(analytics.student_search(studentName, dateRange, page, limit), "學生查詢失敗")


def dashboard_link(page: str, teacher_id: str, settings) -> dict:
    path, message, description = PAGES[page]
    return {
        "success": True,
        "message": message,
        "dashboardUrl": settings.web_domain + path.format(teacher_id),
        "description": description,
    }


@router.get("/api/teacher/dashboard-link/{teacherId}", dependencies=[Depends(path_teacher)])
async def dashboard_link_endpoint(teacherId: str, settings=Depends(get_settings)):
    return dashboard_link("dashboard", teacherId, settings)


@router.get("/api/teacher/student-search-link/{teacherId}", dependencies=[Depends(path_teacher)])
async def student_search_link(teacherId: str, settings=Depends(get_settings)):
    return dashboard_link("student-search", teacherId, settings)


@router.get("/api/teacher/topic-analysis-link/{teacherId}", dependencies=[Depends(path_teacher)])
async def topic_analysis_link(teacherId: str, settings=Depends(get_settings)):
    return dashboard_link("topic-analysis", teacherId, settings)


async def render_teacher_page(teacher_service: TeacherService, teacher_id: str, page: str, data: dict) -> HTMLResponse:
    try:
        await teacher_service.authorize(teacher_id)
    except ServiceError as e:
        return HTMLResponse(render("error", {"title": e.error, "message": e.message}), status_code=e.status_code)
    except Exception as e:
        logger.error(f"Failed to render {page} for {teacher_id}: {e}")
        return HTMLResponse(render("error", {"title": "伺服器錯誤", "message": "請稍後再試"}), status_code=500)
    return HTMLResponse(render(page, data))


@router.get("/teacher/dashboard/today/{teacherId}", response_class=HTMLResponse)
async def dashboard_page(teacherId: str, teacher_service: TeacherService = Depends(get_teacher_service),
                         settings=Depends(get_settings)):
    today = local_today(teacher_service.clock(), ZoneInfo(settings.timezone))
    return await render_teacher_page(teacher_service, teacherId, "dashboard", {
        "teacher_id": teacherId,
        "date": today,
        "web_domain": settings.web_domain,
    })


@router.get("/teacher/student-search/{teacherId}", response_class=HTMLResponse)
async def student_search_page(teacherId: str, teacher_service: TeacherService = Depends(get_teacher_service),
                              settings=Depends(get_settings)):
    return await render_teacher_page(teacher_service, teacherId, "student_search", {
        "teacher_id": teacherId,
        "web_domain": settings.web_domain,
        "page_size": settings.search_page_size,
    })


@router.get("/teacher/topic-analysis/{teacherId}", response_class=HTMLResponse)
async def topic_analysis_page(teacherId: str, teacher_service: TeacherService = Depends(get_teacher_service),
                              settings=Depends(get_settings)):
    return await render_teacher_page(teacher_service, teacherId, "topic_analysis", {
        "teacher_id": teacherId,
        "web_domain": settings.web_domain,
    })
