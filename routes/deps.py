# routes/deps.py
from fastapi import Depends, Request

from services.analytics import AnalyticsService
from services.solutions import SolutionService
from services.teachers import TeacherService


def get_settings(request: Request):
    return request.app.state.settings


def get_db(request: Request):
    return request.app.state.db


def get_solution_service(request: Request, db=Depends(get_db), settings=Depends(get_settings)) -> SolutionService:
    return SolutionService(db, settings, clock=request.app.state.clock)


def get_analytics_service(request: Request, db=Depends(get_db), settings=Depends(get_settings)) -> AnalyticsService:
    return AnalyticsService(db, settings, clock=request.app.state.clock)


def get_teacher_service(request: Request, db=Depends(get_db)) -> TeacherService:
    return TeacherService(db, clock=request.app.state.clock)
