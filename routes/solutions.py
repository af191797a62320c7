# routes/solutions.py
from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from zoneinfo import ZoneInfo
import logging

from models.solution import SolutionCreate, SolutionCreated
from services.errors import InternalError, NotFound, ServiceError
from services.rendering import render
from services.solutions import SolutionService
from services.timeutil import to_local
from .auth import require_api_key
from .deps import get_settings, get_solution_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["solutions"])


@router.post("/api/create-solution", response_model=SolutionCreated, dependencies=[Depends(require_api_key)])
async def create_solution(body: SolutionCreate, service: SolutionService = Depends(get_solution_service)):
    try:
        created = await service.create_solution(body.question, body.answer, body.lineUserId)
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Failed to create solution: {e}")
        raise InternalError("創建解題網頁失敗，請稍後再試")
    return SolutionCreated(**created)


@router.get("/display/{id}", response_class=HTMLResponse)
async def display_solution(id: str, service: SolutionService = Depends(get_solution_service),
                           settings=Depends(get_settings)):
    try:
        solution = await service.get_solution(id)
    except NotFound:
        return HTMLResponse(render("not_found"), status_code=404)
    except Exception as e:
        logger.error(f"Failed to display solution {id}: {e}")
        return HTMLResponse(render("error", {"title": "伺服器錯誤", "message": "請稍後再試"}), status_code=500)

    created = to_local(solution["createdAt"], ZoneInfo(settings.timezone))
    return HTMLResponse(render("solution", {
        "question": solution["question"],
        "answer": solution["answer"],
        "subject": solution["subject"],
        "topic": solution["topic"],
        "created_at": created.strftime("%Y-%m-%d %H:%M"),
        "view_count": solution["viewCount"],
    }))
