# main.py
import logging
import time
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import get_settings
from database import connect, init_db
from routes import health, solutions, teacher
from services.errors import ServiceError
from services.solutions import SolutionService
from services.sweeper import ExpirySweeper
from services.teachers import TeacherService
from services.timeutil import utcnow

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_app(settings=None, db=None, clock=utcnow, run_sweeper: bool = True) -> FastAPI:
    """Build the service. Pass a db to skip the MongoDB connection (tests do)."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = None
        if app.state.db is None:
            client, app.state.db, app.state.persistent = await connect(settings)
        await init_db(app.state.db)
        await TeacherService(app.state.db, clock=clock).bootstrap(settings.teacher_line_id)

        sweeper = None
        if run_sweeper:
            sweeper = ExpirySweeper(SolutionService(app.state.db, settings, clock=clock),
                                    interval_minutes=settings.sweep_interval_minutes)
            sweeper.start()

        logger.info(f"Math solution service started on port {settings.port}")
        logger.info(f"Public domain: {settings.web_domain}")
        yield

        if sweeper:
            await sweeper.shutdown()
        if client is not None:
            client.close()
            logger.info("Database connection closed")

    app = FastAPI(lifespan=lifespan)
    app.state.settings = settings
    app.state.db = db
    app.state.persistent = db is not None
    app.state.clock = clock
    app.state.started_at = time.monotonic()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.info(f"Rejected request to {request.url.path}: {exc.errors()}")
        return JSONResponse(status_code=400, content={"success": False, "error": "參數錯誤", "message": "請檢查請求參數"})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return JSONResponse(status_code=404, content={"error": "找不到頁面", "message": "請檢查 URL 是否正確"})
        return JSONResponse(status_code=exc.status_code, content={"error": "請求失敗", "message": str(exc.detail)})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content={"error": "伺服器內部錯誤", "message": "請稍後再試或聯繫技術支援"})

    app.include_router(health.router)
    app.include_router(solutions.router)
    app.include_router(teacher.router)
    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run("main:app", host=settings.host, port=settings.port)
