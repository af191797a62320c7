# services/teachers.py
import logging
import uuid
from typing import Optional
from pymongo.errors import DuplicateKeyError, PyMongoError

from models.teacher import ADMIN_PERMISSIONS, DEFAULT_PERMISSIONS, Teacher
from services.errors import Forbidden, InternalError, Unauthorized
from services.store import TeacherStore
from services.timeutil import utcnow

logger = logging.getLogger(__name__)

DEFAULT_TEACHER_NAME = "教師"
BOOTSTRAP_TEACHER_NAME = "定軒老師"


class TeacherService:
    """Teacher identity checks.

    Every teacher route follows the same policy: an unknown external id is
    provisioned as a regular teacher, a known but inactive one is refused.
    """

    def __init__(self, db, clock=utcnow):
        self.clock = clock
        self.teachers = TeacherStore(db)

    async def authorize(self, line_user_id: Optional[str]) -> dict:
        if not line_user_id:
            raise Unauthorized("請提供教師 ID")
        teacher = await self.teachers.find_by_line_user_id(line_user_id)
        if teacher is None:
            teacher = await self.provision(line_user_id)
        if not teacher.get("isActive", False):
            raise Forbidden("教師身份驗證失敗")
        return teacher

    async def provision(self, line_user_id: str, name: str = DEFAULT_TEACHER_NAME,
                        role: str = "teacher", permissions=None) -> dict:
        teacher = Teacher(
            id=str(uuid.uuid4()),
            name=name,
            lineUserId=line_user_id,
            role=role,
            permissions=list(permissions or DEFAULT_PERMISSIONS),
            createdAt=self.clock(),
        ).model_dump()
        try:
            await self.teachers.insert(teacher)
        except DuplicateKeyError:
            existing = await self.teachers.find_by_line_user_id(line_user_id)
            if existing is None:
                raise InternalError("創建教師記錄失敗")
            return existing
        except PyMongoError as e:
            logger.error(f"Failed to create teacher record for {line_user_id}: {e}")
            raise InternalError("創建教師記錄失敗")
        logger.info(f"Provisioned teacher record: {line_user_id}")
        return teacher

    async def bootstrap(self, line_user_id: Optional[str]) -> Optional[dict]:
        if not line_user_id:
            logger.info("TEACHER_LINE_ID not set, skipping default teacher")
            return None
        try:
            existing = await self.teachers.find_by_line_user_id(line_user_id)
            if existing:
                logger.info("Default teacher already exists")
                return existing
            return await self.provision(line_user_id, name=BOOTSTRAP_TEACHER_NAME,
                                        role="admin", permissions=ADMIN_PERMISSIONS)
        except Exception as e:
            logger.error(f"Failed to create default teacher: {e}")
            return None
