# services/solutions.py
import logging
import uuid
from datetime import timedelta
from typing import Optional
from pymongo.errors import DuplicateKeyError

from models.solution import Solution
from models.student import Student
from services.errors import NotFound, ValidationError
from services.extraction import extract_student_info
from services.store import SolutionStore, StudentStore
from services.timeutil import utcnow

logger = logging.getLogger(__name__)


class SolutionService:
    """Create, read and expire solution records."""

    def __init__(self, db, settings, clock=utcnow):
        self.settings = settings
        self.clock = clock
        self.solutions = SolutionStore(db)
        self.students = StudentStore(db)

    async def create_solution(self, question: Optional[str], answer: Optional[str], line_user_id: Optional[str] = None) -> dict:
        question = question.strip() if isinstance(question, str) else ""
        answer = answer.strip() if isinstance(answer, str) else ""
        if not question or not answer:
            raise ValidationError("請提供 question 和 answer 參數")

        info = extract_student_info(answer)
        now = self.clock()
        solution = Solution(
            id=str(uuid.uuid4()),
            question=question,
            answer=answer,
            createdAt=now,
            expiresAt=now + timedelta(days=self.settings.solution_ttl_days),
            viewCount=0,
            **info,
        )
        await self.solutions.insert(solution.model_dump())

        if line_user_id:
            student = await self.record_student_question(line_user_id, info, now)
            await self.solutions.set_student(solution.id, student["id"])

        return {"id": solution.id, "url": self.settings.display_url(solution.id)}

    async def record_student_question(self, line_user_id: str, info: dict, now) -> dict:
        existing = await self.students.find_by_line_user_id(line_user_id)
        if existing is None:
            student = Student(
                id=str(uuid.uuid4()),
                name=info["studentName"],
                lineUserId=line_user_id,
                firstQuestionDate=now,
                lastQuestionDate=now,
                totalQuestions=1,
                subjects=[info["subject"]],
                topics=[info["topic"]],
                createdAt=now,
            ).model_dump()
            try:
                await self.students.insert(student)
                logger.info(f"Created student {student['name']} for {line_user_id}")
                return student
            except DuplicateKeyError:
                # A concurrent submission created it first
                pass

        student = await self.students.record_question(line_user_id, info["subject"], info["topic"], now)
        logger.info(f"Updated student {student['name']}, total questions: {student['totalQuestions']}")
        return student

    async def get_solution(self, solution_id: str) -> dict:
        solution = await self.solutions.increment_views(solution_id, self.clock())
        if solution is None:
            raise NotFound("您要查看的數學解題內容不存在或已過期", error="找不到解題內容")
        return solution

    async def sweep_expired(self) -> int:
        deleted = await self.solutions.delete_expired(self.clock())
        if deleted > 0:
            logger.info(f"Removed {deleted} expired solutions")
        return deleted
