# services/store.py
import re
from datetime import datetime
from typing import List, Optional
from pymongo import ReturnDocument

NO_ID = {"_id": 0}


class SolutionStore:
    def __init__(self, db):
        self.collection = db.solutions

    async def insert(self, solution: dict) -> None:
        await self.collection.insert_one(dict(solution))

    async def increment_views(self, solution_id: str, now: datetime) -> Optional[dict]:
        """Bump viewCount of a live solution and return it, or None when missing or expired."""
        return await self.collection.find_one_and_update(
            {"id": solution_id, "expiresAt": {"$gt": now}},
            {"$inc": {"viewCount": 1}},
            projection=NO_ID,
            return_document=ReturnDocument.AFTER,
        )

    async def set_student(self, solution_id: str, student_id: str) -> None:
        await self.collection.update_one({"id": solution_id}, {"$set": {"studentId": student_id}})

    @staticmethod
    def range_query(start: datetime, end: datetime, student_name: str = None, search: str = None) -> dict:
        query = {"createdAt": {"$gte": start, "$lte": end}}
        if student_name:
            query["studentName"] = student_name
        if search:
            pattern = re.escape(search)
            query["$or"] = [
                {"answer": {"$regex": pattern, "$options": "i"}},
                {"question": {"$regex": pattern, "$options": "i"}},
            ]
        return query

    async def find(self, query: dict, skip: int = 0, limit: int = 0) -> List[dict]:
        cursor = self.collection.find(query, NO_ID, sort=[("createdAt", -1)], skip=skip, limit=limit)
        return await cursor.to_list(None)

    async def count(self, query: dict) -> int:
        return await self.collection.count_documents(query)

    async def delete_expired(self, now: datetime) -> int:
        result = await self.collection.delete_many({"expiresAt": {"$lt": now}})
        return result.deleted_count


class StudentStore:
    def __init__(self, db):
        self.collection = db.students

    async def find_by_line_user_id(self, line_user_id: str) -> Optional[dict]:
        return await self.collection.find_one({"lineUserId": line_user_id}, NO_ID)

    async def insert(self, student: dict) -> None:
        await self.collection.insert_one(dict(student))

    async def record_question(self, line_user_id: str, subject: str, topic: str, now: datetime) -> Optional[dict]:
        return await self.collection.find_one_and_update(
            {"lineUserId": line_user_id},
            {
                "$inc": {"totalQuestions": 1},
                "$set": {"lastQuestionDate": now},
                "$addToSet": {"subjects": subject, "topics": topic},
            },
            projection=NO_ID,
            return_document=ReturnDocument.AFTER,
        )


class TeacherStore:
    def __init__(self, db):
        self.collection = db.teachers

    async def find_by_line_user_id(self, line_user_id: str) -> Optional[dict]:
        return await self.collection.find_one({"lineUserId": line_user_id}, NO_ID)

    async def insert(self, teacher: dict) -> None:
        await self.collection.insert_one(dict(teacher))
