# services/analytics.py
from datetime import timedelta
from zoneinfo import ZoneInfo

from services import aggregation
from services.errors import ValidationError
from services.store import SolutionStore
from services.timeutil import day_bounds, utcnow


class AnalyticsService:
    """Loads the solutions a dashboard asks for and hands them to the aggregation functions."""

    def __init__(self, db, settings, clock=utcnow):
        self.settings = settings
        self.clock = clock
        self.tz = ZoneInfo(settings.timezone)
        self.solutions = SolutionStore(db)

    def _day(self, date: str):
        try:
            return day_bounds(date, self.tz)
        except ValueError:
            raise ValidationError("日期格式應為 YYYY-MM-DD", error="參數錯誤")

    def _since(self, days: int):
        now = self.clock()
        return now - timedelta(days=days), now

    async def day_dashboard(self, date: str) -> dict:
        start, end = self._day(date)
        solutions = await self.solutions.find(SolutionStore.range_query(start, end))
        return {
            "success": True,
            "date": date,
            "statistics": aggregation.day_statistics(solutions, self.tz, self.settings.display_url),
        }

    async def student_detail(self, student_name: str, date: str) -> dict:
        start, end = self._day(date)
        query = SolutionStore.range_query(start, end, student_name=student_name)
        solutions = await self.solutions.find(query)
        return {
            "success": True,
            "studentName": student_name,
            "date": date,
            "questions": aggregation.student_questions(solutions, self.tz, self.settings.display_url),
        }

    async def topic_analysis(self, date_range: int = 7, topic: str = None) -> dict:
        start, end = self._since(date_range)
        solutions = await self.solutions.find(SolutionStore.range_query(start, end))
        topic_filter = topic if topic and topic != "all" else None
        return {
            "success": True,
            "dateRange": f"{date_range}天",
            **aggregation.topic_analysis(solutions, self.tz, topic_filter),
        }

    async def student_search(self, student_name: str = None, date_range: int = 7,
                             page: int = 1, limit: int = None) -> dict:
        limit = limit or self.settings.search_page_size
        start, end = self._since(date_range)
        term = student_name if student_name and student_name != "all" else None
        query = SolutionStore.range_query(start, end, search=term)

        total = await self.solutions.count(query)
        solutions = await self.solutions.find(query, skip=(page - 1) * limit, limit=limit)
        return {
            "success": True,
            "dateRange": f"{date_range}天",
            "searchTerm": student_name or "all",
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "pages": aggregation.page_count(total, limit),
            },
            **aggregation.student_search_groups(solutions, self.tz, self.settings.display_url),
        }
