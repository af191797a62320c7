# services/aggregation.py
"""Dashboard statistics computed from lists of solution documents.

Every function here is pure: it takes already-filtered solutions (newest
first, as the store returns them) and produces plain dicts ready for JSON.
Timestamps are bucketed in the configured local timezone.
"""
import math
from collections import Counter, defaultdict
from typing import Callable, List
from zoneinfo import ZoneInfo

from services.extraction import ANONYMOUS, extract_student_info, resolve_topic
from services.timeutil import to_local

ANONYMOUS_DISPLAY = "匿名學生"


def percentage(count: int, total: int) -> float:
    return round(count / total * 100, 2) if total else 0.0


def topic_distribution(topics: List[str]) -> List[dict]:
    total = len(topics)
    counts = Counter(topics)
    rows = [{"name": name, "count": count, "percentage": percentage(count, total)} for name, count in counts.items()]
    return sorted(rows, key=lambda row: row["count"], reverse=True)


def hourly_distribution(solutions: List[dict], tz: ZoneInfo) -> List[dict]:
    counts = Counter(f"{to_local(s['createdAt'], tz).hour:02d}:00" for s in solutions)
    return [{"hour": hour, "count": counts[hour]} for hour in sorted(counts)]


def student_activity(solutions: List[dict], tz: ZoneInfo, url_for: Callable[[str], str]) -> List[dict]:
    students = {}
    for solution in solutions:
        name = extract_student_info(solution["answer"])["studentName"]
        topic = resolve_topic(solution)
        entry = students.setdefault(name, {"name": name, "count": 0, "topics": [], "questions": []})
        entry["count"] += 1
        if topic not in entry["topics"]:
            entry["topics"].append(topic)
        entry["questions"].append({
            "question": solution["question"],
            "topic": topic,
            "time": to_local(solution["createdAt"], tz),
            "url": url_for(solution["id"]),
        })
    return sorted(students.values(), key=lambda s: s["count"], reverse=True)


def day_statistics(solutions: List[dict], tz: ZoneInfo, url_for: Callable[[str], str]) -> dict:
    total = len(solutions)
    students = student_activity(solutions, tz, url_for)
    return {
        "totalQuestions": total,
        "activeStudents": len(students),
        "averagePerHour": round(total / 24, 1) if total else 0,
        "topics": topic_distribution([resolve_topic(s) for s in solutions]),
        "students": students,
        "hourlyDistribution": hourly_distribution(solutions, tz),
    }


def student_questions(solutions: List[dict], tz: ZoneInfo, url_for: Callable[[str], str]) -> List[dict]:
    return [
        {
            "question": s["question"],
            "topic": resolve_topic(s),
            "subject": s["subject"],
            "time": to_local(s["createdAt"], tz),
            "url": url_for(s["id"]),
        }
        for s in solutions
    ]


def peak_hour(hourly: dict) -> int:
    """Hour with the highest count; ties go to the hour seen first."""
    if not hourly:
        return 0
    return max(hourly.items(), key=lambda item: item[1])[0]


def topic_analysis(solutions: List[dict], tz: ZoneInfo, topic_filter: str = None) -> dict:
    topics = {}
    matrix = defaultdict(Counter)
    analysed = 0

    for solution in solutions:
        topic = resolve_topic(solution)
        if topic_filter and topic != topic_filter:
            continue
        analysed += 1
        student = extract_student_info(solution["answer"])["studentName"]
        created = to_local(solution["createdAt"], tz)

        stats = topics.setdefault(topic, {
            "name": topic,
            "totalQuestions": 0,
            "uniqueStudents": [],
            "dailyQuestions": Counter(),
            "hourlyDistribution": Counter(),
            "studentEngagement": Counter(),
        })
        stats["totalQuestions"] += 1
        if student not in stats["uniqueStudents"]:
            stats["uniqueStudents"].append(student)
        stats["dailyQuestions"][created.strftime("%Y-%m-%d")] += 1
        stats["hourlyDistribution"][created.hour] += 1
        stats["studentEngagement"][student] += 1
        matrix[student][topic] += 1

    topic_list = []
    for stats in topics.values():
        days = len(stats["dailyQuestions"])
        topic_list.append({
            "name": stats["name"],
            "totalQuestions": stats["totalQuestions"],
            "uniqueStudents": stats["uniqueStudents"],
            "uniqueStudentCount": len(stats["uniqueStudents"]),
            "avgQuestionsPerDay": round(stats["totalQuestions"] / days, 1) if days else 0,
            "peakHour": peak_hour(stats["hourlyDistribution"]),
            "difficultyLevel": "medium",
            "dailyQuestions": [{"date": d, "count": c} for d, c in sorted(stats["dailyQuestions"].items())],
            "hourlyDistribution": [{"hour": h, "count": c} for h, c in sorted(stats["hourlyDistribution"].items())],
            "studentEngagement": [
                {"student": name, "count": c}
                for name, c in sorted(stats["studentEngagement"].items(), key=lambda item: item[1], reverse=True)
            ],
        })
    topic_list.sort(key=lambda t: t["totalQuestions"], reverse=True)

    return {
        "totalSolutions": analysed,
        "topicAnalysis": topic_list,
        "studentTopicMatrix": [
            {"student": student, "topics": [{"topic": t, "count": c} for t, c in counts.items()]}
            for student, counts in matrix.items()
        ],
        "summary": {
            "totalTopics": len(topic_list),
            "mostActiveTopic": topic_list[0] if topic_list else None,
            "totalStudents": len(matrix),
            "avgQuestionsPerTopic": round(analysed / len(topic_list), 1) if topic_list else 0,
        },
    }


def page_count(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


def student_search_groups(solutions: List[dict], tz: ZoneInfo, url_for: Callable[[str], str]) -> dict:
    """Group one page of search hits by extracted student name."""
    students = {}
    page_topics = []
    for solution in solutions:
        name = extract_student_info(solution["answer"])["studentName"]
        if name == ANONYMOUS:
            name = ANONYMOUS_DISPLAY
        topic = resolve_topic(solution)
        page_topics.append(topic)
        created = to_local(solution["createdAt"], tz)

        entry = students.setdefault(name, {
            "name": name,
            "totalQuestions": 0,
            "topics": [],
            "questions": [],
            "lastActive": None,
        })
        entry["totalQuestions"] += 1
        if topic not in entry["topics"]:
            entry["topics"].append(topic)
        entry["questions"].append({
            "id": solution["id"],
            "question": solution["question"],
            "topic": topic,
            "time": created,
            "url": url_for(solution["id"]),
        })
        if entry["lastActive"] is None or created > entry["lastActive"]:
            entry["lastActive"] = created

    student_list = []
    for entry in students.values():
        entry["topicCount"] = len(entry["topics"])
        entry["questions"].sort(key=lambda q: q["time"], reverse=True)
        student_list.append(entry)
    student_list.sort(key=lambda s: s["totalQuestions"], reverse=True)

    total = len(solutions)
    return {
        "summary": {
            "totalStudents": len(student_list),
            "totalQuestions": total,
            "avgQuestionsPerStudent": round(total / len(student_list), 1) if student_list else 0,
        },
        "students": student_list,
        "topics": topic_distribution(page_topics),
    }
