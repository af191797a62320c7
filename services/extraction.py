# services/extraction.py
"""Best-effort extraction of student name, subject and topic from answer text.

Answers produced upstream usually carry labeled lines such as::

    學生名稱: 小明
    學科: 數學
    主題: 二次函數

Labels are optional and free text is unreliable, so every field has a
fallback: a default sentinel, or for the topic a keyword scan.
"""
import re
from dataclasses import dataclass
from typing import Optional, Tuple

ANONYMOUS = "匿名"
DEFAULT_SUBJECT = "數學"
UNKNOWN_TOPIC = "未知"

MAX_NAME_LENGTH = 30
MAX_TOPIC_LENGTH = 50

STUDENT_LABEL = re.compile(r"(?:學生名[稱称]|学生名称)[ \t]*[:：][ \t]*([^\n]*)")
SUBJECT_LABEL = re.compile(r"[學学]科[ \t]*[:：][ \t]*([^\n]*)")
TOPIC_LABEL = re.compile(r"主[題题][ \t]*[:：][ \t]*([^\n]*)")


@dataclass(frozen=True)
class KeywordRule:
    topic: str
    keywords: Tuple[str, ...]

    def matches(self, text: str) -> bool:
        return any(keyword in text for keyword in self.keywords)


# Evaluated in order, first match wins.
TOPIC_RULES = (
    KeywordRule("三角形", ("三角形", "勾股", "直角")),
    KeywordRule("一次函數", ("一次函數", "截距", "mx")),
    KeywordRule("二次函數", ("二次函數", "拋物線", "頂點")),
    KeywordRule("坐標平面", ("坐標", "平移", "圖形")),
    KeywordRule("機率統計", ("機率", "統計")),
)


def labeled_value(pattern, text: str, max_length: int = None) -> Optional[str]:
    """Trimmed value of the first labeled line, or None when absent, empty or too long."""
    match = pattern.search(text)
    if not match:
        return None
    value = match.group(1).strip()
    if not value:
        return None
    if max_length is not None and len(value) > max_length:
        return None
    return value


def infer_topic(text: str, rules=TOPIC_RULES) -> str:
    if text:
        for rule in rules:
            if rule.matches(text):
                return rule.topic
    return UNKNOWN_TOPIC


def extract_student_info(answer: str) -> dict:
    answer = answer or ""
    topic = labeled_value(TOPIC_LABEL, answer, MAX_TOPIC_LENGTH)
    if not topic or topic == UNKNOWN_TOPIC:
        topic = infer_topic(answer)
    return {
        "studentName": labeled_value(STUDENT_LABEL, answer, MAX_NAME_LENGTH) or ANONYMOUS,
        "subject": labeled_value(SUBJECT_LABEL, answer) or DEFAULT_SUBJECT,
        "topic": topic,
    }


def resolve_topic(solution: dict) -> str:
    """Topic for analytics: extracted from the answer, else inferred from the question."""
    topic = extract_student_info(solution.get("answer", ""))["topic"]
    if topic == UNKNOWN_TOPIC:
        topic = infer_topic(solution.get("question", ""))
    return topic
