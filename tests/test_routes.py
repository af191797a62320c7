import asyncio

ANSWER = "學生名稱: 小明\n學科: 數學\n主題: 二次函數\n回覆: x=2或x=3"
TEACHER = {"X-Teacher-Id": "T-BOOT"}


def create(client, question="求解 x^2-5x+6=0", answer=ANSWER, **extra):
    body = {"question": question, "answer": answer, **extra}
    return client.post("/api/create-solution", json=body, headers={"X-API-Key": "secret"})


def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    data = res.json()
    assert data["status"] == "healthy"
    assert data["uptime"] >= 0
    assert "timestamp" in data


def test_create_solution_requires_api_key(client):
    res = client.post("/api/create-solution", json={"question": "q", "answer": "a"})
    assert res.status_code == 401
    assert res.json()["success"] is False

    res = client.post("/api/create-solution", json={"question": "q", "answer": "a"}, headers={"X-API-Key": "SECRET"})
    assert res.status_code == 401

    res = client.post("/api/create-solution?apiKey=secret", json={"question": "q", "answer": "a"})
    assert res.status_code == 200


def test_create_solution(client):
    res = create(client)
    assert res.status_code == 200
    data = res.json()
    assert data["success"] is True
    assert data["url"] == f"https://math.example.com/display/{data['id']}"
    assert data["message"]


def test_create_solution_missing_fields(client):
    res = create(client, answer="  ")
    assert res.status_code == 400
    assert "question" in res.json()["message"]

    res = client.post("/api/create-solution", json={"question": "q"}, headers={"X-API-Key": "secret"})
    assert res.status_code == 400

    res = client.post("/api/create-solution", content="not json", headers={"X-API-Key": "secret"})
    assert res.status_code == 400


def test_create_solution_with_external_user(client, db):
    create(client, externalUserId="U1")
    create(client, answer="學生名稱: 小明\n主題: 三角形", lineUserId="U1")
    student = asyncio.run(db.students.find_one({"lineUserId": "U1"}))
    assert student["totalQuestions"] == 2
    assert set(student["topics"]) == {"二次函數", "三角形"}


def test_display_solution(client, db):
    solution_id = create(client, question="1 < 2 ?").json()["id"]
    res = client.get(f"/display/{solution_id}")
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/html")
    assert "1 &lt; 2 ?" in res.text
    assert "👤 學生：" in res.text
    assert "x=2或x=3" in res.text

    client.get(f"/display/{solution_id}")
    stored = asyncio.run(db.solutions.find_one({"id": solution_id}))
    assert stored["viewCount"] == 2


def test_display_unknown_solution(client):
    res = client.get("/display/unknown-id")
    assert res.status_code == 404
    assert "找不到解題內容" in res.text


def test_display_expired_solution(client, clock):
    solution_id = create(client).json()["id"]
    clock.advance(days=30, seconds=1)
    assert client.get(f"/display/{solution_id}").status_code == 404


def test_bootstrap_teacher_created_on_startup(client, db):
    teacher = asyncio.run(db.teachers.find_one({"lineUserId": "T-BOOT"}))
    assert teacher["role"] == "admin"


def test_dashboard_requires_teacher(client):
    res = client.get("/api/teacher/dashboard/2025-03-10")
    assert res.status_code == 401


def test_dashboard_rejects_inactive_teacher(client, db):
    asyncio.run(db.teachers.insert_one({"id": "t", "name": "n", "lineUserId": "T-OFF", "role": "teacher",
                                        "permissions": [], "isActive": False}))
    res = client.get("/api/teacher/dashboard/2025-03-10", headers={"X-Teacher-Id": "T-OFF"})
    assert res.status_code == 403
    res = client.get("/teacher/dashboard/today/T-OFF")
    assert res.status_code == 403
    assert "text/html" in res.headers["content-type"]


def test_dashboard_statistics(client):
    create(client)
    create(client, answer="學生名稱: 小華\n勾股定理")
    res = client.get("/api/teacher/dashboard/2025-03-10", headers=TEACHER)
    assert res.status_code == 200
    stats = res.json()["statistics"]
    assert stats["totalQuestions"] == 2
    assert stats["activeStudents"] == 2
    assert stats["hourlyDistribution"] == [{"hour": "10:00", "count": 2}]
    assert sorted(t["name"] for t in stats["topics"]) == ["三角形", "二次函數"]

    other_day = client.get("/api/teacher/dashboard/2025-03-11?teacherId=T-BOOT")
    assert other_day.json()["statistics"]["totalQuestions"] == 0


def test_student_detail_topics_match_dashboard(client):
    create(client, question="求拋物線的頂點", answer="學生名稱: 小明\n答案是 (1, 2)")
    dashboard = client.get("/api/teacher/dashboard/2025-03-10", headers=TEACHER).json()
    detail = client.get("/api/teacher/student/小明/2025-03-10", headers=TEACHER).json()
    assert [t["name"] for t in dashboard["statistics"]["topics"]] == ["二次函數"]
    assert [q["topic"] for q in detail["questions"]] == ["二次函數"]


def test_dashboard_rejects_bad_date(client):
    res = client.get("/api/teacher/dashboard/2025-13-40", headers=TEACHER)
    assert res.status_code == 400


def test_student_detail(client):
    create(client)
    create(client, answer="學生名稱: 小華\n勾股定理")
    res = client.get("/api/teacher/student/小明/2025-03-10", headers=TEACHER)
    assert res.status_code == 200
    data = res.json()
    assert data["studentName"] == "小明"
    assert [q["topic"] for q in data["questions"]] == ["二次函數"]
    assert data["questions"][0]["url"].startswith("https://math.example.com/display/")


def test_topic_analysis_provisions_unknown_teacher(client, db):
    create(client)
    res = client.get("/api/teacher/topic-analysis/NEW-T?dateRange=7&topic=all")
    assert res.status_code == 200
    data = res.json()
    assert data["dateRange"] == "7天"
    assert data["totalSolutions"] == 1
    assert data["topicAnalysis"][0]["name"] == "二次函數"
    assert asyncio.run(db.teachers.find_one({"lineUserId": "NEW-T"}))["role"] == "teacher"


def test_student_search_pagination(client):
    for i in range(4):
        create(client, question=f"第{i}題", answer=f"學生名稱: 小明\n主題: 三角形 {i}")
    create(client, question="另一題", answer="學生名稱: 小華\n主題: 機率")

    res = client.get("/api/teacher/student-search/T-BOOT?limit=2&page=3")
    assert res.status_code == 200
    data = res.json()
    assert data["pagination"] == {"page": 3, "limit": 2, "total": 5, "pages": 3}
    assert data["summary"]["totalQuestions"] == 1

    res = client.get("/api/teacher/student-search/T-BOOT?studentName=小明&limit=20")
    data = res.json()
    assert data["pagination"]["total"] == 4
    assert data["searchTerm"] == "小明"
    assert [s["name"] for s in data["students"]] == ["小明"]
    assert len(data["students"][0]["questions"]) == 4


def test_student_search_is_case_insensitive_literal(client):
    create(client, question="Solve ABC", answer="學生名稱: Amy")
    create(client, question="a.c", answer="學生名稱: Bob")
    data = client.get("/api/teacher/student-search/T-BOOT?studentName=abc").json()
    assert data["pagination"]["total"] == 1
    data = client.get("/api/teacher/student-search/T-BOOT?studentName=a.c").json()
    assert data["pagination"]["total"] == 1


def test_student_search_rejects_bad_page(client):
    assert client.get("/api/teacher/student-search/T-BOOT?page=0").status_code == 400


def test_dashboard_links(client):
    res = client.get("/api/teacher/dashboard-link/T1")
    assert res.json()["dashboardUrl"] == "https://math.example.com/teacher/dashboard/today/T1"
    res = client.get("/api/teacher/student-search-link/T1")
    assert res.json()["dashboardUrl"] == "https://math.example.com/teacher/student-search/T1"
    res = client.get("/api/teacher/topic-analysis-link/T1")
    assert res.json()["dashboardUrl"] == "https://math.example.com/teacher/topic-analysis/T1"


def test_teacher_pages(client):
    res = client.get("/teacher/dashboard/today/T1")
    assert res.status_code == 200
    assert "2025-03-10" in res.text
    assert client.get("/teacher/student-search/T1").status_code == 200
    assert client.get("/teacher/topic-analysis/T1").status_code == 200


def test_unknown_path(client):
    res = client.get("/nope")
    assert res.status_code == 404
    assert res.json()["error"] == "找不到頁面"
