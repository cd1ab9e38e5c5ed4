from fastapi.testclient import TestClient


def _create_result(client) -> dict:
    attempt = client.post("/api/attempts").json()
    answers = {q["id"]: 0 for q in attempt["questions"]}
    response = client.post(f"/api/attempts/{attempt['attempt_id']}/submit", json={"answers": answers})
    assert response.status_code == 201
    return response.json()


def test_health_and_app_page(client):
    assert client.get("/health").json() == {"status": "healthy"}

    page = client.get("/")
    assert page.status_code == 200
    assert "TechMock" in page.text
    assert "__PASS_THRESHOLD__" not in page.text


def test_session_is_empty_before_registration(client):
    response = client.get("/api/session")

    assert response.status_code == 200
    assert response.json() is None


def test_register_validation_errors(client):
    missing = client.post("/api/register", json={"name": " ", "email": "a@x.com"})
    bad_role = client.post("/api/register", json={"name": "A", "email": "a@x.com", "role": "owner"})

    assert missing.status_code == 422
    assert missing.json()["detail"] == "Name and Email are required"
    assert bad_role.status_code == 422


def test_login_unknown_email_is_not_found(client):
    response = client.post("/api/login", json={"email": "nobody@x.com"})

    assert response.status_code == 404
    assert response.json()["detail"] == "User not found. Please register."


def test_student_flow_over_http(student_client):
    assert student_client.post("/api/logout").status_code == 204
    assert student_client.get("/api/session").json() is None

    login = student_client.post("/api/login", json={"email": "ADA@X.COM"})
    assert login.status_code == 200
    assert login.json()["name"] == "Ada"

    attempt = student_client.post("/api/attempts")
    assert attempt.status_code == 201
    body = attempt.json()
    assert len(body["questions"]) == 4
    assert all("correct_option_index" not in q for q in body["questions"])

    result = student_client.post(f"/api/attempts/{body['attempt_id']}/submit", json={"answers": {}})
    assert result.status_code == 201
    assert result.json()["score"] == 0
    assert result.json()["passed"] is False

    history = student_client.get("/api/results").json()
    assert [r["id"] for r in history] == [result.json()["id"]]

    dashboard = student_client.get("/api/dashboard").json()
    assert dashboard["tests_taken"] == 1
    assert dashboard["average_percentage"] == 0


def test_resubmitting_an_attempt_is_not_found(student_client):
    attempt = student_client.post("/api/attempts").json()
    url = f"/api/attempts/{attempt['attempt_id']}/submit"

    assert student_client.post(url, json={"answers": {}}).status_code == 201
    assert student_client.post(url, json={"answers": {}}).status_code == 404
    assert student_client.post("/api/attempts/unknown/submit", json={"answers": {}}).status_code == 404


def test_result_review_includes_correct_answers(student_client):
    result = _create_result(student_client)

    review = student_client.get(f"/api/results/{result['id']}")

    assert review.status_code == 200
    body = review.json()
    assert body["result"]["id"] == result["id"]
    assert len(body["items"]) == 4
    assert all("correct_option_index" in item["question"] for item in body["items"])
    assert body["missing_question_ids"] == []
    assert student_client.get("/api/results/unknown").status_code == 404


def test_results_of_other_users_are_hidden_from_students(client):
    client.post("/api/register", json={"name": "Ada", "email": "ada@x.com"})
    result = _create_result(client)
    client.post("/api/register", json={"name": "Bob", "email": "bob@x.com"})

    assert client.get(f"/api/results/{result['id']}").status_code == 404

    client.post("/api/register", json={"name": "Grace", "email": "grace@x.com", "role": "admin"})
    assert client.get(f"/api/results/{result['id']}").status_code == 200


def test_guards_require_session_and_admin_role(client):
    assert client.post("/api/attempts").status_code == 401
    assert client.get("/api/results").status_code == 401
    assert client.get("/api/questions").status_code == 401

    client.post("/api/register", json={"name": "Ada", "email": "ada@x.com"})
    assert client.get("/api/questions").status_code == 403
    assert client.post("/api/questions/generate", json={"topic": "SQL"}).status_code == 403
    assert client.delete("/api/questions/q1").status_code == 403


def test_admin_manages_questions(admin_client):
    assert len(admin_client.get("/api/questions").json()) == 4

    created = admin_client.post(
        "/api/questions",
        json={"text": "What is **2+2**?", "options": ["3", "4", "5", "6"], "correct_option_index": 1},
    )
    assert created.status_code == 201
    question = created.json()
    assert question["category"] == "General"
    assert "<strong>2+2</strong>" in question["text_html"]

    invalid = admin_client.post(
        "/api/questions",
        json={"text": "Q", "options": ["a", "b"], "correct_option_index": 0},
    )
    assert invalid.status_code == 422

    assert admin_client.delete(f"/api/questions/{question['id']}").status_code == 204
    assert admin_client.delete("/api/questions/q1").status_code == 204
    assert [q["id"] for q in admin_client.get("/api/questions").json()] == ["q2", "q3", "q4"]


def test_generate_without_key_adds_mock_questions(admin_client):
    assert len(admin_client.get("/api/questions").json()) == 4

    response = admin_client.post("/api/questions/generate", json={"topic": "Kubernetes"})

    assert response.status_code == 201
    questions = response.json()
    assert len(questions) == 5
    assert questions[0]["text"] == "Mock question 1 about Kubernetes"
    assert len(admin_client.get("/api/questions").json()) == 9


def test_generate_validates_topic_and_count(admin_client):
    assert admin_client.post("/api/questions/generate", json={"topic": "  "}).status_code == 422
    assert admin_client.post("/api/questions/generate", json={"topic": "SQL", "count": 0}).status_code == 422


def test_attempt_on_empty_bank_conflicts(admin_client):
    for question in admin_client.get("/api/questions").json():
        admin_client.delete(f"/api/questions/{question['id']}")

    response = admin_client.post("/api/attempts")

    assert response.status_code == 409


def test_each_browser_keeps_its_own_session(api_app, student_client):
    other_browser = TestClient(api_app)

    assert student_client.get("/api/session").json()["name"] == "Ada"
    assert other_browser.get("/api/session").json() is None
    assert other_browser.get("/api/results").status_code == 401
    assert other_browser.post("/api/attempts").status_code == 401


def test_signing_in_elsewhere_does_not_switch_other_browsers(api_app, student_client):
    _create_result(student_client)
    other_browser = TestClient(api_app)
    other_browser.post("/api/register", json={"name": "Grace", "email": "grace@x.com", "role": "admin"})

    assert student_client.get("/api/session").json()["name"] == "Ada"
    assert student_client.get("/api/questions").status_code == 403
    assert other_browser.get("/api/results").json() == []

    assert other_browser.post("/api/logout").status_code == 204
    assert other_browser.get("/api/session").json() is None
    assert len(student_client.get("/api/results").json()) == 1
