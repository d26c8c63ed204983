from datetime import datetime, timedelta, timezone

from jose import jwt

from hitchpath.core.config import get_settings


class TestAuth:
    async def test_register_and_login(self, client):
        response = await client.post(
            "/register", json={"name": "Linus", "email": " Linus@Example.com ", "password": "penguins!"}
        )
        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "User registered successfully."
        assert body["user"]["email"] == "linus@example.com"
        assert body["token"]

        response = await client.post("/login", json={"email": "linus@example.com", "password": "penguins!"})
        assert response.status_code == 200
        assert response.json()["user"]["name"] == "Linus"

    async def test_register_validation(self, client):
        response = await client.post("/register", json={"name": "", "email": "nope", "password": "short"})
        assert response.status_code == 400
        fields = {e["field"] for e in response.json()["errors"]}
        assert fields == {"name", "email", "password"}

    async def test_duplicate_email(self, client, auth_headers):
        response = await client.post(
            "/register", json={"name": "Grace", "email": "grace@example.com", "password": "another-one"}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Email already in use."

    async def test_bad_login(self, client, auth_headers):
        response = await client.post("/login", json={"email": "grace@example.com", "password": "wrong-pass"})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid email or password."}

    async def test_missing_token(self, client):
        response = await client.get("/api/user/progress")
        assert response.status_code == 401
        assert response.json() == {"error": "Access denied"}

    async def test_garbage_token(self, client):
        response = await client.get("/api/user/progress", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 403
        assert response.json() == {"error": "Invalid token"}

    async def test_expired_token(self, client):
        settings = get_settings()
        token = jwt.encode(
            {"sub": "1", "type": "access", "exp": datetime.now(timezone.utc) - timedelta(minutes=1)},
            settings.secret_key,
            algorithm=settings.algorithm,
        )
        response = await client.get("/api/user/progress", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 403
        assert "expired" in response.json()["error"]

    async def test_token_for_missing_user(self, client):
        settings = get_settings()
        token = jwt.encode(
            {"sub": "999", "type": "access", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
            settings.secret_key,
            algorithm=settings.algorithm,
        )
        response = await client.get("/api/user/profile", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 404


class TestProfile:
    async def test_update_and_completeness(self, client, auth_headers):
        response = await client.get("/api/user-info/completed", headers=auth_headers)
        assert response.json() == {"completed": False}

        response = await client.post(
            "/api/user/update",
            headers=auth_headers,
            json={"careerPath": "Frontend developer", "currentSkillLevel": "intermediate", "isAdmin": True},
        )
        assert response.status_code == 200
        user = response.json()["user"]
        assert user["careerPath"] == "Frontend developer"
        assert user["currentSkillLevel"] == "intermediate"
        assert user["isAdmin"] is False
        assert user["hasMainPath"] is False

        response = await client.get("/api/user-info/completed", headers=auth_headers)
        assert response.json() == {"completed": True}

    async def test_update_rejects_blank_name(self, client, auth_headers):
        response = await client.post("/api/user/update", headers=auth_headers, json={"name": "   "})
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "name"

        profile = (await client.get("/api/user/profile", headers=auth_headers)).json()["user"]
        assert profile["name"] == "Grace"

    async def test_update_rejects_unknown_enum(self, client, auth_headers):
        response = await client.post("/api/user/update", headers=auth_headers, json={"paceOfLearning": "glacial"})
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "paceOfLearning"


class TestLearningPath:
    async def test_get_or_create(self, client, auth_headers, oracle):
        first = await client.get("/api/generate-learning-path", headers=auth_headers)
        assert first.status_code == 200
        path = first.json()["learningPath"]
        assert path[0]["id"] == "1"
        assert path[0]["title"] == "Learn HTML"
        assert path[0]["resources"] == [{"title": "MDN HTML", "url": "developer.mozilla.org"}]

        second = await client.get("/api/generate-learning-path", headers=auth_headers)
        assert second.content == first.content
        assert oracle.calls == 1

    async def test_reset(self, client, auth_headers, oracle):
        await client.get("/api/generate-learning-path", headers=auth_headers)
        await client.post("/api/user/progress", headers=auth_headers, json={"stepId": "1", "completed": True})

        response = await client.post("/api/reset-learning-path", headers=auth_headers)
        assert response.json() == {"message": "Learning path reset successfully."}

        profile = (await client.get("/api/user/profile", headers=auth_headers)).json()["user"]
        assert profile["hasMainPath"] is False
        progress = (await client.get("/api/user/progress", headers=auth_headers)).json()
        assert progress["completedSteps"] == ["1"]

        await client.get("/api/generate-learning-path", headers=auth_headers)
        assert oracle.calls == 2

    async def test_generation_failure(self, client, auth_headers, oracle):
        oracle.replies = ["I'm sorry, I can't help with that."]
        response = await client.get("/api/generate-learning-path", headers=auth_headers)
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to generate learning path."}

        profile = (await client.get("/api/user/profile", headers=auth_headers)).json()["user"]
        assert profile["hasMainPath"] is False


class TestSpecificPaths:
    async def test_generate_and_list(self, client, auth_headers, oracle):
        body = {"topic": "Docker", "details": "for data scientists"}
        first = (await client.post("/api/specific-path/generate", headers=auth_headers, json=body)).json()
        second = (await client.post("/api/specific-path/generate", headers=auth_headers, json=body)).json()

        assert first["specificPath"]["topic"] == "Docker"
        assert set(first["specificPath"]) == {"id", "topic", "details", "steps", "createdAt"}
        assert first["specificPath"]["id"] != second["specificPath"]["id"]
        assert oracle.calls == 2

        listed = (await client.get("/api/specific-paths", headers=auth_headers)).json()["specificPaths"]
        assert [p["id"] for p in listed] == [first["specificPath"]["id"], second["specificPath"]["id"]]

        one = await client.get(f"/api/specific-paths/{first['specificPath']['id']}", headers=auth_headers)
        assert one.json()["specificPath"] == first["specificPath"]

    async def test_unknown_path(self, client, auth_headers):
        response = await client.get("/api/specific-paths/nope", headers=auth_headers)
        assert response.status_code == 404
        assert response.json() == {"error": "Learning path not found."}

    async def test_topic_required(self, client, auth_headers):
        response = await client.post("/api/specific-path/generate", headers=auth_headers, json={"details": "x"})
        assert response.status_code == 400


class TestProgress:
    async def test_mark_step_once(self, client, auth_headers):
        for _ in range(2):
            response = await client.post(
                "/api/user/progress", headers=auth_headers, json={"stepId": "1", "completed": True}
            )
            assert response.status_code == 200
        assert response.json() == {"message": "Step marked as complete.", "completedSteps": ["1"]}

        progress = (await client.get("/api/user/progress", headers=auth_headers)).json()
        assert progress == {"completedSteps": ["1"], "savedResources": []}

    async def test_numeric_step_id(self, client, auth_headers):
        response = await client.post("/api/user/progress", headers=auth_headers, json={"stepId": 3, "completed": True})
        assert response.json()["completedSteps"] == ["3"]

        response = await client.post(
            "/api/user/progress", headers=auth_headers, json={"stepId": 3, "completed": False}
        )
        assert response.json() == {"message": "Step marked as incomplete.", "completedSteps": []}

    async def test_step_id_required(self, client, auth_headers):
        response = await client.post("/api/user/progress", headers=auth_headers, json={"completed": True})
        assert response.status_code == 400

    async def test_summary(self, client, auth_headers):
        await client.get("/api/generate-learning-path", headers=auth_headers)
        await client.post("/api/user/progress", headers=auth_headers, json={"stepId": "2", "completed": True})

        summary = (await client.get("/api/user/progress/summary", headers=auth_headers)).json()
        assert summary == {"pathId": None, "total": 2, "completed": 1, "percent": 50.0}

    async def test_named_path_summary(self, client, auth_headers):
        created = await client.post("/api/specific-path/generate", headers=auth_headers, json={"topic": "SQL"})
        path_id = created.json()["specificPath"]["id"]
        await client.post(
            "/api/user/progress",
            headers=auth_headers,
            json={"stepId": 1, "completed": True, "pathId": path_id},
        )

        summary = await client.get("/api/user/progress/summary", headers=auth_headers, params={"pathId": path_id})
        assert summary.json() == {"pathId": path_id, "total": 2, "completed": 1, "percent": 50.0}


class TestSavedResources:
    async def test_save_and_unsave(self, client, auth_headers):
        response = await client.post(
            "/api/user/save-resource", headers=auth_headers, json={"resourceId": "1-0", "saved": True}
        )
        assert response.json() == {"message": "Resource saved.", "savedResources": ["1-0"]}

        listed = (await client.get("/api/user/saved-resources", headers=auth_headers)).json()
        assert listed == {"savedResources": ["1-0"]}

        response = await client.post(
            "/api/user/save-resource", headers=auth_headers, json={"resourceId": "1-0", "saved": False}
        )
        assert response.json() == {"message": "Resource unsaved.", "savedResources": []}

    async def test_malformed_resource_id(self, client, auth_headers):
        response = await client.post(
            "/api/user/save-resource", headers=auth_headers, json={"resourceId": "html", "saved": True}
        )
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "resourceId"

    async def test_details(self, client, auth_headers):
        await client.get("/api/generate-learning-path", headers=auth_headers)
        await client.post("/api/user/save-resource", headers=auth_headers, json={"resourceId": "2-1", "saved": True})

        details = (await client.get("/api/user/saved-resources/details", headers=auth_headers)).json()
        assert details == {
            "resources": [
                {
                    "id": "2-1",
                    "stepId": "2",
                    "stepTitle": "Learn CSS",
                    "pathId": None,
                    "title": "CSS Tricks",
                    "url": "https://css-tricks.com",
                }
            ]
        }


async def test_health(client):
    response = await client.get("/health")
    assert response.json() == {"status": "ok"}
