"""
System smoke test: full API flow in-process with SQLite.

Covers health, progress seeding and patching, server-side transitions,
catalogs, writing review, daily challenges and the guardian dashboards.
"""

import uuid

from httpx import AsyncClient

API = "/api/v1"


async def test_health_and_root(client: AsyncClient):
    health = await client.get("/health")
    assert health.status_code == 200
    assert health.json()["status"] == "ok"
    assert health.json()["ai_configured"] is False

    root = await client.get("/")
    assert root.json()["api"]["v1"] == API


async def test_progress_lifecycle(client: AsyncClient, register):
    headers = await register("ada")

    early = await client.patch(f"{API}/progress", json={"currency": 5}, headers=headers)
    assert early.status_code == 409

    seeded = await client.get(f"{API}/progress", headers=headers)
    assert seeded.status_code == 200
    body = seeded.json()
    assert body["redi_skill_mastery"] == {"mechanics": 10, "sequencing": 10, "voice": 10}
    assert body["unlocked_locations"] == ["townHall"]
    assert body["currency"] == 0

    patched = await client.patch(
        f"{API}/progress",
        json={"skill_mastery": {"mechanics": 30, "sequencing": 20, "voice": 30}},
        headers=headers,
    )
    assert patched.status_code == 200
    # the merged row itself, with the newly opened locations already in it
    assert patched.json()["unlocked_locations"] == ["townHall", "library", "amphitheater", "park"]
    assert "progress" not in patched.json()
    assert patched.json()["redi_skill_mastery"]["mechanics"] == 30
    assert patched.json()["owl_skill_mastery"] == {"mechanics": 30, "sequencing": 20, "voice": 30}

    invalid = await client.patch(f"{API}/progress", json={"currency": None}, headers=headers)
    assert invalid.status_code == 422
    unknown = await client.patch(f"{API}/progress", json={"gems": 3}, headers=headers)
    assert unknown.status_code == 422


async def test_server_side_transitions(client: AsyncClient, register):
    headers = await register("ada")
    await client.get(f"{API}/progress", headers=headers)

    exercise = await client.post(
        f"{API}/progress/exercises/mechanics-2/complete", json={"is_correct": True}, headers=headers
    )
    assert exercise.status_code == 200
    progress = exercise.json()["progress"]
    assert progress["completed_exercises"] == ["mechanics-2"]
    assert progress["redi_skill_mastery"]["mechanics"] == 20
    assert progress["currency"] == 5

    quest = await client.post(f"{API}/progress/quests/town-hall-1/complete", json={}, headers=headers)
    assert quest.status_code == 200
    assert quest.json()["progress"]["owl_skill_mastery"] == {"mechanics": 15, "sequencing": 15, "voice": 25}
    assert quest.json()["unlocked_locations"] == ["library", "amphitheater"]

    missing = await client.post(f"{API}/progress/quests/dragon-lair/complete", json={}, headers=headers)
    assert missing.status_code == 404

    negative = await client.post(
        f"{API}/progress/quests/library-1/complete",
        json={"skills_gained": {"voice": -20}},
        headers=headers,
    )
    assert negative.status_code == 422

    achievements = await client.post(f"{API}/progress/achievements/evaluate", headers=headers)
    # default quest gains lift OWL voice to 25
    assert achievements.json()["unlocked_achievements"] == ["first-steps", "quest-beginner", "voice-apprentice"]

    locations = await client.post(f"{API}/progress/locations/evaluate", headers=headers)
    assert locations.json()["unlocked_locations"] == []

    streak = await client.post(f"{API}/progress/streak", headers=headers)
    assert streak.json()["progress"]["current_streak"] == 1
    assert len(streak.json()["progress"]["progress_history"]) == 1

    exercise_map = await client.get(f"{API}/progress/exercise-map", headers=headers)
    statuses = {node["id"]: node["status"] for node in exercise_map.json()}
    assert statuses["mechanics-2"] == "completed"
    assert statuses["mechanics-1"] == "current"
    assert statuses["voice-5"] == "locked"


async def test_catalog(client: AsyncClient, register):
    headers = await register("ada")

    exercises = await client.get(f"{API}/catalog/exercises", headers=headers)
    assert len(exercises.json()) == 17
    assert "correct_option_index" not in exercises.json()[0]

    locations = await client.get(f"{API}/catalog/locations", headers=headers)
    unlocked = {location["id"]: location["unlocked"] for location in locations.json()}
    assert unlocked == {
        "townHall": True, "library": False, "amphitheater": False, "cafe": False, "park": False,
    }

    quests = await client.get(f"{API}/catalog/quests", headers=headers)
    available = {quest["id"]: quest["available"] for quest in quests.json()}
    assert available["town-hall-1"] is True
    assert available["town-hall-2"] is False

    assert (await client.get(f"{API}/catalog/locations/harbor/quests", headers=headers)).status_code == 404
    achievements = await client.get(f"{API}/catalog/achievements", headers=headers)
    assert len(achievements.json()) == 15


async def test_exercise_attempts(client: AsyncClient, register):
    headers = await register("ada")

    created = await client.post(
        f"{API}/exercises/attempts",
        json={"exercise_id": "voice-1", "is_correct": False, "answers": {"choice": 2}},
        headers=headers,
    )
    assert created.status_code == 201

    listed = await client.get(f"{API}/exercises/attempts", params={"exercise_id": "voice-1"}, headers=headers)
    assert [attempt["answers"] for attempt in listed.json()] == [{"choice": 2}]


async def test_writing_flow(client: AsyncClient, register):
    headers = await register("ada")
    other = await register("grace")

    created = await client.post(
        f"{API}/writing/submissions",
        json={"quest_id": "town-hall-1", "title": "Dear Editor", "content": "Our park needs benches. " * 20},
        headers=headers,
    )
    assert created.status_code == 201
    submission_id = created.json()["id"]

    fetched = await client.get(f"{API}/writing/submissions/{submission_id}", headers=headers)
    assert fetched.json()["status"] == "reviewed"
    assert fetched.json()["suggested_exercises"]

    analyzed = await client.post(f"{API}/writing/analyze", json={"submission_id": submission_id}, headers=headers)
    assert analyzed.status_code == 200
    scores = analyzed.json()["analysis"]["skills_assessed"]
    assert all(60 <= scores[axis] < 80 for axis in ("mechanics", "sequencing", "voice"))

    listed = await client.get(f"{API}/writing/submissions", headers=headers)
    assert [item["id"] for item in listed.json()] == [submission_id]

    forbidden = await client.get(f"{API}/writing/submissions/{submission_id}", headers=other)
    assert forbidden.status_code == 403
    missing = await client.get(f"{API}/writing/submissions/{uuid.uuid4()}", headers=headers)
    assert missing.status_code == 404


async def test_daily_challenge(client: AsyncClient, register):
    student = await register("ada")
    teacher = await register("mrs-hughes", role="teacher")

    assert (await client.get(f"{API}/challenges/daily", headers=student)).status_code == 404

    payload = {
        "title": "Sensory Snapshot",
        "description": "Describe a place using all five senses.",
        "prompt": "Write about the last place that surprised you.",
        "skill_focus": "voice",
    }
    assert (await client.post(f"{API}/challenges", json=payload, headers=student)).status_code == 403
    created = await client.post(f"{API}/challenges", json=payload, headers=teacher)
    assert created.status_code == 201

    daily = await client.get(f"{API}/challenges/daily", headers=student)
    assert daily.json()["id"] == created.json()["id"]

    await client.get(f"{API}/progress", headers=student)
    completed = await client.post(f"{API}/challenges/daily/{daily.json()['id']}/complete", headers=student)
    assert completed.status_code == 200
    progress = completed.json()["progress"]
    assert progress["daily_challenge_completed"] is True
    assert progress["current_streak"] == 1


async def test_guardian_dashboard(client: AsyncClient, register):
    student = await register("ada")
    teacher = await register("mrs-hughes", role="teacher")
    stranger = await register("mr-smith", role="parent")

    me = await client.get(f"{API}/auth/me", headers=student)
    student_id = me.json()["id"]

    assert (await client.post(f"{API}/students/links", json={"student_username": "ada"}, headers=student)).status_code == 403
    linked = await client.post(f"{API}/students/links", json={"student_username": "ada"}, headers=teacher)
    assert linked.status_code == 201
    again = await client.post(f"{API}/students/links", json={"student_username": "ada"}, headers=teacher)
    assert again.status_code == 409

    summaries = await client.get(f"{API}/students", headers=teacher)
    assert summaries.status_code == 200
    [summary] = summaries.json()
    assert summary["username"] == "ada"
    assert summary["redi_mastery"] == 10.0
    assert summary["owl_level"] == 1

    progress = await client.get(f"{API}/students/{student_id}/progress", headers=teacher)
    assert progress.status_code == 200
    submissions = await client.get(f"{API}/students/{student_id}/submissions", headers=teacher)
    assert submissions.json() == []

    assert (await client.get(f"{API}/students/{student_id}/progress", headers=stranger)).status_code == 403
