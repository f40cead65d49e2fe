import os
import sys
import unittest
from fastapi.testclient import TestClient

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from rest_api import TrainingAPI


class APITestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.db_path = "test_training.db"
        self.yaml_path = "test_settings.yaml"
        if os.path.exists(self.db_path):
            os.remove(self.db_path)
        if os.path.exists(self.yaml_path):
            os.remove(self.yaml_path)
        self.api = TrainingAPI(db_path=self.db_path, yaml_path=self.yaml_path)
        self.client = TestClient(self.api.app)

    def tearDown(self) -> None:
        if os.path.exists(self.db_path):
            os.remove(self.db_path)
        if os.path.exists(self.yaml_path):
            os.remove(self.yaml_path)

    def _training(self, exercise: str, reps: int, kg: int, profile_id: int = 1) -> dict:
        response = self.client.post(
            "/api/trainings",
            json={
                "exercise": exercise,
                "profileId": profile_id,
                "week1d1Reps": reps,
                "week1d1Kg": kg,
            },
        )
        self.assertEqual(response.status_code, 201)
        return response.json()

    def test_health(self) -> None:
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "ok")

    def test_profiles(self) -> None:
        response = self.client.get("/api/profiles")
        self.assertEqual(response.status_code, 200)
        self.assertEqual([p["name"] for p in response.json()], ["Основной профиль"])

        response = self.client.delete("/api/profiles/1")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Cannot delete the last profile")

        response = self.client.post(
            "/api/profiles", json={"name": "Anna", "weight": 60, "height": 165, "goal": "mass"}
        )
        self.assertEqual(response.status_code, 201)
        profile = response.json()
        self.assertIn("createdAt", profile)

        response = self.client.put(
            f"/api/profiles/{profile['id']}", json={"name": "Anna K", "goal": "strength"}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["goal"], "strength")

        self.assertEqual(self.client.put("/api/profiles/99", json={"name": "x"}).status_code, 404)
        self.assertEqual(
            self.client.post("/api/profiles", json={"name": "Bad", "height": -1}).status_code,
            422,
        )
        self.assertEqual(self.client.delete(f"/api/profiles/{profile['id']}").status_code, 204)
        self.assertEqual(self.client.delete("/api/profiles/99").status_code, 404)

    def test_trainings(self) -> None:
        created = self._training("Жим штанги лежа", 10, 100)
        self.assertEqual(created["week1d1Kg"], 100)
        self.assertEqual(created["weeks"], 1)
        self.assertEqual(created["week4d6Reps"], 0)

        response = self.client.get("/api/trainings", params={"profileId": 1})
        self.assertEqual(len(response.json()), 1)
        response = self.client.get("/api/trainings", params={"profileId": 2})
        self.assertEqual(response.json(), [])

        response = self.client.put(
            f"/api/trainings/{created['id']}",
            json={"exercise": "Жим штанги лежа", "weeks": 20, "week2d1Kg": 105},
        )
        self.assertEqual(response.status_code, 200)
        updated = response.json()
        self.assertEqual(updated["weeks"], 8)
        self.assertEqual(updated["week2d1Kg"], 105)
        self.assertEqual(updated["week1d1Kg"], 0)
        self.assertEqual(updated["profileId"], 1)

        self.assertEqual(self.client.post("/api/trainings", json={"exercise": ""}).status_code, 422)
        self.assertEqual(self.client.delete(f"/api/trainings/{created['id']}").status_code, 204)
        self.assertEqual(self.client.delete(f"/api/trainings/{created['id']}").status_code, 404)

    def test_training_defaults_to_first_profile(self) -> None:
        response = self.client.post("/api/trainings", json={"exercise": "Squat"})
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["profileId"], 1)

    def test_exercise_catalog(self) -> None:
        response = self.client.get("/api/exercises")
        self.assertEqual(response.status_code, 200)
        catalog = response.json()
        self.assertEqual(len(catalog), 99)
        self.assertFalse(catalog[0]["isCustom"])
        self.assertIn("muscleGroup", catalog[0])

        response = self.client.post(
            "/api/exercises",
            json={"name": "Farmer walk", "muscleGroup": "Руки", "isCustom": False},
        )
        self.assertEqual(response.status_code, 201)
        custom = response.json()
        self.assertTrue(custom["isCustom"])

        self.assertEqual(self.client.post("/api/exercises", json={"name": "Farmer walk"}).status_code, 400)
        response = self.client.delete(f"/api/exercises/{catalog[0]['id']}")
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["detail"], "cannot delete predefined exercises")
        self.assertEqual(self.client.delete(f"/api/exercises/{custom['id']}").status_code, 204)
        self.assertEqual(self.client.delete("/api/exercises/9999").status_code, 404)

    def test_analytics_and_charts(self) -> None:
        self._training("Жим штанги лежа", 10, 100)
        self._training("Приседания со штангой", 5, 120)
        self._training("Жим штанги лежа", 10, 110)

        response = self.client.get("/api/profiles/1/analytics")
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertNotIn("bmi", data["profile"])
        self.assertEqual(data["profile"]["totalWorkouts"], 3)
        self.assertEqual(data["profile"]["totalVolume"], 2700.0)
        self.assertEqual(data["progress"]["mostImprovedExercise"], "Жим штанги лежа")
        self.assertEqual(
            [g["muscleGroup"] for g in data["muscleGroupBalance"]], ["Грудь", "Ноги"]
        )
        self.assertIn(self.api.translator.gettext("frequency"), data["recommendations"])

        response = self.client.get(
            "/api/profiles/1/progress-charts",
            params={"type": "volume", "period": "month", "exercises": ["Приседания со штангой"]},
        )
        self.assertEqual(response.status_code, 200)
        chart = response.json()
        self.assertEqual(chart["chartType"], "volume")
        self.assertEqual(chart["period"], "month")
        self.assertEqual(chart["exercises"], ["Приседания со штангой"])
        self.assertEqual(chart["chartData"][0]["week"], "Неделя 1")
        self.assertEqual(chart["chartData"][0]["exerciseData"], {"Приседания со штангой": 600.0})

        response = self.client.get("/api/profiles/1/exercises")
        self.assertEqual(
            response.json(), {"exercises": ["Жим штанги лежа", "Приседания со штангой"]}
        )
        self.assertEqual(self.client.get("/api/profiles/42/analytics").status_code, 404)

    def test_body_weight_and_records(self) -> None:
        response = self.client.post(
            "/api/profiles/1/body-weight", json={"weight": 80, "date": "2024-01-01"}
        )
        self.assertEqual(response.status_code, 201)
        entry_id = response.json()["id"]
        response = self.client.post(
            "/api/profiles/1/body-weight", json={"weight": 81, "date": "2024-01-01"}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["weight"], 81)
        self.assertEqual(len(self.client.get("/api/profiles/1/body-weight").json()), 1)

        response = self.client.post(
            "/api/profiles/1/body-weight", json={"weight": 80, "date": "01-01-2024"}
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Invalid date format. Use YYYY-MM-DD")
        self.assertEqual(
            self.client.post("/api/profiles/1/body-weight", json={"weight": 0}).status_code,
            422,
        )
        response = self.client.put(
            f"/api/profiles/1/body-weight/{entry_id}", json={"weight": 79.5}
        )
        self.assertEqual(response.json()["date"], "2024-01-01")
        self.assertEqual(self.client.put("/api/profiles/1/body-weight/99", json={"weight": 70}).status_code, 404)
        self.assertEqual(self.client.delete(f"/api/profiles/1/body-weight/{entry_id}").status_code, 204)

        response = self.client.post(
            "/api/profiles/1/personal-records",
            json={"exercise": "Становая тяга", "weight": 180, "reps": 1, "date": "2024-02-01"},
        )
        self.assertEqual(response.status_code, 201)
        record = response.json()
        self.assertEqual(record["profileId"], 1)
        self.assertEqual(len(self.client.get("/api/profiles/1/personal-records").json()), 1)
        self.assertEqual(
            self.client.delete(f"/api/profiles/1/personal-records/{record['id']}").status_code,
            204,
        )

    def test_goals(self) -> None:
        response = self.client.post(
            "/api/profiles/1/goals",
            json={"title": "Жим 100", "type": "weight", "targetValue": 100},
        )
        self.assertEqual(response.status_code, 201)
        goal = response.json()
        self.assertEqual(goal["unit"], "кг")
        self.assertFalse(goal["achieved"])
        self.assertIsNone(goal["achievedDate"])

        response = self.client.put(
            f"/api/profiles/1/goals/{goal['id']}/progress", json={"currentValue": 100}
        )
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["achieved"])
        self.assertIsNotNone(response.json()["achievedDate"])

        self.assertEqual(
            self.client.post(
                "/api/profiles/1/goals", json={"title": "x", "type": "speed", "targetValue": 1}
            ).status_code,
            422,
        )
        self.assertEqual(self.client.put(f"/api/profiles/2/goals/{goal['id']}/progress", json={"currentValue": 1}).status_code, 404)
        self.assertEqual(self.client.delete(f"/api/profiles/1/goals/{goal['id']}").status_code, 204)

    def test_training_sessions(self) -> None:
        response = self.client.post(
            "/api/profiles/1/training-sessions", json={"date": "2024-01-02", "energy": 0}
        )
        self.assertEqual(response.status_code, 201)
        session = response.json()
        self.assertEqual(session["energy"], 5)
        self.assertEqual(session["soreness"], 1)

        url = f"/api/profiles/1/training-sessions/{session['id']}/exercises"
        response = self.client.post(
            url, json={"exercise": "Squat", "sets": [{"weight": 100, "reps": 5, "rpe": 8}]}
        )
        self.assertEqual(response.status_code, 201)
        exercise = response.json()
        self.assertEqual(exercise["trainingSessionId"], session["id"])

        response = self.client.get("/api/profiles/1/training-history", params={"pageSize": 5})
        history = response.json()
        self.assertEqual(history["totalCount"], 1)
        self.assertEqual(history["pageSize"], 5)
        self.assertFalse(history["hasMore"])
        self.assertEqual(history["sessions"][0]["exercises"][0]["sets"][0]["reps"], 5)

        response = self.client.put(
            f"{url}/{exercise['id']}", json={"sets": [{"weight": 105, "reps": 3}]}
        )
        self.assertEqual(response.json()["exercise"], "Squat")
        self.assertEqual(response.json()["sets"][0]["weight"], 105)

        self.client.post("/api/profiles", json={"name": "Other"})
        response = self.client.post(
            f"/api/profiles/2/training-sessions/{session['id']}/exercises",
            json={"exercise": "Bench"},
        )
        self.assertEqual(response.status_code, 404)

        response = self.client.put(
            f"/api/profiles/1/training-sessions/{session['id']}",
            json={"date": "2024-01-03", "energy": 0, "notes": "moved"},
        )
        self.assertEqual(response.json()["energy"], 0)
        self.assertEqual(response.json()["date"], "2024-01-03")
        self.assertEqual(self.client.delete(f"{url}/{exercise['id']}").status_code, 204)
        self.assertEqual(
            self.client.delete(f"/api/profiles/1/training-sessions/{session['id']}").status_code,
            204,
        )

    def test_programs(self) -> None:
        response = self.client.post(
            "/api/profiles/1/programs",
            json={"name": "Block", "startDate": "2024-01-10", "endDate": "2024-02-15", "isActive": True},
        )
        self.assertEqual(response.status_code, 201)
        program = response.json()
        base = f"/api/profiles/1/programs/{program['id']}"

        response = self.client.post("/api/profiles/1/programs", json={"name": "Bad", "endDate": "2024-02-15"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Invalid start date format. Use YYYY-MM-DD")

        response = self.client.post(
            f"{base}/exercises",
            json={"exercise": "Squat", "dayOfWeek": 1, "order": 1, "sets": 5, "reps": 5},
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(
            self.client.post(
                f"{base}/exercises",
                json={"exercise": "Squat", "dayOfWeek": 8, "order": 1, "sets": 5, "reps": 5},
            ).status_code,
            422,
        )

        response = self.client.get(f"{base}/plan-days", params={"year": 2024, "month": 1})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            [d["date"] for d in response.json()], ["2024-01-15", "2024-01-22", "2024-01-29"]
        )
        self.assertEqual(response.json()[0]["exercises"][0]["dayOfWeek"], 1)
        response = self.client.get(f"{base}/plan-days", params={"year": 2024, "month": 13})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Invalid year or month")
        self.assertEqual(self.client.get(f"{base}/plan-days", params={"year": 2024, "month": 5}).json(), [])

        response = self.client.post(f"{base}/sessions", json={"date": "2024-01-15"})
        self.assertEqual(response.status_code, 201)
        self.assertEqual(len(self.client.get(f"{base}/sessions").json()), 1)
        self.assertEqual(self.client.get(f"{base}/sessions", params={"year": 2024, "month": 2}).json(), [])

        for year in ("0", "10000"):
            response = self.client.get(f"{base}/sessions", params={"year": year, "month": 5})
            self.assertEqual(response.status_code, 200)
            self.assertEqual(len(response.json()), 1)
            response = self.client.get(f"{base}/plan-days", params={"year": year, "month": 5})
            self.assertEqual(response.status_code, 400)

        self.assertEqual(self.client.get("/api/profiles/1/programs/99/exercises").status_code, 404)
        self.assertEqual(self.client.delete(base).status_code, 204)
        self.assertEqual(self.client.get("/api/profiles/1/programs").json(), [])

    def test_calculate_one_rm(self) -> None:
        response = self.client.post(
            "/api/calculate-1rm", json={"weight": 100, "reps": 5, "percentage": 80}
        )
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["oneRM"], 112.5)
        self.assertEqual(data["formula"], "brzycki")
        self.assertEqual(len(data["sets"]), 6)
        self.assertEqual(data["sets"][0], {"reps": 5, "kg": 90.0})

        response = self.client.post(
            "/api/calculate-1rm", json={"weight": 100, "reps": 25, "percentage": 80}
        )
        self.assertEqual(response.status_code, 422)


if __name__ == "__main__":
    unittest.main()
