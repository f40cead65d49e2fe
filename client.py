import requests
from typing import Any, Iterable, Optional


class TrainingClient:
    """Simple REST client for the training tracker API."""

    def __init__(
        self,
        base_url: str = "http://localhost:8080",
        api_token: Optional[str] = None,
        timeout: float = 10.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.headers = {"Authorization": f"Bearer {api_token}"} if api_token else {}

    def _get(self, path: str, **params: Any):
        resp = requests.get(
            f"{self.base_url}{path}",
            params=params or None,
            headers=self.headers,
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()

    def _post(self, path: str, payload: dict):
        resp = requests.post(
            f"{self.base_url}{path}",
            json=payload,
            headers=self.headers,
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()

    def health(self) -> dict:
        return self._get("/health")

    def list_profiles(self) -> list:
        return self._get("/api/profiles")

    def create_profile(self, name: str, **fields: Any) -> dict:
        return self._post("/api/profiles", {"name": name, **fields})

    def list_trainings(self, profile_id: Optional[int] = None) -> list:
        if profile_id is None:
            return self._get("/api/trainings")
        return self._get("/api/trainings", profileId=profile_id)

    def create_training(self, exercise: str, profile_id: int, **cells: int) -> dict:
        """Log a training grid; ``cells`` use keys like ``week1d1Reps``."""
        return self._post(
            "/api/trainings", {"exercise": exercise, "profileId": profile_id, **cells}
        )

    def analytics(self, profile_id: int) -> dict:
        return self._get(f"/api/profiles/{profile_id}/analytics")

    def progress_charts(
        self,
        profile_id: int,
        chart_type: str = "weight",
        period: str = "all",
        exercises: Optional[Iterable[str]] = None,
    ) -> dict:
        params: dict[str, Any] = {"type": chart_type, "period": period}
        if exercises:
            params["exercises"] = list(exercises)
        return self._get(f"/api/profiles/{profile_id}/progress-charts", **params)

    def calculate_one_rm(
        self, weight: float, reps: int, percentage: float, formula: str = ""
    ) -> dict:
        return self._post(
            "/api/calculate-1rm",
            {
                "weight": weight,
                "reps": reps,
                "percentage": percentage,
                "formula": formula,
            },
        )
