import json
import sys
from pathlib import Path

# ensure project root is on sys.path
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from fastapi.testclient import TestClient
from teamtasks.config import Settings
from teamtasks.main import create_app

settings = Settings(secret_key="quick-post", database_url="sqlite://")
email = "quick_test_user@example.com"
password = "correct_horse_battery_staple"

with TestClient(create_app(settings)) as client:
    r = client.post("/auth/signup", json={"name": "Quick", "email": email, "password": password})
    print('signup', r.status_code)
    token = client.post("/auth/login", json={"email": email, "password": password}).json()["token"]
    headers = {"Authorization": f"Bearer {token}"}

    owner = client.get("/users", headers=headers).json()[0]["id"]
    team = client.post("/teams", json={"name": "Demo team"}, headers=headers).json()
    project = client.post("/projects", json={"name": "Demo project"}, headers=headers).json()
    for name, days in (("draft", 3), ("review", 5)):
        client.post("/tasks", headers=headers, json={
            "name": name,
            "project": project["id"],
            "team": team["id"],
            "owners": [owner],
            "timeToComplete": days,
        })
    first = client.get("/tasks", headers=headers).json()[0]
    client.post("/task", json={"taskId": first["id"]}, headers=headers)

    for path in ("/report/closed-tasks", "/report/pending"):
        r = client.get(path, headers=headers)
        print(path, r.status_code)
        print(json.dumps(r.json(), indent=2))
