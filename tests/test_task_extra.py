# tests/test_task_extra.py
# PURPOSE: list filters, search, sort orders and statistics over the HTTP API.

from conftest import create_task


def _titles(client, headers, query: str = "") -> list:
    r = client.get(f"/api/tasks{query}", headers=headers)
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["count"] == len(body["tasks"])
    return [t["title"] for t in body["tasks"]]


def test_list_is_scoped_to_owner(client, user_a, user_b):
    create_task(client, user_a, "A1", status="pending", priority="high")
    create_task(client, user_a, "A2", status="completed", priority="low")
    create_task(client, user_b, "B1", status="pending", priority="high")

    me = client.get("/api/auth/me", headers=user_a).json()["user"]
    for query in ("", "?status=pending", "?priority=high", "?search=1", "?status=pending&priority=high"):
        tasks = client.get(f"/api/tasks{query}", headers=user_a).json()["tasks"]
        assert all(t["user"] == me["id"] for t in tasks)
        assert "B1" not in [t["title"] for t in tasks]


def test_filter_by_status_and_priority(client, user_a):
    create_task(client, user_a, "P-high", status="pending", priority="high")
    create_task(client, user_a, "P-low", status="pending", priority="low")
    create_task(client, user_a, "C-high", status="completed", priority="high")
    create_task(client, user_a, "IP-med", status="in-progress")

    assert sorted(_titles(client, user_a, "?status=pending")) == ["P-high", "P-low"]
    assert sorted(_titles(client, user_a, "?priority=high")) == ["C-high", "P-high"]
    assert _titles(client, user_a, "?status=pending&priority=high") == ["P-high"]
    assert _titles(client, user_a, "?status=in-progress") == ["IP-med"]


def test_unknown_filter_values_match_nothing(client, user_a):
    create_task(client, user_a, "Something")
    assert _titles(client, user_a, "?status=archived") == []
    assert _titles(client, user_a, "?priority=urgent") == []


def test_empty_filter_values_are_ignored(client, user_a):
    create_task(client, user_a, "Visible")
    assert _titles(client, user_a, "?status=&priority=&search=&sort=") == ["Visible"]


def test_search_is_case_insensitive_on_title_and_description(client, user_a):
    create_task(client, user_a, "Write Report")
    create_task(client, user_a, "Buy milk", description="for the quarterly REPORT meeting")
    create_task(client, user_a, "Unrelated", description="nothing here")

    for term in ("report", "REPORT", "ePoR"):
        assert sorted(_titles(client, user_a, f"?search={term}")) == ["Buy milk", "Write Report"]


def test_search_treats_wildcards_literally(client, user_a):
    create_task(client, user_a, "100% done")
    create_task(client, user_a, "halfway")
    assert _titles(client, user_a, "?search=%25") == ["100% done"]
    assert _titles(client, user_a, "?search=_") == []


def test_sort_newest_is_default(client, user_a):
    for title in ("first", "second", "third"):
        create_task(client, user_a, title)

    assert _titles(client, user_a) == ["third", "second", "first"]
    assert _titles(client, user_a, "?sort=newest") == ["third", "second", "first"]
    assert _titles(client, user_a, "?sort=bogus") == ["third", "second", "first"]
    assert _titles(client, user_a, "?sort=oldest") == ["first", "second", "third"]


def test_sort_by_priority_is_ordinal(client, user_a):
    create_task(client, user_a, "low-1", priority="low")
    create_task(client, user_a, "high-1", priority="high")
    create_task(client, user_a, "medium-1", priority="medium")
    create_task(client, user_a, "high-2", priority="high")

    titles = _titles(client, user_a, "?sort=priority")
    assert titles == ["high-1", "high-2", "medium-1", "low-1"]


def test_sort_by_due_date_puts_undated_last(client, user_a):
    create_task(client, user_a, "no-date")
    create_task(client, user_a, "later", dueDate="2031-06-01T00:00:00")
    create_task(client, user_a, "sooner", dueDate="2030-01-01T00:00:00")

    assert _titles(client, user_a, "?sort=dueDate") == ["sooner", "later", "no-date"]


def test_stats(client, user_a, user_b):
    create_task(client, user_a, "a", status="pending", priority="high")
    create_task(client, user_a, "b", status="pending", priority="low")
    create_task(client, user_a, "c", status="in-progress", priority="medium")
    create_task(client, user_a, "d", status="completed", priority="high")
    create_task(client, user_b, "other", status="completed", priority="low")

    r = client.get("/api/tasks/stats", headers=user_a)
    assert r.status_code == 200
    assert r.json() == {
        "success": True,
        "stats": {
            "total": 4,
            "pending": 2,
            "inProgress": 1,
            "completed": 1,
            "highPriority": 2,
            "mediumPriority": 1,
            "lowPriority": 1,
        },
    }


def test_stats_follow_updates_and_deletes(client, user_a):
    task = create_task(client, user_a, "moving", priority="low")
    client.put(f"/api/tasks/{task['id']}", json={"status": "completed", "priority": "high"}, headers=user_a)

    stats = client.get("/api/tasks/stats", headers=user_a).json()["stats"]
    assert stats["completed"] == 1 and stats["pending"] == 0
    assert stats["highPriority"] == 1 and stats["lowPriority"] == 0

    client.delete(f"/api/tasks/{task['id']}", headers=user_a)
    stats = client.get("/api/tasks/stats", headers=user_a).json()["stats"]
    assert stats["total"] == 0


def test_due_dates_with_offsets_compare_as_instants(client, user_a):
    create_task(client, user_a, "later", dueDate="2030-01-01T06:00:00Z")
    sooner = create_task(client, user_a, "sooner", dueDate="2030-01-01T10:00:00+05:00")

    # stored and returned as the same instant, in UTC
    assert sooner["dueDate"] == "2030-01-01T05:00:00Z"
    assert _titles(client, user_a, "?sort=dueDate") == ["sooner", "later"]


def test_due_date_offset_on_update(client, user_a):
    task = create_task(client, user_a, "moved")
    r = client.put(
        f"/api/tasks/{task['id']}", json={"dueDate": "2030-06-01T00:30:00-02:00"}, headers=user_a
    )
    assert r.status_code == 200
    assert r.json()["task"]["dueDate"] == "2030-06-01T02:30:00Z"
