from stackmarks.utils.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


async def _register(client, username="bob", password="secret"):
    resp = await client.post("/api/auth/register", json={"username": username, "password": password})
    assert resp.status_code == 201
    resp = await client.post("/api/auth/login", json={"username": username, "password": password})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


async def _state(client, headers):
    resp = await client.get("/api/state", headers=headers)
    assert resp.status_code == 200
    return resp.json()


async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


async def test_register_login_and_state(client):
    headers = await _register(client)

    me = (await client.get("/api/users/me", headers=headers)).json()
    assert me["username"] == "bob"
    assert me["preferences"] == {
        "theme": "light",
        "view_mode": "tabbed",
        "bookmark_view_mode": "card",
        "bookmarks_per_container": 20,
    }

    state = await _state(client, headers)
    assert [w["title"] for w in state["workspaces"]] == ["Personal"]
    assert [f["title"] for f in state["folders"]] == ["Main"]
    assert [g["title"] for g in state["groups"]] == ["Links"]
    assert state["bookmarks"] == []


async def test_duplicate_username_and_bad_login(client):
    await _register(client)
    resp = await client.post("/api/auth/register", json={"username": "bob", "password": "x"})
    assert resp.status_code == 400
    resp = await client.post("/api/auth/login", json={"username": "bob", "password": "wrong"})
    assert resp.status_code == 401


async def test_requires_token(client):
    assert (await client.get("/api/state")).status_code == 401
    resp = await client.get("/api/state", headers={"Authorization": "Bearer garbage"})
    assert resp.status_code == 401


async def test_update_preferences_merges(client):
    headers = await _register(client)
    resp = await client.patch("/api/users/me/preferences", json={"theme": "dark"}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["theme"] == "dark"
    assert resp.json()["view_mode"] == "tabbed"

    resp = await client.patch("/api/users/me/preferences", json={"theme": "neon"}, headers=headers)
    assert resp.status_code == 422


async def test_bookmark_crud_and_reorder(client):
    headers = await _register(client)
    group_id = (await _state(client, headers))["groups"][0]["id"]

    ids = []
    for title in ("A", "B", "C"):
        resp = await client.post(
            "/api/bookmarks",
            json={"group_id": group_id, "url": f"https://{title.lower()}.example/", "title": title, "tags": ["t", "t"]},
            headers=headers,
        )
        assert resp.status_code == 201
        assert resp.json()["tags"] == ["t"]
        ids.append(resp.json()["id"])

    resp = await client.put(
        f"/api/groups/{group_id}/bookmarks/reorder", json={"ordered_ids": ids[::-1]}, headers=headers
    )
    assert resp.status_code == 200
    assert [b["title"] for b in resp.json()] == ["C", "B", "A"]

    resp = await client.put(
        f"/api/groups/{group_id}/bookmarks/reorder", json={"ordered_ids": ids[:2]}, headers=headers
    )
    assert resp.status_code == 400
    assert resp.json()["missing"] == [ids[2]]
    listed = (await client.get(f"/api/groups/{group_id}/bookmarks", headers=headers)).json()
    assert [b["title"] for b in listed] == ["C", "B", "A"]

    resp = await client.patch(f"/api/bookmarks/{ids[0]}", json={"title": "Alpha", "tags": ["u"]}, headers=headers)
    assert resp.status_code == 200
    assert (resp.json()["title"], resp.json()["tags"]) == ("Alpha", ["u"])

    resp = await client.delete(f"/api/bookmarks/{ids[1]}", headers=headers)
    assert resp.status_code == 200
    listed = (await client.get(f"/api/groups/{group_id}/bookmarks", headers=headers)).json()
    assert [(b["title"], b["position"]) for b in listed] == [("C", 0), ("Alpha", 1)]

    tags = (await client.get("/api/tags", headers=headers)).json()
    assert [(t["name"], t["bookmark_count"]) for t in tags] == [("t", 1), ("u", 1)]


async def test_move_folder_between_workspaces(client):
    headers = await _register(client)
    state = await _state(client, headers)
    folder_id = state["folders"][0]["id"]

    resp = await client.post("/api/workspaces", json={"title": "Work"}, headers=headers)
    assert resp.status_code == 201
    assert resp.json()["position"] == 1
    work_id = resp.json()["id"]

    resp = await client.put(
        f"/api/folders/{folder_id}/move",
        json={"workspace_id": work_id, "ordered_ids": [folder_id]},
        headers=headers,
    )
    assert resp.status_code == 200
    assert resp.json()["workspace_id"] == work_id

    folders = (await client.get(f"/api/workspaces/{work_id}/folders", headers=headers)).json()
    assert [f["id"] for f in folders] == [folder_id]


async def test_other_users_items_are_not_found(client):
    alice = await _register(client, "alice")
    bob = await _register(client, "bob")
    alice_state = await _state(client, alice)
    group_id = alice_state["groups"][0]["id"]
    folder_id = alice_state["folders"][0]["id"]

    resp = await client.get(f"/api/groups/{group_id}/bookmarks", headers=bob)
    assert resp.status_code == 404
    resp = await client.delete(f"/api/folders/{folder_id}", headers=bob)
    assert resp.status_code == 404
    resp = await client.post(
        "/api/bookmarks", json={"group_id": group_id, "url": "https://x.example/", "title": "X"}, headers=bob
    )
    assert resp.status_code == 404

    assert len((await _state(client, alice))["folders"]) == 1


async def test_import_and_export_endpoints(client):
    headers = await _register(client)
    html = """<!DOCTYPE NETSCAPE-Bookmark-file-1>
<DL><p>
    <DT><H3>Dev</H3>
    <DL><p>
        <DT><H3>Docs</H3>
        <DL><p>
            <DT><A HREF="https://docs.python.org/">Python docs</A>
            <DT><H3>Nested</H3>
            <DL><p><DT><A HREF="https://deep.example/">Deep</A></DL><p>
        </DL><p>
    </DL><p>
</DL><p>"""

    resp = await client.post(
        "/api/transfer/import/netscape", json={"html": html, "strategy": "skip"}, headers=headers
    )
    assert resp.status_code == 200
    body = resp.json()
    assert (body["folders_created"], body["groups_created"]) == (1, 1)
    assert (body["bookmarks_created"], body["bookmarks_skipped"]) == (1, 1)
    assert len(body["warnings"]) == 1

    resp = await client.get("/api/transfer/export/netscape", headers=headers)
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/html")
    assert "attachment" in resp.headers["content-disposition"]
    assert "https://docs.python.org/" in resp.text

    resp = await client.get("/api/transfer/export/json", headers=headers)
    assert resp.status_code == 200
    export = resp.json()
    assert export["version"] == 1
    assert "exportedAt" in export

    other = await _register(client, "carol")
    resp = await client.post("/api/transfer/import/json", json=export, headers=other)
    assert resp.status_code == 200
    assert resp.json()["bookmarks_created"] == 1

    export["version"] = 7
    resp = await client.post("/api/transfer/import/json", json=export, headers=other)
    assert resp.status_code == 400


async def test_import_rejects_unknown_strategy(client):
    headers = await _register(client)
    resp = await client.post(
        "/api/transfer/import/netscape", json={"html": "<DL></DL>", "strategy": "merge"}, headers=headers
    )
    assert resp.status_code == 422


async def test_token_for_unknown_user_is_rejected(client):
    headers = {"Authorization": f"Bearer {create_access_token('no-such-user')}"}
    assert (await client.get("/api/users/me", headers=headers)).status_code == 401


async def test_expired_token_is_rejected(client):
    await _register(client)
    token = create_access_token("whoever", expires_minutes=-1)
    assert decode_access_token(token) is None
    resp = await client.get("/api/state", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401


def test_password_hashing():
    hashed = hash_password("secret")
    assert hashed != "secret"
    assert verify_password("secret", hashed)
    assert not verify_password("nope", hashed)
    assert not verify_password("secret", "not-a-bcrypt-hash")


async def test_netscape_import_size_limit_counts_bytes(client, monkeypatch):
    from stackmarks.config import settings

    headers = await _register(client)
    monkeypatch.setattr(settings, "IMPORT_MAX_BYTES", 45)

    # 41 个字符，但 UTF-8 编码后 51 字节
    html = "<DL><DT><H3>" + "é" * 10 + "</H3><DL></DL></DL>"
    assert len(html) <= 45 < len(html.encode("utf-8"))

    resp = await client.post("/api/transfer/import/netscape", json={"html": html}, headers=headers)
    assert resp.status_code == 422
    folders = (await _state(client, headers))["folders"]
    assert [f["title"] for f in folders] == ["Main"]

    ascii_html = "<DL><DT><H3>ok</H3><DL></DL></DL>"
    resp = await client.post("/api/transfer/import/netscape", json={"html": ascii_html}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["folders_created"] == 1
