from coachhub.models import MediaKind, UserRole


def register(client, user, **fields):
    body = {"url": "https://cdn.ex.com/a.png", "filename": "a.png", "mime_type": "image/png", **fields}
    r = client.post("/api/media", headers=user.headers, json=body)
    assert r.status_code == 201, r.text
    return r.json()


def test_kind_from_mime():
    assert MediaKind.from_mime("image/jpeg") == MediaKind.image
    assert MediaKind.from_mime("VIDEO/mp4") == MediaKind.video
    assert MediaKind.from_mime("audio/mpeg") == MediaKind.audio
    assert MediaKind.from_mime("application/pdf") == MediaKind.document


def test_register_list_filter(client, make_user):
    coach = make_user(UserRole.instructor)
    img = register(client, coach, size_bytes=2048)
    assert img["kind"] == "image"
    register(client, coach, url="https://cdn.ex.com/v.mp4", filename="v.mp4", mime_type="video/mp4")

    assert len(client.get("/api/media", headers=coach.headers).json()) == 2
    videos = client.get("/api/media?kind=video", headers=coach.headers).json()
    assert [m["filename"] for m in videos] == ["v.mp4"]


def test_bad_mime_rejected(client, instructor):
    r = client.post("/api/media", headers=instructor.headers,
                    json={"url": "https://x", "filename": "x", "mime_type": "not a mime"})
    assert r.status_code == 422


def test_update_and_delete_owner_only(client, make_user, instructor):
    m = register(client, instructor)
    other = make_user(UserRole.instructor)
    assert client.patch(f"/api/media/{m['id']}", headers=other.headers, json={"alt_text": "x"}).status_code == 403

    r = client.patch(f"/api/media/{m['id']}", headers=instructor.headers, json={"alt_text": "Squat form"})
    assert r.json()["alt_text"] == "Squat form"
    assert r.json()["filename"] == "a.png"

    assert client.delete(f"/api/media/{m['id']}", headers=instructor.headers).status_code == 204
    assert client.get(f"/api/media/{m['id']}", headers=instructor.headers).status_code == 404


def test_bulk_delete_only_own(client, make_user, instructor):
    mine = [register(client, instructor)["id"] for _ in range(2)]
    other = make_user(UserRole.instructor)
    theirs = register(client, other)["id"]
    r = client.post("/api/media/bulk-delete", headers=instructor.headers, json={"ids": mine + [theirs]})
    assert r.json() == {"deleted": 2}
    assert client.get(f"/api/media/{theirs}", headers=other.headers).status_code == 200
