import base64


def basic(user, password):
    token = base64.b64encode(f"{user}:{password}".encode()).decode()
    return {"Authorization": f"Basic {token}"}


def test_admin_requires_credentials(client):
    resp = client.get("/admin")
    assert resp.status_code == 401
    assert resp.headers["WWW-Authenticate"] == 'Basic realm="Admin Area"'


def test_admin_rejects_wrong_password(client):
    resp = client.get("/admin", headers=basic("admin", "wrong"))
    assert resp.status_code == 401
    assert resp.headers["WWW-Authenticate"] == 'Basic realm="Admin Area"'


def test_admin_password_may_contain_colon(client):
    resp = client.get("/admin", headers=basic("admin", "s3cret:pass"))
    assert resp.status_code == 200


def test_admin_lists_recent_rows_escaped(client, store):
    store.insert_registration("<script>x</script>", "ana@example.com", "", "123")
    store.insert_mail("a@b.com", "Subject line", "Body")

    resp = client.get("/admin", headers=basic("admin", "s3cret:pass"))
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/html")
    assert "<h2>Registrations</h2>" in resp.text
    assert "<h2>Mails</h2>" in resp.text
    assert "<script>x</script>" not in resp.text
    assert "&lt;script&gt;x&lt;/script&gt;" in resp.text
    assert "Subject line" in resp.text
    assert "pending" in resp.text


def test_admin_limits_to_fifty(client, store):
    for i in range(55):
        store.insert_score(1.0, f"row-{i:02d}", received_at=f"2024-01-01T00:00:{i:02d}.000Z")

    resp = client.get("/admin", headers=basic("admin", "s3cret:pass"))
    assert "row-54" in resp.text
    assert "row-05" in resp.text
    assert "row-04" not in resp.text
