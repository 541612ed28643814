from conftest import bearer, signup_and_login


def _create(client, token, **overrides):
    body = {
        "name": "Bob Builder",
        "company": "Acme",
        "jobTitle": "Buyer",
        "emails": ["bob@acme.com"],
        "phones": ["+1 555 0100"],
        "notes": [{"text": "Met at expo"}],
        "socialLinks": [{"platform": "linkedin", "url": "https://linkedin.com/in/bob"}],
        "category": "client",
    }
    body.update(overrides)
    res = client.post("/api/contacts", json=body, headers=bearer(token))
    assert res.status_code == 201, res.text
    return res.json()


def test_contact_crud(client):
    token = signup_and_login(client)

    created = _create(client, token)
    assert created["name"] == "Bob Builder"
    assert created["job_title"] == "Buyer"
    assert created["emails"] == ["bob@acme.com"]
    assert created["notes"][0]["text"] == "Met at expo"
    assert created["social_links"][0]["platform"] == "linkedin"

    res = client.get(f"/api/contacts/{created['id']}", headers=bearer(token))
    assert res.status_code == 200
    assert res.json()["company"] == "Acme"

    res = client.put(
        f"/api/contacts/{created['id']}",
        json={"company": "Globex", "phones": []},
        headers=bearer(token),
    )
    assert res.status_code == 200, res.text
    updated = res.json()
    assert updated["company"] == "Globex"
    assert updated["phones"] == []
    assert updated["name"] == "Bob Builder"

    res = client.delete(f"/api/contacts/{created['id']}", headers=bearer(token))
    assert res.status_code == 200
    assert res.json() == {"message": "Contact deleted successfully"}

    res = client.get(f"/api/contacts/{created['id']}", headers=bearer(token))
    assert res.status_code == 404
    assert res.json()["detail"] == "Contact not found"


def test_contacts_are_listed_newest_first(client):
    token = signup_and_login(client)
    first = _create(client, token, name="First")
    second = _create(client, token, name="Second")

    res = client.get("/api/contacts", headers=bearer(token))

    assert [item["id"] for item in res.json()] == [second["id"], first["id"]]


def test_contacts_are_private_to_their_owner(client):
    alice = signup_and_login(client, "a@x.com")
    mallory = signup_and_login(client, "m@x.com")
    contact = _create(client, alice)

    assert client.get("/api/contacts", headers=bearer(mallory)).json() == []
    assert client.get(f"/api/contacts/{contact['id']}", headers=bearer(mallory)).status_code == 404
    res = client.put(f"/api/contacts/{contact['id']}", json={"name": "Owned"}, headers=bearer(mallory))
    assert res.status_code == 404
    assert client.delete(f"/api/contacts/{contact['id']}", headers=bearer(mallory)).status_code == 404

    res = client.get(f"/api/contacts/{contact['id']}", headers=bearer(alice))
    assert res.json()["name"] == "Bob Builder"


def test_contact_routes_require_a_token(client):
    assert client.get("/api/contacts").status_code == 401
    assert client.post("/api/contacts", json={"name": "Bob"}).status_code == 401


def test_contact_name_is_required(client):
    token = signup_and_login(client)

    res = client.post("/api/contacts", json={"company": "Acme"}, headers=bearer(token))

    assert res.status_code == 400
