"""User directory search tests."""


def test_username_prefix_search(client, make_user):
    me = make_user("zed", name="Zed")
    make_user("abby", name="Alice")
    make_user("abbot", name="Bob")
    make_user("carlos", name="Carl")

    r = client.get("/users/search", params={"q": "ab"}, headers=me["headers"])
    assert r.status_code == 200
    hits = r.json()
    assert [h["username"] for h in hits] == ["abby", "abbot"]
    assert all(h["match_type"] == "username" for h in hits)


def test_search_is_lowercased_and_excludes_caller(client, make_user):
    me = make_user("abe", name="Abe")
    make_user("abner", name="Abner")
    hits = client.get("/users/search", params={"q": "  AB "}, headers=me["headers"]).json()
    assert [h["username"] for h in hits] == ["abner"]


def test_exact_match_first(client, make_user):
    me = make_user("viewer")
    make_user("anna", name="Anna")
    make_user("ann", name="Zoe")
    hits = client.get("/users/search", params={"q": "ann"}, headers=me["headers"]).json()
    assert [h["username"] for h in hits] == ["ann", "anna"]


def test_name_match(client, make_user):
    me = make_user("viewer")
    make_user("u1", name="sam lee")
    hits = client.get("/users/search", params={"q": "sam"}, headers=me["headers"]).json()
    assert len(hits) == 1
    assert hits[0]["match_type"] == "name"


def test_capitalized_name_match(client, make_user):
    me = make_user("viewer")
    other = make_user("u2", name="Sam Lee")
    hits = client.get("/users/search", params={"q": "Sam"}, headers=me["headers"]).json()
    assert [h["id"] for h in hits] == [other["id"]]
    assert hits[0]["match_type"] == "name"


def test_match_type_uses_username_prefix(client, make_user):
    me = make_user("viewer")
    make_user("xsam", name="sam")
    hits = client.get("/users/search", params={"q": "sam"}, headers=me["headers"]).json()
    assert [(h["username"], h["match_type"]) for h in hits] == [("xsam", "name")]


def test_empty_query_returns_nothing(client, make_user):
    me = make_user("viewer")
    make_user("abby")
    assert client.get("/users/search", params={"q": " "}, headers=me["headers"]).json() == []


def test_limit(client, make_user):
    me = make_user("viewer")
    for i in range(5):
        make_user(f"bo{i}")
    hits = client.get("/users/search", params={"q": "bo", "limit": 2}, headers=me["headers"]).json()
    assert len(hits) == 2


def test_user_card(client, make_user):
    me = make_user("viewer")
    other = make_user("kim", name="Kim")
    r = client.get(f"/users/{other['id']}", headers=me["headers"])
    assert r.status_code == 200
    assert r.json() == {"id": other["id"], "name": "Kim", "username": "kim"}
    assert client.get("/users/9999", headers=me["headers"]).status_code == 404
