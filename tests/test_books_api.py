from conftest import ADMIN_HEADERS, USER_HEADERS


def test_list_books_is_public(client, make_book):
    make_book(title="Dune")
    make_book(title="Solaris")
    resp = client.get("/api/books")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["count"] == 2
    assert [b["title"] for b in body["data"]] == ["Solaris", "Dune"]


def test_get_book(client, make_book):
    book_id = make_book(title="Dune", stock=4)
    resp = client.get(f"/api/books/{book_id}")
    assert resp.status_code == 200
    assert resp.get_json()["data"]["stock"] == 4

    assert client.get("/api/books/abc").status_code == 400
    assert client.get("/api/books/999").get_json()["error"] == "NotFound"


def test_create_book_requires_admin(client):
    payload = {"title": "Dune", "author": "Frank Herbert", "stock": 2}
    assert client.post("/api/books", json=payload).status_code == 400
    assert client.post("/api/books", json=payload, headers=USER_HEADERS).status_code == 403

    resp = client.post("/api/books", json=payload, headers=ADMIN_HEADERS)
    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert data["id"] and data["stock"] == 2


def test_create_book_validation(client):
    resp = client.post("/api/books", json={"title": " ", "author": "X"}, headers=ADMIN_HEADERS)
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["error"] == "ValidationError"
    assert body["message"] == "Title cannot be empty"

    resp = client.post("/api/books", json={"title": "A", "author": "B", "stock": 1.5}, headers=ADMIN_HEADERS)
    assert resp.get_json()["message"] == "Stock must be an integer"


def test_update_book(client, make_book):
    book_id = make_book(title="Dune", stock=0)
    resp = client.put(f"/api/books/{book_id}", json={"stock": 5, "title": " Dune Messiah "}, headers=ADMIN_HEADERS)
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["stock"] == 5
    assert data["title"] == "Dune Messiah"

    resp = client.put(f"/api/books/{book_id}", json={}, headers=ADMIN_HEADERS)
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "No valid fields provided for update"


def test_delete_book_cascades_borrow_history(client, make_book, ledger_count):
    book_id = make_book(stock=2)
    resp = client.post(
        "/api/borrow",
        json={"bookId": book_id, "latitude": 1, "longitude": 2},
        headers=USER_HEADERS,
    )
    assert resp.status_code == 201
    assert ledger_count() == 1

    resp = client.delete(f"/api/books/{book_id}", headers=ADMIN_HEADERS)
    assert resp.status_code == 200
    assert resp.get_json()["data"]["id"] == book_id
    assert ledger_count() == 0
    assert client.get(f"/api/books/{book_id}").status_code == 404


def test_path_id_beyond_storage_range(client, make_book):
    make_book(stock=1)
    for path in ("/api/books/99999999999999999999999", "/api/books/" + "9" * 5000):
        resp = client.get(path)
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "ValidationError"

    resp = client.delete("/api/books/9223372036854775808", headers=ADMIN_HEADERS)
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Invalid book ID: must be a number"
