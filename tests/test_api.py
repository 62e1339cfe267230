import pytest

NEW_BOOK = {"title": "Dune", "author": "Frank Herbert", "genre": "Science Fiction"}


def test_health_check(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_list_books(client):
    response = client.get("/books")
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Books retrieved"
    assert [b["id"] for b in body["data"]] == ["1", "2", "3"]
    first = body["data"][0]
    assert first == {
        "id": "1",
        "title": "The Great Gatsby",
        "author": "F. Scott Fitzgerald",
        "genre": "Fiction",
        "publishedDate": "March",
        "isBorrowed": False,
        "availabilityStatus": "available",
    }


def test_list_books_unexpected_error_is_500(client, service, monkeypatch):
    def boom():
        raise RuntimeError("store exploded")

    monkeypatch.setattr(service, "list_all", boom)
    response = client.get("/books")
    assert response.status_code == 500
    assert response.json() == {"message": "Error retrieving books"}


def test_get_book(client):
    response = client.get("/books/2")
    assert response.status_code == 200
    assert response.json()["data"]["title"] == "1984"


def test_get_unknown_book_is_404(client):
    response = client.get("/books/999")
    assert response.status_code == 404
    assert response.json() == {"message": "Book not found"}


def test_add_book(client):
    response = client.post("/books", json={**NEW_BOOK, "id": "1", "isBorrowed": True})
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Book added"
    assert body["data"]["id"] != "1"
    assert body["data"]["isBorrowed"] is False
    assert body["data"]["availabilityStatus"] == "available"
    assert len(client.get("/books").json()["data"]) == 4


def test_add_book_missing_field_is_500(client):
    response = client.post("/books", json={"title": "", "author": "A", "genre": "G"})
    assert response.status_code == 500
    assert response.json() == {"message": "Error adding book"}


def test_add_book_missing_field_strict_is_400(strict_client):
    response = strict_client.post("/books", json={"author": "A", "genre": "G"})
    assert response.status_code == 400
    assert "required" in response.json()["message"]


def test_malformed_body_is_422(client):
    response = client.post(
        "/books", content="not json", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 422
    assert response.json() == {"message": "Invalid request body"}


def test_update_book(client):
    response = client.put("/books/1", json={"title": "Gatsby", "id": "77", "isBorrowed": True})
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Book updated"
    assert body["data"]["id"] == "1"
    assert body["data"]["title"] == "Gatsby"
    assert body["data"]["isBorrowed"] is False


def test_update_unknown_book_is_404(client):
    response = client.put("/books/999", json={"title": "Nothing"})
    assert response.status_code == 404
    assert response.json() == {"message": "Book not found"}


def test_update_blank_title_is_500(client):
    response = client.put("/books/1", json={"title": ""})
    assert response.status_code == 500
    assert response.json() == {"message": "Error updating book"}


def test_delete_book(client):
    response = client.delete("/books/1")
    assert response.status_code == 200
    assert response.json() == {"message": "Book deleted"}
    assert client.get("/books/1").status_code == 404


def test_delete_unknown_book_is_404(client):
    response = client.delete("/books/999")
    assert response.status_code == 404
    assert response.json() == {"message": "Book not found"}


def test_borrow_book(client):
    response = client.post("/books/1/borrow", json={"borrowerId": "userA"})
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Book borrowed"
    assert body["data"]["isBorrowed"] is True
    assert body["data"]["borrowerId"] == "userA"
    assert body["data"]["dueDate"] == "2026-11-02T09:30:00.000Z"
    assert body["data"]["availabilityStatus"] == "unavailable"


def test_borrow_twice_is_404(client):
    client.post("/books/1/borrow", json={"borrowerId": "userA"})
    response = client.post("/books/1/borrow", json={"borrowerId": "userB"})
    assert response.status_code == 404
    assert response.json() == {"message": "Book not found or already borrowed"}
    assert client.get("/books/1").json()["data"]["borrowerId"] == "userA"


def test_borrow_twice_strict_is_409(strict_client):
    strict_client.post("/books/1/borrow", json={"borrowerId": "userA"})
    response = strict_client.post("/books/1/borrow", json={"borrowerId": "userB"})
    assert response.status_code == 409
    assert response.json() == {"message": "Book with ID 1 is already borrowed"}


def test_borrow_unknown_book_is_404(client):
    response = client.post("/books/999/borrow", json={"borrowerId": "userA"})
    assert response.status_code == 404
    assert response.json() == {"message": "Book not found or already borrowed"}


@pytest.mark.parametrize("kwargs", [{}, {"json": {}}, {"json": {"borrowerId": ""}}])
def test_borrow_without_borrower_is_500(client, kwargs):
    response = client.post("/books/1/borrow", **kwargs)
    assert response.status_code == 500
    assert response.json() == {"message": "Error borrowing book"}


def test_borrow_without_borrower_strict_is_400(strict_client):
    response = strict_client.post("/books/1/borrow", json={})
    assert response.status_code == 400


def test_return_book(client):
    client.post("/books/2/borrow", json={"borrowerId": "userA"})
    response = client.post("/books/2/return")
    assert response.status_code == 200
    assert response.json() == {"message": "Book returned"}
    book = client.get("/books/2").json()["data"]
    assert book["isBorrowed"] is False
    assert book["availabilityStatus"] == "available"
    assert "borrowerId" not in book
    assert "dueDate" not in book


def test_return_available_book_is_404(client):
    response = client.post("/books/2/return")
    assert response.status_code == 404
    assert response.json() == {"message": "Book not found or not currently borrowed"}


def test_return_available_book_strict_is_409(strict_client):
    response = strict_client.post("/books/2/return")
    assert response.status_code == 409


def test_update_unknown_book_strict_is_404(strict_client):
    response = strict_client.put("/books/999", json={"title": "Nothing"})
    assert response.status_code == 404
    assert response.json() == {"message": "Book with ID 999 not found"}


def test_recommendations(client):
    client.post("/books", json=NEW_BOOK)
    response = client.get("/books/recommendations")
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Recommendations retrieved"
    assert [b["id"] for b in body["data"]] == ["1", "2", "3"]


def test_unknown_route_uses_envelope(client):
    response = client.get("/authors")
    assert response.status_code == 404
    assert response.json() == {"message": "Not Found"}


def test_borrow_borrowed_book_with_blank_borrower_is_404(client):
    client.post("/books/1/borrow", json={"borrowerId": "userA"})
    response = client.post("/books/1/borrow", json={"borrowerId": ""})
    assert response.status_code == 404
    assert response.json() == {"message": "Book not found or already borrowed"}


def test_borrow_borrowed_book_with_blank_borrower_strict_is_409(strict_client):
    strict_client.post("/books/1/borrow", json={"borrowerId": "userA"})
    response = strict_client.post("/books/1/borrow", json={"borrowerId": ""})
    assert response.status_code == 409
