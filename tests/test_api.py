import pytest

from api.app import create_app


@pytest.fixture
def client(data_dir):
    app = create_app(data_dir)
    app.config["TESTING"] = True
    return app.test_client()


def test_categories_are_seeded_and_filterable(client):
    response = client.get("/categories", query_string={"type": "income"})

    assert response.status_code == 200
    assert [item["id"] for item in response.get_json()["items"]] == ["inc-1", "inc-2", "inc-3"]


def test_create_and_delete_category(client):
    created = client.post("/categories", json={"name": "Books", "type": "expense"})
    assert created.status_code == 201
    category_id = created.get_json()["id"]

    assert client.delete(f"/categories/{category_id}").status_code == 204
    assert client.delete(f"/categories/{category_id}").status_code == 204
    ids = [item["id"] for item in client.get("/categories").get_json()["items"]]
    assert category_id not in ids


def test_empty_category_name_is_a_validation_error(client):
    response = client.post("/categories", json={"name": "  ", "type": "expense"})

    assert response.status_code == 400
    assert response.get_json()["field"] == "name"


def test_transaction_flow(client, lunch, salary):
    assert client.post("/transactions", json=salary).status_code == 201
    created = client.post("/transactions", json=lunch).get_json()

    summary = client.get("/summary", query_string={"year": 2024, "month": 3}).get_json()
    assert summary == {"income": 300000, "expense": 1200, "total": 298800}

    fetched = client.get(f"/transactions/{created['id']}").get_json()
    assert fetched["category"]["name"] == "Food"

    day = client.get("/transactions", query_string={"date": "2024-03-05"}).get_json()
    assert [item["memo"] for item in day["items"]] == ["lunch"]

    assert client.delete(f"/transactions/{created['id']}").status_code == 204
    assert client.get(f"/transactions/{created['id']}").status_code == 404


def test_zero_amount_is_rejected(client, lunch):
    response = client.post("/transactions", json={**lunch, "amount": 0})

    assert response.status_code == 400
    assert response.get_json()["field"] == "amount"
    assert client.get("/transactions").get_json()["items"] == []


def test_non_json_body_is_rejected(client):
    response = client.post("/transactions", data="amount=5")
    assert response.status_code == 400


def test_calendar_view(client, lunch):
    client.post("/transactions", json=lunch)
    view = client.get("/calendar", query_string={"year": 2024, "month": 2}).get_json()

    assert len(view["calendar"]) == 4 + 29
    assert view["weekdays"][0] == "Sun"
    assert view["items"] == []


def test_month_query_is_validated(client):
    response = client.get("/summary", query_string={"year": 2024, "month": 13})
    assert response.status_code == 400
