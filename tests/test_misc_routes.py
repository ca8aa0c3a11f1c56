"""Tests for the home, search and echo routes."""


def test_home_shows_port(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "Running on port: 3000" in response.text


def test_search_defaults(client):
    response = client.get("/search")
    assert "Terms: Not specified" in response.text
    assert "Category: All" in response.text


def test_search_echoes_query(client):
    response = client.get("/search", params={"termino": "laptops", "categoria": "<tech>"})
    assert "Terms: laptops" in response.text
    assert "Category: &lt;tech&gt;" in response.text


def test_search_ignores_english_parameter_names(client):
    response = client.get("/search", params={"term": "laptops"})
    assert "Terms: Not specified" in response.text


def test_form_json(client):
    response = client.post("/form", json={"name": "Camilo", "email": "camilo@example.com"})
    assert response.status_code == 200
    assert response.json() == {
        "message": "Data received",
        "data": {"name": "Camilo", "email": "camilo@example.com"},
    }


def test_form_defaults(client):
    response = client.post("/form", json={"name": ""})
    assert response.json()["data"] == {"name": "Anonymous", "email": "Not provided"}


def test_form_without_body(client):
    response = client.post("/form")
    assert response.json()["data"] == {"name": "Anonymous", "email": "Not provided"}


def test_api_data_requires_payload(client):
    response = client.post("/api/data", json={})
    assert response.status_code == 400
    assert response.json() == {"error": "No data received"}


def test_api_data_echoes_payload(client):
    response = client.post("/api/data", json={"any": ["thing"]})
    assert response.status_code == 201
    assert response.json() == {"message": "JSON data received", "data": {"any": ["thing"]}}


def test_api_data_rejects_non_object(client):
    response = client.post("/api/data", json=["thing"])
    assert response.status_code == 400
    assert response.json()["statusCode"] == 400
