from charging_app.db.base import Base

BASE = "/api"

FULL_PAYLOAD = {
    "stationName": "Koramangala Hub",
    "locationAddress": "80 Feet Rd, Koramangala, Bengaluru",
    "pinCode": "560034",
    "connectorType": "CCS2_DC",
    "status": "Operational",
    "imageUrl": "data:image/png;base64,iVBORw0KGgo=",
    "locationLink": "https://maps.example.com/?q=koramangala",
}

MUTABLE_FIELDS = list(FULL_PAYLOAD)


def create(client, **overrides):
    payload = {**FULL_PAYLOAD, **overrides}
    response = client.post(f"{BASE}/AddChargingStation", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


# ------------------ LISTAR ------------------ #
def test_list_empty_store_returns_empty_array(client):
    response = client.get(f"{BASE}/getAllChargingStations")
    assert response.status_code == 200
    assert response.json() == []


def test_list_is_ordered_by_station_name(client):
    create(client, stationName="Whitefield")
    create(client, stationName="Anna Nagar")
    create(client, stationName="Malleshwaram")

    names = [s["stationName"] for s in client.get(f"{BASE}/getAllChargingStations").json()]
    assert names == ["Anna Nagar", "Malleshwaram", "Whitefield"]


# ------------------ CREAR ------------------ #
def test_create_then_get_returns_same_fields(client):
    created = create(client)
    assert isinstance(created["id"], int)
    assert created["createdAt"]

    fetched = client.get(f"{BASE}/GetChargingStationById/{created['id']}").json()
    for field in MUTABLE_FIELDS:
        assert fetched[field] == FULL_PAYLOAD[field]
    assert fetched["id"] == created["id"]


def test_create_with_only_required_fields(client):
    response = client.post(
        f"{BASE}/AddChargingStation",
        json={"stationName": "Minimal", "locationAddress": "Somewhere"},
    )
    assert response.status_code == 201
    station_id = response.json()["id"]
    assert response.headers["location"].endswith(f"/api/GetChargingStationById/{station_id}")

    fetched = client.get(f"{BASE}/GetChargingStationById/{station_id}").json()
    for field in ("pinCode", "connectorType", "status", "imageUrl", "locationLink"):
        assert fetched[field] is None


def test_create_ignores_body_id(client):
    first = create(client)
    second = client.post(f"{BASE}/AddChargingStation", json={**FULL_PAYLOAD, "id": first["id"]})
    assert second.status_code == 201
    assert second.json()["id"] != first["id"]


def test_create_keeps_provided_created_at(client):
    created = create(client, createdAt="2023-05-01T10:00:00Z")
    assert created["createdAt"].startswith("2023-05-01T10:00:00")


def test_create_rejects_blank_required_fields(client):
    cases = [
        ({"stationName": "", "locationAddress": "x"}, "StationName is required."),
        ({"stationName": "   ", "locationAddress": "x"}, "StationName is required."),
        ({"locationAddress": "x"}, "StationName is required."),
        ({"stationName": "x", "locationAddress": "\t "}, "LocationAddress is required."),
        ({"stationName": "x"}, "LocationAddress is required."),
    ]
    for body, message in cases:
        response = client.post(f"{BASE}/AddChargingStation", json=body)
        assert response.status_code == 400, body
        assert response.json()["detail"] == message

    assert client.get(f"{BASE}/getAllChargingStations").json() == []


def test_create_rejects_too_long_name(client):
    response = client.post(
        f"{BASE}/AddChargingStation",
        json={"stationName": "x" * 201, "locationAddress": "addr"},
    )
    assert response.status_code == 400
    assert "stationName" in response.json()["detail"]


# ------------------ OBTENER ------------------ #
def test_get_unknown_id_returns_404(client):
    response = client.get(f"{BASE}/GetChargingStationById/999")
    assert response.status_code == 404
    assert response.json()["detail"] == "Charging station with ID 999 not found."


def test_non_integer_id_is_a_validation_error(client):
    response = client.get(f"{BASE}/GetChargingStationById/abc")
    assert response.status_code == 400


# ------------------ ACTUALIZAR ------------------ #
def test_update_overwrites_every_field(client):
    created = create(client)
    body = {
        "id": created["id"],
        "stationName": "Renamed",
        "locationAddress": "New address",
        "status": "Maintenance",
    }
    response = client.put(f"{BASE}/updateChargingStationById/{created['id']}", json=body)
    assert response.status_code == 204
    assert response.content == b""

    fetched = client.get(f"{BASE}/GetChargingStationById/{created['id']}").json()
    assert fetched["stationName"] == "Renamed"
    assert fetched["locationAddress"] == "New address"
    assert fetched["status"] == "Maintenance"
    # omitidos => null, no se conservan
    for field in ("pinCode", "connectorType", "imageUrl", "locationLink"):
        assert fetched[field] is None
    assert fetched["id"] == created["id"]
    assert fetched["createdAt"] == created["createdAt"]


def test_update_id_mismatch_returns_400_and_leaves_store_unchanged(client):
    created = create(client)
    response = client.put(
        f"{BASE}/updateChargingStationById/{created['id']}",
        json={**FULL_PAYLOAD, "id": created["id"] + 1, "stationName": "Changed"},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "ID in URL does not match ID in request body."

    fetched = client.get(f"{BASE}/GetChargingStationById/{created['id']}").json()
    assert fetched["stationName"] == FULL_PAYLOAD["stationName"]


def test_update_without_body_id_is_a_mismatch(client):
    created = create(client)
    response = client.put(f"{BASE}/updateChargingStationById/{created['id']}", json=FULL_PAYLOAD)
    assert response.status_code == 400


def test_update_blank_required_field_returns_400(client):
    created = create(client)
    url = f"{BASE}/updateChargingStationById/{created['id']}"
    body = {**FULL_PAYLOAD, "id": created["id"]}
    cases = [
        ({**body, "locationAddress": "  "}, "LocationAddress is required."),
        ({**body, "stationName": ""}, "StationName is required."),
        ({**body, "stationName": " \t "}, "StationName is required."),
        ({k: v for k, v in body.items() if k != "stationName"}, "StationName is required."),
    ]
    for payload, message in cases:
        response = client.put(url, json=payload)
        assert response.status_code == 400, payload
        assert response.json()["detail"] == message

    fetched = client.get(f"{BASE}/GetChargingStationById/{created['id']}").json()
    assert fetched["stationName"] == FULL_PAYLOAD["stationName"]


def test_update_unknown_id_returns_404(client):
    response = client.put(
        f"{BASE}/updateChargingStationById/42",
        json={**FULL_PAYLOAD, "id": 42},
    )
    assert response.status_code == 404
    assert client.get(f"{BASE}/getAllChargingStations").json() == []


# ------------------ ELIMINAR ------------------ #
def test_delete_removes_station(client):
    created = create(client)
    response = client.delete(f"{BASE}/deleteChargingStationById/{created['id']}")
    assert response.status_code == 204

    assert client.get(f"{BASE}/GetChargingStationById/{created['id']}").status_code == 404
    assert client.get(f"{BASE}/getAllChargingStations").json() == []


def test_delete_unknown_id_returns_404_and_leaves_store_unchanged(client):
    create(client)
    response = client.delete(f"{BASE}/deleteChargingStationById/999")
    assert response.status_code == 404
    assert len(client.get(f"{BASE}/getAllChargingStations").json()) == 1


# ------------------ ERRORES DE PERSISTENCIA ------------------ #
def test_persistence_failure_returns_generic_500(client, engine):
    Base.metadata.drop_all(bind=engine)

    response = client.get(f"{BASE}/getAllChargingStations")
    assert response.status_code == 500
    assert response.json()["detail"] == "An error occurred while retrieving charging stations"

    response = client.post(f"{BASE}/AddChargingStation", json=FULL_PAYLOAD)
    assert response.status_code == 500
    assert response.json()["detail"] == "An error occurred while creating the charging station"
    assert "charging_stations" not in response.text

    response = client.get(f"{BASE}/GetChargingStationById/1")
    assert response.status_code == 500
    assert response.json()["detail"] == "An error occurred while retrieving the charging station"

    response = client.put(f"{BASE}/updateChargingStationById/1", json={**FULL_PAYLOAD, "id": 1})
    assert response.status_code == 500
    assert response.json()["detail"] == "An error occurred while updating the charging station"

    response = client.delete(f"{BASE}/deleteChargingStationById/1")
    assert response.status_code == 500
    assert response.json()["detail"] == "An error occurred while deleting the charging station"
    assert "no such table" not in response.text


# ------------------ CORS / HEALTH ------------------ #
def test_cross_origin_requests_are_allowed(client):
    response = client.get(
        f"{BASE}/getAllChargingStations",
        headers={"Origin": "http://localhost:3000"},
    )
    assert response.headers["access-control-allow-origin"] == "*"


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["ok"] is True
