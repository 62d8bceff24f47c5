import json
from urllib.parse import parse_qs

from conftest import subscription_json


def test_list_sink_subscriptions(client, twilio_api):
    twilio_api.add(
        "GET",
        "/v1/Subscriptions",
        json={"subscriptions": [subscription_json("DF1"), subscription_json("DF2")]},
    )

    response = client.get("/sink/DG1/subscriptions")

    assert response.status_code == 200
    assert response.json() == {"status": "success", "subscriptions": ["DF1", "DF2"]}
    params = twilio_api.last_request.url.params
    assert params["SinkSid"] == "DG1"
    assert params["PageSize"] == "20"


def test_subscribe_single_type(client, twilio_api):
    twilio_api.add("POST", "/v1/Subscriptions", status_code=201, json=subscription_json("DF1"))

    response = client.post(
        "/event/subscribe/DG1",
        json={"description": "Delivery", "type": "com.twilio.messaging.message.delivered"},
    )

    assert response.status_code == 200
    assert response.json() == {"status": "success", "subscription": {"subscription-sid": "DF1"}}
    form = parse_qs(twilio_api.last_request.content.decode())
    assert form["Description"] == ["Delivery"]
    assert form["SinkSid"] == ["DG1"]
    assert [json.loads(entry) for entry in form["Types"]] == [
        {"type": "com.twilio.messaging.message.delivered", "schema_version": "1"},
    ]


def test_subscribe_many_types_keeps_order(client, twilio_api):
    twilio_api.add("POST", "/v1/Subscriptions", status_code=201, json=subscription_json("DF1"))

    client.post(
        "/event/subscribe/DG1",
        json={"description": "Delivery", "type": ["b", "a", "b"]},
    )

    form = parse_qs(twilio_api.last_request.content.decode())
    assert [json.loads(entry)["type"] for entry in form["Types"]] == ["b", "a", "b"]


def test_subscribe_requires_description(client, twilio_api):
    response = client.post("/event/subscribe/DG1", json={"type": "a"})

    assert response.status_code == 422
    assert twilio_api.requests == []


def test_subscribe_rejected_by_twilio(client, twilio_api):
    twilio_api.add(
        "POST",
        "/v1/Subscriptions",
        status_code=400,
        json={"code": 20001, "message": "Missing required parameter Types", "status": 400},
    )

    response = client.post("/event/subscribe/DG1", json={"description": "Delivery", "type": []})

    assert response.status_code == 400
    assert response.json()["message"] == "Missing required parameter Types"


def test_get_subscription(client, twilio_api):
    twilio_api.add("GET", "/v1/Subscriptions/DF1", json=subscription_json("DF1"))

    response = client.get("/subscription/DF1")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    assert body["subscription"]["sid"] == "DF1"
    assert body["subscription"]["sink_sid"] == "DG00000000000000000000000000000001"


def test_delete_subscription(client, twilio_api):
    twilio_api.add("DELETE", "/v1/Subscriptions/DF1", status_code=204)

    response = client.delete("/subscription/DF1")

    assert response.json() == {"status": "Subscription was deleted"}


def test_delete_missing_subscription(client):
    response = client.delete("/subscription/DF404")

    assert response.status_code == 404
    assert response.json()["status"] == "error"
