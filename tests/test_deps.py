"""Tests for the FastAPI request dependency."""

from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from payloadtree.api.deps import get_deserializer
from payloadtree.deserializer import Deserializer

app = FastAPI()


@app.api_route("/posts", methods=["POST", "PATCH", "DELETE"])
async def write_post(deserializer: Deserializer = Depends(get_deserializer)) -> dict:
    return deserializer.to_dict()


client = TestClient(app)


def test_patch_body_is_normalized(post_document):
    response = client.patch("/posts", json=post_document)
    assert response.status_code == 200
    body = response.json()
    assert body["meta"] == {"type": "posts", "temp_id": None, "method": "update"}
    assert body["attributes"] == {"title": "T", "id": "1"}
    assert body["include_directive"] == {"author": {}}


def test_empty_delete_body():
    response = client.delete("/posts")
    assert response.status_code == 200
    assert response.json()["meta"]["method"] == "destroy"
    assert response.json()["attributes"] == {}


def test_invalid_json_is_rejected():
    response = client.post(
        "/posts", content=b"{not json", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 400
