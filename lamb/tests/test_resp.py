import json
from datetime import date

from pydantic import BaseModel

from lamb.errors import ERR_INTERNAL_SERVER, Err
from lamb.resp import Response, build, created, error_response, json_response, ok


class Track(BaseModel):
    title: str
    released: date


def test_build_without_body_leaves_body_empty():
    response = build(204, None)

    assert response == Response(status_code=204)
    assert response.to_proxy() == {"statusCode": 204, "headers": {}, "body": ""}


def test_ok_encodes_body_as_json():
    response = ok({"name": "Mei"})

    assert response.status_code == 200
    assert response.headers == {"Content-Type": "application/json"}
    assert json.loads(response.body) == {"name": "Mei"}


def test_created_has_no_body():
    response = created()

    assert response.status_code == 201
    assert response.body == ""


def test_build_encodes_pydantic_models():
    response = build(200, [Track(title="So What", released=date(1959, 8, 17))])

    assert json.loads(response.body) == [{"title": "So What", "released": "1959-08-17"}]


def test_build_falls_back_to_internal_error_for_unencodable_body():
    response = build(200, {"stream": object()})

    assert response.status_code == 500
    assert json.loads(response.body) == {
        "code": "INTERNAL_SERVER_ERROR",
        "detail": "Internal server error",
    }


def test_build_rejects_nan():
    response = build(200, {"ratio": float("nan")})

    assert response.status_code == 500
    assert json.loads(response.body)["code"] == "INTERNAL_SERVER_ERROR"


def test_build_falls_back_for_circular_body():
    body: dict = {}
    body["self"] = body

    assert build(200, body).status_code == 500


def test_build_encodes_err_without_status():
    response = build(ERR_INTERNAL_SERVER.status, ERR_INTERNAL_SERVER)

    assert response.status_code == 500
    assert json.loads(response.body) == {
        "code": "INTERNAL_SERVER_ERROR",
        "detail": "Internal server error",
    }


def test_json_response_merges_headers():
    result = json_response(
        {"ok": True}, status_code=202, headers={"X-Request-Id": "abc"}
    )

    assert result["statusCode"] == 202
    assert result["headers"] == {
        "Content-Type": "application/json",
        "X-Request-Id": "abc",
    }
    assert json.loads(result["body"]) == {"ok": True}


def test_error_response_uses_err_status_and_params():
    result = error_response(Err(409, "CONFLICT", "Already exists", params={"id": "7"}))

    assert result["statusCode"] == 409
    assert json.loads(result["body"]) == {
        "code": "CONFLICT",
        "detail": "Already exists",
        "params": {"id": "7"},
    }
