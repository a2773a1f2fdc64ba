"""Error Handlers — envelope shape and validation field paths."""

from app.api.error_handlers import field_path


def test_field_path_drops_request_part():
    assert field_path(("body", "minimum_investment")) == "minimum_investment"
    assert field_path(("query", "sort")) == "sort"
    assert field_path(("body", "images", 3)) == "images.3"
    assert field_path(("amount",)) == "amount"


async def test_malformed_json_is_400(client, admin_headers):
    res = await client.post(
        "/api/offers", content=b"{not json", headers={
            **admin_headers, "Content-Type": "application/json",
        },
    )
    assert res.status_code == 400
    assert res.json()["error"] == "VALIDATION_ERROR"


async def test_domain_error_envelope(client, signer_headers):
    res = await client.get("/api/users", headers=signer_headers)
    assert res.json() == {
        "error": "FORBIDDEN",
        "message": "Nie masz uprawnień do dostępu do tego zasobu",
        "category": "forbidden",
    }
