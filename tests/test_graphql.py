import pytest


def _execute(client, query, variables=None, headers=None):
    response = client.post("/graphql", json={"query": query, "variables": variables or {}}, headers=headers)
    assert response.status_code == 200
    return response.json()


def _error_code(result):
    return result["errors"][0]["extensions"]["code"]


AUTO_QUERY = """
query ($id: ID!) {
  auto(id: $id) {
    id
    version
    vin
    kind
    keywords
    discount
    discountLong: discount(short: false)
    model { name subtitle }
  }
}
"""

CREATE_MUTATION = """
mutation ($input: AutoInput!) {
  create(input: $input) { id }
}
"""

UPDATE_MUTATION = """
mutation ($input: AutoUpdateInput!) {
  update(input: $input) { version }
}
"""

DELETE_MUTATION = """
mutation ($id: ID!) {
  delete(id: $id)
}
"""

NEW_AUTO = {
    "vin": "ZFA31200000123456",
    "horsepower": 110,
    "price": "19999.90",
    "kind": "CABRIO",
    "discount": "0.05",
    "keywords": ["SPORT"],
    "model": {"name": "Neu"},
    "images": [{"caption": "Front", "contentType": "image/png"}],
}


def _update_input(**overrides):
    values = {
        "id": "1",
        "version": 1,
        "vin": "WVWZZZ1JZXW000001",
        "horsepower": 155,
        "price": "12.50",
        "kind": "SUV",
    }
    values.update(overrides)
    return values


def test_auto_by_id(client):
    result = _execute(client, AUTO_QUERY, {"id": "1"})

    assert "errors" not in result
    auto = result["data"]["auto"]
    assert auto["id"] == "1"
    assert auto["version"] == 1
    assert auto["kind"] == "LIMOUSINE"
    assert auto["keywords"] == ["COMFORT"]
    assert auto["discount"] == "0.011 %"
    assert auto["discountLong"] == "0.011 percent"
    assert auto["model"] == {"name": "Alpha", "subtitle": "alpha"}


@pytest.mark.parametrize("auto_id", ["999", "abc", "99999999999"])
def test_auto_not_found(client, auto_id):
    result = _execute(client, AUTO_QUERY, {"id": auto_id})

    assert result["data"]["auto"] is None
    assert result["errors"][0]["message"] == f"Auto with id={auto_id} not found"
    assert _error_code(result) == "BAD_USER_INPUT"


def test_autos_with_criteria(client):
    query = """
    {
      autos(criteria: {model: "a", sport: true}) { id model { name } }
    }
    """
    result = _execute(client, query)

    assert [auto["model"]["name"] for auto in result["data"]["autos"]] == ["Beta", "Gamma"]


def test_autos_with_paging(client):
    result = _execute(client, "{ autos(page: 2, size: 2) { id } }")

    assert [auto["id"] for auto in result["data"]["autos"]] == ["5", "6"]


def test_autos_default_page(client):
    result = _execute(client, "{ autos { id } }")

    assert len(result["data"]["autos"]) == 5


def test_autos_by_kind(client):
    result = _execute(client, "{ autos(criteria: {kind: SUV}) { vin } }")

    assert [auto["vin"] for auto in result["data"]["autos"]] == ["WBA3A5C50CF256651", "JTDKB20U093123456"]


def test_autos_nothing_found(client):
    result = _execute(client, '{ autos(criteria: {model: "xyz"}) { id } }')

    assert result["data"]["autos"] is None
    assert _error_code(result) == "BAD_USER_INPUT"


def test_create(client, auth_headers, mail_service):
    result = _execute(client, CREATE_MUTATION, {"input": NEW_AUTO}, auth_headers("user", username="user"))

    assert "errors" not in result
    assert result["data"]["create"] == {"id": 7}
    assert mail_service.sent[0][0] == "New auto 7"

    created = _execute(client, AUTO_QUERY, {"id": "7"})["data"]["auto"]
    assert created["model"]["name"] == "Neu"
    assert created["kind"] == "CABRIO"


def test_create_requires_token(client):
    result = _execute(client, CREATE_MUTATION, {"input": NEW_AUTO})

    assert result["data"]["create"] is None
    assert _error_code(result) == "UNAUTHENTICATED"


def test_create_with_invalid_token(client):
    result = _execute(client, CREATE_MUTATION, {"input": NEW_AUTO}, {"Authorization": "Bearer broken"})

    assert _error_code(result) == "UNAUTHENTICATED"


def test_create_requires_role(client, auth_headers):
    result = _execute(client, CREATE_MUTATION, {"input": NEW_AUTO}, auth_headers("guest", username="guest"))

    assert _error_code(result) == "FORBIDDEN"


def test_create_with_invalid_data(client, auth_headers):
    invalid = dict(NEW_AUTO, vin="123", horsepower=-5)

    result = _execute(client, CREATE_MUTATION, {"input": invalid}, auth_headers("admin"))

    assert result["data"]["create"] is None
    assert _error_code(result) == "BAD_USER_INPUT"
    assert "vin" in result["errors"][0]["message"]
    assert "horsepower" in result["errors"][0]["message"]


def test_create_with_existing_vin(client, auth_headers):
    duplicate = dict(NEW_AUTO, vin="WBA3A5C50CF256651")

    result = _execute(client, CREATE_MUTATION, {"input": duplicate}, auth_headers("admin"))

    assert result["errors"][0]["message"] == "VIN WBA3A5C50CF256651 already exists"
    assert _error_code(result) == "BAD_USER_INPUT"


def test_update(client, auth_headers):
    result = _execute(client, UPDATE_MUTATION, {"input": _update_input()}, auth_headers("admin"))

    assert result["data"]["update"] == {"version": 2}
    auto = _execute(client, AUTO_QUERY, {"id": "1"})["data"]["auto"]
    assert auto["kind"] == "SUV"
    assert auto["version"] == 2


def test_update_with_outdated_version(client, auth_headers):
    headers = auth_headers("admin")
    _execute(client, UPDATE_MUTATION, {"input": _update_input()}, headers)

    result = _execute(client, UPDATE_MUTATION, {"input": _update_input(horsepower=160)}, headers)

    assert result["data"]["update"] is None
    assert result["errors"][0]["message"] == "Version 1 is outdated"


def test_update_unknown_auto(client, auth_headers):
    result = _execute(client, UPDATE_MUTATION, {"input": _update_input(id="999")}, auth_headers("admin"))

    assert _error_code(result) == "BAD_USER_INPUT"


def test_delete(client, auth_headers):
    result = _execute(client, DELETE_MUTATION, {"id": "3"}, auth_headers("admin"))

    assert result["data"]["delete"] is True
    assert _execute(client, AUTO_QUERY, {"id": "3"})["data"]["auto"] is None


def test_delete_requires_admin(client, auth_headers):
    result = _execute(client, DELETE_MUTATION, {"id": "3"}, auth_headers("user", username="user"))

    assert _error_code(result) == "FORBIDDEN"


def test_delete_unknown_auto(client, auth_headers):
    result = _execute(client, DELETE_MUTATION, {"id": "999"}, auth_headers("admin"))

    assert result["data"]["delete"] is None
    assert _error_code(result) == "BAD_USER_INPUT"
