def assert_error_envelope(response, status_code, error=None):
    """Assert an HTTP response carries only the {error} envelope with the given status."""
    assert response.status_code == status_code, f"Expected {status_code}, got {response.status_code}: {response.text}"
    payload = response.json()
    assert set(payload) == {"error"}, f"Unexpected keys in error envelope: {payload}"
    assert isinstance(payload["error"], str) and payload["error"]
    if error is not None:
        assert payload["error"] == error


def assert_text_reply(response, text=None):
    """Assert a 200 response with a non-empty text field and nothing else."""
    assert response.status_code == 200, f"Expected 200, got {response.status_code}: {response.text}"
    payload = response.json()
    assert set(payload) == {"text"}, f"Unexpected keys in reply: {payload}"
    assert payload["text"]
    if text is not None:
        assert payload["text"] == text


def make_http_response(mocker, status_code=200, json_data=None, json_error=None):
    """Build a stand-in for an httpx.Response as returned by the provider client."""
    response = mocker.Mock()
    response.status_code = status_code
    if json_error is not None:
        response.json = mocker.Mock(side_effect=json_error)
    else:
        response.json = mocker.Mock(return_value=json_data)
    return response
