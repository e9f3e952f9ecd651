"""Tests for MenuApi, the HTTP client for the admin menu API."""

from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
import requests

from menutree.api import MenuApi, read_api_token
from menutree.errors import GatewayError


@pytest.fixture
def api_with_mock_session() -> tuple[MenuApi, MagicMock]:
    """Create a MenuApi with an explicit token and a mocked requests.Session."""
    with patch("menutree.api.requests.Session") as mock_session_cls:
        mock_session = MagicMock()
        mock_session.headers = {}
        mock_session_cls.return_value = mock_session
        api = MenuApi(base_url="http://menus.test/trpc/", token="test-token", timeout=3)
    return api, mock_session


def _make_response(data: Any) -> MagicMock:
    response = MagicMock()
    response.json.return_value = data
    return response


def test_read_api_token_uses_first_existing_file(tmp_path: Path) -> None:
    token_file = tmp_path / "token.txt"
    token_file.write_text("my-secret-token\n")

    assert read_api_token([tmp_path / "missing.txt", token_file]) == "my-secret-token"


def test_missing_token_file_raises(tmp_path: Path) -> None:
    with pytest.raises(RuntimeError, match="Cannot find menu API token"):
        read_api_token([tmp_path / "a.txt", tmp_path / "b.txt"])


def test_token_is_read_from_configured_files(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    token_file = tmp_path / "token.txt"
    token_file.write_text("from-file")
    monkeypatch.setattr("menutree.api.API_TOKEN_FILES", [token_file])

    with patch("menutree.api.requests.Session"):
        api = MenuApi()

    assert api.api_token == "from-file"


def test_session_sends_bearer_token(api_with_mock_session: tuple[MenuApi, MagicMock]) -> None:
    _, mock_session = api_with_mock_session
    assert mock_session.headers["Authorization"] == "Bearer test-token"


def test_call_posts_args_to_procedure_url(
    api_with_mock_session: tuple[MenuApi, MagicMock],
) -> None:
    api, mock_session = api_with_mock_session
    mock_session.post.return_value = _make_response({"success": True, "data": 4})

    assert api.call("adminMenus.getNextPosition", {"menuGroup": "main"}) == 4

    args, kwargs = mock_session.post.call_args
    assert args[0] == "http://menus.test/trpc/adminMenus.getNextPosition"
    assert kwargs["json"] == {"menuGroup": "main"}
    assert kwargs["timeout"] == 3


def test_unsuccessful_envelope_raises(api_with_mock_session: tuple[MenuApi, MagicMock]) -> None:
    api, mock_session = api_with_mock_session
    mock_session.post.return_value = _make_response(
        {"success": False, "message": "Duplicate position 0 found for parent root"}
    )

    with pytest.raises(GatewayError, match="Duplicate position"):
        api.call("adminMenus.reorder", {"menuGroup": "main", "items": []})


def test_transport_error_raises_gateway_error(
    api_with_mock_session: tuple[MenuApi, MagicMock],
) -> None:
    api, mock_session = api_with_mock_session
    mock_session.post.side_effect = requests.ConnectionError("refused")

    with pytest.raises(GatewayError, match="API call failed"):
        api.call("adminMenus.tree", {"menuGroup": "main"})


def test_http_error_status_raises_gateway_error(
    api_with_mock_session: tuple[MenuApi, MagicMock],
) -> None:
    api, mock_session = api_with_mock_session
    response = _make_response({})
    response.raise_for_status.side_effect = requests.HTTPError("500 Server Error")
    mock_session.post.return_value = response

    with pytest.raises(GatewayError, match="500"):
        api.call("adminMenus.tree", {"menuGroup": "main"})


def test_non_json_body_raises_gateway_error(
    api_with_mock_session: tuple[MenuApi, MagicMock],
) -> None:
    api, mock_session = api_with_mock_session
    response = MagicMock()
    response.json.side_effect = ValueError("Expecting value")
    mock_session.post.return_value = response

    with pytest.raises(GatewayError):
        api.call("adminMenus.tree", {"menuGroup": "main"})
