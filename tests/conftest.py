#  (C) Copyright
#  Logivations GmbH, Munich 2025
import json
from unittest.mock import Mock

import pytest

from report.schemas import Group, Member, Page


@pytest.fixture
def make_group():
    def _make(group_id, name=None, email=None, count=0, aliases=None):
        return Group(
            id=group_id,
            name=name or group_id,
            email=email or f"{group_id}@co.com",
            direct_members_count=count,
            aliases=aliases or [],
        )

    return _make


@pytest.fixture
def fake_directory():
    """Directory client double serving the given pages and members keyed by group id."""

    def _make(pages, members=None):
        members = members or {}
        client = Mock()
        client.list_groups.side_effect = list(pages)
        client.list_members.side_effect = lambda group_id: [
            Member(email=e) for e in members.get(group_id, [])
        ]
        return client

    return _make


@pytest.fixture
def page():
    def _make(groups, token=None):
        return Page(groups=list(groups), next_page_token=token)

    return _make


@pytest.fixture
def client_secret_file(tmp_path):
    path = tmp_path / "credentials.json"
    path.write_text(
        json.dumps(
            {
                "installed": {
                    "client_id": "client-id.apps.googleusercontent.com",
                    "client_secret": "client-secret",
                    "auth_uri": "https://accounts.google.com/o/oauth2/auth",
                    "token_uri": "https://oauth2.googleapis.com/token",
                    "redirect_uris": ["http://localhost"],
                }
            }
        )
    )
    return str(path)
