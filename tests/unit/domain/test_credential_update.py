"""Unit tests for CredentialUpdate."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from linkage.domain.model import CredentialUpdate
from linkage.domain.value import AuthScheme
from tests.conftest import make_credential


class TestCredentialUpdate:
    """Tests for the typed credential change-set."""

    @pytest.mark.parametrize("field", ["provider", "external_id", "id", "user_id"])
    def test_has_no_identity_fields(self, field):
        """Should refuse fields that are fixed at creation."""
        with pytest.raises(ValidationError):
            CredentialUpdate.model_validate({field: "x"})

    def test_changed_values_skips_unset_fields(self):
        update = CredentialUpdate(credentials={"accessToken": "t2"})

        assert update.changed_values() == {
            "modified": update.modified,
            "credentials": {"accessToken": "t2"},
        }

    def test_apply_to_keeps_created(self):
        """Should touch only the fields it sets."""
        credential = make_credential()
        later = datetime(2030, 1, 1, tzinfo=timezone.utc)
        update = CredentialUpdate(
            profile={"id": "gh42", "name": "Ada"},
            auth_scheme=AuthScheme.OPENID_CONNECT,
            modified=later,
        )

        updated = update.apply_to(credential)

        assert updated.id == credential.id
        assert updated.created == credential.created
        assert updated.modified == later
        assert updated.auth_scheme == AuthScheme.OPENID_CONNECT
        assert updated.profile == {"id": "gh42", "name": "Ada"}
        assert updated.credentials == credential.credentials
        assert updated.link_key == credential.link_key
