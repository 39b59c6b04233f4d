import unittest
from unittest.mock import patch

from google.oauth2.credentials import Credentials

from gdrivefs.auth import MemoryRegistry, OAuthClient
from gdrivefs.errors import AuthError

SCOPES = ["https://www.googleapis.com/auth/drive"]

CLIENT_CONFIG = {
    "installed": {
        "client_id": "fake-client-id",
        "client_secret": "fake-client-secret",
        "token_uri": "https://oauth2.googleapis.com/token",
    }
}


def _client(token=None) -> OAuthClient:
    client = OAuthClient(MemoryRegistry())
    client.set_auth_config(CLIENT_CONFIG)
    if token is not None:
        client.set_token(token)
    return client


class TestOAuthClient(unittest.TestCase):
    def test_config_and_token_round_trip_through_registry(self) -> None:
        client = _client({"token": "t"})
        self.assertEqual(client.get_auth_config(), CLIENT_CONFIG)
        self.assertEqual(client.get_token(), {"token": "t"})

    def test_missing_token_raises(self) -> None:
        with self.assertRaises(AuthError) as cm:
            _client().get_credentials(SCOPES)
        self.assertEqual(str(cm.exception), "No access token given")

    def test_corrupt_token_slot_raises(self) -> None:
        registry = MemoryRegistry()
        registry.set("gdrivefs", "token", "not json")
        with self.assertRaises(AuthError):
            OAuthClient(registry).get_token()

    def test_valid_token_returned_without_refresh(self) -> None:
        client = _client({"token": "fake-token", "refresh_token": "fake-refresh-token"})

        with patch.object(Credentials, "refresh") as refresh:
            creds = client.get_credentials(SCOPES)

        refresh.assert_not_called()
        self.assertEqual(creds.token, "fake-token")
        self.assertEqual(creds.client_id, "fake-client-id")
        self.assertEqual(creds.refresh_token, "fake-refresh-token")

    def test_expired_token_is_refreshed_and_keeps_refresh_token(self) -> None:
        client = _client(
            {
                "token": "old-token",
                "refresh_token": "fake-refresh-token",
                "expiry": "2000-01-01T00:00:00Z",
            }
        )

        def _fake_refresh(creds, request):
            creds.token = "new-token"
            creds.expiry = None
            # Google may omit the refresh token in the refresh response.
            creds._refresh_token = None

        with patch.object(Credentials, "refresh", autospec=True, side_effect=_fake_refresh):
            creds = client.get_credentials(SCOPES)

        self.assertEqual(creds.token, "new-token")
        stored = client.get_token()
        self.assertEqual(stored["token"], "new-token")
        self.assertEqual(stored["refresh_token"], "fake-refresh-token")

    def test_refresh_failure_raises_auth_error(self) -> None:
        client = _client(
            {
                "token": "old-token",
                "refresh_token": "fake-refresh-token",
                "expiry": "2000-01-01T00:00:00Z",
            }
        )

        with patch.object(Credentials, "refresh", side_effect=RuntimeError("boom")):
            with self.assertRaises(AuthError) as cm:
                client.get_credentials(SCOPES)

        self.assertIsInstance(cm.exception.cause, RuntimeError)
        self.assertEqual(client.get_token()["token"], "old-token")


if __name__ == "__main__":
    unittest.main()
