#  (C) Copyright
#  Logivations GmbH, Munich 2025
import logging
import os
import sys
from typing import Callable, List, Optional

from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from clients.errors import AuthError, ConfigError, TokenCacheError

logger = logging.getLogger(__name__)

DIRECTORY_SCOPES = [
    "https://www.googleapis.com/auth/admin.directory.group.readonly",
    "https://www.googleapis.com/auth/admin.directory.group.member.readonly",
]
AUTH_STATE = "state-token"
OOB_REDIRECT_URI = "urn:ietf:wg:oauth:2.0:oob"


def prompt_for_code(auth_url: str) -> str:
    """Print the authorization URL and block until a code is typed in."""
    print(
        "Go to the following link in your browser then type the "
        f"authorization code: \n{auth_url}",
        file=sys.stderr,
    )
    try:
        return input()
    except EOFError as e:
        raise AuthError("Unable to read authorization code: no input") from e


class CredentialStore:
    def __init__(
        self,
        client_secret_file: str = "credentials.json",
        token_file: str = "token.json",
        scopes: Optional[List[str]] = None,
        prompt: Callable[[str], str] = prompt_for_code,
    ):
        """
        Initialize the credential store.

        Args:
            client_secret_file: Path to the OAuth client secret JSON
            token_file: Path of the cached user token, created on first authorization
            scopes: Scopes requested from the user (changing them requires deleting the token file)
            prompt: Callable receiving the authorization URL and returning the code
        """
        self.client_secret_file = client_secret_file
        self.token_file = token_file
        self.scopes = scopes or list(DIRECTORY_SCOPES)
        self.prompt = prompt

    def get_credentials(self) -> Credentials:
        """Return cached credentials, running the authorization flow if there are none."""
        flow = self._load_flow()
        creds = self.load_token()
        if creds is not None:
            logger.info(f"Using cached token from {self.token_file}")
            return creds

        creds = self._authorize(flow)
        self.save_token(creds)
        return creds

    def _load_flow(self) -> InstalledAppFlow:
        if not os.path.exists(self.client_secret_file):
            logger.error(f"Client secret file not found: {self.client_secret_file}")
            raise ConfigError(
                f"Unable to read client secret file: {self.client_secret_file}"
            )
        try:
            flow = InstalledAppFlow.from_client_secrets_file(
                self.client_secret_file, scopes=self.scopes
            )
        except (OSError, ValueError, KeyError) as e:
            raise ConfigError(
                f"Unable to parse client secret file to config: {e}"
            ) from e
        flow.redirect_uri = (flow.client_config.get("redirect_uris") or [OOB_REDIRECT_URI])[0]
        return flow

    def _authorize(self, flow: InstalledAppFlow) -> Credentials:
        auth_url, _ = flow.authorization_url(state=AUTH_STATE, access_type="offline")
        code = (self.prompt(auth_url) or "").strip()
        if not code:
            raise AuthError("Unable to read authorization code: empty input")

        try:
            flow.fetch_token(code=code)
        except Exception as e:
            raise AuthError(f"Unable to retrieve token from web: {e}") from e
        return flow.credentials

    def load_token(self) -> Optional[Credentials]:
        """Load the cached token, returning None when it is missing or unreadable."""
        if not os.path.exists(self.token_file):
            logger.debug(f"No cached token at {self.token_file}")
            return None
        try:
            return Credentials.from_authorized_user_file(self.token_file, self.scopes)
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable token file {self.token_file}: {e}")
            return None

    def save_token(self, creds: Credentials) -> None:
        """Write the token to the cache file, readable by the owner only."""
        logger.info(f"Saving credential file to: {self.token_file}")
        try:
            fd = os.open(
                self.token_file, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600
            )
            with os.fdopen(fd, "w") as token:
                token.write(creds.to_json())
            os.chmod(self.token_file, 0o600)
        except OSError as e:
            raise TokenCacheError(f"Unable to cache oauth token: {e}") from e
