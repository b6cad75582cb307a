import os
from logging import getLogger

from ..config import CredentialConfig
from ..core.model import Credentials
from ..core.ports import CredentialsResolver

logger = getLogger(__name__)


class ConfigCredentials(CredentialsResolver):
    def __init__(self, entries: dict[str, CredentialConfig]):
        self.entries = entries

    def resolve(self, credential_id: str | None) -> Credentials:
        if not credential_id:
            return Credentials()
        entry = self.entries.get(credential_id)
        if entry is None:
            logger.warning("Unknown credentials id %s, connecting anonymously", credential_id)
            return Credentials()

        password = entry.password
        if entry.password_env:
            password = os.environ.get(entry.password_env, "")
            if not password:
                logger.warning(
                    "Environment variable %s for credentials %s is empty",
                    entry.password_env,
                    credential_id,
                )
        return Credentials(username=entry.username or "", password=password or "")
