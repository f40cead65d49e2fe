import os

import keyring
import yaml

from settings_schema import validate_settings

APP_VERSION = "1.0.0"
KEYRING_SERVICE = "training-tracker"


class YamlConfig:
    """The ``settings.yaml`` file of the training tracker.

    Content is checked against ``SettingsSchema`` on every read and write, so
    an invalid file raises ``ValueError`` before anything reaches the
    database. With ``ENCRYPT_SETTINGS=1`` the API token is kept in the OS
    keyring and the file only records ``api_token: true``.
    """

    SECRET_KEYS = ("api_token",)

    def __init__(self, path: str = "settings.yaml", encrypt: bool | None = None) -> None:
        self.path = path
        if encrypt is None:
            encrypt = os.environ.get("ENCRYPT_SETTINGS") == "1"
        self.encrypt = encrypt

    def _read(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} must contain a mapping of settings")
        return data

    def _restore_secrets(self, data: dict) -> None:
        for key in self.SECRET_KEYS:
            if key not in data:
                continue
            secret = keyring.get_password(KEYRING_SERVICE, key)
            if secret is None:
                # marker without a stored secret
                del data[key]
            else:
                data[key] = secret

    def _stash_secrets(self, data: dict) -> None:
        for key in self.SECRET_KEYS:
            value = data.get(key)
            if isinstance(value, str) and value:
                keyring.set_password(KEYRING_SERVICE, key, value)
                data[key] = True

    def load(self) -> dict:
        """Return the validated settings, or ``{}`` when the file is absent."""
        data = self._read()
        if self.encrypt:
            self._restore_secrets(data)
        validate_settings(data)
        return data

    def save(self, data: dict) -> None:
        validate_settings(data)
        out = dict(data)
        if self.encrypt:
            self._stash_secrets(out)
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.safe_dump(out, f, allow_unicode=True, sort_keys=True)


def env_or(key: str, default: str) -> str:
    """Return the environment value for ``key`` unless it is unset or empty."""
    value = os.environ.get(key)
    return value if value else default
