"""
File Token Store - Durable token storage in a JSON file.
"""

import json
import logging
import os
from pathlib import Path
from typing import Dict, Optional, Union

from dashboard_client.ports.token_store_port import (
    ACCESS_TOKEN_KEY,
    REFRESH_TOKEN_KEY,
    TokenStorePort,
)

logger = logging.getLogger(__name__)


class FileTokenStore(TokenStorePort):
    """
    Token storage backed by a JSON file.

    The file survives process restarts, like the dashboard's browser
    storage survives page reloads. Every read goes to disk so several
    processes sharing the file see each other's refreshes.
    """

    def __init__(self, file_path: Union[str, Path]):
        """
        Initialize file token store.

        Args:
            file_path: Location of the JSON file (``~`` is expanded)
        """
        self.file_path = Path(file_path).expanduser()

    def _load(self) -> Dict[str, str]:
        if not self.file_path.exists():
            return {}
        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError):
            logger.warning("Unreadable token file %s, treating as empty", self.file_path)
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)} if isinstance(data, dict) else {}

    def _save(self, tokens: Dict[str, str]) -> None:
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.file_path.with_suffix(self.file_path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(tokens, f)
        os.replace(tmp_path, self.file_path)
        try:
            os.chmod(self.file_path, 0o600)
        except OSError:
            pass

    def _set(self, key: str, token: str) -> None:
        tokens = self._load()
        tokens[key] = token
        self._save(tokens)

    def get_access_token(self) -> Optional[str]:
        return self._load().get(ACCESS_TOKEN_KEY)

    def set_access_token(self, token: str) -> None:
        self._set(ACCESS_TOKEN_KEY, token)

    def get_refresh_token(self) -> Optional[str]:
        return self._load().get(REFRESH_TOKEN_KEY)

    def set_refresh_token(self, token: str) -> None:
        self._set(REFRESH_TOKEN_KEY, token)

    def clear_all(self) -> None:
        try:
            self.file_path.unlink()
        except FileNotFoundError:
            pass
