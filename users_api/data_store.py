"""
JSON file store for the user collection.

The whole collection lives in one document (a JSON array). Every read loads
the full file and every write replaces it, so a request always works on the
last state that reached the disk. There is no locking: two concurrent
writers both read the same snapshot and the later write wins.
"""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Union

from users_api.errors import StoreParseError, StoreReadError, StoreWriteError

logger = logging.getLogger(__name__)

UserDict = dict[str, Any]


class JsonUserStore:
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load_all(self) -> list[UserDict]:
        """Return every stored user, in file order."""
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StoreReadError(f"could not read {self.path}: {exc}") from exc

        try:
            users = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise StoreParseError(f"{self.path} is not valid JSON: {exc}") from exc

        if not isinstance(users, list):
            raise StoreParseError(f"{self.path} does not hold a JSON array")
        return users

    def save_all(self, users: list[UserDict]) -> None:
        """
        Overwrite the backing document with ``users``.

        Each call writes its own temp file next to the document and swaps it
        in with ``os.replace``, so readers see either the old or the new
        collection. Concurrent writers are not serialised: the last replace wins.
        """
        try:
            text = json.dumps(users, indent=2, ensure_ascii=False, allow_nan=False)
        except (TypeError, ValueError) as exc:
            raise StoreWriteError(f"users are not valid JSON: {exc}") from exc
        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f"{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(text)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            raise StoreWriteError(f"could not write {self.path}: {exc}") from exc
        logger.debug("Wrote %d users to %s", len(users), self.path)
