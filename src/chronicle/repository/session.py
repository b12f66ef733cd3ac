# SPDX-License-Identifier: MIT

from copy import deepcopy
from pathlib import Path
from typing import Any, Optional, cast

from yaml import dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader  # noqa: F401
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

from chronicle import time
from chronicle.model.session import Session


class SessionRepository:
    """Persists the signed-in session between command invocations."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def __convert_session_for_serialization(self, session: Session) -> dict[str, Any]:
        serializable_session = cast(dict[str, Any], deepcopy(session))
        serializable_session["expires_at"] = time.datetime_to_iso_str_optional(
            session["expires_at"]
        )
        return serializable_session

    def __convert_session_for_deserialization(
        self, session: dict[str, Any]
    ) -> Session:
        deserializable_session = session
        deserializable_session["expires_at"] = time.datetime_from_str_optional(
            deserializable_session.get("expires_at")
        )
        return cast(Session, deserializable_session)

    def load_session(self) -> Optional[Session]:
        if not self._path.is_file():
            return None
        raw_session = load(self._path.read_text(), Loader=Loader)
        if not raw_session:
            return None
        return self.__convert_session_for_deserialization(raw_session)

    def save_session(self, session: Session) -> None:
        self._path.write_text(
            dump(self.__convert_session_for_serialization(session), Dumper=Dumper)
        )
        # Tokens are credentials
        self._path.chmod(0o600)

    def clear_session(self) -> None:
        if self._path.exists():
            self._path.unlink()
