"""JSON-file essay store scoped by owner."""

import json
import re
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

from pydantic import ValidationError

from essay_writer.errors import CorruptEssayError, EssayNotFoundError, InvalidRequestError
from essay_writer.state.state import Essay, EssayStatus

_ESSAY_ID = re.compile(r"^[0-9a-f]{32}$")

# Fields a caller may set on create/update; id, user and timestamps are managed here.
EDITABLE_FIELDS = ("topic", "thesis", "content", "arguments", "citations", "status", "word_count")


def validate_essay_id(essay_id: str) -> str:
    """Reject ids that could not have been issued by this store."""
    if not isinstance(essay_id, str) or not _ESSAY_ID.match(essay_id):
        raise InvalidRequestError("Invalid essay ID")
    return essay_id


class JsonEssayStore:
    """
    Persist each essay as `<id>.json` under a directory.

    Every read, update and delete requires the owner; another user's essay is
    reported exactly like a missing one.
    """

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def _path(self, essay_id: str) -> Path:
        return self.directory / f"{validate_essay_id(essay_id)}.json"

    def _write(self, essay: Essay) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        tmp_path = self.directory / f".{essay.id}.json.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(essay.model_dump(mode="json"), f, indent=2, ensure_ascii=False)
        tmp_path.replace(self.directory / f"{essay.id}.json")

    def _read(self, path: Path) -> Essay:
        try:
            with open(path, "r", encoding="utf-8") as f:
                return Essay.model_validate(json.load(f))
        except (ValueError, ValidationError) as e:
            raise CorruptEssayError(str(path), str(e))

    @staticmethod
    def _clean(data: Dict[str, Any]) -> Dict[str, Any]:
        unknown = set(data) - set(EDITABLE_FIELDS)
        if unknown:
            raise InvalidRequestError(f"Unknown essay fields: {', '.join(sorted(unknown))}")
        cleaned = {key: value for key, value in data.items() if value is not None}
        if "status" in cleaned:
            try:
                cleaned["status"] = EssayStatus(cleaned["status"])
            except ValueError:
                allowed = ", ".join(s.value for s in EssayStatus)
                raise InvalidRequestError(f"Invalid status (expected one of: {allowed})")
        return cleaned

    def create(self, owner: str, data: Dict[str, Any]) -> Essay:
        """Create an essay for owner. A non-empty topic is required."""
        cleaned = self._clean(data)
        topic = (cleaned.get("topic") or "").strip()
        if not topic:
            raise InvalidRequestError("Topic is required")
        cleaned["topic"] = topic

        try:
            essay = Essay(id=uuid.uuid4().hex, user=owner, **cleaned)
        except ValidationError as e:
            raise InvalidRequestError(f"Invalid essay: {e}")
        self._write(essay)
        return essay

    def get(self, essay_id: str, owner: str) -> Essay:
        path = self._path(essay_id)
        if not path.exists():
            raise EssayNotFoundError(essay_id)
        essay = self._read(path)
        if essay.user != owner:
            raise EssayNotFoundError(essay_id)
        return essay

    def update(self, essay_id: str, owner: str, changes: Dict[str, Any]) -> Essay:
        """Apply only the provided fields and refresh updated_at."""
        essay = self.get(essay_id, owner)
        cleaned = self._clean(changes)
        if "topic" in cleaned:
            cleaned["topic"] = cleaned["topic"].strip()
            if not cleaned["topic"]:
                raise InvalidRequestError("Topic is required")

        cleaned["updated_at"] = datetime.now(timezone.utc)
        try:
            updated = Essay.model_validate({**essay.model_dump(), **cleaned})
        except ValidationError as e:
            raise InvalidRequestError(f"Invalid essay: {e}")
        self._write(updated)
        return updated

    def delete(self, essay_id: str, owner: str) -> None:
        self.get(essay_id, owner)
        self._path(essay_id).unlink()

    def list_by_owner(self, owner: str) -> List[Essay]:
        """All essays of owner, most recently created first."""
        if not self.directory.exists():
            return []
        owned = []
        for path in self.directory.glob("*.json"):
            try:
                essay = self._read(path)
            except CorruptEssayError as e:
                print(f"⚠️  Skipping {e}")
                continue
            if essay.user == owner:
                owned.append(essay)
        return sorted(owned, key=lambda essay: essay.created_at, reverse=True)
