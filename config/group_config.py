"""
group_config.py: Chat → calendar mapping management for the weekly run.

The process has no storage of its own. The mapping is rebuilt at startup from
an encoded snapshot (base64 of a JSON document) kept in a secret or variable
slot, and `export_snapshot` produces the value to store back there.
"""

import base64
import binascii
import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from utils.logging import logger
from utils.redaction import sanitize_calendar_id, sanitize_id

DEFAULT_GROUP_NAME = "Unknown Group"

ChatId = Union[int, str]


@dataclass
class GroupMapping:
    """One destination chat and the calendar whose events it receives."""
    group_id: int
    calendar_id: str
    group_name: str = DEFAULT_GROUP_NAME

    def to_dict(self) -> Dict[str, Any]:
        return {"groupId": self.group_id, "calendarId": self.calendar_id, "groupName": self.group_name}


def decode_snapshot(snapshot: str) -> Dict[str, Any]:
    """
    Decode a snapshot into its JSON document.

    Accepts base64-encoded JSON, or raw JSON for hand-written configs.
    Raises ValueError when neither decodes.
    """
    text = snapshot.strip()
    if not text.startswith("{"):
        try:
            text = base64.b64decode(text, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise ValueError(f"snapshot is not valid base64: {e}") from e
    return json.loads(text)


def parse_groups(document: Any) -> List[GroupMapping]:
    """Validate the document shape and build the mapping records. Raises ValueError."""
    if not isinstance(document, dict) or not isinstance(document.get("groups"), list):
        raise ValueError("snapshot must be an object with a 'groups' list")
    groups = []
    for index, entry in enumerate(document["groups"]):
        if not isinstance(entry, dict):
            raise ValueError(f"group entry {index} is not an object")
        group_id = entry.get("groupId")
        calendar_id = entry.get("calendarId")
        if isinstance(group_id, bool) or group_id is None:
            raise ValueError(f"group entry {index} has no groupId")
        if not isinstance(calendar_id, str) or not calendar_id:
            raise ValueError(f"group entry {index} has no calendarId")
        try:
            group_id = int(group_id)
        except (TypeError, ValueError):
            raise ValueError(f"group entry {index} has a non-numeric groupId") from None
        groups.append(GroupMapping(group_id, calendar_id, entry.get("groupName") or DEFAULT_GROUP_NAME))
    return groups


class GroupConfigStore:
    """In-memory chat → calendar mapping, keyed by chat id."""

    def __init__(self):
        self._groups: Dict[int, GroupMapping] = {}

    def __len__(self) -> int:
        return len(self._groups)

    # --- Loading & export ---

    def load(self, snapshot: Optional[str]) -> int:
        """
        Replace the mapping with the contents of `snapshot`.

        Malformed input leaves the store empty and is logged, not raised: an
        empty mapping is a valid state for a freshly bootstrapped deployment.
        Returns the number of records loaded.
        """
        self._groups = {}
        if not snapshot or not snapshot.strip():
            logger.info("No group mappings found in configuration")
            return 0
        try:
            groups = parse_groups(decode_snapshot(snapshot))
        except ValueError as e:
            logger.error(f"Error loading group mappings: {e}")
            self._groups = {}
            return 0
        for group in groups:
            self._groups[group.group_id] = group
        logger.info(f"Loaded {len(self._groups)} group-calendar mappings")
        return len(self._groups)

    def export_json(self) -> str:
        document = {"groups": [group.to_dict() for group in self._groups.values()]}
        return json.dumps(document, indent=2, ensure_ascii=False)

    def export_snapshot(self) -> str:
        """Base64 snapshot accepted by `load`."""
        return base64.b64encode(self.export_json().encode("utf-8")).decode("ascii")

    # --- Mutation ---

    def add_group(self, group_id: ChatId, calendar_id: str, group_name: str = DEFAULT_GROUP_NAME) -> GroupMapping:
        """Insert or overwrite a mapping. `calendar_id` is not validated here."""
        group = GroupMapping(int(group_id), calendar_id, group_name or DEFAULT_GROUP_NAME)
        self._groups[group.group_id] = group
        logger.debug(f"Mapped chat {sanitize_id(group.group_id)} to {sanitize_calendar_id(calendar_id)}")
        return group

    def update_group_calendar(self, group_id: ChatId, calendar_id: str) -> bool:
        group = self._groups.get(int(group_id))
        if group is None:
            return False
        group.calendar_id = calendar_id
        return True

    def remove_group(self, group_id: ChatId) -> bool:
        return self._groups.pop(int(group_id), None) is not None

    # --- Lookup ---

    def get_group(self, group_id: ChatId) -> Optional[GroupMapping]:
        return self._groups.get(int(group_id))

    def get_group_calendar(self, group_id: ChatId) -> Optional[str]:
        group = self.get_group(group_id)
        return group.calendar_id if group else None

    def has_group(self, group_id: ChatId) -> bool:
        return int(group_id) in self._groups

    def get_all_groups(self) -> List[GroupMapping]:
        return list(self._groups.values())

    def get_groups_for_calendar(self, calendar_id: str) -> List[GroupMapping]:
        return [group for group in self._groups.values() if group.calendar_id == calendar_id]

    def unique_calendar_ids(self) -> List[str]:
        """Distinct calendar ids in first-seen order, so shared calendars are fetched once."""
        return list(dict.fromkeys(group.calendar_id for group in self._groups.values()))

    # --- Chat classification ---

    @staticmethod
    def is_group_chat(chat_id: ChatId) -> bool:
        # Telegram group and supergroup chat ids are negative
        return int(chat_id) < 0

    @staticmethod
    def is_private_chat(chat_id: ChatId) -> bool:
        return int(chat_id) > 0
