"""Sending, opening and listing stored messages.

A message is stored once under a fresh uuid4, text ROT13-encoded and the
optional attachment run through the binary pipeline, then indexed under
the sender's email. Nothing is ever updated in place.
"""
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .cipher.pipeline import decode, encode
from .cipher.text import decode_text, encode_text
from .errors import InputError, NotFoundError
from .notify import NotificationDispatcher
from .store.ephemeral import EphemeralStore

logger = logging.getLogger(__name__)


class Sender(BaseModel):
    """Identity as supplied by the identity provider, taken verbatim."""
    email: str
    name: Optional[str] = None
    picture: Optional[str] = None


class StoredMessage(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    encrypted_text: str = Field(alias="encryptedText")
    encrypted_image: Optional[str] = Field(default=None, alias="encryptedImage")
    sender: Sender
    timestamp: str

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, raw: str) -> "StoredMessage":
        return cls.model_validate_json(raw)

    @property
    def created_at(self) -> datetime:
        ts = datetime.fromisoformat(self.timestamp.replace("Z", "+00:00"))
        return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


class OpenedMessage(BaseModel):
    id: str
    text: str
    image: Optional[bytes] = None
    sender: Sender
    timestamp: str


def utc_now_iso() -> str:
    # Same shape as JavaScript's Date.toISOString(): 2026-01-08T12:34:56.789Z
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def send_message(
    store: EphemeralStore,
    *,
    sender: Sender,
    recipient: str,
    text: str,
    image: Optional[bytes] = None,
    dispatcher: Optional[NotificationDispatcher] = None,
    ttl: Optional[int] = None,
    id_factory: Callable[[], uuid.UUID] = uuid.uuid4,
) -> str:
    """Store a message and notify the recipient. Returns the new message id."""
    if not recipient or not recipient.strip():
        raise InputError("Recipient is required")
    if not text or not text.strip():
        raise InputError("Message text is required")

    message_id = str(id_factory())
    record = StoredMessage(
        encrypted_text=encode_text(text),
        encrypted_image=encode(image) if image else None,
        sender=sender,
        timestamp=utc_now_iso(),
    )

    store.put(message_id, record.to_json(), ttl)
    store.append_index(sender.email, message_id)

    if dispatcher is not None:
        dispatcher.dispatch(recipient, message_id)
    return message_id


def fetch_message(store: EphemeralStore, message_id: str) -> StoredMessage:
    if not message_id:
        raise InputError("Message id is required")
    return StoredMessage.from_json(store.get(message_id))


def open_message(store: EphemeralStore, message_id: str) -> OpenedMessage:
    record = fetch_message(store, message_id)
    return OpenedMessage(
        id=message_id,
        text=decode_text(record.encrypted_text),
        image=decode(record.encrypted_image),
        sender=record.sender,
        timestamp=record.timestamp,
    )


def list_sent(store: EphemeralStore, owner: str) -> List[StoredMessage]:
    """Messages still alive for ``owner``, newest first by their own timestamp."""
    dated: List[Tuple[datetime, StoredMessage]] = []
    for message_id in store.list_index(owner):
        try:
            record = fetch_message(store, message_id)
            dated.append((record.created_at, record))
        except NotFoundError:
            logger.debug("Skipping expired message %s", message_id)
        except ValueError as e:
            logger.warning("Skipping unparsable message %s: %s", message_id, e)
    dated.sort(key=lambda pair: pair[0], reverse=True)
    return [record for _, record in dated]
