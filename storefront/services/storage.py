from typing import Optional
from datetime import datetime, timezone
from sqlmodel import Session, select
from storefront.models.storage import StorageSlot

class LocalStorage:
    """Durable key/value storage for one client origin.

    Mirrors the browser storage API: string keys, string values, writes take
    effect immediately. There is no versioning, the last writer wins.
    """

    def __init__(self, session: Session, origin: str):
        self.session = session
        self.origin = origin

    def _get_slot(self, key: str) -> Optional[StorageSlot]:
        # populate_existing so a reload sees what other sessions committed
        return self.session.exec(
            select(StorageSlot)
            .where(StorageSlot.origin == self.origin, StorageSlot.key == key)
            .execution_options(populate_existing=True)
        ).first()

    def get_item(self, key: str) -> Optional[str]:
        slot = self._get_slot(key)
        return slot.value if slot else None

    def set_item(self, key: str, value: str):
        slot = self._get_slot(key)
        if slot:
            slot.value = value
            slot.updated_at = datetime.now(timezone.utc)
        else:
            slot = StorageSlot(origin=self.origin, key=key, value=value)
        self.session.add(slot)
        self.session.commit()

    def remove_item(self, key: str):
        slot = self._get_slot(key)
        if slot:
            self.session.delete(slot)
            self.session.commit()
