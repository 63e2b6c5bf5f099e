"""
MarkupPersistenceBridge - serializes snapshots to and from the blueprint store.

Two persistence modes:
- Live markup: one mutable serialized snapshot per blueprint, overwritten
  on every save with no merge and no version check (last write wins).
- Named saves: independent, user-named records, many per blueprint.

The bridge is synchronous; MarkupSaveQueue runs it off the UI thread.
"""

import logging
import threading
from typing import Optional, List, Dict, Tuple, Any

from ..core.elements import Snapshot
from ..core.errors import DecodeError, ValidationError, NamedSaveNotFound
from ..core.serializer import encode_snapshot, decode_snapshot, decode_snapshot_or_empty
from .markup_channels import MarkupChannelRegistry
from .records import Blueprint, NamedMarkupSave, LiveSaveResult, format_timestamp

logger = logging.getLogger(__name__)


def validate_save_name(name: Optional[str]) -> str:
    """Return the trimmed name, raising ValidationError if it is empty."""
    name = (name or '').strip()
    if not name:
        raise ValidationError("Markup name is required")
    return name


class MarkupPersistenceBridge:
    """
    Usage:
        bridge = MarkupPersistenceBridge(BlueprintApiClient())
        blueprint, snapshot = bridge.open_blueprint("blueprint-1")
        bridge.save_live(blueprint.id, session.elements)
        bridge.save_named(blueprint.id, "Rough-in review", session.elements)
    """

    def __init__(self, store, channels: Optional[MarkupChannelRegistry] = None):
        self._store = store
        self._channels = channels
        self._named: Dict[str, NamedMarkupSave] = {}
        self._job_ids: Dict[str, Optional[str]] = {}
        self._lock = threading.Lock()

    @property
    def store(self):
        return self._store

    # ==================== Named Save Cache ====================

    def _remember(self, saves: List[NamedMarkupSave]):
        with self._lock:
            for save in saves:
                self._named[save.id] = save

    # ==================== Live Markup ====================

    def open_blueprint(self, blueprint_id: str) -> Tuple[Blueprint, Snapshot]:
        """
        Load a blueprint and decode its live markup.

        Malformed live markup decodes to an empty snapshot (logged).

        Raises:
            NetworkError: if the store cannot be reached
        """
        blueprint = self._store.load_blueprint(blueprint_id)
        self._remember(blueprint.named_saves)
        with self._lock:
            self._job_ids[blueprint.id] = blueprint.job_id

        snapshot = decode_snapshot_or_empty(blueprint.live_markup, context=f"blueprint {blueprint_id}")
        logger.info(f"Opened blueprint {blueprint_id} with {len(snapshot)} element(s)")
        return blueprint, snapshot

    def load_live(self, blueprint_id: str) -> Snapshot:
        """Decode the stored live markup; malformed data yields an empty snapshot."""
        _, snapshot = self.open_blueprint(blueprint_id)
        return snapshot

    def save_live(self, blueprint_id: str, snapshot: Snapshot) -> LiveSaveResult:
        """
        Overwrite the blueprint's live markup with snapshot.

        Raises:
            NetworkError: if the write fails; nothing local is touched
        """
        markup_json = encode_snapshot(snapshot)
        result = self._store.save_live_markup(blueprint_id, markup_json)
        logger.info(f"Saved live markup for {blueprint_id} ({len(snapshot)} element(s), version {result.version})")

        self._publish(blueprint_id, {
            'type': 'markup_saved',
            'mode': 'live',
            'blueprintId': blueprint_id,
            'version': result.version,
            'updatedAt': format_timestamp(result.updated_at),
        })
        return result

    # ==================== Named Saves ====================

    def save_named(
        self,
        blueprint_id: str,
        name: str,
        snapshot: Snapshot,
        description: Optional[str] = None,
        is_shared: bool = False,
        owner_id: Optional[str] = None
    ) -> NamedMarkupSave:
        """
        Create a named save of snapshot.

        Raises:
            ValidationError: if name is empty; nothing is written
            NetworkError: if the store write fails
        """
        name = validate_save_name(name)
        description = (description or '').strip() or None
        save = self._store.create_named_save(
            blueprint_id,
            name=name,
            markup_json=encode_snapshot(snapshot),
            description=description,
            is_shared=is_shared,
            owner_id=owner_id,
        )
        self._remember([save])
        logger.info(f"Created named save '{name}' ({save.id}) for {blueprint_id}")

        self._publish(blueprint_id, {
            'type': 'markup_saved',
            'mode': 'named',
            'blueprintId': blueprint_id,
            'saveId': save.id,
            'name': save.name,
            'isShared': save.is_shared,
        })
        return save

    def list_named(self, blueprint_id: str) -> List[NamedMarkupSave]:
        """All named saves for blueprint_id, most recently updated first."""
        saves = self._store.list_named_saves(blueprint_id)
        self._remember(saves)
        return sorted(saves, key=lambda s: s.updated_at, reverse=True)

    def load_named(self, save_id: str) -> Snapshot:
        """
        Decode a named save for replacing the working element list.

        The caller reseeds history to a single entry with the result.

        Raises:
            NamedSaveNotFound: if save_id was never listed, opened or created
            DecodeError: if the stored markup is malformed
        """
        with self._lock:
            save = self._named.get(save_id)
        if save is None:
            raise NamedSaveNotFound(f"Named save {save_id} is not known; list saves first")

        try:
            snapshot = decode_snapshot(save.serialized_snapshot)
        except DecodeError:
            logger.warning(f"Named save {save_id} ('{save.name}') has malformed markup")
            raise

        logger.info(f"Loaded named save '{save.name}' ({len(snapshot)} element(s))")
        return snapshot

    def get_named(self, save_id: str) -> Optional[NamedMarkupSave]:
        with self._lock:
            return self._named.get(save_id)

    # ==================== Events ====================

    def _publish(self, blueprint_id: str, event: Dict[str, Any]):
        if self._channels is None:
            return
        with self._lock:
            channel_id = self._job_ids.get(blueprint_id) or blueprint_id
        self._channels.publish(channel_id, event)


__all__ = ['MarkupPersistenceBridge', 'validate_save_name']
