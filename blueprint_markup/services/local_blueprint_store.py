"""
LocalBlueprintStore - Offline file storage for blueprints and markup

Implements the same store interface as BlueprintApiClient so the editor
can work without the web application.

File structure:
    {base}/{blueprint_id}/
    ├── blueprint.json      # id, jobId, fileUrl, markups, version, ...
    └── saves/
        └── {save_id}.json  # one named save per file

Persistence failures are reported as NetworkError so callers handle
both stores the same way.
"""

import logging
import re
import uuid as uuid_lib
from pathlib import Path
from typing import Optional, List, Dict, Any

from ..config import Config
from ..core.errors import NetworkError
from ..utils.json_utils import safe_json_load, write_json_atomic
from .records import (
    Blueprint, NamedMarkupSave, LiveSaveResult,
    parse_timestamp, format_timestamp, utc_now
)

logger = logging.getLogger(__name__)

_SAFE_ID = re.compile(r'^[A-Za-z0-9_.\-]+$')


class LocalBlueprintStore:
    """
    Manages blueprint markup files on disk.

    The live markup is overwritten on every save (last write wins) and
    `version` is incremented, but never checked.
    """

    BLUEPRINT_FILE = 'blueprint.json'
    SAVES_FOLDER = 'saves'

    def __init__(self, base_path: Optional[Path] = None):
        if base_path is None:
            base_path = Config.get_store_dir()
        self._base = Path(base_path)
        self._base.mkdir(parents=True, exist_ok=True)

    # ==================== Paths ====================

    def _check_id(self, value: str) -> str:
        if not value or not _SAFE_ID.match(value) or value in ('.', '..'):
            raise NetworkError(f"Invalid id for local store: {value!r}")
        return value

    def get_blueprint_dir(self, blueprint_id: str) -> Path:
        return self._base / self._check_id(blueprint_id)

    def get_blueprint_path(self, blueprint_id: str) -> Path:
        return self.get_blueprint_dir(blueprint_id) / self.BLUEPRINT_FILE

    def get_saves_dir(self, blueprint_id: str) -> Path:
        return self.get_blueprint_dir(blueprint_id) / self.SAVES_FOLDER

    # ==================== Blueprint Records ====================

    def create_blueprint(
        self,
        source_image_url: str,
        job_id: Optional[str] = None,
        name: str = '',
        blueprint_id: Optional[str] = None
    ) -> Blueprint:
        """Register a blueprint image with empty live markup."""
        blueprint_id = self._check_id(blueprint_id or uuid_lib.uuid4().hex)
        now = format_timestamp(utc_now())
        data = {
            'id': blueprint_id,
            'jobId': job_id,
            'name': name,
            'fileUrl': source_image_url,
            'markups': '[]',
            'version': 0,
            'createdAt': now,
            'updatedAt': now,
        }
        self._write(self.get_blueprint_path(blueprint_id), data)
        logger.info(f"Registered blueprint {blueprint_id} ({source_image_url})")
        return self._blueprint_from_data(data, [])

    def _read_blueprint(self, blueprint_id: str) -> Dict[str, Any]:
        data = safe_json_load(self.get_blueprint_path(blueprint_id))
        if not isinstance(data, dict):
            raise NetworkError(f"Blueprint {blueprint_id} not found in local store")
        return data

    def _write(self, path: Path, data: Dict[str, Any]):
        try:
            write_json_atomic(path, data)
        except OSError as e:
            raise NetworkError(f"Could not write {path}: {e}") from e

    @staticmethod
    def _blueprint_from_data(data: Dict[str, Any], saves: List[NamedMarkupSave]) -> Blueprint:
        return Blueprint(
            id=data['id'],
            job_id=data.get('jobId'),
            source_image_url=data.get('fileUrl', ''),
            live_markup=data.get('markups') or '[]',
            version=int(data.get('version', 0)),
            name=data.get('name', ''),
            named_saves=saves,
        )

    @staticmethod
    def _save_from_data(data: Dict[str, Any]) -> NamedMarkupSave:
        return NamedMarkupSave(
            id=data['id'],
            blueprint_id=data['blueprintId'],
            name=data.get('name', ''),
            serialized_snapshot=data.get('markupData', '[]'),
            is_shared=bool(data.get('isShared', False)),
            description=data.get('description'),
            owner_id=data.get('userId'),
            created_at=parse_timestamp(data.get('createdAt')),
            updated_at=parse_timestamp(data.get('updatedAt')),
        )

    # ==================== Store Interface ====================

    def load_blueprint(self, blueprint_id: str) -> Blueprint:
        data = self._read_blueprint(blueprint_id)
        return self._blueprint_from_data(data, self.list_named_saves(blueprint_id))

    def save_live_markup(self, blueprint_id: str, markup_json: str) -> LiveSaveResult:
        data = self._read_blueprint(blueprint_id)
        now = utc_now()
        data['markups'] = markup_json
        data['version'] = int(data.get('version', 0)) + 1
        data['updatedAt'] = format_timestamp(now)
        self._write(self.get_blueprint_path(blueprint_id), data)

        return LiveSaveResult(
            blueprint_id=blueprint_id,
            live_markup=markup_json,
            updated_at=now,
            version=data['version'],
        )

    def create_named_save(
        self,
        blueprint_id: str,
        name: str,
        markup_json: str,
        description: Optional[str] = None,
        is_shared: bool = False,
        owner_id: Optional[str] = None
    ) -> NamedMarkupSave:
        # Blueprint must exist
        self._read_blueprint(blueprint_id)

        save_id = uuid_lib.uuid4().hex
        now = format_timestamp(utc_now())
        data = {
            'id': save_id,
            'blueprintId': blueprint_id,
            'name': name,
            'markupData': markup_json,
            'description': description,
            'isShared': is_shared,
            'userId': owner_id,
            'createdAt': now,
            'updatedAt': now,
        }
        self._write(self.get_saves_dir(blueprint_id) / f'{save_id}.json', data)
        return self._save_from_data(data)

    def list_named_saves(self, blueprint_id: str) -> List[NamedMarkupSave]:
        saves_dir = self.get_saves_dir(blueprint_id)
        if not saves_dir.exists():
            return []

        saves = []
        for path in saves_dir.glob('*.json'):
            data = safe_json_load(path)
            if not isinstance(data, dict) or 'id' not in data or 'blueprintId' not in data:
                logger.warning(f"Skipping unreadable named save {path}")
                continue
            saves.append(self._save_from_data(data))

        saves.sort(key=lambda s: s.updated_at, reverse=True)
        return saves

    def list_blueprints(self) -> List[str]:
        """Ids of all blueprints in the store."""
        return sorted(
            p.parent.name for p in self._base.glob(f'*/{self.BLUEPRINT_FILE}')
        )

    # ==================== Images ====================

    def fetch_image(self, url: str) -> bytes:
        """Read the source image from a local path or file:// URL."""
        path = Path(url[len('file://'):] if url.startswith('file://') else url)
        try:
            return path.read_bytes()
        except OSError as e:
            raise NetworkError(f"Could not read blueprint image {path}: {e}") from e


__all__ = ['LocalBlueprintStore']
