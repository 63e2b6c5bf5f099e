"""
BlueprintApiClient - HTTP persistence collaborator.

Talks to the web application's blueprint routes:

    GET  /api/blueprints/{id}           blueprint + named saves
    PUT  /api/blueprints/{id}/markup    overwrite live markup
    POST /api/blueprints/{id}/markup    create a named save
    GET  /api/blueprints/{id}/markup    list named saves

Responses use a {success, data, message} envelope. Every failure
(transport, HTTP status, bad JSON) is raised as NetworkError.
"""

import json
import logging
import urllib.request
import urllib.error
import urllib.parse
from typing import Optional, Dict, Any, List

from ..config import Config
from ..core.errors import NetworkError
from .records import (
    Blueprint, NamedMarkupSave, LiveSaveResult, parse_timestamp
)

logger = logging.getLogger(__name__)


class BlueprintApiClient:
    """
    Blueprint store backed by the web application's REST API.

    Usage:
        client = BlueprintApiClient("http://localhost:3000")
        blueprint = client.load_blueprint("blueprint-1")
    """

    def __init__(self, base_url: Optional[str] = None, timeout: float = Config.HTTP_TIMEOUT_SEC):
        self._base_url = (base_url or Config.get_api_url()).rstrip('/')
        self._timeout = timeout

    @property
    def base_url(self) -> str:
        return self._base_url

    # ==================== Transport ====================

    def _url(self, blueprint_id: str, suffix: str = '') -> str:
        quoted = urllib.parse.quote(blueprint_id, safe='')
        return f"{self._base_url}/api/blueprints/{quoted}{suffix}"

    def _request(self, method: str, url: str, body: Optional[Dict[str, Any]] = None) -> Any:
        """Send a JSON request and return the unwrapped `data` payload."""
        data = json.dumps(body).encode('utf-8') if body is not None else None
        req = urllib.request.Request(url, data=data, method=method)
        req.add_header('Accept', 'application/json')
        req.add_header('User-Agent', f'BlueprintMarkup/{Config.APP_VERSION}')
        if data is not None:
            req.add_header('Content-Type', 'application/json')

        logger.debug(f"{method} {url}")
        try:
            with urllib.request.urlopen(req, timeout=self._timeout) as response:
                raw = response.read().decode('utf-8')
        except urllib.error.HTTPError as e:
            message = self._error_message(e)
            raise NetworkError(f"{method} {url} failed with HTTP {e.code}: {message}") from e
        except (urllib.error.URLError, OSError) as e:
            raise NetworkError(f"{method} {url} failed: {e}") from e

        try:
            payload = json.loads(raw) if raw else {}
        except json.JSONDecodeError as e:
            raise NetworkError(f"{method} {url} returned invalid JSON: {e}") from e

        if isinstance(payload, dict) and 'success' in payload:
            if not payload.get('success'):
                raise NetworkError(payload.get('error') or payload.get('message') or f"{method} {url} failed")
            return payload.get('data')
        return payload

    @staticmethod
    def _error_message(error: urllib.error.HTTPError) -> str:
        try:
            body = json.loads(error.read().decode('utf-8'))
        except (ValueError, OSError):
            return error.reason or ''
        if isinstance(body, dict):
            return body.get('error') or body.get('message') or ''
        return ''

    # ==================== Mapping ====================

    @staticmethod
    def _save_from_json(data: Dict[str, Any], blueprint_id: str = '') -> NamedMarkupSave:
        user = data.get('user') or {}
        return NamedMarkupSave(
            id=str(data['id']),
            blueprint_id=str(data.get('blueprintId') or blueprint_id),
            name=data.get('name', ''),
            serialized_snapshot=data.get('markupData', '[]'),
            is_shared=bool(data.get('isShared', False)),
            description=data.get('description'),
            owner_id=data.get('userId') or user.get('id'),
            created_at=parse_timestamp(data.get('createdAt')),
            updated_at=parse_timestamp(data.get('updatedAt')),
        )

    @classmethod
    def _blueprint_from_json(cls, data: Dict[str, Any]) -> Blueprint:
        job = data.get('job') or {}
        blueprint_id = str(data['id'])
        saves = [cls._save_from_json(s, blueprint_id) for s in data.get('markupSaves') or []]
        return Blueprint(
            id=blueprint_id,
            job_id=data.get('jobId') or job.get('id'),
            source_image_url=data.get('fileUrl', ''),
            live_markup=data.get('markups') or '[]',
            version=int(data.get('version') or 0),
            name=data.get('name', ''),
            named_saves=saves,
        )

    # ==================== Store Interface ====================

    def load_blueprint(self, blueprint_id: str) -> Blueprint:
        data = self._request('GET', self._url(blueprint_id))
        if not isinstance(data, dict) or 'id' not in data:
            raise NetworkError(f"Blueprint {blueprint_id} response is missing its id")
        return self._blueprint_from_json(data)

    def save_live_markup(self, blueprint_id: str, markup_json: str) -> LiveSaveResult:
        data = self._request('PUT', self._url(blueprint_id, '/markup'), {'markupData': markup_json})
        data = data if isinstance(data, dict) else {}
        version = data.get('version')
        return LiveSaveResult(
            blueprint_id=str(data.get('id', blueprint_id)),
            live_markup=data.get('markups', markup_json),
            updated_at=parse_timestamp(data.get('updatedAt')),
            version=int(version) if version is not None else None,
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
        body: Dict[str, Any] = {
            'name': name,
            'markupData': markup_json,
            'isShared': is_shared,
        }
        if description:
            body['description'] = description
        if owner_id:
            body['userId'] = owner_id

        data = self._request('POST', self._url(blueprint_id, '/markup'), body)
        if not isinstance(data, dict) or 'id' not in data:
            raise NetworkError("Named save response is missing its id")
        return self._save_from_json(data, blueprint_id)

    def list_named_saves(self, blueprint_id: str) -> List[NamedMarkupSave]:
        data = self._request('GET', self._url(blueprint_id, '/markup'))
        if not isinstance(data, list):
            raise NetworkError("Named save list response is not an array")
        return [self._save_from_json(s, blueprint_id) for s in data]

    # ==================== Images ====================

    def fetch_image(self, url: str) -> bytes:
        """Download the blueprint's source image bytes."""
        if url.startswith('/'):
            url = f"{self._base_url}{url}"
        req = urllib.request.Request(url)
        req.add_header('User-Agent', f'BlueprintMarkup/{Config.APP_VERSION}')
        try:
            with urllib.request.urlopen(req, timeout=self._timeout) as response:
                return response.read()
        except (urllib.error.URLError, OSError) as e:
            raise NetworkError(f"Could not download blueprint image {url}: {e}") from e


__all__ = ['BlueprintApiClient']
