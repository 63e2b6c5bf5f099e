"""Persistence services for Blueprint Markup"""

from .records import Blueprint, NamedMarkupSave, LiveSaveResult
from .blueprint_api_client import BlueprintApiClient
from .local_blueprint_store import LocalBlueprintStore
from .markup_channels import MarkupChannelRegistry
from .markup_persistence import MarkupPersistenceBridge, validate_save_name

__all__ = [
    'Blueprint',
    'NamedMarkupSave',
    'LiveSaveResult',
    'BlueprintApiClient',
    'LocalBlueprintStore',
    'MarkupChannelRegistry',
    'MarkupPersistenceBridge',
    'validate_save_name',
]
