"""
Configuration Loader

Loads YAML configuration files for stores, relays and scan settings.
"""

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlparse

import yaml

from . import constants
from ..models.relay import RelayDescriptor, ResponseShape, StoreConfig

CONFIG_DIR_ENV = "CATALOG_CONFIG_DIR"


@dataclass(frozen=True)
class ScanSettings:
    """Tuning knobs for scanning and snapshot extraction."""
    page_size: int = constants.PAGE_SIZE
    max_pages: int = constants.MAX_PAGES
    max_consecutive_failures: int = constants.MAX_CONSECUTIVE_FAILURES
    safe_page_delay: float = constants.SAFE_PAGE_DELAY
    fast_page_delay: float = constants.FAST_PAGE_DELAY
    failure_backoff_step: float = constants.FAILURE_BACKOFF_STEP
    relay_retry_delay: float = constants.RELAY_RETRY_DELAY
    blocking_markers: Tuple[str, ...] = constants.BLOCKING_MARKERS
    structured_sufficient_count: int = constants.STRUCTURED_SUFFICIENT_COUNT
    min_name_length: int = constants.MIN_NAME_LENGTH


def _get_config_dir() -> Path:
    """Get the config directory path."""
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override)

    # Try relative to this file first
    module_dir = Path(__file__).parent.parent.parent
    config_dir = module_dir / 'config'

    if config_dir.exists():
        return config_dir

    # Try current working directory
    cwd_config = Path.cwd() / 'config'
    if cwd_config.exists():
        return cwd_config

    raise FileNotFoundError(
        f"Config directory not found. Tried: {config_dir}, {cwd_config}"
    )


def load_config(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filename: Name of the config file (e.g., 'stores.yaml')

    Returns:
        Parsed YAML content as dictionary (empty dict for an empty file)

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    config_path = _get_config_dir() / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def parse_stores(raw: Dict[str, Dict[str, Any]]) -> Dict[str, StoreConfig]:
    """Build StoreConfig objects from the 'stores' mapping."""
    stores = {}
    for key, entry in raw.items():
        stores[key] = StoreConfig(
            key=key,
            name=entry['name'],
            base_url=entry['base_url'].rstrip('/'),
            default_link=entry.get('default_link', ''),
            sales_channel=entry.get('sales_channel', 1),
        )
    return stores


def load_stores() -> Dict[str, StoreConfig]:
    """
    Load the merchant registry.

    Returns:
        Dictionary mapping store key to StoreConfig

    Example:
        {'climario': StoreConfig(key='climario', name='Clima Rio', ...), ...}
    """
    config = load_config('stores.yaml')
    return parse_stores(config.get('stores', {}))


def get_store_for_url(url: str, stores: Optional[Dict[str, StoreConfig]] = None) -> StoreConfig:
    """
    Get the store a category link belongs to.

    Args:
        url: Any URL from the store
        stores: Store registry (if None, loads from config)

    Returns:
        Matching StoreConfig

    Raises:
        ValueError: If the store is not supported
    """
    if stores is None:
        stores = load_stores()

    domain = urlparse(url).netloc.lower()

    for store in stores.values():
        if store.domain and store.domain in domain:
            return store

    supported = ', '.join(store.domain for store in stores.values())
    raise ValueError(f"Unsupported store: {domain}. Supported: {supported}")


def parse_relays(raw: List[Dict[str, Any]]) -> Tuple[RelayDescriptor, ...]:
    """Build the ordered relay chain from the 'relays' list."""
    relays = []
    for entry in raw:
        relays.append(RelayDescriptor(
            name=entry['name'],
            endpoint_template=entry['endpoint_template'],
            response_shape=ResponseShape(entry.get('response_shape', 'raw')),
            timeout_ms=int(entry.get('timeout_ms', constants.DEFAULT_RELAY_TIMEOUT_MS)),
        ))
    return tuple(relays)


def load_relays() -> Tuple[RelayDescriptor, ...]:
    """
    Load the relay chain in configured order.

    Returns:
        Tuple of RelayDescriptor, tried first to last
    """
    config = load_config('relays.yaml')
    return parse_relays(config.get('relays', []))


def parse_scan_settings(raw: Dict[str, Any]) -> ScanSettings:
    """Build ScanSettings, ignoring unknown keys and defaulting missing ones."""
    known = {f.name for f in fields(ScanSettings)}
    values = {key: value for key, value in raw.items() if key in known}
    if 'blocking_markers' in values:
        values['blocking_markers'] = tuple(values['blocking_markers'])
    return ScanSettings(**values)


def load_scan_settings() -> ScanSettings:
    """
    Load scan tuning from scan_settings.yaml.

    Returns:
        ScanSettings with defaults for any key the file leaves out
    """
    config = load_config('scan_settings.yaml')
    return parse_scan_settings(config.get('scan', {}))
