"""
Configuration loading for the transaction visualizer.
"""

import copy
import logging
from typing import Dict, Any, Optional
from pathlib import Path

import yaml


DEFAULT_TOKEN_ID = 'wSHV2S4qX9jFsLjQo8r1BsMLH2ZRKsZx6EJd1sbozGPieEC4Jf'
DEFAULT_TOKEN_LABEL = 'MINA'

DEFAULT_CONFIG: Dict[str, Any] = {
    'legend': {},
    'normalization': {
        'redact_keep': 6,
        'nanomina_per_mina': 1_000_000_000,
        'include_body_extras': False,
    },
    'rendering': {
        'format': 'png',
        'fontname': 'monospace',
        'title_fontsize': 18,
        'title_loc': 't',
    },
    'viewer': {
        'poll_interval': 0.1,
        'max_attempts': 100,
    },
    'logging': {
        'level': 'INFO',
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from a YAML file, layered over the built-in defaults.
    
    Args:
        config_path: Path to configuration file. If None, uses config.yaml in the project root
        
    Returns:
        Configuration dictionary
    """
    logger = logging.getLogger(__name__)
    
    if config_path is None:
        project_root = Path(__file__).parent.parent.parent
        config_path = project_root / "config.yaml"
    
    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f) or {}
        if not isinstance(config, dict):
            raise ValueError("top-level YAML value must be a mapping")
        logger.info(f"Loaded configuration from {config_path}")
        return _merge(DEFAULT_CONFIG, config)
    except Exception as e:
        logger.error(f"Failed to load config from {config_path}: {e}")
        return copy.deepcopy(DEFAULT_CONFIG)


def load_legend(legend_path: str) -> Dict[str, str]:
    """
    Load a legend file mapping base58 keys to display labels.
    
    Args:
        legend_path: Path to a YAML mapping
        
    Returns:
        Legend dictionary
    """
    with open(legend_path, 'r') as f:
        legend = yaml.safe_load(f) or {}
    
    if not isinstance(legend, dict):
        raise ValueError(f"Legend file {legend_path} must contain a mapping")
    
    return {str(key): str(label) for key, label in legend.items()}
