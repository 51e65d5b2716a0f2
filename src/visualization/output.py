"""
Output sinks for account update transactions: image viewer, image file, console dump.
"""

import logging
import subprocess
import sys
import tempfile
import time
from enum import Enum
from pprint import pprint
from typing import Dict, Any, Optional, TextIO
from dataclasses import dataclass
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import DEFAULT_CONFIG
from core.transaction import TransactionSource
from normalization.normalizer import TransactionNormalizer, NormalizedTransaction
from visualization.transaction_graph import TransactionGraphRenderer


logger = logging.getLogger(__name__)


class WaitResult(Enum):
    """Outcome of waiting for a rendered file."""
    FOUND = "found"
    TIMEOUT = "timeout"


@dataclass
class ViewerResult:
    """Outcome of handing an image to the OS viewer."""
    command: Optional[str]
    returncode: Optional[int] = None
    error: Optional[str] = None
    skipped: bool = False
    
    @property
    def ok(self) -> bool:
        return not self.skipped and self.error is None and self.returncode == 0


VIEWER_COMMANDS = {
    'darwin': 'open',
    'linux': 'xdg-open',
}


def wait_for_file(path: str, interval: float = 0.1, max_attempts: int = 100) -> WaitResult:
    """
    Poll until a file exists.
    
    Args:
        path: File to wait for
        interval: Seconds to sleep between attempts
        max_attempts: Number of checks before giving up
        
    Returns:
        WaitResult.FOUND or WaitResult.TIMEOUT
        
    Raises:
        OSError: Any filesystem error other than the file not existing yet
    """
    for attempt in range(max_attempts):
        try:
            Path(path).stat()
            return WaitResult.FOUND
        except FileNotFoundError:
            if attempt < max_attempts - 1:
                time.sleep(interval)
    
    logger.warning(f"Gave up waiting for {path} after {max_attempts} attempts")
    return WaitResult.TIMEOUT


def open_image(image_path: str, platform: Optional[str] = None) -> ViewerResult:
    """
    Open an image with the platform's default viewer.
    
    Failures are logged and reported in the result, never raised.
    
    Args:
        image_path: Image to open
        platform: Platform name, defaults to sys.platform
        
    Returns:
        ViewerResult with the command and its exit status
    """
    platform = platform or sys.platform
    opener = VIEWER_COMMANDS.get(platform)
    
    if opener is None:
        logger.error(f"Unsupported platform: {platform}")
        return ViewerResult(command=None, skipped=True)
    
    command = f'{opener} "{image_path}"'
    logger.info(command)
    
    try:
        completed = subprocess.run(command, shell=True, capture_output=True, text=True)
    except OSError as e:
        logger.error(f"Error opening image: {e}")
        return ViewerResult(command=command, error=str(e))
    
    if completed.returncode != 0:
        error = completed.stderr.strip() or f"exit status {completed.returncode}"
        logger.error(f"Error opening image: {error}")
        return ViewerResult(command=command, returncode=completed.returncode, error=error)
    
    return ViewerResult(command=command, returncode=completed.returncode)


class TransactionVisualizer:
    """
    Runs the normalize/render pipeline and hands the result to a sink.
    """
    
    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the visualizer.
        
        Args:
            config: Loaded configuration. If None, uses the built-in defaults
        """
        config = config or DEFAULT_CONFIG
        viewer = {**DEFAULT_CONFIG['viewer'], **config.get('viewer', {})}
        
        self.normalizer = TransactionNormalizer(config)
        self.renderer = TransactionGraphRenderer(config)
        self.poll_interval = float(viewer['poll_interval'])
        self.max_attempts = int(viewer['max_attempts'])
        self.logger = logging.getLogger(__name__)
    
    def show_transaction(self, txn: TransactionSource, name: str, legend: Dict[str, str]) -> ViewerResult:
        """
        Render a transaction to the temp directory and open it in the image viewer.
        
        Args:
            txn: Transaction source
            name: Graph title, also used as the file name
            legend: Mapping from base58 keys to display labels
            
        Returns:
            ViewerResult describing the viewer launch
        """
        image_path = Path(tempfile.gettempdir()) / f"{name}.{self.renderer.format}"
        self.save_transaction(txn, name, legend, str(image_path))
        
        if wait_for_file(str(image_path), self.poll_interval, self.max_attempts) is WaitResult.TIMEOUT:
            self.logger.error(f"Rendered image never appeared at {image_path}")
            return ViewerResult(command=None, error=f"{image_path} not found", skipped=True)
        
        return open_image(str(image_path))
    
    def save_transaction(self, txn: TransactionSource, name: str, legend: Dict[str, str], path: str) -> Path:
        """
        Render a transaction graph to an image file.
        
        Args:
            txn: Transaction source
            name: Graph title
            legend: Mapping from base58 keys to display labels
            path: Output file path
            
        Returns:
            Path of the written image
        """
        normalized = self.normalizer.normalize(txn, name, legend)
        graph = self.renderer.build_graph(normalized)
        return self.renderer.render(graph, path)
    
    def print_transaction(self, txn: TransactionSource, name: str, legend: Dict[str, str],
                          stream: Optional[TextIO] = None) -> NormalizedTransaction:
        """
        Pretty-print the normalized transaction to the console.
        
        Args:
            txn: Transaction source
            name: Transaction title
            legend: Mapping from base58 keys to display labels
            stream: Output stream, defaults to stdout
            
        Returns:
            The normalized transaction that was printed
        """
        normalized = self.normalizer.normalize(txn, name, legend)
        pprint(normalized.to_dict(), stream=stream or sys.stdout, width=100, sort_dicts=False)
        return normalized
