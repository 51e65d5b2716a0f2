"""
Tests for the image viewer, file and console sinks.
"""

import io
import subprocess
import tempfile
from pathlib import Path

import pytest

from conftest import DEPLOYER
import visualization.output as output
from visualization.output import (
    TransactionVisualizer, ViewerResult, WaitResult, open_image, wait_for_file
)


def test_wait_for_existing_file(tmp_path):
    image = tmp_path / 'g.png'
    image.write_bytes(b'png')
    
    assert wait_for_file(str(image), interval=0, max_attempts=1) is WaitResult.FOUND


def test_wait_for_file_appearing_later(tmp_path, monkeypatch):
    image = tmp_path / 'g.png'
    sleeps = []
    
    def fake_sleep(seconds):
        sleeps.append(seconds)
        if len(sleeps) == 3:
            image.write_bytes(b'png')
    
    monkeypatch.setattr(output.time, 'sleep', fake_sleep)
    
    assert wait_for_file(str(image), interval=0.1, max_attempts=10) is WaitResult.FOUND
    assert sleeps == [0.1, 0.1, 0.1]


def test_wait_for_file_times_out(tmp_path, monkeypatch):
    monkeypatch.setattr(output.time, 'sleep', lambda seconds: None)
    
    assert wait_for_file(str(tmp_path / 'never.png'), max_attempts=5) is WaitResult.TIMEOUT


def test_wait_for_file_propagates_other_errors(monkeypatch):
    class DeniedPath:
        def __init__(self, path):
            self.path = path

        def stat(self):
            raise PermissionError('denied')

    monkeypatch.setattr(output, 'Path', DeniedPath)
    
    with pytest.raises(PermissionError):
        wait_for_file('/restricted/g.png', max_attempts=3)


@pytest.mark.parametrize('platform, command', [
    ('darwin', 'open "/tmp/g.png"'),
    ('linux', 'xdg-open "/tmp/g.png"'),
])
def test_open_image_command(monkeypatch, platform, command):
    calls = []
    
    def fake_run(cmd, **kwargs):
        calls.append((cmd, kwargs))
        return subprocess.CompletedProcess(cmd, 0, stdout='', stderr='')
    
    monkeypatch.setattr(output.subprocess, 'run', fake_run)
    result = open_image('/tmp/g.png', platform=platform)
    
    assert result == ViewerResult(command=command, returncode=0)
    assert result.ok
    assert calls[0][0] == command
    assert calls[0][1]['shell'] is True


def test_open_image_unsupported_platform(monkeypatch, caplog):
    monkeypatch.setattr(output.subprocess, 'run', lambda *a, **k: pytest.fail('should not run'))
    result = open_image('/tmp/g.png', platform='win32')
    
    assert result.skipped
    assert not result.ok
    assert 'Unsupported platform: win32' in caplog.text


def test_open_image_failure_is_reported_not_raised(monkeypatch, caplog):
    monkeypatch.setattr(
        output.subprocess, 'run',
        lambda cmd, **kwargs: subprocess.CompletedProcess(cmd, 4, stdout='', stderr='no viewer')
    )
    result = open_image('/tmp/g.png', platform='linux')
    
    assert result.returncode == 4
    assert result.error == 'no viewer'
    assert not result.ok
    assert 'Error opening image' in caplog.text


def test_open_image_spawn_error(monkeypatch):
    def boom(cmd, **kwargs):
        raise OSError('no shell')
    
    monkeypatch.setattr(output.subprocess, 'run', boom)
    result = open_image('/tmp/g.png', platform='linux')
    
    assert result.error == 'no shell'
    assert not result.ok


@pytest.fixture
def fake_render(monkeypatch):
    """Replace graphviz rendering with a file write."""
    rendered = []
    
    def render(self, G, path, fmt=None):
        rendered.append((G, path))
        Path(path).write_bytes(b'png')
        return Path(path)
    
    monkeypatch.setattr(output.TransactionGraphRenderer, 'render', render)
    return rendered


def test_save_transaction(tmp_path, fake_render, deploy_transaction, legend):
    path = TransactionVisualizer().save_transaction(
        deploy_transaction, 'deploy_txn', legend, str(tmp_path / 'deploy.png')
    )
    
    assert path == tmp_path / 'deploy.png'
    G, _ = fake_render[0]
    assert G.number_of_nodes() == 2


def test_show_transaction_opens_temp_image(monkeypatch, fake_render, deploy_transaction, legend):
    opened = []
    
    def fake_open(image_path):
        opened.append(image_path)
        return ViewerResult(command=f'xdg-open "{image_path}"', returncode=0)
    
    monkeypatch.setattr(output, 'open_image', fake_open)
    result = TransactionVisualizer().show_transaction(deploy_transaction, 'deploy_txn', legend)
    
    expected = str(Path(tempfile.gettempdir()) / 'deploy_txn.png')
    assert opened == [expected]
    assert result.ok


def test_print_transaction(deploy_transaction, legend):
    stream = io.StringIO()
    normalized = TransactionVisualizer().print_transaction(deploy_transaction, 'deploy_txn', legend, stream=stream)
    
    text = stream.getvalue()
    assert "'name': 'deploy_txn'" in text
    assert "'publicKey': 'deployer'" in text
    assert "'appState': '0s'" in text
    assert DEPLOYER in text  # legend keys are part of the dump
    assert len(normalized.account_updates) == 2
