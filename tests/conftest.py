import os
import shutil
import tempfile

import pytest

from mpv_ipc.config import PlayerConfig


@pytest.fixture
def socket_path():
    # Unix socket paths are limited to ~100 bytes, pytest's tmp_path may be longer
    directory = tempfile.mkdtemp(prefix="mpv")
    yield os.path.join(directory, "ipc.sock")
    shutil.rmtree(directory, ignore_errors=True)


@pytest.fixture
def player_config(socket_path) -> PlayerConfig:
    return PlayerConfig(socket_path=socket_path, auto_restart=False, time_update=60.0)
