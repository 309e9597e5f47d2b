"""Shared test fixtures."""

import shutil
import tempfile

import pytest

from TexBrew.config import ExportConfig, TextureFormat
from TexBrew.core import TextureResource


@pytest.fixture
def tmp_dir():
    d = tempfile.mkdtemp()
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def default_config():
    return ExportConfig()


def make_resource(texture_format=TextureFormat.RGB24, width=4, height=4,
                  mipmap=False, payload=None, name="tex", path_id=0):
    """Build a resource with a payload sized for one level unless given."""
    if payload is None:
        payload = bytes(range(256)) * ((width * height * 4) // 256 + 1)
        payload = payload[:width * height * 3]
    return TextureResource(
        name=name,
        width=width,
        height=height,
        texture_format=texture_format,
        mipmap=mipmap,
        payload=payload,
        path_id=path_id,
    )


@pytest.fixture
def resource_factory():
    return make_resource
