"""Shared fixtures building resource families on disk."""

from pathlib import Path
from xml.sax.saxutils import escape

import pytest

from resx.host_integration import HostIntegration
from resx.resource_updater import ResourceUpdater
from resx.resx_file_finder import ResXFileFinder
from resx.resx_file_store import ResXFileStore

RESX_TEMPLATE = """<?xml version="1.0" encoding="utf-8"?>
<root>
  <!-- Resource file used by tests -->
  <xsd:schema id="root" xmlns:xsd="http://www.w3.org/2001/XMLSchema" xmlns:msdata="urn:schemas-microsoft-com:xml-msdata">
    <xsd:element name="root" msdata:IsDataSet="true" />
  </xsd:schema>
  <resheader name="resmimetype">
    <value>text/microsoft-resx</value>
  </resheader>
  <resheader name="version">
    <value>2.0</value>
  </resheader>
{entries}</root>
"""


def render_resx(entries=None):
    lines = []
    for key, value in (entries or {}).items():
        lines.append(f'  <data name="{escape(key)}" xml:space="preserve">\n'
                     f'    <value>{escape(value)}</value>\n'
                     f'  </data>\n')
    return RESX_TEMPLATE.format(entries="".join(lines))


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "project"
    directory.mkdir()
    return directory


@pytest.fixture
def make_resx(project_dir: Path):
    """Write a ResX file under the project directory and return its path."""
    def _make(file_name, entries=None, subdir=None):
        directory = project_dir / subdir if subdir else project_dir
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / file_name
        path.write_text(render_resx(entries), encoding="utf-8")
        return str(path)
    return _make


@pytest.fixture
def store() -> ResXFileStore:
    return ResXFileStore()


@pytest.fixture
def finder(project_dir: Path, store: ResXFileStore) -> ResXFileFinder:
    return ResXFileFinder(str(project_dir), store=store)


class RecordingHost(HostIntegration):
    """Host integration that remembers every call."""

    def __init__(self):
        self.calls = []

    def notify_file_changed(self, path):
        self.calls.append(("notify", path))

    def invalidate(self, family_id):
        self.calls.append(("invalidate", family_id))


@pytest.fixture
def host() -> RecordingHost:
    return RecordingHost()


@pytest.fixture
def updater(finder: ResXFileFinder, host: RecordingHost):
    resource_updater = ResourceUpdater(finder, host=host, max_workers=2)
    yield resource_updater
    resource_updater.shutdown()
