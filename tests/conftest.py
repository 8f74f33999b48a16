import sys
from pathlib import Path

import pytest

SAMPLE_LISTENERS = '''
class Auditor:
    def __init__(self):
        self.seen = []


AUDITOR = Auditor()


def allow(receiver, user="guest"):
    return user == "admin"


def abstain(receiver, *args):
    return None


def audit(receiver, *args):
    receiver.seen.append(args)
    return "audited"


def echo(receiver, *args):
    return list(args)


def explode(receiver, *args):
    raise RuntimeError("listener exploded")


NOT_CALLABLE = 3
'''


@pytest.fixture
def sample_module(tmp_path: Path, monkeypatch) -> str:
    """Write an importable listener module and return its name."""
    name = "sample_listeners"
    (tmp_path / f"{name}.py").write_text(SAMPLE_LISTENERS)
    monkeypatch.delitem(sys.modules, name, raising=False)
    monkeypatch.syspath_prepend(str(tmp_path))
    yield name
    sys.modules.pop(name, None)


@pytest.fixture
def write_manifest(tmp_path: Path):
    def _write(text: str, filename: str = "chain.yaml") -> Path:
        path = tmp_path / filename
        path.write_text(text)
        return path

    return _write
