from pathlib import Path

import pytest


def write_tree(root, files):
    """Create ``{relative path: content}`` under root; a trailing '/' makes a directory."""
    root = Path(root)
    for rel, content in files.items():
        path = root / rel
        if rel.endswith('/'):
            path.mkdir(parents=True, exist_ok=True)
            continue
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding='utf-8')
    return root


@pytest.fixture
def make_tree(tmp_path):
    def _make(files):
        return write_tree(tmp_path, files)
    return _make
