"""
Shared fixtures for deldup tests.
Creates isolated temporary directory trees with controlled test files.
"""
import pytest
import tempfile
import zipfile
from pathlib import Path
from typing import Dict
import sys

# Add src/ to sys.path so 'deldup' is importable without installation
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def make_zip():
    """
    Returns a helper that writes a ZIP file from {member_name: bytes}.
    Names ending with '/' become directory members.
    """
    def _make_zip(path: Path, members: Dict[str, bytes],
                  compression: int = zipfile.ZIP_DEFLATED) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(path, "w", compression=compression) as zf:
            for name, data in members.items():
                zf.writestr(name, data)
        return path
    return _make_zip


@pytest.fixture
def trees(temp_dir) -> Dict[str, Path]:
    """
    Creates an 'official' and a 'new' tree:
    - official/a.txt and new/copy_of_a.txt share content
    - official/sub/b.bin and new/deep/er/b.bin share content (larger than 64 KiB)
    - new/only_new.txt exists only in the new tree
    - official/empty.txt and new/empty.txt are both empty
    """
    official = temp_dir / "official"
    new = temp_dir / "new"
    (official / "sub").mkdir(parents=True)
    (new / "deep" / "er").mkdir(parents=True)

    big = bytes(range(256)) * 400  # 102400 bytes

    (official / "a.txt").write_bytes(b"hello")
    (official / "sub" / "b.bin").write_bytes(big)
    (official / "empty.txt").write_bytes(b"")

    (new / "copy_of_a.txt").write_bytes(b"hello")
    (new / "deep" / "er" / "b.bin").write_bytes(big)
    (new / "only_new.txt").write_bytes(b"something else")
    (new / "empty.txt").write_bytes(b"")

    return {"root": temp_dir, "official": official, "new": new}
