#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from dataclasses import dataclass
from pathlib import Path

from path_walker import is_hidden


def path_size(path):
    """目录：递归累加子项大小；文件：隐藏文件记 0，否则取文件大小"""
    path = Path(path)
    try:
        if path.is_dir() and not path.is_symlink():
            return sum(path_size(child) for child in path.iterdir())
        if is_hidden(path):
            return 0
        return path.stat().st_size
    except OSError:
        return 0


def pretty_size(size_bytes):
    """将字节大小转换为易读格式 (KB, MB)"""
    if size_bytes is None: return "N/A"
    if not isinstance(size_bytes, (int, float)) or size_bytes < 0: return "Invalid"
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024**2:
        return f"{size_bytes / 1024:.2f} KB"
    elif size_bytes < 1024**3:
        return f"{size_bytes / (1024**2):.2f} MB"
    else:
        return f"{size_bytes / (1024**3):.2f} GB"


@dataclass(frozen=True)
class FileInfo:
    """An unused resource on disk."""
    path: str
    size: int
    file_name: str

    @classmethod
    def from_path(cls, path):
        path = Path(path)
        return cls(path=str(path), size=path_size(path), file_name=path.name)

    @property
    def readable_size(self):
        return pretty_size(self.size)

    def to_dict(self):
        return {
            'path': self.path,
            'file_name': self.file_name,
            'size': self.size,
            'readable_size': self.readable_size,
        }
