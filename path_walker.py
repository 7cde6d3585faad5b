#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# 目录遍历工具：跳过隐藏文件与排除路径，目录交给调用方决定是否继续深入

import os
from pathlib import Path


def is_hidden(path):
    """名称以 '.' 开头的文件或目录视为隐藏"""
    return Path(path).name.startswith('.')


def normalize_excluded(project_dir, excluded_paths):
    """把排除路径统一为绝对路径；相对路径以项目根目录为基准"""
    root = Path(project_dir).absolute()
    return {Path(os.path.normpath(root / p)) for p in excluded_paths}


def is_excluded(path, excluded_paths):
    """path 等于某个排除路径，或位于其之下（按路径层级比较，不做字符串前缀匹配）"""
    path = Path(path)
    for excluded in excluded_paths:
        if path == excluded or excluded in path.parents:
            return True
    return False


def _warn_unreadable(path, error):
    print(f"警告：无法读取目录 '{path}'：{error}")


def walk_paths(root, excluded_paths=(), descend=None, onerror=None):
    """Depth-first, pre-order walk below ``root``.

    Yields every non-hidden, non-excluded descendant (files and directories).
    A directory is yielded before its children; ``descend(path)`` decides
    whether those children are visited at all. Directory symlinks are yielded
    but never followed. Listing failures go to ``onerror(path, exc)`` and only
    skip that subtree.
    """
    root = Path(os.path.normpath(Path(root).absolute()))
    excluded = {Path(os.path.normpath(Path(p).absolute())) for p in excluded_paths}
    if onerror is None:
        onerror = _warn_unreadable

    def _walk(directory):
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            onerror(directory, e)
            return

        for entry in entries:
            if entry.name.startswith('.'):
                continue
            path = directory / entry.name
            if is_excluded(path, excluded):
                continue

            yield path

            try:
                is_dir = entry.is_dir(follow_symlinks=False)
            except OSError:
                is_dir = False
            if is_dir and (descend is None or descend(path)):
                yield from _walk(path)

    if is_excluded(root, excluded):
        return
    yield from _walk(root)

