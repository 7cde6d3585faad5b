#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# 收集项目中的候选资源文件，按资源名（去掉扩展名和 @2x/@3x 后缀）分组

import os
import re
from pathlib import Path

from path_walker import walk_paths, normalize_excluded

# --- Configuration ---

# Resource extensions scanned by default
DEFAULT_RESOURCE_EXTENSIONS = ('imageset', 'jpg', 'png', 'gif', 'pdf')

# 以目录形式存在的资源：目录本身是一个资源，内部文件不单独计入
BUNDLE_EXTENSIONS = (
    'imageset', 'launchimage', 'appiconset', 'stickersiconset',
    'complicationset', 'bundle'
)

SCALE_SUFFIX_REGEX = re.compile(r'@[123]x$')


def normalize_extensions(extensions):
    """'.PNG' / 'png' -> 'png'"""
    return {ext.strip().lstrip('.').lower() for ext in extensions if ext.strip().lstrip('.')}


def path_extension(name):
    """Last extension of a name, lower-cased, without the dot ('' if none)."""
    suffix = Path(name).suffix
    return suffix[1:].lower() if suffix else ''


def strip_scale_suffix(name):
    stripped = SCALE_SUFFIX_REGEX.sub('', name)
    return stripped or name


def resource_key(file_name, extensions):
    """资源名：去掉末尾所有已识别的资源扩展名 (name.ext1.ext2 -> name)，再去掉 @2x/@3x"""
    extensions = normalize_extensions(extensions)
    name = Path(file_name).name
    while True:
        stem, dot, ext = name.rpartition('.')
        if not dot or not stem or ext.lower() not in extensions:
            break
        name = stem
    return strip_scale_suffix(name)


def build_resource_inventory(project_dir, excluded_paths, resource_extensions,
                             bundle_extensions=BUNDLE_EXTENSIONS):
    """Return ``{resource key: set of absolute paths}`` for every resource under ``project_dir``.

    Bundle-like directories (``*.imageset`` etc.) are treated as leaves: the
    directory is the resource and nothing inside it is inventoried. Directories
    whose name merely ends with a file extension (``foo.png/``) are skipped.
    If the project root cannot be read at all, an empty inventory is returned.
    """
    project_dir = Path(os.path.normpath(Path(project_dir).absolute()))
    extensions = normalize_extensions(resource_extensions)
    bundles = normalize_extensions(bundle_extensions)
    non_dir_extensions = extensions - bundles
    excluded = normalize_excluded(project_dir, excluded_paths)

    root_failed = []

    def on_error(path, error):
        if Path(path) == project_dir:
            root_failed.append(error)
        else:
            print(f"警告：无法读取目录 '{path}'：{error}")

    def descend(path):
        return path_extension(path.name) not in bundles

    inventory = {}
    for path in walk_paths(project_dir, excluded, descend=descend, onerror=on_error):
        ext = path_extension(path.name)
        if ext not in extensions:
            continue

        # Skip folders which end with a non-folder extension, eg: /myfolder.png/
        if ext in non_dir_extensions and path.is_dir():
            continue

        key = resource_key(path.name, extensions)
        inventory.setdefault(key, set()).add(str(path))

    if root_failed:
        print(f"错误：资源文件查找失败，无法读取项目目录 '{project_dir}'：{root_failed[0]}")
        return {}

    return inventory
