#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# 扫描代码、界面文件、Plist 和工程文件，收集其中可能引用到的资源名

import os
import plistlib
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from path_walker import walk_paths, normalize_excluded
from resource_inventory import normalize_extensions, path_extension, strip_scale_suffix
from search_rules import FileCategory, search_rules_for

# 同时读取的文件数上限，避免大型工程中耗尽文件描述符
DEFAULT_MAX_WORKERS = 8

DEFAULT_SEARCH_IN_EXTENSIONS = ('h', 'm', 'mm', 'swift', 'xib', 'storyboard', 'plist')

BINARY_PLIST_MAGIC = b'bplist'


def normalize_name(token, extensions):
    """'images/icon@2x.png' -> 'icon'; tokens without a resource extension are kept as-is."""
    ext = path_extension(token)
    if not ext or ext not in extensions:
        return token
    name = Path(token).stem
    return strip_scale_suffix(name) if name else token


def read_file_content(path):
    """读取文件文本内容；二进制 plist 先转成 XML 再交给正则规则"""
    try:
        with open(path, 'rb') as f:
            data = f.read()
    except OSError as e:
        print(f"警告：无法读取文件 {path}：{e}")
        return ''

    if data.startswith(BINARY_PLIST_MAGIC):
        try:
            data = plistlib.dumps(plistlib.loads(data), fmt=plistlib.FMT_XML)
        except (plistlib.InvalidFileException, ValueError, OverflowError):
            # Not a valid binary plist after all, fall back to raw text
            pass
    return data.decode('utf-8', errors='ignore')


def search_file(path, extensions, search_rules_config=None):
    """Return the normalized names referenced by a single file."""
    category = FileCategory.from_extension(path_extension(path))
    patterns = None
    if category is not None and search_rules_config is not None:
        patterns = search_rules_config.patterns_for(category)
    rules = search_rules_for(category, sorted(extensions), patterns)

    content = read_file_content(path)
    if not content:
        return set()
    return {normalize_name(token, extensions) for rule in rules for token in rule.search(content)}


def iter_search_files(project_dir, excluded_paths, search_in_extensions):
    """All non-hidden, non-excluded files whose extension is in ``search_in_extensions``."""
    for path in walk_paths(project_dir, excluded_paths):
        if path_extension(path.name) in search_in_extensions and not path.is_dir():
            yield path


def collect_used_names(project_dir, excluded_paths, search_in_extensions, resource_extensions,
                       search_rules_config=None, max_workers=DEFAULT_MAX_WORKERS):
    """Union of the names referenced by every searchable file under ``project_dir``.

    Files are discovered sequentially and searched on a bounded thread pool.
    """
    project_dir = Path(os.path.normpath(Path(project_dir).absolute()))
    excluded = normalize_excluded(project_dir, excluded_paths)
    search_in = normalize_extensions(search_in_extensions)
    extensions = normalize_extensions(resource_extensions)

    used_names = set()
    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as executor:
        results = executor.map(
            lambda p: search_file(p, extensions, search_rules_config),
            iter_search_files(project_dir, excluded, search_in)
        )
        for names in results:
            used_names.update(names)
    return used_names
