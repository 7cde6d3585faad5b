#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# 对比资源清单与引用名集合，找出未被引用的资源文件

import re

DIGITS_REGEX = re.compile(r'(\d+)')


def split_number_index(name):
    """Split ``name`` around its last run of digits.

    Returns ``(prefix, suffix)`` (either may be '') or ``None`` when the name
    has no digits.
    """
    last = None
    for last in DIGITS_REGEX.finditer(name):
        pass
    if last is None:
        return None
    return name[:last.start(1)], name[last.end(1):]


def _matches_number_index(pattern, parts):
    if parts is None:
        return False
    prefix, suffix = parts
    if not prefix and not suffix:
        # 纯数字的资源名只能精确匹配
        return False
    return pattern.startswith(prefix) and pattern.endswith(suffix)


def similar_pattern_with_number_index(pattern, candidate):
    """Whether ``pattern`` (e.g. "image%02d") could have produced ``candidate`` (e.g. "image01").

    The text before and after the last digit run of ``candidate`` must be a
    prefix and a suffix of ``pattern`` respectively.
    """
    return _matches_number_index(pattern, split_number_index(candidate))


def is_key_used(key, used_names):
    if key in used_names:
        return True
    parts = split_number_index(key)
    if parts is None:
        return False
    return any(_matches_number_index(name, parts) for name in used_names)


def filter_unused(inventory, used_names):
    """Paths of every inventory entry whose key is neither used verbatim nor by a numbered pattern."""
    unused = set()
    for key, paths in inventory.items():
        if not is_key_used(key, used_names):
            unused.update(paths)
    return unused
