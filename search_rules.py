#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Resource reference search rules.

Each rule pulls candidate resource names out of a file's text with one or more
regular expressions (capture group 1 is the name). Which rules run for a file
is decided by its FileCategory; swift and objc rules can be extended with extra
patterns from a JSON search-rules config file.
"""

import json
import re
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional


class FileCategory(Enum):
    """Source file kinds that get dedicated search rules."""
    SWIFT = "swift"
    OBJC = "objc"
    XIB = "xib"
    PLIST = "plist"
    PBXPROJ = "pbxproj"

    @classmethod
    def from_extension(cls, ext: str) -> Optional["FileCategory"]:
        return _EXTENSION_CATEGORIES.get(ext.lstrip('.').lower())

    @property
    def is_customizable(self) -> bool:
        return self in (FileCategory.SWIFT, FileCategory.OBJC)


_EXTENSION_CATEGORIES = {
    'swift': FileCategory.SWIFT,
    'h': FileCategory.OBJC,
    'm': FileCategory.OBJC,
    'mm': FileCategory.OBJC,
    'xib': FileCategory.XIB,
    'storyboard': FileCategory.XIB,
    'plist': FileCategory.PLIST,
    'pbxproj': FileCategory.PBXPROJ,
}


class SearchRule:
    """Base class for regex search rules."""

    patterns: tuple = ()
    flags = 0

    def __init__(self, extensions=(), patterns=None):
        self.extensions = [ext.lstrip('.') for ext in extensions]
        if patterns:
            self.patterns = tuple(self.default_patterns()) + tuple(patterns)
        else:
            self.patterns = tuple(self.default_patterns())
        self._compiled_patterns = None

    def default_patterns(self) -> list[str]:
        return list(type(self).patterns)

    @property
    def compiled_patterns(self) -> list[re.Pattern]:
        """Lazily compile regex patterns."""
        if self._compiled_patterns is None:
            self._compiled_patterns = [re.compile(p, self.flags) for p in self.patterns]
        return self._compiled_patterns

    def search(self, content: str) -> Iterator[str]:
        """Yield the captured name of every match, pattern by pattern."""
        for regex in self.compiled_patterns:
            for match in regex.finditer(content):
                # 自定义规则可能没有捕获组，此时取整个匹配
                yield match.group(1) if regex.groups else match.group(0)

    def __repr__(self):
        return f"{type(self).__name__}({len(self.patterns)} patterns)"


class PlainImageSearchRule(SearchRule):
    """Fallback for unclassified files: quoted names carrying a resource extension."""

    flags = re.IGNORECASE

    def default_patterns(self):
        if not self.extensions:
            return []
        joined = '|'.join(re.escape(ext) for ext in self.extensions)
        return [rf'"([^"]+?\.(?:{joined}))"']


class SwiftImageSearchRule(SearchRule):
    patterns = (r'"(.*?)"',)


class ObjCImageSearchRule(SearchRule):
    patterns = (r'@"(.*?)"', r'"(.*?)"')


class XibImageSearchRule(SearchRule):
    patterns = (r'image name="(.*?)"', r'image="(.*?)"', r'value="(.*?)"')


class PlistImageSearchRule(SearchRule):
    patterns = (r'<key>UIApplicationShortcutItemIconFile</key>[^<]*<string>(.*?)</string>',)


class PbxprojImageSearchRule(SearchRule):
    patterns = (
        r'ASSETCATALOG_COMPILER_APPICON_NAME = "?(.*?)"?;',
        r'ASSETCATALOG_COMPILER_COMPLICATION_NAME = "?(.*?)"?;',
    )


CATEGORY_RULES = {
    FileCategory.SWIFT: (SwiftImageSearchRule,),
    FileCategory.OBJC: (ObjCImageSearchRule,),
    FileCategory.XIB: (XibImageSearchRule,),
    FileCategory.PLIST: (PlistImageSearchRule,),
    FileCategory.PBXPROJ: (PbxprojImageSearchRule,),
}


def search_rules_for(category, extensions, patterns=None) -> list[SearchRule]:
    """Rules to run for a file of ``category`` (``None`` -> plain fallback rule).

    Extra ``patterns`` are layered on top of the built-in ones for swift/objc
    files and ignored for every other category.
    """
    if category is None:
        return [PlainImageSearchRule(extensions)]
    if not category.is_customizable:
        patterns = None
    return [rule_cls(extensions, patterns) for rule_cls in CATEGORY_RULES[category]]


# --- Search rules config ---

class SearchRulesConfigError(Exception):
    """Base error for search rules config loading."""


class SearchRulesConfigNotFound(SearchRulesConfigError):
    pass


class InvalidSearchRulesConfig(SearchRulesConfigError):
    pass


class SearchRuleConfig:
    """Extra regex patterns per file category, read from a JSON document."""

    def __init__(self, rules=None):
        self.rules = dict(rules or {})

    def patterns_for(self, category: FileCategory) -> Optional[list[str]]:
        return self.rules.get(category)

    @classmethod
    def from_dict(cls, data) -> "SearchRuleConfig":
        """Accepts ``{"rules": [{"fileType": ..., "patterns": [...]}]}`` or ``{"swift": [...], ...}``."""
        if not isinstance(data, dict):
            raise InvalidSearchRulesConfig("配置文件顶层必须是 JSON 对象")

        if 'rules' in data:
            entries = data['rules']
            if not isinstance(entries, list):
                raise InvalidSearchRulesConfig("'rules' 必须是数组")
            pairs = []
            for entry in entries:
                if not isinstance(entry, dict) or 'fileType' not in entry:
                    raise InvalidSearchRulesConfig(f"无效的规则项：{entry!r}")
                pairs.append((entry['fileType'], entry.get('patterns', [])))
        else:
            pairs = list(data.items())

        rules = {}
        for name, patterns in pairs:
            try:
                category = FileCategory(name)
            except ValueError:
                raise InvalidSearchRulesConfig(f"未知的文件类型：{name!r}") from None
            if not isinstance(patterns, list) or not all(isinstance(p, str) for p in patterns):
                raise InvalidSearchRulesConfig(f"'{name}' 的 patterns 必须是字符串数组")
            for pattern in patterns:
                try:
                    re.compile(pattern)
                except re.error as e:
                    raise InvalidSearchRulesConfig(f"无效的正则表达式 {pattern!r}：{e}") from e
            rules.setdefault(category, []).extend(patterns)
        return cls(rules)


def load_search_rules_config(path) -> SearchRuleConfig:
    """读取搜索规则配置文件，文件不存在/不可读或格式错误时抛出异常"""
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except OSError as e:
        raise SearchRulesConfigNotFound(f"无法读取搜索规则配置文件 '{path}'：{e}") from e
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidSearchRulesConfig(f"搜索规则配置文件 '{path}' 格式错误：{e}") from e
    return SearchRuleConfig.from_dict(data)
