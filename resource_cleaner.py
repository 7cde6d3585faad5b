#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# 删除未使用的资源文件，并从 project.pbxproj 中移除对应的引用行

import os
import shutil
from pathlib import Path


def delete_files(unused_files):
    """Delete every file (or bundle directory) in ``unused_files``.

    Returns ``(deleted, failed)`` where ``failed`` holds ``(file_info, error)``
    pairs; one failure never stops the rest.
    """
    deleted = []
    failed = []
    for file_info in unused_files:
        try:
            if os.path.isdir(file_info.path) and not os.path.islink(file_info.path):
                shutil.rmtree(file_info.path)
            else:
                os.remove(file_info.path)
            deleted.append(file_info)
        except OSError as e:
            failed.append((file_info, e))
    return deleted, failed


def find_project_file(start_dir):
    """在 start_dir（或其上一级目录）中查找 *.xcodeproj/project.pbxproj"""
    start_dir = Path(start_dir).absolute()
    for directory in (start_dir, start_dir.parent):
        try:
            candidates = sorted(directory.iterdir())
        except OSError:
            continue
        for item in candidates:
            pbxproj = item / 'project.pbxproj'
            if item.suffix == '.xcodeproj' and item.is_dir() and pbxproj.is_file():
                return pbxproj
        if directory == directory.parent:
            break
    return None


def delete_reference(project_file_path, deleted_files):
    """Drop every line of the project file that mentions a deleted file's name."""
    try:
        with open(project_file_path, 'r', encoding='utf-8') as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        print(f"警告：无法读取工程文件 {project_file_path}：{e}")
        return False

    names = [f.file_name for f in deleted_files]
    lines = [line for line in content.split('\n')
             if not any(name in line for name in names)]

    try:
        with open(project_file_path, 'w', encoding='utf-8') as f:
            f.write('\n'.join(lines))
    except OSError as e:
        print(f"警告：无法写入工程文件 {project_file_path}：{e}")
        return False
    return True
