#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# 找出 iOS 工程中没有被任何代码、界面文件或配置引用到的资源文件；可选删除并清理 project.pbxproj 引用

import argparse
import contextlib
import csv
import json
import os
import sys
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from pathlib import Path

from file_info import FileInfo, pretty_size
from path_walker import normalize_excluded
from resource_cleaner import delete_files, delete_reference, find_project_file
from resource_inventory import (BUNDLE_EXTENSIONS, DEFAULT_RESOURCE_EXTENSIONS,
                                build_resource_inventory, normalize_extensions)
from search_rules import (InvalidSearchRulesConfig, SearchRulesConfigNotFound,
                          load_search_rules_config)
from unused_resolver import filter_unused
from used_names import (DEFAULT_MAX_WORKERS, DEFAULT_SEARCH_IN_EXTENSIONS,
                        collect_used_names)

# --- Output Format Configuration ---
class OutputFormat:
    TEXT = 'text'
    JSON = 'json'
    CSV = 'csv'

# 相似图片比较的默认汉明距离阈值
SIMILARITY_THRESHOLD = 5

# 超过该大小 (KB) 的未使用资源在文本输出中标红
LARGE_THRESHOLD_KB = 100

COLORS = {
    'RED': '\033[91m',
    'GREEN': '\033[92m',
    'YELLOW': '\033[93m',
    'END': '\033[0m',
}


# 检测终端是否支持颜色输出
def supports_color():
    """检测当前终端是否支持颜色输出。"""
    # 如果环境变量明确禁用颜色
    if os.environ.get('NO_COLOR') or os.environ.get('CLICOLOR_FORCE') == '0':
        return False
    # 如果环境变量明确启用颜色
    if os.environ.get('CLICOLOR_FORCE') == '1':
        return True
    # 如果stdout不是tty，通常不支持颜色
    if not sys.stdout.isatty():
        return False
    if os.environ.get('TERM') == 'dumb':
        return False
    return True


def colored(text, color_code):
    """如果终端支持颜色，则返回带颜色的文本，否则返回原文本。"""
    if not supports_color():
        return text
    return f"{color_code}{text}{COLORS['END']}"


# --- Errors ---

class ResourceAnalyzerError(Exception):
    """Configuration problem detected before any scanning starts."""


class NoResourceExtensionError(ResourceAnalyzerError):
    def __init__(self):
        super().__init__("未指定任何资源扩展名。")


class NoSearchExtensionError(ResourceAnalyzerError):
    def __init__(self):
        super().__init__("未指定任何需要搜索的文件扩展名。")


class SearchRulesConfigNotFoundError(ResourceAnalyzerError):
    pass


class InvalidSearchRulesConfigError(ResourceAnalyzerError):
    pass


# --- Main Logic ---

class ResourceAnalyzer:
    """Finds resource files in a project that no scanned file refers to."""

    def __init__(self, project_dir, excluded_paths=(),
                 resource_extensions=DEFAULT_RESOURCE_EXTENSIONS,
                 search_in_extensions=DEFAULT_SEARCH_IN_EXTENSIONS,
                 search_rules_config_path=None,
                 bundle_extensions=BUNDLE_EXTENSIONS,
                 max_workers=DEFAULT_MAX_WORKERS):
        self.project_dir = Path(os.path.normpath(Path(project_dir).absolute()))
        self.excluded_paths = normalize_excluded(self.project_dir, excluded_paths)
        self.resource_extensions = normalize_extensions(resource_extensions)
        self.search_in_extensions = normalize_extensions(search_in_extensions)
        self.bundle_extensions = normalize_extensions(bundle_extensions)
        self.search_rules_config_path = (
            Path(search_rules_config_path).absolute() if search_rules_config_path else None
        )
        self.max_workers = max_workers

    def load_search_rules_config(self):
        if self.search_rules_config_path is None:
            return None
        try:
            return load_search_rules_config(self.search_rules_config_path)
        except SearchRulesConfigNotFound as e:
            raise SearchRulesConfigNotFoundError(str(e)) from e
        except InvalidSearchRulesConfig as e:
            raise InvalidSearchRulesConfigError(str(e)) from e

    def all_resource_files(self):
        return build_resource_inventory(self.project_dir, self.excluded_paths,
                                        self.resource_extensions, self.bundle_extensions)

    def all_used_names(self, search_rules_config=None):
        return collect_used_names(self.project_dir, self.excluded_paths,
                                  self.search_in_extensions, self.resource_extensions,
                                  search_rules_config, max_workers=self.max_workers)

    def scan(self):
        """Validate configuration, then build ``(inventory, used names)`` concurrently."""
        if not self.resource_extensions:
            raise NoResourceExtensionError()
        if not self.search_in_extensions:
            raise NoSearchExtensionError()
        search_rules_config = self.load_search_rules_config()

        with ThreadPoolExecutor(max_workers=2) as executor:
            inventory_future = executor.submit(self.all_resource_files)
            used_future = executor.submit(self.all_used_names, search_rules_config)
            return inventory_future.result(), used_future.result()

    def unused_files(self):
        """Return a ``FileInfo`` for every unused resource, sorted by path."""
        inventory, used_names = self.scan()
        return [FileInfo.from_path(p) for p in sorted(filter_unused(inventory, used_names))]


# --- Reports ---

def print_unused_report(unused_files):
    if not unused_files:
        print(colored("未发现未使用的资源文件。", COLORS['GREEN']))
        return

    print("\n--- 未使用的资源 (按大小排序) ---")
    print(f"{'大小':>12} | 文件名 (路径)")
    print("-" * 100)
    for file_info in sorted(unused_files, key=lambda f: f.size, reverse=True):
        line = f"{file_info.readable_size:>12} | {file_info.file_name} ({file_info.path})"
        if file_info.size / 1024.0 >= LARGE_THRESHOLD_KB:
            print(colored(line, COLORS['RED']))
        else:
            print(line)
    print("-" * 100)
    total_size = sum(f.size for f in unused_files)
    print(f"发现 {len(unused_files)} 个未使用的资源，共 {pretty_size(total_size)}。")
    print("注意：资源名可能是动态拼接的，请在删除前仔细确认。")


def print_similar_report(similar_image_groups, similarity_threshold):
    print(f"\n--- 相似图片组 (汉明距离 <= {similarity_threshold}) ---")
    if not similar_image_groups:
        print("未找到相似的图片组。")
        return
    for index, group in enumerate(similar_image_groups, 1):
        print(f"\n组 {index}:")
        for img in group:
            print(f"  - {pretty_size(img['size']):>10} | {img['path']} (Hash: {img['hash']})")


def build_output_data(project_dir, unused_files, similar_image_groups=None):
    return {
        'timestamp': datetime.now().strftime('%Y-%m-%d %H:%M:%S'),
        'project_dir': str(project_dir),
        'unused_resources': [f.to_dict() for f in unused_files],
        'total_size': sum(f.size for f in unused_files),
        'similar_image_groups': similar_image_groups or [],
    }


def write_csv_report(filepath, unused_files):
    with open(filepath, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(['大小 (bytes)', '大小', '文件名', '路径'])
        for file_info in unused_files:
            writer.writerow([file_info.size, file_info.readable_size,
                             file_info.file_name, file_info.path])


def delete_unused(project_dir, unused_files, skip_proj_reference=False):
    """删除未使用的资源，并（可选）清理 project.pbxproj 中的引用"""
    print(f"\n正在删除 {len(unused_files)} 个未使用的资源...")
    deleted, failed = delete_files(unused_files)
    print(colored(f"已删除 {len(deleted)} 个文件。", COLORS['GREEN']))
    for file_info, error in failed:
        print(colored(f"删除失败：{file_info.path}：{error}", COLORS['RED']))

    if deleted and not skip_proj_reference:
        project_file = find_project_file(project_dir)
        if project_file is None:
            print("警告：未能自动定位 .xcodeproj 文件，跳过引用清理。")
        elif delete_reference(project_file, deleted):
            print(f"已从 {project_file} 中移除已删除资源的引用。")
    return deleted, failed


# --- Entry Point ---

def main(argv=None):
    parser = argparse.ArgumentParser(
        description="查找 iOS 项目中未被引用的资源文件，可选删除并清理工程引用。",
        epilog="示例：python resource_analyzer.py /path/to/YourXcodeProject --exclude Pods Carthage --output json",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument(
        "project_dir",
        metavar="PROJECT_DIRECTORY",
        help="iOS项目根目录的路径。"
    )
    parser.add_argument(
        "--exclude",
        nargs="*",
        default=[],
        help="排除的路径（相对项目根目录或绝对路径）。"
    )
    parser.add_argument(
        "--resource-extensions",
        nargs="+",
        default=list(DEFAULT_RESOURCE_EXTENSIONS),
        help="视为资源的文件扩展名。"
    )
    parser.add_argument(
        "--file-extensions",
        nargs="+",
        default=list(DEFAULT_SEARCH_IN_EXTENSIONS),
        help="在这些扩展名的文件中搜索资源引用。"
    )
    parser.add_argument(
        "--rules-config",
        default=None,
        help="自定义搜索规则的 JSON 配置文件路径。"
    )
    parser.add_argument(
        "--output",
        choices=[OutputFormat.TEXT, OutputFormat.JSON, OutputFormat.CSV],
        default=OutputFormat.TEXT,
        help="输出格式。"
    )
    parser.add_argument(
        "--csv-file",
        default="unused_resources.csv",
        help="CSV 输出文件路径。"
    )
    parser.add_argument(
        "--similar",
        action="store_true",
        help="同时检测相似图片。"
    )
    parser.add_argument(
        "--similarity-threshold",
        type=int,
        default=SIMILARITY_THRESHOLD,
        help="图片相似度比较的汉明距离阈值，越小表示越相似。"
    )
    parser.add_argument(
        "--delete",
        action="store_true",
        help="删除找到的未使用资源。"
    )
    parser.add_argument(
        "--skip-proj-reference",
        action="store_true",
        help="删除后不修改 project.pbxproj。"
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=DEFAULT_MAX_WORKERS,
        help="并发读取文件的线程数。"
    )

    args = parser.parse_args(argv)

    analyzer = ResourceAnalyzer(
        args.project_dir,
        excluded_paths=args.exclude,
        resource_extensions=args.resource_extensions,
        search_in_extensions=args.file_extensions,
        search_rules_config_path=args.rules_config,
        max_workers=args.workers,
    )

    quiet = args.output == OutputFormat.JSON
    stdout = sys.stdout
    # JSON 模式下进度与警告改写到 stderr，stdout 只保留 JSON 文档
    diagnostics = contextlib.redirect_stdout(sys.stderr) if quiet else contextlib.nullcontext()

    with diagnostics:
        print(f"正在分析项目：{analyzer.project_dir}")
        print("=" * 30)

        try:
            inventory, used_names = analyzer.scan()
        except ResourceAnalyzerError as e:
            print(f"错误：{e}")
            return 1

        print(f"找到 {len(inventory)} 个资源标识符，{len(used_names)} 个潜在引用字符串。")

        unused_files = [FileInfo.from_path(p) for p in sorted(filter_unused(inventory, used_names))]

        similar_image_groups = None
        if args.similar:
            try:
                from image_similarity import find_similar_images
            except ImportError as e:
                print(e)
                return 1
            similar_image_groups = find_similar_images(inventory, args.similarity_threshold,
                                                       max_workers=args.workers)

        if args.output == OutputFormat.JSON:
            output_data = build_output_data(analyzer.project_dir, unused_files, similar_image_groups)
            print(json.dumps(output_data, indent=2, ensure_ascii=False), file=stdout)
        else:
            print_unused_report(unused_files)
            if similar_image_groups is not None:
                print_similar_report(similar_image_groups, args.similarity_threshold)
            if args.output == OutputFormat.CSV:
                try:
                    write_csv_report(args.csv_file, unused_files)
                    print(f"\nCSV 报告已生成：{os.path.abspath(args.csv_file)}")
                except OSError as e:
                    print(f"错误：无法写入 CSV 文件 {args.csv_file}：{e}")
                    return 1

        if args.delete and unused_files:
            delete_unused(analyzer.project_dir, unused_files, args.skip_proj_reference)

    return 0


if __name__ == "__main__":
    sys.exit(main())
