#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# 基于感知哈希检测资源清单中的相似图片（同一资源的 @2x/@3x 变体不计入）

import os
from concurrent.futures import ThreadPoolExecutor

from file_info import path_size

# --- Dependencies Check ---
try:
    from PIL import Image
except ImportError as e:
    raise ImportError("错误：缺少 Pillow 库。请运行 'pip install Pillow' 或 'pip3 install Pillow' 进行安装。") from e

try:
    import imagehash
except ImportError as e:
    raise ImportError("错误：缺少 ImageHash 库。请运行 'pip install ImageHash' 或 'pip3 install ImageHash' 进行安装。") from e

# --- Image Similarity Configuration ---
HASH_ALGORITHM = imagehash.phash  # Algorithm to use (phash is good, dhash, ahash also available)
HASH_SIZE = 8                   # Hash size (higher means more precision but slower)
DEFAULT_SIMILARITY_THRESHOLD = 5  # Max Hamming distance

# Specific image extensions for hashing
IMAGE_EXTENSIONS = {'.png', '.jpg', '.jpeg', '.gif', '.webp', '.bmp', '.tiff'}


def calculate_image_hash(filepath):
    """Calculates the perceptual hash for an image file, ``None`` if it cannot be decoded."""
    try:
        with Image.open(filepath) as img:
            return HASH_ALGORITHM(img, hash_size=HASH_SIZE)
    except (OSError, ValueError, Image.DecompressionBombError):
        return None


def iter_inventory_images(inventory):
    """Yield ``(key, image path)``; asset set directories contribute their direct image children."""
    for key, paths in inventory.items():
        for path in sorted(paths):
            if os.path.isdir(path):
                try:
                    items = sorted(os.listdir(path))
                except OSError as e:
                    print(f"警告：无法访问资源集合内部 '{path}'：{e}")
                    continue
                for item in items:
                    item_path = os.path.join(path, item)
                    if (not item.startswith('.') and os.path.isfile(item_path)
                            and os.path.splitext(item)[1].lower() in IMAGE_EXTENSIONS):
                        yield key, item_path
            elif os.path.splitext(path)[1].lower() in IMAGE_EXTENSIONS:
                yield key, path


def find_similar_images(inventory, similarity_threshold=DEFAULT_SIMILARITY_THRESHOLD, max_workers=8):
    """Group inventory images whose hash distance to the group's first image is within the threshold.

    Groups made only of one resource's variants are dropped. Each group is a
    list of ``{'path', 'key', 'size', 'hash'}`` dicts sorted by path.
    """
    images = list(iter_inventory_images(inventory))
    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as executor:
        hashes = list(executor.map(lambda item: calculate_image_hash(item[1]), images))

    image_details = [
        {'path': path, 'key': key, 'hash': img_hash}
        for (key, path), img_hash in zip(images, hashes)
        if img_hash is not None
    ]

    similar_image_groups = []
    processed = set()
    for i, first in enumerate(image_details):
        if i in processed:
            continue
        current_group = [i]
        for j in range(i + 1, len(image_details)):
            if j in processed:
                continue
            if first['hash'] - image_details[j]['hash'] <= similarity_threshold:
                current_group.append(j)

        processed.update(current_group)
        if len(current_group) < 2:
            continue
        # All images from the same resource (e.g. @2x/@3x), not a real duplicate
        if len({image_details[k]['key'] for k in current_group}) == 1:
            continue

        group = []
        for k in current_group:
            details = image_details[k]
            group.append({
                'path': details['path'],
                'key': details['key'],
                'size': path_size(details['path']),
                'hash': str(details['hash']),
            })
        similar_image_groups.append(sorted(group, key=lambda d: d['path']))

    return similar_image_groups
