from PIL import Image

from image_similarity import calculate_image_hash, find_similar_images


def save_gradient(path):
    path.parent.mkdir(parents=True, exist_ok=True)
    img = Image.new('L', (64, 64))
    img.putdata([(x * 4 + y) % 256 for y in range(64) for x in range(64)])
    img.save(path)
    return str(path)


def test_identical_images_under_different_keys_are_grouped(tmp_path):
    a = save_gradient(tmp_path / 'a.png')
    b = save_gradient(tmp_path / 'Copy.imageset' / 'copy@2x.png')
    inventory = {'a': {a}, 'Copy': {str(tmp_path / 'Copy.imageset')}}
    groups = find_similar_images(inventory, similarity_threshold=0)
    assert len(groups) == 1
    assert [img['path'] for img in groups[0]] == sorted([a, b])
    assert {img['key'] for img in groups[0]} == {'a', 'Copy'}


def test_scale_variants_of_one_resource_are_not_reported(tmp_path):
    one = save_gradient(tmp_path / 'icon.png')
    two = save_gradient(tmp_path / 'icon@2x.png')
    assert find_similar_images({'icon': {one, two}}) == []


def test_undecodable_images_are_skipped(tmp_path):
    broken = tmp_path / 'broken.png'
    broken.write_bytes(b'not an image')
    assert calculate_image_hash(str(broken)) is None
    assert find_similar_images({'broken': {str(broken)}}) == []
