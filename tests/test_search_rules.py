import json

import pytest

from search_rules import (FileCategory, InvalidSearchRulesConfig, ObjCImageSearchRule,
                          PlainImageSearchRule, SearchRuleConfig, SearchRulesConfigNotFound,
                          SwiftImageSearchRule, XibImageSearchRule, load_search_rules_config,
                          search_rules_for)

EXTENSIONS = ['png', 'jpg']


@pytest.mark.parametrize('ext, category', [
    ('swift', FileCategory.SWIFT),
    ('m', FileCategory.OBJC),
    ('mm', FileCategory.OBJC),
    ('h', FileCategory.OBJC),
    ('storyboard', FileCategory.XIB),
    ('.xib', FileCategory.XIB),
    ('plist', FileCategory.PLIST),
    ('pbxproj', FileCategory.PBXPROJ),
    ('json', None),
])
def test_category_from_extension(ext, category):
    assert FileCategory.from_extension(ext) is category


def test_swift_rule_extracts_string_literals():
    content = 'let a = UIImage(named: "icon")\nlet b = String(format: "frame%d", i)'
    assert list(SwiftImageSearchRule(EXTENSIONS).search(content)) == ['icon', 'frame%d']


def test_objc_rule_yields_in_pattern_order_with_duplicates():
    content = '[UIImage imageNamed:@"logo"];'
    assert list(ObjCImageSearchRule(EXTENSIONS).search(content)) == ['logo', 'logo']


def test_xib_rule_reads_image_attributes():
    content = (
        '<imageView image="banner"/>\n'
        '<image name="background" width="10"/>\n'
        '<userDefinedRuntimeAttribute type="string" value="avatar"/>'
    )
    assert set(XibImageSearchRule().search(content)) == {'banner', 'background', 'avatar'}


def test_plist_rule_only_reads_shortcut_icons():
    content = (
        '<key>UIApplicationShortcutItemIconFile</key>\n\t<string>shortcut_icon</string>\n'
        '<key>Other</key><string>ignored</string>'
    )
    rules = search_rules_for(FileCategory.PLIST, EXTENSIONS)
    assert [n for r in rules for n in r.search(content)] == ['shortcut_icon']


def test_pbxproj_rule_reads_app_icon_names():
    content = (
        'ASSETCATALOG_COMPILER_APPICON_NAME = AppIcon;\n'
        'ASSETCATALOG_COMPILER_COMPLICATION_NAME = "Complication";\n'
    )
    rules = search_rules_for(FileCategory.PBXPROJ, EXTENSIONS)
    assert [n for r in rules for n in r.search(content)] == ['AppIcon', 'Complication']


def test_plain_rule_needs_a_resource_extension():
    content = '"hero.png" "not_a_resource" "img/Photo.JPG"'
    assert list(PlainImageSearchRule(EXTENSIONS).search(content)) == ['hero.png', 'img/Photo.JPG']
    assert list(PlainImageSearchRule([]).search(content)) == []


def test_unclassified_category_falls_back_to_plain_rule():
    rules = search_rules_for(None, EXTENSIONS)
    assert len(rules) == 1 and isinstance(rules[0], PlainImageSearchRule)


def test_custom_patterns_are_layered_on_customizable_rules():
    rules = search_rules_for(FileCategory.SWIFT, EXTENSIONS, [r'R\.image\.(\w+)'])
    content = 'R.image.settings()\nlet x = "literal"'
    assert set(rules[0].search(content)) == {'settings', 'literal'}


def test_custom_patterns_ignored_for_fixed_categories():
    rules = search_rules_for(FileCategory.XIB, EXTENSIONS, [r'custom="(.*?)"'])
    assert list(rules[0].search('<a custom="nope"/>')) == []


def test_pattern_without_group_yields_whole_match():
    rules = search_rules_for(FileCategory.OBJC, EXTENSIONS, [r'kIcon\w+'])
    assert 'kIconHome' in list(rules[0].search('NSString *s = kIconHome;'))


def test_load_config_rules_shape(tmp_path):
    path = tmp_path / 'rules.json'
    path.write_text(json.dumps({
        'rules': [
            {'fileType': 'swift', 'patterns': [r'R\.image\.(\w+)']},
            {'fileType': 'objc', 'patterns': []},
        ]
    }))
    config = load_search_rules_config(path)
    assert config.patterns_for(FileCategory.SWIFT) == [r'R\.image\.(\w+)']
    assert config.patterns_for(FileCategory.OBJC) == []
    assert config.patterns_for(FileCategory.XIB) is None


def test_load_config_mapping_shape(tmp_path):
    path = tmp_path / 'rules.json'
    path.write_text(json.dumps({'objc': [r'icon_(\w+)']}))
    assert load_search_rules_config(path).patterns_for(FileCategory.OBJC) == [r'icon_(\w+)']


def test_missing_config_file(tmp_path):
    with pytest.raises(SearchRulesConfigNotFound):
        load_search_rules_config(tmp_path / 'nope.json')


@pytest.mark.parametrize('data', [
    '{not json',
    json.dumps(['swift']),
    json.dumps({'kotlin': ['x']}),
    json.dumps({'swift': 'not-a-list'}),
    json.dumps({'swift': ['(unclosed']}),
    json.dumps({'rules': [{'patterns': ['x']}]}),
])
def test_invalid_config_documents(tmp_path, data):
    path = tmp_path / 'rules.json'
    path.write_text(data)
    with pytest.raises(InvalidSearchRulesConfig):
        load_search_rules_config(path)


def test_empty_config():
    assert SearchRuleConfig().patterns_for(FileCategory.SWIFT) is None
