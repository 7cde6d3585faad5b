from file_info import FileInfo
from resource_cleaner import delete_files, delete_reference, find_project_file


def test_delete_files_partitions_results(make_tree):
    root = make_tree({
        'a.png': 'x',
        'Icon.imageset/icon.png': 'x',
    })
    files = [
        FileInfo.from_path(root / 'a.png'),
        FileInfo.from_path(root / 'Icon.imageset'),
        FileInfo(path=str(root / 'gone.png'), size=0, file_name='gone.png'),
    ]
    deleted, failed = delete_files(files)
    assert [f.file_name for f in deleted] == ['a.png', 'Icon.imageset']
    assert [(f.file_name, type(e)) for f, e in failed] == [('gone.png', FileNotFoundError)]
    assert not (root / 'a.png').exists()
    assert not (root / 'Icon.imageset').exists()


def test_delete_reference_drops_matching_lines_only(make_tree):
    root = make_tree({
        'App.xcodeproj/project.pbxproj': (
            '// !$*UTF8*$!\n'
            '\t\tA1 /* logo.png in Resources */ = {isa = PBXBuildFile; };\n'
            '\t\tB2 /* banner.png in Resources */ = {isa = PBXBuildFile; };\n'
            '\t\tC3 /* logo.png */ = {isa = PBXFileReference; };\n'
            '}\n'
        ),
    })
    project_file = root / 'App.xcodeproj/project.pbxproj'
    deleted = [FileInfo(path=str(root / 'logo.png'), size=1, file_name='logo.png')]
    assert delete_reference(project_file, deleted)
    assert project_file.read_text() == (
        '// !$*UTF8*$!\n'
        '\t\tB2 /* banner.png in Resources */ = {isa = PBXBuildFile; };\n'
        '}\n'
    )


def test_delete_reference_missing_file_is_reported(tmp_path, capsys):
    assert not delete_reference(tmp_path / 'project.pbxproj', [])
    assert '警告' in capsys.readouterr().out


def test_find_project_file(make_tree):
    root = make_tree({'App.xcodeproj/project.pbxproj': '', 'Sources/a.swift': '', 'deep/er/': ''})
    assert find_project_file(root) == root / 'App.xcodeproj/project.pbxproj'
    assert find_project_file(root / 'Sources') == root / 'App.xcodeproj/project.pbxproj'
    assert find_project_file(root / 'deep' / 'er') is None
