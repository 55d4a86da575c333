from slackmoji.reserved_names import ReservedNameSet


def test_bundled_standard_shortcodes():
    reserved = ReservedNameSet.get_instance()

    assert 'seal' in reserved
    assert 'female_elf' in reserved
    assert '+1' in reserved
    assert 'bogogogogogo' not in reserved
    assert 'my_custom_logo' not in reserved


def test_loaded_once():
    assert ReservedNameSet.get_instance() is ReservedNameSet.get_instance()


def test_from_file_ignores_comments(tmp_path):
    source = tmp_path / 'codes.txt'
    source.write_text('# header\nseal\n\n:smile:  # with colons\n')

    reserved = ReservedNameSet.from_file(str(source))

    assert len(reserved) == 2
    assert 'smile' in reserved
