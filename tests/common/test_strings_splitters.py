from encodex.common.strings.splitters import csv_to_list, split_top_level


def test_csv_to_list_none():
    assert csv_to_list(None) == []


def test_csv_to_list_list_input():
    assert csv_to_list([" a ", "b", "", "  "]) == ["a", "b"]


def test_csv_to_list_string_input():
    assert csv_to_list(" [libx264, [libx265 ,, ") == ["[libx264", "[libx265"]


def test_split_top_level_keeps_parenthesised_commas():
    specs = "h264 (High) (avc1 / 0x31637661), yuv420p(tv, bt709, progressive), 1280x720 [SAR 1:1 DAR 16:9], 30 fps"
    assert split_top_level(specs) == [
        "h264 (High) (avc1 / 0x31637661)",
        "yuv420p(tv, bt709, progressive)",
        "1280x720 [SAR 1:1 DAR 16:9]",
        "30 fps",
    ]


def test_split_top_level_drops_empty_tokens():
    assert split_top_level(" aac, , 44100 Hz ,") == ["aac", "44100 Hz"]
    assert split_top_level("") == []
