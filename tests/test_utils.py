"""Unit tests for stored-file helpers."""
import re

from api.shared.utils import format_bytes, generate_storage_path, sanitize_filename


def test_format_bytes_below_one_kilobyte():
    assert format_bytes(0) == "0 B"
    assert format_bytes(500) == "500 B"
    assert format_bytes(1023) == "1023 B"


def test_format_bytes_kilobytes():
    assert format_bytes(1024) == "1.00 KB"
    assert format_bytes(2048) == "2.00 KB"
    assert format_bytes(1536) == "1.50 KB"


def test_format_bytes_megabytes():
    assert format_bytes(1024 * 1024) == "1.00 MB"
    assert format_bytes(5_242_880) == "5.00 MB"


def test_sanitize_filename_replaces_each_character():
    assert sanitize_filename("my file!@#.pdf") == "my_file___.pdf"


def test_sanitize_filename_keeps_allowed_characters():
    assert sanitize_filename("Essay-Draft.v2.docx") == "Essay-Draft.v2.docx"


def test_sanitize_filename_neutralizes_path_separators():
    assert sanitize_filename("../secret/plan.txt") == ".._secret_plan.txt"


def test_generate_storage_path_with_timestamp():
    path = generate_storage_path("my file!@#.pdf", "task-conversations", 1700000000000)
    assert path == "task-conversations/1700000000000-my_file___.pdf"


def test_generate_storage_path_uses_millisecond_clock():
    path = generate_storage_path("notes.txt", "misc")
    assert re.fullmatch(r"misc/\d{13}-notes\.txt", path)
