import pytest
from asset_uploader.errors import DisallowedExtension, FileTooLarge
from asset_uploader.services.policy import (
    check_extension,
    check_size,
    file_extension,
    is_extension_allowed,
)


@pytest.mark.parametrize("size,limit", [(0, 0), (1024, 1), (500, 1024), (2048 * 1024, 2048)])
def test_check_size_within_limit(size, limit):
    """Sizes up to and including the limit pass."""
    check_size(size, limit)


@pytest.mark.parametrize("size,limit", [(1, 0), (1025, 1), (2048 * 1024 + 1, 2048)])
def test_check_size_over_limit(size, limit):
    """Sizes above limit * 1024 bytes are rejected with the limit attached."""
    with pytest.raises(FileTooLarge) as exc_info:
        check_size(size, limit)

    assert exc_info.value.limit_kb == limit
    assert exc_info.value.size == size
    assert exc_info.value.message == f"[[error:file-too-big, {limit}]]"


@pytest.mark.parametrize("path,expected", [
    ("photo.png", ".png"),
    ("/tmp/upload/Photo.JPG", ".jpg"),
    ("archive.tar.gz", ".gz"),
    ("/tmp/upload/abc123", ""),
    (".bashrc", ""),
    ("photo.", "."),
    ("/tmp/dir.d/file", ""),
    ("https://example.com/img/avatar.PNG?size=large#top", ".png"),
    ("https://example.com/img/avatar", ""),
    ("HTTPS://cdn.x/a.png?v=1", ".png"),
    ("Http://cdn.x/a.JPG#frag", ".jpg"),
    ("/tmp/upload/odd#name.png", ".png"),
    ("", ""),
])
def test_file_extension(path, expected):
    assert file_extension(path) == expected


def test_empty_allow_list_permits_anything():
    assert is_extension_allowed("noextension", [])
    assert is_extension_allowed("photo.", [])
    check_extension("script.exe", [])


def test_allowed_extension_passes():
    check_extension("photo.PNG", [".png", ".jpg"])


@pytest.mark.parametrize("path", ["photo.gif", "photo", "photo.", "/tmp/upload/abc123"])
def test_disallowed_extension(path):
    """Missing, bare and unlisted extensions are rejected when a list is set."""
    with pytest.raises(DisallowedExtension) as exc_info:
        check_extension(path, [".png", ".jpg"])

    assert exc_info.value.allowed == [".png", ".jpg"]
    assert exc_info.value.message == "[[error:invalid-file-type, .png&#44; .jpg]]"


def test_bare_dot_rejected_even_if_listed():
    assert not is_extension_allowed("photo.", ["."])


def test_upper_case_url_scheme_ignores_query():
    check_extension("HTTPS://cdn.x/a.png?v=1", [".png"])
