import itertools

from asset_uploader.services.keys import build_key


def fixed_token():
    return "token"


def test_empty_prefix_has_no_leading_slash():
    assert build_key("", "", "photo.png", fixed_token) == "token.png"


def test_prefix_gets_trailing_slash_and_loses_leading_slash():
    assert build_key("/uploads", "", "photo.png", fixed_token) == "uploads/token.png"


def test_prefix_already_ending_in_slash():
    """No double slash when the prefix already ends in a slash."""
    assert build_key("/uploads/", "", "photo.png", fixed_token) == "uploads/token.png"
    assert build_key("uploads/", "", "photo.png", fixed_token) == "uploads/token.png"


def test_only_one_leading_slash_stripped():
    assert build_key("//uploads", "", "a.txt", fixed_token) == "/uploads/token.txt"


def test_folder_is_appended():
    assert build_key("/uploads", "profile", "photo.jpg", fixed_token) == "uploads/profile/token.jpg"
    assert build_key("", "files", "photo.jpg", fixed_token) == "files/token.jpg"


def test_missing_extension_gives_bare_token():
    assert build_key("/uploads", "", "README", fixed_token) == "uploads/token"
    assert build_key("/uploads", "", "", fixed_token) == "uploads/token"


def test_extension_case_is_preserved():
    assert build_key("", "", "Photo.PNG", fixed_token) == "token.PNG"


def test_each_call_produces_a_new_key():
    first = build_key("/uploads", "files", "photo.png")
    second = build_key("/uploads", "files", "photo.png")

    assert first != second
    assert first.startswith("uploads/files/")
    assert first.endswith(".png")


def test_token_factory_is_called_per_key():
    counter = itertools.count(1)
    keys = [build_key("", "", "a.png", lambda: next(counter)) for _ in range(3)]
    assert keys == ["1.png", "2.png", "3.png"]
