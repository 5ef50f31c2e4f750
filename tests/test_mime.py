import pytest

from webserv.mime import MIME_TYPES, content_type, content_type_line, extension_for


@pytest.mark.parametrize(
    "path, expected",
    [
        ("www/index.html", "text/html"),
        ("style.css", "text/css"),
        ("photo.jpg", "image/jpeg"),
        ("archive.7z", "application/x-7z-compressed"),
        ("a.b.json", "application/json"),
    ],
)
def test_content_type_known(path, expected):
    assert content_type(path) == expected


@pytest.mark.parametrize("path", ["README", "file.unknown", "page.HTML"])
def test_content_type_defaults_to_plain_text(path):
    assert content_type(path) == "text/plain"


def test_content_type_line_format():
    assert content_type_line("x.png") == "Content-Type: image/png\n"


def test_extension_for_picks_first_in_sorted_order():
    assert extension_for("text/html") == ".htm"
    assert extension_for("image/jpeg") == ".jpeg"


def test_extension_for_unknown_type():
    assert extension_for("application/x-made-up") == ""


@pytest.mark.parametrize("mime_type", sorted(set(MIME_TYPES.values())))
def test_extension_round_trip(mime_type):
    assert content_type("upload" + extension_for(mime_type)) == mime_type