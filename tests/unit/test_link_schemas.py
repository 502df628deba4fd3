import pytest
from pydantic import ValidationError

from linkfolio.schemas.link import (
    LinkCreate,
    LinkUpdate,
    validate_icon,
    validate_title,
    validate_url,
)


def test_validate_title_strips():
    assert validate_title("  Blog  ") == "Blog"


@pytest.mark.parametrize("title", ["", "   ", "x" * 101])
def test_validate_title_rejects(title):
    with pytest.raises(ValueError):
        validate_title(title)


def test_validate_title_accepts_max_length():
    assert validate_title("x" * 100) == "x" * 100


@pytest.mark.parametrize(
    "url",
    ["https://example.com", "http://example.com/path?q=1", "https://sub.example.co.uk/a#b"],
)
def test_validate_url_keeps_input(url):
    assert validate_url(f" {url} ") == url


@pytest.mark.parametrize(
    "url",
    ["", "example.com", "/relative/path", "ftp://example.com", "javascript:alert(1)", "https://"],
)
def test_validate_url_rejects(url):
    with pytest.raises(ValueError):
        validate_url(url)


def test_validate_icon():
    assert validate_icon(None) is None
    assert validate_icon("  ") is None
    assert validate_icon(" github ") == "github"
    with pytest.raises(ValueError):
        validate_icon("i" * 51)


def test_link_create_defaults():
    data = LinkCreate(title="Blog", url="https://blog.example.com")
    assert data.is_active is True
    assert data.icon is None
    assert data.metadata is None


def test_link_create_invalid_url():
    with pytest.raises(ValidationError):
        LinkCreate(title="Blog", url="blog")


def test_link_update_tracks_sent_fields():
    data = LinkUpdate(icon=None, is_active=False)
    assert data.model_dump(exclude_unset=True) == {"icon": None, "is_active": False}


def test_link_update_rejects_negative_position():
    with pytest.raises(ValidationError):
        LinkUpdate(position=-1)
