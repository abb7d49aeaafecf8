"""Tests for repository URL parsing."""

import pytest

from git_eval.core.errors import InvalidRepositoryUrlError
from git_eval.source.domain.metadata import RepositoryRef
from git_eval.source.domain.url import parse_repository_url, repository_url


class TestParseRepositoryUrl:
    @pytest.mark.parametrize(
        "url",
        [
            "https://github.com/octo/hello",
            "https://github.com/octo/hello.git",
            "http://www.github.com/octo/hello",
            "https://github.com/octo/hello/tree/main/src",
            "github.com/octo/hello",
            "octo/hello",
            "  octo/hello.git  ",
        ],
    )
    def test_accepted_forms(self, url: str) -> None:
        assert parse_repository_url(url) == RepositoryRef(owner="octo", name="hello")

    @pytest.mark.parametrize(
        "url",
        [
            "",
            "hello",
            "https://gitlab.com/octo/hello",
            "https://github.com/octo",
            "octo/.git",
            "git@github.com:octo/hello.git",
        ],
    )
    def test_rejected_forms(self, url: str) -> None:
        with pytest.raises(InvalidRepositoryUrlError):
            parse_repository_url(url)

    def test_canonical_url(self) -> None:
        ref = RepositoryRef(owner="octo", name="hello")
        assert repository_url(ref) == "https://github.com/octo/hello"
