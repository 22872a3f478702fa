"""Tests for configuration loading."""

import os
import tempfile
from pathlib import Path

import pytest

from blockpress.config import load_config
from blockpress.errors import ConfigError


def test_load_config_defaults():
    """Test loading config with defaults when no file exists."""
    with tempfile.TemporaryDirectory() as tmpdir:
        orig_cwd = os.getcwd()
        try:
            os.chdir(tmpdir)
            config = load_config()
        finally:
            os.chdir(orig_cwd)

    assert config.ids.prefix == "blk"
    assert config.validation.blog.title_max == 200
    assert config.validation.blog.content_min == 100
    assert config.validation.guide.summary_max == 500
    assert config.validation.tags.max_count == 10


def test_load_config_from_file():
    """Test loading config from a file."""
    with tempfile.TemporaryDirectory() as tmpdir:
        config_path = Path(tmpdir) / "blockpress.toml"
        config_path.write_text("""
[ids]
prefix = "draft"

[validation.blog]
title_min = 15
title_max = 100
summary_min = 30
summary_max = 350
require_category = false

[validation.tags]
max_count = 5
""")

        config = load_config(config_path=config_path)

        assert config.ids.prefix == "draft"
        assert config.validation.blog.title_min == 15
        assert config.validation.blog.title_max == 100
        assert config.validation.blog.summary_min == 30
        assert config.validation.blog.require_category is False
        # untouched keys keep defaults
        assert config.validation.blog.content_min == 100
        assert config.validation.tags.max_count == 5
        assert config.validation.tags.min_length == 2


def test_load_config_search_cwd():
    """Test config search in current working directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        orig_cwd = os.getcwd()
        try:
            os.chdir(tmpdir)
            (Path(tmpdir) / "blockpress.toml").write_text("""
[validation.guide]
title_max = 120
""")

            config = load_config()
            assert config.validation.guide.title_max == 120
        finally:
            os.chdir(orig_cwd)


def test_load_config_missing_explicit_path():
    with pytest.raises(ConfigError):
        load_config(config_path=Path("/nonexistent/blockpress.toml"))


@pytest.mark.parametrize(
    "body",
    [
        '[validation.blog]\ntitle_max = "long"\n',
        "[validation.blog]\ntitle_max = true\n",
        "[validation.blog]\nrequire_category = 1\n",
        '[ids]\nprefix = 3\n',
        'validation = "strict"\n',
        "[validation\n",
    ],
)
def test_load_config_rejects_bad_values(body):
    with tempfile.TemporaryDirectory() as tmpdir:
        config_path = Path(tmpdir) / "blockpress.toml"
        config_path.write_text(body)
        with pytest.raises(ConfigError):
            load_config(config_path=config_path)
