"""Tests for loading and validating the YAML configuration."""

import textwrap

import pytest

from transmission_loader.core.traversal import traverse
from transmission_loader.exceptions import ConfigurationError
from transmission_loader.models.config import DEFAULT_RPC_URL, LoaderConfig
from transmission_loader.storage.config_manager import ConfigManager


def write_config(tmp_path, body: str):
    path = tmp_path / "config.yml"
    path.write_text(textwrap.dedent(body), encoding="utf-8")
    return path


def test_minimal_config_uses_defaults(tmp_path):
    path = write_config(
        tmp_path,
        """
        root:
          torrents: [a.torrent]
        """,
    )
    config = ConfigManager(path).load_config()
    assert config.url == DEFAULT_RPC_URL
    assert config.concurrency == 4
    assert not config.has_credentials
    assert config.root.torrents == ["a.torrent"]
    assert config.config_path == str(path)


def test_full_config(tmp_path):
    path = write_config(
        tmp_path,
        """
        url: https://seedbox.example:9091/transmission/rpc
        username: admin
        password: hunter2
        concurrency: 8
        root:
          children:
            movies:
              torrents:
                - a.torrent
            books:
              torrents: [b.torrent, c.torrent]
              children:
                scifi:
                  torrents:
        """,
    )
    config = ConfigManager(path).load_config()
    assert config.url == "https://seedbox.example:9091/transmission/rpc"
    assert config.has_credentials
    assert config.concurrency == 8
    assert config.root.children["books"].torrents == ["b.torrent", "c.torrent"]
    assert config.root.children["books"].children["scifi"].torrents == []


@pytest.mark.parametrize("value", [0, "0", None])
def test_zero_or_empty_concurrency_means_default(value):
    config = LoaderConfig(concurrency=value, root={})
    assert config.concurrency == 4


def test_quoted_zero_concurrency_in_yaml_means_default(tmp_path):
    path = write_config(
        tmp_path,
        """
        concurrency: "0"
        root: {}
        """,
    )
    assert ConfigManager(path).load_config().concurrency == 4


def test_group_names_that_look_like_scalars_stay_text(tmp_path):
    path = write_config(
        tmp_path,
        """
        root:
          children:
            2023:
              torrents: [a.torrent]
            no:
              torrents: [b.torrent]
            1.5:
              torrents: [c.torrent]
            on:
              torrents:
                - 1234
        """,
    )
    config = ConfigManager(path).load_config()
    jobs = traverse(config.root, "/d")
    assert {(job.source, job.download_dir) for job in jobs} == {
        ("a.torrent", "/d/2023"),
        ("b.torrent", "/d/no"),
        ("c.torrent", "/d/1.5"),
        ("1234", "/d/on"),
    }


def test_negative_concurrency_is_rejected():
    with pytest.raises(ValueError):
        LoaderConfig(concurrency=-1, root={})


@pytest.mark.parametrize(
    "credentials", [{"username": "admin"}, {"password": "hunter2"}]
)
def test_half_credentials_are_rejected(tmp_path, credentials):
    lines = "\n".join(f"{key}: {value}" for key, value in credentials.items())
    path = write_config(tmp_path, f"{lines}\nroot: {{}}\n")
    with pytest.raises(ConfigurationError, match="username"):
        ConfigManager(path).load_config()


@pytest.mark.parametrize(
    "url", ["not a url", "localhost:9091/transmission/rpc", "ftp://host/rpc"]
)
def test_unusable_url_is_rejected(url):
    with pytest.raises(ValueError):
        LoaderConfig(url=url, root={})


def test_missing_file(tmp_path):
    with pytest.raises(ConfigurationError, match="not found"):
        ConfigManager(tmp_path / "nope.yml").load_config()


def test_invalid_yaml(tmp_path):
    path = write_config(tmp_path, "root: [unclosed\n")
    with pytest.raises(ConfigurationError, match="parsing"):
        ConfigManager(path).load_config()


def test_non_mapping_document(tmp_path):
    path = write_config(tmp_path, "- just\n- a list\n")
    with pytest.raises(ConfigurationError, match="mapping"):
        ConfigManager(path).load_config()


def test_missing_root(tmp_path):
    path = write_config(tmp_path, "url: http://localhost:9091/transmission/rpc\n")
    with pytest.raises(ConfigurationError, match="root"):
        ConfigManager(path).load_config()


def test_mistyped_entry_key_is_rejected(tmp_path):
    path = write_config(
        tmp_path,
        """
        root:
          childern:
            movies:
              torrents: [a.torrent]
        """,
    )
    with pytest.raises(ConfigurationError, match="childern"):
        ConfigManager(path).load_config()


def test_cli_overrides_replace_file_values(tmp_path):
    path = write_config(
        tmp_path,
        """
        url: http://localhost:9091/transmission/rpc
        concurrency: 2
        root: {}
        """,
    )
    config = ConfigManager(path).load_config(
        {"url": "http://nas:9091/transmission/rpc", "concurrency": None}
    )
    assert config.url == "http://nas:9091/transmission/rpc"
    assert config.concurrency == 2
