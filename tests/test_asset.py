from pathlib import Path

import pytest

from releaser.asset import (
    ArchOsMatrixEntry,
    Asset,
    UploadedAsset,
    create_asset,
    generate_checksum_asset,
    matrix_entry,
)


def test_matrix_entry_name_combines_parts():
    entry = matrix_entry("x86_64", "apple-darwin", "app", "1.0.0", "tar.gz")
    assert entry.name == "app_1.0.0_x86_64_apple-darwin.tar.gz"
    assert entry.arch == "x86_64"
    assert entry.os == "apple-darwin"
    assert entry.asset is None


def test_set_asset_attaches_asset(tmp_path):
    entry = ArchOsMatrixEntry(arch="aarch64", os="linux", name="app.tar.gz")
    asset = create_asset("app.tar.gz", tmp_path / "app.tar.gz")
    entry.set_asset(asset)
    assert entry.asset is asset


def test_create_asset_converts_path():
    asset = create_asset("bin", "out/bin")
    assert asset.path == Path("out/bin")
    assert asset.name == "bin"
    assert asset.checksum is None


def test_add_checksum():
    asset = Asset("bin", Path("bin"))
    asset.add_checksum("abc")
    assert asset.checksum == "abc"


def test_uploaded_asset_holds_fields():
    uploaded = UploadedAsset(name="bin", url="u", checksum="c")
    assert (uploaded.name, uploaded.url, uploaded.checksum) == ("bin", "u", "c")


def test_generate_checksum_asset_writes_file(tmp_path):
    asset = Asset("app.tar.gz", tmp_path / "app.tar.gz", checksum="deadbeef")
    result = generate_checksum_asset(asset, tmp_path)
    assert result.name == "app.tar.gz.sha256"
    assert result.path == tmp_path / "app.tar.gz.sha256"
    assert result.checksum is None
    assert result.path.read_text() == "deadbeef  app.tar.gz"


def test_generate_checksum_asset_requires_checksum(tmp_path):
    asset = Asset("app.tar.gz", tmp_path / "app.tar.gz")
    with pytest.raises(ValueError, match="checksum is not available"):
        generate_checksum_asset(asset, tmp_path)
    assert not (tmp_path / "app.tar.gz.sha256").exists()