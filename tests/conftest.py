"""测试公共夹具。"""

import os
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest

from sdkvm.core.config_manager import SdkConfig
from sdkvm.core.candidate_registry import CandidateRegistry
from sdkvm.core.interfaces import IRemoteCatalog
from sdkvm.core.path_manager import InstallPathManager
from sdkvm.core.remote_catalog import CatalogUnavailableError, ValidationResult
from sdkvm.core.version_resolver import VersionResolver

KNOWN_CANDIDATES = "java, kotlin,scala ,gradle"


class FakeCatalog(IRemoteCatalog):
    """内存中的 catalog，记录每次请求。"""

    def __init__(
        self,
        defaults: Optional[Dict[str, str]] = None,
        valid: Optional[Dict[Tuple[str, str], str]] = None,
        unavailable: bool = False,
    ):
        self.defaults = defaults or {}
        self.valid = valid or {}
        self.unavailable = unavailable
        self.calls: List[str] = []

    def get(self, url: str) -> str:
        self.calls.append(url)
        if self.unavailable:
            raise CatalogUnavailableError(url, "connection refused")
        return ""

    def default_version(self, candidate: str) -> str:
        self.get(f"default/{candidate}")
        return self.defaults[candidate].strip()

    def validate_version(self, candidate: str, version: str, platform: str) -> ValidationResult:
        self.get(f"validate/{candidate}/{version}/{platform}")
        return ValidationResult.parse(self.valid.get((candidate, version), "invalid"))


@pytest.fixture
def sdkman_dir(tmp_path: Path) -> Path:
    root = tmp_path / ".sdkman"
    (root / "var").mkdir(parents=True)
    (root / "var" / "candidates").write_text(KNOWN_CANDIDATES, encoding="utf-8")
    (root / "candidates").mkdir()
    return root


@pytest.fixture
def config(sdkman_dir: Path) -> SdkConfig:
    return SdkConfig(
        sdkman_dir=sdkman_dir,
        candidates_dir=sdkman_dir / "candidates",
        candidates_api="https://api.example.com/2",
        api_available=True,
        platform="linuxx64",
    )


@pytest.fixture
def path_manager(config: SdkConfig) -> InstallPathManager:
    return InstallPathManager(config.candidates_dir)


@pytest.fixture
def registry(sdkman_dir: Path) -> CandidateRegistry:
    return CandidateRegistry(sdkman_dir)


@pytest.fixture
def catalog() -> FakeCatalog:
    return FakeCatalog(
        defaults={"java": "17.0.1-tem\n"},
        valid={("java", "17.0.1-tem"): "valid"},
    )


@pytest.fixture
def resolver(catalog, path_manager, registry) -> VersionResolver:
    return VersionResolver(catalog, path_manager, registry)


def install(candidates_dir: Path, candidate: str, version: str) -> Path:
    """在 candidates 目录下创建一个已安装版本。"""
    path = candidates_dir / candidate / version
    (path / "bin").mkdir(parents=True)
    (path / "bin" / "tool").write_text("#!/bin/sh\n", encoding="utf-8")
    return path


def make_current(candidates_dir: Path, candidate: str, version: str) -> Path:
    """创建指向版本目录的相对 current 链接。"""
    link = candidates_dir / candidate / "current"
    os.symlink(version, link, target_is_directory=True)
    return link


def snapshot(root: Path) -> List[str]:
    """列出目录树（不跟随链接），用于断言文件系统未变化。"""
    entries = []
    for dirpath, dirnames, filenames in os.walk(root):
        for name in dirnames + filenames:
            full = os.path.join(dirpath, name)
            target = os.readlink(full) if os.path.islink(full) else ""
            entries.append(f"{os.path.relpath(full, root)}->{target}")
    return sorted(entries)
