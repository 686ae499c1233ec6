"""
候选注册表模块。

从 <sdkman_dir>/var/candidates 读取已知候选列表并校验候选名称。
"""

from pathlib import Path
from typing import Optional

from sdkvm.utils.logger import get_logger
from sdkvm.core.constants import CANDIDATES_FILE, VAR_DIR

logger = get_logger()


class CandidateRegistryError(Exception):
    """候选注册表错误异常。"""
    pass


class MissingManifestError(CandidateRegistryError):
    """候选清单文件缺失、不可读或为空。"""

    def __init__(self, path: Path, reason: str = "文件不存在"):
        self.path = path
        self.reason = reason
        super().__init__(f"候选清单文件无效: {path} ({reason})")


class UnknownCandidateError(CandidateRegistryError):
    """候选名称不在已知列表中。"""

    def __init__(self, candidate: str):
        self.candidate = candidate
        super().__init__(f"{candidate} 不是有效的候选")


def read_file_content(path: Path) -> Optional[str]:
    """
    读取文件内容并去除首尾空白。

    参数:
        path: 文件路径

    返回:
        文件内容，不可读或为空时返回 None
    """
    try:
        content = path.read_text(encoding="utf-8")
    except (IOError, OSError, UnicodeDecodeError):
        return None
    content = content.strip()
    return content or None


def manifest_path(sdkman_dir: Path) -> Path:
    return sdkman_dir / VAR_DIR / CANDIDATES_FILE


def load_known_candidates(sdkman_dir: Path) -> frozenset[str]:
    """
    加载已知候选集合。

    参数:
        sdkman_dir: SDK 根目录

    返回:
        候选名称集合

    抛出:
        MissingManifestError: 清单文件不存在、不可读或为空
    """
    path = manifest_path(sdkman_dir)
    if not path.is_file():
        raise MissingManifestError(path)

    content = read_file_content(path)
    if content is None:
        raise MissingManifestError(path, "文件不可读或为空")

    candidates = frozenset(field.strip() for field in content.split(",") if field.strip())
    if not candidates:
        raise MissingManifestError(path, "未包含任何候选")

    logger.debug(f"从 {path} 加载了 {len(candidates)} 个候选")
    return candidates


class CandidateRegistry:
    """
    候选注册表类。

    清单在首次访问时加载，之后在本次调用内保持不变。
    """

    def __init__(self, sdkman_dir: Path):
        self.sdkman_dir = sdkman_dir
        self._candidates: Optional[frozenset[str]] = None

    @property
    def known_candidates(self) -> frozenset[str]:
        if self._candidates is None:
            self._candidates = load_known_candidates(self.sdkman_dir)
        return self._candidates

    def is_known(self, candidate: str) -> bool:
        return candidate in self.known_candidates

    def validate_candidate(self, candidate: str) -> str:
        """
        校验候选名称。

        参数:
            candidate: 候选名称

        返回:
            校验通过的候选名称

        抛出:
            UnknownCandidateError: 候选不在清单中
            MissingManifestError: 清单不可用
        """
        if not self.is_known(candidate):
            logger.debug(f"未知候选: {candidate}")
            raise UnknownCandidateError(candidate)
        return candidate
