"""
安装路径管理模块。

将 (候选, 版本) 映射为 <root>/candidates/<candidate>/<version> 目录，
并维护每个候选唯一的 current 符号链接。
"""

import os
import shutil
from pathlib import Path
from typing import List, Optional

from sdkvm.utils.logger import get_logger
from sdkvm.utils.input_validator import InputValidator
from sdkvm.core.constants import CURRENT_DIR
from sdkvm.core.interfaces import IInstallPathManager

logger = get_logger()


class PathManagerError(Exception):
    """安装路径管理错误异常。"""
    pass


class NotInstalledError(PathManagerError):
    """版本目录不存在。"""

    def __init__(self, candidate: str, version: str):
        self.candidate = candidate
        self.version = version
        super().__init__(f"{candidate} {version} 未安装")


class AlreadyInstalledError(PathManagerError):
    """版本目录已存在。"""

    def __init__(self, candidate: str, version: str):
        self.candidate = candidate
        self.version = version
        super().__init__(f"{candidate} {version} 已安装")


class RefusedCurrentRemovalError(PathManagerError):
    """拒绝在未指定 force 时删除当前版本。"""

    def __init__(self, candidate: str, version: str):
        self.candidate = candidate
        self.version = version
        super().__init__(f"{candidate} {version} 是当前版本，不应删除")


class InvalidFolderError(PathManagerError):
    """本地安装目录不存在或不是目录。"""

    def __init__(self, folder: Path):
        self.folder = folder
        super().__init__(f"不是有效的目录: {folder}")


class RemovalError(PathManagerError):
    """删除版本目录或 current 链接失败。"""
    pass


class LinkError(PathManagerError):
    """创建或替换符号链接失败。"""
    pass


def _normalize(path: Path) -> Path:
    return Path(os.path.abspath(path))


class InstallPathManager(IInstallPathManager):
    """
    安装路径管理器类。

    实现 IInstallPathManager 抽象接口。所有修改操作都是同步的，
    不提供跨操作的锁或事务保证。
    """

    def __init__(self, candidates_dir: Path):
        """
        初始化安装路径管理器。

        参数:
            candidates_dir: <root>/candidates 目录
        """
        self.candidates_dir = candidates_dir

    def candidate_dir(self, candidate: str) -> Path:
        return self.candidates_dir / candidate

    def version_dir(self, candidate: str, version: str) -> Path:
        return self.candidate_dir(candidate) / version

    def current_link(self, candidate: str) -> Path:
        return self.candidate_dir(candidate) / CURRENT_DIR

    def _check(self, candidate: str, version: Optional[str] = None) -> None:
        InputValidator.validate_candidate_name(candidate)
        if version is not None:
            InputValidator.validate_version_string(version)

    def is_installed(self, candidate: str, version: str) -> bool:
        self._check(candidate, version)
        return self.version_dir(candidate, version).is_dir()

    def validate_installed_version(self, candidate: str, version: str) -> Path:
        """
        确认版本已安装。

        参数:
            candidate: 候选名称
            version: 版本号

        返回:
            版本目录路径

        抛出:
            NotInstalledError: 版本目录不存在或不是目录
        """
        if not self.is_installed(candidate, version):
            raise NotInstalledError(candidate, version)
        return self.version_dir(candidate, version)

    def resolve_current_link(self, candidate: str) -> Optional[Path]:
        """
        解析 current 链接。

        链接不存在时返回 None。链接损坏（无法读取或目标不存在）时记录警告
        并同样返回 None，不会中断本次调用。

        参数:
            candidate: 候选名称

        返回:
            链接指向的版本目录绝对路径，或 None
        """
        link = self.current_link(candidate)
        if not os.path.lexists(link):
            return None

        try:
            target = os.readlink(link)
        except OSError as e:
            logger.warning(f"{candidate} 的 current 链接已损坏，跳过: {e}")
            return None

        resolved = _normalize(self.candidate_dir(candidate) / target)
        if not resolved.is_dir():
            logger.warning(f"{candidate} 的 current 链接已损坏，跳过: 目标 {resolved} 不存在")
            return None
        return resolved

    def current_version(self, candidate: str) -> Optional[str]:
        """
        获取 current 链接指向的版本号。

        参数:
            candidate: 候选名称

        返回:
            版本号，未设置或链接损坏时返回 None
        """
        resolved = self.resolve_current_link(candidate)
        if resolved is None:
            return None
        if resolved.parent != _normalize(self.candidate_dir(candidate)):
            logger.warning(f"{candidate} 的 current 链接指向候选目录之外: {resolved}")
            return None
        return resolved.name

    def is_current(self, candidate: str, version: str) -> bool:
        resolved = self.resolve_current_link(candidate)
        return resolved is not None and resolved == _normalize(self.version_dir(candidate, version))

    def installed_versions(self, candidate: str) -> List[str]:
        """
        列出已安装的版本。

        参数:
            candidate: 候选名称

        返回:
            按名称排序的版本号列表，不包含 current
        """
        self._check(candidate)
        candidate_path = self.candidate_dir(candidate)
        if not candidate_path.is_dir():
            return []
        return sorted(
            entry.name
            for entry in candidate_path.iterdir()
            if entry.name != CURRENT_DIR and entry.is_dir()
        )

    def _remove_current_link(self, candidate: str) -> None:
        link = self.current_link(candidate)
        try:
            link.unlink()
        except OSError as e:
            logger.debug(f"无法直接删除 {link} ({e})，尝试递归删除")
            try:
                shutil.rmtree(link)
            except OSError as e2:
                raise RemovalError(f"无法删除 {candidate} 的 current 目录: {e2}") from e2
        logger.info(f"已删除 {candidate} 的 current 链接")

    def remove_version(self, candidate: str, version: str, force: bool = False) -> None:
        """
        删除已安装的版本。

        当前版本只有在 force 为 True 时才会被删除：先删除 current 链接，
        再递归删除版本目录。拒绝删除时不修改任何文件。

        参数:
            candidate: 候选名称
            version: 版本号
            force: 是否允许删除当前版本

        抛出:
            NotInstalledError: 版本未安装
            RefusedCurrentRemovalError: 版本为当前版本且未指定 force
            RemovalError: 删除过程中出现文件系统错误
        """
        version_path = self.validate_installed_version(candidate, version)

        if self.is_current(candidate, version):
            if not force:
                raise RefusedCurrentRemovalError(candidate, version)
            logger.warning(f"强制删除当前版本 {candidate} {version}")
            self._remove_current_link(candidate)

        try:
            if version_path.is_symlink():
                version_path.unlink()
            else:
                shutil.rmtree(version_path)
        except OSError as e:
            raise RemovalError(f"无法删除 {version_path}: {e}") from e
        logger.info(f"已删除 {candidate} {version}: {version_path}")

    def set_current(self, candidate: str, version: str) -> Path:
        """
        将已安装的版本设为当前版本。

        current 被替换为指向版本目录的相对符号链接。

        参数:
            candidate: 候选名称
            version: 版本号

        返回:
            current 链接路径

        抛出:
            NotInstalledError: 版本未安装
            LinkError: current 是普通目录或无法创建链接
        """
        self.validate_installed_version(candidate, version)
        link = self.current_link(candidate)

        if os.path.lexists(link):
            if not link.is_symlink():
                raise LinkError(f"{link} 不是符号链接，拒绝替换")
            try:
                link.unlink()
            except OSError as e:
                raise LinkError(f"无法替换 {link}: {e}") from e

        try:
            os.symlink(version, link, target_is_directory=True)
        except OSError as e:
            raise LinkError(f"无法创建 {link} -> {version}: {e}") from e

        logger.info(f"已将 {candidate} 的当前版本设为 {version}")
        return link

    def link_local_version(self, candidate: str, version: str, folder: Path) -> Path:
        """
        以符号链接的方式安装本地构建的版本。

        参数:
            candidate: 候选名称
            version: 版本号
            folder: 本地构建目录

        返回:
            新建的版本目录路径

        抛出:
            AlreadyInstalledError: 版本目录已存在
            InvalidFolderError: folder 不是目录
            LinkError: 无法创建链接
        """
        self._check(candidate, version)
        version_path = self.version_dir(candidate, version)
        if os.path.lexists(version_path):
            raise AlreadyInstalledError(candidate, version)

        folder = _normalize(folder)
        if not folder.is_dir():
            raise InvalidFolderError(folder)

        try:
            version_path.parent.mkdir(parents=True, exist_ok=True)
            os.symlink(folder, version_path, target_is_directory=True)
        except OSError as e:
            raise LinkError(f"无法创建 {version_path} -> {folder}: {e}") from e

        logger.info(f"已将本地目录 {folder} 安装为 {candidate} {version}")
        return version_path
