"""
核心模块抽象接口定义。

定义 catalog 客户端、安装路径管理器和版本解析器的抽象接口。
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from sdkvm.core.remote_catalog import ValidationResult
    from sdkvm.core.version_resolver import ResolutionContext


class IRemoteCatalog(ABC):
    """远程 catalog 客户端抽象接口。"""

    @abstractmethod
    def get(self, url: str) -> str:
        """发起单次 GET 请求并返回去除空白的响应体。"""
        pass

    @abstractmethod
    def default_version(self, candidate: str) -> str:
        """查询候选的默认版本。"""
        pass

    @abstractmethod
    def validate_version(self, candidate: str, version: str, platform: str) -> "ValidationResult":
        """在 catalog 中校验候选版本。"""
        pass


class IInstallPathManager(ABC):
    """安装路径管理器抽象接口。"""

    @abstractmethod
    def candidate_dir(self, candidate: str) -> Path:
        """获取候选目录路径。"""
        pass

    @abstractmethod
    def version_dir(self, candidate: str, version: str) -> Path:
        """获取版本目录路径。"""
        pass

    @abstractmethod
    def validate_installed_version(self, candidate: str, version: str) -> Path:
        """确认版本已安装并返回其目录。"""
        pass

    @abstractmethod
    def resolve_current_link(self, candidate: str) -> Optional[Path]:
        """解析 current 链接指向的目录。"""
        pass

    @abstractmethod
    def current_version(self, candidate: str) -> Optional[str]:
        """获取 current 链接指向的版本号。"""
        pass

    @abstractmethod
    def is_current(self, candidate: str, version: str) -> bool:
        """判断版本是否为当前版本。"""
        pass

    @abstractmethod
    def remove_version(self, candidate: str, version: str, force: bool = False) -> None:
        """删除已安装的版本。"""
        pass

    @abstractmethod
    def set_current(self, candidate: str, version: str) -> Path:
        """将版本设为当前版本。"""
        pass

    @abstractmethod
    def installed_versions(self, candidate: str) -> List[str]:
        """列出已安装的版本。"""
        pass


class IVersionResolver(ABC):
    """版本解析器抽象接口。"""

    @abstractmethod
    def resolve(self, ctx: "ResolutionContext") -> str:
        """解析本次调用要操作的版本。"""
        pass
