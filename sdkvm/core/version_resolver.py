"""
版本解析模块。

为一次调用确定唯一要操作的版本号：在线时结合 catalog 默认版本与校验结果，
离线时只接受本地可验证的版本，任何情况下都不会凭空构造版本号。
"""

from dataclasses import dataclass
from typing import Optional

from sdkvm.utils.logger import get_logger
from sdkvm.utils.input_validator import InputValidator
from sdkvm.core.candidate_registry import CandidateRegistry, UnknownCandidateError
from sdkvm.core.config_manager import SdkConfig
from sdkvm.core.interfaces import IInstallPathManager, IRemoteCatalog, IVersionResolver

logger = get_logger()


class VersionResolverError(Exception):
    """版本解析错误异常。"""
    pass


class UnresolvableVersionError(VersionResolverError):
    """无法确定可用的版本。"""

    def __init__(self, candidate: str, version: Optional[str], offline: bool = False):
        self.candidate = candidate
        self.version = version
        self.offline = offline
        super().__init__(f"{candidate} {version} 不可用")

    def guidance(self) -> str:
        """
        生成面向用户的多行提示。

        返回:
            提示文本
        """
        if self.offline:
            return (
                f"\n停止！离线模式下无法使用 {self.candidate} {self.version}。可能的原因:\n"
                f" * {self.version} 尚未安装在本地\n"
                f" * catalog 当前不可用\n"
                f"\n提示: 恢复网络后重试，或查看本地已安装的版本:\n"
                f"\n$ sdk list {self.candidate}"
            )
        return (
            f"\n停止！{self.candidate} {self.version} 不可用。可能的原因:\n"
            f" * {self.version} 是无效的版本\n"
            f" * {self.candidate} 的二进制文件与当前平台不兼容\n"
            f" * {self.candidate} 尚未发布该版本\n"
            f"\n提示: 查看当前平台所有可用版本:\n"
            f"\n$ sdk list {self.candidate}"
        )


class OfflineVersionRequiredError(UnresolvableVersionError):
    """离线模式下未指定版本。"""

    def __init__(self, candidate: str):
        self.candidate = candidate
        self.version = None
        self.offline = True
        VersionResolverError.__init__(self, f"离线模式下必须指定 {candidate} 的版本")

    def guidance(self) -> str:
        return (
            f"\n停止！离线模式下必须指定 {self.candidate} 的版本。\n"
            f"\n提示: 查看本地已安装的版本:\n"
            f"\n$ sdk list {self.candidate}"
        )


@dataclass(frozen=True)
class ResolutionContext:
    """单次调用的解析上下文，解析完成后即丢弃。"""

    candidate: str
    requested_version: Optional[str]
    target_folder: Optional[str]
    online: bool
    config: SdkConfig

    @classmethod
    def create(
        cls,
        config: SdkConfig,
        candidate: str,
        version: Optional[str] = None,
        folder: Optional[str] = None,
        online: Optional[bool] = None,
    ) -> "ResolutionContext":
        """
        构造解析上下文。

        参数:
            config: 配置实例
            candidate: 候选名称
            version: 用户指定的版本，可省略
            folder: 本地构建目录，可省略
            online: 是否在线，默认取 config.api_available

        返回:
            ResolutionContext 实例
        """
        return cls(
            candidate=InputValidator.sanitize_candidate_name(candidate),
            requested_version=InputValidator.sanitize_version_string(version),
            target_folder=folder or None,
            online=config.api_available if online is None else online,
            config=config,
        )

    def offline(self) -> "ResolutionContext":
        return ResolutionContext(
            candidate=self.candidate,
            requested_version=self.requested_version,
            target_folder=self.target_folder,
            online=False,
            config=self.config,
        )


class VersionResolver(IVersionResolver):
    """
    版本解析器类。

    实现 IVersionResolver 抽象接口。解析本身不修改文件系统，
    也不在两次调用之间保存状态。
    """

    def __init__(
        self,
        catalog: IRemoteCatalog,
        path_manager: IInstallPathManager,
        registry: CandidateRegistry,
    ):
        """
        初始化版本解析器。

        参数:
            catalog: 远程 catalog 客户端
            path_manager: 安装路径管理器
            registry: 候选注册表
        """
        self.catalog = catalog
        self.path_manager = path_manager
        self.registry = registry

    def resolve(self, ctx: ResolutionContext) -> str:
        """
        解析本次调用要操作的版本。

        参数:
            ctx: 解析上下文

        返回:
            版本号

        抛出:
            UnresolvableVersionError: 无法确定可用版本
            UnknownCandidateError: 离线时候选未知
            CatalogUnavailableError: 在线时 catalog 请求失败
        """
        InputValidator.validate_candidate_name(ctx.candidate)
        if ctx.online:
            return self._resolve_online(ctx)
        return self._resolve_offline(ctx)

    def _resolve_online(self, ctx: ResolutionContext) -> str:
        ctx.config.require_online()
        candidate = ctx.candidate

        version = ctx.requested_version
        if version is None:
            version = self.catalog.default_version(candidate)
        InputValidator.validate_version_string(version)

        result = self.catalog.validate_version(candidate, version, ctx.config.platform)
        if result.is_valid:
            return version

        if ctx.target_folder:
            logger.info(f"catalog 未确认 {candidate} {version}，使用本地目录 {ctx.target_folder}")
            return version

        if self.path_manager.version_dir(candidate, version).is_dir():
            logger.info(f"catalog 未确认 {candidate} {version}，使用本地已安装版本")
            return version

        raise UnresolvableVersionError(candidate, version)

    def _resolve_offline(self, ctx: ResolutionContext) -> str:
        candidate = ctx.candidate
        version = ctx.requested_version
        logger.debug(f"离线解析 {candidate} {version or ''}")

        if self.path_manager.candidate_dir(candidate).is_dir():
            if version is None:
                raise OfflineVersionRequiredError(candidate)

            InputValidator.validate_version_string(version)
            if ctx.target_folder or self.path_manager.version_dir(candidate, version).is_dir():
                return version
            raise UnresolvableVersionError(candidate, version, offline=True)

        if not self.registry.is_known(candidate):
            raise UnknownCandidateError(candidate)

        if version is None:
            raise OfflineVersionRequiredError(candidate)

        InputValidator.validate_version_string(version)
        if ctx.target_folder:
            return version
        raise UnresolvableVersionError(candidate, version, offline=True)
