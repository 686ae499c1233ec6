"""
sdkvm 核心模块。

提供配置解析、候选注册表、远程 catalog、版本解析和安装路径管理功能。
"""

from .interfaces import IRemoteCatalog, IInstallPathManager, IVersionResolver
from .config_manager import ConfigManager, SdkConfig, ConfigError, ConfigValidationError, ConfigLoadError
from .candidate_registry import CandidateRegistry, CandidateRegistryError, MissingManifestError, UnknownCandidateError, load_known_candidates
from .remote_catalog import RemoteCatalog, RemoteCatalogError, CatalogUnavailableError, ValidationResult
from .path_manager import InstallPathManager, PathManagerError, NotInstalledError, AlreadyInstalledError, RefusedCurrentRemovalError, InvalidFolderError, RemovalError, LinkError
from .version_resolver import VersionResolver, ResolutionContext, VersionResolverError, UnresolvableVersionError, OfflineVersionRequiredError

__all__ = [
    "IRemoteCatalog", "IInstallPathManager", "IVersionResolver",
    "ConfigManager", "SdkConfig", "ConfigError", "ConfigValidationError", "ConfigLoadError",
    "CandidateRegistry", "CandidateRegistryError", "MissingManifestError", "UnknownCandidateError", "load_known_candidates",
    "RemoteCatalog", "RemoteCatalogError", "CatalogUnavailableError", "ValidationResult",
    "InstallPathManager", "PathManagerError", "NotInstalledError", "AlreadyInstalledError", "RefusedCurrentRemovalError", "InvalidFolderError", "RemovalError", "LinkError",
    "VersionResolver", "ResolutionContext", "VersionResolverError", "UnresolvableVersionError", "OfflineVersionRequiredError",
]
