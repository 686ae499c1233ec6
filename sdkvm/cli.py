"""
sdkvm 命令行接口模块。

只负责参数解析、输出与退出码，所有决策逻辑都在 core 模块中。
"""

import argparse
import json
import logging
import sys
from typing import Optional

import requests

from sdkvm import __version__
from sdkvm.core.candidate_registry import (
    CandidateRegistry,
    MissingManifestError,
    UnknownCandidateError,
    manifest_path,
)
from sdkvm.core.config_manager import ConfigError, ConfigManager, SdkConfig
from sdkvm.core.path_manager import (
    AlreadyInstalledError,
    InstallPathManager,
    NotInstalledError,
    PathManagerError,
    RefusedCurrentRemovalError,
)
from sdkvm.core.remote_catalog import CatalogUnavailableError, RemoteCatalog
from sdkvm.core.version_resolver import ResolutionContext, UnresolvableVersionError, VersionResolver
from sdkvm.utils.input_validator import InputValidationError, InputValidator
from sdkvm.utils.logger import get_logger, setup_logger

logger = get_logger()

EXIT_OK = 0
EXIT_USER_ERROR = 1
EXIT_ENVIRONMENT_ERROR = 2
EXIT_IO_ERROR = 3


class Services:
    """单次调用使用的核心组件集合。"""

    def __init__(self, config: SdkConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.registry = CandidateRegistry(config.sdkman_dir)
        self.path_manager = InstallPathManager(config.candidates_dir)
        self.catalog = RemoteCatalog(config, session=session)
        self.resolver = VersionResolver(self.catalog, self.path_manager, self.registry)


def create_parser() -> argparse.ArgumentParser:
    """
    创建并配置命令行参数解析器。

    返回:
        配置好的 ArgumentParser 实例
    """
    parser = argparse.ArgumentParser(
        prog="sdk",
        description="sdkvm - SDK 版本管理器",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
示例:
  sdk install java                 安装 java 的默认版本
  sdk install java 17.0.1-tem      安装 java 17.0.1-tem
  sdk install java dev ~/jdk-dev   将本地构建安装为 java dev
  sdk use java 17.0.1-tem          切换 java 当前版本
  sdk uninstall java 11.0.2 -f     删除 java 11.0.2（即使是当前版本）
  sdk list java                    列出已安装的 java 版本
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="启用详细输出",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="命令",
        description="可用的命令",
    )

    install_parser = subparsers.add_parser(
        "install",
        help="解析并安装候选版本",
    )
    install_parser.add_argument("candidate", help="候选名称")
    install_parser.add_argument("version", nargs="?", default=None, help="版本号（省略则使用默认版本）")
    install_parser.add_argument("folder", nargs="?", default=None, help="本地构建目录")

    uninstall_parser = subparsers.add_parser(
        "uninstall",
        help="删除已安装的版本",
    )
    uninstall_parser.add_argument("candidate", help="候选名称")
    uninstall_parser.add_argument("version", help="要删除的版本")
    uninstall_parser.add_argument(
        "--force",
        "-f",
        action="store_true",
        help="允许删除当前版本",
    )

    use_parser = subparsers.add_parser(
        "use",
        help="切换候选的当前版本",
    )
    use_parser.add_argument("candidate", help="候选名称")
    use_parser.add_argument("version", help="要切换到的版本")

    current_parser = subparsers.add_parser(
        "current",
        help="显示当前版本",
    )
    current_parser.add_argument("candidate", nargs="?", default=None, help="候选名称（省略则显示全部）")

    list_parser = subparsers.add_parser(
        "list",
        help="列出已安装的版本",
    )
    list_parser.add_argument("candidate", help="候选名称")
    list_parser.add_argument(
        "--format",
        "-F",
        choices=["json", "simple"],
        default="simple",
        help="输出格式",
    )

    return parser


def run_cli(
    args: argparse.Namespace,
    config: Optional[SdkConfig] = None,
    session: Optional[requests.Session] = None,
) -> int:
    """
    运行命令行接口。

    参数:
        args: 解析后的命令行参数
        config: 配置实例，默认从环境变量加载
        session: catalog 使用的 requests 会话，默认新建

    返回:
        退出码（0 表示成功）
    """
    level = logging.DEBUG if args.verbose else logging.WARNING

    if args.command is None:
        print("未指定命令。使用 --help 查看帮助信息。")
        return EXIT_USER_ERROR

    try:
        if config is None:
            config = ConfigManager().load()
    except ConfigError as e:
        setup_logger(level=level)
        print(f"配置错误: {e}", file=sys.stderr)
        return EXIT_ENVIRONMENT_ERROR

    # 清单存在时才写日志文件
    log_dir = config.log_dir if manifest_path(config.sdkman_dir).is_file() else None
    setup_logger(level=level, log_dir=log_dir)

    command_handlers = {
        "install": handle_install,
        "uninstall": handle_uninstall,
        "use": handle_use,
        "current": handle_current,
        "list": handle_list,
    }

    handler = command_handlers.get(args.command)
    if handler is None:
        print(f"未知命令: {args.command}")
        return EXIT_USER_ERROR

    try:
        return handler(args, Services(config, session=session))
    except UnknownCandidateError as e:
        print(f"{e.candidate} 不是有效的候选。", file=sys.stderr)
        return EXIT_USER_ERROR
    except UnresolvableVersionError as e:
        print(e.guidance(), file=sys.stderr)
        return EXIT_USER_ERROR
    except NotInstalledError as e:
        print(f"{e.candidate} {e.version} 未安装在本系统中。", file=sys.stderr)
        return EXIT_USER_ERROR
    except RefusedCurrentRemovalError as e:
        print(f"\n{e.candidate} {e.version} 是当前版本，不应删除。", file=sys.stderr)
        print("\n\n可使用 --force 覆盖，但该候选将不可用！")
        return EXIT_USER_ERROR
    except AlreadyInstalledError as e:
        print(f"{e.candidate} {e.version} 已安装。", file=sys.stderr)
        return EXIT_USER_ERROR
    except InputValidationError as e:
        print(f"输入无效: {e}", file=sys.stderr)
        return EXIT_USER_ERROR
    except (MissingManifestError, ConfigError, CatalogUnavailableError) as e:
        logger.error(str(e))
        print(f"环境错误: {e}", file=sys.stderr)
        return EXIT_ENVIRONMENT_ERROR
    except PathManagerError as e:
        logger.error(str(e))
        print(f"文件系统错误: {e}", file=sys.stderr)
        return EXIT_IO_ERROR


def resolve_version(services: Services, ctx: ResolutionContext) -> str:
    """
    解析版本，catalog 不可用时降级为离线解析。

    参数:
        services: 核心组件集合
        ctx: 解析上下文

    返回:
        版本号
    """
    try:
        return services.resolver.resolve(ctx)
    except CatalogUnavailableError as e:
        if not ctx.online:
            raise
        logger.warning(f"catalog 不可用，改用离线模式: {e}")
        return services.resolver.resolve(ctx.offline())


def handle_install(args: argparse.Namespace, services: Services) -> int:
    """
    处理 install 命令：解析版本，指定目录时将其安装为本地版本。

    参数:
        args: 解析后的命令行参数
        services: 核心组件集合

    返回:
        退出码
    """
    candidate = services.registry.validate_candidate(args.candidate)
    ctx = ResolutionContext.create(services.config, candidate, args.version, args.folder)
    version = resolve_version(services, ctx)
    path_manager = services.path_manager

    if args.folder:
        folder = InputValidator.validate_folder(args.folder)
        path_manager.link_local_version(candidate, version, folder)
        print(f"已安装本地版本 {candidate} {version}: {folder}")
        if path_manager.current_version(candidate) is None:
            path_manager.set_current(candidate, version)
            print(f"已将 {candidate} {version} 设为当前版本。")
        return EXIT_OK

    if path_manager.is_installed(candidate, version):
        print(f"{candidate} {version} 已安装。")
        return EXIT_OK

    print(f"已解析 {candidate} {version}。")
    return EXIT_OK


def handle_uninstall(args: argparse.Namespace, services: Services) -> int:
    """
    处理 uninstall 命令：删除已安装的版本。

    参数:
        args: 解析后的命令行参数
        services: 核心组件集合

    返回:
        退出码
    """
    candidate = services.registry.validate_candidate(args.candidate)
    version = args.version.strip()
    services.path_manager.remove_version(candidate, version, force=args.force)
    print(f"已删除 {candidate} {version}。")
    return EXIT_OK


def handle_use(args: argparse.Namespace, services: Services) -> int:
    """
    处理 use 命令：切换当前版本。

    参数:
        args: 解析后的命令行参数
        services: 核心组件集合

    返回:
        退出码
    """
    candidate = services.registry.validate_candidate(args.candidate)
    version = args.version.strip()
    services.path_manager.set_current(candidate, version)
    print(f"正在使用 {candidate} {version}。")
    return EXIT_OK


def handle_current(args: argparse.Namespace, services: Services) -> int:
    """
    处理 current 命令：显示一个或全部候选的当前版本。

    参数:
        args: 解析后的命令行参数
        services: 核心组件集合

    返回:
        退出码
    """
    path_manager = services.path_manager

    if args.candidate:
        candidate = services.registry.validate_candidate(args.candidate)
        current = path_manager.current_version(candidate)
        if current is None:
            print(f"{candidate} 未设置当前版本")
            return EXIT_USER_ERROR
        print(f"正在使用 {candidate} {current}")
        return EXIT_OK

    found = False
    for candidate in sorted(services.registry.known_candidates):
        current = path_manager.current_version(candidate)
        if current:
            print(f"{candidate}: {current}")
            found = True
    if not found:
        print("没有正在使用的候选")
    return EXIT_OK


def handle_list(args: argparse.Namespace, services: Services) -> int:
    """
    处理 list 命令：列出已安装的版本，* 标记当前版本。

    参数:
        args: 解析后的命令行参数
        services: 核心组件集合

    返回:
        退出码
    """
    candidate = services.registry.validate_candidate(args.candidate)
    path_manager = services.path_manager
    versions = path_manager.installed_versions(candidate)
    current = path_manager.current_version(candidate)

    if args.format == "json":
        result = {
            "candidate": candidate,
            "current": current,
            "versions": versions,
        }
        print(json.dumps(result, indent=2))
        return EXIT_OK

    if not versions:
        print(f"未找到 {candidate} 的已安装版本")
        return EXIT_OK

    print(f"{candidate} 已安装版本:")
    for version in versions:
        marker = " *" if version == current else "  "
        print(f"{marker} {version}")
    print(f"\n当前版本: {current or '未设置'}")
    return EXIT_OK
