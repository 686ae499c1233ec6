"""
配置管理器模块。

从环境变量与 <sdkman_dir>/etc/config 中一次性组装不可变的 SdkConfig，
之后以参数形式注入解析器与路径管理器，其他模块不直接读取环境变量。
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from sdkvm.utils.logger import get_logger
from sdkvm.core.constants import (
    ALLOW_INSECURE_TLS_VAR,
    CANDIDATES_DIR,
    CANDIDATES_DIR_VAR,
    CONFIG_FILE,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_SDKMAN_HOME,
    ETC_DIR,
    LOG_DIR,
    PLATFORM_NAME_VAR,
    REQUEST_TIMEOUT_VAR,
    SDKMAN_CANDIDATES_API_AVAILABLE_VAR,
    SDKMAN_CANDIDATES_API_VAR,
    SDKMAN_DIR_ENV_VAR,
    VAR_DIR,
)

logger = get_logger()


class ConfigError(Exception):
    """配置错误异常。"""
    pass


class ConfigValidationError(ConfigError):
    """配置值无效或缺少必需变量。"""

    def __init__(self, variable: str, message: str):
        self.variable = variable
        super().__init__(f"{variable}: {message}")


class ConfigLoadError(ConfigError):
    """配置文件读取错误异常。"""
    pass


@dataclass(frozen=True)
class SdkConfig:
    """一次进程调用内共享的不可变配置。"""

    sdkman_dir: Path
    candidates_dir: Path
    candidates_api: Optional[str] = None
    api_available: bool = False
    platform: Optional[str] = None
    insecure_ssl: bool = False
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    @property
    def var_dir(self) -> Path:
        return self.sdkman_dir / VAR_DIR

    @property
    def log_dir(self) -> Path:
        return self.var_dir / LOG_DIR

    def require_online(self) -> None:
        """
        确认在线模式所需的变量齐全。

        抛出:
            ConfigValidationError: 缺少 catalog 地址或平台标识
        """
        if not self.candidates_api:
            raise ConfigValidationError(SDKMAN_CANDIDATES_API_VAR, "未设置 catalog 地址")
        if not self.platform:
            raise ConfigValidationError(PLATFORM_NAME_VAR, "未设置平台标识")


def _parse_bool(value: Optional[str]) -> bool:
    return value is not None and value.strip().lower() == "true"


def read_config_file(path: Path) -> dict[str, str]:
    """
    读取 key=value 格式的配置文件。

    空行与 # 开头的注释行会被忽略。

    参数:
        path: 配置文件路径

    返回:
        键值字典，文件不存在时返回空字典

    抛出:
        ConfigLoadError: 文件存在但无法读取
    """
    if not path.is_file():
        return {}

    try:
        content = path.read_text(encoding="utf-8")
    except (IOError, OSError) as e:
        raise ConfigLoadError(f"无法读取配置文件 {path}: {e}") from e

    values: dict[str, str] = {}
    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            logger.debug(f"忽略无效配置行: {line}")
            continue
        values[key.strip()] = value.strip()
    return values


class ConfigManager:
    """
    配置管理器类。

    环境变量优先，其次为 <sdkman_dir>/etc/config 中的同名键。
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None, home: Optional[Path] = None):
        """
        初始化配置管理器。

        参数:
            environ: 环境变量映射，默认为 os.environ
            home: 用户主目录，默认为 Path.home()
        """
        self._environ = os.environ if environ is None else environ
        self._home = home

    def infer_sdkman_dir(self) -> Path:
        """
        推断 SDK 根目录。

        返回:
            SDKMAN_DIR 指向的目录，未设置时为 ~/.sdkman
        """
        value = self._environ.get(SDKMAN_DIR_ENV_VAR)
        if value:
            return Path(value)
        home = self._home if self._home is not None else Path.home()
        return home / DEFAULT_SDKMAN_HOME

    def _lookup(self, key: str, file_values: Mapping[str, str]) -> Optional[str]:
        value = self._environ.get(key)
        if value is None:
            value = file_values.get(key)
        return value

    def load(self) -> SdkConfig:
        """
        组装配置。

        返回:
            SdkConfig 实例

        抛出:
            ConfigLoadError: etc/config 存在但无法读取
            ConfigValidationError: 超时时间不是正数
        """
        sdkman_dir = self.infer_sdkman_dir()
        file_values = read_config_file(sdkman_dir / ETC_DIR / CONFIG_FILE)

        candidates_dir_value = self._environ.get(CANDIDATES_DIR_VAR)
        candidates_dir = Path(candidates_dir_value) if candidates_dir_value else sdkman_dir / CANDIDATES_DIR

        api = self._environ.get(SDKMAN_CANDIDATES_API_VAR) or None
        if api:
            api = api.rstrip("/")

        timeout_value = self._lookup(REQUEST_TIMEOUT_VAR, file_values)
        timeout = DEFAULT_REQUEST_TIMEOUT
        if timeout_value:
            try:
                timeout = float(timeout_value)
            except ValueError as e:
                raise ConfigValidationError(REQUEST_TIMEOUT_VAR, f"不是有效的数字: {timeout_value}") from e
            if timeout <= 0:
                raise ConfigValidationError(REQUEST_TIMEOUT_VAR, f"必须大于 0: {timeout_value}")

        config = SdkConfig(
            sdkman_dir=sdkman_dir,
            candidates_dir=candidates_dir,
            candidates_api=api,
            api_available=_parse_bool(self._environ.get(SDKMAN_CANDIDATES_API_AVAILABLE_VAR)),
            platform=self._environ.get(PLATFORM_NAME_VAR) or None,
            insecure_ssl=_parse_bool(self._lookup(ALLOW_INSECURE_TLS_VAR, file_values)),
            request_timeout=timeout,
        )
        logger.debug(f"已加载配置: {config}")
        return config
