"""
远程 catalog 客户端模块。

对 catalog 服务发起单次阻塞 GET 请求，查询候选的默认版本并校验版本。
不做重试，任何网络或 TLS 错误都作为 CatalogUnavailableError 抛出。
"""

from enum import Enum
from typing import Optional

import requests

from sdkvm.utils.logger import get_logger
from sdkvm.core.config_manager import ConfigValidationError, SdkConfig
from sdkvm.core.constants import SDKMAN_CANDIDATES_API_VAR
from sdkvm.core.interfaces import IRemoteCatalog

logger = get_logger()

VALID_RESPONSE = "valid"


class RemoteCatalogError(Exception):
    """远程 catalog 错误异常。"""
    pass


class CatalogUnavailableError(RemoteCatalogError):
    """catalog 请求失败（网络、TLS、HTTP 状态或空响应）。"""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"无法访问 {url}: {reason}")


class ValidationResult(Enum):
    """catalog 版本校验结果。"""

    VALID = "valid"
    INVALID = "invalid"

    @classmethod
    def parse(cls, body: str) -> "ValidationResult":
        """
        将校验接口的响应体解析为枚举值。

        只有去除首尾空白后与 "valid" 完全相同才视为有效。

        参数:
            body: 响应体文本

        返回:
            ValidationResult
        """
        if body.strip() == VALID_RESPONSE:
            return cls.VALID
        return cls.INVALID

    @property
    def is_valid(self) -> bool:
        return self is ValidationResult.VALID


class RemoteCatalog(IRemoteCatalog):
    """
    远程 catalog 客户端类。

    实现 IRemoteCatalog 抽象接口。
    """

    def __init__(self, config: SdkConfig, session: Optional[requests.Session] = None):
        """
        初始化 catalog 客户端。

        参数:
            config: 配置实例
            session: requests 会话，默认新建
        """
        self.config = config
        self.session = session if session is not None else requests.Session()

    @property
    def base_url(self) -> str:
        if not self.config.candidates_api:
            raise ConfigValidationError(SDKMAN_CANDIDATES_API_VAR, "未设置 catalog 地址")
        return self.config.candidates_api

    def get(self, url: str) -> str:
        """
        发起单次 GET 请求。

        参数:
            url: 完整请求地址

        返回:
            去除首尾空白的响应体

        抛出:
            CatalogUnavailableError: 请求失败
        """
        logger.debug(f"GET {url} (verify={not self.config.insecure_ssl})")
        try:
            response = self.session.get(
                url,
                verify=not self.config.insecure_ssl,
                timeout=self.config.request_timeout,
            )
            response.raise_for_status()
        except requests.exceptions.SSLError as e:
            logger.error(f"TLS 校验失败 {url}: {e}")
            raise CatalogUnavailableError(url, f"TLS 错误: {e}") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"请求 {url} 失败: {e}")
            raise CatalogUnavailableError(url, str(e)) from e

        return response.text.strip()

    def default_version(self, candidate: str) -> str:
        """
        查询候选的默认版本。

        参数:
            candidate: 候选名称

        返回:
            默认版本号

        抛出:
            CatalogUnavailableError: 请求失败或返回空版本
        """
        url = f"{self.base_url}/candidates/default/{candidate}"
        version = self.get(url)
        if not version:
            raise CatalogUnavailableError(url, "返回了空的默认版本")
        logger.info(f"{candidate} 的默认版本为 {version}")
        return version

    def validate_version(self, candidate: str, version: str, platform: str) -> ValidationResult:
        """
        在 catalog 中校验候选版本。

        参数:
            candidate: 候选名称
            version: 版本号
            platform: 平台标识

        返回:
            ValidationResult
        """
        url = f"{self.base_url}/candidates/validate/{candidate}/{version}/{platform}"
        result = ValidationResult.parse(self.get(url))
        logger.debug(f"{candidate} {version} ({platform}) 校验结果: {result.value}")
        return result
