"""
输入验证模块。

在候选名称、版本号被拼接为安装路径之前进行验证和 sanitization。
"""

import os
import re
from pathlib import Path
from typing import Optional


class InputValidationError(Exception):
    """输入验证错误异常。"""
    pass


class InputValidator:
    """
    输入验证器类。

    候选名称与版本号都会成为 candidates 目录下的目录名，
    因此必须是单个路径段，不能包含分隔符或 ..。
    """

    CANDIDATE_NAME_PATTERN = re.compile(r'^[a-zA-Z0-9_-]+$')
    VERSION_PATTERN = re.compile(r'^[a-zA-Z0-9._+~-]+$')
    MAX_CANDIDATE_NAME_LENGTH = 50
    MAX_VERSION_LENGTH = 100
    MAX_PATH_LENGTH = 1024
    RESERVED_NAMES = frozenset({".", "..", "current"})

    @classmethod
    def validate_candidate_name(cls, candidate: str) -> bool:
        """
        验证候选名称的有效性。

        参数:
            candidate: 候选名称

        返回:
            验证通过返回 True，否则抛出 InputValidationError
        """
        if not candidate or not candidate.strip():
            raise InputValidationError("候选名称不能为空")

        candidate = candidate.strip()

        if len(candidate) > cls.MAX_CANDIDATE_NAME_LENGTH:
            raise InputValidationError(f"候选名称不能超过 {cls.MAX_CANDIDATE_NAME_LENGTH} 个字符")

        if not cls.CANDIDATE_NAME_PATTERN.match(candidate):
            raise InputValidationError("候选名称只能包含字母、数字、下划线和连字符")

        return True

    @classmethod
    def sanitize_candidate_name(cls, candidate: str) -> str:
        """
        sanitize 候选名称。

        参数:
            candidate: 原始候选名称

        返回:
            sanitized 后的候选名称
        """
        if not candidate:
            return ""
        return candidate.strip()

    @classmethod
    def validate_version_string(cls, version: str) -> bool:
        """
        验证版本号字符串的有效性。

        版本号是不透明字符串，这里只保证它能安全地作为目录名和 catalog URL 的
        路径段使用：只允许 URL 非保留字符（字母、数字、. _ ~ -）以及 +，
        : 等在部分平台的路径或 URL 中有特殊含义的字符会被拒绝。

        参数:
            version: 版本号字符串

        返回:
            验证通过返回 True，否则抛出 InputValidationError
        """
        if not version or not version.strip():
            raise InputValidationError("版本号不能为空")

        version = version.strip()

        if len(version) > cls.MAX_VERSION_LENGTH:
            raise InputValidationError(f"版本号不能超过 {cls.MAX_VERSION_LENGTH} 个字符")

        if version in cls.RESERVED_NAMES:
            raise InputValidationError(f"版本号不能为保留名称: {version}")

        if not cls.VERSION_PATTERN.match(version):
            raise InputValidationError(f"版本号格式无效: {version}")

        return True

    @classmethod
    def sanitize_version_string(cls, version: Optional[str]) -> Optional[str]:
        """
        sanitize 版本号字符串，空白版本视为未提供。

        参数:
            version: 原始版本号

        返回:
            sanitized 后的版本号，空白时返回 None
        """
        if version is None:
            return None
        version = version.strip()
        return version or None

    @classmethod
    def validate_folder(cls, folder: str) -> Path:
        """
        验证本地安装目录参数。

        参数:
            folder: 目录路径字符串

        返回:
            展开并转为绝对路径后的 Path

        抛出:
            InputValidationError: 路径过长或不是已存在的目录
        """
        if not folder or not folder.strip():
            raise InputValidationError("目录路径不能为空")

        if len(folder) > cls.MAX_PATH_LENGTH:
            raise InputValidationError(f"路径不能超过 {cls.MAX_PATH_LENGTH} 个字符")

        path = Path(os.path.expanduser(folder.strip())).absolute()
        if not path.is_dir():
            raise InputValidationError(f"不是有效的目录: {path}")

        return path
