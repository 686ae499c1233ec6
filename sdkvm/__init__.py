"""
sdkvm: SDK 版本解析与安装状态管理。
"""

__version__ = "0.1.0"
