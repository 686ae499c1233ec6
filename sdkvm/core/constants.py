"""
常量定义模块。

安装目录布局与环境变量名称。
"""

CANDIDATES_DIR = "candidates"
CANDIDATES_FILE = "candidates"
CURRENT_DIR = "current"
DEFAULT_SDKMAN_HOME = ".sdkman"
VAR_DIR = "var"
ETC_DIR = "etc"
LOG_DIR = "log"
CONFIG_FILE = "config"

SDKMAN_DIR_ENV_VAR = "SDKMAN_DIR"
CANDIDATES_DIR_VAR = "SDKMAN_CANDIDATES_DIR"
SDKMAN_CANDIDATES_API_VAR = "SDKMAN_CANDIDATES_API"
SDKMAN_CANDIDATES_API_AVAILABLE_VAR = "SDKMAN_AVAILABLE"
PLATFORM_NAME_VAR = "SDKMAN_PLATFORM"
ALLOW_INSECURE_TLS_VAR = "sdkman_insecure_ssl"
REQUEST_TIMEOUT_VAR = "sdkman_curl_max_time"

DEFAULT_REQUEST_TIMEOUT = 10.0
