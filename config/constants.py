import os

# 项目根目录（包含此配置包的文件夹）
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

DEFAULT_CONFIG_FILE = os.path.join(ROOT_DIR, "config", "mlog_config.json")

# 服务默认值
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3000
DEFAULT_LOG_LEVEL = "INFO"
LOG_FILE = "mlog_service.log"

# 上传限制 (与前置代理的 body 上限保持一致)
DEFAULT_MAX_UPLOAD_BYTES = 8 * 1024 * 1024

# Gemini 代理
DEFAULT_GEMINI_PROXY_TARGET = "https://generativelanguage.googleapis.com/"
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_GEMINI_TIMEOUT = 120.0
GEMINI_PROMPT_HEADER = "请分析以下Minecraft日志，给出主要错误原因和建议："
GEMINI_EMPTY_REPLY = "Gemini无返回内容"
GEMINI_FAILURE_PREFIX = "Gemini API 调用失败,请重试: "

# 核心分析的外部时间预算 (秒)
DEFAULT_ANALYSIS_TIMEOUT = 30.0

# 规则分类器未命中任何规则时的结果
FALLBACK_DIAGNOSIS = "未检测到已知的规则问题，建议使用 AI 深度分析。"

# 关键字拼接分隔符
KEYWORD_SEPARATOR = ", "
CUSTOM_KEYWORD_DELIMITER = "|"
