import logging
import os
from logging.handlers import RotatingFileHandler
import sys

# ログの出力先
# server.py (config.setup_environment) が TUNESHELF_LOG_DIR を設定する。未設定なら backend/logs (開発時)
if "TUNESHELF_LOG_DIR" in os.environ:
    LOG_DIR = os.environ["TUNESHELF_LOG_DIR"]
else:
    BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    LOG_DIR = os.path.join(BASE_DIR, "logs")

os.makedirs(LOG_DIR, exist_ok=True)

LOG_FILE_NAME = "tuneshelf.log"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

def _resolve_level() -> int:
    # TUNESHELF_LOG_LEVEL=DEBUG などで上書き可能。不正な値は INFO 扱い
    level = logging.getLevelName(os.environ.get("TUNESHELF_LOG_LEVEL", "INFO").upper())
    return level if isinstance(level, int) else logging.INFO

def get_logger(name: str):
    """
    ローテーションするログファイルとコンソールの両方に出力するロガーを返す。
    同じ名前で何度呼んでもハンドラは一度だけ登録される。
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    level = _resolve_level()
    logger.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT)

    # 1. ファイル (10MB ごとにローテーション、5 世代保持)
    try:
        file_handler = RotatingFileHandler(
            os.path.join(LOG_DIR, LOG_FILE_NAME),
            maxBytes=10*1024*1024,
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        logger.addHandler(file_handler)
    except Exception as e:
        # 読み取り専用ディレクトリ等。コンソール出力だけで続行する
        print(f"Failed to set up file logging: {e}", file=sys.stderr)

    # 2. コンソール (docker logs / ターミナル)
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)
    logger.addHandler(console_handler)

    return logger
