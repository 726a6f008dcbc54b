"""ロギング設定"""
import logging
import sys
from typing import Optional, TextIO

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# 通信ライブラリのDEBUGログはOverpass・Firestoreの応答本文まで出すため抑える
QUIET_LOGGERS = ("urllib3", "google", "httpx")

_logger_configured = False


def setup_logging(
    level: str = "INFO",
    enable_cloud_logging: bool = False,
    project_id: Optional[str] = None,
    stream: Optional[TextIO] = None,
    force: bool = False,
) -> None:
    """
    ルートロガーを設定（2回目以降の呼び出しは force=True の場合のみ反映）

    Args:
        level: ログレベル (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        enable_cloud_logging: Cloud Loggingを有効にするか
        project_id: GCPプロジェクトID (Cloud Logging有効時に必要)
        stream: 出力先（Noneの場合は標準出力）
        force: 設定済みでも再設定するか
    """
    global _logger_configured

    if _logger_configured and not force:
        return

    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(console_handler)

    if enable_cloud_logging:
        _attach_cloud_logging(root_logger, log_level, project_id)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    _logger_configured = True
    logging.info(f"Logging configured with level: {level.upper()}")


def _attach_cloud_logging(
    root_logger: logging.Logger, log_level: int, project_id: Optional[str]
) -> None:
    """Cloud Loggingのハンドラーを追加（失敗してもコンソール出力は続ける）"""
    try:
        from google.cloud import logging as cloud_logging

        client = cloud_logging.Client(project=project_id)
        cloud_handler = cloud_logging.handlers.CloudLoggingHandler(
            client, name="locability"
        )
        cloud_handler.setLevel(log_level)
        root_logger.addHandler(cloud_handler)

        logging.info(f"Cloud Logging enabled (project={project_id})")
    except Exception as e:
        logging.warning(f"Failed to enable Cloud Logging: {e}")


def get_logger(name: str) -> logging.Logger:
    """
    指定名のロガーを取得

    Args:
        name: ロガー名（通常は__name__を指定）
    """
    return logging.getLogger(name)
