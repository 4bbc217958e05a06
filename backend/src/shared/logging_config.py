# backend/src/shared/logging_config.py
"""
日志配置模块
统一管理3类日志：
1. extraction/ - 提取过程日志（策略链命中、被吞掉的 JSON-LD 解析失败，DEBUG 级别）
2. error/ - 错误日志（Infrastructure层直接调用）
3. performance/ - 性能监控日志（Infrastructure层直接调用）

文件命名格式：{日期}_{日志类型}.log
例如：2025-11-30_extraction.log
"""

import logging
import logging.config
import logging.handlers
from pathlib import Path
from datetime import datetime
from typing import Optional, Union

LOG_KINDS = ('extraction', 'error', 'performance')

# logger 名称 -> 日志类型
LOGGER_KINDS = {
    'domain.extraction': 'extraction',
    'infrastructure.error': 'error',
    'infrastructure.perf': 'performance',
}


def setup_logging(log_dir: Optional[Union[str, Path]] = None):
    """
    初始化并配置所有logger
    应在应用启动时调用：setup_logging()

    参数:
        log_dir: 日志根目录，缺省为 backend/logs/
    """
    if log_dir is None:
        backend_dir = Path(__file__).resolve().parent.parent.parent
        log_root_dir = backend_dir / 'logs'
    else:
        log_root_dir = Path(log_dir)

    directories = {kind: log_root_dir / kind for kind in LOG_KINDS}
    for directory in directories.values():
        directory.mkdir(parents=True, exist_ok=True)

    # 当前日期（用于初始文件名）
    today = datetime.now().strftime('%Y-%m-%d')

    LOGGING_CONFIG = {
        'version': 1,
        'disable_existing_loggers': False,

        # ==================== 格式化器 ====================
        'formatters': {
            'json': {
                '()': 'pythonjsonlogger.json.JsonFormatter',
                'format': '%(asctime)s %(name)s %(levelname)s %(message)s',
                'timestamp': True
            },
            'simple': {
                'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                'datefmt': '%Y-%m-%d %H:%M:%S'
            }
        },

        # ==================== 处理器 ====================
        'handlers': {
            'extraction_file': {
                'class': 'logging.handlers.TimedRotatingFileHandler',
                'filename': str(directories['extraction'] / f'{today}_extraction.log'),
                'when': 'MIDNIGHT',         # 每天午夜切换
                'interval': 1,              # 间隔1天
                'backupCount': 7,
                'encoding': 'utf-8',
                'formatter': 'json'
            },

            'error_file': {
                'class': 'logging.handlers.TimedRotatingFileHandler',
                'filename': str(directories['error'] / f'{today}_error.log'),
                'when': 'MIDNIGHT',
                'interval': 1,
                'backupCount': 30,          # 错误日志保留30天
                'encoding': 'utf-8',
                'formatter': 'json'
            },

            'performance_file': {
                'class': 'logging.handlers.TimedRotatingFileHandler',
                'filename': str(directories['performance'] / f'{today}_performance.log'),
                'when': 'MIDNIGHT',
                'interval': 1,
                'backupCount': 7,           # 性能日志保留7天
                'encoding': 'utf-8',
                'formatter': 'json'
            },

            'console': {
                'class': 'logging.StreamHandler',
                'formatter': 'simple',
                'level': 'INFO'
            }
        },

        # ==================== Logger配置 ====================
        'loggers': {
            'domain.extraction': {
                'handlers': ['extraction_file'],
                'level': 'DEBUG',
                'propagate': False
            },

            'infrastructure.error': {
                'handlers': ['error_file', 'console'],
                'level': 'ERROR',
                'propagate': False
            },

            'infrastructure.perf': {
                'handlers': ['performance_file'],
                'level': 'INFO',
                'propagate': False
            }
        },

        # ==================== 根Logger（兜底） ====================
        'root': {
            'level': 'INFO',
            'handlers': ['console']
        }
    }

    logging.config.dictConfig(LOGGING_CONFIG)

    # 自定义文件命名（实现日期前缀命名）
    _setup_custom_namer()

    logging.getLogger(__name__).info("日志系统初始化完成", extra={
        'log_root_dir': str(log_root_dir),
        'directories': {kind: str(directory) for kind, directory in directories.items()}
    })


def custom_namer(default_name: str) -> str:
    """
    将TimedRotatingFileHandler的默认命名转换为日期前缀格式

    /path/to/logs/error/2025-11-30_error.log.2025-11-29
    转换为：
    /path/to/logs/error/2025-11-29_error.log
    """
    path = Path(default_name)
    parts = path.name.split('.')

    # 格式：2025-11-30_error.log.2025-11-29
    if len(parts) == 3 and parts[1] == 'log' and '_' in parts[0]:
        log_type = parts[0].split('_', 1)[1]
        date_suffix = parts[2]
        return str(path.parent / f"{date_suffix}_{log_type}.log")

    return default_name


def _setup_custom_namer():
    """为所有TimedRotatingFileHandler设置自定义命名规则"""
    for logger_name in LOGGER_KINDS:
        for handler in logging.getLogger(logger_name).handlers:
            if isinstance(handler, logging.handlers.TimedRotatingFileHandler):
                handler.namer = custom_namer


# ==================== 便捷获取Logger的函数 ====================

def get_extraction_logger() -> logging.Logger:
    """获取提取过程日志Logger（extraction 包使用）"""
    return logging.getLogger('domain.extraction')


def get_error_logger() -> logging.Logger:
    """获取错误日志Logger（Infrastructure层使用）"""
    return logging.getLogger('infrastructure.error')


def get_performance_logger() -> logging.Logger:
    """获取性能监控日志Logger（Infrastructure层使用）"""
    return logging.getLogger('infrastructure.perf')
