"""FieldSync -- 离线优先的现场任务同步引擎"""

__version__ = "0.1.0"
