"""YAML 文件读写工具

配置加载与 `config init` 共用，统一 UTF-8 编码、空值保护和原子写入。
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml

from libsim.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

# 配置文件不应超过 1MB
MAX_YAML_SIZE = 1024 * 1024


def load_yaml(path: str | Path) -> dict[str, Any]:
    """读取 YAML 字典

    文件不存在、为空或顶层不是字典时返回空字典。

    异常:
        ConfigError: 文件过大或 YAML 语法错误
    """
    p = Path(path)
    if not p.exists():
        return {}

    size = p.stat().st_size
    if size > MAX_YAML_SIZE:
        raise ConfigError(f"YAML 文件过大: {p} ({size} 字节)")

    try:
        with open(p, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"解析 YAML 文件失败: {p}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning("%s 顶层不是字典 (实际类型: %s)，忽略", p, type(data).__name__)
        return {}
    return data


def save_yaml(path: str | Path, data: Any) -> None:
    """原子写入 YAML：先写同目录临时文件，再 rename 覆盖"""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    content = yaml.safe_dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False)
    fd, tmp = tempfile.mkstemp(dir=str(p.parent), suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp, p)
    except Exception:
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise
