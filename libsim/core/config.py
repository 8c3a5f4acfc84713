"""集中配置管理

模拟的全部可调参数集中在 SimulationConfig，支持从 YAML 文件加载 + 编程式覆盖。
默认值即一次标准演示：3 本副本、10 名学生、开馆 8 秒。
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field

from libsim.core.exceptions import ConfigError
from libsim.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "configs/libsim.yml"


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass
class SimulationConfig:
    """一轮模拟的配置（时间单位均为秒）"""

    # 图书馆
    capacity: int = 3
    open_duration: float = 8.0

    # 学生
    actors: int = 10
    actor_prefix: str = "Student"
    jitter_min: float = 0.5
    jitter_max: float = 2.5
    hold_min: float = 1.0
    hold_max: float = 4.0

    # 随机种子，None 表示每次运行不同
    seed: int | None = None

    # 放不到字段里的配置项
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_file(cls, path: str = DEFAULT_CONFIG_PATH) -> SimulationConfig:
        """从 YAML 文件加载配置，不存在则返回默认"""
        data = load_yaml(path)
        if not data:
            return cls()
        known = {f.name for f in dataclasses.fields(cls)} - {"extra"}
        matched = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        try:
            cfg = cls(**matched)
        except TypeError as e:
            raise ConfigError(f"配置文件字段无效: {path}: {e}") from e
        cfg.extra = extra
        return cfg

    def replace(self, **overrides: object) -> SimulationConfig:
        """返回覆盖了非 None 字段的新配置"""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return dataclasses.replace(self, **changes)

    def validate(self) -> None:
        """校验字段类型与取值范围

        异常:
            ConfigError: 任一字段不合法，details 中列出全部问题
        """
        problems: list[str] = []
        for name in ("capacity", "actors"):
            value = getattr(self, name)
            if not _is_int(value) or value < 1:
                problems.append(f"{name} 必须为正整数: {value!r}")

        durations = ("open_duration", "jitter_min", "jitter_max", "hold_min", "hold_max")
        bad = set()
        for name in durations:
            value = getattr(self, name)
            if not _is_number(value) or value < 0:
                problems.append(f"{name} 必须为非负秒数: {value!r}")
                bad.add(name)

        for name in ("jitter", "hold"):
            if {f"{name}_min", f"{name}_max"} & bad:
                continue
            lo, hi = getattr(self, f"{name}_min"), getattr(self, f"{name}_max")
            if hi < lo:
                problems.append(f"{name} 区间无效: [{lo}, {hi}]")

        if self.seed is not None and not _is_int(self.seed):
            problems.append(f"seed 必须为整数: {self.seed!r}")
        if problems:
            raise ConfigError("; ".join(problems), details=problems)

    @property
    def jitter(self) -> tuple[float, float]:
        return (self.jitter_min, self.jitter_max)

    @property
    def hold(self) -> tuple[float, float]:
        return (self.hold_min, self.hold_max)

    def to_dict(self) -> dict:
        return dataclasses.asdict(self)


# 全局单例，首次 import 时不加载文件；由 CLI 入口显式初始化
_current: SimulationConfig | None = None


def get_config() -> SimulationConfig:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = SimulationConfig()
    return _current


def init_config(path: str = DEFAULT_CONFIG_PATH) -> SimulationConfig:
    """从文件初始化全局配置"""
    global _current  # noqa: PLW0603
    _current = SimulationConfig.from_file(path)
    logger.info("配置已加载: %s", path)
    return _current
