"""CLI - 配置查看与初始化"""

from __future__ import annotations

from pathlib import Path

import click
import yaml

from libsim.cli import _load_config
from libsim.core.config import DEFAULT_CONFIG_PATH, SimulationConfig
from libsim.utils.yaml_io import save_yaml


def register(group: click.Group) -> None:
    group.add_command(config_group)


@click.group(name="config")
def config_group() -> None:
    """模拟配置管理"""


@config_group.command(name="show")
@click.option("--config", "-c", default=DEFAULT_CONFIG_PATH, help="配置文件路径")
def config_show(config: str) -> None:
    """显示生效的配置（文件 + 默认值）"""
    cfg = _load_config(config)
    click.echo(yaml.safe_dump(cfg.to_dict(), allow_unicode=True, sort_keys=False).rstrip())


@config_group.command(name="init")
@click.argument("path", default=DEFAULT_CONFIG_PATH)
@click.option("--force", is_flag=True, help="覆盖已存在的文件")
def config_init(path: str, force: bool) -> None:
    """把默认配置写入 YAML 文件"""
    if Path(path).exists() and not force:
        raise click.ClickException(f"文件已存在: {path}（使用 --force 覆盖）")
    data = SimulationConfig().to_dict()
    data.pop("extra")
    save_yaml(path, data)
    click.echo(f"配置已写入: {path}")
