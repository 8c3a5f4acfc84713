"""CLI - 运行模拟"""

from __future__ import annotations

import click

from libsim.cli import _load_config
from libsim.core.config import DEFAULT_CONFIG_PATH
from libsim.core.exceptions import LibSimError
from libsim.core.reporter import available_formats, format_summary
from libsim.core.simulation import Simulation


def register(group: click.Group) -> None:
    group.add_command(run)


@click.command()
@click.option("--config", "-c", default=DEFAULT_CONFIG_PATH, help="配置文件路径")
@click.option("--capacity", type=int, default=None, help="书本副本数")
@click.option("--actors", "-n", type=int, default=None, help="学生人数")
@click.option("--open-duration", type=float, default=None, help="开馆时长（秒）")
@click.option("--seed", type=int, default=None, help="随机种子，便于复现")
@click.option("--format", "-f", "fmt", default="text", type=click.Choice(available_formats()))
def run(
    config: str, capacity: int | None, actors: int | None,
    open_duration: float | None, seed: int | None, fmt: str,
) -> None:
    """运行一轮图书馆借阅模拟"""
    cfg = _load_config(config).replace(
        capacity=capacity, actors=actors, open_duration=open_duration, seed=seed,
    )
    try:
        summary = Simulation(cfg).run()
    except LibSimError as e:
        raise click.ClickException(f"[{e.code}] {e}") from e
    click.echo(format_summary(summary, fmt))
