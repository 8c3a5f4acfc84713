"""libsim 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group。
"""

import os

import click

from libsim import __version__
from libsim.core.config import SimulationConfig, init_config
from libsim.core.exceptions import LibSimError
from libsim.utils.logger import setup_logging


def _load_config(path: str) -> SimulationConfig:
    """加载配置文件，业务异常转换为 click 友好提示"""
    try:
        return init_config(path)
    except LibSimError as e:
        raise click.ClickException(f"[{e.code}] {e}") from e


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """libsim - 有限副本图书馆并发借阅模拟"""
    setup_logging(
        level=os.getenv("LIBSIM_LOG_LEVEL", "INFO"),
        json_output=os.getenv("LIBSIM_LOG_JSON", "") == "1",
    )


# 注册各领域子命令
from libsim.cli.cmd_run import register as _reg_run  # noqa: E402
from libsim.cli.cmd_config import register as _reg_config  # noqa: E402

_reg_run(main)
_reg_config(main)
