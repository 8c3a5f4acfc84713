"""libsim 异常体系

池操作失败（闭馆 / 被中断）属于可预期结果：由学生线程就地捕获、记录并结束本次尝试，
从不传播到驱动器或其他学生。配置与输入校验错误在启动阶段抛出，由 CLI 层转换为
带错误码的提示。可用数量越界属于程序缺陷，由池的有界更新从结构上杜绝，没有对应异常。
"""

from __future__ import annotations


class LibSimError(Exception):
    """所有 libsim 异常的基类，code 供 CLI 输出错误码"""

    code: str = "UNKNOWN"


class PoolClosedError(LibSimError):
    """图书馆已关闭，拒绝借书 / 还书"""

    code = "POOL_CLOSED"

    def __init__(self, message: str, actor: str = "") -> None:
        super().__init__(message)
        self.actor = actor


class AcquireCancelledError(LibSimError):
    """等待借书期间被中断，与闭馆是两种不同的结束原因"""

    code = "CANCELLED"

    def __init__(self, message: str, actor: str = "") -> None:
        super().__init__(message)
        self.actor = actor


class ConfigError(LibSimError):
    """配置文件无法解析，或字段类型 / 取值不合法"""

    code = "CONFIG_ERROR"

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


class ValidationError(LibSimError):
    """调用参数不合法：未知输出格式、重复借阅、非正容量"""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []
