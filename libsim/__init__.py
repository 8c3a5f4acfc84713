"""libsim - 有限副本图书馆并发借阅模拟"""

__version__ = "0.1.0"
