"""Gemini Provider 集成层。

该包下的模块负责：
- 定义模型句柄与会话的抽象接口 (base)。
- 提供基于 httpx 的 Gemini REST 实现 (gemini_client)。
"""

from gemini_core.providers.base import ChatModel, ChatSessionLike
from gemini_core.providers.gemini_client import ChatSession, GeminiClient, GenerativeModel, StreamResult

__all__ = [
    "ChatModel",
    "ChatSession",
    "ChatSessionLike",
    "GeminiClient",
    "GenerativeModel",
    "StreamResult",
]
