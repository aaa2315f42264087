"""模型客户端抽象接口。

服务层不直接依赖具体的 HTTP 实现，而是依赖此处的协议：

- ChatModel: 配置好模型名与生成参数的模型句柄，可开启一个聊天会话。
- ChatSessionLike: 持有历史记录的会话，负责发送消息并返回流式结果。

GeminiClient 产出的 GenerativeModel / ChatSession 满足这些协议，
测试中也可以用简单的假对象替换。
"""

from typing import Any, Dict, Generator, List, Protocol, Sequence

from gemini_core.domain.models import Message, StreamChunk


class StreamResultLike(Protocol):
    """一次流式调用的结果，stream 按顺序产出增量块，消费方负责 close()。"""

    stream: Generator[StreamChunk, None, None]


class ChatSessionLike(Protocol):
    history: List[Message]

    def send_message_stream(self, contents: Sequence[Dict[str, Any]]) -> StreamResultLike:
        ...


class ChatModel(Protocol):
    """已配置模型句柄的协议。

    实现者需要提供：
    - model_name: 实际调用的模型名，用于日志。
    - start_chat(history): 基于给定历史开启一个会话。
    """

    model_name: str

    def start_chat(self, history: Sequence[Message]) -> ChatSessionLike:
        ...
