"""对外 API 服务模块。

提供简化的函数接口供上层应用调用，内部使用一个惰性创建的默认 GeminiService。
"""

from typing import Any, List, Mapping, Optional, Sequence, Union

from gemini_core.domain.models import Message, ModelMessage, StreamHandlers
from gemini_core.infrastructure.logging.logger import logger
from gemini_core.services.gemini_service import GeminiService, create_gemini_service


_service: Optional[GeminiService] = None


def get_default_service() -> GeminiService:
    """获取默认的 GeminiService 实例（单例）。"""
    global _service
    if _service is None:
        _service = create_gemini_service()
    return _service


def reset_default_service() -> None:
    """丢弃默认实例，下次调用时按当前配置重新创建。"""
    global _service
    _service = None


def stream_conversation(
    messages: Sequence[Union[Message, Mapping[str, Any]]],
    prompt_type: Optional[str] = None,
    tools: Optional[List[Any]] = None,
    handlers: Optional[StreamHandlers] = None,
) -> ModelMessage:
    """使用默认服务流式执行一次对话。

    Returns:
        role 为 "model"、content 为完整回复文本的 ModelMessage

    Raises:
        各种 domain.exceptions 中定义的异常
    """
    try:
        return get_default_service().stream_conversation(
            messages,
            prompt_type=prompt_type,
            tools=tools,
            handlers=handlers,
        )
    except Exception as e:
        logger.error(f"Stream conversation failed: {e}", extra={"extra": {
            "prompt_type": prompt_type,
            "message_count": len(messages),
            "error": str(e),
        }})
        raise


def get_system_prompt(prompt_type: Optional[str]) -> str:
    return get_default_service().get_system_prompt(prompt_type)
