"""Gemini 对话服务。

负责：按提示词类型选取系统提示词 -> 拼装历史 -> 发起一次流式调用
-> 逐块转发文本给 on_text -> 流结束后以完整文本调用 on_message。

注意：历史（系统提示词 + 全部消息）只用于开启会话，真正提交给模型的
只有最后一条消息的 parts。这是既有行为，保持原样。
"""

import logging
from contextlib import closing
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union
from uuid import uuid4

from gemini_core.config.settings import settings as default_settings
from gemini_core.domain.exceptions import ValidationError
from gemini_core.domain.models import GenerationConfig, Message, ModelMessage, Part, StreamHandlers
from gemini_core.infrastructure.logging.logger import logger
from gemini_core.prompts import load_prompt_table
from gemini_core.providers.base import ChatModel
from gemini_core.providers.gemini_client import GeminiClient


DEFAULT_TEMPERATURE = 0.7

MessageLike = Union[Message, Mapping[str, Any]]


class GeminiService:
    """绑定到一个已配置模型句柄的对话服务。

    实例之间、调用之间不共享可变状态，每次 stream_conversation 都会新建会话。
    """

    def __init__(
        self,
        model: ChatModel,
        prompts: Mapping[str, Mapping[str, Any]],
        default_prompt_type: str,
    ):
        self._model = model
        self._prompts = prompts
        self._default_prompt_type = default_prompt_type

    @property
    def model(self) -> ChatModel:
        return self._model

    def get_system_prompt(self, prompt_type: Optional[str]) -> str:
        """返回提示词类型对应的 content，找不到（或为空）时回退到默认类型。

        Raises:
            ValidationError: 默认类型也不在提示词表中（或其 content 为空）。
        """
        entry = self._prompts.get(prompt_type) if prompt_type else None
        content = (entry or {}).get("content")
        if content:
            return content
        default_content = (self._prompts.get(self._default_prompt_type) or {}).get("content")
        if not default_content:
            raise ValidationError(
                code="UNKNOWN_PROMPT_TYPE",
                message=f"Prompt type {prompt_type!r} and default {self._default_prompt_type!r} not found",
            )
        return default_content

    def stream_conversation(
        self,
        messages: Sequence[MessageLike],
        prompt_type: Optional[str] = None,
        tools: Optional[List[Any]] = None,
        handlers: Optional[StreamHandlers] = None,
    ) -> ModelMessage:
        """流式执行一次对话，返回最终的 ModelMessage。

        Args:
            messages: 对话历史，元素为 Message 或 {role, parts} 字典。
            prompt_type: 系统提示词类型，缺省时使用配置中的默认类型。
            tools: 工具定义，目前仅占位，不会产生任何效果。
            handlers: 流式回调集合，成员缺省时对应步骤跳过。

        Raises:
            ValidationError: messages 为空。
            其他异常（网络、鉴权、响应格式）由底层客户端抛出，原样传递给调用方。
        """
        if not messages:
            raise ValidationError(code="EMPTY_MESSAGES", message="messages must not be empty")
        handlers = handlers or StreamHandlers()
        msgs = [m if isinstance(m, Message) else Message.from_dict(m) for m in messages]
        log_ctx: Dict[str, Any] = {
            "trace_id": f"tr-{uuid4().hex}",
            "model": self._model.model_name,
        }

        system_instruction = self.get_system_prompt(prompt_type or self._default_prompt_type)

        chat_history = [Message(role="system", parts=[Part(text=system_instruction)]), *msgs]
        chat = self._model.start_chat(history=chat_history)

        self._log(
            logging.INFO,
            "Calling model (stream)",
            log_ctx,
            prompt_type=prompt_type or self._default_prompt_type,
            message_count=len(msgs),
        )
        result = chat.send_message_stream(
            contents=[{"role": "user", "parts": [p.to_payload() for p in msgs[-1].parts]}]
        )

        pieces: List[str] = []
        with closing(result.stream) as stream:
            for chunk in stream:
                chunk_text = chunk.text()
                if chunk_text and handlers.on_text:
                    handlers.on_text(chunk_text)
                pieces.append(chunk_text)

        final = ModelMessage(role="model", content="".join(pieces))
        self._log(
            logging.INFO,
            "Stream finished",
            log_ctx,
            chunk_count=len(pieces),
            content_length=len(final.content),
        )

        if handlers.on_message:
            handlers.on_message(final)

        # 工具调用尚未支持：tools / on_tool_use 只接收，不执行
        if tools or handlers.on_tool_use:
            self._log(logging.DEBUG, "Tool use not supported, ignored", log_ctx, tool_count=len(tools or []))

        return final

    @staticmethod
    def _log(level: int, message: str, log_ctx: Dict[str, Any], **fields: Any) -> None:
        payload = dict(log_ctx)
        payload.update(fields)
        logger.log(level, message, extra={"extra": payload})


def create_gemini_service(
    api_key: Optional[str] = None,
    *,
    settings=None,
    prompts: Optional[Mapping[str, Mapping[str, Any]]] = None,
    client: Optional[GeminiClient] = None,
) -> GeminiService:
    """创建 GeminiService。

    api_key 缺省时使用 settings.gemini_api_key（来自环境变量 GEMINI_API_KEY、
    .env 或 config.yaml），只在构造时解析一次。构造阶段不校验密钥。
    """
    cfg = settings or default_settings
    api = cfg.api
    if client is None:
        client = GeminiClient(api_key if api_key is not None else cfg.gemini_api_key, cfg)
    temperature = api.temperature if api.temperature is not None else DEFAULT_TEMPERATURE
    model = client.get_generative_model(
        api.default_model,
        GenerationConfig(max_output_tokens=api.max_tokens, temperature=temperature),
    )
    if prompts is None:
        prompts = load_prompt_table(getattr(cfg, "prompts_file", None))
    return GeminiService(model, prompts, api.default_prompt_type)
