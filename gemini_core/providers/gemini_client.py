"""Gemini Provider 适配器。

使用 REST 接口的流式端点（SSE）：
- URL: {base_url}/models/{model}:streamGenerateContent?alt=sse
- 认证: x-goog-api-key: <api_key>

对外形态与官方 SDK 保持一致：
GeminiClient -> get_generative_model() -> GenerativeModel -> start_chat() -> ChatSession
-> send_message_stream() -> StreamResult.stream（逐块产出 StreamChunk）。
"""

import json
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence

import httpx

from gemini_core.config.settings import settings
from gemini_core.domain.exceptions import ApiError, NetworkError, RateLimitError, ValidationError
from gemini_core.domain.models import (
    Candidate,
    GenerationConfig,
    Message,
    Part,
    StreamChunk,
    UsageMetadata,
)


class GeminiClient:
    """Gemini REST 客户端。

    构造时不校验密钥，缺失或无效的密钥只会在第一次请求时暴露。
    """

    name = "gemini"

    def __init__(self, api_key: Optional[str] = None, cfg=settings):
        self._settings = cfg
        self._api_key = api_key

    def get_generative_model(
        self,
        model: str,
        generation_config: Optional[GenerationConfig] = None,
    ) -> "GenerativeModel":
        return GenerativeModel(self, model, generation_config or GenerationConfig())

    # ---- 流式 ----

    def stream_generate_content(
        self,
        model: str,
        contents: Sequence[Dict[str, Any]],
        generation_config: GenerationConfig,
    ) -> Iterator[StreamChunk]:
        if not self._api_key:
            raise ValidationError(code="MISSING_API_KEY", message="GEMINI_API_KEY not set")
        payload: Dict[str, Any] = {"contents": list(contents)}
        gen_cfg = generation_config.to_payload()
        if gen_cfg:
            payload["generationConfig"] = gen_cfg
        return self._iter_stream(model, payload)

    def _iter_stream(self, model: str, payload: Dict[str, Any]) -> Iterator[StreamChunk]:
        base = getattr(self._settings, "gemini_base_url", None) or "https://generativelanguage.googleapis.com/v1beta"
        try:
            with httpx.Client(timeout=self._settings.http_timeout, trust_env=False) as client:
                with client.stream(
                    "POST",
                    f"{base}/models/{model}:streamGenerateContent",
                    params={"alt": "sse"},
                    json=payload,
                    headers={
                        "x-goog-api-key": self._api_key,
                        "Content-Type": "application/json",
                    },
                ) as resp:
                    if resp.status_code == 429:
                        raise RateLimitError(code="RATE_LIMIT", message="Gemini rate limit", http_status=429)
                    if resp.status_code >= 400:
                        resp.read()
                        raise ApiError(code="API_ERROR", message=resp.text, http_status=resp.status_code)
                    for line in resp.iter_lines():
                        if not line:
                            continue
                        data_str = line
                        if data_str.startswith("data:"):
                            data_str = data_str[5:].strip()
                        else:
                            data_str = data_str.strip()
                        if not data_str:
                            continue
                        try:
                            payload_chunk = json.loads(data_str)
                        except json.JSONDecodeError:
                            continue
                        if "error" in payload_chunk:
                            err = payload_chunk["error"] or {}
                            raise ApiError(
                                code="API_ERROR",
                                message=err.get("message") or data_str,
                                http_status=err.get("code") or 500,
                            )
                        yield self._parse_stream_chunk(payload_chunk, model)
        except httpx.RequestError as e:
            raise NetworkError(code="NETWORK_ERROR", message=str(e))

    # ---- 辅助方法 ----

    @staticmethod
    def _parse_stream_chunk(data: dict, model: str) -> StreamChunk:
        candidates: List[Candidate] = []
        for i, cand in enumerate(data.get("candidates") or []):
            content = cand.get("content") or {}
            candidates.append(
                Candidate(
                    index=cand.get("index", i),
                    content=Message.from_dict({"role": content.get("role") or "model", "parts": content.get("parts")}),
                    finish_reason=cand.get("finishReason"),
                )
            )
        usage_raw = data.get("usageMetadata") or {}
        usage = None
        if usage_raw:
            usage = UsageMetadata(
                prompt_tokens=usage_raw.get("promptTokenCount", 0),
                candidates_tokens=usage_raw.get("candidatesTokenCount", 0),
                total_tokens=usage_raw.get("totalTokenCount", 0),
            )
        feedback = data.get("promptFeedback") or {}
        return StreamChunk(
            model=model,
            candidates=candidates,
            usage=usage,
            block_reason=feedback.get("blockReason"),
            raw=data,
        )


class GenerativeModel:
    """绑定了模型名与生成参数的模型句柄，本身不持有可变状态。"""

    def __init__(self, client: GeminiClient, model_name: str, generation_config: GenerationConfig):
        self._client = client
        self.model_name = model_name
        self.generation_config = generation_config

    def start_chat(self, history: Optional[Sequence[Message]] = None) -> "ChatSession":
        return ChatSession(self, list(history or []))

    def stream_generate_content(self, contents: Sequence[Dict[str, Any]]) -> Iterator[StreamChunk]:
        return self._client.stream_generate_content(self.model_name, contents, self.generation_config)


class ChatSession:
    """一次聊天会话。

    history 只在本地保存；send_message_stream 只提交调用方传入的 contents。
    流被完整消费后，本次发送的内容与模型回复会追加到 history。
    """

    def __init__(self, model: GenerativeModel, history: List[Message]):
        self._model = model
        self.history = history

    def send_message_stream(self, contents: Sequence[Dict[str, Any]]) -> "StreamResult":
        chunks = self._model.stream_generate_content(contents)
        return StreamResult(self._record(contents, chunks))

    def _record(self, contents: Sequence[Dict[str, Any]], chunks: Iterable[StreamChunk]) -> Iterator[StreamChunk]:
        pieces: List[str] = []
        try:
            for chunk in chunks:
                yield chunk
                pieces.append(chunk.text())
        finally:
            close = getattr(chunks, "close", None)
            if close:
                close()
        self.history.extend(Message.from_dict(c) for c in contents)
        self.history.append(Message(role="model", parts=[Part(text="".join(pieces))]))


class StreamResult:
    """流式调用结果，stream 只能被消费一次。"""

    def __init__(self, stream: Iterator[StreamChunk]):
        self.stream = stream
