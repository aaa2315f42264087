"""统一的消息与流式结果数据模型。

本模块定义了服务层与 Gemini 客户端之间共享的标准数据结构：

- Part / Message: 一条对话消息（role + 有序的内容片段 parts）。
- ModelMessage: 一次流式对话拼接完成后的最终结果（role 固定为 "model"）。
- StreamHandlers: 调用方提供的回调集合，每个成员都是可选的。
- StreamChunk: 流式响应中的一个增量块，text() 返回本块文本。

Message 的 JSON 形态与 Gemini REST API 的 contents 一致：
{"role": "user", "parts": [{"text": "..."}]}
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Literal, Mapping, Optional

from gemini_core.domain.exceptions import ResponseBlockedError


# Gemini 的 role 取值；"system" 仅用于本地拼装的历史首条消息
Role = Literal["system", "user", "model"]

# 候选被这些原因终止时，本块文本不可用
BLOCKED_FINISH_REASONS = frozenset({"SAFETY", "RECITATION", "LANGUAGE", "BLOCKLIST", "PROHIBITED_CONTENT", "SPII"})


@dataclass(frozen=True)
class Part:
    """消息中的一个内容片段。

    纯文本片段只有 text；其他片段（inline_data、file_data、functionCall 等）
    把调用方给出的原始字典保存在 data 中，to_payload 原样返回。
    """

    text: str = ""
    data: Optional[Mapping[str, Any]] = None

    @classmethod
    def from_payload(cls, raw: Any) -> "Part":
        if isinstance(raw, Part):
            return raw
        if isinstance(raw, str):
            return cls(text=raw)
        if set(raw) <= {"text"}:
            return cls(text=raw.get("text") or "")
        return cls(text=raw.get("text") or "", data=raw)

    def to_payload(self) -> Dict[str, Any]:
        if self.data is not None:
            return dict(self.data)
        return {"text": self.text}


@dataclass(frozen=True)
class Message:
    """一条对话消息。

    - role: 消息角色，如 user/model/system。
    - parts: 有序的内容片段列表。
    """

    role: str
    parts: List[Part] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Message":
        """从 {role, parts} 字典构造，parts 中的元素可以是 dict、Part 或纯字符串。"""

        parts = [Part.from_payload(raw) for raw in data.get("parts") or []]
        return cls(role=data.get("role") or "user", parts=parts)

    def to_payload(self) -> Dict[str, Any]:
        return {"role": self.role, "parts": [p.to_payload() for p in self.parts]}


@dataclass(frozen=True)
class ModelMessage:
    """流式对话的最终结果，content 为所有增量文本的拼接。"""

    content: str
    role: str = "model"


@dataclass
class StreamHandlers:
    """流式回调集合。

    - on_text: 每收到一个非空文本块时调用一次，顺序与流一致。
    - on_message: 流结束后调用一次，参数为最终 ModelMessage。
    - on_tool_use: 工具调用回调，目前仅作占位，永远不会被调用。

    任一成员缺省（None）时对应步骤直接跳过，不会报错。
    """

    on_text: Optional[Callable[[str], Any]] = None
    on_message: Optional[Callable[[ModelMessage], Any]] = None
    on_tool_use: Optional[Callable[..., Any]] = None


@dataclass(frozen=True)
class GenerationConfig:
    """模型生成参数，对应 REST 请求体中的 generationConfig。"""

    max_output_tokens: Optional[int] = None
    temperature: Optional[float] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        if self.max_output_tokens is not None:
            payload["maxOutputTokens"] = self.max_output_tokens
        if self.temperature is not None:
            payload["temperature"] = self.temperature
        return payload


@dataclass
class UsageMetadata:
    """Gemini 返回的 token 统计信息（usageMetadata）。"""

    prompt_tokens: int
    candidates_tokens: int
    total_tokens: int


@dataclass
class Candidate:
    """单个候选回答的增量（通常只有 index=0 的一条）。"""

    index: int
    content: Message
    finish_reason: Optional[str] = None


@dataclass
class StreamChunk:
    """流式响应中的一个增量块。

    - candidates: 本块包含的候选增量。
    - usage: 可选的 token 使用统计（一般出现在最后一块）。
    - block_reason: promptFeedback.blockReason，提示词被拦截时存在。
    - raw: 原始 JSON，用于调试或日志记录。
    """

    model: str
    candidates: List[Candidate]
    usage: Optional[UsageMetadata] = None
    block_reason: Optional[str] = None
    raw: Optional[dict] = None

    def text(self) -> str:
        """返回第一个候选的全部文本片段拼接，没有候选时返回空串。

        Raises:
            ResponseBlockedError: 提示词被拦截，或第一个候选因安全等原因被终止。
        """

        if not self.candidates:
            if self.block_reason:
                raise ResponseBlockedError(
                    code="RESPONSE_BLOCKED",
                    message=f"Prompt blocked: {self.block_reason}",
                    reason=self.block_reason,
                    model=self.model,
                )
            return ""
        first = self.candidates[0]
        if first.finish_reason in BLOCKED_FINISH_REASONS:
            raise ResponseBlockedError(
                code="RESPONSE_BLOCKED",
                message=f"Candidate was blocked due to {first.finish_reason}",
                reason=first.finish_reason,
                model=self.model,
            )
        return "".join(p.text for p in first.content.parts)
