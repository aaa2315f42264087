"""Gemini Core 顶层包。

该包封装与 Gemini 生成式语言 API 的流式对话交互，
包括配置加载、领域模型、HTTP 客户端适配、系统提示词表与流式转发服务。
"""

from gemini_core.services.gemini_service import GeminiService, create_gemini_service

__all__ = ["GeminiService", "create_gemini_service"]
