"""统一业务异常模型。

所有跨模块抛出的业务级错误都应该继承自 BusinessError，
便于调用方统一捕获与提示。服务层不做包装，客户端抛出什么，调用方就收到什么。
"""


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "MISSING_API_KEY"）。
        message: 用户可读错误信息。
        http_status: 映射到 HTTP 时可用的状态码，默认 400。
        extra: 其他补充字段（例如 trace_id、model 等）。
    """

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class NetworkError(BusinessError):
    """网络层错误，例如连接失败、超时等。"""


class ApiError(BusinessError):
    """Gemini API 返回非 2xx/429 错误时抛出。"""


class RateLimitError(BusinessError):
    """Gemini 限流错误（HTTP 429），不做重试，交由调用方处理。"""


class ValidationError(BusinessError):
    """参数、配置或提示词表校验失败。"""


class ResponseBlockedError(ApiError):
    """提示词被拦截（promptFeedback.blockReason）或候选因安全、复述等原因被终止。

    reason 字段保存 Gemini 给出的 blockReason / finishReason。
    """

    def __init__(self, code: str, message: str, reason: str, http_status: int = 400, **extra):
        self.reason = reason
        super().__init__(code, message, http_status=http_status, reason=reason, **extra)
