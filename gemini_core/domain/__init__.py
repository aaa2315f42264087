"""领域层模型与异常。

包含：
- models: Message / Part / ModelMessage / StreamHandlers / StreamChunk 等数据结构。
- exceptions: 业务异常类型定义。
"""
