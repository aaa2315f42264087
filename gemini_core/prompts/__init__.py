"""系统提示词加载工具。

提示词表是一个静态 JSON 文件，结构为：
{"systemPrompts": {"<promptType>": {"content": "...", ...}}}

默认读取包内的 prompts.json，可通过 settings.prompts_file 指向其他文件。
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

from gemini_core.domain.exceptions import ValidationError


PROMPTS_DIR = Path(__file__).resolve().parent
DEFAULT_PROMPTS_FILE = PROMPTS_DIR / "prompts.json"


def load_prompt_table(path: Optional[Union[str, Path]] = None) -> Dict[str, Dict[str, Any]]:
    """读取提示词表，返回 promptType -> {"content": ...} 的映射。"""

    fname = Path(path) if path else DEFAULT_PROMPTS_FILE
    try:
        data = json.loads(fname.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ValidationError(code="PROMPTS_READ_ERROR", message=str(e), path=str(fname))
    table = data.get("systemPrompts") if isinstance(data, dict) else None
    if not isinstance(table, dict):
        raise ValidationError(
            code="PROMPTS_READ_ERROR",
            message=f"{fname} has no 'systemPrompts' mapping",
            path=str(fname),
        )
    return table
