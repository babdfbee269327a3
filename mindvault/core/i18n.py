from __future__ import annotations

from pathlib import Path
from typing import Dict

import yaml

from .models import ResourceType


class I18n:
    """Simple YAML-backed i18n loader with fallback to English.

    Uses a path relative to this file by default, so it does not depend
    on the current working directory of the running process.
    """

    def __init__(self, lang: str, base_dir: Path | None = None) -> None:
        self.lang = (lang or 'en').lower()
        if base_dir is None:
            # mindvault/core/i18n.py -> project_root/config/i18n
            project_root = Path(__file__).resolve().parents[2]
            self.base_dir = project_root / 'config' / 'i18n'
        else:
            self.base_dir = base_dir
        self._cache: Dict[str, str] = {}
        self._fallback: Dict[str, str] = {}
        self._load()

    def _load(self) -> None:
        def _read(path: Path) -> Dict[str, str]:
            if not path.exists():
                return {}
            with path.open('r', encoding='utf-8') as fh:
                data = yaml.safe_load(fh) or {}
                if not isinstance(data, dict):
                    return {}
                return {str(k): str(v) for k, v in data.items()}

        self._fallback = _read(self.base_dir / 'messages.en.yaml')
        if self.lang == 'en':
            self._cache = self._fallback
        else:
            self._cache = _read(self.base_dir / f'messages.{self.lang}.yaml')

    def t(self, key: str) -> str:
        return self._cache.get(key) or self._fallback.get(key) or key


# Built-in copies of the YAML catalogues, used when the files are missing
# from the runtime environment (e.g. a non-editable install).
MESSAGES: Dict[str, Dict[str, str]] = {
    "resource.untitled": {"en": "Untitled", "zh": "无标题"},
    "resource.unknown_platform": {"en": "Unknown", "zh": "未知"},
    "resource.delete_confirm": {
        "en": "Are you sure you want to delete this resource?",
        "zh": "您确定要删除此资源吗？",
    },
    "annotation.no_content": {
        "en": "No detailed content provided",
        "zh": "No detailed content provided",
    },
    "annotation.fallback_summary": {
        "en": "Summary is not available right now.",
        "zh": "暂时无法生成摘要。",
    },
    "annotation.fallback_tag": {"en": "Uncategorized", "zh": "未分类"},
    "annotation.language": {"en": "English", "zh": "Simplified Chinese (简体中文)"},
    "type.all": {"en": "All", "zh": "全部内容"},
    "type.article": {"en": "Articles", "zh": "文章"},
    "type.video": {"en": "Videos", "zh": "视频"},
    "type.audio": {"en": "Audio / Podcasts", "zh": "音频 / 播客"},
    "type.tweet": {"en": "Posts / Short content", "zh": "推文 / 短内容"},
}


def L(lang: str, key: str) -> str:
    """Translate a key using YAML i18n with a built-in fallback."""
    val = I18n(lang).t(key)
    if val != key:
        return val
    msg = MESSAGES.get(key)
    if msg:
        return msg.get(lang) or msg.get("en") or next(iter(msg.values()), key)
    return key


def type_label(resource_type: ResourceType | str, lang: str) -> str:
    """Display label for a resource type or the ``ALL`` sentinel."""
    if resource_type == "ALL":
        return L(lang, "type.all")
    # Every enum member has a ``type.<value>`` key, so the mapping is total
    return L(lang, f"type.{ResourceType(resource_type).value.lower()}")


__all__ = ["I18n", "MESSAGES", "L", "type_label"]
