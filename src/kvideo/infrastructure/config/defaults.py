"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

# Apple-CMS providers shipped out of the box; override via the YAML
# ``sources`` list.
DEFAULT_SOURCES: list[dict[str, Any]] = [
    {"id": "custom_0", "name": "电影天堂", "base_url": "https://caiji.dyttzyapi.com/api.php/provide/vod"},
    {"id": "custom_1", "name": "如意", "base_url": "https://cj.rycjapi.com/api.php/provide/vod"},
    {"id": "custom_2", "name": "暴风", "base_url": "https://bfzyapi.com/api.php/provide/vod"},
    {"id": "custom_3", "name": "天涯", "base_url": "https://tyyszy.com/api.php/provide/vod"},
    {"id": "custom_4", "name": "非凡影视", "base_url": "https://api.ffzyapi.com/api.php/provide/vod"},
    {"id": "custom_5", "name": "360", "base_url": "https://360zy.com/api.php/provide/vod"},
    {"id": "custom_6", "name": "卧龙", "base_url": "https://wolongzyw.com/api.php/provide/vod"},
    {"id": "custom_7", "name": "极速", "base_url": "https://jszyapi.com/api.php/provide/vod"},
    {"id": "custom_8", "name": "魔爪", "base_url": "https://mozhuazy.com/api.php/provide/vod"},
    {"id": "custom_9", "name": "魔都", "base_url": "https://www.mdzyapi.com/api.php/provide/vod"},
    {"id": "custom_10", "name": "海外看", "base_url": "https://haiwaikan.com/api.php/provide/vod"},
    {"id": "custom_11", "name": "新浪", "base_url": "https://api.xinlangapi.com/xinlangapi.php/provide/vod"},
    {"id": "custom_12", "name": "光速", "base_url": "https://api.guangsuapi.com/api.php/provide/vod"},
    {"id": "custom_13", "name": "红牛", "base_url": "https://www.hongniuzy2.com/api.php/provide/vod"},
    {"id": "custom_14", "name": "樱花", "base_url": "https://m3u8.apiyhzy.com/api.php/provide/vod"},
    {"id": "custom_15", "name": "飞速", "base_url": "https://www.feisuzyapi.com/api.php/provide/vod"},
]

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "kvideo",
    "environment": "dev",
    "http": {
        "timeout_seconds": 10.0,
        "user_agent": "Mozilla/5.0 (compatible; KVideo/0.1.0)",
    },
    "probe": {
        "timeout_seconds": 3.0,
        "max_retries": 2,
        "retry_delay_seconds": 0.5,
        "total_slots": 32,
    },
    "search": {
        "source_timeout_seconds": 10.0,
        "sample_videos": 3,
        "episode_sample_size": 3,
        "episode_max_concurrent": 5,
        "unavailable_ttl_seconds": 0.0,
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "sources": DEFAULT_SOURCES,
}
