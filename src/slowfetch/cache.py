"""Probe 缓存

慢速 probe（OS、CPU、GPU）的结果缓存在磁盘上，一个 key 一个文件：
- 原子写入（temp + rename）
- refresh=True 时所有读取视为未命中
- 读写失败不影响渲染，只记录日志和指标
"""

import os
import re
import tempfile
from collections.abc import Callable
from pathlib import Path

from . import config
from .telemetry import get_logger, metrics

logger = get_logger(__name__)

_VALID_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class ProbeCache:
    """key → string 的持久化缓存"""

    def __init__(self, directory: Path | None = None, refresh: bool = False):
        """
        Args:
            directory: 缓存目录，默认 ~/.cache/slowfetch
            refresh: 强制刷新（忽略已有缓存，但仍写入新值）
        """
        self.directory = directory or config.CACHE_DIR
        self.refresh = refresh

    def _path(self, key: str) -> Path:
        if not _VALID_KEY.match(key):
            raise ValueError(f"invalid cache key: {key!r}")
        return self.directory / key

    def get(self, key: str) -> str | None:
        """读取缓存；未命中、强制刷新或读取失败返回 None"""
        if self.refresh:
            return None

        path = self._path(key)
        try:
            value = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            metrics.inc("cache.miss", {"key": key})
            return None
        except OSError as e:
            logger.debug(f"[Cache] Read {key} failed: {e}")
            metrics.inc("cache.error", {"op": "read"})
            return None

        metrics.inc("cache.hit", {"key": key})
        return value

    def set(self, key: str, value: str) -> bool:
        """写入缓存，返回是否成功"""
        path = self._path(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(prefix=f".{key}_", suffix=".tmp", dir=self.directory)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                os.replace(temp_path, path)
            except OSError:
                if os.path.exists(temp_path):
                    os.unlink(temp_path)
                raise
        except OSError as e:
            logger.debug(f"[Cache] Write {key} failed: {e}")
            metrics.inc("cache.error", {"op": "write"})
            return False
        return True

    def fetch(self, key: str, producer: Callable[[], str]) -> str:
        """命中返回缓存值，否则调用 producer 并写入缓存"""
        cached = self.get(key)
        if cached is not None:
            return cached
        value = producer()
        # unknown 不缓存，下次重新探测
        if value != config.UNKNOWN:
            self.set(key, value)
        return value
