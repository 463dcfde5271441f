"""slowfetch 配置

配置分为两部分：
- 模块级常量：终端默认尺寸、缓存目录、日志级别等
- 用户配置文件：config.toml，加载为 pydantic 模型（颜色、OS art、开关）
"""

import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

from .telemetry import get_logger

logger = get_logger(__name__)

# === 终端配置 ===
DEFAULT_COLUMNS = 80  # 终端尺寸查询全部失败时的列数
DEFAULT_ROWS = 24  # 终端尺寸查询全部失败时的行数
COLUMNS_ENV = "COLUMNS"
ROWS_ENV = "LINES"

# === 缓存配置 ===
CACHE_DIR = Path(os.path.expanduser("~")) / ".cache" / "slowfetch"

# === 配置文件 ===
CONFIG_FILE_NAME = "config.toml"
APP_DIR_NAME = "slowfetch"

# === Probe 配置 ===
UNKNOWN = "unknown"  # probe 取不到值时的显示
ERROR = "error"  # probe 抛异常时的显示
COMMAND_TIMEOUT_SECONDS = 5.0  # 外部命令超时（vulkaninfo、lspci 等）

# === 日志配置 ===
LOG_LEVEL = os.environ.get("SLOWFETCH_LOG_LEVEL", "WARNING")

# RGB 颜色
RGB = tuple[int, int, int]


def parse_hex_color(value: str) -> RGB | None:
    """解析 "#FF79C6" / "FF79C6"，无效返回 None"""
    text = value.strip().strip('"')
    if text.startswith("#"):
        text = text[1:]
    if len(text) != 6:
        return None
    try:
        return (int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16))
    except ValueError:
        return None


class ColorConfig(BaseModel):
    """配色（默认 Dracula 风格主题 + 彩虹 art 色）"""

    border: RGB = (0xFF, 0x79, 0xC6)
    title: RGB = (0xFF, 0x79, 0xC6)
    key: RGB = (0xBD, 0x93, 0xF9)
    value: RGB = (0x8B, 0xE9, 0xFD)
    art_1: RGB = (0xFF, 0x00, 0x00)
    art_2: RGB = (0xFF, 0x80, 0x00)
    art_3: RGB = (0xFF, 0xFF, 0x00)
    art_4: RGB = (0x00, 0xFF, 0x00)
    art_5: RGB = (0x00, 0xFF, 0xFF)
    art_6: RGB = (0x00, 0xBF, 0xFF)
    art_7: RGB = (0x55, 0x55, 0xFF)
    art_8: RGB = (0xAA, 0x55, 0xFF)
    art_9: RGB = (0xFF, 0x55, 0xFF)

    @field_validator("*", mode="before")
    @classmethod
    def _parse_color(cls, value, info):
        # 无效颜色保留默认值
        default = cls.model_fields[info.field_name].default
        if isinstance(value, str):
            parsed = parse_hex_color(value)
            if parsed is None:
                logger.warning(f"Invalid color for {info.field_name}: {value!r}")
                return default
            return parsed
        if isinstance(value, (list, tuple)) and len(value) == 3:
            if all(isinstance(c, int) and 0 <= c <= 255 for c in value):
                return tuple(value)
        logger.warning(f"Invalid color for {info.field_name}: {value!r}")
        return default

    def art_colors(self) -> list[RGB]:
        """art_1..art_9 按顺序"""
        return [getattr(self, f"art_{i}") for i in range(1, 10)]


class Settings(BaseModel):
    """用户配置

    os_art: False=关闭, True=按 OS 自动选择, 字符串=指定 OS
    """

    os_art: bool | str = False
    custom_art: str | None = None
    pretty_bars: bool = False
    color: bool = True
    colors: ColorConfig = Field(default_factory=ColorConfig)

    @field_validator("custom_art", mode="before")
    @classmethod
    def _expand_path(cls, value):
        if isinstance(value, str):
            if not value:
                return None
            return os.path.expanduser(value)
        return value

    @field_validator("os_art", mode="before")
    @classmethod
    def _normalize_os_art(cls, value):
        if isinstance(value, str) and not value.strip():
            return False
        return value


def config_search_paths() -> list[Path]:
    """配置文件查找顺序"""
    paths = []
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        paths.append(Path(xdg) / APP_DIR_NAME / CONFIG_FILE_NAME)
    home = os.environ.get("HOME")
    if home:
        paths.append(Path(home) / ".config" / APP_DIR_NAME / CONFIG_FILE_NAME)
    paths.append(Path(CONFIG_FILE_NAME))
    return paths


def find_config() -> Path | None:
    for path in config_search_paths():
        if path.is_file():
            return path
    return None


def parse_config(content: str) -> Settings:
    """解析 TOML 内容

    Raises:
        tomllib.TOMLDecodeError: TOML 语法错误
        ValidationError: 字段类型错误
    """
    data = tomllib.loads(content)
    return Settings.model_validate(data)


def load_config(path: Path | None = None) -> Settings:
    """加载配置；文件缺失或无效时返回默认配置

    Args:
        path: 显式路径，None 时按 config_search_paths() 查找
    """
    path = path or find_config()
    if path is None:
        logger.debug("No config file found, using defaults")
        return Settings()

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        logger.warning(f"Cannot read config {path}: {e}")
        return Settings()

    try:
        settings = parse_config(content)
    except (tomllib.TOMLDecodeError, ValidationError) as e:
        logger.warning(f"Invalid config {path}: {e}")
        return Settings()

    logger.debug(f"Loaded config from {path}")
    return settings
