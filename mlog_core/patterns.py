"""启动器识别与字段提取的模式表。

表的顺序即优先级：启动器签名取第一个命中项；同一字段内取第一个命中的候选模式。
"""
from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Dict, Optional, Pattern, Tuple

LAUNCHER_AMETHYST = "Amethyst"
LAUNCHER_FCL = "Fold Craft Launcher"
LAUNCHER_ZALITH = "Zalith Launcher"
LAUNCHER_POJAV = "PojavLauncher"
LAUNCHER_MOJO = "MojoLauncher"

FIELD_LAUNCHER = "launcher"
FIELD_KEYWORD = "keyword"


@dataclass(frozen=True)
class LauncherSignature:
    name: str
    pattern: Pattern[str]

    def matches(self, log: str) -> bool:
        return self.pattern.search(log) is not None


@dataclass(frozen=True)
class FieldPattern:
    """单个候选模式；dialect 为空表示适用于所有启动器。"""

    pattern: Pattern[str]
    dialect: Optional[str] = None

    def applies_to(self, launcher: Optional[str]) -> bool:
        return self.dialect is None or launcher is None or self.dialect == launcher

    def extract(self, log: str) -> Optional[str]:
        m = self.pattern.search(log)
        if not m:
            return None
        value = (m.group(1) or "").strip()
        return value or None


def _p(regex: str, dialect: Optional[str] = None, flags: int = 0) -> FieldPattern:
    return FieldPattern(re.compile(regex, flags), dialect)


# Amethyst 是 PojavLauncher 的分支，日志里可能同时出现两者的名字，必须排在前面
LAUNCHER_SIGNATURES: Tuple[LauncherSignature, ...] = (
    LauncherSignature(LAUNCHER_AMETHYST, re.compile(r"\[Pre-Init\][ \t]*(?:Angel Aura )?Amethyst")),
    LauncherSignature(LAUNCHER_FCL, re.compile(r"Fold Craft Launcher|\bFCL Version:")),
    LauncherSignature(LAUNCHER_ZALITH, re.compile(r"Zalith[ \t]?Launcher")),
    LauncherSignature(LAUNCHER_POJAV, re.compile(r"PojavLauncher|net\.kdt\.pojavlaunch")),
    LauncherSignature(LAUNCHER_MOJO, re.compile(r"MojoLauncher|git\.artdeell\.mojo")),
)

_LINE = r"[ \t]*([^\r\n]+)"

FIELD_PATTERNS: Dict[str, Tuple[FieldPattern, ...]] = {
    "launcher_version": (
        _p(r"\[Pre-Init\][ \t]*Version:" + _LINE, LAUNCHER_AMETHYST),
        _p(r"FCL Version:" + _LINE, LAUNCHER_FCL),
        _p(r"Launcher version:" + _LINE, flags=re.IGNORECASE),
    ),
    "version_code": (
        _p(r"Version Code:[ \t]*(\d+)", LAUNCHER_FCL),
        _p(r"\bVersion[ \t]?code:[ \t]*(\d+)", flags=re.IGNORECASE),
    ),
    "commit": (
        _p(r"\[Pre-Init\][ \t]*Commit:" + _LINE, LAUNCHER_AMETHYST),
        _p(r"\bCommit:[ \t]*([0-9a-fA-F]{7,40})\b"),
    ),
    "architecture": (
        _p(r"\[Pre-Init\][ \t]*Architecture:" + _LINE, LAUNCHER_AMETHYST),
        _p(r"\bArchitecture:" + _LINE, flags=re.IGNORECASE),
        _p(r"\bos\.arch[ \t]*[:=]" + _LINE),
    ),
    "device": (
        _p(r"\[Pre-Init\][ \t]*Device model:" + _LINE, LAUNCHER_AMETHYST),
        _p(r"^Device:" + _LINE, LAUNCHER_FCL, re.MULTILINE),
        _p(r"Device model:" + _LINE, flags=re.IGNORECASE),
    ),
    "os_version": (
        _p(r"\[Pre-Init\][ \t]*(?:iOS|iPadOS) version:" + _LINE, LAUNCHER_AMETHYST),
        _p(r"Android Version:" + _LINE, flags=re.IGNORECASE),
        _p(r"\bOS Version:" + _LINE, flags=re.IGNORECASE),
    ),
    "java_version": (
        _p(r"\[JavaLauncher\] JAVA_HOME has been set to" + _LINE, LAUNCHER_AMETHYST),
        _p(r"Java runtime:" + _LINE, flags=re.IGNORECASE),
        _p(r"Java Version:" + _LINE),
    ),
    "renderer": (
        _p(r"\[JavaLauncher\] RENDERER is set to" + _LINE, LAUNCHER_AMETHYST),
        _p(r"\bRenderer:" + _LINE, flags=re.IGNORECASE),
    ),
    "minecraft_version": (
        # 启动参数形如 1.20.1-forge-47.2.0 或 fabric-loader-0.14.21-1.20.1，只取其中的游戏版本
        _p(r"Launching[ \t]+Minecraft[ \t]+(?:\S*?-)?((?:1|2[6-9])\.\d+(?:\.\d+)?)(?![\w.])"),
        _p(r"Launching[ \t]+Minecraft[ \t]+(\S+)"),
        _p(r"Selected Minecraft version:[ \t]*(\S+)", flags=re.IGNORECASE),
        _p(r"Minecraft Version:[ \t]*(\S+)"),
    ),
    "cpu": (
        _p(r"\[Pre-Init\][ \t]*CPU:" + _LINE, LAUNCHER_AMETHYST),
        _p(r"\bCPU:" + _LINE),
    ),
    "language": (
        _p(r"\[Pre-Init\][ \t]*Language:" + _LINE, LAUNCHER_AMETHYST),
        _p(r"^Language:" + _LINE, flags=re.MULTILINE),
    ),
    "api_version": (
        _p(r"Android SDK:[ \t]*(\d+)", LAUNCHER_FCL),
        _p(r"\bAPI version:[ \t]*(\d+)", flags=re.IGNORECASE),
    ),
}

# "[组件名] Failed to load" 形式的加载失败公告
FAILED_COMPONENT_PATTERN = re.compile(r"\[([^\[\]\r\n]+)\][ \t]*Failed to load")
