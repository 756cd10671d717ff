"""动态原因：在关键字粗匹配之后，从日志原文中做二次结构化提取。

每个函数接收完整日志，返回原因文本；无法提取时返回 None（软未命中），
不影响后续规则。
"""
from __future__ import annotations
import re
from typing import List, Optional, Sequence, Tuple

# 同一句话的多语言版本
SOLUTION_MARKERS: Tuple[str, ...] = (
    "A potential solution has been determined",
    "已确定可能的解决方案",
    "已確定可能的解決方案",
)
SOLUTION_PREAMBLE = "模组加载器已给出可能的解决方案："
SOLUTION_POSTAMBLE = "请按照以上步骤安装、更新或替换相应模组后重新启动游戏。"

BULLET_LINE = re.compile(r"^[ \t]*-[ \t]*\S")
STACK_FRAME_LINE = re.compile(r"^[ \t]*at[ \t]", re.MULTILINE)
CRASH_REPORT_HEADER = "---- Minecraft Crash Report ----"

RE_CAUGHT_EXCEPTION = re.compile(r"Caught exception from[ \t]+([^\r\n]+)")
RE_DUPLICATE_KEY = re.compile(r"Duplicate key[ \t]+([^\r\n(]+)")
RE_CONFIG_FAILURE = re.compile(
    r"Failed loading config file[ \t]+(\S+)(?:[ \t]+of type[ \t]+\S+)?(?:[ \t]+for modid[ \t]+(\S+))?"
)
RE_MIXIN_APPLY = re.compile(r"Mixin apply for mod[ \t]+(\S+)[ \t]+failed")
RE_FABRIC_MISSING = re.compile(
    r"Mod '([^'\r\n]+)' \(([^)\r\n]+)\)[^\r\n]*? requires [^\r\n]*?\bof ([\w.\-]+), which is missing!"
)
# 与 Forge 的 "Missing or unsupported mandatory dependencies" 列表格式一致
RE_FORGE_MISSING = re.compile(
    r"Mod ID:\s*'([^']+)'\s*,\s*Requested by:\s*'([^']+)'(?:\s*,\s*Expected range:\s*'([^']*)')?",
    flags=re.IGNORECASE,
)
RE_CLASS_FILE_VERSION = re.compile(r"class file version (\d+)(?:\.\d+)?")

# Java 8 对应 class file version 52
CLASS_VERSION_OFFSET = 44

GPU_VENDOR_MARKERS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("Intel", ("[ig75icd", "[ig7icd", "[ig8icd", "[ig9icd", "[igxelpicd", "[ig11icd")),
    ("AMD", ("[atio6axx", "[atioglxx", "[atig6pxx", "[amdxc64")),
    ("NVIDIA", ("[nvoglv64", "[nvoglv32", "[nvd3dumx")),
)


def _first_line_group(pattern: re.Pattern, log: str) -> Optional[str]:
    m = pattern.search(log)
    if not m:
        return None
    value = m.group(1).strip()
    return value or None


def extract_bulleted_solution(log: str, markers: Sequence[str] = SOLUTION_MARKERS) -> Optional[str]:
    """收集提示行之后紧邻的 "- xxx" 列表，遇到第一条不符合格式的行即结束。"""
    for marker in markers:
        idx = log.find(marker)
        # 同一提示可能出现多次（例如重复启动），取第一个带列表的
        while idx >= 0:
            line_end = log.find("\n", idx)
            if line_end < 0:
                break
            collected: List[str] = []
            for line in log[line_end + 1:].splitlines():
                if not BULLET_LINE.match(line):
                    break
                collected.append(line.rstrip())
            if collected:
                return "\n".join([SOLUTION_PREAMBLE, *collected, SOLUTION_POSTAMBLE])
            idx = log.find(marker, line_end)
    return None


def extract_stack_message(log: str, intro: str, start: int = 0) -> Optional[str]:
    """截取 start 之后第一个 intro 到第一行 "at ..." 栈帧（或文本末尾）之间的内容。"""
    idx = log.find(intro, start)
    if idx < 0:
        return None
    start = idx + len(intro)
    frame = STACK_FRAME_LINE.search(log, start)
    end = frame.start() if frame else len(log)
    text = log[start:end].strip()
    return text or None


def fabric_solution(log: str) -> Optional[str]:
    return extract_bulleted_solution(log)


def mod_exception(log: str) -> Optional[str]:
    name = _first_line_group(RE_CAUGHT_EXCEPTION, log)
    if not name:
        return None
    return (
        f"模组 {name} 在运行时抛出异常导致游戏崩溃。"
        f"请尝试更新 {name}、检查它的前置模组是否齐全，或暂时移除该模组后重试。"
    )


def duplicate_key(log: str) -> Optional[str]:
    key = _first_line_group(RE_DUPLICATE_KEY, log)
    if not key:
        return None
    return (
        f"注册表中出现重复键 {key}：多个模组注册了相同的 ID，或同一模组被安装了多次。"
        "请检查 mods 文件夹中是否有重复或冲突的模组。"
    )


def config_failure(log: str) -> Optional[str]:
    m = RE_CONFIG_FAILURE.search(log)
    if not m:
        return None
    file_name, modid = m.group(1), m.group(2)
    owner = f"模组 {modid} 的配置文件" if modid else "配置文件"
    return f"{owner} {file_name} 加载失败（文件可能已损坏）。删除该文件后重新启动游戏即可自动重新生成。"


def mixin_apply_failure(log: str) -> Optional[str]:
    modid = _first_line_group(RE_MIXIN_APPLY, log)
    if not modid:
        return None
    return f"模组 {modid} 的 Mixin 注入失败，通常是该模组与当前游戏版本或其他模组不兼容。请更新或移除 {modid}。"


def fabric_missing_dependencies(log: str) -> Optional[str]:
    items: List[str] = []
    for m in RE_FABRIC_MISSING.finditer(log):
        item = f"  - {m.group(1)} ({m.group(2)}) 需要前置模组 {m.group(3)}"
        if item not in items:
            items.append(item)
    if not items:
        return None
    return "\n".join(["缺少前置模组：", *items, "请安装缺失的前置模组（注意与游戏版本匹配）。"])


def forge_missing_dependencies(log: str) -> Optional[str]:
    items: List[str] = []
    for m in RE_FORGE_MISSING.finditer(log):
        dep, requester, version_range = m.group(1), m.group(2), m.group(3)
        item = f"  - {requester} 需要 {dep}"
        if version_range:
            item += f"（版本范围 {version_range}）"
        if item not in items:
            items.append(item)
    if not items:
        return None
    return "\n".join(["Forge 报告缺少必需的前置模组或版本不受支持：", *items, "请安装或更新上述前置模组。"])


def java_too_old(log: str) -> str:
    m = RE_CLASS_FILE_VERSION.search(log)
    if not m:
        return "当前 Java 版本过低，游戏或模组需要更高版本的 Java。请在启动器中切换到更新的 Java 运行环境。"
    class_version = int(m.group(1))
    required = class_version - CLASS_VERSION_OFFSET
    return (
        f"当前 Java 版本过低：游戏或模组需要 Java {required} 或更高版本（class file version {class_version}）。"
        f"请在启动器中切换到 Java {required}+ 运行环境。"
    )


def gpu_vendor_fault(log: str) -> Optional[str]:
    for vendor, markers in GPU_VENDOR_MARKERS:
        if any(marker in log for marker in markers):
            return (
                f"{vendor} 显卡驱动在渲染时发生访问冲突（EXCEPTION_ACCESS_VIOLATION）。"
                f"请将 {vendor} 显卡驱动更新到最新版本，并关闭光影或降低渲染设置后重试。"
            )
    return None


def crash_report_description(log: str) -> Optional[str]:
    header = log.find(CRASH_REPORT_HEADER)
    if header < 0:
        return None
    message = extract_stack_message(log, "Description:", header)
    if not message:
        return None
    return f"游戏崩溃报告摘要：\n{message}"


def main_thread_exception(log: str) -> Optional[str]:
    message = extract_stack_message(log, 'Exception in thread "main"')
    if not message:
        return None
    return f"主线程抛出未处理的异常：\n{message}"
