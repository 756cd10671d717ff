from __future__ import annotations
from typing import Iterable, List, Optional

from . import reasons
from .base import DiagnosticRule, Logic, dynamic_rule, static_rule

# 顺序即诊断优先级：具体、可操作的原因在前，泛化的在后。不要重新排序。
DEFAULT_RULES = (
    dynamic_rule("fabric_solution", reasons.SOLUTION_MARKERS, reasons.fabric_solution),
    dynamic_rule("fabric_missing_dependency", ["which is missing!"], reasons.fabric_missing_dependencies),
    dynamic_rule(
        "forge_missing_dependency",
        ["Missing or unsupported mandatory dependencies"],
        reasons.forge_missing_dependencies,
    ),
    dynamic_rule("mod_exception", ["Caught exception from"], reasons.mod_exception),
    dynamic_rule("mixin_apply_failed", ["Mixin apply for mod"], reasons.mixin_apply_failure),
    dynamic_rule("duplicate_key", ["Duplicate key"], reasons.duplicate_key),
    dynamic_rule("config_load_failed", ["Failed loading config file"], reasons.config_failure),
    static_rule(
        "duplicate_mods",
        ["Found a duplicate mod", "Found duplicate mods", "DuplicateModsFoundException"],
        "检测到重复的模组：同一个模组被安装了多个版本。请在 mods 文件夹中只保留一个版本。",
    ),
    static_rule(
        "out_of_memory",
        ["java.lang.OutOfMemoryError", "Out of Memory Error", "The system is out of physical RAM or swap space"],
        "检测到：内存溢出（OutOfMemoryError）。建议：在启动器设置中提高分配给游戏的内存，"
        "或减少模组、材质包与光影的数量；若内存已接近设备上限，请关闭后台应用后重试。",
    ),
    static_rule(
        "heap_reserve_failed",
        ["Could not reserve enough space for", "Invalid maximum heap size"],
        "Java 虚拟机无法分配所设置的内存。请降低启动器中分配给游戏的内存大小。",
    ),
    static_rule(
        "openj9",
        ["Open J9 is not supported", "OpenJ9 is incompatible"],
        "当前使用的 OpenJ9 虚拟机不受支持。请在启动器中切换到 HotSpot（OpenJDK）运行环境。",
    ),
    dynamic_rule("java_too_old", ["java.lang.UnsupportedClassVersionError"], reasons.java_too_old),
    static_rule(
        "java_too_new",
        ["Unsupported class file major version"],
        "JVM 版本不兼容（class file major version）：当前 Java 版本对该游戏或模组加载器过新。"
        "请切换到较低版本的 Java（例如 1.16.5 及以下使用 Java 8）。",
    ),
    dynamic_rule("graphics_driver_vendor", ["EXCEPTION_ACCESS_VIOLATION"], reasons.gpu_vendor_fault),
    static_rule(
        "opengl_unsupported",
        ["Pixel format not accelerated", "The driver does not appear to support OpenGL", "GLX: Failed to create context"],
        "显卡驱动不支持游戏所需的 OpenGL 版本。请更新显卡驱动，或在启动器中切换渲染器。",
    ),
    static_rule(
        "lwjgl_native",
        ["java.lang.UnsatisfiedLinkError", "lwjgl"],
        "LWJGL 原生库加载失败：当前渲染器或设备架构与该游戏版本不匹配。请在启动器中切换渲染器，或确认设备为 arm64 架构。",
        Logic.ALL_OF,
    ),
    static_rule(
        "native_library",
        ["java.lang.UnsatisfiedLinkError"],
        "原生库加载失败（UnsatisfiedLinkError）。可能是某个模组不支持当前设备架构，请移除带有原生库的模组后重试。",
    ),
    static_rule(
        "optifine_sodium",
        ["OptiFine", "sodium"],
        "OptiFine 与 Sodium 不兼容，请只保留其中之一（Fabric 环境推荐 Sodium + Iris）。",
        Logic.ALL_OF,
    ),
    static_rule(
        "incompatible_mods",
        ["Incompatible mods found!", "Some of your mods are incompatible with the game or each other"],
        "部分模组与游戏版本或彼此之间不兼容。请检查最近添加或更新的模组。",
    ),
    static_rule(
        "mixin_injection",
        [
            "org.spongepowered.asm.mixin.transformer.throwables.MixinTransformerError",
            "org.spongepowered.asm.mixin.injection.throwables.InjectionError",
        ],
        "Mixin 注入失败。这通常意味着两个模组试图修改同一段代码并发生冲突。"
        "检查日志中提到的 'Target' 类和 'Handler' 方法，找出冲突的模组。",
    ),
    static_rule(
        "geckolib_animation",
        ["software.bernie.geckolib", "AnimationController"],
        "GeckoLib 动画控制器发生异常。通常是由于实体模型或动画文件缺失/损坏导致。"
        "尝试更新 GeckoLib 或移除报错实体所属的模组。",
        Logic.ALL_OF,
    ),
    static_rule(
        "tessellator",
        ["Not tessellating"],
        "Tessellator 状态异常。通常由渲染类模组（如 OptiFine、Sodium）引起，尝试禁用这些模组或切换渲染器。",
    ),
    static_rule(
        "class_missing",
        ["java.lang.ClassNotFoundException", "java.lang.NoClassDefFoundError"],
        "缺少类（NoClassDefFoundError/ClassNotFoundException），可能是模组缺少前置或与游戏版本不匹配。",
    ),
    static_rule(
        "native_signal",
        ["Fatal signal 11", "SIGSEGV"],
        "游戏在原生层崩溃（SIGSEGV），常见于渲染器与设备 GPU 驱动不兼容。请尝试切换渲染器或关闭光影。",
    ),
    dynamic_rule("crash_report", [reasons.CRASH_REPORT_HEADER], reasons.crash_report_description),
    dynamic_rule("main_thread_exception", ['Exception in thread "main"'], reasons.main_thread_exception),
)


class RuleCatalogue:
    """有序规则表；注册顺序即排名顺序。"""

    def __init__(self, rules: Optional[Iterable[DiagnosticRule]] = None) -> None:
        self._rules: List[DiagnosticRule] = []
        for rule in rules or ():
            self.register(rule)

    def register(self, rule: DiagnosticRule) -> DiagnosticRule:
        if any(r.rule_id == rule.rule_id for r in self._rules):
            raise ValueError(f"duplicate rule id: {rule.rule_id}")
        self._rules.append(rule)
        return rule

    def list(self) -> List[DiagnosticRule]:
        return list(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self):
        return iter(self._rules)


def default_catalogue() -> RuleCatalogue:
    return RuleCatalogue(DEFAULT_RULES)
