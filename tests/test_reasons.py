"""
动态原因提取单元测试。
"""

import os
import sys
import unittest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from mlog_core.rules import reasons


FABRIC_SOLUTION_LOG = """[main/ERROR]: Incompatible mods found!
A potential solution has been determined:
\t - Install fabric-api, any version.
\t - Replace mod 'Sodium' (sodium) 0.4.10 with version 0.5.0 or later.
Unmet dependency listing:
\t - Mod 'Iris' (iris) 1.6.4 requires any version of fabric-api, which is missing!
"""


class TestBulletedSolution(unittest.TestCase):

    def test_collects_bullets(self):
        text = reasons.fabric_solution(FABRIC_SOLUTION_LOG)
        lines = text.split("\n")
        self.assertEqual(lines[0], reasons.SOLUTION_PREAMBLE)
        self.assertEqual(lines[-1], reasons.SOLUTION_POSTAMBLE)
        self.assertEqual(lines[1:-1], [
            "\t - Install fabric-api, any version.",
            "\t - Replace mod 'Sodium' (sodium) 0.4.10 with version 0.5.0 or later.",
        ])

    def test_stops_at_first_non_bullet(self):
        text = reasons.fabric_solution(FABRIC_SOLUTION_LOG)
        self.assertNotIn("Unmet dependency listing", text)
        self.assertNotIn("Iris", text)

    def test_translated_marker(self):
        log = "已确定可能的解决方案：\n - 安装 fabric-api\n结束\n"
        text = reasons.fabric_solution(log)
        self.assertIn(" - 安装 fabric-api", text)
        self.assertNotIn("结束", text)

    def test_marker_without_bullets(self):
        log = "A potential solution has been determined:\nnothing useful\n"
        self.assertIsNone(reasons.fabric_solution(log))

    def test_marker_at_end_of_text(self):
        self.assertIsNone(reasons.fabric_solution("A potential solution has been determined"))

    def test_repeated_marker_uses_occurrence_with_bullets(self):
        log = (
            "A potential solution has been determined:\n"
            "(no suggestions)\n"
            "A potential solution has been determined:\n"
            " - Install fabric-api, any version.\n"
        )
        text = reasons.fabric_solution(log)
        self.assertIn(" - Install fabric-api, any version.", text)
        self.assertNotIn("no suggestions", text)

    def test_crlf_lines(self):
        log = "A potential solution has been determined:\r\n - Install fabric-api\r\n\r\n"
        text = reasons.fabric_solution(log)
        self.assertIn(" - Install fabric-api", text)
        self.assertNotIn("\r", text)


class TestStackMessage(unittest.TestCase):

    def test_stops_at_first_frame(self):
        log = (
            'Exception in thread "main" java.lang.IllegalStateException: boom\n'
            "\tat net.minecraft.client.main.Main.main(Main.java:10)\n"
        )
        self.assertEqual(
            reasons.extract_stack_message(log, 'Exception in thread "main"'),
            "java.lang.IllegalStateException: boom",
        )

    def test_runs_to_end_without_frames(self):
        log = "Description: Rendering overlay\n\njava.lang.NullPointerException"
        self.assertEqual(
            reasons.extract_stack_message(log, "Description:"),
            "Rendering overlay\n\njava.lang.NullPointerException",
        )

    def test_crash_report_ignores_earlier_description(self):
        log = (
            "[Render thread/INFO]: Description: texture atlas reload\n"
            "---- Minecraft Crash Report ----\n"
            "Description: Unexpected error\n"
            "\tat net.minecraft.client.Minecraft.run(Minecraft.java:1)\n"
        )
        self.assertEqual(reasons.crash_report_description(log), "游戏崩溃报告摘要：\nUnexpected error")

    def test_crash_report_without_header(self):
        self.assertIsNone(reasons.crash_report_description("Description: something"))

    def test_missing_intro(self):
        self.assertIsNone(reasons.extract_stack_message("nothing", "Description:"))

    def test_empty_message(self):
        log = 'Exception in thread "main"\n\tat Foo.bar(Foo.java:1)\n'
        self.assertIsNone(reasons.main_thread_exception(log))

    def test_crash_report(self):
        log = (
            "---- Minecraft Crash Report ----\n"
            "Description: Ticking entity\n\n"
            "java.lang.NullPointerException: Cannot invoke \"Object.toString()\"\n"
            "\tat net.minecraft.world.entity.Entity.tick(Entity.java:42)\n"
        )
        text = reasons.crash_report_description(log)
        self.assertTrue(text.startswith("游戏崩溃报告摘要：\n"))
        self.assertIn("Ticking entity", text)
        self.assertNotIn("Entity.java", text)


class TestAttribution(unittest.TestCase):

    def test_mod_exception(self):
        text = reasons.mod_exception("[Render thread/ERROR]: Caught exception from Create (create)\n")
        self.assertIn("Create (create)", text)

    def test_mod_exception_without_name(self):
        self.assertIsNone(reasons.mod_exception("Caught exception from   \nnext line"))

    def test_duplicate_key(self):
        text = reasons.duplicate_key("java.lang.IllegalStateException: Duplicate key minecraft:stone (attempted merging)")
        self.assertIn("minecraft:stone", text)
        self.assertNotIn("attempted", text)

    def test_config_failure_with_modid(self):
        log = "Failed loading config file jei-client.toml of type CLIENT for modid jei"
        text = reasons.config_failure(log)
        self.assertIn("jei-client.toml", text)
        self.assertIn("模组 jei", text)

    def test_config_failure_without_modid(self):
        text = reasons.config_failure("Failed loading config file options.toml\n")
        self.assertTrue(text.startswith("配置文件 options.toml"))

    def test_mixin_apply(self):
        text = reasons.mixin_apply_failure("Mixin apply for mod sodium failed sodium.mixins.json")
        self.assertIn("sodium", text)


class TestMissingDependencies(unittest.TestCase):

    def test_fabric(self):
        log = (
            " - Mod 'Iris' (iris) 1.6.4 requires any version of fabric-api, which is missing!\n"
            " - Mod 'Iris' (iris) 1.6.4 requires any version of fabric-api, which is missing!\n"
        )
        text = reasons.fabric_missing_dependencies(log)
        self.assertEqual(text.count("需要前置模组 fabric-api"), 1)
        self.assertIn("Iris (iris)", text)

    def test_fabric_unparsable(self):
        self.assertIsNone(reasons.fabric_missing_dependencies("something which is missing!"))

    def test_forge(self):
        log = (
            "Missing or unsupported mandatory dependencies:\n"
            "\tMod ID: 'geckolib', Requested by: 'mowziesmobs', Expected range: '[4.2,)', Actual version: '[MISSING]'\n"
        )
        text = reasons.forge_missing_dependencies(log)
        self.assertIn("mowziesmobs 需要 geckolib（版本范围 [4.2,)）", text)


class TestJavaVersion(unittest.TestCase):

    def test_required_version_from_class_file(self):
        log = (
            "java.lang.UnsupportedClassVersionError: net/minecraft/client/main/Main has been compiled by a more "
            "recent version of the Java Runtime (class file version 65.0), this version of the Java Runtime "
            "only recognizes class file versions up to 61.0"
        )
        text = reasons.java_too_old(log)
        self.assertIn("Java 21", text)

    def test_without_class_file_version(self):
        self.assertTrue(reasons.java_too_old("java.lang.UnsupportedClassVersionError"))


class TestGpuVendor(unittest.TestCase):

    def test_vendors(self):
        cases = {
            "Intel": "# C  [ig9icd64.dll+0x1234]",
            "AMD": "# C  [atio6axx.dll+0x5678]",
            "NVIDIA": "# C  [nvoglv64.dll+0x9abc]",
        }
        for vendor, frame in cases.items():
            with self.subTest(vendor=vendor):
                text = reasons.gpu_vendor_fault("EXCEPTION_ACCESS_VIOLATION\n" + frame)
                self.assertTrue(text.startswith(vendor))

    def test_same_wording_apart_from_vendor(self):
        intel = reasons.gpu_vendor_fault("[ig9icd64.dll")
        amd = reasons.gpu_vendor_fault("[atio6axx.dll")
        self.assertEqual(intel.replace("Intel", "X"), amd.replace("AMD", "X"))

    def test_unknown_vendor(self):
        self.assertIsNone(reasons.gpu_vendor_fault("EXCEPTION_ACCESS_VIOLATION\n# C  [libfoo.so+0x1]"))


if __name__ == '__main__':
    unittest.main(verbosity=2)
