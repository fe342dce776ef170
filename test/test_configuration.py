"""
Program configuration tests (reflection, memoization, merges, decorators).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argosy import (
    Program,
    ProgramConfiguration,
    Settings,
    inject_configuration,
    configure,
    command,
    program,
    ConfigurationError,
    FaultCode,
    Unset,
)


class Deploy(Program):
    settings = Settings(commands_enabled=True)

    def ship_command(self, region, *targets, force=False):
        """Ship the build to a region."""

    def statusCommand(self, params, options):
        pass

    def default_command(self):
        pass

    def helper(self):
        pass

    @command(name="roll-back", help="Undo the last release")
    def undo(self, release):
        pass


class Tool(Program):
    def main(self, source, target=None, *, dry_run=False, options=None):
        """Copy a file somewhere."""


class TestInjectConfiguration(TestCase):
    def testMemoizedPerClass(self):
        first = inject_configuration(Deploy)
        self.assertIs(inject_configuration(Deploy), first)
        self.assertIs(inject_configuration(Deploy()), first)

    def testUntypedTargets(self):
        for target in (42, "text", object()):
            with self.subTest(target=target):
                with self.assertRaises(ConfigurationError) as context:
                    inject_configuration(target)
                self.assertEqual(context.exception.code, FaultCode.UNTYPED_TARGET)

    def testProgramMetadata(self):
        configuration = inject_configuration(Deploy)
        self.assertEqual(configuration.name, "Deploy")
        self.assertEqual(configuration.binary_name, "deploy")
        self.assertEqual(configuration.version, "1.0.0")
        self.assertEqual(configuration.default_command, "default_command")

    def testCommandDiscovery(self):
        commands = inject_configuration(Deploy).commands
        self.assertEqual(sorted(command.name for command in commands), ["roll-back", "ship", "status"])
        self.assertNotIn("helper", commands)
        self.assertNotIn("default_command", commands)

    def testCommandSignature(self):
        ship = inject_configuration(Deploy).resolve_command("ship")
        self.assertEqual(ship.help, "Ship the build to a region.")
        self.assertEqual(ship.params.keys(), ["region", "targets"])
        self.assertTrue(ship.params.get("targets").is_list)
        self.assertEqual(ship.options.keys(), ["force"])

    def testSentinelIndexes(self):
        status = inject_configuration(Deploy).resolve_command("status")
        self.assertEqual(len(status.params), 0)
        self.assertEqual(status.params.params_index, 0)
        self.assertEqual(status.params.options_index, 1)

    def testCommandDecorator(self):
        configuration = inject_configuration(Deploy)
        undo = configuration.resolve_command("roll-back")
        self.assertIs(configuration.resolve_command("undo"), undo)
        self.assertEqual(undo.help, "Undo the last release")
        self.assertEqual(undo.params.keys(), ["release"])

    def testMainMode(self):
        configuration = inject_configuration(Tool)
        self.assertEqual(configuration.help, "Copy a file somewhere.")
        self.assertEqual(configuration.params.keys(), ["source", "target"])
        self.assertEqual(configuration.options.keys(), ["dry-run"])
        self.assertEqual(configuration.params.options_index, -1)
        self.assertEqual(len(configuration.commands), 0)

    def testHasRealCommand(self):
        self.assertTrue(inject_configuration(Deploy).has_real_command())
        self.assertFalse(inject_configuration(Tool).has_real_command())


class TestConfigure(TestCase):
    def testInstanceCopyIsIndependent(self):
        shared = inject_configuration(Tool)
        private = configure(Tool, Unset, {"version": "9.9.9", "options": [{"name": "quiet", "aliases": ["q"]}]})
        self.assertIsNot(private, shared)
        self.assertEqual(private.version, "9.9.9")
        self.assertEqual(shared.version, "1.0.0")
        self.assertIsNotNone(private.options.owner("q"))
        self.assertIsNone(shared.options.owner("q"))

    def testCopiesAreDeep(self):
        shared = inject_configuration(Deploy)
        private = shared.copy()
        private.commands.get("ship_command").merge({"help": "changed"})
        private.options.add({"name": "verbose"})
        self.assertEqual(shared.resolve_command("ship").help, "Ship the build to a region.")
        self.assertNotIn("verbose", shared.options)
        self.assertIs(private.settings, shared.settings)

    def testOtherSettingsReflectAgain(self):
        inject_configuration(Tool)
        private = configure(Tool, Settings(commands_enabled=True))
        self.assertTrue(private.settings.commands_enabled)
        self.assertEqual(private.help, "Copy a file somewhere.")
        self.assertFalse(inject_configuration(Tool).settings.commands_enabled)

    def testOtherSettingsDiscoverCommands(self):
        class Hybrid(Program):
            def main(self):
                pass

            def deploy_command(self, region):
                pass

        self.assertEqual(len(configure(Hybrid).commands), 0)
        private = configure(Hybrid, Settings(commands_enabled=True))
        self.assertEqual(private.resolve_command("deploy").params.keys(), ["region"])

    def testRejectedDefinitionLeavesClassUntouched(self):
        shared = inject_configuration(Tool)
        with self.assertRaises(ConfigurationError):
            configure(Tool, Unset, {"options": [{"name": "fast", "aliases": ["dry-run"]}]})
        self.assertNotIn("fast", shared.options)


class TestProgramConfiguration(TestCase):
    def testEmptyName(self):
        with self.assertRaises(ConfigurationError):
            ProgramConfiguration(" ")

    def testMergeSkipsEmptyValues(self):
        configuration = ProgramConfiguration("Tool", help="Does things")
        configuration.merge({"help": "", "version": "2.0.0", "options": []})
        self.assertEqual(configuration.help, "Does things")
        self.assertEqual(configuration.version, "2.0.0")

    def testMergeRejectsUnknownKeys(self):
        with self.assertRaises(TypeError):
            ProgramConfiguration("Tool").merge({"colour": "red"})

    def testMergeCollections(self):
        configuration = ProgramConfiguration("Tool", settings=Settings(commands_enabled=True))
        configuration.merge({
            "params": [{"name": "source", "required": True}],
            "options": [{"name": "verbose", "aliases": ["V"]}],
            "commands": [{"method": "build_command", "help": "Build it"}],
        })
        configuration.verify()
        self.assertEqual(configuration.params.keys(), ["source"])
        self.assertEqual(configuration.options.owner("V").name, "verbose")
        self.assertEqual(configuration.resolve_command("build").help, "Build it")

    def testMergeReportsAliasCollisions(self):
        configuration = ProgramConfiguration("Tool")
        configuration.options.add({"name": "force", "aliases": ["f"]})
        with self.assertRaises(ConfigurationError) as context:
            configuration.merge({"options": [{"name": "fast", "aliases": ["f"]}]})
        self.assertEqual(context.exception.code, FaultCode.ALIAS_COLLISION)

    def testDefinitionSnapshot(self):
        definition = inject_configuration(Tool).to_definition()
        self.assertEqual(definition["name"], "Tool")
        self.assertEqual([param["name"] for param in definition["params"]], ["source", "target"])


class TestProgramDecorator(TestCase):
    def testProgramDecorator(self):
        @program(version="2.1.0", help="Ship builds around.", settings=Settings(commands_enabled=True))
        class Shipper(Program):
            def send_command(self, region):
                pass

        configuration = inject_configuration(Shipper)
        self.assertEqual(configuration.version, "2.1.0")
        self.assertEqual(configuration.help, "Ship builds around.")
        self.assertTrue(configuration.settings.commands_enabled)
        self.assertIsNotNone(configuration.resolve_command("send"))

    def testProgramDecoratorVerifies(self):
        with self.assertRaises(ConfigurationError) as context:
            @program(params=[{"name": "first"}, {"name": "second", "required": True}])
            class Broken(Program):
                def main(self, first, second):
                    pass
        self.assertEqual(context.exception.code, FaultCode.REQUIRED_AFTER_OPTIONAL)

    def testCommandDecoratorRequiresCallable(self):
        with self.assertRaises(TypeError):
            command(name="nothing")(42)


if __name__ == "__main__":
    unittest.main()
