"""
Command behavioral tests (display names, handler binding, collection lookups).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argosy import Command, CommandCollection, command_name, ConfigurationError, FaultCode


class TestCommandName(TestCase):
    def testSuffixesStripped(self):
        self.assertEqual(command_name("deploy_now_command"), "deploy-now")
        self.assertEqual(command_name("deployNowCommand"), "deploy-now")
        self.assertEqual(command_name("status"), "status")

    def testCustomSuffix(self):
        self.assertEqual(command_name("ship_cmd", "_cmd"), "ship")

    def testBareSuffixKept(self):
        self.assertEqual(command_name("_command"), "command")


class TestCommand(TestCase):
    def testDefaults(self):
        command = Command("deploy_command")
        self.assertEqual(command.name, "deploy")
        self.assertEqual(command.method, "deploy_command")
        self.assertEqual(command.attribute, "deploy_command")
        self.assertEqual(len(command.params), 0)
        self.assertEqual(len(command.options), 0)

    def testMissingMethod(self):
        with self.assertRaises(ConfigurationError) as context:
            Command("")
        self.assertEqual(context.exception.code, FaultCode.MISSING_METHOD)
        with self.assertRaises(ConfigurationError):
            Command.from_definition({"name": "deploy"})

    def testFromSignature(self):
        command = Command.from_signature("deploy_command", ["region", "*targets"], ["dry_run"], help="Deploy things")
        self.assertEqual(command.help, "Deploy things")
        self.assertEqual(command.params.keys(), ["region", "targets"])
        self.assertTrue(command.params.get("targets").is_list)
        self.assertEqual(command.options.keys(), ["dry-run"])

    def testMergeParamsPositionally(self):
        command = Command.from_signature("deploy_command", ["region"], [])
        command.merge({"name": "ship", "params": [{"name": "region", "required": True, "accept_only": ["eu", "us"]}]})
        self.assertEqual(command.name, "ship")
        region = command.params.get("region")
        self.assertTrue(region.required)
        self.assertEqual(region.accept_only, ["eu", "us"])

    def testMethodCannotBeRebound(self):
        command = Command("deploy_command")
        with self.assertRaises(ConfigurationError) as context:
            command.merge({"method": "other_command"})
        self.assertEqual(context.exception.code, FaultCode.ATTRIBUTE_RENAME)
        command.merge({"method": "deploy_command"})

    def testDefinitionUsesMethodKey(self):
        definition = Command("status_command", help="Show status").to_definition()
        self.assertEqual(definition["method"], "status_command")
        self.assertNotIn("attribute", definition)
        self.assertEqual(Command.from_definition(definition).to_definition(), definition)


class TestCommandCollection(TestCase):
    def testDisplayNamesUnique(self):
        collection = CommandCollection()
        collection.add({"method": "deploy_command"})
        with self.assertRaises(ConfigurationError) as context:
            collection.add({"method": "ship_command", "name": "deploy"})
        self.assertEqual(context.exception.code, FaultCode.DUPLICATE_COMMAND)

    def testLookupByDisplayName(self):
        collection = CommandCollection().add_list([{"method": "deploy_command"}, {"method": "status_command", "name": "info"}])
        self.assertEqual(collection.get_by_display_name("info").method, "status_command")
        self.assertIsNone(collection.get_by_display_name("status"))
        self.assertTrue(collection.has_bound_property("deploy_command"))
        self.assertFalse(collection.has_bound_property("deploy"))

    def testAddMergesSameMethod(self):
        collection = CommandCollection()
        collection.add({"method": "deploy_command"})
        collection.add({"method": "deploy_command", "name": "ship", "help": "Ship it"})
        self.assertEqual(len(collection), 1)
        self.assertEqual(collection.get_by_display_name("ship").help, "Ship it")
        self.assertIsNone(collection.get_by_display_name("deploy"))

    def testAddWithoutUpdate(self):
        collection = CommandCollection()
        collection.add({"method": "deploy_command"})
        with self.assertRaises(ConfigurationError) as context:
            collection.add({"method": "deploy_command"}, update_if_exists=False)
        self.assertEqual(context.exception.code, FaultCode.DUPLICATE_KEY)

    def testRejectedMergeLeavesCommandIntact(self):
        collection = CommandCollection().add_list([{"method": "deploy_command"}, {"method": "status_command"}])
        with self.assertRaises(ConfigurationError) as context:
            collection.add({"method": "status_command", "name": "deploy", "help": "Show status"})
        self.assertEqual(context.exception.code, FaultCode.DUPLICATE_COMMAND)
        status = collection.get("status_command")
        self.assertEqual((status.name, status.help), ("status", ""))
        self.assertIs(collection.get_by_display_name("status"), status)

    def testRejectedNestedMergeLeavesCommandIntact(self):
        collection = CommandCollection()
        collection.add({"method": "deploy_command", "options": [{"name": "force", "aliases": ["f"]}]})
        with self.assertRaises(ConfigurationError):
            collection.add({"method": "deploy_command", "options": [{"name": "fast", "aliases": ["f"]}]})
        self.assertEqual(collection.get("deploy_command").options.keys(), ["force"])

    def testVerifyChecksNestedCollections(self):
        collection = CommandCollection()
        collection.add(Command.from_signature("deploy_command", ["region", "zone"], []))
        collection.get("deploy_command").merge({"params": [{"name": "region"}, {"name": "zone", "required": True}]})
        with self.assertRaises(ConfigurationError) as context:
            collection.verify()
        self.assertEqual(context.exception.code, FaultCode.REQUIRED_AFTER_OPTIONAL)


if __name__ == "__main__":
    unittest.main()
