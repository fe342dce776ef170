"""
Utilities behavioral tests (sentinel, name transforms, reflection).

Scope
- Validate Unset/coalesce semantics.
- Validate the name transforms across casing styles.
- Validate signature reflection into positional/keyword names.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argosy.utils import (
    Unset,
    UnsetType,
    coalesce,
    mirror,
    words,
    pascalcase,
    camelcase,
    hyphenate,
    separate,
    identifier,
    reflect,
)


class TestUnset(TestCase):
    def testUnsetIsFalseyAndSingleton(self):
        self.assertFalse(Unset)
        self.assertIs(UnsetType(), Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testUnsetCannotBeSubclassed(self):
        with self.assertRaises(TypeError):
            class Other(UnsetType):  # NOQA: F-841
                pass

    def testCoalescePreservesNone(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce("", "fallback"), "")

    def testMirrorReturnsCopies(self):
        class Holder:
            items = mirror("items")

            def __init__(self):
                self._items = ["a"]

        holder = Holder()
        holder.items.append("b")
        self.assertEqual(holder.items, ["a"])


class TestNameTransforms(TestCase):
    def testWordsSplitEveryCasingStyle(self):
        for source in ("deploy.now", "deploy_now", "deploy now", "deploy-now", "DeployNow", "deployNow"):
            with self.subTest(source=source):
                self.assertEqual([word.lower() for word in words(source)], ["deploy", "now"])

    def testHyphenate(self):
        self.assertEqual(hyphenate("deployNow"), "deploy-now")
        self.assertEqual(hyphenate("HTTPServer"), "http-server")
        self.assertEqual(hyphenate("ship_it_command"), "ship-it-command")

    def testPascalAndCamelCase(self):
        self.assertEqual(pascalcase("deploy_now"), "DeployNow")
        self.assertEqual(camelcase("deploy-now"), "deployNow")
        self.assertEqual(camelcase("1My-#Param-two"), "1My#ParamTwo")

    def testRoundTripRecoversCanonicalName(self):
        for source in ("build.target", "build_target", "build target", "build-target", "BuildTarget", "buildTarget"):
            with self.subTest(source=source):
                self.assertEqual(camelcase(hyphenate(pascalcase(source))), "buildTarget")

    def testSeparateKeepsCasing(self):
        self.assertEqual(separate("DeployTool"), "Deploy Tool")

    def testIdentifierIsSnakeCase(self):
        self.assertEqual(identifier("dry-run"), "dry_run")
        self.assertEqual(identifier("DryRun"), "dry_run")


class TestReflect(TestCase):
    def testReflectSplitsPositionalsAndKeywords(self):
        def handler(region, zone=None, /, *files, force=False, **extra):
            pass

        positionals, keywords = reflect(handler)
        self.assertEqual(positionals, ["region", "zone", "*files"])
        self.assertEqual(keywords, ["force"])


class TestVersion(TestCase):
    def testVersionInfoMatchesVersion(self):
        import argosy

        self.assertEqual(argosy.__version__, "%d.%d.%d" % argosy.version_info[:3])
        self.assertEqual(argosy.version_info.releaselevel, "final")


if __name__ == "__main__":
    unittest.main()
