"""Tests for m365/spo/webparts.py catalog lookup and option merging."""

from __future__ import annotations

import json
import unittest

from core.cli_errors import ExitCode, UsageError
from m365.errors import MalformedJsonPayloadError, UnknownWebPartError
from m365.spo import webparts
from tests.fixtures import IMAGE_WEB_PART_ID, catalog_component


class TestStandardWebParts(unittest.TestCase):
    def test_known_name(self):
        self.assertEqual(webparts.standard_web_part_id("Image"), IMAGE_WEB_PART_ID)
        self.assertEqual(webparts.standard_web_part_id("Spacer"), "8654b779-4886-46d4-8ffb-b5ed960ee986")

    def test_unknown_name(self):
        with self.assertRaises(UsageError) as ctx:
            webparts.standard_web_part_id("Clock")
        self.assertEqual(ctx.exception.message, "Clock is not a valid standard web part type")
        self.assertIn("QuickLinks", ctx.exception.hint)

    def test_names_are_case_sensitive(self):
        with self.assertRaises(UsageError):
            webparts.standard_web_part_id("image")


class TestFindComponent(unittest.TestCase):
    def test_matches_braced_id(self):
        comp = catalog_component()
        self.assertIs(webparts.find_component([comp], IMAGE_WEB_PART_ID), comp)

    def test_matches_bare_id_case_insensitive(self):
        comp = catalog_component(web_part_id=IMAGE_WEB_PART_ID.upper(), braces=False)
        self.assertIs(webparts.find_component([catalog_component("x"), comp], IMAGE_WEB_PART_ID), comp)

    def test_missing_component(self):
        with self.assertRaises(UnknownWebPartError) as ctx:
            webparts.find_component([catalog_component("other")], IMAGE_WEB_PART_ID)
        self.assertEqual(str(ctx.exception), f"There is no available WebPart with Id {IMAGE_WEB_PART_ID}.")
        self.assertEqual(ctx.exception.code, ExitCode.NOT_FOUND)


class TestTemplateFromComponent(unittest.TestCase):
    def test_builds_template(self):
        tpl = webparts.template_from_component(catalog_component(title="Image"), instance_id="inst-1")
        self.assertEqual(tpl["id"], "inst-1")
        self.assertEqual(tpl["webPartId"], IMAGE_WEB_PART_ID)
        data = tpl["webPartData"]
        self.assertEqual(data["dataVersion"], "1.0")
        self.assertEqual(data["id"], IMAGE_WEB_PART_ID)
        self.assertEqual(data["instanceId"], "inst-1")
        self.assertEqual(data["title"], "Image")
        self.assertEqual(data["description"], "Add a image")
        self.assertEqual(data["properties"], {"imageSourceType": 2})

    def test_generates_instance_id(self):
        a = webparts.template_from_component(catalog_component())
        b = webparts.template_from_component(catalog_component())
        self.assertNotEqual(a["id"], b["id"])
        self.assertEqual(a["id"], a["webPartData"]["instanceId"])

    def test_manifest_as_object_and_without_entries(self):
        comp = {"Id": "{ABC}", "Manifest": {"id": "abc"}}
        tpl = webparts.template_from_component(comp, instance_id="i")
        self.assertEqual(tpl["webPartId"], "abc")
        self.assertIsNone(tpl["webPartData"]["title"])
        self.assertIsNone(tpl["webPartData"]["properties"])


class TestApplyWebPartOptions(unittest.TestCase):
    def setUp(self):
        self.template = webparts.template_from_component(
            catalog_component(properties={"a": 1, "b": {"x": 1}}), instance_id="inst-1"
        )

    def test_no_options_is_identity(self):
        before = json.loads(json.dumps(self.template))
        self.assertEqual(webparts.apply_web_part_options(self.template), before)

    def test_properties_merge_shallow(self):
        tpl = webparts.apply_web_part_options(self.template, properties='{"b": {"y": 2}, "c": 3}')
        self.assertEqual(tpl["webPartData"]["properties"], {"a": 1, "b": {"y": 2}, "c": 3})
        self.assertEqual(tpl["id"], "inst-1")

    def test_properties_when_template_has_none(self):
        tpl = {"id": "i", "webPartData": {"properties": None}}
        webparts.apply_web_part_options(tpl, properties='{"z": 1}')
        self.assertEqual(tpl["webPartData"]["properties"], {"z": 1})

    def test_data_merge_sets_instance_id(self):
        tpl = webparts.apply_web_part_options(
            self.template, data='{"instanceId": "custom", "title": "Mine", "properties": {"q": 1}}'
        )
        self.assertEqual(tpl["id"], "custom")
        self.assertEqual(tpl["webPartData"]["title"], "Mine")
        self.assertEqual(tpl["webPartData"]["properties"], {"q": 1})
        self.assertEqual(tpl["webPartData"]["dataVersion"], "1.0")

    def test_malformed_json(self):
        with self.assertRaises(MalformedJsonPayloadError) as ctx:
            webparts.apply_web_part_options(self.template, properties="{a")
        self.assertTrue(ctx.exception.message.startswith(
            "Specified webPartProperties is not a valid JSON string. Input: {a. Error: "
        ))
        self.assertEqual(ctx.exception.code, ExitCode.USAGE)

    def test_non_object_json(self):
        with self.assertRaises(MalformedJsonPayloadError) as ctx:
            webparts.apply_web_part_options(self.template, data="[1, 2]")
        self.assertIn("webPartData", ctx.exception.message)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
