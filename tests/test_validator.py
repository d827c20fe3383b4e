import copy
import threading
import unittest

from spec_validator import validator
from spec_validator.errors import (
    MalformedItemError,
    SchemaError,
    SpecificationError as E,
    ValidationError,
)
from spec_validator.validator import TreeValidator
from tests._util import GOOD_ATTRIBUTES, VALID_ITEM, item, sample_spec


class SampleSpecTests(unittest.TestCase):
    def setUp(self):
        self.v = TreeValidator(sample_spec())

    def assertFails(self, data, kind, message):
        self.assertFalse(self.v.is_valid(data))
        self.assertEqual(self.v.last_failure.kind, kind)
        self.assertEqual(self.v.last_error, message)

    def test_new_validator_has_no_error(self):
        self.assertIsNone(self.v.last_error)
        self.assertIsNone(self.v.last_failure)

    def test_missing_node_reports_wrong_name(self):
        self.assertFails({}, E.WRONG_NAME, "Item does not have name equal foo")

    def test_unspecified_field(self):
        self.assertFails(item(attrtes={}), E.UNSPECIFIED_FIELDS, "Item has unspecified fields: attrtes")

    def test_non_mapping_attributes(self):
        self.assertFails(item(attributes=None), E.NO_ATTRIBUTES, "Item does not have attributes")
        self.assertFails(item(attributes=["a"]), E.NO_ATTRIBUTES, "Item does not have attributes")

    def test_absent_attributes_report_first_required_one(self):
        self.assertFails(item(), E.MISSING_ATTRIBUTE, "Item does not have required attribute defaultAttr")

    def test_missing_required_attribute(self):
        self.assertFails(item(attributes={}), E.MISSING_ATTRIBUTE,
                         "Item does not have required attribute defaultAttr")

    def test_exceeded_max_length(self):
        self.assertFails(item(attributes={"defaultAttr": "something too long"}),
                         E.TOO_LONG_ATTRIBUTE, "Attribute defaultAttr length exceeded max 10 and is 18")

    def test_invalid_enum(self):
        self.assertFails(item(attributes={"defaultAttr": "something", "enumAttr": "wrong value"}),
                         E.INVALID_ENUM, "Attribute enumAttr value (wrong value) does not satisfy enum constraint")

    def test_not_an_integer(self):
        attrs = dict(GOOD_ATTRIBUTES, integerAttr="wrong type")
        self.assertFails(item(attributes=attrs), E.NOT_INTEGER,
                         "Attribute integerAttr value (wrong type) is not an integer")

    def test_missing_children(self):
        self.assertFails(item(attributes=GOOD_ATTRIBUTES), E.MISSING_CHILDREN,
                         "Item foo cannot be empty but has no children")

    def test_empty_children_list(self):
        self.assertFails(item(attributes=GOOD_ATTRIBUTES, children=[]), E.MISSING_CHILD,
                         "Child zoos is required but not found")

    def test_children_not_a_list(self):
        self.assertFails(item(attributes=GOOD_ATTRIBUTES, children={"name": "zoos"}),
                         E.MALFORMED_ITEM_DATA, "Item foo has children but they are not a list")

    def test_unexpected_child(self):
        self.assertFails(item(attributes=GOOD_ATTRIBUTES, children=[{"name": "wroo"}]),
                         E.UNSPECIFIED_CHILD, "Item has unspecified child named wroo")

    def test_leaf_child_without_value(self):
        data = item(attributes=GOOD_ATTRIBUTES, children=[{"name": "foos", "children": [{"name": "bar"}]}])
        self.assertFails(data, E.EMPTY_ITEM, "Item bar is empty but cannot be")

    def test_missing_required_child(self):
        data = item(
            attributes=GOOD_ATTRIBUTES,
            children=[{"name": "foos", "children": [{"name": "bar", "value": "value of bar"}]}],
        )
        self.assertFails(data, E.MISSING_CHILD, "Child zoos is required but not found")

    def test_nested_failure_propagates(self):
        data = item(
            attributes=GOOD_ATTRIBUTES,
            children=[{"name": "zoos", "children": [{"name": "zoo", "attributes": {"integerAttr": 5}}]}],
        )
        self.assertFails(data, E.MISSING_ATTRIBUTE, "Item does not have required attribute requiredAttr")

    def test_valid_data(self):
        self.assertTrue(self.v.is_valid(VALID_ITEM), self.v.last_error)
        self.assertIsNone(self.v.last_error)

    def test_full_rich_data_is_valid(self):
        data = item(
            attributes={
                "defaultAttr": "ala",
                "enumAttr": "value1",
                "longerAttr": "long string over default length",
                "integerAttr": 10,
            },
            children=[
                {
                    "name": "zoos",
                    "children": [
                        {"name": "zoo", "attributes": {"requiredAttr": "some value", "integerAttr": 5}},
                        {"name": "zoo", "attributes": {
                            "requiredAttr": "other val", "optionalAttr": "ho ho ho", "integerAttr": "3"}},
                    ],
                },
                {"name": "foos", "children": [{"name": "bar", "value": "value of bar"}]},
            ],
        )
        self.assertTrue(self.v.is_valid(data), self.v.last_error)

    def test_error_is_reset_by_next_call(self):
        self.assertFalse(self.v.is_valid({}))
        self.assertIsNotNone(self.v.last_error)
        self.assertTrue(self.v.is_valid(VALID_ITEM))
        self.assertIsNone(self.v.last_error)

    def test_item_is_not_mutated(self):
        data = copy.deepcopy(VALID_ITEM)
        self.v.is_valid(data)
        self.assertEqual(data, VALID_ITEM)

    def test_caller_schema_changes_have_no_effect(self):
        spec = sample_spec()
        v = TreeValidator(spec)
        spec["name"] = "other"
        self.assertTrue(v.is_valid(VALID_ITEM), v.last_error)


class EndToEndTests(unittest.TestCase):
    def setUp(self):
        self.v = TreeValidator({
            "name": "foo",
            "attributes": ["a"],
            "children": {"bar": {"required": False, "mayBeChildless": True}},
        })

    def test_item_with_attribute_is_valid(self):
        self.assertTrue(self.v.is_valid({"name": "foo", "attributes": {"a": "x"}}), self.v.last_error)
        self.assertIsNone(self.v.last_error)

    def test_bare_item_misses_attribute(self):
        self.assertFalse(self.v.is_valid({"name": "foo"}))
        self.assertEqual(self.v.last_failure.kind, E.MISSING_ATTRIBUTE)
        self.assertIn("a", self.v.last_error)

    def test_extra_attribute_is_reported(self):
        self.assertFalse(self.v.is_valid({"name": "foo", "attributes": {"a": "x", "b": "y"}}))
        self.assertEqual(self.v.last_failure.kind, E.UNSPECIFIED_ATTRIBUTES)
        self.assertEqual(self.v.last_error, "Item has unspecified attributes: b")


class AttributeConstraintTests(unittest.TestCase):
    def check(self, attr_spec, value):
        v = TreeValidator({"attributes": {"x": attr_spec}})
        ok = v.is_valid({"name": "n", "attributes": {"x": value}})
        return ok, v.last_failure

    def test_enum_preempts_length_and_type(self):
        ok, _ = self.check({"enum": ["far too long value"], "maxLength": 3}, "far too long value")
        self.assertTrue(ok)
        ok, _ = self.check({"enum": ["abc"], "type": "integer"}, "abc")
        self.assertTrue(ok)

    def test_enum_is_type_sensitive(self):
        for value in ("1", 1.0, True):
            ok, failure = self.check({"enum": [1, 2]}, value)
            self.assertFalse(ok, value)
            self.assertEqual(failure.kind, E.INVALID_ENUM)
        ok, _ = self.check({"enum": [1, 2]}, 2)
        self.assertTrue(ok)

    def test_max_length_boundary_counts_characters(self):
        ok, _ = self.check({"maxLength": 5}, "żółty")
        self.assertTrue(ok)
        ok, failure = self.check({"maxLength": 5}, "żółtyy")
        self.assertFalse(ok)
        self.assertEqual(failure.kind, E.TOO_LONG_ATTRIBUTE)
        self.assertEqual(failure.message, "Attribute x length exceeded max 5 and is 6")

    def test_max_length_ignored_for_non_strings(self):
        ok, _ = self.check({"type": "integer", "maxLength": 1}, 12345)
        self.assertTrue(ok)

    def test_integer_accepts_int_and_digit_strings(self):
        for value in (7, 0, "42", "007"):
            ok, _ = self.check({"type": "integer"}, value)
            self.assertTrue(ok, value)
        for value in ("4.2", "-1", "", " 1", "abc", 1.5, True):
            ok, failure = self.check({"type": "integer"}, value)
            self.assertFalse(ok, value)
            self.assertEqual(failure.kind, E.NOT_INTEGER)

    def test_date_format(self):
        spec = {"type": "date", "dateFormat": "%Y-%m-%d"}
        ok, _ = self.check(spec, "2017-02-15")
        self.assertTrue(ok)
        for value in ("15.02.2017", "2017-02-30", 20170215):
            ok, failure = self.check(spec, value)
            self.assertFalse(ok, value)
            self.assertEqual(failure.kind, E.INVALID_DATE_FORMAT)
        ok, failure = self.check(spec, "2017/02/15")
        self.assertEqual(failure.message, "Attribute x value (2017/02/15) is not valid date in format %Y-%m-%d")

    def test_date_without_format_accepts_anything(self):
        ok, _ = self.check({"type": "date"}, "whenever")
        self.assertTrue(ok)

    def test_none_value_counts_as_missing(self):
        ok, failure = self.check({}, None)
        self.assertFalse(ok)
        self.assertEqual(failure.kind, E.MISSING_ATTRIBUTE)
        ok, _ = self.check({"required": False, "type": "integer"}, None)
        self.assertTrue(ok)

    def test_checks_follow_declaration_order(self):
        v = TreeValidator({"attributes": {"a": {"type": "integer"}, "b": {"enum": ["x"]}}})
        self.assertFalse(v.is_valid({"name": "n", "attributes": {"b": "y", "a": "z"}}))
        self.assertEqual(v.last_failure.kind, E.NOT_INTEGER)


class ChildrenTests(unittest.TestCase):
    def test_empty_children_list_on_non_childless_child(self):
        v = TreeValidator({
            "children": {
                "box": {"mayBeChildless": False, "children": {"thing": {"required": False}}},
            },
        })
        data = {"name": "root", "children": [{"name": "box", "value": 1, "children": []}]}
        self.assertFalse(v.is_valid(data))
        self.assertEqual(v.last_failure.kind, E.MISSING_CHILDREN)
        self.assertEqual(v.last_error, "Item box has no children but cannot be childless")

    def test_empty_children_list_with_only_optional_children(self):
        v = TreeValidator({"name": "r", "children": {"x": {"required": False, "attributes": ["a"]}}})
        self.assertFalse(v.schema.may_be_childless)
        self.assertFalse(v.is_valid({"name": "r", "value": 1, "children": []}))
        self.assertEqual(v.last_failure.kind, E.MISSING_CHILDREN)
        self.assertEqual(v.last_error, "Item r has no children but cannot be childless")
        self.assertFalse(v.is_valid({"name": "r", "value": 1}))
        self.assertEqual(v.last_error, "Item r cannot be empty but has no children")
        self.assertTrue(v.is_valid({"name": "r", "children": [{"name": "x", "attributes": {"a": "y"}}]}),
                        v.last_error)

    def test_empty_children_list_allowed_when_childless(self):
        v = TreeValidator({"children": {"x": {"required": False}}, "mayBeChildless": True})
        self.assertTrue(v.is_valid({"name": "r", "value": 1, "children": []}), v.last_error)

    def test_may_be_childless_item_needs_content(self):
        v = TreeValidator({"children": {"box": {"mayBeChildless": True, "children": ["thing"]}}})
        self.assertTrue(v.is_valid({"name": "r", "children": [{"name": "box", "value": "v"}]}), v.last_error)
        self.assertFalse(v.is_valid({"name": "r", "children": [{"name": "box"}]}))
        self.assertEqual(v.last_failure.kind, E.EMPTY_ITEM)
        self.assertEqual(v.last_error, "Item box is empty but cannot be")

    def test_leaf_with_value_or_attributes_is_not_empty(self):
        v = TreeValidator({"children": ["leaf"]})
        self.assertTrue(v.is_valid({"name": "r", "children": [{"name": "leaf", "value": 0}]}), v.last_error)
        self.assertFalse(v.is_valid({"name": "r", "children": [{"name": "leaf", "attributes": {}}]}))
        self.assertEqual(v.last_failure.kind, E.UNSPECIFIED_FIELDS)

    def test_first_failure_in_depth_first_order(self):
        v = TreeValidator({"children": {"a": {"attributes": ["x"]}, "b": {"attributes": ["y"]}}})
        data = {"name": "r", "children": [{"name": "b", "attributes": {}}, {"name": "a", "attributes": {}}]}
        self.assertFalse(v.is_valid(data))
        self.assertEqual(v.last_error, "Item does not have required attribute y")

    def test_unnamed_child_is_unspecified(self):
        v = TreeValidator({"children": ["leaf"]})
        self.assertFalse(v.is_valid({"name": "r", "children": [{"value": 1}]}))
        self.assertEqual(v.last_failure.kind, E.UNSPECIFIED_CHILD)


class FatalErrorTests(unittest.TestCase):
    def test_non_mapping_item_raises(self):
        v = TreeValidator({"name": "foo"})
        with self.assertRaises(MalformedItemError):
            v.is_valid(["foo"])

    def test_non_mapping_child_raises(self):
        v = TreeValidator({"children": ["leaf"]})
        with self.assertRaises(MalformedItemError):
            v.is_valid({"name": "r", "children": ["leaf"]})

    def test_unsupported_schema_key_raises_on_traversal(self):
        v = TreeValidator({"name": "foo", "minLength": 3})
        with self.assertRaisesRegex(SchemaError, "Unsupported check for key minLength"):
            v.is_valid({"name": "foo", "value": 1})

    def test_unsupported_schema_key_waits_for_other_checks(self):
        v = TreeValidator({"name": "foo", "minLength": 3})
        self.assertFalse(v.is_valid({"name": "bar"}))
        self.assertEqual(v.last_failure.kind, E.WRONG_NAME)

    def test_broken_schema_fails_construction(self):
        with self.assertRaises(SchemaError):
            TreeValidator({"attributes": {"a": {"maxLength": 0}}})


class ValidateFunctionTests(unittest.TestCase):
    def test_valid_item_passes(self):
        validator.validate(VALID_ITEM, schema=sample_spec())  # should not raise

    def test_invalid_item_raises_with_failure(self):
        with self.assertRaisesRegex(ValidationError, "does not have name equal foo") as ctx:
            validator.validate({"name": "bar"}, schema=sample_spec())
        self.assertEqual(ctx.exception.kind, E.WRONG_NAME)


class DefaultsOverrideTests(unittest.TestCase):
    def test_default_child_spec_makes_leaves_optional(self):
        v = TreeValidator({"children": ["a", "b"]}, default_child_spec={"required": False})
        self.assertTrue(v.is_valid({"name": "r", "children": [{"name": "a", "value": 1}]}), v.last_error)

    def test_default_attr_spec_applies_to_bare_attributes(self):
        v = TreeValidator({"attributes": ["a"]}, default_attr_spec={"type": "integer"})
        self.assertFalse(v.is_valid({"name": "r", "attributes": {"a": "x"}}))
        self.assertEqual(v.last_failure.kind, E.NOT_INTEGER)


class ConcurrencyTests(unittest.TestCase):
    def test_threads_with_own_validators(self):
        spec = sample_spec()
        results = []

        def run():
            v = TreeValidator(spec)
            results.append(v.is_valid(VALID_ITEM))

        threads = [threading.Thread(target=run) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertEqual(results, [True] * 4)
