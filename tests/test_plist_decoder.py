"""Tests for plist decoding of system_profiler output."""

import unittest

from macos_apps.plist import PlistDecoder, PlistParseError, decode_dict, decode_value
from macos_apps.plist.decoder import NESTED_DICT_PLACEHOLDER, first_string_value


def _profiler_xml(items: str) -> str:
    """Wrap item dicts in the system_profiler document structure."""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<!DOCTYPE plist PUBLIC "-//Apple//DTD PLIST 1.0//EN" '
        '"http://www.apple.com/DTDs/PropertyList-1.0.dtd">\n'
        '<plist version="1.0">\n'
        '<array>\n'
        '  <dict>\n'
        '    <key>_dataType</key>\n'
        '    <string>SPApplicationsDataType</string>\n'
        '    <key>_items</key>\n'
        f'    <array>{items}</array>\n'
        '    <key>_timeStamp</key>\n'
        '    <date>2024-09-30T16:00:00Z</date>\n'
        '  </dict>\n'
        '</array>\n'
        '</plist>\n'
    )


class TestValueDecoder(unittest.TestCase):
    """Test decoding of single value elements."""

    def setUp(self):
        self.decoder = PlistDecoder()

    def _value(self, xml: str) -> str:
        return decode_value(self.decoder.parse(xml))

    def test_booleans(self):
        """Test true/false elements decode to literal strings."""
        self.assertEqual(self._value("<true/>"), "true")
        self.assertEqual(self._value("<false/>"), "false")

    def test_scalars_keep_raw_text(self):
        """Test scalar values are returned without conversion or trimming."""
        self.assertEqual(self._value("<string>  spaced out </string>"), "  spaced out ")
        self.assertEqual(self._value("<integer>0042</integer>"), "0042")
        self.assertEqual(self._value("<real>1.50</real>"), "1.50")
        self.assertEqual(self._value("<date>2024-01-01T00:00:00Z</date>"), "2024-01-01T00:00:00Z")

    def test_unknown_tag_falls_back_to_text(self):
        """Test unrecognised tags decode like scalars."""
        self.assertEqual(self._value("<data>SGVsbG8=</data>"), "SGVsbG8=")

    def test_array_keeps_first_element_only(self):
        """Test arrays are truncated to their first element."""
        full = self._value(
            "<array><string>Developer ID Application: Acme Inc</string>"
            "<string>Developer ID Certification Authority</string>"
            "<string>Apple Root CA</string></array>"
        )
        single = self._value("<array><string>Developer ID Application: Acme Inc</string></array>")
        self.assertEqual(full, single)
        self.assertEqual(full, "Developer ID Application: Acme Inc")

    def test_array_skips_whitespace_and_comments(self):
        """Test the first element child is used even after comments."""
        value = self._value("<array>\n  <!-- signers -->\n  <string>first</string>\n</array>")
        self.assertEqual(value, "first")

    def test_empty_array(self):
        """Test an array without element children decodes to an empty string."""
        self.assertEqual(self._value("<array>\n</array>"), "")

    def test_nested_arrays_recurse(self):
        """Test the first element of an array is itself decoded."""
        self.assertEqual(self._value("<array><array><true/></array></array>"), "true")

    def test_nested_dict_placeholder(self):
        """Test nested dictionaries are not expanded."""
        value = self._value("<dict><key>a</key><string>b</string></dict>")
        self.assertEqual(value, NESTED_DICT_PLACEHOLDER)


class TestDictDecoder(unittest.TestCase):
    """Test decoding of dict elements."""

    def setUp(self):
        self.decoder = PlistDecoder()

    def _dict(self, xml: str) -> dict:
        return decode_dict(self.decoder.parse(xml))

    def test_pairs_in_document_order(self):
        """Test keys pair with their values and keep document order."""
        result = self._dict(
            "<dict>\n"
            "  <key>_name</key>\n  <string>Slack</string>\n"
            "  <key>has64BitIntelCode</key>\n  <true/>\n"
            "  <key>version</key>\n  <string>4.41</string>\n"
            "</dict>"
        )
        self.assertEqual(result, {"_name": "Slack", "has64BitIntelCode": "true", "version": "4.41"})
        self.assertEqual(list(result), ["_name", "has64BitIntelCode", "version"])

    def test_value_after_comment(self):
        """Test the value is the next element sibling, not the next node."""
        result = self._dict("<dict><key>a</key><!-- note --><string>1</string></dict>")
        self.assertEqual(result, {"a": "1"})

    def test_trailing_key_dropped(self):
        """Test a key without a following element is silently skipped."""
        result = self._dict("<dict><key>a</key><string>1</string><key>b</key></dict>")
        self.assertEqual(result, {"a": "1"})

    def test_repeated_key_last_wins(self):
        """Test the last value of a repeated key is kept."""
        result = self._dict(
            "<dict><key>a</key><string>1</string><key>a</key><string>2</string></dict>"
        )
        self.assertEqual(result, {"a": "2"})

    def test_non_key_children_ignored(self):
        """Test stray value elements do not create entries."""
        result = self._dict("<dict><string>orphan</string><key>a</key><integer>3</integer></dict>")
        self.assertEqual(result, {"a": "3"})

    def test_empty_dict(self):
        """Test an empty dict decodes to an empty mapping."""
        self.assertEqual(self._dict("<dict/>"), {})


class TestPlistDocumentParser(unittest.TestCase):
    """Test locating and decoding the _items array."""

    def setUp(self):
        self.decoder = PlistDecoder()

    def test_items_in_document_order(self):
        """Test every item dict is decoded once, in order."""
        xml = _profiler_xml(
            "<dict><key>_name</key><string>A</string></dict>"
            "<dict><key>_name</key><string>B</string></dict>"
            "<dict><key>_name</key><string>C</string></dict>"
        )
        items = self.decoder.parse_items(xml)
        self.assertEqual([item["_name"] for item in items], ["A", "B", "C"])

    def test_nested_dicts_are_items_too(self):
        """Test descendant dicts, not just direct children, are decoded."""
        xml = _profiler_xml(
            "<dict><key>_name</key><string>A</string>"
            "<key>extra</key><dict><key>inner</key><string>x</string></dict></dict>"
            "<dict><key>_name</key><string>B</string></dict>"
        )
        items = self.decoder.parse_items(xml)
        self.assertEqual(len(items), 3)
        self.assertEqual(items[0], {"_name": "A", "extra": NESTED_DICT_PLACEHOLDER})
        self.assertEqual(items[1], {"inner": "x"})
        self.assertEqual(items[2], {"_name": "B"})

    def test_str_input_with_encoding_declaration(self):
        """Test str input carrying an XML encoding declaration is accepted."""
        xml = _profiler_xml("<dict><key>_name</key><string>Café</string></dict>")
        self.assertEqual(self.decoder.parse_items(xml), [{"_name": "Café"}])
        self.assertEqual(self.decoder.parse_items(xml.encode("utf-8")), [{"_name": "Café"}])

    def test_missing_items_key(self):
        """Test a document without _items yields no entries."""
        xml = '<plist version="1.0"><dict><key>other</key><array><dict/></array></dict></plist>'
        self.assertEqual(self.decoder.parse_items(xml), [])

    def test_items_key_without_array(self):
        """Test an _items key followed by no array yields no entries."""
        xml = '<plist><dict><key>_items</key><string>none</string></dict></plist>'
        self.assertEqual(self.decoder.parse_items(xml), [])

    def test_items_array_not_immediately_after_key(self):
        """Test the first following array sibling is used."""
        xml = (
            '<plist><dict><key>_items</key><string>x</string>'
            '<array><dict><key>_name</key><string>A</string></dict></array></dict></plist>'
        )
        self.assertEqual(self.decoder.parse_items(xml), [{"_name": "A"}])

    def test_items_array_first_in_document_order(self):
        """Test a nested _items array ahead of the outer one is chosen."""
        xml = (
            '<plist><dict>'
            '<key>_items</key>'
            '<dict><key>_items</key>'
            '<array><dict><key>_name</key><string>Y</string></dict></array></dict>'
            '<array><dict><key>_name</key><string>X</string></dict></array>'
            '</dict></plist>'
        )
        self.assertEqual(self.decoder.parse_items(xml), [{"_name": "Y"}])

    def test_empty_input_raises(self):
        """Test empty input is a parse error."""
        with self.assertRaises(PlistParseError):
            self.decoder.parse_items("")
        with self.assertRaises(PlistParseError):
            self.decoder.parse_items("   \n ")

    def test_non_xml_input_raises(self):
        """Test input without any markup cannot be parsed."""
        with self.assertRaises(PlistParseError):
            self.decoder.parse_items("system_profiler: command not found")

    def test_parse_error_is_value_error(self):
        """Test callers can catch parse failures as ValueError."""
        self.assertTrue(issubclass(PlistParseError, ValueError))


class TestLenientMode(unittest.TestCase):
    """Test lenient versus strict XML handling."""

    TRUNCATED = (
        '<plist version="1.0"><array><dict><key>_items</key><array>'
        '<dict><key>_name</key><string>Foo</string></dict>'
    )

    def test_lenient_recovers_truncated_document(self):
        """Test lenient mode decodes what it can from truncated output."""
        items = PlistDecoder(lenient=True).parse_items(self.TRUNCATED)
        self.assertEqual(items, [{"_name": "Foo"}])

    def test_strict_rejects_truncated_document(self):
        """Test strict mode surfaces malformed markup."""
        with self.assertRaises(PlistParseError):
            PlistDecoder(lenient=False).parse_items(self.TRUNCATED)

    def test_default_is_lenient(self):
        """Test decoders are lenient unless told otherwise."""
        self.assertTrue(PlistDecoder().lenient)

    def test_decoder_is_reusable(self):
        """Test one decoder instance can parse several documents."""
        decoder = PlistDecoder()
        first = decoder.parse_items(_profiler_xml("<dict><key>a</key><string>1</string></dict>"))
        second = decoder.parse_items(_profiler_xml("<dict><key>b</key><string>2</string></dict>"))
        self.assertEqual(first, [{"a": "1"}])
        self.assertEqual(second, [{"b": "2"}])


class TestBundleLookup(unittest.TestCase):
    """Test first-string lookups used for bundle Info.plist files."""

    INFO_PLIST = (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<plist version="1.0">\n<dict>\n'
        '  <key> CFBundleGetInfoString </key>\n  <string>  Foo 2.1, (c) Acme  </string>\n'
        '  <key>CFBundleVersion</key>\n  <integer>7</integer>\n  <string>2.1</string>\n'
        '  <key>LSRequiresNativeExecution</key>\n  <true/>\n'
        '</dict>\n</plist>\n'
    )

    def setUp(self):
        self.decoder = PlistDecoder()

    def test_lookup_trims_and_normalizes_keys(self):
        """Test key whitespace is normalized and values are trimmed."""
        values = self.decoder.lookup(self.INFO_PLIST, "CFBundleGetInfoString")
        self.assertEqual(values, {"CFBundleGetInfoString": "Foo 2.1, (c) Acme"})

    def test_lookup_reads_first_following_string(self):
        """Test non-string siblings are skipped when looking for a value."""
        values = self.decoder.lookup(self.INFO_PLIST, "CFBundleVersion")
        self.assertEqual(values["CFBundleVersion"], "2.1")

    def test_lookup_missing_key(self):
        """Test missing or non-string keys read as empty strings."""
        values = self.decoder.lookup(self.INFO_PLIST, "CFBundleShortVersionString", "LSRequiresNativeExecution")
        self.assertEqual(values, {"CFBundleShortVersionString": "", "LSRequiresNativeExecution": ""})

    def test_lookup_requires_plist_root(self):
        """Test only /plist/dict keys are consulted."""
        root = self.decoder.parse("<dict><key>CFBundleVersion</key><string>1</string></dict>")
        self.assertEqual(first_string_value(root, "CFBundleVersion"), "")


if __name__ == "__main__":
    unittest.main()
