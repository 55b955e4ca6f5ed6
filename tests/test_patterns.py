"""Tests for the ordered line classifier."""

import pytest

from tplink_gelf.patterns import Classification, LineKind, classify, extract_network_fields


class TestFirstLine:
    def test_classifies_first_line(self, first_line):
        result = classify(first_line)
        assert result.kind is LineKind.FIRST_LINE
        assert result.facility == 0
        assert result.severity == 6
        assert result.captures["timestamp"] == "1758400919.541010111"
        assert result.captures["rest"].startswith("AP MAC=")

    def test_prival_and_version_not_exposed(self, first_line):
        result = classify(first_line.replace("<6>", "<14>1 ", 1))
        assert result.kind is LineKind.FIRST_LINE
        assert set(result.captures) == {"timestamp", "rest"}
        assert result.facility == 1
        assert result.severity == 6

    def test_requires_ap_mac_body(self):
        line = "<6>Sep 20 21:42:02 192.168.40.5 [1758400919.541010111] something else"
        assert classify(line).kind is LineKind.UNPARSED


class TestAdditionalLine:
    def test_classifies_additional_line(self, additional_line):
        result = classify(additional_line)
        assert result.kind is LineKind.ADDITIONAL_LINE
        assert result.captures == {
            "timestamp": "1758400919.891010111",
            "rest": additional_line.split("] ", 1)[1],
        }
        assert result.facility is None
        assert result.severity is None

    def test_timestamp_needs_fraction(self, additional_line):
        line = additional_line.replace("1758400919.891010111", "1758400919")
        assert classify(line).kind is LineKind.UNPARSED


class TestControllerLines:
    def test_dhcp_info(self, dhcp_line):
        result = classify(dhcp_line)
        assert result.kind is LineKind.DHCP_INFO
        assert result.facility == 16
        assert result.severity == 6
        assert result.captures["origin"] == "Omada-Controller-XXXX-YYYYYYYYYY"
        assert result.captures["appname"] == "-"
        assert result.captures["procid"] == "-"
        assert result.captures["msgid"] == "-"
        assert "DHCP client lease expired" in result.captures["rest"]
        assert "prival" not in result.captures
        assert "version" not in result.captures

    def test_operation_takes_priority_over_dhcp(self, operation_line):
        result = classify(operation_line)
        assert result.kind is LineKind.CONTROLLER_OPERATION
        assert result.captures["origin"] == "Omada-Controller-XXXX"
        assert result.captures["json"] == '{"details":{},"operation":"logged in successfully."}'
        assert "rest" not in result.captures
        assert result.facility == 19
        assert result.severity == 6

    def test_malformed_json_body_still_operation_shaped(self):
        line = "<158>1 2025-07-19 23:00:18 Omada-Controller-XXXX - - - {not json}"
        assert classify(line).kind is LineKind.CONTROLLER_OPERATION

    def test_version_optional(self, dhcp_line):
        result = classify(dhcp_line.replace("<134>1 ", "<134> ", 1))
        assert result.kind is LineKind.DHCP_INFO
        assert result.severity == 6

    def test_named_header_fields(self):
        line = "<134>1 2025-07-19 19:21:46 controller omada 1234 DHCP lease renewed"
        result = classify(line)
        assert result.kind is LineKind.DHCP_INFO
        assert result.captures["appname"] == "omada"
        assert result.captures["procid"] == "1234"
        assert result.captures["msgid"] == "DHCP"
        assert result.captures["rest"] == "lease renewed"


class TestClassificationSnapshot:
    def test_captures_read_only(self, dhcp_line):
        result = classify(dhcp_line)
        with pytest.raises(TypeError):
            result.captures["origin"] = "spoofed"

    def test_captures_copied_from_source(self):
        source = {"timestamp": "1.5", "rest": "AP MAC=x"}
        result = Classification(LineKind.ADDITIONAL_LINE, "line", source)
        source["rest"] = "changed"
        assert result.captures["rest"] == "AP MAC=x"


class TestUnparsed:
    def test_fallback(self):
        result = classify("hello world, nothing to see")
        assert result.kind is LineKind.UNPARSED
        assert result.captures == {}
        assert result.facility is None
        assert result.severity is None
        assert result.line == "hello world, nothing to see"


class TestClassifyIsPure:
    def test_same_line_same_result(self, first_line, additional_line, dhcp_line, operation_line):
        for line in (first_line, additional_line, dhcp_line, operation_line, "garbage line"):
            assert classify(line) == classify(line)


class TestExtractNetworkFields:
    def test_extracts_tuple(self, additional_line):
        assert extract_network_fields(additional_line) == {
            "AP_MAC": "aa:bb:5f:e0:a6:aa",
            "MAC_SRC": "bb:aa:da:c8:1e:54",
            "IP_SRC": "192.168.50.73",
            "IP_DST": "52.45.111.111",
            "IP_PROTO": "6",
            "SPT": "49808",
            "DPT": "1883",
        }

    def test_no_match(self):
        assert extract_network_fields("AP MAC=aa:bb:5f:e0:a6:aa only") == {}
