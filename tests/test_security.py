"""Tests for the security classifier."""

import pytest

from glidequery_gate.security import SecurityConfig, SecurityReport, SecurityValidator


class TestSecurityValidator:
    """Test suite for SecurityValidator."""

    def setup_method(self):
        """Set up test fixtures."""
        self.validator = SecurityValidator()

    def test_plain_query_is_safe(self):
        """A read-only GlideQuery has no violations or dangerous operations."""
        report = self.validator.validate(
            "new GlideQuery('incident').where('active', true).select('number');"
        )
        assert report == SecurityReport(safe=True)
        assert report.violations is None
        assert report.dangerous_operations is None

    # Blacklist tests
    def test_detects_gs_eval(self):
        """gs.eval() is reported once, not also as bare eval()."""
        report = self.validator.validate("gs.eval('1 + 1');")
        assert report.safe is False
        assert report.violations == ["Blacklisted pattern detected: gs.eval()"]

    def test_detects_gs_execute_now(self):
        report = self.validator.validate("gs.executeNow(job);")
        assert report.violations == ["Blacklisted pattern detected: gs.executeNow()"]

    def test_detects_bare_eval(self):
        report = self.validator.validate("var x = eval('2');")
        assert report.violations == ["Blacklisted pattern detected: eval()"]

    def test_detects_function_constructor(self):
        report = self.validator.validate("var f = new Function('return 1');")
        assert report.violations == ["Blacklisted pattern detected: Function constructor"]

    def test_allows_function_callbacks(self):
        """Lowercase function expressions are not the Function constructor."""
        report = self.validator.validate(
            "new GlideQuery('incident').select('number').forEach(function (r) { gs.info(r.number); });"
        )
        assert report.safe is True

    def test_detects_glide_record(self):
        report = self.validator.validate("var gr = new GlideRecord('incident');")
        assert report.safe is False
        assert "Blacklisted pattern detected: GlideRecord (legacy record API)" in report.violations

    @pytest.mark.parametrize(
        "script,name",
        [
            ("var r = new sn_ws.RESTMessageV2();", "RESTMessageV2"),
            ("var s = new SOAPMessageV2('x', 'y');", "SOAPMessage"),
            ("var h = new GlideHTTPRequest(url);", "GlideHTTPRequest"),
            ("var a = new GlideSysAttachment();", "GlideSysAttachment"),
            ("var d = new XMLDocument(xml);", "XMLDocument"),
            ("var p = new GlideScriptedProcessor();", "GlideScriptedProcessor"),
            ("var m = require('x');", "require()"),
            ("var x = 1;\nimport y from 'z';", "import statement"),
            ("var line = file.readLine();", "readLine() file access"),
            ("out.write(data);", "write() file access"),
            ("var f = attachment.getFile();", "getFile() file access"),
            ("attachment.setFile(f);", "setFile() file access"),
            ("fs.unlinkSync(path);", "fs module"),
        ],
    )
    def test_detects_blacklisted_constructs(self, script, name):
        report = self.validator.validate(script)
        assert report.safe is False
        assert f"Blacklisted pattern detected: {name}" in report.violations

    def test_blacklist_is_case_insensitive(self):
        report = self.validator.validate("GS.EVAL('x');")
        assert report.violations == ["Blacklisted pattern detected: gs.eval()"]

    # Length tests
    def test_rejects_oversized_script(self):
        script = "x" * 10001
        report = self.validator.validate(script)
        assert report.safe is False
        assert report.violations == [
            "Script exceeds maximum length of 10000 characters (actual: 10001)"
        ]

    def test_reports_all_violations_without_short_circuit(self):
        script = "gs.eval('x');\n" + "// padding\n" * 1000
        report = self.validator.validate(script)
        assert len(report.violations) == 2
        assert report.violations[0].startswith("Script exceeds maximum length")
        assert report.violations[1] == "Blacklisted pattern detected: gs.eval()"

    # Dangerous operation tests
    def test_dangerous_operation_is_advisory(self):
        report = self.validator.validate("new GlideQuery('incident').deleteMultiple();")
        assert report.safe is True
        assert report.violations is None
        assert report.dangerous_operations == ["deleteMultiple"]

    def test_dangerous_operation_reported_under_canonical_name(self):
        report = self.validator.validate("new GlideQuery('incident').DELETEMULTIPLE();")
        assert report.dangerous_operations == ["deleteMultiple"]

    def test_dangerous_operations_in_config_order(self):
        report = self.validator.validate(
            "new GlideQuery('task').disableWorkflow().forceUpdate().updateMultiple({ active: false });"
        )
        assert report.dangerous_operations == ["updateMultiple", "disableWorkflow", "forceUpdate"]

    def test_dangerous_operations_alongside_violation(self):
        report = self.validator.validate("gs.eval('x'); new GlideQuery('task').deleteMultiple();")
        assert report.safe is False
        assert report.dangerous_operations == ["deleteMultiple"]


class TestSecurityConfig:
    """Test suite for SecurityValidator configuration."""

    def test_get_config_returns_copy(self):
        validator = SecurityValidator()
        config = validator.get_config()
        assert config == SecurityConfig()
        assert config is not validator.get_config()

    def test_update_config_merges_fields(self):
        validator = SecurityValidator()
        validator.update_config(max_script_length=50)

        config = validator.get_config()
        assert config.max_script_length == 50
        assert config.blacklisted_patterns == SecurityConfig().blacklisted_patterns
        assert config.require_confirmation == SecurityConfig().require_confirmation

        report = validator.validate("x" * 51)
        assert report.violations == ["Script exceeds maximum length of 50 characters (actual: 51)"]

    def test_update_config_stores_sequences_as_tuples(self):
        validator = SecurityValidator()
        patterns = [(r"\bgs\.log\s*\(", "gs.log()")]
        validator.update_config(blacklisted_patterns=patterns, require_confirmation=["insert"])
        patterns.append((r"\bgs\.info\s*\(", "gs.info()"))

        config = validator.get_config()
        assert config.blacklisted_patterns == ((r"\bgs\.log\s*\(", "gs.log()"),)
        assert config.require_confirmation == ("insert",)

        report = validator.validate("gs.info('x'); gs.log('y'); new GlideQuery('task').insert({});")
        assert report.violations == ["Blacklisted pattern detected: gs.log()"]
        assert report.dangerous_operations == ["insert"]

    def test_update_config_rejects_unknown_field(self):
        validator = SecurityValidator()
        with pytest.raises(TypeError):
            validator.update_config(max_length=5)

    def test_custom_config(self):
        validator = SecurityValidator(SecurityConfig(require_confirmation=("insertOrUpdate",)))
        report = validator.validate("new GlideQuery('task').deleteMultiple();")
        assert report.dangerous_operations is None
