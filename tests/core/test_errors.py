"""Tests for the packager error hierarchy."""

import httpx

from buildpack_packager.core.errors import (
    ChecksumMismatchError,
    DownloadError,
    ErrorCategory,
    ErrorContext,
    IntegrityError,
    LegacyPackagerError,
    ManifestCastError,
    MissingDefaultDependencyError,
    NetworkError,
    PackagerError,
    PrePackageError,
    ProcessError,
    SchemaError,
    StackNotFoundError,
    ValidationError,
    categorize_error,
)


class TestErrorContext:
    def test_to_dict_skips_unset_fields(self):
        ctx = ErrorContext(path="/tmp/x", http_status=404)
        assert ctx.to_dict() == {"path": "/tmp/x", "http_status": 404}

    def test_metadata_is_flattened(self):
        ctx = ErrorContext(stack="cflinuxfs3", metadata={"dependency": "ruby"})
        assert ctx.to_dict() == {"stack": "cflinuxfs3", "dependency": "ruby"}


class TestPackagerError:
    def test_default_category_is_internal(self):
        err = PackagerError("boom")
        assert err.category == ErrorCategory.INTERNAL
        assert str(err) == "boom"

    def test_with_context_sets_known_fields_and_metadata(self):
        err = PackagerError("boom").with_context(path="/a", extra="yes")
        assert err.context.path == "/a"
        assert err.context.metadata == {"extra": "yes"}

    def test_cause_is_chained(self):
        cause = RuntimeError("inner")
        err = PackagerError("outer", cause=cause)
        assert err.__cause__ is cause
        assert err.to_dict()["cause"] == "inner"

    def test_to_dict(self):
        err = StackNotFoundError("cflinuxfs4")
        data = err.to_dict()
        assert data["error_type"] == "StackNotFoundError"
        assert data["category"] == "VALIDATION"
        assert data["context"] == {"stack": "cflinuxfs4"}


class TestSpecificErrors:
    def test_download_error_with_status(self):
        err = DownloadError("https://example.com/x.tgz", http_status=404)
        assert isinstance(err, NetworkError)
        assert err.message == "could not download: 404"
        assert err.context.uri == "https://example.com/x.tgz"
        assert err.category == ErrorCategory.NETWORK

    def test_download_error_with_cause(self):
        cause = httpx.ConnectError("refused")
        err = DownloadError("https://example.com/x.tgz", cause=cause)
        assert err.http_status is None
        assert "refused" in err.message

    def test_checksum_mismatch_message_names_both_digests(self):
        err = ChecksumMismatchError("/cache/x", expected="aa", actual="bb")
        assert isinstance(err, IntegrityError)
        assert err.message == "dependency sha256 mismatch: expected sha256 aa, actual sha256 bb"
        assert err.context.expected_sha256 == "aa"
        assert err.context.actual_sha256 == "bb"

    def test_manifest_cast_error(self):
        err = ManifestCastError("dependencies", "list", "oops")
        assert isinstance(err, SchemaError)
        assert isinstance(err, ValidationError)
        assert err.field == "dependencies"
        assert err.message == "Could not cast dependencies to list (got str)"
        assert err.to_dict()["value"] == "'oops'"

    def test_stack_not_found_message(self):
        assert StackNotFoundError("cflinuxfs4").message == "Stack `cflinuxfs4` not found in manifest"

    def test_missing_default_dependency(self):
        err = MissingDefaultDependencyError("ruby", "cflinuxfs3", reason="no match")
        assert err.message == "No matching default dependency `ruby` for stack `cflinuxfs3`"
        assert err.context.metadata == {"dependency": "ruby", "reason": "no match"}

    def test_process_errors_carry_output(self):
        err = PrePackageError("scripts/build.sh", 2, "compiler missing\n")
        assert isinstance(err, ProcessError)
        assert err.category == ErrorCategory.PROCESS
        assert err.exit_code == 2
        assert err.to_dict()["output"] == "compiler missing\n"
        assert "exited with status 2" in err.message

    def test_legacy_packager_error(self):
        err = LegacyPackagerError("bundle exec buildpack-packager --cached", 1)
        assert err.context.command == "bundle exec buildpack-packager --cached"
        assert err.output == ""


class TestCategorizeError:
    def test_packager_error_uses_own_category(self):
        assert categorize_error(ChecksumMismatchError("p", expected="a", actual="b")) == ErrorCategory.INTEGRITY

    def test_os_error_is_storage(self):
        assert categorize_error(FileNotFoundError("x")) == ErrorCategory.STORAGE

    def test_value_error_is_validation(self):
        assert categorize_error(ValueError("x")) == ErrorCategory.VALIDATION

    def test_other_is_unknown(self):
        assert categorize_error(RuntimeError("x")) == ErrorCategory.UNKNOWN
