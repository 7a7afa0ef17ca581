"""
Unit tests for the Validator.
"""
from unittest.mock import MagicMock, patch

import pytest

from formrules.validation import (
    DataAccessor,
    RequirementError,
    RuleConfigurationError,
    RuleFactory,
    RuleViolationError,
    UnknownRuleError,
    ValidationError,
    Validator,
)

ARTIST_RULES = {
    "ArtistName": ["requiredWithout:ArtistId", "string"],
    "ArtistId": ["requiredWithout:ArtistName", "integer", "min:1"],
}

MULTI_ARTIST_RULES = {
    "ArtistFirstName": ["requiredWithout:ArtistId", "string"],
    "ArtistLastName": ["requiredWithout:ArtistId", "string"],
    "ArtistId": ["requiredWithout:ArtistFirstName", "requiredWithout:ArtistLastName", "integer", "min:1"],
}

IDENTIFICATION_RULES = {
    "SocialSecurityNumber": [
        "requiredWithout:PassportNumber", "requiredWithout:DriverLicenseNumber", r"regex:/^\d{3}-\d{2}-\d{4}$/",
    ],
    "PassportNumber": [
        "requiredWithout:SocialSecurityNumber", "requiredWithout:DriverLicenseNumber", r"regex:/^\d{9}$/",
    ],
    "DriverLicenseNumber": [
        "requiredWithout:SocialSecurityNumber", "requiredWithout:PassportNumber", r"regex:/^DL\d{6}$/",
    ],
}

USERNAME = r"regex:/^[A-Za-z_][\w\-\.]{1,31}$/"
PASSWORD = ["minLength:8", "maxLength:72"]
PASSWORD_HASH = r"regex:/^\$2[aby]?\$\d{1,2}\$[.\/A-Za-z0-9]{53}$/"
HEX_CODE = "regex:/^[a-f0-9]{64}$/"
DISPLAY_NAME = r"regex:/^[\p{L}\p{N}][\p{L}\p{N} .\-']{1,49}$/u"
SAMPLE_HASH = "$2a$08$TYykDj.WYELAn3U4bTsmo.aXPEi44da.Q8dgJi29Adu4zH4wzKAnK"
SAMPLE_CODE = "a3f4b6e8129c0d5e7f8a6b4c3d2e1f09876e4c3b2a1f0e9d8c7b6a5f4e3d2c1b"


@pytest.fixture
def validate(factory):
    def run(rules, data, custom_messages=None):
        return Validator(rules, custom_messages, factory=factory).validate(data)
    return run


class TestBasicValidation:

    def test_returns_accessor_over_unchanged_data(self, validate):
        data = {"name": "Ada"}
        accessor = validate({"name": ["required", "string"]}, data)
        assert isinstance(accessor, DataAccessor)
        assert accessor.data is data
        assert data == {"name": "Ada"}

    def test_empty_rules_accept_anything(self, validate):
        assert validate({}, {"x": 1}).get_field("x") == 1

    def test_nested_fields(self, validate):
        validate(
            {
                "foo": "email",
                "bar.qux": "email",
                "bar.vax.koo": ["numeric", "max:60"],
                "bar.vax.rok": "string",
            },
            {
                "foo": "john.doe@example.com",
                "bar": {"qux": "john.doe@example.com", "vax": {"koo": 56.89, "rok": "example"}},
            },
        )

    def test_custom_rule(self, validate):
        validate(
            {
                "username": ["required", "string", "minLength:3"],
                "email": ["required", "email"],
                "rememberMe": ["required", lambda value: value in ("on", "off")],
            },
            {"username": "john.doe", "email": "john.doe@example.com", "rememberMe": "on"},
        )

    def test_absent_optional_field_is_skipped(self, validate):
        validate({"nickname": ["string", "minLength:3"]}, {})

    def test_stops_at_first_failure(self, validate):
        second = MagicMock(return_value=True)
        with pytest.raises(RuleViolationError, match="Field 'a' must be an integer."):
            validate({"a": ["integer", second], "b": [second]}, {"a": "x", "b": 1})
        second.assert_not_called()

    def test_fields_are_checked_in_declaration_order(self, validate):
        with pytest.raises(RuleViolationError, match="Field 'b' must be a string."):
            validate({"b": "string", "a": "string"}, {"a": 1, "b": 2})

    def test_requirement_rules_run_before_other_rules(self, validate):
        with pytest.raises(RequirementError, match="Only one of fields 'a' or 'b' can be present."):
            validate({"a": ["integer", "requiredWithout:b"]}, {"a": "x", "b": 1})

    def test_unknown_rule(self, validate):
        with pytest.raises(UnknownRuleError, match="Unknown rule 'nonexistent'."):
            validate({"a": ["nonexistent"]}, {"a": 1})

    def test_invalid_rule_spec_raises_before_data_is_read(self, validate):
        with pytest.raises(RuleConfigurationError, match="Rule must be a non-empty string."):
            validate({"a": "string", "b": [""]}, {"a": 1})

    def test_sequence_rules_with_sequence_data(self, validate):
        with pytest.raises(RuleViolationError, match="Field '1' must have a minimum length of 8 characters."):
            validate(["email", PASSWORD], ["john.doe@example.com", "short"])

    def test_object_data(self, validate):
        class Payload:
            def __init__(self):
                self.name = "Ada"
                self.age = 17

        with pytest.raises(RuleViolationError, match="Field 'age' must have a minimum value of 18."):
            validate({"name": "string", "age": ["integer", "min:18"]}, Payload())

    def test_uses_default_factory_when_none_given(self):
        Validator({"a": "integer"}).validate({"a": 5})

    def test_injected_factory_is_used(self, messages):
        factory = RuleFactory(messages)
        with patch.object(factory, "create", wraps=factory.create) as create:
            Validator({"a": ["integer", "min:1"]}, factory=factory).validate({"a": 5})
        assert [c.args[0] for c in create.call_args_list] == ["integer", "min"]


class TestRequiredWithout:

    @pytest.mark.parametrize("rules, data", [
        (ARTIST_RULES, {"ArtistName": "Michael Jackson"}),
        (ARTIST_RULES, {"ArtistId": "5"}),
        (MULTI_ARTIST_RULES, {"ArtistId": "5"}),
        (MULTI_ARTIST_RULES, {"ArtistFirstName": "Michael", "ArtistLastName": "Jackson"}),
        (IDENTIFICATION_RULES, {"SocialSecurityNumber": "123-45-6789"}),
        (IDENTIFICATION_RULES, {"PassportNumber": "987654321"}),
        (IDENTIFICATION_RULES, {"DriverLicenseNumber": "DL123456"}),
        ({
            "ArtistName": ["REQUIREDWITHOUT:ArtistId", "string"],
            "ArtistId": ["RequiredWithout:ArtistName", "integer", "min:1"],
        }, {"ArtistName": "Michael Jackson"}),
        ({
            "ArtistName": ["required", "requiredWithout:ArtistId", "string"],
            "ArtistId": ["requiredWithout:ArtistName", "integer", "min:1"],
        }, {"ArtistName": "Michael Jackson"}),
    ])
    def test_passes(self, validate, rules, data):
        validate(rules, data)

    @pytest.mark.parametrize("rules, data, message", [
        (ARTIST_RULES, {}, "Either field 'ArtistName' or 'ArtistId' must be present."),
        (ARTIST_RULES, {"ArtistName": "Michael Jackson", "ArtistId": "5"},
            "Only one of fields 'ArtistName' or 'ArtistId' can be present."),
        (MULTI_ARTIST_RULES, {}, "Either field 'ArtistFirstName' or 'ArtistId' must be present."),
        (MULTI_ARTIST_RULES, {"ArtistFirstName": "Michael", "ArtistLastName": "Jackson", "ArtistId": "5"},
            "Only one of fields 'ArtistFirstName' or 'ArtistId' can be present."),
        (IDENTIFICATION_RULES, {},
            "Either field 'SocialSecurityNumber' or one of 'PassportNumber', 'DriverLicenseNumber' must be present."),
        (IDENTIFICATION_RULES,
            {"SocialSecurityNumber": "123-45-6789", "PassportNumber": "987654321", "DriverLicenseNumber": "DL123456"},
            "Only one of fields 'SocialSecurityNumber' or one of 'PassportNumber', 'DriverLicenseNumber' can be present."),
        (IDENTIFICATION_RULES, {"PassportNumber": "987654321", "DriverLicenseNumber": "DL123456"},
            "Only one of fields 'PassportNumber' or one of 'SocialSecurityNumber', 'DriverLicenseNumber' can be present."),
        (IDENTIFICATION_RULES, {"SocialSecurityNumber": "123-45-6789", "DriverLicenseNumber": "DL123456"},
            "Only one of fields 'SocialSecurityNumber' or one of 'PassportNumber', 'DriverLicenseNumber' can be present."),
        (IDENTIFICATION_RULES, {"SocialSecurityNumber": "123-45-6789", "PassportNumber": "987654321"},
            "Only one of fields 'SocialSecurityNumber' or one of 'PassportNumber', 'DriverLicenseNumber' can be present."),
        ({
            "ArtistName": ["required", "requiredWithout:ArtistId", "string"],
            "ArtistId": ["requiredWithout:ArtistName", "integer", "min:1"],
        }, {"ArtistId": "5"}, "Required field 'ArtistName' is missing."),
        ({
            "ArtistName": ["required", "requiredWithout:ArtistId", "string"],
            "ArtistId": ["requiredWithout:ArtistName", "integer", "min:1"],
        }, {}, "Required field 'ArtistName' is missing."),
        ({
            "ArtistName": ["required", "requiredWithout:ArtistId", "string"],
            "ArtistId": ["required", "requiredWithout:ArtistName", "integer", "min:1"],
        }, {"ArtistName": "Michael Jackson", "ArtistId": "5"},
            "Only one of fields 'ArtistName' or 'ArtistId' can be present."),
    ])
    def test_fails(self, validate, rules, data, message):
        with pytest.raises(RequirementError) as exc_info:
            validate(rules, data)
        assert str(exc_info.value) == message

    @pytest.mark.parametrize("directive", ["requiredWithout:", "requiredWithout"])
    def test_missing_field_name(self, validate, directive):
        rules = {"ArtistName": [directive, "string"], "ArtistId": ["requiredWithout:ArtistName", "integer", "min:1"]}
        with pytest.raises(RuleConfigurationError, match="Rule 'requiredWithout' must be used with a field name."):
            validate(rules, {"ArtistName": "Michael Jackson"})

    def test_referenced_field_value_is_still_validated(self, validate):
        with pytest.raises(RuleViolationError, match="Field 'ArtistId' must have a minimum value of 1."):
            validate(ARTIST_RULES, {"ArtistId": "0"})


class TestNullable:

    @pytest.mark.parametrize("rules, data", [
        ({"Age": ["nullable", "integer", "min:18"]}, {"Age": None}),
        ({"Age": ["NuLlAbLe", "integer", "min:18"]}, {"Age": None}),
        ({"Age": ["  nullable  ", "integer"]}, {"Age": None}),
        ({"Age": ["integer", "nullable", "min:18"]}, {"Age": None}),
        ({"Age": ["nullable", "integer", "nullable", "min:18"]}, {"Age": None}),
        ({"Age": ["nullable", "integer", "min:18"]}, {"Age": 18}),
        ({"Age": ["nullable", "integer", "nullable", "min:18"]}, {"Age": 18}),
        ({"Age": ["nullable", "required", "integer"]}, {"Age": None}),
        ({"Age": ["nullable", lambda value: isinstance(value, int) and value >= 18]}, {"Age": None}),
        ({"user.age": ["nullable", "integer", "min:18"]}, {"user": {"age": None}}),
        ({"user.age": ["nullable", "integer", "min:18"]}, {"user": {"age": 20}}),
        ({"Age": ["nullable"]}, {}),
    ])
    def test_passes(self, validate, rules, data):
        validate(rules, data)

    @pytest.mark.parametrize("rules, data, message", [
        ({"Age": ["nullable", "integer"]}, {"Age": "not_a_number"}, "Field 'Age' must be an integer."),
        ({"Age": ["integer", "min:18"]}, {"Age": None}, "Field 'Age' must be an integer."),
        ({"Age": ["nullable", "integer", "min:18"]}, {"Age": 17}, "Field 'Age' must have a minimum value of 18."),
        ({"Age": ["nullable", "required", "integer"]}, {}, "Required field 'Age' is missing."),
        ({"Age": [lambda value: isinstance(value, int) and value >= 18]}, {"Age": None},
            "Field 'Age' failed custom validation."),
        ({"Age": ["nullable", lambda value: isinstance(value, int) and value >= 18]}, {"Age": 16},
            "Field 'Age' failed custom validation."),
        ({"user.age": ["integer", "min:18"]}, {"user": {"age": None}}, "Field 'user.age' must be an integer."),
    ])
    def test_fails(self, validate, rules, data, message):
        with pytest.raises(ValidationError) as exc_info:
            validate(rules, data)
        assert str(exc_info.value) == message

    def test_nullable_is_never_dispatched_to_factory(self, messages):
        factory = RuleFactory(messages)
        with patch.object(factory, "create", wraps=factory.create) as create:
            Validator({"Age": ["nullable", "integer"]}, factory=factory).validate({"Age": 30})
        assert [c.args[0] for c in create.call_args_list] == ["integer"]


class TestCustomMessages:

    @pytest.mark.parametrize("rules, custom, data, message", [
        ({"email": ["required"]}, {"email.required": "Email is mandatory."}, {}, "Email is mandatory."),
        ({"email": ["requiredWithout:username"]},
            {"email.requiredWithout": "Either email or username must be provided."}, {},
            "Either email or username must be provided."),
        ({"email": ["requiredWithout:username"]},
            {"email.requiredWithout": "Only one of email or username is allowed."},
            {"email": "a@b.co", "username": "ab"}, "Only one of email or username is allowed."),
        ({"username": ["required", "regex:/^[a-z]+$/"]},
            {"username.regex": "Username must contain only lowercase letters."}, {"username": "John"},
            "Username must contain only lowercase letters."),
        ({"age": ["mIn:18"]}, {"age.min": "Age must be at least 18."}, {"age": 16}, "Age must be at least 18."),
        ({"Age": ["min:18"]}, {"age.min": "Age must be at least 18."}, {"Age": 16},
            "Field 'Age' must have a minimum value of 18."),
        ([["required"]], {"0.required": "The first item is required."}, [], "The first item is required."),
        ({"profile.email": ["required"]}, {"profile.email.required": "Email is required in profile."},
            {"profile": {}}, "Email is required in profile."),
        ({"email": ["required"]}, {"username.required": "Username is required."}, {},
            "Required field 'email' is missing."),
    ])
    def test_messages(self, validate, rules, custom, data, message):
        with pytest.raises(ValidationError) as exc_info:
            validate(rules, data, custom)
        assert str(exc_info.value) == message


class TestRealWorldRuleSets:

    @pytest.mark.parametrize("rules, data", [
        (["email", USERNAME, PASSWORD], ["john.doe@example.com", "john.doe", "TestPass123!"]),
        ([HEX_CODE], [SAMPLE_CODE]),
        (["email"], ["john.doe@example.com"]),
        ([HEX_CODE, PASSWORD], [SAMPLE_CODE, "NewPass123!"]),
        ([USERNAME, PASSWORD], ["john.doe", "TestPass123!"]),
        ([PASSWORD, PASSWORD], ["OldPass123!", "NewPass123!"]),
        ({
            "Email": ["required", "email"],
            "Username": ["required", USERNAME],
            "PasswordHash": ["required", PASSWORD_HASH],
        }, {"Email": "john.doe@example.com", "Username": "john.doe", "PasswordHash": SAMPLE_HASH}),
        ({
            "ID": ["required", "integer", "min:1"],
            "Email": ["email"],
            "Username": [USERNAME],
            "PasswordHash": [PASSWORD_HASH],
        }, {"ID": "23", "Username": "john.doe", "PasswordHash": SAMPLE_HASH}),
        ({
            "AccountId": ["required", "integer", "min:1"],
            "Role": ["required", "integer", "min:0", "max:2"],
        }, {"AccountId": "45", "Role": "0"}),
        ({
            "ID": ["required", "integer", "min:1"],
            "AccountId": ["integer", "min:1"],
            "Role": ["integer", "min:0", "max:2"],
        }, {"ID": "23", "AccountId": "45", "Role": "0"}),
        ({
            "Email": ["required", "email"],
            "Username": ["required", USERNAME],
            "PasswordHash": ["required", PASSWORD_HASH],
            "ActivationCode": ["required", HEX_CODE],
        }, {"Email": "john.doe@example.com", "Username": "john.doe", "PasswordHash": SAMPLE_HASH,
            "ActivationCode": SAMPLE_CODE}),
        ({
            "AccountId": ["required", "integer", "min:1"],
            "ResetCode": ["required", HEX_CODE],
        }, {"AccountId": "45", "ResetCode": SAMPLE_CODE}),
    ])
    def test_passes(self, validate, rules, data):
        validate(rules, data)

    def test_rejects_malformed_password_hash(self, validate):
        with pytest.raises(RuleViolationError, match="Field 'PasswordHash' must match the required pattern"):
            validate({"PasswordHash": ["required", PASSWORD_HASH]}, {"PasswordHash": "plaintext"})

    @pytest.mark.parametrize("name", ["Şebnem Yılmaz", "山田 太郎", "José-María"])
    def test_accepts_international_display_names(self, validate, name):
        validate({"DisplayName": ["required", DISPLAY_NAME]}, {"DisplayName": name})

    @pytest.mark.parametrize("data, message", [
        ({"ExternalId": 10**400}, "Field 'ExternalId' must have a maximum value of 9007199254740992."),
        ({"ExternalId": "9007199254740993"}, "Field 'ExternalId' must have a maximum value of 9007199254740992."),
        ({"ExternalId": 1, "BirthDate": "1990-3-7"}, "Field 'BirthDate' must match the exact datetime format: %Y-%m-%d"),
    ])
    def test_rejects_out_of_range_ids_and_loose_dates(self, validate, data, message):
        rules = {"ExternalId": ["required", "integer", "min:1", "max:9007199254740992"], "BirthDate": ["datetime:%Y-%m-%d"]}
        with pytest.raises(RuleViolationError) as exc_info:
            validate(rules, data)
        assert str(exc_info.value) == message


class TestLogging:

    def test_logs_failure_with_field_and_code(self, validate):
        with patch("formrules.validation.validator.log") as log:
            with pytest.raises(RequirementError):
                validate({"email": ["required"]}, {})
        log.info.assert_called_once_with(
            "validation_failed", field="email", rule="required", code="E2001_REQUIRED_FIELD_MISSING")

    def test_logs_success_at_debug(self, validate):
        with patch("formrules.validation.validator.log") as log:
            validate({"email": ["email"]}, {"email": "a@b.co"})
        log.debug.assert_called_once_with("validation_passed", fields=1)
        log.info.assert_not_called()
