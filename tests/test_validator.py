from formrelay.validation import Validator
from formrelay.validation import rules
from formrelay.validation.schema import Kind, forbidden, optional, required


def _schema(mode):
    specs = (
        required("title", rules.max_length(10)),
        optional("note", rules.max_length(5)),
        required("count", rules.integer_between(lambda: 0, lambda: 10), kind=Kind.INTEGER),
    )
    if mode == "strict":
        return specs + (forbidden("debug"),)
    return specs + (optional("debug"),)


def test_valid_input_returns_checked_values():
    outcome = Validator(_schema).validate({"title": "hello", "note": "hi", "count": 3})
    assert outcome.ok
    assert outcome.values == {"title": "hello", "note": "hi", "count": 3}


def test_non_object_input():
    for data in ([1, 2], "text", 42, None):
        outcome = Validator(_schema).validate(data)
        assert not outcome.ok
        assert outcome.message == '"value" must be of type object'


def test_required_fields_reject_missing_null_and_empty():
    outcome = Validator(_schema).validate({"title": None, "count": 1})
    assert outcome.message == '"title" is required'
    outcome = Validator(_schema).validate({"title": "", "count": 1})
    assert outcome.message == '"title" is required'
    outcome = Validator(_schema).validate({"count": 1})
    assert outcome.message == '"title" is required'


def test_empty_optional_values_are_dropped():
    outcome = Validator(_schema).validate({"title": "t", "note": "", "debug": None, "count": 1})
    assert outcome.ok
    assert outcome.values == {"title": "t", "count": 1}


def test_all_errors_are_reported_in_schema_order():
    outcome = Validator(_schema).validate({"title": "x" * 11, "note": "toolong", "count": 11, "extra": 1})
    assert not outcome.ok
    assert outcome.message == (
        '"title" length must be less than or equal to 10 characters long. '
        '"note" length must be less than or equal to 5 characters long. '
        '"count" must be less than or equal to 10. '
        '"extra" is not allowed'
    )


def test_type_errors_short_circuit_rules():
    outcome = Validator(_schema).validate({"title": 12, "count": "5"})
    assert outcome.message == '"title" must be a string. "count" must be an integer'
    outcome = Validator(_schema).validate({"title": "t", "count": True})
    assert outcome.message == '"count" must be an integer'


def test_discriminant_selects_schema():
    data = {"title": "t", "count": 1, "debug": "on"}
    assert Validator(_schema).validate(data, "lenient").ok
    outcome = Validator(_schema).validate(data, "strict")
    assert outcome.message == '"debug" is not allowed'


def test_forbidden_field_fails_even_when_empty():
    outcome = Validator(_schema).validate({"title": "t", "count": 1, "debug": ""}, "strict")
    assert outcome.message == '"debug" is not allowed'
