"""Tests for GlideQuery generation."""

import itertools

import pytest

from glidequery_gate.generator import KNOWN_TABLES, QueryGenerator
from glidequery_gate.linting import StyleValidator

OPERATION_PHRASES = {
    "get": ".select(",
    "get one": ".selectOne(",
    "count": ".count(",
    "average priority of": ".avg('priority')",
    "sum of reassignment_count for": ".sum('reassignment_count')",
    "insert": ".insert(",
    "update": ".update(",
    "bulk update": ".updateMultiple(",
    "upsert": ".insertOrUpdate(",
    "delete": ".deleteMultiple(",
    "bulk delete": ".deleteMultiple(",
    "get by sys_id": ".get(sys_id)",
    "count grouped by priority for": ".groupBy('priority')",
    "get with acls": ".withAcls()",
    "bulk update disable workflow": ".disableWorkflow()",
}

WRITE_WARNING = "This is a write operation that modifies data in the database"
BULK_WARNING = "This is a bulk operation that affects multiple records"


@pytest.fixture
def generator():
    return QueryGenerator()


@pytest.fixture
def validator():
    return StyleValidator()


@pytest.mark.parametrize(
    "phrase,table,include_comments",
    list(itertools.product(OPERATION_PHRASES, KNOWN_TABLES, [True, False])),
)
def test_generated_code_passes_linter(generator, validator, phrase, table, include_comments):
    """Every operation/table pair produces lint-clean code for that table."""
    generated = generator.generate(f"{phrase} {table}", include_comments=include_comments)

    report = validator.validate(generated.code)
    assert report.valid is True, report.errors
    assert report.errors is None
    assert f"new GlideQuery('{table}')" in generated.code
    assert OPERATION_PHRASES[phrase] in generated.code
    assert generated.code.endswith(";")
    assert generated.code.count(";") == 1
    if not include_comments:
        assert "//" not in generated.code


@pytest.mark.parametrize("table", KNOWN_TABLES)
def test_from_clause_keeps_table(generator, validator, table):
    generated = generator.generate(f"get all records from {table}")

    assert f"new GlideQuery('{table}')" in generated.code
    assert generated.code.endswith(".select();")
    assert validator.validate(generated.code).valid is True


def test_full_read_query(generator):
    generated = generator.generate(
        "get number, short_description from incident where priority is 1 "
        "order by opened_at desc limit 10"
    )

    assert generated.code == (
        "// get number, short_description from incident where priority is 1 order by opened_at desc limit 10\n"
        "new GlideQuery('incident')\n"
        "  .where('priority', 1)\n"
        "  .orderByDesc('opened_at')\n"
        "  .limit(10)\n"
        "  // Retrieve matching records\n"
        "  .select('number', 'short_description');"
    )
    assert generated.explanation == (
        "Retrieves records from the incident table with 1 filter condition(s), "
        "ordered by opened_at, limited to 10 records."
    )
    assert generated.warnings == []


def test_count_without_comments(generator):
    generated = generator.generate("count incidents where active is true", include_comments=False)

    assert generated.code == "new GlideQuery('incident')\n  .where('active', true)\n  .count();"
    assert generated.warnings == []


def test_count_comment(generator):
    generated = generator.generate("how many problems are there")

    assert "  // Count matching records\n  .count();" in generated.code
    assert "new GlideQuery('problem')" in generated.code


def test_operator_synonyms(generator, validator):
    generated = generator.generate(
        "get incidents where short_description contains 'email', priority <= 2 or state is not 7"
    )

    assert "  .where('short_description', 'CONTAINS', 'email')\n" in generated.code
    assert "  .where('priority', '<=', 2)\n" in generated.code
    assert "  .orWhere('state', '!=', 7)\n" in generated.code
    assert validator.validate(generated.code).valid is True


@pytest.mark.parametrize(
    "condition,expected",
    [
        ("name starts with 'J'", ".where('name', 'STARTSWITH', 'J')"),
        ("email ends with example.com", ".where('email', 'ENDSWITH', 'example.com')"),
        ("name equals Beth", ".where('name', 'Beth')"),
        ("failed_attempts > 3", ".where('failed_attempts', '>', 3)"),
        ("failed_attempts greater than or equal to 3", ".where('failed_attempts', '>=', 3)"),
        ("active is false", ".where('active', false)"),
        ("employee_number is '007'", ".where('employee_number', '007')"),
        ("employee_number is 007", ".where('employee_number', '007')"),
        ("manager is empty", ".whereNull('manager')"),
        ("manager is not empty", ".whereNotNull('manager')"),
        ("title does not contain intern", ".where('title', 'DOES NOT CONTAIN', 'intern')"),
    ],
)
def test_condition_parsing(generator, validator, condition, expected):
    generated = generator.generate(f"get users where {condition}")

    assert expected in generated.code
    assert "new GlideQuery('user')" in generated.code
    assert validator.validate(generated.code).valid is True


def test_null_condition_joined_with_or(generator):
    generated = generator.generate("get incidents where assigned_to is empty or state = 1")

    assert ".whereNull('assigned_to')" in generated.code
    assert ".orWhere('state', 1)" in generated.code


def test_first_condition_never_uses_or(generator):
    intent = generator.parse("get incidents where priority is 1")
    intent.conditions[0].either = True
    assert ".where('priority', 1)" in generator._build(intent, "x", include_comments=False)


def test_string_literals_are_escaped(generator, validator):
    generated = generator.generate(
        "get incidents where short_description is \"it's at http://example.com\"",
        include_comments=False,
    )

    assert "'it\\'s at http:\\/\\/example.com'" in generated.code
    assert "//" not in generated.code
    assert validator.validate(generated.code).valid is True


def test_table_hint_wins(generator):
    generated = generator.generate("get problems from incident", table="u_custom_table")
    assert "new GlideQuery('u_custom_table')" in generated.code


def test_table_hint_is_escaped(generator):
    generated = generator.generate("get records", table="x'y")
    assert "new GlideQuery('x\\'y')" in generated.code


def test_from_clause(generator):
    generated = generator.generate("get name, city from cmn_location where active is true")

    assert "new GlideQuery('cmn_location')" in generated.code
    assert ".select('name', 'city');" in generated.code


def test_from_inside_condition_is_not_a_table(generator):
    generated = generator.generate("get users where location is from Boston")

    assert "new GlideQuery('user')" in generated.code
    assert ".where('location', 'from Boston')" in generated.code


def test_plural_tables(generator):
    assert "new GlideQuery('change_request')" in generator.generate("list change_requests").code
    assert "new GlideQuery('sys_user_group')" in generator.generate("count sys_user_groups").code
    assert "new GlideQuery('user')" in generator.generate("count users").code


def test_table_names_are_kept(generator):
    assert generator.generate("count user", include_comments=False).code == (
        "new GlideQuery('user')\n  .count();"
    )
    assert "new GlideQuery('user')" in generator.generate("get all records from user").code
    assert "new GlideQuery('sys_user')" in generator.generate("get all records from sys_user").code


def test_change_request_phrase(generator):
    generated = generator.generate("list change requests", include_comments=False)

    assert generated.code == "new GlideQuery('change_request')\n  .select();"
    assert generated.warnings == []


@pytest.mark.parametrize(
    "description",
    [
        "list change requests",
        "show recently added incidents",
        "find problems users may modify",
        "get tasks assigned to the change advisory board",
        "show incidents where category is change",
    ],
)
def test_read_phrasings_stay_reads(generator, description):
    generated = generator.generate(description)

    assert ".select(" in generated.code
    assert generated.warnings == []


def test_default_table(generator):
    generated = generator.generate("show everything that is open")
    assert "new GlideQuery('incident')" in generated.code


def test_top_and_order(generator):
    generated = generator.generate("get top 5 problems order by priority")

    assert generated.code.endswith(
        "new GlideQuery('problem')\n"
        "  .orderBy('priority')\n"
        "  .limit(5)\n"
        "  // Retrieve matching records\n"
        "  .select();"
    )


def test_single_record(generator):
    generated = generator.generate("get one incident where number is INC0010001")

    assert ".where('number', 'INC0010001')" in generated.code
    assert ".selectOne();" in generated.code
    assert generated.warnings == []


def test_insert_values(generator, validator):
    generated = generator.generate(
        "create incident with short_description 'Printer down' and priority 2"
    )

    assert ".insert({ short_description: 'Printer down', priority: 2 });" in generated.code
    assert ".where(" not in generated.code
    assert generated.warnings == [WRITE_WARNING]
    assert validator.validate(generated.code).valid is True


def test_insert_placeholder(generator):
    assert ".insert({ /* field: value */ })" in generator.generate("insert incident").code
    assert ".insert({})" in generator.generate("insert incident", include_comments=False).code


def test_update_with_set_clause(generator, validator):
    generated = generator.generate("update incident set state to 2 where number is INC0010001")

    assert ".where('number', 'INC0010001')" in generated.code
    assert ".update({ state: 2 });" in generated.code
    assert generated.warnings == [WRITE_WARNING]
    assert validator.validate(generated.code).valid is True


def test_bulk_update_without_filter(generator):
    generated = generator.generate("update all incidents set active to false")

    assert ".updateMultiple({ active: false });" in generated.code
    assert WRITE_WARNING in generated.warnings
    assert BULK_WARNING in generated.warnings
    assert any("ALL records" in warning for warning in generated.warnings)


def test_delete_with_filter(generator):
    generated = generator.generate("delete incidents where active is false")

    assert ".deleteMultiple();" in generated.code
    assert generated.warnings == [WRITE_WARNING, BULK_WARNING]


def test_aggregate_with_condition(generator, validator):
    generated = generator.generate("average reassignment_count of incidents where active is true")

    assert ".where('active', true)" in generated.code
    assert ".avg('reassignment_count');" in generated.code
    assert generated.explanation.startswith("Computes the average of reassignment_count in the incident table")
    assert validator.validate(generated.code).valid is True


def test_description_comment_is_one_line(generator):
    generated = generator.generate("get incidents\nwhere priority is 1")

    assert generated.code.splitlines()[0] == "// get incidents where priority is 1"


def test_reads_have_no_warnings(generator):
    for description in ("get incidents", "count tasks", "get one user", "maximum priority of problems"):
        assert generator.generate(description).warnings == []


@pytest.mark.parametrize("description", ["", "   "])
def test_empty_description(generator, description):
    with pytest.raises(ValueError, match="Description cannot be empty"):
        generator.generate(description)


def test_get_by_sys_id(generator, validator):
    generated = generator.generate(
        "get incident by sys_id '46d44a5e1b2c3d4e5f60718293a4b5c6'", include_comments=False
    )

    assert generated.code == (
        "new GlideQuery('incident')\n  .get('46d44a5e1b2c3d4e5f60718293a4b5c6');"
    )
    assert generated.warnings == []
    assert validator.validate(generated.code).valid is True


def test_get_by_id_placeholder(generator):
    generated = generator.generate("get a user by id")

    assert "new GlideQuery('user')" in generated.code
    assert "  // Get a record by sys_id" in generated.code
    assert generated.code.endswith("  .get(sys_id);")
    assert generated.explanation == "Retrieves a record by sys_id from the user table."


def test_order_by_id_is_not_a_lookup(generator):
    generated = generator.generate("get incidents ordered by id")

    assert ".get(" not in generated.code
    assert ".orderBy('id')" in generated.code


def test_grouped_aggregate_with_having(generator, validator):
    generated = generator.generate(
        "average reassignment_count of incidents where active is true "
        "grouped by priority having average > 2",
        include_comments=False,
    )

    assert generated.code == (
        "new GlideQuery('incident')\n"
        "  .where('active', true)\n"
        "  .groupBy('priority')\n"
        "  .aggregate('avg', 'reassignment_count')\n"
        "  .having('avg', 'reassignment_count', '>', 2)\n"
        "  .select();"
    )
    assert generated.warnings == []
    assert validator.validate(generated.code).valid is True


def test_grouped_count_having_words(generator, validator):
    generated = generator.generate(
        "count incidents grouped by assignment_group, category having count greater than 5"
    )

    assert ".groupBy('assignment_group', 'category')" in generated.code
    assert ".aggregate('count')" in generated.code
    assert ".having('count', 'sys_id', '>', 5)" in generated.code
    assert "  // Retrieve one row per group\n  .select();" in generated.code
    assert generated.explanation.startswith(
        "Computes record counts grouped by assignment_group, category in the incident table"
    )
    assert validator.validate(generated.code).valid is True


def test_having_with_explicit_field(generator):
    generated = generator.generate(
        "sum of cost grouped by vendor having max cost at least 100", include_comments=False
    )

    assert ".aggregate('sum', 'cost')" in generated.code
    assert ".having('max', 'cost', '>=', 100)" in generated.code


def test_group_by_without_fields_is_plain_aggregate(generator):
    generated = generator.generate("count incidents grouped by", include_comments=False)

    assert generated.code == "new GlideQuery('incident')\n  .count();"


def test_modifiers(generator, validator):
    generated = generator.generate(
        "bulk update incidents where active is false set state to 7 "
        "disable workflow disable auto sys fields force update",
        include_comments=False,
    )

    assert generated.code == (
        "new GlideQuery('incident')\n"
        "  .where('active', false)\n"
        "  .disableWorkflow()\n"
        "  .disableAutoSysFields()\n"
        "  .forceUpdate()\n"
        "  .updateMultiple({ state: 7 });"
    )
    assert validator.validate(generated.code).valid is True


def test_security_modifiers_are_not_conditions(generator):
    generated = generator.generate(
        "get incidents with security filters where priority is 1", include_comments=False
    )

    assert generated.code == (
        "new GlideQuery('incident')\n"
        "  .where('priority', 1)\n"
        "  .withSecurityDataFilters()\n"
        "  .select();"
    )
    assert ".withAcls()" in generator.generate("list problems with acls").code
