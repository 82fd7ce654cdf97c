"""GlideQuery generation from plain-language descriptions.

QueryGenerator turns a description such as

    "get number, short_description from incident where priority is 1 order by opened_at desc limit 10"

into a GlideQuery skeleton:

    // get number, short_description from incident where priority is 1 order by opened_at desc limit 10
    new GlideQuery('incident')
      .where('priority', 1)
      .orderByDesc('opened_at')
      .limit(10)
      // Retrieve matching records
      .select('number', 'short_description');

Extraction is keyword matching, not language understanding. Whatever it
extracts, the emitted chain has a fixed shape (constructor, filters,
grouping, ordering, limit, modifiers, one terminal call) so the result
always passes StyleValidator without errors.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_TABLE = "incident"

KNOWN_TABLES = (
    "incident",
    "problem",
    "change_request",
    "task",
    "sys_user",
    "sys_user_group",
    "user",
    "cmdb_ci",
    "cmdb_ci_server",
    "cmdb_ci_computer",
    "kb_knowledge",
    "sc_request",
    "sc_req_item",
    "sc_task",
)

# Phrase in a description -> table name; a table name always maps to itself
TABLE_VOCABULARY: dict[str, str] = {}
for _table in KNOWN_TABLES:
    TABLE_VOCABULARY[_table] = _table
    TABLE_VOCABULARY[f"{_table}s"] = _table
TABLE_VOCABULARY["change request"] = "change_request"
TABLE_VOCABULARY["change requests"] = "change_request"

# Longest phrases first so "users" wins over "user"
_TABLE_MENTION = re.compile(
    r"\b("
    + "|".join(p.replace(" ", r"\s+") for p in sorted(TABLE_VOCABULARY, key=len, reverse=True))
    + r")\b",
    re.IGNORECASE,
)

# Checked in order; first match wins
_BULK_KEYWORDS = (
    ("updateMultiple", r"\b(?:bulk update|update multiple|update all)\b"),
    ("deleteMultiple", r"\b(?:bulk delete|delete multiple|delete all)\b"),
    ("insertOrUpdate", r"\b(?:insert or update|upsert)\b"),
)
_COUNT_KEYWORDS = re.compile(r"\b(?:count|how many)\b", re.IGNORECASE)
_AGGREGATE_KEYWORDS = (
    ("avg", r"average|avg"),
    ("sum", r"sum|total"),
    ("min", r"minimum|min"),
    ("max", r"maximum|max"),
)
_AGGREGATE_NAMES = {
    "count": "count",
    "average": "avg",
    "avg": "avg",
    "sum": "sum",
    "total": "sum",
    "minimum": "min",
    "min": "min",
    "maximum": "max",
    "max": "max",
}
_WRITE_KEYWORDS = (
    ("insert", r"\b(?:insert|create)\b"),
    ("update", r"\bupdate\b"),
    ("deleteMultiple", r"\b(?:delete|remove)\b"),
    ("selectOne", r"\b(?:single|one)\b|\bfirst\s+(?:record|match)\b"),
)

# (phrase pattern, method) in emission order
_MODIFIERS = (
    (r"\b(?:disable|without)\s+workflows?\b", "disableWorkflow"),
    (r"\bdisable\s+auto\s+sys\s+fields\b", "disableAutoSysFields"),
    (r"\bforce\s+update\b", "forceUpdate"),
    (r"\bwith\s+acls\b|\bwith\s+security\b(?!\s+(?:data\s+)?filters\b)", "withAcls"),
    (r"\bwith\s+security\s+(?:data\s+)?filters\b", "withSecurityDataFilters"),
)

# Longest phrases first so "is not" wins over "is"
_OPERATOR_SYNONYMS = (
    ("is not empty", "NOT NULL"),
    ("is not null", "NOT NULL"),
    ("is empty", "NULL"),
    ("is null", "NULL"),
    ("does not contain", "DOES NOT CONTAIN"),
    ("not equals", "!="),
    ("is not", "!="),
    ("!=", "!="),
    ("greater than or equal to", ">="),
    ("less than or equal to", "<="),
    ("at least", ">="),
    ("at most", "<="),
    ("greater than", ">"),
    ("more than", ">"),
    ("less than", "<"),
    ("fewer than", "<"),
    (">=", ">="),
    ("<=", "<="),
    (">", ">"),
    ("<", "<"),
    ("starts with", "STARTSWITH"),
    ("ends with", "ENDSWITH"),
    ("contains", "CONTAINS"),
    ("equals", "="),
    ("is", "="),
    ("=", "="),
)
_OPERATOR_WORDS = frozenset(phrase.split()[0] for phrase, _ in _OPERATOR_SYNONYMS if phrase[0].isalpha())
_COMPARISONS = frozenset({"=", "!=", ">", ">=", "<", "<="})

WRITE_OPERATIONS = frozenset({"insert", "update", "updateMultiple", "deleteMultiple", "insertOrUpdate"})
BULK_OPERATIONS = frozenset({"updateMultiple", "deleteMultiple"})
_FILTERED_WRITES = frozenset({"update", "updateMultiple", "deleteMultiple"})
_VALUE_OPERATIONS = frozenset({"insert", "update", "updateMultiple", "insertOrUpdate"})

_OPERATION_COMMENTS = {
    "select": "Retrieve matching records",
    "selectOne": "Retrieve a single record (returns Optional, use .orElse() or .isPresent())",
    "get": "Get a record by sys_id (returns Optional, use .orElse() or .isPresent())",
    "count": "Count matching records",
    "avg": "Average {field} over matching records",
    "sum": "Sum {field} over matching records",
    "min": "Minimum {field} over matching records",
    "max": "Maximum {field} over matching records",
    "aggregate": "Retrieve one row per group",
    "insert": "Insert a new record",
    "update": "Update a single matching record",
    "updateMultiple": "Update all matching records",
    "deleteMultiple": "Delete all matching records",
    "insertOrUpdate": "Insert or update a record (matched on sys_id)",
}

_EXPLANATIONS = {
    "select": "Retrieves records from",
    "selectOne": "Retrieves a single record from",
    "get": "Retrieves a record by sys_id from",
    "count": "Counts records in",
    "avg": "Computes the average of {field} in",
    "sum": "Computes the sum of {field} in",
    "min": "Finds the minimum {field} in",
    "max": "Finds the maximum {field} in",
    "insert": "Inserts a new record into",
    "update": "Updates a single record in",
    "updateMultiple": "Updates all matching records in",
    "deleteMultiple": "Deletes all matching records from",
    "insertOrUpdate": "Inserts or updates a record in",
}

_PLACEHOLDERS = {
    "insertOrUpdate": "{ /* sys_id: id, field: value */ }",
}

_FIELD_STOPWORDS = frozenset(
    {"all", "the", "a", "an", "every", "each", "record", "records", "single", "one", "first", "me"}
)
_NOT_A_FIELD = _FIELD_STOPWORDS | {
    "to", "by", "for", "from", "in", "into", "of", "per", "where", "with", "whose",
}

_IDENTIFIER = re.compile(r"[A-Za-z_$][\w$]*")
_NAME = re.compile(r"[A-Za-z_]\w*")
_QUOTED = re.compile(r"'[^']*'|\"[^\"]*\"")
_CLAUSE_SEPARATOR = re.compile(r"(\s*,\s*(?:and\s+|or\s+)?|\s+and\s+|\s+or\s+)", re.IGNORECASE)
_CONDITIONS_START = re.compile(r"\b(?:where|whose|with)\b", re.IGNORECASE)
_CONDITIONS_END = re.compile(
    r"\b(?:order(?:ed)?\s+by|sort(?:ed)?\s+by|group(?:ed)?\s+by|having\b|limit(?:ed)?\b"
    r"|top\s+\d|first\s+\d|set\s+[A-Za-z_]\w*\s*(?:=|\s(?:to|as)\b))",
    re.IGNORECASE,
)
_CLAUSE_END = r"(?=\s+(?:where|whose|having|order(?:ed)?\s+by|sort(?:ed)?\s+by|limit(?:ed)?|top|first)\b|$)"
_SET_CLAUSE = re.compile(r"\bset\s+(.+?)(?=\s+(?:where|whose)\b|$)", re.IGNORECASE)
_ASSIGNMENT = re.compile(r"([A-Za-z_]\w*)\s+(?:to|=|as)\s+(.+)$", re.IGNORECASE)
_ORDER_BY = re.compile(
    r"\b(?:order(?:ed)?|sort(?:ed)?)\s+by\s+([A-Za-z_][\w.]*)(?:\s+(asc(?:ending)?|desc(?:ending)?))?",
    re.IGNORECASE,
)
_LIMIT = re.compile(r"\b(?:limit(?:ed)?(?:\s+to)?|first|top)\s+(\d+)\b", re.IGNORECASE)
_FIELD_LIST = re.compile(
    r"\b(?:get|select|fetch|show|list|retrieve|find|return)\s+"
    r"((?:(?!\b(?:where|whose|with)\b).)+?)\s+from\b",
    re.IGNORECASE,
)
_FROM_CLAUSE = re.compile(r"\b(?:from|into)\s+", re.IGNORECASE)
_GET_BY_ID = re.compile(
    r"\b(?:get|fetch|find|retrieve|show|look\s*up)\b"
    r"(?:(?!\b(?:order(?:ed)?|sort(?:ed)?|group(?:ed)?)\s+by\b).)*?"
    r"\bby\s+(?:sys_)?id\b",
    re.IGNORECASE,
)
_RECORD_ID = re.compile(
    r"\bby\s+(?:sys_)?id\s+(?:of\s+)?('[^']*'|\"[^\"]*\"|[0-9a-f]{32})(?!\w)", re.IGNORECASE
)
_GROUP_BY = re.compile(r"\bgroup(?:ed)?\s+by\s+(.+?)" + _CLAUSE_END, re.IGNORECASE)
_HAVING = re.compile(
    r"\bhaving\s+(" + "|".join(_AGGREGATE_NAMES) + r")\s+(?:of\s+)?(.+?)"
    r"(?=\s+(?:order(?:ed)?\s+by|sort(?:ed)?\s+by|limit(?:ed)?|top|first)\b|$)",
    re.IGNORECASE,
)
_NUMBER = re.compile(r"-?(?:0|[1-9]\d*)(?:\.\d+)?")


@dataclass(frozen=True)
class GeneratedCode:
    """Output of QueryGenerator.generate().

    Attributes:
        code: GlideQuery script
        explanation: One-sentence summary of what the script does
        warnings: Notes about write and bulk operations (empty for reads)
    """

    code: str
    explanation: str
    warnings: list[str] = field(default_factory=list)


@dataclass
class Condition:
    """A single filter extracted from a description.

    operator is a GlideQuery operator, or NULL / NOT NULL for emptiness
    checks. either marks a condition joined with "or".
    """

    field: str
    operator: str
    value: Any = None
    either: bool = False


@dataclass
class HavingClause:
    """Filter on an aggregate value, emitted as .having(aggregate, field, operator, value)."""

    aggregate: str
    field: str
    operator: str
    value: Any


@dataclass
class QueryIntent:
    """Everything extracted from a description before emission.

    operation is a terminal method name, or "aggregate" for a grouped
    aggregate, which is emitted as groupBy()/aggregate() followed by select().
    """

    operation: str
    table: str
    conditions: list[Condition] = field(default_factory=list)
    assignments: list[tuple[str, Any]] = field(default_factory=list)
    fields: list[str] = field(default_factory=list)
    order_by: list[tuple[str, bool]] = field(default_factory=list)
    limit: int | None = None
    aggregate_type: str | None = None
    aggregate_field: str | None = None
    group_by: list[str] = field(default_factory=list)
    having: HavingClause | None = None
    record_id: str | None = None
    modifiers: list[str] = field(default_factory=list)


class QueryGenerator:
    """Generates GlideQuery scripts from plain-language descriptions.

    Example:
        >>> generated = QueryGenerator().generate("count incidents where active is true")
        >>> print(generated.code)
        // count incidents where active is true
        new GlideQuery('incident')
          .where('active', true)
          // Count matching records
          .count();
    """

    def generate(
        self,
        description: str,
        table: str | None = None,
        include_comments: bool = True,
    ) -> GeneratedCode:
        """Generate a script for a description.

        Args:
            description: What the query should do
            table: Table name; overrides any table named in the description
            include_comments: Emit a description comment and an
                operation comment before the terminal call

        Returns:
            GeneratedCode with the script, an explanation and warnings

        Raises:
            ValueError: If the description is empty
        """
        if not description or not description.strip():
            raise ValueError("Description cannot be empty")

        intent = self.parse(description, table)
        code = self._build(intent, description, include_comments)
        warnings = self._collect_warnings(intent)

        logger.info(
            f"Generated {intent.operation} query on {intent.table} with "
            f"{len(intent.conditions)} condition(s) and {len(warnings)} warning(s)"
        )
        return GeneratedCode(code=code, explanation=self._explain(intent), warnings=warnings)

    def parse(self, description: str, table: str | None = None) -> QueryIntent:
        """Extract the operation, table and clauses from a description."""
        operation, aggregate_field = _extract_operation(description)
        modifiers = [
            method for pattern, method in _MODIFIERS if re.search(pattern, description, re.IGNORECASE)
        ]
        # Modifier phrases ("with acls") must not read as conditions
        text = description
        for pattern, _ in _MODIFIERS:
            text = re.sub(pattern, " ", text, flags=re.IGNORECASE)

        intent = QueryIntent(
            operation=operation,
            table=table.strip() if table and table.strip() else _extract_table(text),
            aggregate_field=aggregate_field,
            modifiers=modifiers,
        )

        if operation == "get":
            intent.record_id = _extract_record_id(text)
            logger.debug(f"Parsed description into {intent}")
            return intent

        conditions = _extract_conditions(text)
        if operation in ("insert", "insertOrUpdate"):
            # Inserts have no filter; "with x = y" clauses become values
            intent.assignments = [(c.field, c.value) for c in conditions if c.operator == "="]
        else:
            intent.conditions = conditions

        if operation in _VALUE_OPERATIONS:
            intent.assignments.extend(_extract_assignments(text))

        if operation == "aggregate":
            intent.aggregate_type, intent.aggregate_field = _match_aggregate(text) or ("count", None)
            intent.group_by = _extract_group_by(text)
            if intent.group_by:
                intent.having = _extract_having(text, intent)
            else:
                # "grouped by" with nothing to group on is a plain aggregate
                intent.operation = intent.aggregate_type

        if operation in ("select", "selectOne"):
            intent.fields = _extract_fields(text)
            intent.order_by = [
                (m.group(1), (m.group(2) or "").lower().startswith("desc"))
                for m in _ORDER_BY.finditer(text)
            ]
        if operation == "select":
            match = _LIMIT.search(text)
            if match and int(match.group(1)) > 0:
                intent.limit = int(match.group(1))

        logger.debug(f"Parsed description into {intent}")
        return intent

    def _build(self, intent: QueryIntent, description: str, include_comments: bool) -> str:
        lines = []
        if include_comments:
            lines.append(f"// {' '.join(description.split())}")

        lines.append(f"new GlideQuery({_quote(intent.table)})")

        for index, condition in enumerate(intent.conditions):
            lines.append(f"  {_condition_call(condition, first=index == 0)}")

        if intent.operation == "aggregate":
            lines.append(f"  .groupBy({', '.join(_quote(name) for name in intent.group_by)})")
            arguments = [_quote(intent.aggregate_type)]
            if intent.aggregate_field:
                arguments.append(_quote(intent.aggregate_field))
            lines.append(f"  .aggregate({', '.join(arguments)})")
            if intent.having:
                lines.append(f"  {_having_call(intent.having)}")

        for field_name, descending in intent.order_by:
            method = "orderByDesc" if descending else "orderBy"
            lines.append(f"  .{method}({_quote(field_name)})")

        if intent.limit:
            lines.append(f"  .limit({intent.limit})")

        for method in intent.modifiers:
            lines.append(f"  .{method}()")

        if include_comments:
            comment = _OPERATION_COMMENTS[intent.operation].format(field=intent.aggregate_field)
            lines.append(f"  // {comment}")

        lines.append(f"  {_terminal_call(intent, include_comments)};")
        return "\n".join(lines)

    def _explain(self, intent: QueryIntent) -> str:
        if intent.operation == "aggregate":
            measure = (
                f"the {intent.aggregate_type} of {intent.aggregate_field}"
                if intent.aggregate_field
                else "record counts"
            )
            action = f"Computes {measure} grouped by {', '.join(intent.group_by)} in"
        else:
            action = _EXPLANATIONS[intent.operation].format(field=intent.aggregate_field)

        explanation = f"{action} the {intent.table} table"
        if intent.conditions:
            explanation += f" with {len(intent.conditions)} filter condition(s)"
        if intent.having:
            having = intent.having
            explanation += f", keeping groups where {having.aggregate} {having.operator} {having.value}"
        if intent.order_by:
            explanation += f", ordered by {', '.join(name for name, _ in intent.order_by)}"
        if intent.limit:
            explanation += f", limited to {intent.limit} records"
        return explanation + "."

    def _collect_warnings(self, intent: QueryIntent) -> list[str]:
        warnings = []
        if intent.operation in WRITE_OPERATIONS:
            warnings.append("This is a write operation that modifies data in the database")
        if intent.operation in BULK_OPERATIONS:
            warnings.append("This is a bulk operation that affects multiple records")
        if intent.operation in _FILTERED_WRITES and not intent.conditions:
            warnings.append(
                "No filter conditions specified - this will affect ALL records in the table"
            )
        return warnings


def _match_aggregate(description: str) -> tuple[str, str | None] | None:
    """Return (aggregate, field) for "count" or "<aggregate> [of] <field>"."""
    if _COUNT_KEYWORDS.search(description):
        return "count", None
    for operation, keywords in _AGGREGATE_KEYWORDS:
        match = re.search(
            rf"\b(?:{keywords})\s+(?:of\s+)?(?:the\s+)?([A-Za-z_]\w*)", description, re.IGNORECASE
        )
        if match:
            candidate = match.group(1).lower()
            if candidate not in TABLE_VOCABULARY and candidate not in _NOT_A_FIELD:
                return operation, match.group(1)
    return None


def _extract_operation(description: str) -> tuple[str, str | None]:
    """Return the terminal operation and, for aggregates, the field."""
    if _GET_BY_ID.search(description):
        return "get", None

    for operation, pattern in _BULK_KEYWORDS:
        if re.search(pattern, description, re.IGNORECASE):
            return operation, None

    # Before count, so "count incidents grouped by priority" is one row per group
    if re.search(r"\bgroup(?:ed)?\s+by\b", description, re.IGNORECASE):
        return "aggregate", None

    aggregate = _match_aggregate(description)
    if aggregate:
        return aggregate

    for operation, pattern in _WRITE_KEYWORDS:
        if re.search(pattern, description, re.IGNORECASE):
            return operation, None

    return "select", None


def _table_for(phrase: str) -> str:
    return TABLE_VOCABULARY[" ".join(phrase.lower().split())]


def _extract_table(description: str) -> str:
    # "from" inside a filter ("caller is from HR") is a value, not a table
    start = _CONDITIONS_START.search(description)
    head = description[: start.start()] if start else description

    source = _FROM_CLAUSE.search(head)
    if source:
        mention = _TABLE_MENTION.match(head, source.end())
        if mention:
            return _table_for(mention.group(1))
        name = _NAME.match(head, source.end())
        if name:
            return name.group(0)

    mention = _TABLE_MENTION.search(description)
    if mention:
        return _table_for(mention.group(1))

    return DEFAULT_TABLE


def _extract_record_id(description: str) -> str | None:
    match = _RECORD_ID.search(description)
    if not match:
        return None
    value = match.group(1)
    return value[1:-1] if value[0] in "'\"" else value


def _split_clauses(text: str) -> list[tuple[str, bool]]:
    """Split on commas, "and" and "or", leaving quoted values intact.

    Returns (clause, joined_with_or) pairs.
    """
    stash: list[str] = []

    def hide(match: re.Match) -> str:
        stash.append(match.group(0))
        return f"\x00{len(stash) - 1}\x00"

    def restore(value: str) -> str:
        return re.sub(r"\x00(\d+)\x00", lambda m: stash[int(m.group(1))], value)

    parts = _CLAUSE_SEPARATOR.split(_QUOTED.sub(hide, text))
    clauses = []
    either = False
    for index, part in enumerate(parts):
        if index % 2:
            either = bool(re.search(r"\bor\b", part, re.IGNORECASE))
            continue
        part = part.strip()
        if part:
            clauses.append((restore(part), either))
    return clauses


def _extract_conditions(description: str) -> list[Condition]:
    start = _CONDITIONS_START.search(description)
    if not start:
        return []

    text = description[start.end():]
    end = _CONDITIONS_END.search(text)
    if end:
        text = text[: end.start()]

    conditions = []
    for clause, either in _split_clauses(text):
        condition = _parse_condition(clause, either)
        if condition is None:
            logger.debug(f"Skipping unrecognized condition: {clause!r}")
            continue
        conditions.append(condition)
    return conditions


def _parse_condition(clause: str, either: bool) -> Condition | None:
    match = re.match(r"([A-Za-z_]\w*(?:\.\w+)*)\s*(.*)$", clause, re.DOTALL)
    if not match:
        return None
    field_name, rest = match.group(1), match.group(2).strip()
    lowered = rest.lower()

    for phrase, operator in _OPERATOR_SYNONYMS:
        if not lowered.startswith(phrase):
            continue
        tail = rest[len(phrase):]
        if phrase[-1].isalpha() and tail and not tail[0].isspace():
            continue
        value = tail.strip()
        if operator in ("NULL", "NOT NULL"):
            if value:
                continue
            return Condition(field_name, operator, either=either)
        if not value:
            return None
        return Condition(field_name, operator, _parse_value(value), either=either)

    # "priority 1" and "short_description 'Printer down'" read as equality
    if rest and (len(rest.split()) == 1 or _QUOTED.fullmatch(rest)):
        return Condition(field_name, "=", _parse_value(rest), either=either)
    return None


def _extract_assignments(description: str) -> list[tuple[str, Any]]:
    match = _SET_CLAUSE.search(description)
    if not match:
        return []
    assignments = []
    for clause, _ in _split_clauses(match.group(1)):
        pair = _ASSIGNMENT.match(clause)
        if pair:
            assignments.append((pair.group(1), _parse_value(pair.group(2))))
    return assignments


def _field_names(text: str, skip: frozenset[str]) -> list[str]:
    names = []
    for clause, _ in _split_clauses(text):
        for token in re.findall(r"[A-Za-z_][\w.]*", clause):
            lowered = token.lower()
            if lowered in skip or lowered in TABLE_VOCABULARY or token in names:
                continue
            names.append(token)
    return names


def _extract_fields(description: str) -> list[str]:
    match = _FIELD_LIST.search(description)
    if not match:
        return []
    return _field_names(match.group(1), _FIELD_STOPWORDS)


def _extract_group_by(description: str) -> list[str]:
    match = _GROUP_BY.search(description)
    if not match:
        return []
    return _field_names(match.group(1), _NOT_A_FIELD)


def _extract_having(description: str, intent: QueryIntent) -> HavingClause | None:
    """Parse "having <aggregate> [of] [field] <operator> <value>".

    Without a field, the grouped aggregate's own field is used (sys_id for
    counts). Only comparison operators are accepted.
    """
    match = _HAVING.search(description)
    if not match:
        return None
    aggregate = _AGGREGATE_NAMES[match.group(1).lower()]
    tail = match.group(2).strip()

    words = tail.split(maxsplit=1)
    if len(words) == 2 and _NAME.fullmatch(words[0]) and words[0].lower() not in _OPERATOR_WORDS:
        clause = tail
    else:
        default = intent.aggregate_field if aggregate == intent.aggregate_type else None
        clause = f"{default or 'sys_id'} {tail}"

    condition = _parse_condition(clause, either=False)
    if condition is None or condition.operator not in _COMPARISONS:
        logger.debug(f"Skipping unrecognized having clause: {tail!r}")
        return None
    return HavingClause(aggregate, condition.field, condition.operator, condition.value)


def _parse_value(raw: str) -> Any:
    raw = raw.strip()
    if len(raw) >= 2 and raw[0] == raw[-1] and raw[0] in "'\"":
        return raw[1:-1]
    if raw.lower() in ("true", "false"):
        return raw.lower() == "true"
    if _NUMBER.fullmatch(raw):
        return float(raw) if "." in raw else int(raw)
    return raw


def _quote(value: str) -> str:
    """Single-quoted script literal.

    Forward slashes are escaped too, so a literal never contains "//".
    """
    escaped = (
        value.replace("\\", "\\\\")
        .replace("'", "\\'")
        .replace("/", "\\/")
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )
    return f"'{escaped}'"


def _literal(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return _quote(str(value))


def _condition_call(condition: Condition, first: bool) -> str:
    prefix = "orW" if condition.either and not first else "w"
    column = _quote(condition.field)
    if condition.operator == "NULL":
        return f".{prefix}hereNull({column})"
    if condition.operator == "NOT NULL":
        return f".{prefix}hereNotNull({column})"
    if condition.operator == "=":
        return f".{prefix}here({column}, {_literal(condition.value)})"
    return f".{prefix}here({column}, {_quote(condition.operator)}, {_literal(condition.value)})"


def _having_call(having: HavingClause) -> str:
    return (
        f".having({_quote(having.aggregate)}, {_quote(having.field)}, "
        f"{_quote(having.operator)}, {_literal(having.value)})"
    )


def _terminal_call(intent: QueryIntent, include_comments: bool) -> str:
    operation = intent.operation

    if operation in ("select", "selectOne"):
        return f".{operation}({', '.join(_quote(name) for name in intent.fields)})"
    if operation == "aggregate":
        return ".select()"
    if operation == "get":
        return f".get({_quote(intent.record_id) if intent.record_id else 'sys_id'})"
    if operation == "count":
        return ".count()"
    if operation in ("avg", "sum", "min", "max"):
        return f".{operation}({_quote(intent.aggregate_field or 'sys_id')})"
    if operation == "deleteMultiple":
        return ".deleteMultiple()"

    if intent.assignments:
        pairs = ", ".join(
            f"{name if _IDENTIFIER.fullmatch(name) else _quote(name)}: {_literal(value)}"
            for name, value in intent.assignments
        )
        body = f"{{ {pairs} }}"
    elif include_comments:
        body = _PLACEHOLDERS.get(operation, "{ /* field: value */ }")
    else:
        body = "{}"
    return f".{operation}({body})"
