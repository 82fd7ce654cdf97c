"""Pattern definitions for GlideQuery script scanning.

This module holds the tables shared by the security validator, the style
linter, the executor and the generator. Keeping them in one place means the
generator can only emit method names and operators that the linter accepts.
"""

# Blacklisted constructs (regex source, construct name)
# Matched case-insensitively and in multi-line mode by SecurityValidator
BLACKLISTED_PATTERNS = (
    (r"\bgs\.executeNow\s*\(", "gs.executeNow()"),
    (r"\bgs\.eval\s*\(", "gs.eval()"),
    (r"(?<!\.)\beval\s*\(", "eval()"),
    (r"(?-i:\bFunction)\s*\(", "Function constructor"),
    (r"\bGlideRecord\s*\(", "GlideRecord (legacy record API)"),
    (r"\bGlideSysAttachment\b", "GlideSysAttachment"),
    (r"\bGlideScriptedProcessor\b", "GlideScriptedProcessor"),
    (r"\bXMLDocument\b", "XMLDocument"),
    (r"\bSOAPMessage(?:V2)?\b", "SOAPMessage"),
    (r"\bRESTMessageV2\b", "RESTMessageV2"),
    (r"\bGlideHTTPRequest\b", "GlideHTTPRequest"),
    (r"\brequire\s*\(", "require()"),
    (r"^\s*import\s+", "import statement"),
    (r"\.readLine\s*\(", "readLine() file access"),
    (r"\.write\s*\(", "write() file access"),
    (r"\.getFile\s*\(", "getFile() file access"),
    (r"\.setFile\s*\(", "setFile() file access"),
    (r"\bfs\.", "fs module"),
)

# Bulk/destructive methods surfaced for confirmation, never blocked
DANGEROUS_OPERATIONS = (
    "deleteMultiple",
    "updateMultiple",
    "disableWorkflow",
    "disableAutoSysFields",
    "forceUpdate",
)

# Write methods reported as warnings in test mode
WRITE_OPERATIONS = (
    "insert",
    "update",
    "updateMultiple",
    "deleteMultiple",
    "insertOrUpdate",
)

# Methods GlideQuery does not have, with the replacement to suggest
UNDEFINED_METHODS = (
    ("selectAll", "Use .select() instead"),
    ("findOne", "Use .selectOne() or .get() instead"),
    ("find", "Use .select() instead"),
    ("query", "Use .select() instead (GlideQuery does not have .query())"),
    ("addQuery", "Use .where() instead (GlideQuery method)"),
    ("addEncodedQuery", "Use GlideQuery.parse() instead"),
    ("next", "Use .forEach() or .toArray() on Stream results instead"),
    ("getValue", "Use direct field access (e.g., record.field) instead"),
    ("setValue", "Use .update() or .insert() with object syntax instead"),
)

# Chain-ending calls; a second one in the same chain is an error
TERMINAL_OPERATIONS = frozenset({
    "select",
    "selectOne",
    "get",
    "getBy",
    "insert",
    "update",
    "updateMultiple",
    "insertOrUpdate",
    "deleteMultiple",
    "count",
    "avg",
    "sum",
    "min",
    "max",
})

# Terminals returning an Optional, which may be unwrapped with .get()
OPTIONAL_OPERATIONS = frozenset({"selectOne", "get", "getBy"})

VALID_METHODS = (
    "where", "orWhere", "whereNull", "whereNotNull", "orWhereNull", "orWhereNotNull",
    "select", "selectOne", "get", "getBy",
    "insert", "update", "updateMultiple", "insertOrUpdate", "deleteMultiple",
    "orderBy", "orderByDesc", "limit",
    "disableWorkflow", "disableAutoSysFields", "forceUpdate", "withAcls",
    "withSecurityDataFilters",
    "count", "avg", "sum", "min", "max", "aggregate", "groupBy", "having",
    "toGlideRecord", "parse",
    "forEach", "map", "filter", "reduce", "toArray", "skip",
    "orElse", "isPresent", "flatMap",
)

VALID_OPERATORS = (
    "=", "!=", ">", ">=", "<", "<=",
    "IN", "NOT IN", "STARTSWITH", "ENDSWITH", "CONTAINS", "DOES NOT CONTAIN",
    "INSTANCEOF", "SAMEAS", "NSAMEAS", "GT_FIELD", "LT_FIELD",
    "GT_OR_EQUALS_FIELD", "LT_OR_EQUALS_FIELD", "BETWEEN",
    "DYNAMIC", "EMPTYSTRING", "ANYTHING", "LIKE", "NOT LIKE", "ON",
)

VALID_FIELD_FLAGS = ("$DISPLAY", "$CURRENCY_CODE", "$CURRENCY_DISPLAY", "$CURRENCY_STRING")
