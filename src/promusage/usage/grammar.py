PROMQL_GRAMMAR = r"""
?start: expr

// Binary operations are layered by precedence, lowest first

?expr: or_expr

?or_expr: and_expr
    | or_expr OR bin_modifier? and_expr -> binary

?and_expr: comparison_expr
    | and_expr (AND | UNLESS) bin_modifier? comparison_expr -> binary

?comparison_expr: sum_expr
    | comparison_expr COMPARISON_OP bin_modifier? sum_expr -> binary

?sum_expr: product_expr
    | sum_expr SIGN bin_modifier? product_expr -> binary

?product_expr: unary_expr
    | product_expr (PRODUCT_OP | ATAN2) bin_modifier? unary_expr -> binary

?unary_expr: power_expr
    | SIGN unary_expr -> unary

?power_expr: postfix_expr
    | postfix_expr POWER_OP bin_modifier? unary_expr -> binary

// Range selectors, subqueries and modifiers

?postfix_expr: atom
    | postfix_expr "[" DURATION "]" -> matrix
    | postfix_expr "[" DURATION ":" DURATION? "]" -> subquery
    | postfix_expr OFFSET SIGN? DURATION -> offset
    | postfix_expr "@" at_value -> at

at_value: SIGN? NUMBER
    | NAME "(" ")"

?atom: NUMBER -> number
    | STRING -> string
    | vector_selector
    | call
    | "(" expr ")" -> paren

// Selectors

vector_selector: METRIC_NAME label_matchers?
    | label_matchers

label_matchers: "{" (matcher ("," matcher)* ","?)? "}"
matcher: NAME MATCH_OP STRING

// Functions and aggregations share one shape

call: NAME grouping? "(" (expr ("," expr)*)? ")" grouping?
grouping: (BY | WITHOUT) label_list

// Vector matching

bin_modifier: BOOL
    | BOOL vector_matching
    | vector_matching
vector_matching: (ON | IGNORING) label_list group_modifier?
group_modifier: (GROUP_LEFT | GROUP_RIGHT) label_list?

label_list: "(" (NAME ("," NAME)* ","?)? ")"

// Keywords

BY: /by(?![\w:])/i
WITHOUT: /without(?![\w:])/i
ON: /on(?![\w:])/i
IGNORING: /ignoring(?![\w:])/i
GROUP_LEFT: /group_left(?![\w:])/i
GROUP_RIGHT: /group_right(?![\w:])/i
BOOL: /bool(?![\w:])/i
OFFSET: /offset(?![\w:])/i
AND: /and(?![\w:])/i
OR: /or(?![\w:])/i
UNLESS: /unless(?![\w:])/i
ATAN2: /atan2(?![\w:])/i

// Operators

SIGN: /[+-]/
PRODUCT_OP: /[*\/%]/
POWER_OP: /\^/
COMPARISON_OP: /==|!=|>=|<=|>|</
MATCH_OP: /=~|!~|!=|=/

// Literals

NUMBER: /0[xX][0-9a-fA-F]+|(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?|(?:[iI][nN][fF]|[nN][aA][nN])(?![\w:])/
STRING: /"(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*'|`[^`]*`/
DURATION: /(?:\d+(?:ms|[smhdwy]))+/

METRIC_NAME: /[a-zA-Z_:][a-zA-Z0-9_:]*/
NAME: /[a-zA-Z_][a-zA-Z0-9_]*/

COMMENT: /#[^\n]*/

%import common.WS

%ignore WS
%ignore COMMENT
"""
