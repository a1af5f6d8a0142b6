"""
Conditions for Choice rules.

Conditions render to the JSONPath flavour of Choice rules, for example
``{"Variable": "$.status", "StringEquals": "DONE"}`` or
``{"And": [...]}``. The ``Next`` field is added by the serializer.
"""

from typing import Any, Dict, List


class Condition:
    """
    A boolean test on the state input.

    Build conditions with the factory methods, e.g.
    ``Condition.numeric_greater_than("$.count", 10)``.
    """

    def to_json(self) -> Dict[str, Any]:
        raise NotImplementedError

    # String comparisons

    @staticmethod
    def string_equals(variable: str, value: str) -> "Condition":
        return VariableComparison(variable, "StringEquals", value)

    @staticmethod
    def string_less_than(variable: str, value: str) -> "Condition":
        return VariableComparison(variable, "StringLessThan", value)

    @staticmethod
    def string_less_than_equals(variable: str, value: str) -> "Condition":
        return VariableComparison(variable, "StringLessThanEquals", value)

    @staticmethod
    def string_greater_than(variable: str, value: str) -> "Condition":
        return VariableComparison(variable, "StringGreaterThan", value)

    @staticmethod
    def string_greater_than_equals(variable: str, value: str) -> "Condition":
        return VariableComparison(variable, "StringGreaterThanEquals", value)

    # Numeric comparisons

    @staticmethod
    def numeric_equals(variable: str, value: float) -> "Condition":
        return VariableComparison(variable, "NumericEquals", value)

    @staticmethod
    def numeric_less_than(variable: str, value: float) -> "Condition":
        return VariableComparison(variable, "NumericLessThan", value)

    @staticmethod
    def numeric_less_than_equals(variable: str, value: float) -> "Condition":
        return VariableComparison(variable, "NumericLessThanEquals", value)

    @staticmethod
    def numeric_greater_than(variable: str, value: float) -> "Condition":
        return VariableComparison(variable, "NumericGreaterThan", value)

    @staticmethod
    def numeric_greater_than_equals(variable: str, value: float) -> "Condition":
        return VariableComparison(variable, "NumericGreaterThanEquals", value)

    # Booleans and timestamps

    @staticmethod
    def boolean_equals(variable: str, value: bool) -> "Condition":
        return VariableComparison(variable, "BooleanEquals", value)

    @staticmethod
    def timestamp_equals(variable: str, value: str) -> "Condition":
        return VariableComparison(variable, "TimestampEquals", value)

    @staticmethod
    def timestamp_less_than(variable: str, value: str) -> "Condition":
        return VariableComparison(variable, "TimestampLessThan", value)

    @staticmethod
    def timestamp_less_than_equals(variable: str, value: str) -> "Condition":
        return VariableComparison(variable, "TimestampLessThanEquals", value)

    @staticmethod
    def timestamp_greater_than(variable: str, value: str) -> "Condition":
        return VariableComparison(variable, "TimestampGreaterThan", value)

    @staticmethod
    def timestamp_greater_than_equals(variable: str, value: str) -> "Condition":
        return VariableComparison(variable, "TimestampGreaterThanEquals", value)

    # Type checks

    @staticmethod
    def is_present(variable: str) -> "Condition":
        return VariableComparison(variable, "IsPresent", True)

    @staticmethod
    def is_null(variable: str) -> "Condition":
        return VariableComparison(variable, "IsNull", True)

    # Combinators

    @staticmethod
    def and_(*conditions: "Condition") -> "Condition":
        return CompoundCondition("And", list(conditions))

    @staticmethod
    def or_(*conditions: "Condition") -> "Condition":
        return CompoundCondition("Or", list(conditions))

    @staticmethod
    def not_(condition: "Condition") -> "Condition":
        return NotCondition(condition)


# Operator name -> accepted Python value types
_OPERATOR_VALUE_TYPES = {
    "String": (str,),
    "Numeric": (int, float),
    "Boolean": (bool,),
    "Timestamp": (str,),
    "IsPresent": (bool,),
    "IsNull": (bool,),
}


def _expected_types(operator: str) -> tuple:
    for prefix, types in _OPERATOR_VALUE_TYPES.items():
        if operator.startswith(prefix):
            return types
    raise ValueError(f"Unknown comparison operator: {operator}")


class VariableComparison(Condition):
    """Compare the value at a JSONPath against a literal."""

    def __init__(self, variable: str, operator: str, value: Any):
        if not isinstance(variable, str) or not variable.startswith("$"):
            raise ValueError(f"Variable reference must be a JSONPath starting with '$', got {variable!r}")
        expected = _expected_types(operator)
        # bool is a subclass of int, so numeric comparisons must reject it explicitly
        if not isinstance(value, expected) or (bool not in expected and isinstance(value, bool)):
            raise ValueError(f"{operator} expects a value of type {expected[0].__name__}, got {value!r}")
        self.variable = variable
        self.operator = operator
        self.value = value

    def to_json(self) -> Dict[str, Any]:
        return {"Variable": self.variable, self.operator: self.value}


class CompoundCondition(Condition):
    """``And``/``Or`` over one or more conditions."""

    def __init__(self, operator: str, conditions: List[Condition]):
        if not conditions:
            raise ValueError(f"{operator} condition requires at least one operand")
        self.operator = operator
        self.conditions = conditions

    def to_json(self) -> Dict[str, Any]:
        return {self.operator: [condition.to_json() for condition in self.conditions]}


class NotCondition(Condition):
    """Negation of a single condition."""

    def __init__(self, condition: Condition):
        self.condition = condition

    def to_json(self) -> Dict[str, Any]:
        return {"Not": self.condition.to_json()}
