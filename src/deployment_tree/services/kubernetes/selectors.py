"""Label selector conversion.

Turns a ``V1LabelSelector`` into the string form accepted by the
``label_selector`` argument of list calls, with the same rules the API server
applies to ``metav1.LabelSelector``.
"""

from __future__ import annotations

from typing import Any

from deployment_tree.integrations.kubernetes.exceptions import KubernetesSelectorError

_SET_OPERATORS = {"In": "in", "NotIn": "notin"}
_EXISTENCE_OPERATORS = {"Exists": "", "DoesNotExist": "!"}


def selector_to_string(selector: Any) -> str:
    """Convert a label selector object to its string form.

    Requirements are sorted by key, and set values are sorted, so the same
    selector always yields the same string. An empty selector matches
    everything and yields ``""``.

    Args:
        selector: A ``V1LabelSelector`` (or anything with ``match_labels``
            and ``match_expressions`` attributes).

    Returns:
        Selector string, e.g. ``"app=web,tier in (backend,frontend)"``.

    Raises:
        KubernetesSelectorError: If the selector is missing or malformed.
    """
    if selector is None:
        raise KubernetesSelectorError("Deployment has no pod selector", field="selector")

    requirements: list[tuple[str, str]] = []

    for key, value in (getattr(selector, "match_labels", None) or {}).items():
        if not key:
            raise KubernetesSelectorError("matchLabels key must not be empty", field="matchLabels")
        requirements.append((key, f"{key}={value or ''}"))

    for index, expr in enumerate(getattr(selector, "match_expressions", None) or []):
        field = f"matchExpressions[{index}]"
        key = getattr(expr, "key", None)
        operator = getattr(expr, "operator", None)
        values = list(getattr(expr, "values", None) or [])

        if not key:
            raise KubernetesSelectorError(f"{field}: key must not be empty", field=field)

        if operator in _SET_OPERATORS:
            if not values:
                raise KubernetesSelectorError(
                    f"{field}: operator {operator} requires at least one value", field=field
                )
            joined = ",".join(sorted(values))
            requirements.append((key, f"{key} {_SET_OPERATORS[operator]} ({joined})"))
        elif operator in _EXISTENCE_OPERATORS:
            if values:
                raise KubernetesSelectorError(
                    f"{field}: operator {operator} does not take values", field=field
                )
            requirements.append((key, f"{_EXISTENCE_OPERATORS[operator]}{key}"))
        else:
            raise KubernetesSelectorError(
                f"{field}: {operator!r} is not a valid label selector operator", field=field
            )

    requirements.sort(key=lambda item: item[0])
    return ",".join(text for _, text in requirements)
