"""Core output dispatcher.

Exactly one rendering is produced per command: raw JSON, JSON filtered by
``jq``, the JSON Schema of the output shape, or plain text.
"""

import json
import sys

from slackcli.exceptions import FilterError
from slackcli.jq import run_jq
from slackcli.types import json_schema


def pretty_print(data):
    print(json.dumps(data, indent=2, ensure_ascii=False))


def emit_schema(shape):
    """Print the JSON Schema of an output shape."""
    pretty_print(json_schema(shape))


def render(data, shape=None, fmt="json", formatter=None, jq_expr=None):
    """Output *data* in the requested format.

    ``schema`` ignores *data*; commands normally short-circuit before fetching
    anything. A failing jq filter raises FilterError carrying the schema of
    *shape* so the error can show what the filter should have targeted.
    """
    if fmt == "schema":
        emit_schema(shape)
        return
    if fmt == "pretty" and formatter:
        print(formatter(data))
        return
    if jq_expr:
        try:
            out = run_jq(data, jq_expr)
        except FilterError as e:
            raise FilterError(str(e), shape=json_schema(shape) if shape else None) from e
        sys.stdout.write(out)
        return
    pretty_print(data)
