"""Jinja2 templates for generated GORM model files."""

from dataclasses import asdict, dataclass, field
from typing import List

from jinja2 import DictLoader, Environment, StrictUndefined, TemplateError

from ..errors import TemplateRenderError
from .tags import StructField

MODEL_TEMPLATE_NAME = "model.go.j2"

MODEL_TEMPLATE = """package {{ package_name }}
{% if imports %}

{{ imports }}
{% endif %}

// {{ struct_name }} represents the {{ table_name }} table
{% if table_comment %}
// {{ table_comment }}
{% endif %}
type {{ struct_name }} struct {
{% for field in fields %}
\t{{ field.name }} {{ field.type }} `{{ field.tags }}`{{ " " ~ field.comment if field.comment else "" }}
{% endfor %}
}

// TableName returns the table name for GORM
func ({{ struct_name }}) TableName() string {
\treturn {{ table_name | go_quote }}
}
"""


@dataclass
class TemplateData:
    """Everything the model template needs for one table.

    The built-in template renders ``imports`` directly; ``has_time``,
    ``has_json`` and ``has_uuid`` are exposed for custom templates passed
    to TemplateRenderer, e.g. to add helper methods only when a type is used.
    """
    package_name: str
    imports: str
    struct_name: str
    table_name: str
    fields: List[StructField] = field(default_factory=list)
    table_comment: str = ""
    has_time: bool = False
    has_json: bool = False
    has_uuid: bool = False


def go_quote(value: str) -> str:
    """Render ``value`` as an interpreted Go string literal."""
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class TemplateRenderer:
    """Renders model files from TemplateData."""

    def __init__(self, template: str = MODEL_TEMPLATE):
        self._env = Environment(
            loader=DictLoader({MODEL_TEMPLATE_NAME: template}),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        self._env.filters["go_quote"] = go_quote

    def render(self, data: TemplateData) -> str:
        """Render the model template.

        Raises:
            TemplateRenderError: if the template cannot be loaded or rendered.
        """
        try:
            template = self._env.get_template(MODEL_TEMPLATE_NAME)
            context = asdict(data)
            # Keep StructField objects rather than the dicts asdict produced
            context["fields"] = data.fields
            return template.render(**context)
        except TemplateError as e:
            raise TemplateRenderError(
                f"Failed to render model for table {data.table_name}: {e}",
                details={"table": data.table_name, "operation": "render"},
            ) from e
