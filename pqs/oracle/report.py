from dataclasses import dataclass

from jinja2 import Template

from pqs.core.models.core import Scalar

REPORT_TEMPLATE = Template(
    """-- oracle mismatch ({{ dialect }})
{{ query }};
-- expected: {{ predicted }}
-- actual: {{ actual }}
{%- if trace %}
-- expected values by subexpression:
{{ trace }}{% endif %}"""
)


@dataclass(frozen=True)
class MismatchReport:
    query: str
    predicted: Scalar
    actual: Scalar
    trace: str
    dialect: str

    def render(self) -> str:
        return REPORT_TEMPLATE.render(
            dialect=self.dialect,
            query=self.query,
            predicted=self.predicted,
            actual=self.actual,
            trace=self.trace.rstrip("\n"),
        )
