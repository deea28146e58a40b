"""Render XState scaffolding for a single *.proto file.

The template walks the descriptor model directly. Naming helpers are registered as
Jinja filters, so the output model is materialized inline while rendering.
"""

from __future__ import annotations

import logging

import jinja2

from protoc_gen_xstate import helper, proto_types
from protoc_gen_xstate.descriptor import File

logger = logging.getLogger(__name__)

XSTATE_TEMPLATE = """
{% set package = file.package %}
{{ transport_import }}
{%- if file | has_stream %}
{{ stream_import }}{% endif %}
import {
  {% for service in file.services -%}
  {{ service.name }},
  {%- for method in service.methods %}
  {{ method | request_type }},
  {{ method | response_type }},
  {%- endfor %}{% endfor %}
} from "./{{ file | module_name(import_suffix) }}"

{% for service in file.services %}{% for method in service.methods -%}
export interface {{ method | event_type }} {
    type: "{{ method | discriminant(package) }}",
    data: {{ method | request_type }},
    metadata?: grpc.Metadata,
}
{% endfor %}{%- endfor %}
{%- for service in file.services %}
export type {{ service | service_event_type }} =
{% for name in service | event_types %}  | {{ name }}
{% endfor -%}
{% endfor -%}
{% set services = file.services | map(attribute="name") | list %}
export type {{ event_prefix }} = {{ services | join_union }}
{% for service in file.services %}
export interface {{ service.name }}StateChartContext {
  service: {{ service.name }}
}

export const {{ service.name }}StateChartServices = {
{%- for method in service.methods %}
  {{ method.name }}: <TContext>(
    ctx: TContext & {{ service.name }}StateChartContext,
    ev: {{ method | event_type }},
  ): {{ method | return_type }}<{{ method | response_type }}> => {
    return ctx.service.{{ method.name }}(ev.data, ev.metadata)
  },{% endfor %}
}
{% endfor %}
"""


def new_environment() -> jinja2.Environment:
    """Create the template environment with all naming helpers registered.

    Returns:
        jinja2.Environment: The environment.
    """
    env = jinja2.Environment(
        undefined=jinja2.StrictUndefined,
        keep_trailing_newline=True,
        autoescape=False,
    )
    env.filters.update(
        {
            "event_type": helper.event_type,
            "event_types": helper.event_types,
            "service_event_type": helper.service_event_type,
            "request_type": helper.request_type,
            "response_type": helper.response_type,
            "return_type": helper.return_type,
            "has_stream": helper.has_stream,
            "discriminant": lambda method, package: helper.discriminant(package, method),
            "module_name": helper.module_name,
            "join_union": helper.join_union,
        }
    )
    env.globals.update(
        {
            "transport_import": proto_types.TRANSPORT_IMPORT,
            "stream_import": proto_types.STREAM_IMPORT,
            "event_prefix": proto_types.EVENT_PREFIX,
        }
    )
    return env


class Writer:
    """A class that renders the XState module of a file."""

    def __init__(self, import_suffix: str = "", source: str = XSTATE_TEMPLATE):
        """Compile the template.

        A malformed template raises here, before any file is rendered.

        Args:
            import_suffix (str, optional): Appended to the base module name in the import statement.
                Defaults to "".
            source (str, optional): The template source. Defaults to `XSTATE_TEMPLATE`.

        Raises:
            jinja2.TemplateSyntaxError: If the template source is malformed.
        """
        self._import_suffix = import_suffix
        self._template = new_environment().from_string(source)

    def dumps(self, file: File) -> str:
        """Render the XState module for a file.

        Args:
            file (File): The file to render.

        Returns:
            str: The generated TypeScript source.
        """
        logger.debug("Rendering '%s' with %d service(s).", file.name, len(file.services))
        return self._template.render(file=file, import_suffix=self._import_suffix)
