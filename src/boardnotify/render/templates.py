"""Compiled-template cache.

Templates are Jinja2 sources keyed by ``(name, language)``.  Each cache
is owned by one engine instance (there is no module-level cache), and a
single lock covers both lookup and insertion.  Compilation happens at
most once per key for the lifetime of the cache, so the coarse lock is
only contended on the first render of each key.

A failed compile is **not** stored: every later lookup with the same key
compiles again until one succeeds.  Compiled templates are immutable and
may be executed concurrently once obtained.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Mapping
from typing import Any

import jinja2
from jinja2.sandbox import SandboxedEnvironment

from boardnotify.errors import TemplateCompileError, TemplateExecutionError
from boardnotify.observability import NoopMetricsHook, get_logger

log = get_logger("boardnotify.templates")


class TemplateCache:
    """Thread-safe cache of compiled Jinja2 templates.

    Parameters
    ----------
    helpers:
        Named formatting helpers bound as Jinja2 filters into the
        namespace of every template compiled by this cache.
    metrics:
        Optional :class:`~boardnotify.observability.MetricsHook`.

    Attributes
    ----------
    compile_count:
        Number of successful compilations.  Equal to ``len(cache)``
        because successful results are never recompiled.
    """

    def __init__(
        self,
        helpers: Mapping[str, Callable[..., Any]] | None = None,
        metrics: Any | None = None,
    ) -> None:
        self._helpers: dict[str, Callable[..., Any]] = dict(helpers or {})
        self._metrics = metrics if metrics is not None else NoopMetricsHook()
        self._templates: dict[tuple[str, str], jinja2.Template] = {}
        self._lock = threading.Lock()
        self.compile_count = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._templates)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._templates

    def _new_environment(self) -> SandboxedEnvironment:
        env = SandboxedEnvironment(
            autoescape=False,
            undefined=jinja2.StrictUndefined,
        )
        env.filters.update(self._helpers)
        return env

    def get_template(self, name: str, language: str, source: str) -> jinja2.Template:
        """Return the compiled template for ``(name, language)``.

        *source* is only compiled on a cache miss; on a hit it is ignored.

        Raises
        ------
        TemplateCompileError
            If *source* cannot be parsed.  Nothing is cached in that case.
        """
        key = (name, language)
        with self._lock:
            template = self._templates.get(key)
            if template is not None:
                return template

            env = self._new_environment()
            try:
                template = env.from_string(source)
            except jinja2.TemplateSyntaxError as exc:
                log.warning(
                    "Template compile failed",
                    extra={
                        "extra_fields": {
                            "op": "get_template",
                            "template": name,
                            "language": language,
                            "error": str(exc),
                        }
                    },
                )
                raise TemplateCompileError(
                    message=f"cannot parse markdown template '{name}&{language}' for notifications: {exc}",
                    context={"template": name, "language": language, "lineno": exc.lineno},
                    cause=exc,
                ) from exc

            self._templates[key] = template
            self.compile_count += 1
            self._metrics.increment(
                "boardnotify.template_compiles_total",
                tags={"template": name, "language": language},
            )
            return template

    def execute(self, template: jinja2.Template, data: Mapping[str, Any]) -> str:
        """Render *template* against *data*.

        Raises
        ------
        TemplateExecutionError
            On any runtime failure, e.g. an attribute missing from *data*.
        """
        try:
            return template.render(data)
        except (jinja2.TemplateError, AttributeError, TypeError, ValueError) as exc:
            raise TemplateExecutionError(
                message=f"cannot render template '{template.name or '<string>'}': {exc}",
                context={"template": template.name},
                cause=exc,
            ) from exc

    def render(self, name: str, language: str, source: str, data: Mapping[str, Any]) -> str:
        """Look up (compiling if needed) and execute a template in one call."""
        return self.execute(self.get_template(name, language, source), data)
