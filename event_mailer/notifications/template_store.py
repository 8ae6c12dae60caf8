"""Template resolution for email bodies.

Templates are deployment-time HTML resources. They are located through a
Jinja2 loader (packaged templates by default, or a directory override) and
cached process-wide after the first read. Rendering itself is done by
event_mailer.notifications.placeholders.

The table-row partials used by the content generators are ordinary Jinja2
templates under ``email_templates/rows`` and are rendered here by
FragmentRenderer with autoescaping on.
"""

import logging
import threading
from enum import Enum
from pathlib import Path
from typing import Dict, Optional

import jinja2
from jinja2 import BaseLoader, Environment, FileSystemLoader, PackageLoader, StrictUndefined

from .models import GeneratedFragment, MalformedTemplate, TemplateNotFound, TemplateUnreadable

logger = logging.getLogger(__name__)


class TemplateId(str, Enum):
    """Named templates shipped with the mailer."""

    VERIFICATION = "verify-email.html"
    SIGNUP = "signup.html"
    REGISTRATION = "registration.html"
    PAYMENT_UNCONFIRMED = "payment-unconfirmed.html"
    PAYMENT_CONFIRMATION = "payment-confirmation.html"


class TemplateStore:
    """Resolves template identifiers to raw template text.

    The cache is filled lazily (or eagerly via preload()) and never mutated
    afterwards for a given id, so concurrent readers are safe.
    """

    def __init__(
        self,
        templates_dir: Optional[Path] = None,
        loader: Optional[BaseLoader] = None,
    ):
        """Initialize the store.

        Args:
            templates_dir: Directory overriding the packaged templates
            loader: Explicit Jinja2 loader (takes precedence, mainly for tests)
        """
        if loader is None:
            if templates_dir is not None:
                loader = FileSystemLoader(str(templates_dir), encoding="utf-8")
            else:
                loader = PackageLoader("event_mailer.notifications", "email_templates")

        self.loader = loader
        self._env = Environment(loader=loader, autoescape=False)
        self._cache: Dict[str, str] = {}
        self._lock = threading.Lock()

    def resolve(self, template_id) -> str:
        """Return the raw text of a template.

        Args:
            template_id: TemplateId or plain template name

        Raises:
            TemplateNotFound: No resource backs the identifier
            TemplateUnreadable: The resource could not be read or decoded
        """
        name = template_id.value if isinstance(template_id, TemplateId) else str(template_id)

        cached = self._cache.get(name)
        if cached is not None:
            return cached

        with self._lock:
            cached = self._cache.get(name)
            if cached is not None:
                return cached

            try:
                source, filename, _ = self.loader.get_source(self._env, name)
            except jinja2.TemplateNotFound as e:
                raise TemplateNotFound(f"Template not found: {name}") from e
            except (OSError, UnicodeDecodeError) as e:
                raise TemplateUnreadable(f"Template {name} could not be read: {e}") from e

            self._cache[name] = source
            logger.debug(
                f"Loaded template {name}",
                extra={"event": "template.loaded", "template": name, "path": filename},
            )
            return source

    def preload(self) -> None:
        """Load every shipped template, failing fast on a broken deployment."""
        for template_id in TemplateId:
            self.resolve(template_id)

    def is_cached(self, template_id) -> bool:
        name = template_id.value if isinstance(template_id, TemplateId) else str(template_id)
        return name in self._cache


class FragmentRenderer:
    """Renders the packaged row partials into GeneratedFragment values."""

    def __init__(self, loader: Optional[BaseLoader] = None):
        """Initialize the Jinja2 environment for row partials.

        Args:
            loader: Explicit Jinja2 loader (packaged partials if None)
        """
        self.env = Environment(
            loader=loader or PackageLoader("event_mailer.notifications", "email_templates"),
            autoescape=True,
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def render(self, name: str, **context) -> GeneratedFragment:
        """Render ``rows/<name>`` with the given values.

        Raises:
            TemplateNotFound: The partial does not exist
            MalformedTemplate: The partial has a syntax error or uses an
                undefined value
        """
        try:
            template = self.env.get_template(f"rows/{name}")
            return GeneratedFragment(template.render(**context))
        except jinja2.TemplateNotFound as e:
            raise TemplateNotFound(f"Template not found: rows/{name}") from e
        except jinja2.TemplateSyntaxError as e:
            raise MalformedTemplate(f"Invalid partial rows/{name}: {e.message}", e.lineno) from e
        except jinja2.UndefinedError as e:
            raise MalformedTemplate(f"Partial rows/{name} failed to render: {e}") from e


_fragment_renderer: Optional[FragmentRenderer] = None
_fragment_lock = threading.Lock()


def get_fragment_renderer() -> FragmentRenderer:
    """Return the process-wide renderer for packaged row partials."""
    global _fragment_renderer
    if _fragment_renderer is None:
        with _fragment_lock:
            if _fragment_renderer is None:
                _fragment_renderer = FragmentRenderer()
    return _fragment_renderer
