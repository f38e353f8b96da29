"""
Python Template Engine for USOS API Client Generation

This module uses Jinja2 templates to generate Python client modules
from USOS API method references.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Any, Final

from jinja2 import Environment, FileSystemLoader, select_autoescape

from usos_codegen.generator.filters import FILTERS
from usos_codegen.reference import MethodReference, SignatureRequirement
from usos_codegen.utils.string_case import pascalcase, python_identifier, snakecase

logger = logging.getLogger(__name__)

DEFAULT_PACKAGE_NAME: Final = "usos_api"
ENDPOINT_TEMPLATE: Final = "endpoint.py.j2"
PACKAGE_INIT_TEMPLATE: Final = "package_init.py.j2"


class GeneratedItems(str, Enum):
    """Which items are generated for every method."""

    STRUCTS = "structs"
    FUNCTIONS = "functions"
    BOTH = "both"

    def __str__(self) -> str:
        return self.value

    @property
    def includes_structs(self) -> bool:
        return self is not GeneratedItems.FUNCTIONS

    @property
    def includes_functions(self) -> bool:
        return self is not GeneratedItems.STRUCTS


class ImportAnalyzer:
    """Determines the imports a generated module needs."""

    @staticmethod
    def get_import_groups(reference: MethodReference, items: GeneratedItems) -> list[list[str]]:
        """Import lines grouped as standard library, then ``usos_core``."""
        stdlib = []
        if items.includes_structs:
            stdlib.append("from dataclasses import dataclass")
        stdlib.append("from typing import Any")

        local = []
        if items.includes_functions:
            auth = reference.auth_options
            if auth.signed and auth.accepts_token:
                local.append("from usos_core.auth import AccessToken")
            local.append("from usos_core.client import UsosClient")
            if auth.signed:
                local.append("from usos_core.keys import ConsumerKey")

        return [group for group in (stdlib, local) if group]


class SignatureAnalyzer:
    """Analyzes method references for the parameters of generated functions."""

    @staticmethod
    def has_keyword_params(reference: MethodReference) -> bool:
        """True if anything follows the client in the generated signature."""
        return reference.auth_options.signed or bool(reference.generated_arguments)

    @staticmethod
    def returns_output_class(reference: MethodReference, items: GeneratedItems) -> bool:
        """True if generated functions parse the response into the output class."""
        return items.includes_structs and bool(reference.result_fields)

    @classmethod
    def get_return_type(cls, reference: MethodReference, items: GeneratedItems) -> str:
        return reference.output_class_name if cls.returns_output_class(reference, items) else "Any"

    @staticmethod
    def get_auth_call(reference: MethodReference) -> str | None:
        """Arguments of the ``auth`` builder call, ``None`` for unsigned methods."""
        auth = reference.auth_options
        if not auth.signed:
            return None
        return "consumer_key, token" if auth.accepts_token else "consumer_key"


class PythonTemplateEngine:
    """Template engine for generating Python code."""

    def __init__(self, template_dir: Path | None = None) -> None:
        """Initialize the template engine."""
        if template_dir is None:
            current_dir = Path(__file__).parent
            template_dir = current_dir.parent / "templates"

        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

        self._register_filters()
        self._register_globals()

    def _register_filters(self) -> None:
        """Register custom Jinja2 filters for Python code generation."""
        builtin_filters = {
            "snake_case": snakecase,
            "pascal_case": pascalcase,
            "python_identifier": python_identifier,
        }

        self.env.filters.update(builtin_filters)
        self.env.filters.update(FILTERS)

    def _register_globals(self) -> None:
        """Register global functions available in templates."""
        signature_analyzer = SignatureAnalyzer()

        globals_map: dict[str, Any] = {
            "SignatureRequirement": SignatureRequirement,
            "get_import_groups": ImportAnalyzer.get_import_groups,
            "has_keyword_params": signature_analyzer.has_keyword_params,
            "get_return_type": signature_analyzer.get_return_type,
            "returns_output_class": signature_analyzer.returns_output_class,
            "get_auth_call": signature_analyzer.get_auth_call,
        }

        self.env.globals.update(globals_map)

    def render_template(self, template_name: str, context: dict[str, Any]) -> str:
        """Render a template with the given context."""
        template = self.env.get_template(template_name)
        return template.render(**context)


class PythonCodeGenerator:
    """Main code generator for Python clients."""

    def __init__(self, template_engine: PythonTemplateEngine | None = None) -> None:
        """Initialize the code generator."""
        self.template_engine = template_engine or PythonTemplateEngine()

    def generate_client(
        self,
        references: list[MethodReference],
        output_dir: Path,
        package_name: str = DEFAULT_PACKAGE_NAME,
        items: GeneratedItems = GeneratedItems.BOTH,
    ) -> dict[Path, str]:
        """Generate the client package for the given methods.

        Every method becomes a module at ``{output_dir}/{package_name}/{api path}.py``
        and every directory on the way gets an ``__init__.py`` importing its children.

        Returns:
            Dictionary mapping file paths to their content.
        """
        package_dir = output_dir / python_identifier(package_name)

        files: dict[Path, str] = {}
        files.update(self._generate_endpoint_files(references, package_dir, items))
        files.update(self._generate_package_files(references, package_dir, package_name))
        return files

    def generate_endpoint(self, reference: MethodReference, items: GeneratedItems = GeneratedItems.BOTH) -> str:
        """Source of the module generated for a single method."""
        context = {
            "reference": reference,
            "items": items,
            "generate_structs": items.includes_structs,
            "generate_functions": items.includes_functions,
        }
        return self.template_engine.render_template(ENDPOINT_TEMPLATE, context)

    def _generate_endpoint_files(
        self,
        references: list[MethodReference],
        package_dir: Path,
        items: GeneratedItems,
    ) -> dict[Path, str]:
        files = {}
        for reference in references:
            path = package_dir.joinpath(*reference.module_parts).with_suffix(".py")
            files[path] = self.generate_endpoint(reference, items)
            logger.debug("Generated %s from %s", path, reference.name)
        return files

    def _generate_package_files(
        self,
        references: list[MethodReference],
        package_dir: Path,
        package_name: str,
    ) -> dict[Path, str]:
        children: dict[tuple[str, ...], set[str]] = {(): set()}
        for reference in references:
            parts = reference.module_parts
            for depth, part in enumerate(parts):
                children.setdefault(tuple(parts[:depth]), set()).add(part)

        files = {}
        for module_parts, module_children in children.items():
            context = {
                "module_name": "/".join(module_parts) or package_name,
                "is_root": not module_parts,
                "children": sorted(module_children),
            }
            path = package_dir.joinpath(*module_parts, "__init__.py")
            files[path] = self.template_engine.render_template(PACKAGE_INIT_TEMPLATE, context)
        return files
